# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Prompt Cadence Service
======================
Decides when a group's active responder is next prompted, builds the
day's notification schedule for the group's cadence, rotates the
active-responder role on membership changes, and projects the
"is the next prompt open?" status for display.

Port: 8005
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from promptcadence.controllers import group_controller, schedule_controller, system_controller
from promptcadence.core.config import settings
from promptcadence.core.logging import get_logger
from promptcadence.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger("main")


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Log startup and shutdown."""
    logger.info(
        "Prompt cadence service starting: timezone=%s, delivery=%s, testing_cadence=%s",
        settings.TIMEZONE,
        settings.DELIVERY_BACKEND,
        settings.ENABLE_TESTING_CADENCE,
    )
    yield
    logger.info("Prompt cadence service shutting down")


app = FastAPI(
    title="Prompt Cadence Service",
    description="Prompt scheduling, active-responder rotation and readiness projection.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"request_id": req_id})
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
    )


app.include_router(system_controller.router)
app.include_router(schedule_controller.router)
app.include_router(group_controller.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
