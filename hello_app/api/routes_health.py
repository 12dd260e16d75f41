"""Liveness and readiness probes for the orchestrator."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])

SERVICE_NAME = "hello-app"


@router.get("/healthz")
async def liveness():
    """Liveness: the process is up and the event loop answers."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/readyz")
async def readiness(request: Request):
    """Readiness: 200 only while the listener is accepting traffic."""
    state = request.app.state.lifecycle
    if not state.is_ready:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "phase": state.phase.value},
        )
    return {"status": "ready", "phase": state.phase.value}
