"""Greeting endpoint."""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["greeting"])


@router.get("/", response_class=PlainTextResponse)
async def greeting(request: Request):
    """Return the configured greeting. Query string and headers are ignored."""
    return request.app.state.settings.greeting
