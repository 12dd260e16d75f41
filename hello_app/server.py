"""Process entry: bind the listener, serve with uvicorn, drain on SIGTERM/SIGINT."""

import contextlib
import logging
import signal
import socket
import threading

import uvicorn
from fastapi import FastAPI
from pydantic import ValidationError

from hello_app.config import Settings
from hello_app.lifecycle import ServiceState
from hello_app.main import configure_logging, create_app

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class StartupError(RuntimeError):
    """The service could not start listening."""


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind the listening socket up front so bind failures are reported before serving."""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        raise StartupError(f"cannot bind {host}:{port}: {e}") from e
    sock.set_inheritable(True)
    return sock


def build_config(app: FastAPI, settings: Settings) -> uvicorn.Config:
    """uvicorn's own lifecycle chatter stays below ``server_log_level`` (WARNING by default)."""
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        lifespan="on",
        log_config=None,
        log_level=settings.server_log_level.lower(),
        access_log=settings.access_log,
        timeout_keep_alive=settings.keep_alive_timeout,
        timeout_graceful_shutdown=settings.graceful_timeout,
    )
    if settings.access_log:
        logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    return config


class ResponderServer(uvicorn.Server):
    """uvicorn server that reports its phase and drains once per shutdown.

    A repeated SIGTERM/SIGINT while draining is ignored, and the signal is not
    re-raised after shutdown, so a drained process exits with status 0.
    """

    def __init__(self, config: uvicorn.Config, state: ServiceState):
        super().__init__(config)
        self.state = state

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started and not self.should_exit:
            self.state.mark_serving()
            logger.info(f"Server running on port {self.config.port}")

    @contextlib.contextmanager
    def capture_signals(self):
        # Signal handlers can only be installed from the main thread.
        if threading.current_thread() is not threading.main_thread():
            yield
            return
        previous = {sig: signal.signal(sig, self.handle_exit) for sig in HANDLED_SIGNALS}
        try:
            yield
        finally:
            # After a drain, late signals are ignored until the interpreter exits.
            for sig, handler in previous.items():
                signal.signal(sig, signal.SIG_IGN if self.should_exit else handler)

    def handle_exit(self, sig, frame) -> None:
        name = signal.Signals(sig).name
        if self.should_exit:
            logger.info(f"Received {name} again, shutdown already in progress")
            return
        logger.info(
            f"Received {name}, draining connections "
            f"(grace period {self.config.timeout_graceful_shutdown}s)"
        )
        self.state.mark_stopped()
        self.should_exit = True


def serve(settings: Settings) -> int:
    """Run the service until it is signalled to stop. Returns the exit status."""
    state = ServiceState()
    app = create_app(settings, state)

    try:
        sock = bind_socket(settings.host, settings.port)
    except StartupError as e:
        state.mark_stopped()
        logger.error(f"Startup failed: {e}")
        return 1

    server = ResponderServer(build_config(app, settings), state)
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()

    if not server.started:
        state.mark_stopped()
        logger.error("Startup failed: server did not start")
        return 1

    logger.info("Server stopped")
    return 0


def main() -> int:
    configure_logging()
    try:
        settings = Settings()
    except ValidationError as e:
        logger.error(f"Startup failed: invalid configuration\n{e}")
        return 1
    configure_logging(settings.log_level)
    return serve(settings)
