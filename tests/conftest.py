import socket
import threading
import time
from dataclasses import dataclass

import pytest

from hello_app.config import Settings
from hello_app.lifecycle import ServiceState
from hello_app.main import create_app
from hello_app.server import ResponderServer, bind_socket, build_config

ENV_VARS = (
    "PORT",
    "HOST",
    "GREETING",
    "REQUEST_TIMEOUT",
    "KEEP_ALIVE_TIMEOUT",
    "GRACEFUL_TIMEOUT",
    "LOG_LEVEL",
    "SERVER_LOG_LEVEL",
    "ACCESS_LOG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's environment out of Settings."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        return Settings(_env_file=None, **overrides)

    return _make


@dataclass
class RunningServer:
    server: ResponderServer
    thread: threading.Thread
    settings: Settings
    state: ServiceState

    @property
    def base_url(self) -> str:
        return f"http://{self.settings.host}:{self.settings.port}"

    def url(self, path: str) -> str:
        return self.base_url + path


@pytest.fixture
def start_server(make_settings):
    """Run a ResponderServer on a free loopback port in a background thread."""
    running = []

    def _start(app_hook=None, **overrides) -> RunningServer:
        settings = make_settings(host="127.0.0.1", port=free_port(), **overrides)
        state = ServiceState()
        app = create_app(settings, state)
        if app_hook is not None:
            app_hook(app)
        sock = bind_socket(settings.host, settings.port)
        server = ResponderServer(build_config(app, settings), state)
        thread = threading.Thread(target=server.run, kwargs={"sockets": [sock]}, daemon=True)
        thread.start()

        deadline = time.monotonic() + 10
        while not server.started:
            if time.monotonic() > deadline or not thread.is_alive():
                raise RuntimeError("server did not start")
            time.sleep(0.01)

        handle = RunningServer(server, thread, settings, state)
        running.append(handle)
        return handle

    yield _start

    for handle in running:
        handle.server.should_exit = True
        handle.thread.join(timeout=10)
