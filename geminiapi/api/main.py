"""
Process entrypoint for the generation HTTP server.

Startup lifecycle:
1. Configure logging from `LOG_LEVEL`.
2. Load configuration from the environment (`ConfigError` is fatal).
3. Open the shared provider session.
4. Bind the listening socket (`ServerBindError` is fatal).
5. Serve the FastAPI app with uvicorn until shutdown, then close the session.

Error handling strategy:
- Startup errors are logged and terminate the process with exit status 1.
- No retry is attempted for configuration, session construction, or binding.
"""

import logging
import os
import socket
import sys

import uvicorn

from geminiapi.api.http_api import create_app
from geminiapi.core.errors import ConfigError, ServerBindError
from geminiapi.llm.client import ProviderSession
from geminiapi.llm.provider_config import load_config


logger = logging.getLogger(__name__)

LISTEN_HOST = "0.0.0.0"


def configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def bind_socket(port: int, host: str = LISTEN_HOST) -> socket.socket:
    """Create a listening TCP socket or raise `ServerBindError`."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(socket.SOMAXCONN)
    except OSError as err:
        sock.close()
        raise ServerBindError(f"cannot listen on {host}:{port}: {err}") from err
    sock.set_inheritable(True)
    return sock


def serve(config) -> None:
    """Run the HTTP server for `config` until uvicorn shuts down."""
    session = ProviderSession.from_config(config)
    try:
        app = create_app(session, config)
        sock = bind_socket(config.http_port)

        logger.info("Running server on port: %s", config.http_port)
        server = uvicorn.Server(uvicorn.Config(app, log_config=None))
        try:
            server.run(sockets=[sock])
        finally:
            sock.close()
    finally:
        session.close()


def main() -> None:
    configure_logging()
    try:
        config = load_config()
        serve(config)
    except (ConfigError, ServerBindError) as err:
        logger.error("Startup failed: %s", err.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
