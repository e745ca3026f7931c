"""
Explicit server instance around Hypercorn.

    server = Server(create_app(settings), settings)
    asyncio.run(server.serve())   # returns once server.stop() is called
"""

import asyncio
import logging
import signal

from hypercorn.asyncio import serve
from hypercorn.config import Config

logger = logging.getLogger(__name__)


def build_config(settings) -> Config:
    config = Config()
    config.bind = [f"{settings.host}:{settings.port}"]
    config.websocket_max_message_size = settings.websocket_max_message_size
    config.errorlog = "-"
    return config


class Server:
    def __init__(self, app, settings):
        self.app = app
        self.settings = settings
        self.config = build_config(settings)
        self._shutdown = asyncio.Event()

    async def serve(self):
        logger.info("listening on %s", ", ".join(self.config.bind))
        await serve(self.app, self.config, shutdown_trigger=self._shutdown.wait)
        logger.info("server stopped")

    def stop(self):
        self._shutdown.set()


def run(app, settings):
    """Serve until SIGINT/SIGTERM."""

    async def main():
        server = Server(app, settings)
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, server.stop)
            except NotImplementedError:
                # Windows event loops have no signal handlers; Ctrl+C still raises.
                pass
        await server.serve()

    asyncio.run(main())
