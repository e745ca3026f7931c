"""
Clock service.

Everything the greeting service serves, plus:
  GET /time  current time as a JSON string
  /ws        WebSocket that pushes the current time every push_interval seconds
"""

import logging

from fastapi import FastAPI, Request, WebSocket, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from clockdemo.clock import TimeFormatter
from clockdemo.config import load_settings
from clockdemo.push import TimePusher
from clockdemo.routes import install_common_routes, mount_assets
from clockdemo.server import run

logger = logging.getLogger(__name__)

SERVICE_NAME = "clock_service"


def same_origin(headers) -> bool:
    # Coarse cross-site guard; a client can send any Origin it likes.
    host = headers.get("host")
    return host is not None and headers.get("origin") == f"http://{host}"


def create_app(settings=None, formatter=None):
    settings = settings or load_settings(SERVICE_NAME)
    formatter = formatter or TimeFormatter(settings.timezone)

    app = FastAPI(title=SERVICE_NAME)
    app.state.settings = settings
    app.state.formatter = formatter
    install_common_routes(app)

    @app.get("/time")
    async def get_time():
        try:
            return JSONResponse(formatter.now())
        except (TypeError, ValueError) as e:
            logger.error("Error: %s", e)
            return Response(status_code=500)

    @app.websocket("/ws")
    async def time_socket(websocket: WebSocket):
        if not same_origin(websocket.headers):
            logger.warning("rejected websocket from origin %r", websocket.headers.get("origin"))
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return
        await websocket.accept()
        await TimePusher(websocket, formatter, settings.push_interval).run()

    @app.api_route("/ws", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    async def time_socket_without_upgrade(request: Request):
        if not same_origin(request.headers):
            return PlainTextResponse("Origin not allowed", status_code=403)
        return PlainTextResponse("Could not open websocket connection", status_code=400)

    mount_assets(app, settings)
    return app


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = load_settings(SERVICE_NAME)
    run(create_app(settings), settings)


if __name__ == "__main__":
    main()
