"""Greeting service: GET /hello and static files under /assets/."""

import logging

from fastapi import FastAPI

from clockdemo.config import load_settings
from clockdemo.routes import install_common_routes, mount_assets
from clockdemo.server import run

SERVICE_NAME = "hello_service"


def create_app(settings=None):
    settings = settings or load_settings(SERVICE_NAME)
    app = FastAPI(title=SERVICE_NAME)
    app.state.settings = settings
    install_common_routes(app)
    mount_assets(app, settings)
    return app


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = load_settings(SERVICE_NAME)
    run(create_app(settings), settings)


if __name__ == "__main__":
    main()
