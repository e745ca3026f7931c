"""Routes and handlers shared by both services."""

import html
import logging
import os
import stat
from urllib.parse import quote

import anyio
import anyio.to_thread
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.datastructures import URL
from starlette.exceptions import HTTPException as StarletteHTTPException

from clockdemo.config import ConfigError

logger = logging.getLogger(__name__)

GREETING = "Hello World!"


async def hello():
    return PlainTextResponse(GREETING)


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    # 405 goes out with an empty body; everything else keeps FastAPI's default.
    if exc.status_code == 405:
        return Response(status_code=405, headers=exc.headers)
    return await http_exception_handler(request, exc)


class AssetFiles(StaticFiles):
    """
    StaticFiles that lists a directory when it has no index.html.

    The listing is a <pre> block of links, sorted by name, with a trailing
    slash on subdirectories.
    """

    async def get_response(self, path, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
            full_path, stat_result = await anyio.to_thread.run_sync(self.lookup_path, path)
            if stat_result is None or not stat.S_ISDIR(stat_result.st_mode):
                raise
        if not scope["path"].endswith("/"):
            url = URL(scope=scope)
            return RedirectResponse(url=url.replace(path=url.path + "/"))
        entries = await anyio.to_thread.run_sync(list_directory, full_path)
        return HTMLResponse(render_listing(entries))


def list_directory(full_path):
    entries = []
    with os.scandir(full_path) as it:
        for entry in it:
            entries.append(entry.name + "/" if entry.is_dir() else entry.name)
    return sorted(entries)


def render_listing(entries):
    links = "".join(f'<a href="{quote(name)}">{html.escape(name)}</a>\n' for name in entries)
    return f"<pre>\n{links}</pre>\n"


def install_common_routes(app: FastAPI):
    """Register GET /hello and the HTTP error handler."""
    app.add_api_route("/hello", hello, methods=["GET"], response_class=PlainTextResponse)
    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)


def mount_assets(app: FastAPI, settings):
    """
    Serve settings.assets_dir under /assets/.

    Directories resolve to their index.html, or to a listing when they have
    none. Call this after the explicit routes so that they take precedence.
    """
    if not os.path.isdir(settings.assets_dir):
        raise ConfigError(f"assets directory not found: {settings.assets_dir}")
    app.mount("/assets", AssetFiles(directory=settings.assets_dir, html=True), name="assets")
    logger.debug("serving %s under /assets/", settings.assets_dir)
