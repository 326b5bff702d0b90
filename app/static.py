"""Built client bundle — static files with an SPA fallback.

Hashed assets are cached for a year; index.html is always revalidated so a
new deploy is picked up. Unknown paths get index.html for client-side routing.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

logger = logging.getLogger("clinicdash.static")

INDEX_FILE = "index.html"

ASSET_HEADERS = {"Cache-Control": "public, max-age=31536000, immutable"}
INDEX_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class SPAStaticFiles(StaticFiles):
    async def get_response(self, path: str, scope: Scope) -> Response:
        served_index = path in ("", ".", INDEX_FILE)
        try:
            response = await super().get_response(INDEX_FILE if served_index else path, scope)
        except HTTPException as exc:
            if exc.status_code != 404:
                raise
            served_index = True
            response = await super().get_response(INDEX_FILE, scope)

        headers = INDEX_HEADERS if served_index else ASSET_HEADERS
        for name, value in headers.items():
            response.headers[name] = value
        return response


def mount_client(app: FastAPI, directory: str) -> bool:
    """Mount the bundle at /. Must run after every API router is included."""
    if not Path(directory).is_dir():
        logger.warning("Client bundle directory %s not found; serving API only", directory)
        return False
    app.mount("/", SPAStaticFiles(directory=directory), name="client")
    return True
