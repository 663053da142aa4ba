"""
Backend Routes - serves the fixture catalog over HTTP under /api/v1.

Each catalog entry becomes its own FastAPI route, so HttpTransport can talk to
this app exactly as it would to a real backend. Unknown paths are plain 404s.
"""
import json
import logging
from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

import mock_catalog
from auth import extract_token
from mock_catalog import FixtureError, FixtureRequest
from models import ErrorKind

logger = logging.getLogger("gymkhana")

API_PREFIX = "/api/v1"

router = APIRouter(prefix=API_PREFIX, tags=["Backend"])


def _timestamp() -> str:
    return datetime.utcnow().isoformat() + "Z"


async def _read_body(request: Request):
    """Returns (fields, files). JSON bodies become fields; multipart uploads keep their bytes."""
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        raw = await request.body()
        if not raw:
            return {}, {}
        try:
            body = json.loads(raw)
        except ValueError:
            raise FixtureError(ErrorKind.VALIDATION_ERROR, "Malformed JSON body", 422)
        if not isinstance(body, dict):
            raise FixtureError(ErrorKind.VALIDATION_ERROR, "JSON body must be an object", 422)
        return body, {}

    if "multipart/form-data" in content_type or "application/x-www-form-urlencoded" in content_type:
        form = await request.form()
        fields, files = {}, {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                files[key] = (value.filename, await value.read(), value.content_type)
            else:
                fields[key] = value
        return fields, files

    return {}, {}


def _make_endpoint(entry: mock_catalog.Fixture):
    async def endpoint(request: Request):
        try:
            body, files = await _read_body(request)
            fixture_request = FixtureRequest(
                path_params=dict(request.path_params),
                query=dict(request.query_params),
                body=body,
                files=files,
                token=extract_token(request),
            )
            data = mock_catalog.invoke(entry, fixture_request)
        except FixtureError as e:
            logger.info(f"{entry.method} {API_PREFIX}{entry.path} -> {e.status_code} {e.kind.value}")
            return JSONResponse(status_code=e.status_code, content={
                "success": False,
                "message": e.message,
                "errorCode": e.kind.value,
                "timestamp": _timestamp(),
            })

        content = {"success": True, "data": data, "timestamp": _timestamp()}
        if entry.message:
            content["message"] = entry.message
        return JSONResponse(content=content)

    endpoint.__name__ = f"{entry.method.lower()}_{entry.handler.__name__}"
    return endpoint


for _entry in mock_catalog.all_fixtures():
    router.add_api_route(
        _entry.path,
        _make_endpoint(_entry),
        methods=[_entry.method],
        name=f"{_entry.method.lower()}_{_entry.handler.__name__}",
    )
