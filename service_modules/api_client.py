"""
API Client - the request dispatcher every UI action goes through.

ApiClient.request() turns (endpoint, method, body, params, files, auth) into an
ApiOk / ApiErr and never raises. The wire is behind a Transport chosen by
configuration: HttpTransport talks to a real backend, FixtureTransport answers
from mock_catalog after a simulated delay.
"""
import json
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import requests

import mock_catalog
from config import Settings, get_settings
from models import ApiErr, ApiOk, ApiResult, ErrorKind
from .token_storage import TokenStorage

logger = logging.getLogger("gymkhana")

JSON_CONTENT_TYPE = "application/json"


class TransportError(Exception):
    """The request never produced an HTTP response."""


class TransportTimeout(TransportError):
    pass


@dataclass
class OutgoingRequest:
    method: str
    endpoint: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Dict[str, Any]] = None
    data: Any = None  # JSON text, or a dict of multipart form fields
    files: Optional[Dict[str, Any]] = None


@dataclass
class TransportResponse:
    status_code: int
    payload: Any = None


class Transport:
    def send(self, request: OutgoingRequest) -> TransportResponse:
        raise NotImplementedError


class HttpTransport(Transport):
    def __init__(self, base_url: str, timeout: float = 15.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, request: OutgoingRequest) -> TransportResponse:
        try:
            response = self.session.request(
                request.method,
                f"{self.base_url}{request.endpoint}",
                headers=request.headers,
                params=request.params,
                data=request.data,
                files=request.files,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise TransportTimeout(str(e))
        except requests.RequestException as e:
            raise TransportError(str(e))

        if response.status_code == 204 or not response.content:
            return TransportResponse(response.status_code, None)
        try:
            payload = response.json()
        except ValueError:
            payload = None
        return TransportResponse(response.status_code, payload)


class FixtureTransport(Transport):
    """
    Development/offline transport. Unmatched (endpoint, method) pairs answer
    {success: true, data: {}} so unbuilt screens keep working.
    """

    def __init__(self, delay_range=(0.5, 1.5), sleep: Callable[[float], None] = time.sleep):
        self.delay_range = delay_range
        self._sleep = sleep

    def send(self, request: OutgoingRequest) -> TransportResponse:
        low, high = self.delay_range
        if high > 0:
            self._sleep(random.uniform(low, high))

        if request.files is None and isinstance(request.data, (str, bytes)):
            body = json.loads(request.data)
        else:
            body = dict(request.data or {})

        token = None
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header[len("Bearer "):]

        try:
            matched, data, message = mock_catalog.resolve(
                request.endpoint, request.method, body=body, params=request.params,
                files=request.files, token=token,
            )
        except mock_catalog.FixtureError as e:
            return TransportResponse(e.status_code, {
                "success": False,
                "message": e.message,
                "errorCode": e.kind.value,
            })

        if not matched:
            logger.debug(f"No fixture for {request.method} {request.endpoint}, answering empty success")
        payload = {"success": True, "data": data}
        if message:
            payload["message"] = message
        return TransportResponse(200, payload)


class ApiClient:
    def __init__(self, transport: Transport, storage: TokenStorage):
        self.transport = transport
        self.storage = storage

    def _headers(self, auth: bool, multipart: bool) -> Dict[str, str]:
        headers = {"Accept": JSON_CONTENT_TYPE}
        if not multipart:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        if auth:
            token = self.storage.get()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, endpoint: str, method: str = "GET", body: Optional[Dict[str, Any]] = None,
                params: Optional[Dict[str, Any]] = None, files: Optional[Dict[str, Any]] = None,
                auth: bool = True) -> ApiResult:
        method = method.upper()
        multipart = files is not None
        if multipart:
            # multipart: form fields and files go through untouched
            data = body
        else:
            data = json.dumps(body) if body is not None else None

        outgoing = OutgoingRequest(
            method=method,
            endpoint=endpoint,
            headers=self._headers(auth, multipart),
            params={k: v for k, v in params.items() if v is not None} if params else None,
            data=data,
            files=files,
        )

        try:
            response = self.transport.send(outgoing)
        except TransportTimeout as e:
            logger.warning(f"{method} {endpoint} timed out: {e}")
            return ApiErr(error=ErrorKind.TIMEOUT, message="The request timed out. Please try again.")
        except TransportError as e:
            logger.warning(f"{method} {endpoint} failed: {e}")
            return ApiErr(error=ErrorKind.NETWORK_ERROR, message="Network error. Please check your connection.")
        except Exception as e:
            logger.error(f"{method} {endpoint} raised unexpectedly: {e}")
            return ApiErr(error=ErrorKind.NETWORK_ERROR, message="Request failed")

        return self._normalize(method, endpoint, response)

    def _normalize(self, method: str, endpoint: str, response: TransportResponse) -> ApiResult:
        payload = response.payload
        ok = 200 <= response.status_code < 300

        if ok and payload is None:
            return ApiOk(data={})
        if ok and isinstance(payload, dict) and payload.get("success", True):
            data = payload.get("data")
            return ApiOk(data=data if data is not None else {}, message=payload.get("message"))

        body = payload if isinstance(payload, dict) else {}
        message = body.get("message") or body.get("detail")
        if not isinstance(message, str):
            message = f"Request failed with status {response.status_code}"

        kind = ErrorKind.NETWORK_ERROR
        if response.status_code == 401:
            kind = ErrorKind.UNAUTHORIZED
        code = body.get("errorCode")
        if code in ErrorKind.__members__:
            kind = ErrorKind(code)

        if ok:
            # 2xx but the body is not a success envelope
            message = body.get("message") or "Malformed response from server"

        logger.warning(f"{method} {endpoint} -> {response.status_code} {kind.value}: {message}")
        return ApiErr(error=kind, message=message, status_code=response.status_code)


def build_transport(settings: Settings) -> Transport:
    if settings.backend_mode == "http":
        return HttpTransport(settings.api_base_url, timeout=settings.request_timeout)
    return FixtureTransport(delay_range=settings.mock_delay_range)


def get_api_client(storage: TokenStorage, settings: Optional[Settings] = None) -> ApiClient:
    settings = settings or get_settings()
    return ApiClient(build_transport(settings), storage)
