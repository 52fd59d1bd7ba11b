from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.error import HTTPError

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from fastapi.testclient import TestClient

import tineyeservices.client.http as http_module

API_URL = "http://testserver/rest/"


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: Dict[str, str]
    headers: Dict[str, str]
    body: bytes


@dataclass
class FakeServiceState:
    """What the fake API saw, and per-method canned results."""

    requests: List[RecordedRequest] = field(default_factory=list)
    results: Dict[str, List[Any]] = field(default_factory=dict)

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


def create_fake_service(state: FakeServiceState) -> FastAPI:
    """A stand-in TinEye Services API that records requests and answers JSON.

    - `/rest/broken/` answers with a non-JSON body.
    - `/rest/denied/` answers 401.
    - `/rest/garbled/` answers JSON that is not valid UTF-8.
    """

    app = FastAPI()

    async def _handle(method: str, request: Request):
        state.requests.append(
            RecordedRequest(
                method=request.method,
                path=request.url.path,
                query=dict(request.query_params),
                headers={k.lower(): v for k, v in request.headers.items()},
                body=await request.body(),
            )
        )
        if method == "broken":
            return PlainTextResponse("<html>gateway error</html>")
        if method == "garbled":
            return Response(b'{"status": "ok", "result": ["\xff"]}', media_type="application/json")
        if method == "denied":
            return JSONResponse({"detail": "unauthorized"}, status_code=401)
        return {
            "status": "ok",
            "method": method,
            "result": state.results.get(method, []),
            "error": [],
        }

    @app.get("/rest/{method}/")
    async def get_method(method: str, request: Request):
        return await _handle(method, request)

    @app.post("/rest/{method}/")
    async def post_method(method: str, request: Request):
        return await _handle(method, request)

    return app


class _BridgedResponse:
    def __init__(self, status: int, headers: Dict[str, str], body: bytes):
        self.status = status
        self.headers = headers
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "_BridgedResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None


def _bridge(client: TestClient):
    """Replace urllib's urlopen with a call into the FastAPI test client."""

    def fake_urlopen(req, timeout: Optional[float] = None, context: Any = None):
        r = client.request(
            req.get_method(),
            req.full_url,
            content=req.data,
            headers=dict(req.header_items()),
        )
        if r.status_code >= 400:
            raise HTTPError(req.full_url, r.status_code, r.reason_phrase, None, io.BytesIO(r.content))
        return _BridgedResponse(r.status_code, dict(r.headers.items()), r.content)

    return fake_urlopen


@pytest.fixture()
def fake_service(monkeypatch) -> FakeServiceState:
    state = FakeServiceState()
    client = TestClient(create_fake_service(state))
    monkeypatch.setattr(http_module, "urlopen", _bridge(client))
    return state


@pytest.fixture()
def jpg_file(tmp_path):
    p = tmp_path / "query.jpg"
    p.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg-bytes\xff\xd9")
    return p


@pytest.fixture()
def png_file(tmp_path):
    p = tmp_path / "logo.png"
    p.write_bytes(b"\x89PNG\r\n\x1a\nfake-png-bytes")
    return p
