# storefront/mock_backend/deps.py
from fastapi import HTTPException, Request

from storefront.mock_backend.store import Conflict, MockStore, NotFound


def get_store(request: Request) -> MockStore:
    return request.app.state.store


def ok(data=None, message: str = "OK", meta: dict | None = None) -> dict:
    body = {"status": "success", "message": message, "data": data}
    if meta is not None:
        body["meta"] = meta
    return body


def to_http(e: Exception) -> HTTPException:
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, Conflict):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))
