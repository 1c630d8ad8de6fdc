# storefront/mock_backend/main.py
"""
Dev mock backendu sklepu (koszyk, zamowienia, platnosci, faktury).
Tylko do lokalnego developmentu i testow integracyjnych klienta.
"""
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn

from storefront.mock_backend.routers import cart, invoice, orders, payments
from storefront.mock_backend.store import Conflict, MockStore, NotFound
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

API_PREFIX = "/api/v1"

_CODES = {400: "BAD_REQUEST", 404: "NOT_FOUND", 422: "VALIDATION_ERROR"}


def _error(status_code: int, message: str, errors: list | None = None) -> JSONResponse:
    body = {"status": "error", "code": _CODES.get(status_code, "ERROR"), "message": message}
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=body)


def create_app(store: MockStore | None = None) -> FastAPI:
    app = FastAPI(
        title="Storefront Backend (dev mock)",
        version="1.0.0",
    )
    app.state.store = store or MockStore()

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound):
        return _error(404, str(exc))

    @app.exception_handler(Conflict)
    async def conflict(request: Request, exc: Conflict):
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(p) for p in err["loc"][1:]), "message": err["msg"]}
            for err in exc.errors()
        ]
        return _error(422, "Validation failed", errors)

    app.include_router(cart.router, prefix=API_PREFIX)
    app.include_router(orders.router, prefix=API_PREFIX)
    app.include_router(orders.admin_router, prefix=API_PREFIX)
    app.include_router(payments.router, prefix=API_PREFIX)
    app.include_router(invoice.router, prefix=API_PREFIX)

    logger.info("Mock backend ready")
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8001)
