# storefront/domain/errors.py
from typing import Any, Dict

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"


class ApiError(Exception):
    """
    Blad zwrocony przez backend: {status: "error", code, message, errors?}.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        field_errors: Dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.field_errors = field_errors

    @classmethod
    def from_body(cls, status_code: int, body: Any) -> "ApiError":
        if not isinstance(body, dict):
            return cls(f"Request failed with status code {status_code}", status_code=status_code)

        message = body.get("message") or f"Request failed with status code {status_code}"
        field_errors = {}
        errors = body.get("errors")
        if isinstance(errors, list):
            for err in errors:
                if isinstance(err, dict) and err.get("field") and err.get("message"):
                    field_errors[err["field"]] = err["message"]

        return cls(
            message,
            status_code=status_code,
            code=body.get("code"),
            field_errors=field_errors or None,
        )


class TransportError(ApiError):
    """Brak odpowiedzi (polaczenie, timeout)."""

    def __init__(self, message: str):
        super().__init__(message)


class PreconditionError(ValueError):
    """Operacja zablokowana po stronie klienta, bez requestu do API."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def extract_error_message(error: BaseException | None, default: str = DEFAULT_ERROR_MESSAGE) -> str:
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return default
