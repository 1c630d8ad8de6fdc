# storefront/services/api_client.py
from typing import Any, Dict

import requests
from requests import RequestException

from storefront.domain.errors import ApiError, TransportError
from storefront.utils.logging import get_logger
from storefront.utils.retry import http_retry
from storefront.utils.settings import API_BASE_URL, HTTP_RETRY_ATTEMPTS, HTTP_TIMEOUT_SECONDS

logger = get_logger(__name__)


def unwrap_data(body: Any) -> Any:
    """Zdejmuje koperte {status, message, data, meta?} jesli jest."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _json_or_none(resp) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return None


class ApiClient:
    """
    Klient REST backendu sklepu.

    - bledy transportu -> TransportError
    - status >= 400 -> ApiError z body {status: "error", code, message, errors?}
    - GET ponawiany przez tenacity przy bledach transportu, zapisy nigdy
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session=None,
        token: str | None = None,
        retry_attempts: int | None = None,
    ):
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.timeout = timeout or HTTP_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.token = token
        self.retry_attempts = retry_attempts or HTTP_RETRY_ATTEMPTS

    def set_token(self, token: str | None) -> None:
        self.token = token

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, params: dict | None = None, json: Any = None):
        url = self._url(path)
        logger.info(f"ApiClient {method} {url}")

        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except RequestException as e:
            logger.warning(f"ApiClient {method} {url} failed: {e}")
            raise TransportError(str(e) or "Network error") from e

        if resp.status_code >= 400:
            error = ApiError.from_body(resp.status_code, _json_or_none(resp))
            logger.warning(f"ApiClient {method} {url} -> {resp.status_code}: {error.message}")
            raise error

        return resp

    def request(self, method: str, path: str, params: dict | None = None, json: Any = None):
        method = method.upper()
        if method == "GET":
            return http_retry(self.retry_attempts)(self._send)(method, path, params, json)
        return self._send(method, path, params, json)

    def get(self, path: str, params: dict | None = None) -> Any:
        return _json_or_none(self.request("GET", path, params=params))

    def post(self, path: str, json: Any = None) -> Any:
        return _json_or_none(self.request("POST", path, json=json))

    def patch(self, path: str, json: Any = None) -> Any:
        return _json_or_none(self.request("PATCH", path, json=json))

    def delete(self, path: str) -> Any:
        return _json_or_none(self.request("DELETE", path))

    def get_response(self, path: str, params: dict | None = None):
        """Surowa odpowiedz (pliki: PDF faktury, etykiety)."""
        return self.request("GET", path, params=params)
