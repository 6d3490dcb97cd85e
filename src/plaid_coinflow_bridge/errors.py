"""Error taxonomy for the bridge."""

from __future__ import annotations

from typing import Any


class BridgeError(Exception):
    """Base class for failures surfaced to the request-handling layer."""

    error_type = "BRIDGE_ERROR"

    def to_payload(self) -> dict[str, Any]:
        return {"error_type": self.error_type, "error_message": str(self)}


class RetryExhausted(BridgeError):
    """The poller's probe never succeeded within its attempt budget."""

    error_type = "RETRY_EXHAUSTED"

    def __init__(
        self,
        reason: str = "Ran out of retries",
        last_error: BaseException | None = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(reason)
        self.last_error = last_error
        self.attempts = attempts


class NetworkError(BridgeError):
    """Transport-level failure or non-2xx status calling a remote endpoint."""

    error_type = "NETWORK_ERROR"

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["status_code"] = self.status_code
        return payload


class HttpStatusError(NetworkError):
    """The remote endpoint answered with a non-2xx status."""

    error_type = "HTTP_STATUS_ERROR"

    def __init__(self, message: str, url: str, status_code: int) -> None:
        super().__init__(message, url=url, status_code=status_code)


class ProtocolViolation(BridgeError):
    """A remote response is missing a field the handshake requires."""

    error_type = "PROTOCOL_VIOLATION"

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"response is missing required field '{field}'")
        self.field = field


class SignatureConsistencyError(BridgeError):
    """A freshly produced signature failed local verification."""

    error_type = "SIGNATURE_CONSISTENCY_ERROR"


class PlaidApiError(BridgeError):
    """Non-2xx response from the financial-data API."""

    error_type = "API_ERROR"

    def __init__(self, status_code: int, data: dict[str, Any] | None = None) -> None:
        self.status_code = status_code
        self.data = data or {}
        super().__init__(self.data.get("error_message") or f"Plaid API returned {status_code}")

    def to_payload(self) -> dict[str, Any]:
        return {**self.data, "status_code": self.status_code}
