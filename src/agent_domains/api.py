"""
API session over the plain and payment-bearing transports.

``request`` never attaches payment authorization; ``payable_request`` sends
through the payment-bearing transport, which may answer a 402 challenge
itself. Both return an ApiResponse wrapping the success envelope or raise
a classified AgentDomainsError.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from .audit_logger import AuditLogger
from .enums import ErrorCode, LogLevel
from .exceptions import AgentDomainsError, InvalidResponseError
from .responses import (
    classify_payment_transport_error,
    classify_transport_error,
    parse_envelope,
)
from .transport import Transport


@dataclass
class ApiResponse:
    """A successful envelope together with the HTTP status it arrived with."""

    status_code: int
    envelope: dict[str, Any]

    @property
    def data(self) -> Any:
        return self.envelope.get("data")

    def data_object(self) -> dict[str, Any]:
        """
        The envelope's ``data`` as a JSON object.

        Raises:
            InvalidResponseError: If ``data`` is missing or not an object
        """
        data = self.data
        if not isinstance(data, dict):
            raise InvalidResponseError(
                code=ErrorCode.INVALID_RESPONSE.value,
                message=f"Response envelope has no data object (HTTP {self.status_code})",
                status=self.status_code,
            )
        return data


class ApiSession:
    """Request helpers bound to one base URL."""

    def __init__(
        self,
        base_url: str,
        transport: Transport,
        payment_transport: Transport,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self._payment_transport = payment_transport
        self._logger = logger

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        extra_headers: Optional[dict[str, str]] = None,
    ) -> httpx.Request:
        headers = {"Content-Type": "application/json"}
        if extra_headers:
            headers.update(extra_headers)
        content = None
        if body is not None:
            content = json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        return httpx.Request(method, f"{self._base_url}{path}", headers=headers, content=content)

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
    ) -> ApiResponse:
        """Send without payment authorization."""
        return await self._send(
            self._transport,
            self.build_request(method, path, body),
            classify_transport_error,
        )

    async def payable_request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        extra_headers: Optional[dict[str, str]] = None,
    ) -> ApiResponse:
        """Send through the payment-bearing transport."""
        return await self._send(
            self._payment_transport,
            self.build_request(method, path, body, extra_headers),
            classify_payment_transport_error,
        )

    async def _send(
        self,
        transport: Transport,
        request: httpx.Request,
        classify: Callable[[BaseException], AgentDomainsError],
    ) -> ApiResponse:
        try:
            response = await transport.send(request)
        except Exception as e:
            error = classify(e)
            self._log_error(request, error)
            if error is e:
                raise
            raise error from e

        try:
            envelope = parse_envelope(response)
        except AgentDomainsError as error:
            self._log_error(request, error)
            raise

        self._log(
            LogLevel.DEBUG,
            f"{request.method} {request.url.path} -> {response.status_code}",
            {"status": response.status_code},
        )
        return ApiResponse(status_code=response.status_code, envelope=envelope)

    async def aclose(self) -> None:
        await self._transport.aclose()
        await self._payment_transport.aclose()

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, "ApiSession", message, data)

    def _log_error(self, request: httpx.Request, error: AgentDomainsError) -> None:
        if self._logger:
            self._logger.log_error(
                "ApiSession",
                f"{request.method} {request.url.path} failed: {error.code}",
                error=error,
                request_url=str(request.url),
                response_status_code=error.status,
            )
