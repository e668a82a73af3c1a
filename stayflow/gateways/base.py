"""Base HTTP gateway for the rental backend.

Adapters only talk to the remote service: they send requests, unwrap the
``{success, message, data}`` envelope and translate failures into the
application's exception taxonomy. Business rules do NOT live here.
"""

import logging
from typing import Any

import httpx

from stayflow.core.exceptions import (
    AppException,
    AuthorizationError,
    ConflictError,
    ConnectivityError,
    NotFoundError,
    RemoteServiceError,
    ServerError,
)

logger = logging.getLogger(__name__)


def error_message(response: httpx.Response) -> str | None:
    """Server-supplied message from an error envelope, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, str) and message:
            return message
    return None


def error_for_status(status_code: int, message: str | None = None) -> AppException:
    """Map a remote HTTP status to an application exception.

    Args:
        status_code: HTTP status returned by the backend (0 when unreachable)
        message: Server-supplied message, if any

    Returns:
        The exception to raise
    """
    if status_code == 0:
        return ConnectivityError()
    if status_code in (401, 403):
        return AuthorizationError(status_code=status_code)
    if status_code == 404:
        exc = NotFoundError("Requested resource")
        if message:
            exc.detail = message
        return exc
    if status_code == 409:
        return ConflictError(message or "This request conflicts with an existing one")
    if status_code >= 500:
        return ServerError(remote_status=status_code)
    return RemoteServiceError(message, remote_status=status_code)


class HttpGateway:
    """Shared request/response handling for rental backend adapters."""

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            ConnectivityError: Backend unreachable or timed out
            AppException: Mapped from a non-2xx status
        """
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ConnectivityError() from exc

        if response.status_code >= 400:
            message = error_message(response)
            logger.warning(
                "%s %s returned %s: %s", method, path, response.status_code, message
            )
            raise error_for_status(response.status_code, message)

        logger.debug("%s %s returned %s", method, path, response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteServiceError("Malformed response from server") from exc

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and return the envelope's ``data``.

        Raises:
            RemoteServiceError: Envelope reports ``success: false``
        """
        body = await self._send(method, path, json=json, headers=headers)
        if isinstance(body, dict) and "success" in body:
            if not body["success"]:
                raise RemoteServiceError(body.get("message") or "Request failed")
            return body.get("data")
        return body
