"""Remote credential store reached over a small JSON RPC endpoint.

Every call is ``POST {base_url}/rpc`` with ``{"method": name, "params": {...}}``.
A successful response carries ``{"result": ...}``; a failed one carries
``{"error": {"kind": ..., "message": ...}}`` where ``kind`` is one of
``validation``, ``auth``, ``not_found`` or ``store``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from vaultbar.errors import (
    AuthError,
    NotFoundError,
    StoreError,
    ValidationError,
    VaultbarError,
)
from vaultbar.models import APP_VERSION, DEFAULT_STORE_TIMEOUT_SECONDS, CredentialSummary

logger = logging.getLogger(__name__)

RPC_PATH = "/rpc"
USER_AGENT = f"vaultbar/{APP_VERSION}"
# Shown in place of server-side validation text, which stays in the log
STORE_REJECTED = "Store rejected the request"

_ERROR_KINDS: dict[str, type[VaultbarError]] = {
    "validation": ValidationError,
    "auth": AuthError,
    "not_found": NotFoundError,
    "store": StoreError,
}

_STATUS_ERRORS: dict[int, type[VaultbarError]] = {
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
    422: ValidationError,
}


def _summary_from_dict(data: Any) -> CredentialSummary:
    if not isinstance(data, dict):
        raise StoreError("Malformed credential summary in store response")
    try:
        return CredentialSummary(
            id=int(data["id"]),
            service_name=str(data["service_name"]),
            username=str(data["username"]),
            notes=str(data.get("notes") or ""),
            created_at=str(data.get("created_at") or ""),
            updated_at=str(data.get("updated_at") or ""),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise StoreError("Malformed credential summary in store response") from e


def _remote_error(error_type: type[VaultbarError], message: str) -> VaultbarError:
    if issubclass(error_type, ValidationError):
        return ValidationError(message, usage=STORE_REJECTED)
    return error_type(message)


def _error_from_payload(method: str, payload: Any) -> VaultbarError:
    kind = ""
    message = "Store request failed"
    if isinstance(payload, dict):
        kind = str(payload.get("kind", ""))
        message = str(payload.get("message") or message)
    logger.warning("Store call %s failed (%s): %s", method, kind or "unknown", message)
    return _remote_error(_ERROR_KINDS.get(kind, StoreError), message)


class HttpCredentialStore:
    """Credential store adapter over ``httpx.AsyncClient``.

    Pass ``client`` to share a connection pool (or a ``MockTransport`` in
    tests); otherwise the store owns a client and ``aclose()`` releases it.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: int = DEFAULT_STORE_TIMEOUT_SECONDS,
    ) -> None:
        self._url = base_url.rstrip("/") + RPC_PATH
        self._timeout = timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(headers={"User-Agent": USER_AGENT})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _call(self, method: str, **params: Any) -> Any:
        try:
            response = await self._client.post(
                self._url,
                json={"method": method, "params": params},
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            logger.warning("Store call %s failed: %s", method, e)
            raise StoreError(f"Store unreachable during {method}") from e

        status_error = _STATUS_ERRORS.get(response.status_code)
        if status_error is not None:
            logger.debug("Store call %s returned HTTP %d", method, response.status_code)
            raise _remote_error(
                status_error, f"Store rejected {method} (HTTP {response.status_code})"
            )
        if response.status_code >= 400 and not _has_json_body(response):
            raise StoreError(f"Store returned HTTP {response.status_code} for {method}")

        try:
            body = response.json()
        except ValueError as e:
            raise StoreError(f"Store returned invalid JSON for {method}") from e
        if not isinstance(body, dict):
            raise StoreError(f"Store returned an unexpected body for {method}")
        if "error" in body:
            raise _error_from_payload(method, body["error"])
        if response.status_code >= 400:
            raise StoreError(f"Store returned HTTP {response.status_code} for {method}")
        return body.get("result")

    async def search(self, query: str) -> list[CredentialSummary]:
        result = await self._call("search", query=query)
        if not isinstance(result, list):
            raise StoreError("Store returned a non-list search result")
        return [_summary_from_dict(item) for item in result]

    async def create_credential(
        self, service_name: str, username: str, secret: str, notes: str = ""
    ) -> int:
        result = await self._call(
            "create_credential",
            service_name=service_name,
            username=username,
            secret=secret,
            notes=notes,
        )
        try:
            return int(result)
        except (TypeError, ValueError) as e:
            raise StoreError("Store returned an invalid credential id") from e

    async def generate_and_store(self, service_name: str, username: str, notes: str = "") -> str:
        result = await self._call(
            "generate_and_store", service_name=service_name, username=username, notes=notes
        )
        if not isinstance(result, str) or not result:
            raise StoreError("Store returned no generated secret")
        return result

    async def update_secret(self, credential_id: int, new_secret: str) -> None:
        await self._call("update_secret", id=credential_id, secret=new_secret)

    async def delete_credential(self, credential_id: int) -> None:
        await self._call("delete_credential", id=credential_id)

    async def reveal_secret(self, credential_id: int) -> str:
        result = await self._call("reveal_secret", id=credential_id)
        if not isinstance(result, str):
            raise StoreError("Store returned no secret")
        return result

    async def run_text_command(self, raw: str) -> int | str:
        result = await self._call("run_text_command", raw=raw)
        if isinstance(result, bool) or not isinstance(result, (int, str)):
            raise StoreError("Store returned an unexpected command result")
        return result

    async def lock(self) -> None:
        await self._call("lock")


def _has_json_body(response: httpx.Response) -> bool:
    return response.headers.get("content-type", "").startswith("application/json")


__all__ = [
    "RPC_PATH",
    "STORE_REJECTED",
    "HttpCredentialStore",
]
