"""HTTP client for the Kubernetes API server."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx


class KubernetesApiError(RuntimeError):
    """Raised when Kubernetes API calls fail."""

    def __init__(self, message: str, status_code: int | None = None, reason: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason

    @property
    def is_not_found(self) -> bool:
        """True when the server answered 404."""

        return self.status_code == 404

    @property
    def is_conflict(self) -> bool:
        """True when the server answered 409 (AlreadyExists or Conflict)."""

        return self.status_code == 409


class KubernetesApiClient:
    """Thin JSON wrapper around the Kubernetes REST API."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        token_file: str | None = None,
        verify_tls: bool = True,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = self._normalize_base_url(base_url)
        if token is None and token_file is not None:
            token = self._read_token_file(token_file)
        self._token = token
        self._verify_tls = verify_tls
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    @staticmethod
    def namespaced_path(
        group: str,
        version: str,
        namespace: str,
        plural: str,
        name: str | None = None,
    ) -> str:
        """Build the path of a namespaced custom resource collection or object."""

        path = f"/apis/{group}/{version}/namespaces/{quote(namespace, safe='')}/{plural}"
        if name is not None:
            path = f"{path}/{quote(name, safe='')}"
        return path

    async def get_json(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        """GET one resource or collection."""

        return await self._request("GET", path, params=params)

    async def post_json(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST a new resource."""

        return await self._request("POST", path, json=body)

    async def delete(self, path: str) -> None:
        """DELETE one resource."""

        await self._request("DELETE", path)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                verify=self._verify_tls,
                transport=self._transport,
                headers=self._headers(),
            ) as http_client:
                response = await http_client.request(method, url, params=params, json=json)
        except httpx.HTTPError as exc:
            raise KubernetesApiError(f"{method} {url} failed: {exc}") from exc
        self._ensure_success(response)
        if not response.content:
            return {}
        payload = response.json()
        return payload if isinstance(payload, dict) else {}

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _ensure_success(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        reason, message = self._status_from_response(response)
        raise KubernetesApiError(
            f"{response.request.method} {response.request.url} failed: "
            f"{response.status_code} {message}",
            status_code=response.status_code,
            reason=reason,
        )

    def _status_from_response(self, response: httpx.Response) -> tuple[str, str]:
        try:
            payload = response.json()
        except ValueError:
            text = response.text.strip()
            return "", text or "<no response body>"

        if isinstance(payload, dict):
            reason = payload.get("reason")
            message = payload.get("message")
            return (
                reason if isinstance(reason, str) else "",
                message if isinstance(message, str) else str(payload),
            )
        return "", str(payload)

    def _read_token_file(self, token_file: str) -> str:
        try:
            return Path(token_file).read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise KubernetesApiError(f"Cannot read token file {token_file}: {exc}") from exc

    def _normalize_base_url(self, base_url: str) -> str:
        normalized = base_url.strip().rstrip("/")
        if not normalized:
            raise KubernetesApiError("Kubernetes API URL cannot be empty.")
        return normalized


__all__ = ["KubernetesApiClient", "KubernetesApiError"]
