"""Minimal PayPal REST client for checkout orders."""

from __future__ import annotations

from decimal import Decimal
import json
import logging
from typing import Any, Dict, List, Optional, cast

import httpx
from pydantic import SecretStr

logger = logging.getLogger(__name__)

SANDBOX_BASE_URL = "https://api-m.sandbox.paypal.com"


class PayPalError(RuntimeError):
    """Raised when the PayPal API responds with an error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        *,
        error_name: str | None = None,
        error_body: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_name = error_name
        self.error_body = error_body


class PayPalClient:
    """Thin client for PayPal's OAuth and Orders v2 APIs."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str | SecretStr,
        base_url: str = SANDBOX_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        secret_value = (
            client_secret.get_secret_value()
            if isinstance(client_secret, SecretStr)
            else client_secret
        )
        if not client_id or not secret_value:
            raise ValueError("PayPal client id and secret must be provided")

        self._client_id = client_id
        self._client_secret = secret_value
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def get_access_token(self) -> str:
        """Exchange the client credentials for a bearer token."""
        payload = self._send(
            "POST",
            "/v1/oauth2/token",
            auth=httpx.BasicAuth(self._client_id, self._client_secret),
            data={"grant_type": "client_credentials"},
        )
        token = payload.get("access_token")
        if not token:
            raise PayPalError("PayPal did not return an access token", error_body=payload)
        return cast(str, token)

    def create_order(
        self,
        *,
        amount: Decimal,
        currency: str,
        description: str,
        return_url: str,
        cancel_url: str,
        reference_id: str | None = None,
    ) -> Dict[str, Any]:
        purchase_unit: Dict[str, Any] = {
            "amount": {"currency_code": currency, "value": f"{Decimal(amount):.2f}"},
            "description": description,
        }
        if reference_id:
            purchase_unit["reference_id"] = reference_id
        body = {
            "intent": "CAPTURE",
            "purchase_units": [purchase_unit],
            "application_context": {"return_url": return_url, "cancel_url": cancel_url},
        }
        return self._authorized("POST", "/v2/checkout/orders", json_body=body)

    def get_order(self, order_id: str) -> Dict[str, Any]:
        if not order_id:
            raise ValueError("order_id must be provided")
        return self._authorized("GET", f"/v2/checkout/orders/{order_id}")

    def capture_order(self, order_id: str) -> Dict[str, Any]:
        if not order_id:
            raise ValueError("order_id must be provided")
        return self._authorized("POST", f"/v2/checkout/orders/{order_id}/capture", json_body={})

    @staticmethod
    def approval_url(order: Dict[str, Any]) -> Optional[str]:
        for link in order.get("links", []):
            if link.get("rel") == "approve":
                return cast(str, link.get("href"))
        return None

    @staticmethod
    def reference_ids(order: Dict[str, Any]) -> List[str]:
        return [
            cast(str, unit["reference_id"])
            for unit in order.get("purchase_units", [])
            if unit.get("reference_id")
        ]

    @staticmethod
    def capture_id(capture: Dict[str, Any]) -> Optional[str]:
        for unit in capture.get("purchase_units", []):
            captures = unit.get("payments", {}).get("captures", [])
            if captures:
                return cast(str, captures[0].get("id"))
        return None

    def _authorized(
        self, method: str, path: str, *, json_body: Dict[str, Any] | None = None
    ) -> Dict[str, Any]:
        token = self.get_access_token()
        return self._send(
            method,
            path,
            headers={"Authorization": f"Bearer {token}"},
            json_body=json_body,
        )

    def _send(
        self,
        method: str,
        path: str,
        *,
        auth: httpx.Auth | None = None,
        headers: Dict[str, str] | None = None,
        json_body: Dict[str, Any] | None = None,
        data: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        with httpx.Client(
            timeout=self._timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        ) as client:
            request = client.build_request(
                method, url, json=json_body, data=data, headers=headers
            )
            try:
                response = client.send(request, auth=auth)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                error_payload: Any | None = None
                error_name: str | None = None
                try:
                    error_payload = exc.response.json()
                    if isinstance(error_payload, dict):
                        error_name = error_payload.get("name") or error_payload.get("error")
                except json.JSONDecodeError:
                    error_payload = exc.response.text

                logger.error(
                    "PayPal API error %s for %s %s: %s",
                    status,
                    method,
                    path,
                    exc.response.text[:500],
                )
                raise PayPalError(
                    message=f"PayPal API responded with status {status}",
                    status_code=status,
                    error_name=error_name,
                    error_body=error_payload,
                ) from exc
            except httpx.RequestError as exc:
                logger.error("PayPal request failure for %s %s: %s", method, path, str(exc))
                raise PayPalError("Failed to reach PayPal API") from exc

        try:
            return cast(Dict[str, Any], response.json())
        except json.JSONDecodeError as exc:
            logger.error("Invalid JSON from PayPal for %s %s: %s", method, path, response.text)
            raise PayPalError("Received malformed JSON from PayPal") from exc
