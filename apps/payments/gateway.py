"""
Midtrans Snap gateway client.

Opens a hosted payment session for an order. The client only knows the
HTTP contract; the caller decides what a failure means for the payment.
Every failure (timeout, connection error, non-2xx answer, answer without a
token) surfaces as ``ExternalServiceError``.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Tuple

import requests
from django.conf import settings  # type: ignore
from django.core.exceptions import ImproperlyConfigured  # type: ignore

from shared.domain.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

SNAP_TRANSACTIONS_PATH = "/snap/v1/transactions"


@dataclass(frozen=True)
class MidtransConfig:
    server_key: str
    client_key: str
    api_url: str
    is_production: bool = False
    timeout_seconds: float = 10.0
    enabled_payments: Tuple[str, ...] = ()
    expiry_hours: int = 24

    def __post_init__(self):
        if not self.server_key or not self.server_key.strip():
            raise ImproperlyConfigured("MIDTRANS_SERVER_KEY must not be blank.")
        if not self.api_url.startswith(("http://", "https://")):
            raise ImproperlyConfigured("MIDTRANS_API_URL must be an http(s) URL.")
        if self.is_production and "sandbox" in self.api_url:
            raise ImproperlyConfigured("MIDTRANS_IS_PRODUCTION is set but MIDTRANS_API_URL points at the sandbox.")
        if self.timeout_seconds <= 0:
            raise ImproperlyConfigured("MIDTRANS_TIMEOUT_SECONDS must be positive.")
        if self.expiry_hours <= 0:
            raise ImproperlyConfigured("PAYMENT_EXPIRY_HOURS must be positive.")

    @classmethod
    def from_settings(cls) -> "MidtransConfig":
        return cls(
            server_key=settings.MIDTRANS_SERVER_KEY,
            client_key=settings.MIDTRANS_CLIENT_KEY,
            api_url=settings.MIDTRANS_API_URL,
            is_production=settings.MIDTRANS_IS_PRODUCTION,
            timeout_seconds=float(settings.MIDTRANS_TIMEOUT_SECONDS),
            enabled_payments=tuple(settings.MIDTRANS_ENABLED_PAYMENTS),
            expiry_hours=int(settings.PAYMENT_EXPIRY_HOURS),
        )

    @property
    def authorization_header(self) -> str:
        token = base64.b64encode(f"{self.server_key}:".encode("utf-8")).decode("ascii")
        return f"Basic {token}"


@dataclass(frozen=True)
class SnapCustomer:
    first_name: str
    last_name: str
    email: str
    phone: str = ""


@dataclass(frozen=True)
class SnapItem:
    id: str
    name: str
    price: Decimal
    quantity: int = 1


@dataclass(frozen=True)
class SnapRequest:
    order_id: str
    gross_amount: Decimal
    customer: SnapCustomer
    items: Tuple[SnapItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SnapSession:
    token: str
    redirect_url: str


def _amount(value: Decimal) -> Any:
    # Snap expects whole numbers for IDR; other currencies keep their cents.
    if value == value.to_integral_value():
        return int(value)
    return float(value)


class MidtransSnapClient:
    """Thin wrapper around ``POST /snap/v1/transactions``."""

    def __init__(self, config: MidtransConfig):
        self.config = config

    def build_payload(self, request: SnapRequest) -> Dict[str, Any]:
        return {
            "transaction_details": {
                "order_id": request.order_id,
                "gross_amount": _amount(request.gross_amount),
            },
            "customer_details": {
                "first_name": request.customer.first_name,
                "last_name": request.customer.last_name,
                "email": request.customer.email,
                "phone": request.customer.phone,
            },
            "item_details": [
                {
                    "id": item.id,
                    "price": _amount(item.price),
                    "quantity": item.quantity,
                    "name": item.name,
                }
                for item in request.items
            ],
            "enabled_payments": list(self.config.enabled_payments),
            "expiry": {"unit": "hours", "duration": self.config.expiry_hours},
        }

    def create_transaction(self, request: SnapRequest) -> SnapSession:
        url = f"{self.config.api_url.rstrip('/')}{SNAP_TRANSACTIONS_PATH}"
        headers = {
            "Authorization": self.config.authorization_header,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        logger.info(f"Creating Snap transaction for order {request.order_id}")

        try:
            response = requests.post(
                url,
                json=self.build_payload(request),
                headers=headers,
                timeout=self.config.timeout_seconds,
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Snap request for order {request.order_id} timed out: {e}")
            raise ExternalServiceError(
                "Payment gateway timed out", service="midtrans", code="gateway_timeout"
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Snap request for order {request.order_id} failed: {e}")
            raise ExternalServiceError(
                "Payment gateway is unreachable", service="midtrans", code="gateway_unavailable"
            ) from e

        if not 200 <= response.status_code < 300:
            logger.error(
                f"Snap answered {response.status_code} for order {request.order_id}: {response.text[:500]}"
            )
            raise ExternalServiceError(
                f"Payment gateway rejected the request ({response.status_code})",
                service="midtrans",
                code="gateway_error",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                "Payment gateway returned an unreadable response", service="midtrans", code="gateway_error"
            ) from e

        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            logger.error(f"Snap response for order {request.order_id} has no token")
            raise ExternalServiceError(
                "Payment gateway returned no session token", service="midtrans", code="gateway_error"
            )

        logger.info(f"Snap transaction created for order {request.order_id}")
        return SnapSession(token=token, redirect_url=data.get("redirect_url") or "")
