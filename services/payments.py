from dataclasses import dataclass
import math

from core.imports import requests
from core.logger import get_logger

logger = get_logger(__name__)

STRIPE_API_URL = "https://api.stripe.com/v1"
CONFIRMED_STATUSES = {"succeeded", "processing"}


class PaymentError(Exception):
    pass


@dataclass(frozen=True)
class PaymentConfirmation:
    id: str
    status: str
    amount: int
    currency: str

    def to_dict(self):
        return {"id": self.id, "status": self.status, "amount": self.amount, "currency": self.currency}


def to_minor_units(amount):
    amount = float(amount)
    if not math.isfinite(amount):
        raise PaymentError(f"Invalid amount: {amount}")
    return int(round(amount * 100))


class StripeGateway:
    """Creates and confirms Stripe PaymentIntents over the REST API."""

    def __init__(self, secret_key, currency="inr", timeout=10.0, session=None, base_url=STRIPE_API_URL):
        self.secret_key = secret_key
        self.currency = currency
        self.timeout = timeout
        self.session = session or requests.Session()
        self.base_url = base_url

    def charge(self, amount, payment_method, idempotency_key, metadata=None):
        if not self.secret_key:
            raise PaymentError("Payment gateway is not configured")

        data = {
            "amount": to_minor_units(amount),
            "currency": self.currency,
            "payment_method": payment_method,
            "confirmation_method": "manual",
            "confirm": "true",
        }
        for key, value in (metadata or {}).items():
            data[f"metadata[{key}]"] = str(value)

        try:
            response = self.session.post(
                f"{self.base_url}/payment_intents",
                data=data,
                auth=(self.secret_key, ""),
                headers={"Idempotency-Key": idempotency_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PaymentError(f"Payment gateway unreachable: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code != 200:
            message = body.get("error", {}).get("message") or response.text
            raise PaymentError(f"Payment declined: {message}")

        status = body.get("status")
        if not body.get("id") or status not in CONFIRMED_STATUSES:
            raise PaymentError(f"Payment not confirmed (status={status})")

        logger.info(f"PaymentIntent {body['id']} {status} for {data['amount']} {self.currency}")
        return PaymentConfirmation(
            id=body["id"],
            status=status,
            amount=body.get("amount", data["amount"]),
            currency=body.get("currency", self.currency),
        )
