"""
Thin wrapper around the Stripe API calls the booking flow needs.

Handlers depend on ``get_payment_gateway`` rather than on ``stripe`` directly,
so the processor can be swapped out (tests use an in-memory fake).
"""
from typing import Optional

import stripe

from app.core.config import settings


class PaymentGatewayNotConfigured(RuntimeError):
    pass


class StripeGateway:
    def __init__(self, api_key: str, api_version: str):
        self.api_key = api_key
        self.api_version = api_version

    def _options(self) -> dict:
        if not self.api_key:
            raise PaymentGatewayNotConfigured("Stripe secret key is not configured")
        return {"api_key": self.api_key, "stripe_version": self.api_version}

    def find_customer_id(self, email: str) -> Optional[str]:
        """First Stripe customer registered under ``email``, if any."""
        customers = stripe.Customer.list(email=email, limit=1, **self._options())
        if customers.data:
            return customers.data[0].id
        return None

    def create_checkout_session(
        self,
        *,
        customer_id: Optional[str],
        customer_email: str,
        product_name: str,
        product_description: str,
        amount_cents: int,
        currency: str,
        success_url: str,
        cancel_url: str,
        metadata: dict,
    ):
        params = dict(
            line_items=[
                {
                    "price_data": {
                        "currency": currency,
                        "product_data": {
                            "name": product_name,
                            "description": product_description,
                        },
                        "unit_amount": amount_cents,
                    },
                    "quantity": 1,
                }
            ],
            mode="payment",
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=metadata,
        )
        if customer_id:
            params["customer"] = customer_id
        else:
            # Have Stripe create a customer so it can be stored on the profile after payment
            params["customer_email"] = customer_email
            params["customer_creation"] = "always"
        return stripe.checkout.Session.create(**params, **self._options())

    def retrieve_checkout_session(self, session_id: str):
        return stripe.checkout.Session.retrieve(session_id, **self._options())


def get_payment_gateway() -> StripeGateway:
    return StripeGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_API_VERSION)
