# src/services/payment_gateway.py

"""Thin adapter over the Stripe PaymentIntents API."""

import logging
from dataclasses import dataclass
from typing import Any

import stripe

from src.config.settings import Settings
from src.errors import PaymentError

logger = logging.getLogger("storefront.payments")


@dataclass(frozen=True)
class PaymentOutcome:
    """What the processor said about a payment intent."""

    status: str  # "succeeded", "requires_action", or anything else
    intent_id: str = ""
    client_secret: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"

    @property
    def requires_action(self) -> bool:
        return self.status == "requires_action"


class PaymentGateway:
    """Creates and confirms card payments; verifies webhook signatures.

    Processor errors are re-raised as :class:`PaymentError` carrying the
    processor's own message.  Nothing is retried here.
    """

    def __init__(
        self,
        api_key: str | None = None,
        webhook_secret: str | None = None,
        currency: str | None = None,
    ) -> None:
        self.api_key = (
            api_key if api_key is not None else Settings.STRIPE_SECRET_KEY
        )
        self.webhook_secret = (
            webhook_secret if webhook_secret is not None
            else Settings.STRIPE_WEBHOOK_SECRET
        )
        self.currency = currency or Settings.CURRENCY

    @staticmethod
    def _outcome(intent: Any) -> PaymentOutcome:
        return PaymentOutcome(
            status=str(intent.status),
            intent_id=str(intent.id),
            client_secret=getattr(intent, "client_secret", None),
        )

    def create_payment_intent(
        self,
        amount: Any,
        payment_method_id: str,
        email: str | None = None,
        name: str | None = None,
    ) -> PaymentOutcome:
        """Create and immediately confirm a card PaymentIntent.

        ``amount`` is in the smallest currency unit (cents).
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            msg = "amount must be a positive integer number of cents"
            raise PaymentError(msg)
        if not payment_method_id:
            msg = "payment_method_id is required"
            raise PaymentError(msg)

        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=amount,
                currency=self.currency,
                payment_method_types=["card"],
                payment_method=payment_method_id,
                confirmation_method="manual",
                confirm=True,
                receipt_email=email,
                metadata={"customer_name": name or ""},
            )
        except stripe.StripeError as exc:
            logger.error(
                "PaymentIntent creation failed: %s", exc, exc_info=True
            )
            raise PaymentError(exc.user_message or str(exc)) from exc

        outcome = self._outcome(intent)
        logger.info(
            "PaymentIntent %s created with status %s",
            outcome.intent_id,
            outcome.status,
        )
        return outcome

    def confirm_payment_intent(self, intent_id: str) -> PaymentOutcome:
        """Confirm an intent after the customer finished 3D Secure."""
        if not intent_id:
            msg = "payment_intent_id is required"
            raise PaymentError(msg)
        try:
            intent = stripe.PaymentIntent.confirm(
                intent_id, api_key=self.api_key
            )
        except stripe.StripeError as exc:
            logger.error(
                "PaymentIntent %s confirmation failed: %s",
                intent_id,
                exc,
                exc_info=True,
            )
            raise PaymentError(exc.user_message or str(exc)) from exc

        outcome = self._outcome(intent)
        logger.info(
            "PaymentIntent %s confirmed with status %s",
            outcome.intent_id,
            outcome.status,
        )
        return outcome

    def construct_webhook_event(
        self, payload: bytes, signature: str | None,
    ) -> Any:
        """Verify a webhook payload against the shared secret.

        Raises:
            PaymentError: on a missing/invalid signature or bad payload.
        """
        if not signature:
            msg = "missing Stripe-Signature header"
            raise PaymentError(msg)
        try:
            return stripe.Webhook.construct_event(
                payload, signature, self.webhook_secret
            )
        except (ValueError, stripe.StripeError) as exc:
            logger.warning("Rejected webhook: %s", exc)
            raise PaymentError(str(exc)) from exc
