# src/server/payments.py

"""Payment endpoints: create/confirm PaymentIntents and receive webhooks."""

import logging
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request

from src.errors import PaymentError
from src.services.payment_gateway import PaymentGateway

logger = logging.getLogger("storefront.server.payments")

payments_bp = Blueprint("payments", __name__)


def _gateway() -> PaymentGateway:
    gateway: PaymentGateway = current_app.extensions["payment_gateway"]
    return gateway


def _body() -> dict[str, Any]:
    data: Any = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@payments_bp.post("/process-payment")
def process_payment() -> Response | tuple[Response, int]:
    data = _body()
    try:
        outcome = _gateway().create_payment_intent(
            amount=data.get("amount"),
            payment_method_id=str(data.get("payment_method_id") or ""),
            email=data.get("email"),
            name=data.get("name"),
        )
    except PaymentError as exc:
        return jsonify({"error": str(exc)}), 400

    if outcome.requires_action:
        return jsonify({
            "requires_action": True,
            "payment_intent_client_secret": outcome.client_secret,
        })
    if outcome.succeeded:
        return jsonify({"success": True})
    return jsonify({"error": f"Unexpected status {outcome.status}"})


@payments_bp.post("/confirm-payment")
def confirm_payment() -> Response | tuple[Response, int]:
    data = _body()
    try:
        outcome = _gateway().confirm_payment_intent(
            str(data.get("payment_intent_id") or "")
        )
    except PaymentError as exc:
        return jsonify({"error": str(exc)}), 400

    if outcome.succeeded:
        return jsonify({"success": True})
    return jsonify({
        "error": f"Payment could not be confirmed. Status: {outcome.status}"
    })


@payments_bp.post("/webhook")
def webhook() -> tuple[str, int]:
    try:
        event = _gateway().construct_webhook_event(
            request.get_data(),
            request.headers.get("Stripe-Signature"),
        )
    except PaymentError as exc:
        return f"Webhook Error: {exc}", 400

    logger.info("Webhook event received: %s", event["type"])
    return "", 200
