"""FastAPI routes for the Payments domain — checkout sessions and provider webhooks.

Gateway calls block on the network, so they run in the threadpool: the
checkout route is a plain `def`, and the webhook moves to the threadpool
once it has read the raw body.
"""

import json
import os

from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from protean.utils.globals import current_domain

from payments.api.schemas import (
    CheckoutSessionResponse,
    ConfigureGatewayRequest,
    CreateCheckoutSessionRequest,
    GatewayConfigResponse,
    WebhookAckResponse,
)
from payments.checkout.start import StartCheckout
from payments.checkout.webhook import CHECKOUT_SESSION_COMPLETED, completion_command
from payments.domain import logger
from payments.gateway import get_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import GatewayError, WebhookVerificationError

payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/checkout-sessions", response_model=CheckoutSessionResponse)
def create_checkout_session(body: CreateCheckoutSessionRequest) -> CheckoutSessionResponse:
    """Open a hosted checkout session for the cart."""
    command = StartCheckout(
        customer_email=body.customer_email,
        items=json.dumps([{"product_id": item.id, "quantity": item.quantity} for item in body.items]),
    )
    try:
        result = current_domain.process(command, asynchronous=False)
    except GatewayError as exc:
        logger.error("Error creating checkout session", error=str(exc))
        raise HTTPException(status_code=502, detail="Payment provider unavailable") from exc
    return CheckoutSessionResponse(id=result["session_id"], url=result["url"])


@payment_router.post("/webhook", response_model=WebhookAckResponse)
async def process_webhook(
    request: Request,
    stripe_signature: str = Header(default=""),
) -> WebhookAckResponse:
    """Receive a payment provider webhook.

    The raw body is needed for signature verification, so it is read
    directly rather than parsed into a schema.
    """
    payload = await request.body()
    return await run_in_threadpool(_handle_webhook, payload, stripe_signature)


def _handle_webhook(payload: bytes, stripe_signature: str) -> WebhookAckResponse:
    gateway = get_gateway()
    try:
        event = gateway.construct_webhook_event(payload, stripe_signature)
    except WebhookVerificationError as exc:
        logger.warning("Webhook signature verification failed", error=str(exc))
        raise HTTPException(status_code=400, detail=f"Webhook Error: {exc}") from exc

    event_type = event.get("type")
    if event_type != CHECKOUT_SESSION_COMPLETED:
        logger.debug("Ignoring webhook event", event_type=event_type)
        return WebhookAckResponse()

    session = (event.get("data") or {}).get("object") or {}
    try:
        command = completion_command(session, gateway)
    except GatewayError as exc:
        logger.error("Error retrieving line items", gateway_session_id=session.get("id"), error=str(exc))
        raise HTTPException(status_code=502, detail="Payment provider unavailable") from exc

    current_domain.process(command, asynchronous=False)
    logger.info("Checkout completed", gateway_session_id=command.gateway_session_id)
    return WebhookAckResponse()


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only).

    This endpoint is only available when PROTEAN_ENV is not 'production'.
    It allows toggling success/failure behavior for manual API testing.
    """
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )
