"""Payments bounded context — Checkout Sessions.

Opens hosted checkout sessions with the payment provider, records what was
ordered, and turns the provider's completion webhooks into
CheckoutCompleted events for the Notifications domain.
"""

import structlog
from protean.domain import Domain

payments = Domain(name="payments")

logger = structlog.get_logger(__name__)
