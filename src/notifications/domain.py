"""Notifications bounded context — order emails.

Consumes CheckoutCompleted from the Payments domain and emails an order
confirmation to the shopper and a new-order alert to the shop. Tracks
delivery status for audit and retry.
"""

import structlog
from protean.domain import Domain

notifications = Domain(name="notifications")

logger = structlog.get_logger(__name__)
