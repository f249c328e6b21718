"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any domain or application code.

Payment collection itself happens on the provider's hosted checkout page;
the gateway only opens sessions, reads back what was bought, and
authenticates the provider's webhook callbacks.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class WebhookVerificationError(Exception):
    """The webhook payload could not be authenticated or parsed."""


class GatewayError(Exception):
    """The payment provider rejected a request or could not be reached."""


@dataclass(frozen=True)
class CheckoutLineItem:
    """One priced line sent to the provider's hosted checkout."""

    name: str
    unit_amount: int  # minor units (cents)
    quantity: int
    currency: str = "usd"


@dataclass(frozen=True)
class CheckoutSessionResult:
    """A checkout session opened with the provider."""

    session_id: str
    url: str | None = None
    amount_total: int | None = None


@dataclass(frozen=True)
class PurchasedItem:
    """A line item read back from a completed session."""

    description: str
    quantity: int
    amount_total: int | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_checkout_session(
        self,
        line_items: list[CheckoutLineItem],
        customer_email: str | None,
        success_url: str,
        cancel_url: str,
        allowed_countries: list[str],
    ) -> CheckoutSessionResult:
        """Open a hosted checkout session for card payment with shipping address collection."""
        ...

    @abstractmethod
    def list_line_items(self, session_id: str) -> list[PurchasedItem]:
        """Return the line items of a checkout session."""
        ...

    @abstractmethod
    def construct_webhook_event(self, payload: bytes, signature: str) -> dict:
        """Authenticate a webhook payload and return the decoded event.

        Raises:
            WebhookVerificationError: signature mismatch or malformed payload.
        """
        ...
