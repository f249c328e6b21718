"""Pydantic request/response schemas for the Payments API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CartItemSchema(BaseModel):
    id: str
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateCheckoutSessionRequest(BaseModel):
    items: list[CartItemSchema] = Field(min_length=1)
    customer_email: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"id": "camp-mug", "quantity": 2}],
                    "customer_email": "shopper@example.com",
                }
            ]
        }
    }


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Gateway unavailable"


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CheckoutSessionResponse(BaseModel):
    id: str
    url: str | None = None


class WebhookAckResponse(BaseModel):
    received: bool = True


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str
