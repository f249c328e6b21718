"""FastAPI routes for shipping — tracking, address checks, rates and shipments.

Carrier calls block on the network, so the routes are plain `def` and run
in FastAPI's threadpool. Carrier failures surface as CarrierError;
carrier_error_handler maps them to 502 when registered on the application.
"""

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from shipping.api.schemas import (
    AddressSchema,
    AddressValidationResponse,
    CreateShipmentRequest,
    RateQuoteResponse,
    RateRequest,
    RateResponse,
    ShipmentResponse,
    TrackRequest,
)
from shipping.carrier import get_carrier
from shipping.carrier.port import CarrierError

logger = structlog.get_logger(__name__)

tracking_router = APIRouter(tags=["shipping"])
shipping_router = APIRouter(prefix="/shipping", tags=["shipping"])


@tracking_router.post("/track")
def track(body: TrackRequest) -> dict:
    """Return the carrier's tracking data for a tracking number."""
    return get_carrier().track(body.tracking_number)


@shipping_router.post("/addresses/validate", response_model=AddressValidationResponse)
def validate_address(body: AddressSchema) -> AddressValidationResponse:
    return AddressValidationResponse(valid=get_carrier().validate_address(body.to_address()))


@shipping_router.post("/rates", response_model=RateResponse)
def get_rates(body: RateRequest) -> RateResponse:
    quotes = get_carrier().get_rate(body.address.to_address(), body.package.to_package())
    return RateResponse(
        quotes=[
            RateQuoteResponse(service_type=q.service_type, amount=q.amount, currency=q.currency)
            for q in quotes
        ]
    )


@shipping_router.post("/shipments", status_code=201, response_model=ShipmentResponse)
def create_shipment(body: CreateShipmentRequest) -> ShipmentResponse:
    result = get_carrier().create_shipment(
        shipper=body.shipper.to_party(),
        recipient=body.recipient.to_party(),
        packages=[p.to_package() for p in body.packages],
        service_type=body.service_type,
        packaging_type=body.packaging_type,
    )
    return ShipmentResponse(
        tracking_number=result.tracking_number,
        service_type=result.service_type,
        label_url=result.label_url,
    )


async def carrier_error_handler(request: Request, exc: CarrierError) -> JSONResponse:
    """Map carrier failures to 502 Bad Gateway."""
    logger.warning("Carrier request failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=502, content={"error": str(exc)})
