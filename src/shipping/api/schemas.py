"""Pydantic request/response models for the shipping API."""

from decimal import Decimal

from pydantic import BaseModel, Field

from shipping.carrier.port import Address, Contact, Package, Party


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class TrackRequest(BaseModel):
    tracking_number: str = Field(..., min_length=1, alias="trackingNumber")

    model_config = {"populate_by_name": True}


class AddressSchema(BaseModel):
    street_lines: list[str] = Field(..., min_length=1, max_length=3)
    city: str = Field(..., min_length=1)
    state_or_province_code: str = Field(..., min_length=1, max_length=2)
    postal_code: str = Field(..., min_length=1)
    country_code: str = Field("US", min_length=2, max_length=2)

    def to_address(self) -> Address:
        return Address(
            street_lines=list(self.street_lines),
            city=self.city,
            state_or_province_code=self.state_or_province_code,
            postal_code=self.postal_code,
            country_code=self.country_code,
        )


class ContactSchema(BaseModel):
    person_name: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    company_name: str | None = None


class PartySchema(BaseModel):
    contact: ContactSchema
    address: AddressSchema

    def to_party(self) -> Party:
        return Party(
            contact=Contact(**self.contact.model_dump()),
            address=self.address.to_address(),
        )


class DimensionsSchema(BaseModel):
    length: int = Field(..., gt=0)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    units: str = "IN"


class PackageSchema(BaseModel):
    weight: float = Field(..., gt=0)
    weight_units: str = "LB"
    dimensions: DimensionsSchema | None = None

    def to_package(self) -> Package:
        return Package(
            weight=self.weight,
            weight_units=self.weight_units,
            dimensions=self.dimensions.model_dump() if self.dimensions else None,
        )


class RateRequest(BaseModel):
    address: AddressSchema
    package: PackageSchema


class CreateShipmentRequest(BaseModel):
    shipper: PartySchema
    recipient: PartySchema
    packages: list[PackageSchema] = Field(..., min_length=1)
    service_type: str = "FEDEX_GROUND"
    packaging_type: str = "YOUR_PACKAGING"


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class AddressValidationResponse(BaseModel):
    valid: bool


class RateQuoteResponse(BaseModel):
    service_type: str
    amount: Decimal
    currency: str


class RateResponse(BaseModel):
    quotes: list[RateQuoteResponse]


class ShipmentResponse(BaseModel):
    tracking_number: str | None = None
    service_type: str
    label_url: str | None = None
