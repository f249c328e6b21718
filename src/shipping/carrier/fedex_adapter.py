"""FedEx carrier adapter — FedEx REST APIs over httpx.

FedEx issues separate OAuth client credentials per API project: one set
for the Track API and one for the other REST APIs (address validation,
rates, ship). Tokens are fetched with the client-credentials grant and
reused until shortly before they expire.
"""

import os
import time
from dataclasses import dataclass
from decimal import Decimal

import httpx
import structlog

from shipping.carrier.port import (
    Address,
    CarrierError,
    CarrierPort,
    Package,
    Party,
    RateQuote,
    ShipmentResult,
)

logger = structlog.get_logger(__name__)

SANDBOX_API_URL = "https://apis-sandbox.fedex.com"

# Refresh this many seconds before the token's stated expiry
TOKEN_EXPIRY_MARGIN = 60


@dataclass(frozen=True)
class FedExConfig:
    client_id: str
    client_secret: str
    rest_client_id: str
    rest_client_secret: str
    account_number: str
    api_url: str = SANDBOX_API_URL
    origin_postal_code: str | None = None
    origin_country_code: str = "US"
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "FedExConfig":
        return cls(
            client_id=os.environ["FEDEX_CLIENT_ID"],
            client_secret=os.environ["FEDEX_CLIENT_SECRET"],
            rest_client_id=os.environ["FEDEX_CLIENT_ID_REST"],
            rest_client_secret=os.environ["FEDEX_CLIENT_SECRET_REST"],
            account_number=os.environ["FEDEX_ACCOUNT_NUMBER"],
            api_url=os.environ.get("FEDEX_API_URL", SANDBOX_API_URL),
            origin_postal_code=os.environ.get("FEDEX_ORIGIN_POSTAL_CODE"),
            origin_country_code=os.environ.get("FEDEX_ORIGIN_COUNTRY_CODE", "US"),
        )


@dataclass
class _CachedToken:
    value: str
    expires_at: float


def _address_payload(address: Address) -> dict:
    return {
        "streetLines": list(address.street_lines),
        "city": address.city,
        "stateOrProvinceCode": address.state_or_province_code,
        "postalCode": address.postal_code,
        "countryCode": address.country_code,
    }


def _party_payload(party: Party) -> dict:
    contact = {
        "personName": party.contact.person_name,
        "phoneNumber": party.contact.phone_number,
    }
    if party.contact.company_name:
        contact["companyName"] = party.contact.company_name
    return {"contact": contact, "address": _address_payload(party.address)}


def _package_payload(package: Package) -> dict:
    payload = {"weight": {"units": package.weight_units, "value": package.weight}}
    if package.dimensions:
        payload["dimensions"] = dict(package.dimensions)
    return payload


class FedExCarrier(CarrierPort):
    def __init__(self, config: FedExConfig, client: httpx.Client | None = None):
        self.config = config
        self._client = client or httpx.Client(base_url=config.api_url, timeout=config.timeout)
        self._tokens: dict[str, _CachedToken] = {}

    # -------------------------------------------------------------------
    # OAuth
    # -------------------------------------------------------------------
    def _access_token(self, client_id: str, client_secret: str) -> str:
        cached = self._tokens.get(client_id)
        if cached is not None and time.monotonic() < cached.expires_at:
            return cached.value

        try:
            response = self._client.post(
                "/oauth/token",
                data={
                    "grant_type": "client_credentials",
                    "client_id": client_id,
                    "client_secret": client_secret,
                },
            )
            response.raise_for_status()
            body = response.json()
            token = body["access_token"]
            expires_in = int(body.get("expires_in", 3600))
        except httpx.HTTPError as exc:
            logger.error("Error getting FedEx access token", error=str(exc))
            raise CarrierError("Failed to authenticate with FedEx") from exc
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Malformed FedEx token response", error=repr(exc))
            raise CarrierError("Failed to authenticate with FedEx") from exc

        self._tokens[client_id] = _CachedToken(
            value=token,
            expires_at=time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN, 0),
        )
        return token

    def _tracking_token(self) -> str:
        return self._access_token(self.config.client_id, self.config.client_secret)

    def _rest_token(self) -> str:
        return self._access_token(self.config.rest_client_id, self.config.rest_client_secret)

    def _post(self, path: str, payload: dict, token: str, headers: dict | None = None) -> dict:
        try:
            response = self._client.post(
                path,
                json=payload,
                headers={"Authorization": f"Bearer {token}", **(headers or {})},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "FedEx request rejected",
                path=path,
                status_code=exc.response.status_code,
                body=exc.response.text[:500],
            )
            raise CarrierError(f"FedEx rejected the request ({exc.response.status_code})") from exc
        except httpx.HTTPError as exc:
            logger.error("FedEx request failed", path=path, error=str(exc))
            raise CarrierError("FedEx is unreachable") from exc

        try:
            return response.json()
        except ValueError as exc:
            logger.error("FedEx returned a non-JSON body", path=path, body=response.text[:500])
            raise CarrierError("FedEx returned an unreadable response") from exc

    # -------------------------------------------------------------------
    # CarrierPort
    # -------------------------------------------------------------------
    def track(self, tracking_number: str) -> dict:
        payload = {"trackingInfo": [{"trackingNumberInfo": {"trackingNumber": tracking_number}}]}
        return self._post("/track/v1/trackingnumbers", payload, self._tracking_token())

    def validate_address(self, address: Address) -> bool:
        payload = {"addressesToValidate": [{"address": _address_payload(address)}]}
        try:
            body = self._post("/address/v1/addresses/resolve", payload, self._rest_token())
        except CarrierError:
            return False

        results = (body.get("output") or {}).get("addressResults") or []
        if not results or not results[0].get("resolved"):
            return False
        classification = results[0].get("classification")
        logger.debug("Address classification", classification=classification)
        return classification == "VALID"

    def get_rate(self, address: Address, package: Package) -> list[RateQuote]:
        shipper = {"countryCode": self.config.origin_country_code}
        if self.config.origin_postal_code:
            shipper["postalCode"] = self.config.origin_postal_code

        payload = {
            "accountNumber": {"value": self.config.account_number},
            "requestedShipment": {
                "shipper": {"address": shipper},
                "recipient": {"address": _address_payload(address)},
                "pickupType": "DROPOFF_AT_FEDEX_LOCATION",
                "rateRequestType": ["ACCOUNT"],
                "requestedPackageLineItems": [_package_payload(package)],
            },
        }
        body = self._post("/rate/v1/rates/quotes", payload, self._rest_token())

        quotes = []
        for detail in (body.get("output") or {}).get("rateReplyDetails") or []:
            for rated in detail.get("ratedShipmentDetails") or []:
                if rated.get("totalNetCharge") is None:
                    continue
                quotes.append(
                    RateQuote(
                        service_type=detail.get("serviceType", ""),
                        amount=Decimal(str(rated["totalNetCharge"])),
                        currency=rated.get("currency", "USD"),
                    )
                )
                break
        return quotes

    def create_shipment(
        self,
        shipper: Party,
        recipient: Party,
        packages: list[Package],
        service_type: str,
        packaging_type: str,
    ) -> ShipmentResult:
        payload = {
            "accountNumber": {"value": self.config.account_number},
            "labelResponseOptions": "URL_ONLY",
            "requestedShipment": {
                "shipper": _party_payload(shipper),
                "recipients": [_party_payload(recipient)],
                "pickupType": "USE_SCHEDULED_PICKUP",
                "serviceType": service_type,
                "packagingType": packaging_type,
                "shippingChargesPayment": {"paymentType": "SENDER"},
                "labelSpecification": {"imageType": "PDF", "labelStockType": "PAPER_85X11_TOP_HALF_LABEL"},
                "requestedPackageLineItems": [_package_payload(p) for p in packages],
            },
        }
        body = self._post("/ship/v1/shipments", payload, self._rest_token(), headers={"X-locale": "en_US"})

        shipments = (body.get("output") or {}).get("transactionShipments") or []
        if not shipments:
            return ShipmentResult(tracking_number=None, service_type=service_type)

        shipment = shipments[0]
        label_url = None
        for piece in shipment.get("pieceResponses") or []:
            for document in piece.get("packageDocuments") or []:
                label_url = label_url or document.get("url")

        logger.info("FedEx shipment created", tracking_number=shipment.get("masterTrackingNumber"))
        return ShipmentResult(
            tracking_number=shipment.get("masterTrackingNumber"),
            service_type=shipment.get("serviceType", service_type),
            label_url=label_url,
        )

    def close(self) -> None:
        self._client.close()
