"""Product price list used to price checkout sessions.

Prices are read from a JSON file (a list of {id, name, price}) so that the
client can only send product ids and quantities, never amounts.
PRODUCT_CATALOG_PATH overrides the bundled list.
"""

import json
import os
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from pathlib import Path

from protean.exceptions import ValidationError

_DEFAULT_CATALOG = Path(__file__).with_name("products.json")


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: Decimal  # major units

    @property
    def unit_amount(self) -> int:
        """Price in minor units (cents)."""
        return int((self.price * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class ProductCatalog:
    def __init__(self, products: list[Product]) -> None:
        self._products = {product.id: product for product in products}

    @classmethod
    def from_file(cls, path: str | Path) -> "ProductCatalog":
        with open(path, encoding="utf-8") as fh:
            records = json.load(fh)
        return cls(
            [Product(id=str(r["id"]), name=r["name"], price=Decimal(str(r["price"]))) for r in records]
        )

    def __len__(self) -> int:
        return len(self._products)

    def get(self, product_id: str) -> Product:
        try:
            return self._products[str(product_id)]
        except KeyError:
            raise ValidationError({"items": [f"Product with ID {product_id} not found"]}) from None


@lru_cache(maxsize=1)
def get_catalog() -> ProductCatalog:
    return ProductCatalog.from_file(os.environ.get("PRODUCT_CATALOG_PATH", _DEFAULT_CATALOG))
