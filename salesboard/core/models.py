# salesboard/core/models.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List


@dataclass
class Transaction:
    id: int
    title: str
    description: str
    price: float
    category: str
    sold: bool
    date_of_sale: datetime
    image: str = ""

    def to_dict(self) -> Dict[str, object]:
        """Return the wire representation used by the API."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "sold": self.sold,
            "dateOfSale": self.date_of_sale.isoformat(),
            "image": self.image,
        }


@dataclass(frozen=True)
class PriceRange:
    low: float
    high: float = math.inf

    @property
    def label(self) -> str:
        upper = "above" if math.isinf(self.high) else f"{self.high:g}"
        return f"{self.low:g}-{upper}"


# Lower bounds start one above the previous upper bound, so 100, 200, ...
# and fractional prices between e.g. 100 and 101 land in no bucket.
PRICE_RANGES: List[PriceRange] = [
    PriceRange(0, 100),
    PriceRange(101, 200),
    PriceRange(201, 300),
    PriceRange(301, 400),
    PriceRange(401, 500),
    PriceRange(501, 600),
    PriceRange(601, 700),
    PriceRange(701, 800),
    PriceRange(801, 900),
    PriceRange(901),
]
