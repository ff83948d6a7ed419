import json
from datetime import datetime, timezone

import pytest

from salesboard.core.models import Transaction
from salesboard.database import replace_transactions


def _tx(tx_id, title, description, price, category, sold, when):
    return Transaction(
        id=tx_id,
        title=title,
        description=description,
        price=price,
        category=category,
        sold=sold,
        date_of_sale=when,
        image=f"https://example.com/img/{tx_id}.jpg",
    )


def sample_transactions():
    utc = timezone.utc
    return [
        _tx(1, "Mens Casual Shirt", "Slim fit cotton shirt", 50, "men's clothing", True,
            datetime(2021, 5, 10, 9, 30, tzinfo=utc)),
        _tx(2, "Wireless Headphones", "Great electronics deal", 150, "electronics", False,
            datetime(2022, 5, 20, 18, 0, tzinfo=utc)),
        _tx(3, "Gold Ring", "Solid gold band", 999, "jewelery", True,
            datetime(2021, 5, 3, 12, 0, tzinfo=utc)),
        _tx(4, "Backpack", "Fits 15 inch laptops", 100, "men's clothing", False,
            datetime(2021, 6, 1, 8, 0, tzinfo=utc)),
        _tx(5, "Monitor", "ELECTRONICS for gamers", 250, "electronics", True,
            datetime(2022, 6, 15, 20, 45, tzinfo=utc)),
        _tx(6, "Hard Drive", "1 TB storage", 101, "electronics", False,
            datetime(2021, 7, 30, 23, 59, tzinfo=utc)),
    ]


@pytest.fixture
def empty_db(tmp_path):
    return str(tmp_path / "sales.db")


@pytest.fixture
def db_path(empty_db):
    replace_transactions(empty_db, sample_transactions())
    return empty_db


@pytest.fixture
def snapshot_items():
    return [
        {
            "id": 1,
            "title": "Fjallraven Backpack",
            "price": 329.85,
            "description": "Your perfect pack for everyday use",
            "category": "men's clothing",
            "image": "https://example.com/img/1.jpg",
            "sold": False,
            "dateOfSale": "2021-11-27T20:29:54+05:30",
        },
        {
            "id": 2,
            "title": "Mens Casual Premium Slim Fit T-Shirts",
            "price": 44.6,
            "description": "Slim-fitting style",
            "category": "men's clothing",
            "image": "https://example.com/img/2.jpg",
            "sold": True,
            "dateOfSale": "2021-10-27T20:29:54+05:30",
        },
        {
            "id": 3,
            "title": "WD 2TB Elements Portable External Hard Drive",
            "price": 64,
            "description": "USB 3.0 and USB 2.0 compatibility",
            "category": "electronics",
            "image": "https://example.com/img/3.jpg",
            "sold": True,
            "dateOfSale": "2022-05-31T22:00:00-05:00",
        },
    ]


@pytest.fixture
def snapshot_file(tmp_path, snapshot_items):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_items), encoding="utf-8")
    return path
