# salesboard/loaders/json_snapshot.py
import json
import logging
import math
import re
import urllib.error
import urllib.request
from pathlib import Path

import pandas as pd

from salesboard.core.models import Transaction
from salesboard.errors import DatasetFetchError, DatasetFormatError
from salesboard.loaders.base import BaseLoader

logger = logging.getLogger(__name__)

_URL_RX = re.compile(r"^(https?|file)://", re.I)
_TRUE_STRINGS = {"true", "1", "yes", "y"}


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _as_text(value):
    return "" if value is None else str(value).strip()


def normalize_record(item, position):
    """
    Build a Transaction from one snapshot item.
    position is the 1-based index of the item and becomes its id when the
    item carries none.
    """
    if not isinstance(item, dict):
        raise DatasetFormatError(f"Record {position} is not an object: {item!r}")

    try:
        price = float(item['price'])
    except KeyError:
        raise DatasetFormatError(f"Record {position} has no price")
    except (TypeError, ValueError):
        raise DatasetFormatError(f"Record {position} has a non-numeric price: {item['price']!r}")
    if not math.isfinite(price) or price < 0:
        raise DatasetFormatError(f"Record {position} has an invalid price: {price}")

    raw_date = item.get('dateOfSale')
    if raw_date in (None, ''):
        raise DatasetFormatError(f"Record {position} has no dateOfSale")
    if isinstance(raw_date, bool) or not isinstance(raw_date, (str, int, float)):
        raise DatasetFormatError(f"Record {position} has an unparseable dateOfSale: {raw_date!r}")
    try:
        sold_at = pd.to_datetime(raw_date, utc=True)
    except (TypeError, ValueError):
        raise DatasetFormatError(f"Record {position} has an unparseable dateOfSale: {raw_date!r}")
    if pd.isna(sold_at):
        raise DatasetFormatError(f"Record {position} has an unparseable dateOfSale: {raw_date!r}")

    raw_id = item.get('id')
    try:
        tx_id = position if raw_id in (None, '') else int(raw_id)
    except (TypeError, ValueError):
        raise DatasetFormatError(f"Record {position} has a non-integer id: {raw_id!r}")

    return Transaction(
        id=tx_id,
        title=_as_text(item.get('title')),
        description=_as_text(item.get('description')),
        price=price,
        category=_as_text(item.get('category')),
        sold=_as_bool(item.get('sold', False)),
        date_of_sale=sold_at.to_pydatetime(),
        image=_as_text(item.get('image')),
    )


class JSONSnapshotLoader(BaseLoader):
    """
    Reads a JSON array of product transactions from an http(s)/file URL or a
    local path and normalizes every record.
    """
    def __init__(self, config=None):
        config = config or {}
        self.timeout = float(config.get('fetch_timeout', 30))

    def fetch(self, source):
        if _URL_RX.match(source):
            try:
                with urllib.request.urlopen(source, timeout=self.timeout) as resp:
                    return json.load(resp)
            except urllib.error.HTTPError as exc:
                raise DatasetFetchError(f"HTTP {exc.code} fetching {source}") from exc
            except (urllib.error.URLError, OSError) as exc:
                raise DatasetFetchError(f"Could not fetch {source}: {exc}") from exc
            except ValueError as exc:
                raise DatasetFetchError(f"Invalid JSON received from {source}: {exc}") from exc

        try:
            with open(Path(source), encoding='utf-8') as f:
                return json.load(f)
        except OSError as exc:
            raise DatasetFetchError(f"Could not read {source}: {exc}") from exc
        except ValueError as exc:
            raise DatasetFetchError(f"Invalid JSON in {source}: {exc}") from exc

    def load(self, source):
        payload = self.fetch(source)
        if not isinstance(payload, list):
            raise DatasetFormatError(
                f"Expected a JSON array from {source}, got {type(payload).__name__}"
            )
        logger.info("Received %d record(s) from %s", len(payload), source)

        transactions = [normalize_record(item, idx) for idx, item in enumerate(payload, start=1)]
        ids = [tx.id for tx in transactions]
        if len(set(ids)) != len(ids):
            raise DatasetFormatError(f"Duplicate record ids in snapshot from {source}")
        return transactions
