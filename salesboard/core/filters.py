# salesboard/core/filters.py
"""Translate raw request parameters into SQL filters over the transactions table.

Every parser here is lenient: malformed input degrades to a default or to a
filter that matches nothing, it never raises.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List, Tuple

DEFAULT_PER_PAGE = 10

MONTH_EXPRESSION = "CAST(strftime('%m', date_of_sale) AS INTEGER)"
MATCH_NOTHING = "1 = 0"

_LEADING_INT_RX = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class TransactionQuery:
    where: str
    params: Tuple[object, ...]
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page


def _parse_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _parse_month(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT_RX.match(str(value))
    return int(match.group(1)) if match else None


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_number(text: str) -> float | None:
    """Return *text* as a finite float, or None when it is not numeric."""
    try:
        number = float(text)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_page(value: object) -> int:
    page = _parse_int(value)
    if page is None or page < 1:
        return 1
    return page


def parse_per_page(
    value: object,
    default: int = DEFAULT_PER_PAGE,
    maximum: int | None = None,
) -> int:
    """Rows per page; *maximum* caps it only when given."""
    per_page = _parse_int(value)
    if per_page is None or per_page < 1:
        return default
    return per_page if maximum is None else min(per_page, maximum)


def month_conditions(month: object) -> Tuple[List[str], List[object]]:
    """Conditions matching records sold in calendar *month* of any year.

    A blank month adds no constraint. Strings are read by their leading
    integer (" 5.0" and "5th" mean 5); a month without one yields a condition
    that never holds. Out of range integers simply match no row.
    """
    if _is_blank(month):
        return [], []
    month_num = _parse_month(month)
    if month_num is None:
        return [MATCH_NOTHING], []
    return [f"{MONTH_EXPRESSION} = ?"], [month_num]


def search_conditions(search: str | None) -> Tuple[List[str], List[object]]:
    """OR of title/description substring matches and, if numeric, price equality."""
    if _is_blank(search):
        return [], []
    text = str(search).strip()
    alternatives = ["icontains(title, ?)", "icontains(description, ?)"]
    params: List[object] = [text, text]
    number = parse_number(text)
    if number is not None:
        alternatives.append("price = ?")
        params.append(number)
    return ["(" + " OR ".join(alternatives) + ")"], params


def build_where(conditions: List[str]) -> str:
    return " WHERE " + " AND ".join(conditions) if conditions else ""


def build_month_filter(month: object) -> Tuple[str, Tuple[object, ...]]:
    """WHERE clause and parameters for the month-only filter used by metrics."""
    conditions, params = month_conditions(month)
    return build_where(conditions), tuple(params)


def build_transaction_query(
    month: object = None,
    search: str | None = None,
    page: object = None,
    per_page: object = None,
    *,
    default_per_page: int = DEFAULT_PER_PAGE,
    max_per_page: int | None = None,
) -> TransactionQuery:
    """Combine month, search and pagination into a single query description."""
    conditions, params = month_conditions(month)
    search_conds, search_params = search_conditions(search)
    conditions.extend(search_conds)
    params.extend(search_params)
    return TransactionQuery(
        where=build_where(conditions),
        params=tuple(params),
        page=parse_page(page),
        per_page=parse_per_page(per_page, default_per_page, max_per_page),
    )
