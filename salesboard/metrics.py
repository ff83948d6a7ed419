from __future__ import annotations

import math
from typing import Dict, List

from salesboard.core.filters import build_month_filter
from salesboard.core.models import PRICE_RANGES, PriceRange
from salesboard.database import connect


def _extend_where(where: str, condition: str) -> str:
    return f"{where} AND {condition}" if where else f" WHERE {condition}"


def sales_statistics(db_path: str, month: object) -> Dict[str, object]:
    """Total sale amount and sold/unsold item counts for a calendar month.

    The amount sums the price of every record in the month, sold or not;
    ``sold`` only splits the item counts.
    """

    where, params = build_month_filter(month)
    conn = connect(db_path)
    try:
        row = conn.execute(
            f"""
            SELECT COALESCE(SUM(price), 0.0) AS total,
                   COALESCE(SUM(CASE WHEN sold = 1 THEN 1 ELSE 0 END), 0) AS sold,
                   COALESCE(SUM(CASE WHEN sold = 0 THEN 1 ELSE 0 END), 0) AS not_sold
            FROM transactions
            {where}
            """,
            params,
        ).fetchone()
    finally:
        conn.close()

    total = round(float(row["total"] or 0.0), 2)
    return {
        "totalSaleAmount": int(total) if total.is_integer() else total,
        "totalSoldItems": int(row["sold"]),
        "totalNotSoldItems": int(row["not_sold"]),
    }


def _range_condition(price_range: PriceRange) -> tuple[str, list[float]]:
    if math.isinf(price_range.high):
        return "price >= ?", [price_range.low]
    return "price >= ? AND price < ?", [price_range.low, price_range.high]


def price_range_chart(db_path: str, month: object) -> List[Dict[str, object]]:
    """Count the month's records in each of the fixed price buckets."""

    where, params = build_month_filter(month)
    conn = connect(db_path)
    try:
        result = []
        for price_range in PRICE_RANGES:
            condition, bounds = _range_condition(price_range)
            row = conn.execute(
                f"SELECT COUNT(*) FROM transactions{_extend_where(where, condition)}",
                params + tuple(bounds),
            ).fetchone()
            result.append({"range": price_range.label, "count": int(row[0])})
        return result
    finally:
        conn.close()


def category_chart(db_path: str, month: object) -> List[Dict[str, object]]:
    """Number of records per category for a calendar month."""

    where, params = build_month_filter(month)
    conn = connect(db_path)
    try:
        rows = conn.execute(
            f"""
            SELECT category, COUNT(*) AS count
            FROM transactions
            {where}
            GROUP BY category
            ORDER BY category
            """,
            params,
        ).fetchall()
    finally:
        conn.close()
    return [{"category": row["category"], "count": int(row["count"])} for row in rows]


def combined_report(db_path: str, month: object) -> Dict[str, object]:
    return {
        "statistics": sales_statistics(db_path, month),
        "barChart": price_range_chart(db_path, month),
        "pieChart": category_chart(db_path, month),
    }
