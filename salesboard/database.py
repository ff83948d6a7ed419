import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List

from salesboard.core.filters import TransactionQuery
from salesboard.core.models import Transaction
from salesboard.errors import StoreError

logger = logging.getLogger(__name__)


def _init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            price REAL NOT NULL,
            category TEXT,
            sold INTEGER NOT NULL,
            date_of_sale TEXT NOT NULL,
            image TEXT
        )
        """
    )
    conn.commit()


def _icontains(haystack, needle) -> int:
    if haystack is None or needle is None:
        return 0
    return int(str(needle).casefold() in str(haystack).casefold())


def connect(db_path: str) -> sqlite3.Connection:
    """Open *db_path*, creating the schema if needed.

    The returned connection has the ``icontains(text, needle)`` SQL function
    registered for case-insensitive substring matching.
    """
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.create_function("icontains", 2, _icontains, deterministic=True)
    _init_db(conn)
    return conn


def _to_utc_text(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="seconds")


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=int(row["id"]),
        title=row["title"],
        description=row["description"],
        price=float(row["price"]),
        category=row["category"],
        sold=bool(row["sold"]),
        date_of_sale=datetime.fromisoformat(row["date_of_sale"]),
        image=row["image"] or "",
    )


def replace_transactions(db_path: str, transactions: Iterable[Transaction]) -> int:
    """Replace the whole store contents with *transactions*.

    The delete and the inserts run in one SQLite transaction, so readers see
    either the previous generation or the new one, never an empty or partial
    table. Returns the number of inserted rows.
    """
    rows = [
        (
            tx.id,
            tx.title,
            tx.description,
            float(tx.price),
            tx.category,
            int(bool(tx.sold)),
            _to_utc_text(tx.date_of_sale),
            tx.image,
        )
        for tx in transactions
    ]

    conn = connect(db_path)
    try:
        with conn:
            deleted = conn.execute("DELETE FROM transactions").rowcount
            conn.executemany(
                """
                INSERT INTO transactions
                (id, title, description, price, category, sold, date_of_sale, image)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
    except sqlite3.Error as exc:
        raise StoreError(f"Could not replace transactions: {exc}") from exc
    finally:
        conn.close()

    logger.info("Replaced %d stored transaction(s) with %d new one(s)", deleted, len(rows))
    return len(rows)


def count_transactions(db_path: str, where: str = "", params: Iterable[object] = ()) -> int:
    conn = connect(db_path)
    try:
        row = conn.execute(f"SELECT COUNT(*) FROM transactions{where}", tuple(params)).fetchone()
        return int(row[0])
    finally:
        conn.close()


@dataclass
class TransactionPage:
    transactions: List[Transaction] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 10

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.per_page)

    def to_dict(self) -> Dict[str, object]:
        return {
            "transactions": [tx.to_dict() for tx in self.transactions],
            "total": self.total,
            "page": self.page,
            "totalPages": self.total_pages,
        }


def query_transactions(db_path: str, query: TransactionQuery) -> TransactionPage:
    """Return one page of transactions matching *query* plus the unpaged total."""

    conn = connect(db_path)
    try:
        rows = conn.execute(
            f"""
            SELECT id, title, description, price, category, sold, date_of_sale, image
            FROM transactions
            {query.where}
            ORDER BY id
            LIMIT ? OFFSET ?
            """,
            query.params + (query.limit, query.skip),
        ).fetchall()
        total_row = conn.execute(
            f"SELECT COUNT(*) FROM transactions{query.where}",
            query.params,
        ).fetchone()
    finally:
        conn.close()

    return TransactionPage(
        transactions=[_row_to_transaction(r) for r in rows],
        total=int(total_row[0]),
        page=query.page,
        per_page=query.per_page,
    )
