from __future__ import annotations

import logging

from salesboard.database import replace_transactions
from salesboard.loaders.base import BaseLoader
from salesboard.loaders.json_snapshot import JSONSnapshotLoader

logger = logging.getLogger(__name__)


def initialize_database(db_path: str, source: str, loader: BaseLoader | None = None) -> int:
    """Fetch the snapshot at *source* and make it the store's only contents.

    Fetching and normalizing happen before the store is touched, so a failed
    fetch or a malformed payload leaves the previous load generation intact.
    Returns the number of inserted transactions.
    """

    loader = loader or JSONSnapshotLoader()
    logger.info("Fetching transaction snapshot from %s", source)
    transactions = loader.load(source)

    logger.info("Replacing store contents at %s", db_path)
    count = replace_transactions(db_path, transactions)
    logger.info("Database initialization completed: %d record(s)", count)
    return count
