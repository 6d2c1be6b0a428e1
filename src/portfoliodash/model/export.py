from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable

from .readers import EXECUTION_HEADER
from .records import Transaction

logger = logging.getLogger(__name__)


def transaction_to_row(tx: Transaction) -> list[str]:
    # Decimals are written with their full scale so a re-read is lossless.
    return [
        tx.exec_id,
        tx.date,
        tx.symbol,
        tx.side.value,
        str(tx.quantity),
        str(tx.price_per_share),
        str(tx.total_amount),
    ]


def write_transactions(path: str | Path, transactions: Iterable[Transaction]) -> Path:
    """Write transactions in the 7-column execution format and return the path."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(out_path, "w", encoding="utf-8", newline="") as fp:
        writer = csv.writer(fp)
        writer.writerow(EXECUTION_HEADER)
        for tx in transactions:
            writer.writerow(transaction_to_row(tx))
            count += 1
    logger.info("Wrote %d transaction(s) to %s", count, out_path)
    return out_path
