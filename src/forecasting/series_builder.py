"""
Series Builder

Aggregates raw transactions into a zero-filled monthly series ending at an
explicit anchor month.
"""

import logging
import math
from datetime import date
from typing import Dict, Iterable, List, Union

from .exceptions import InvalidInputError
from .models import MonthlyPoint, Transaction, TransactionKind, add_months, parse_kind

logger = logging.getLogger(__name__)


def _month_key(day: date) -> int:
    return day.year * 12 + (day.month - 1)


def prepare_monthly_series(
    transactions: Iterable[Transaction],
    kind: Union[str, TransactionKind],
    months_back: int = 12,
    *,
    as_of: date
) -> List[MonthlyPoint]:
    """
    Build the trailing monthly totals for one transaction type.

    Args:
        transactions: Transaction records (any kind, any dates)
        kind: Which type to aggregate (income or expense)
        months_back: Number of months in the window, ending at as_of's month
        as_of: Anchor date; its calendar month is the last point

    Returns:
        Exactly `months_back` ascending, contiguous MonthlyPoints, months
        without matching activity valued 0. Empty when no transactions are
        given at all.

    Raises:
        InvalidInputError: If months_back is negative or a transaction is malformed
    """
    kind = parse_kind(kind)
    if isinstance(months_back, bool) or not isinstance(months_back, int):
        raise InvalidInputError("months_back", "must be an integer")
    if months_back < 0:
        raise InvalidInputError("months_back", "must not be negative")

    records = list(transactions)
    if not records or months_back == 0:
        return []

    anchor = date(as_of.year, as_of.month, 1)
    try:
        first_month = add_months(anchor, -(months_back - 1))
    except ValueError:
        raise InvalidInputError("as_of", f"{months_back}-month window before {anchor.isoformat()} starts before year 1")
    first_key = _month_key(first_month)
    last_key = _month_key(anchor)

    totals: Dict[int, float] = {key: 0.0 for key in range(first_key, last_key + 1)}
    skipped = 0

    for i, txn in enumerate(records):
        if not isinstance(txn, Transaction):
            raise InvalidInputError(f"transactions[{i}]", "must be a Transaction")
        if not math.isfinite(txn.amount):
            raise InvalidInputError(f"transactions[{i}].amount", "must be finite")
        if txn.kind != kind:
            continue

        key = _month_key(txn.date)
        if key in totals:
            totals[key] += txn.amount
        else:
            skipped += 1

    if skipped:
        logger.debug(f"Ignored {skipped} {kind.value} transaction(s) outside the {months_back}-month window")

    return [
        MonthlyPoint(date=add_months(first_month, offset), value=totals[key])
        for offset, key in enumerate(range(first_key, last_key + 1))
    ]


# Name used by the analytics view
prepare_monthly_data = prepare_monthly_series
