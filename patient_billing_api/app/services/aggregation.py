"""
Financial analytics over a snapshot of transactions.

Every function here is pure: it receives the transactions to work on
(usually ``TransactionRead`` objects loaded by ``TransactionService``),
never mutates them and never touches the database.  Anything with
``patient_id``, ``service_type``, ``amount``, ``transaction_date`` and
``status`` attributes is accepted.

Time-dependent functions take the reference instant ``now`` as an
argument so results are reproducible; when it is omitted the current
UTC time is used.  Naive datetimes are read as UTC.

Status handling
---------------
Statuses are normally ``TransactionStatus`` members, validated when a
record is created.  A record carrying some other label (only possible
when a caller builds records by hand) is left out of the paid/unpaid
sums and shows up only in ``count_by_status`` and
``revenue_by_status``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

DEFAULT_MONTHS = 12
# Longest trend served over HTTP (100 years).
MAX_MONTHS = 1200
DEFAULT_RECENT_DAYS = 7
RECENT_LIMIT = 10

PAID = "Paid"
UNPAID = "Unpaid"

ZERO = Decimal("0.00")
_CENTS = Decimal("0.01")

# Fixed English abbreviations; ``%b`` would follow the process locale.
_MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class TransactionLike(Protocol):
    patient_id: int
    service_type: str
    amount: Decimal
    transaction_date: datetime
    status: Any


@dataclass(frozen=True)
class PatientTotals:
    """Totals for one patient.  ``paid`` is derived, never summed."""

    patient_id: int
    total: Decimal
    unpaid: Decimal

    @property
    def paid(self) -> Decimal:
        return self.total - self.unpaid


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------

def _money(value: Any) -> Decimal:
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


def _sum_amounts(transactions: Iterable[TransactionLike]) -> Decimal:
    total = ZERO
    for tx in transactions:
        total += _money(tx.amount)
    return total


def status_label(status: Any) -> str:
    """Return the plain text label of a status (enum member or string)."""
    return str(getattr(status, "value", status))


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _reference_instant(now: Optional[datetime]) -> datetime:
    return as_utc(now) if now is not None else datetime.now(timezone.utc)


def month_start(value: datetime) -> datetime:
    """First instant of the month containing ``value``."""
    return value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def add_months(month: datetime, count: int) -> datetime:
    """Shift a first-of-month instant by ``count`` months (may be negative)."""
    index = month.year * 12 + (month.month - 1) + count
    return month.replace(year=index // 12, month=index % 12 + 1)


def month_label(month: datetime) -> str:
    """Short label used as the trend key, e.g. ``"Jan 2025"``."""
    return f"{_MONTH_ABBREVIATIONS[month.month - 1]} {month.year:04d}"


def normalize_months(months: Optional[int]) -> int:
    if months is None or months <= 0:
        return DEFAULT_MONTHS
    return months


def normalize_days(days: Optional[int]) -> int:
    if days is None or days <= 0:
        return DEFAULT_RECENT_DAYS
    return days


def month_window(
    months: Optional[int] = DEFAULT_MONTHS, now: Optional[datetime] = None
) -> Tuple[datetime, datetime]:
    """Return ``(start, end)`` of the trend window, ``end`` exclusive.

    ``start`` is the first instant of the oldest month and ``end`` the
    first instant of the month after the one containing ``now``, so
    the whole current month is covered.  Callers use it to pre-filter
    the transactions they load.
    """
    months = normalize_months(months)
    end_month = month_start(_reference_instant(now))
    start_month = add_months(end_month, -(months - 1))
    return start_month, add_months(end_month, 1)


# ----------------------------------------------------------------------
# Totals and breakdowns
# ----------------------------------------------------------------------

def transaction_count(transactions: Sequence[TransactionLike]) -> int:
    return len(transactions)


def total_revenue(transactions: Iterable[TransactionLike]) -> Decimal:
    """Sum of all amounts."""
    return _sum_amounts(transactions)


def paid_revenue(transactions: Iterable[TransactionLike]) -> Decimal:
    return _sum_amounts(tx for tx in transactions if status_label(tx.status) == PAID)


def unpaid_revenue(transactions: Iterable[TransactionLike]) -> Decimal:
    return _sum_amounts(tx for tx in transactions if status_label(tx.status) == UNPAID)


def revenue_by_status(transactions: Iterable[TransactionLike]) -> Dict[str, Decimal]:
    """Summed amount per status label, in first-seen order."""
    totals: Dict[str, Decimal] = {}
    for tx in transactions:
        label = status_label(tx.status)
        totals[label] = totals.get(label, ZERO) + _money(tx.amount)
    return totals


def count_by_status(transactions: Iterable[TransactionLike]) -> Dict[str, int]:
    """Number of transactions per status label, in first-seen order."""
    counts: Dict[str, int] = {}
    for tx in transactions:
        label = status_label(tx.status)
        counts[label] = counts.get(label, 0) + 1
    return counts


def revenue_by_service_type(transactions: Iterable[TransactionLike]) -> Dict[str, Decimal]:
    """Summed amount per service type, highest revenue first.

    Service types with equal revenue keep the order in which they were
    first seen (``sorted`` is stable).
    """
    totals: Dict[str, Decimal] = {}
    for tx in transactions:
        totals[tx.service_type] = totals.get(tx.service_type, ZERO) + _money(tx.amount)
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return dict(ranked)


# ----------------------------------------------------------------------
# Time windows
# ----------------------------------------------------------------------

def monthly_revenue(
    transactions: Iterable[TransactionLike],
    months: Optional[int] = DEFAULT_MONTHS,
    now: Optional[datetime] = None,
) -> Dict[str, Decimal]:
    """Revenue per calendar month for the last ``months`` months.

    The result has exactly ``months`` entries (non-positive values fall
    back to 12), ordered oldest to newest and ending with the month
    that contains ``now``.  Months without transactions report zero.

    >>> from types import SimpleNamespace as T
    >>> txs = [T(amount=Decimal("100"), transaction_date=datetime(2025, 1, 10))]
    >>> monthly_revenue(txs, 2, now=datetime(2025, 2, 15))
    {'Jan 2025': Decimal('100.00'), 'Feb 2025': Decimal('0.00')}
    """
    months = normalize_months(months)
    start, end = month_window(months, now)

    buckets: Dict[datetime, Decimal] = {}
    for tx in transactions:
        when = as_utc(tx.transaction_date)
        if not start <= when < end:
            continue
        bucket = month_start(when)
        buckets[bucket] = buckets.get(bucket, ZERO) + _money(tx.amount)

    result: Dict[str, Decimal] = {}
    for offset in range(months):
        month = add_months(start, offset)
        result[month_label(month)] = buckets.get(month, ZERO)
    return result


def recent_transactions(
    transactions: Iterable[TransactionLike],
    days: Optional[int] = DEFAULT_RECENT_DAYS,
    now: Optional[datetime] = None,
    limit: int = RECENT_LIMIT,
) -> List[TransactionLike]:
    """Transactions dated within the last ``days`` days, newest first.

    The lower bound ``now - days`` is inclusive.  There is no upper
    bound: transactions dated after ``now`` (scheduled or mistyped
    dates) are listed too, ahead of everything else.  At most ``limit``
    records are returned.
    """
    cutoff = _reference_instant(now) - timedelta(days=normalize_days(days))
    selected = [tx for tx in transactions if as_utc(tx.transaction_date) >= cutoff]
    selected.sort(key=lambda tx: as_utc(tx.transaction_date), reverse=True)
    return selected[:limit]


# ----------------------------------------------------------------------
# Per patient
# ----------------------------------------------------------------------

def patient_totals(transactions: Iterable[TransactionLike], patient_id: int) -> PatientTotals:
    """Total and unpaid amounts for one patient.

    No existence check is made: an unknown patient simply has no
    transactions and gets zero totals.
    """
    owned = [tx for tx in transactions if tx.patient_id == patient_id]
    return PatientTotals(
        patient_id=patient_id,
        total=total_revenue(owned),
        unpaid=unpaid_revenue(owned),
    )


def dashboard(
    transactions: Sequence[TransactionLike],
    now: Optional[datetime] = None,
    months: Optional[int] = DEFAULT_MONTHS,
    days: Optional[int] = DEFAULT_RECENT_DAYS,
) -> Dict[str, Any]:
    """All dashboard figures computed from one snapshot and one ``now``.

    Keys match the fields of ``schemas.analytics.DashboardAnalytics``.
    """
    now = _reference_instant(now)
    return {
        "total_transactions_count": transaction_count(transactions),
        "total_revenue": total_revenue(transactions),
        "paid_revenue": paid_revenue(transactions),
        "unpaid_revenue": unpaid_revenue(transactions),
        "recent_transactions": recent_transactions(transactions, days, now),
        "monthly_revenue": monthly_revenue(transactions, months, now),
        "transaction_count_by_status": count_by_status(transactions),
        "revenue_by_service_type": revenue_by_service_type(transactions),
    }
