"""Domain models - pure Python dataclasses representing household ledger entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Generic, Optional, Tuple, TypeVar

# Upper bound on monthly installments per purchase (30 years)
MAX_INSTALLMENTS = 360


class EntryKind(str, Enum):
    """Closed set of money movements shown on a monthly statement"""

    INCOME = "income"
    FIXED_EXPENSE = "fixed_expense"
    CREDIT_CARD_INSTALLMENT = "credit_card_installment"


@dataclass(frozen=True)
class CreditPurchase:
    """Credit-card charge split into equal monthly installments"""

    id: str
    purchase_date: date
    description: str
    total_amount_primary: Decimal  # pesos
    installment_count: int
    total_amount_secondary: Decimal = Decimal("0")  # dollars


@dataclass(frozen=True)
class LedgerEntry:
    """Income or fixed-expense record"""

    id: str
    amount: Decimal
    kind: EntryKind
    category: str
    occurred_at: date
    recorded_by: str
    description: str = ""
    settled: bool = False  # only meaningful for FIXED_EXPENSE


@dataclass(frozen=True)
class InstallmentDue:
    """Installment of a purchase falling due in a target month"""

    installment_amount: Decimal
    installment_amount_secondary: Decimal
    installments_remaining: int


@dataclass(frozen=True)
class ScheduledInstallment:
    """One month of a purchase's full installment schedule"""

    month: int
    year: int
    amount: Decimal
    amount_secondary: Decimal


@dataclass(frozen=True)
class RejectedRecord:
    """Stored document that failed validation"""

    record_id: str
    reason: str


@dataclass(frozen=True)
class DueItem:
    """Purchase paired with the installment it owes in a target month"""

    purchase: CreditPurchase
    due: InstallmentDue


@dataclass(frozen=True)
class MonthlyCreditTotal:
    """Result of aggregating credit purchases for one month"""

    total: Decimal
    total_secondary: Decimal
    items: Tuple[DueItem, ...] = ()
    rejected: Tuple[RejectedRecord, ...] = ()


@dataclass(frozen=True)
class MonthlySummary:
    """Joined income, fixed expenses and card installments for one month"""

    month: int
    year: int
    total_income: Decimal
    total_fixed: Decimal
    total_credit: Decimal
    entries: Tuple[LedgerEntry, ...]
    credit_items: Tuple[DueItem, ...]
    rejected: Tuple[RejectedRecord, ...] = ()

    @property
    def total_outgoing(self) -> Decimal:
        return self.total_fixed + self.total_credit

    @property
    def remaining(self) -> Decimal:
        return self.total_income - self.total_outgoing


@dataclass(frozen=True)
class CategoryBreakdown:
    """Per-category spending for the pie chart"""

    month: int
    year: int
    labels: Tuple[str, ...]
    values: Tuple[Decimal, ...]
    colors: Tuple[str, ...]


@dataclass(frozen=True)
class Identity:
    """Authenticated user as reported by the identity provider"""

    uid: str
    email: str
    display_name: str
    photo_url: Optional[str] = None


T = TypeVar("T")


@dataclass(frozen=True)
class Snapshot(Generic[T]):
    """Immutable view of a collection at one point in time"""

    records: Tuple[T, ...] = ()
    rejected: Tuple[RejectedRecord, ...] = ()

    def get(self, record_id: str) -> Optional[T]:
        return next((r for r in self.records if getattr(r, "id", None) == record_id), None)
