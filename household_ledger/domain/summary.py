"""Monthly statement and category breakdown built from ledger entries and card installments"""

from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from household_ledger.domain.installments import aggregate_due_in
from household_ledger.domain.models import (
    CategoryBreakdown,
    CreditPurchase,
    EntryKind,
    LedgerEntry,
    MonthlySummary,
    RejectedRecord,
)

ZERO = Decimal("0")

CHART_PALETTE = ("#FF6384", "#36A2EB", "#FFCE56", "#4BC0C0", "#9966FF")

UNCATEGORIZED = "Sin categoría"


def entries_in_month(entries: Iterable[LedgerEntry], month: int, year: int) -> List[LedgerEntry]:
    """Ledger entries whose occurred_at falls in the given month and year"""
    return [e for e in entries if e.occurred_at.month == month and e.occurred_at.year == year]


def entries_in_year(entries: Iterable[LedgerEntry], year: int) -> List[LedgerEntry]:
    return [e for e in entries if e.occurred_at.year == year]


def build_monthly_summary(
    entries: Iterable[LedgerEntry],
    purchases: Iterable[CreditPurchase],
    month: int,
    year: int,
    rejected: Tuple[RejectedRecord, ...] = (),
) -> MonthlySummary:
    """
    Join the month's ledger entries with the card installments due that month.

    `rejected` carries records the caller already failed to decode so they
    surface alongside any purchase the amortization step rejects.
    """
    credit = aggregate_due_in(purchases, month, year)
    month_entries = entries_in_month(entries, month, year)

    total_income = ZERO
    total_fixed = ZERO
    for entry in month_entries:
        if entry.kind is EntryKind.INCOME:
            total_income += entry.amount
        elif entry.kind is EntryKind.FIXED_EXPENSE:
            total_fixed += entry.amount
        elif entry.kind is EntryKind.CREDIT_CARD_INSTALLMENT:
            # legacy card rows; card charges are counted via `credit`
            continue

    return MonthlySummary(
        month=month,
        year=year,
        total_income=total_income,
        total_fixed=total_fixed,
        total_credit=credit.total,
        entries=tuple(month_entries),
        credit_items=credit.items,
        rejected=tuple(rejected) + credit.rejected,
    )


def build_category_breakdown(entries: Iterable[LedgerEntry], month: int, year: int) -> CategoryBreakdown:
    """Fixed-expense totals per category for the month, in first-seen order"""
    sums: Dict[str, Decimal] = {}
    for entry in entries_in_month(entries, month, year):
        if entry.kind is EntryKind.FIXED_EXPENSE:
            label = entry.category.strip() or UNCATEGORIZED
            sums[label] = sums.get(label, ZERO) + entry.amount
        elif entry.kind in (EntryKind.INCOME, EntryKind.CREDIT_CARD_INSTALLMENT):
            continue

    labels = tuple(sums)
    return CategoryBreakdown(
        month=month,
        year=year,
        labels=labels,
        values=tuple(sums[label] for label in labels),
        colors=tuple(CHART_PALETTE[i % len(CHART_PALETTE)] for i in range(len(labels))),
    )
