"""/v1/summary - monthly totals and category chart data"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from household_ledger.api.dependencies import get_current_identity
from household_ledger.api.v1.schemas import CategoryBreakdownResponse, SummaryResponse
from household_ledger.domain.summary import build_category_breakdown, build_monthly_summary
from household_ledger.infrastructure.database.repositories import (
    CreditPurchaseRepository,
    LedgerEntryRepository,
)
from household_ledger.infrastructure.database.session import get_db
from household_ledger.utils.date_utils import resolve_period

router = APIRouter(dependencies=[Depends(get_current_identity)])


@router.get("/summary", response_model=SummaryResponse)
def monthly_summary(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Income, fixed expenses and card installments for a month.

    Returns:
        Totals for the summary cards (income, outgoing, remaining), the
        month's entries and the card installments due
    """
    month, year = resolve_period(month, year)

    # Both collections are fetched in full, then joined here
    entries = LedgerEntryRepository(db).snapshot()
    purchases = CreditPurchaseRepository(db).snapshot()

    summary = build_monthly_summary(
        entries.records,
        purchases.records,
        month,
        year,
        rejected=entries.rejected + purchases.rejected,
    )

    return SummaryResponse.from_domain(summary)


@router.get("/summary/categories", response_model=CategoryBreakdownResponse)
def category_breakdown(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None),
    db: Session = Depends(get_db),
):
    """Fixed-expense totals per category, shaped for a pie chart"""
    month, year = resolve_period(month, year)
    entries = LedgerEntryRepository(db).snapshot()
    return CategoryBreakdownResponse.from_domain(build_category_breakdown(entries.records, month, year))
