"""Installment amortization for credit-card purchases"""

import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from household_ledger.domain.exceptions import InvalidInstallmentCount, InvalidTargetPeriod, InvalidRecordError
from household_ledger.domain.models import (
    MAX_INSTALLMENTS,
    CreditPurchase,
    DueItem,
    InstallmentDue,
    MonthlyCreditTotal,
    RejectedRecord,
    ScheduledInstallment,
)
from household_ledger.utils.date_utils import add_months, month_key, months_between

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _check_installment_count(purchase: CreditPurchase) -> None:
    count = purchase.installment_count
    if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= MAX_INSTALLMENTS:
        raise InvalidInstallmentCount(
            f"Purchase {purchase.id} has installment count {count!r}, "
            f"expected an integer between 1 and {MAX_INSTALLMENTS}"
        )


def _check_target_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise InvalidTargetPeriod(f"Month must be between 1 and 12, got {month}")


def installments_due_in(purchase: CreditPurchase, target_month: int, target_year: int) -> Optional[InstallmentDue]:
    """
    Installment a purchase owes in the target month, or None.

    The purchase month itself is offset 0, so a purchase with N installments
    is due in the N consecutive months starting at its purchase month.

    Amounts are exact Decimal quotients; round with utils.money.to_cents
    when presenting, never before summing.

    Raises:
        InvalidInstallmentCount: installment_count outside 1..MAX_INSTALLMENTS
        InvalidTargetPeriod: target_month outside 1..12
    """
    _check_installment_count(purchase)
    _check_target_month(target_month)

    elapsed = months_between(
        purchase.purchase_date.month,
        purchase.purchase_date.year,
        target_month,
        target_year,
    )
    if not 0 <= elapsed < purchase.installment_count:
        return None

    secondary = purchase.total_amount_secondary or ZERO
    return InstallmentDue(
        installment_amount=purchase.total_amount_primary / purchase.installment_count,
        installment_amount_secondary=secondary / purchase.installment_count,
        installments_remaining=purchase.installment_count - elapsed,
    )


def aggregate_due_in(purchases: Iterable[CreditPurchase], target_month: int, target_year: int) -> MonthlyCreditTotal:
    """
    Collect every installment due in the target month.

    Purchases are summed in the order given; the repository lists them by
    creation time so repeated runs over the same data give identical totals.
    A purchase that fails validation is logged and reported in `rejected`,
    the rest still count.
    """
    _check_target_month(target_month)

    total = ZERO
    total_secondary = ZERO
    items: List[DueItem] = []
    rejected: List[RejectedRecord] = []

    for purchase in purchases:
        try:
            due = installments_due_in(purchase, target_month, target_year)
        except InvalidRecordError as e:
            logger.warning(
                f"Skipping purchase: {e}",
                extra={"record_id": purchase.id, "step": "aggregate_due"},
            )
            rejected.append(RejectedRecord(record_id=purchase.id, reason=str(e)))
            continue

        if due is None:
            continue
        total += due.installment_amount
        total_secondary += due.installment_amount_secondary
        items.append(DueItem(purchase=purchase, due=due))

    return MonthlyCreditTotal(
        total=total,
        total_secondary=total_secondary,
        items=tuple(items),
        rejected=tuple(rejected),
    )


def total_due_in(purchases: Iterable[CreditPurchase], target_month: int, target_year: int) -> Decimal:
    """Sum of installments due in the target month; 0 for no purchases"""
    return aggregate_due_in(purchases, target_month, target_year).total


def schedule_all_installments(purchase: CreditPurchase) -> List[ScheduledInstallment]:
    """
    Expand a purchase into one entry per installment month.

    Starts at the purchase month and runs for installment_count consecutive
    months, rolling December into January of the next year.

    Example:
        2024-11-01, 4 installments -> 2024-11, 2024-12, 2025-01, 2025-02
    """
    _check_installment_count(purchase)

    amount = purchase.total_amount_primary / purchase.installment_count
    amount_secondary = (purchase.total_amount_secondary or ZERO) / purchase.installment_count

    schedule = []
    for offset in range(purchase.installment_count):
        month, year = add_months(purchase.purchase_date.month, purchase.purchase_date.year, offset)
        schedule.append(
            ScheduledInstallment(month=month, year=year, amount=amount, amount_secondary=amount_secondary)
        )
    return schedule


def project_monthly_totals(purchases: Iterable[CreditPurchase]) -> Dict[str, Decimal]:
    """Installment totals per YYYY-MM across all purchases, in chronological order"""
    totals: Dict[Tuple[int, int], Decimal] = {}
    for purchase in purchases:
        try:
            schedule = schedule_all_installments(purchase)
        except InvalidRecordError as e:
            logger.warning(
                f"Skipping purchase: {e}",
                extra={"record_id": purchase.id, "step": "projection"},
            )
            continue

        for installment in schedule:
            key = (installment.year, installment.month)
            totals[key] = totals.get(key, ZERO) + installment.amount

    return OrderedDict((month_key(month, year), total) for (year, month), total in sorted(totals.items()))
