"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, Field, PlainSerializer, field_validator

from household_ledger.domain.models import (
    MAX_INSTALLMENTS,
    CategoryBreakdown,
    CreditPurchase,
    DueItem,
    EntryKind,
    Identity,
    LedgerEntry,
    MonthlySummary,
    RejectedRecord,
    ScheduledInstallment,
)
from household_ledger.utils.money import MAX_AMOUNT, to_cents

Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: str(to_cents(v)), return_type=str, when_used="json"),
]


# --- Session ---


class SignInRequest(BaseModel):
    """Request body for POST /v1/session"""

    id_token: str = Field(..., min_length=1, description="Google ID token")


class IdentitySchema(BaseModel):
    uid: str
    email: str
    display_name: str
    photo_url: Optional[str] = None

    @classmethod
    def from_domain(cls, identity: Identity) -> "IdentitySchema":
        return cls(
            uid=identity.uid,
            email=identity.email,
            display_name=identity.display_name,
            photo_url=identity.photo_url,
        )


class SessionResponse(BaseModel):
    """Response for POST /v1/session"""

    token: str
    identity: IdentitySchema


# --- Shared ---


class RejectedRecordSchema(BaseModel):
    record_id: str
    reason: str

    @classmethod
    def from_domain(cls, rejected: RejectedRecord) -> "RejectedRecordSchema":
        return cls(record_id=rejected.record_id, reason=rejected.reason)


# --- Credit purchases ---


class CreditPurchaseCreate(BaseModel):
    """Request body for POST /v1/credit-purchases"""

    purchase_date: date
    description: str = Field(..., min_length=1)
    total_amount_primary: Decimal = Field(..., ge=0, le=MAX_AMOUNT, description="Amount in pesos")
    total_amount_secondary: Decimal = Field(Decimal("0"), ge=0, le=MAX_AMOUNT, description="Amount in dollars")
    installment_count: int = Field(1, ge=1, le=MAX_INSTALLMENTS)


class CreditPurchaseUpdate(BaseModel):
    """Request body for PATCH /v1/credit-purchases/{id}"""

    purchase_date: Optional[date] = None
    description: Optional[str] = Field(None, min_length=1)
    total_amount_primary: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    total_amount_secondary: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    installment_count: Optional[int] = Field(None, ge=1, le=MAX_INSTALLMENTS)


class CreditPurchaseSchema(BaseModel):
    id: str
    purchase_date: date
    description: str
    total_amount_primary: Money
    total_amount_secondary: Money
    installment_count: int

    @classmethod
    def from_domain(cls, purchase: CreditPurchase) -> "CreditPurchaseSchema":
        return cls(
            id=purchase.id,
            purchase_date=purchase.purchase_date,
            description=purchase.description,
            total_amount_primary=purchase.total_amount_primary,
            total_amount_secondary=purchase.total_amount_secondary,
            installment_count=purchase.installment_count,
        )


class CreditPurchaseList(BaseModel):
    """Response for GET /v1/credit-purchases"""

    purchases: List[CreditPurchaseSchema]
    rejected: List[RejectedRecordSchema] = []


class DueItemSchema(BaseModel):
    """Purchase row in the month's card statement"""

    purchase_id: str
    purchase_date: date
    description: str
    installment_amount: Money
    installment_amount_secondary: Money
    installments_remaining: int
    installment_count: int

    @classmethod
    def from_domain(cls, item: DueItem) -> "DueItemSchema":
        return cls(
            purchase_id=item.purchase.id,
            purchase_date=item.purchase.purchase_date,
            description=item.purchase.description,
            installment_amount=item.due.installment_amount,
            installment_amount_secondary=item.due.installment_amount_secondary,
            installments_remaining=item.due.installments_remaining,
            installment_count=item.purchase.installment_count,
        )


class DueResponse(BaseModel):
    """Response for GET /v1/credit-purchases/due"""

    month: int
    year: int
    total: Money
    total_secondary: Money
    items: List[DueItemSchema]
    rejected: List[RejectedRecordSchema] = []


class ScheduledInstallmentSchema(BaseModel):
    month: int
    year: int
    amount: Money
    amount_secondary: Money

    @classmethod
    def from_domain(cls, installment: ScheduledInstallment) -> "ScheduledInstallmentSchema":
        return cls(
            month=installment.month,
            year=installment.year,
            amount=installment.amount,
            amount_secondary=installment.amount_secondary,
        )


class ScheduleResponse(BaseModel):
    """Response for GET /v1/credit-purchases/{id}/schedule"""

    purchase_id: str
    installments: List[ScheduledInstallmentSchema]


class ProjectionResponse(BaseModel):
    """Response for GET /v1/credit-purchases/projection"""

    monthly_totals: Dict[str, Money]
    rejected: List[RejectedRecordSchema] = []


# --- Ledger entries ---

# Card charges are recorded as credit purchases, not ledger entries
LEDGER_KINDS = (EntryKind.INCOME, EntryKind.FIXED_EXPENSE)


class LedgerEntryCreate(BaseModel):
    """Request body for POST /v1/entries"""

    amount: Decimal = Field(..., ge=0, le=MAX_AMOUNT)
    kind: EntryKind
    category: str = ""
    description: str = ""
    occurred_at: date

    @field_validator("kind")
    @classmethod
    def check_kind(cls, kind: Optional[EntryKind]) -> Optional[EntryKind]:
        if kind is not None and kind not in LEDGER_KINDS:
            raise ValueError("kind must be income or fixed_expense; record card charges as credit purchases")
        return kind


class LedgerEntryUpdate(BaseModel):
    """Request body for PATCH /v1/entries/{id}"""

    amount: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    kind: Optional[EntryKind] = None
    category: Optional[str] = None
    description: Optional[str] = None
    occurred_at: Optional[date] = None
    settled: Optional[bool] = None

    @field_validator("kind")
    @classmethod
    def check_kind(cls, kind: Optional[EntryKind]) -> Optional[EntryKind]:
        if kind is not None and kind not in LEDGER_KINDS:
            raise ValueError("kind must be income or fixed_expense; record card charges as credit purchases")
        return kind


class LedgerEntrySchema(BaseModel):
    id: str
    amount: Money
    kind: EntryKind
    category: str
    description: str
    occurred_at: date
    recorded_by: str
    settled: bool

    @classmethod
    def from_domain(cls, entry: LedgerEntry) -> "LedgerEntrySchema":
        return cls(
            id=entry.id,
            amount=entry.amount,
            kind=entry.kind,
            category=entry.category,
            description=entry.description,
            occurred_at=entry.occurred_at,
            recorded_by=entry.recorded_by,
            settled=entry.settled,
        )


class LedgerEntryList(BaseModel):
    """Response for GET /v1/entries"""

    entries: List[LedgerEntrySchema]
    rejected: List[RejectedRecordSchema] = []


# --- Summary ---


class SummaryResponse(BaseModel):
    """Response for GET /v1/summary"""

    month: int
    year: int
    total_income: Money
    total_fixed: Money
    total_credit: Money
    total_outgoing: Money
    remaining: Money
    entries: List[LedgerEntrySchema]
    credit_items: List[DueItemSchema]
    rejected: List[RejectedRecordSchema] = []

    @classmethod
    def from_domain(cls, summary: MonthlySummary) -> "SummaryResponse":
        return cls(
            month=summary.month,
            year=summary.year,
            total_income=summary.total_income,
            total_fixed=summary.total_fixed,
            total_credit=summary.total_credit,
            total_outgoing=summary.total_outgoing,
            remaining=summary.remaining,
            entries=[LedgerEntrySchema.from_domain(e) for e in summary.entries],
            credit_items=[DueItemSchema.from_domain(i) for i in summary.credit_items],
            rejected=[RejectedRecordSchema.from_domain(r) for r in summary.rejected],
        )


class CategoryBreakdownResponse(BaseModel):
    """Response for GET /v1/summary/categories (pie chart data)"""

    month: int
    year: int
    labels: List[str]
    values: List[Money]
    colors: List[str]

    @classmethod
    def from_domain(cls, breakdown: CategoryBreakdown) -> "CategoryBreakdownResponse":
        return cls(
            month=breakdown.month,
            year=breakdown.year,
            labels=list(breakdown.labels),
            values=list(breakdown.values),
            colors=list(breakdown.colors),
        )
