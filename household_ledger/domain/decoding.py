"""
Validating decode/encode between raw store documents and typed records.

Documents keep the field names the household app has always written
(`transactionDetail`, `amountInPesos`, `createdAt`, `paid`, ...), so older
exports decode unchanged. Decoding either yields a fully typed record or
raises an InvalidRecordError subclass; there are no partially typed results.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping

from household_ledger.domain.exceptions import (
    InvalidAmount,
    InvalidInstallmentCount,
    InvalidRecordError,
    UnknownEntryKind,
    UnparseableDate,
)
from household_ledger.domain.models import MAX_INSTALLMENTS, CreditPurchase, EntryKind, LedgerEntry
from household_ledger.utils.date_utils import parse_calendar_date
from household_ledger.utils.money import MAX_AMOUNT

# Tags written by earlier versions of the app
LEGACY_KIND_TAGS = {
    "ingresos": EntryKind.INCOME,
    "gastos": EntryKind.FIXED_EXPENSE,
    "tarjeta de credito": EntryKind.CREDIT_CARD_INSTALLMENT,
    "tarjeta de crédito": EntryKind.CREDIT_CARD_INSTALLMENT,
}


def _decode_amount(doc: Mapping[str, Any], field: str, required: bool = True) -> Decimal:
    value = doc.get(field)
    if value is None or value == "":
        if required:
            raise InvalidAmount(f"Missing amount field '{field}'")
        return Decimal("0")
    if isinstance(value, bool):
        raise InvalidAmount(f"Field '{field}' is a boolean, not an amount")

    try:
        # str() first so floats keep their shortest repr instead of binary noise
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmount(f"Field '{field}' is not a number: {value!r}") from e

    if not amount.is_finite():
        raise InvalidAmount(f"Field '{field}' is not finite: {value!r}")
    if amount < 0:
        raise InvalidAmount(f"Field '{field}' is negative: {value!r}")
    if amount > MAX_AMOUNT:
        raise InvalidAmount(f"Field '{field}' exceeds {MAX_AMOUNT}: {value!r}")
    return amount


def _decode_date(doc: Mapping[str, Any], field: str) -> date:
    try:
        return parse_calendar_date(doc.get(field))
    except (ValueError, TypeError) as e:
        raise UnparseableDate(f"Field '{field}' is not a calendar date: {doc.get(field)!r}") from e


def _decode_installments(doc: Mapping[str, Any]) -> int:
    value = doc.get("installments")
    if isinstance(value, bool):
        raise InvalidInstallmentCount(f"Installment count must be an integer, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or not 1 <= value <= MAX_INSTALLMENTS:
        raise InvalidInstallmentCount(
            f"Installment count must be an integer between 1 and {MAX_INSTALLMENTS}, got {value!r}"
        )
    return value


def _decode_text(doc: Mapping[str, Any], field: str, required: bool = False) -> str:
    value = doc.get(field)
    if value is None:
        if required:
            raise InvalidRecordError(f"Missing field '{field}'")
        return ""
    if not isinstance(value, str):
        raise InvalidRecordError(f"Field '{field}' must be text, got {type(value).__name__}")
    return value


def decode_kind(value: Any) -> EntryKind:
    """Map a stored kind tag (current or legacy) onto EntryKind"""
    if isinstance(value, EntryKind):
        return value
    if not isinstance(value, str):
        raise UnknownEntryKind(f"Entry kind must be text, got {value!r}")
    try:
        return EntryKind(value)
    except ValueError:
        pass
    kind = LEGACY_KIND_TAGS.get(value.strip().lower())
    if kind is None:
        raise UnknownEntryKind(f"Unknown entry kind {value!r}")
    return kind


def decode_credit_purchase(record_id: str, doc: Mapping[str, Any]) -> CreditPurchase:
    """Build a CreditPurchase from a stored document"""
    return CreditPurchase(
        id=record_id,
        purchase_date=_decode_date(doc, "date"),
        description=_decode_text(doc, "transactionDetail", required=True),
        total_amount_primary=_decode_amount(doc, "amountInPesos"),
        total_amount_secondary=_decode_amount(doc, "amountInDollars", required=False),
        installment_count=_decode_installments(doc),
    )


def decode_ledger_entry(record_id: str, doc: Mapping[str, Any]) -> LedgerEntry:
    """
    Build a LedgerEntry from a stored document.

    Card-installment rows written by earlier versions of the app decode as
    CREDIT_CARD_INSTALLMENT; summaries leave them out of the totals because
    the purchase collection already counts those charges.
    """
    kind = decode_kind(doc.get("type"))

    settled = doc.get("paid", False)
    if not isinstance(settled, bool):
        raise InvalidRecordError(f"Field 'paid' must be a boolean, got {settled!r}")

    return LedgerEntry(
        id=record_id,
        amount=_decode_amount(doc, "amount"),
        kind=kind,
        category=_decode_text(doc, "category"),
        description=_decode_text(doc, "description"),
        occurred_at=_decode_date(doc, "createdAt"),
        recorded_by=_decode_text(doc, "userName"),
        settled=settled,
    )


def encode_credit_purchase(purchase: CreditPurchase) -> Dict[str, Any]:
    """Document body for a purchase; the id lives outside the body"""
    return {
        "date": purchase.purchase_date.isoformat(),
        "transactionDetail": purchase.description,
        "amountInPesos": str(purchase.total_amount_primary),
        "amountInDollars": str(purchase.total_amount_secondary),
        "installments": purchase.installment_count,
    }


def encode_ledger_entry(entry: LedgerEntry) -> Dict[str, Any]:
    return {
        "amount": str(entry.amount),
        "type": entry.kind.value,
        "category": entry.category,
        "description": entry.description,
        "createdAt": entry.occurred_at.isoformat(),
        "userName": entry.recorded_by,
        "paid": entry.settled,
    }


def _encode_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, EntryKind):
        return value.value
    return value


PURCHASE_FIELDS = {
    "purchase_date": "date",
    "description": "transactionDetail",
    "total_amount_primary": "amountInPesos",
    "total_amount_secondary": "amountInDollars",
    "installment_count": "installments",
}

ENTRY_FIELDS = {
    "amount": "amount",
    "kind": "type",
    "category": "category",
    "description": "description",
    "occurred_at": "createdAt",
    "recorded_by": "userName",
    "settled": "paid",
}


def _patch(fields: Mapping[str, str], changes: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = set(changes) - set(fields)
    if unknown:
        raise InvalidRecordError(f"Unknown fields: {', '.join(sorted(unknown))}")
    return {fields[name]: _encode_value(value) for name, value in changes.items()}


def purchase_patch(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate CreditPurchase field changes into a document patch"""
    return _patch(PURCHASE_FIELDS, changes)


def entry_patch(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate LedgerEntry field changes into a document patch"""
    return _patch(ENTRY_FIELDS, changes)
