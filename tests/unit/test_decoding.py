"""Unit tests for decoding stored documents into typed records"""

import pytest
from datetime import date
from decimal import Decimal
from household_ledger.domain.decoding import (
    decode_credit_purchase,
    decode_kind,
    decode_ledger_entry,
    encode_credit_purchase,
    entry_patch,
    purchase_patch,
)
from household_ledger.domain.exceptions import (
    InvalidAmount,
    InvalidInstallmentCount,
    InvalidRecordError,
    UnknownEntryKind,
    UnparseableDate,
)
from household_ledger.domain.models import EntryKind
from household_ledger.utils.money import to_cents


@pytest.fixture
def purchase_doc() -> dict:
    """Document shaped like the ones the web client has always written"""
    return {
        "date": "2024-01-15",
        "transactionDetail": "Heladera",
        "amountInPesos": 1200,
        "amountInDollars": 0,
        "installments": 3,
    }


@pytest.fixture
def entry_doc() -> dict:
    return {
        "amount": 150000.5,
        "type": "Ingresos",
        "category": "Sueldo",
        "description": "",
        "createdAt": "2024-03-01T03:00:00.000Z",
        "userName": "Dani",
        "paid": False,
    }


def test_decode_purchase(purchase_doc):
    purchase = decode_credit_purchase("abc", purchase_doc)

    assert purchase.id == "abc"
    assert purchase.purchase_date == date(2024, 1, 15)
    assert purchase.total_amount_primary == Decimal("1200")
    assert purchase.installment_count == 3


def test_decode_purchase_float_amount_keeps_short_repr(purchase_doc):
    purchase_doc["amountInPesos"] = 0.1
    assert decode_credit_purchase("abc", purchase_doc).total_amount_primary == Decimal("0.1")


def test_decode_purchase_missing_dollars_defaults_to_zero(purchase_doc):
    del purchase_doc["amountInDollars"]
    assert decode_credit_purchase("abc", purchase_doc).total_amount_secondary == Decimal("0")


@pytest.mark.parametrize("count", [0, -1, None, "tres", 2.5, True, 361, 1000000])
def test_decode_purchase_bad_installments(purchase_doc, count):
    purchase_doc["installments"] = count
    with pytest.raises(InvalidInstallmentCount):
        decode_credit_purchase("abc", purchase_doc)


def test_decode_purchase_installment_cap(purchase_doc):
    purchase_doc["installments"] = 360
    assert decode_credit_purchase("abc", purchase_doc).installment_count == 360


def test_decode_purchase_largest_amount(purchase_doc):
    purchase_doc["amountInPesos"] = "999999999999999.99"
    assert decode_credit_purchase("abc", purchase_doc).total_amount_primary == Decimal("999999999999999.99")


def test_decode_purchase_integral_float_installments(purchase_doc):
    purchase_doc["installments"] = 6.0
    assert decode_credit_purchase("abc", purchase_doc).installment_count == 6


@pytest.mark.parametrize("value", ["", "15/01/2024", "2024-13-01", None, 20240115])
def test_decode_purchase_bad_date(purchase_doc, value):
    purchase_doc["date"] = value
    with pytest.raises(UnparseableDate):
        decode_credit_purchase("abc", purchase_doc)


@pytest.mark.parametrize("value", [-5, "abc", None, True, "NaN", "1e27", "1000000000000000"])
def test_decode_purchase_bad_amount(purchase_doc, value):
    purchase_doc["amountInPesos"] = value
    with pytest.raises(InvalidAmount):
        decode_credit_purchase("abc", purchase_doc)


def test_decode_errors_share_base_class(purchase_doc):
    purchase_doc["installments"] = 0
    with pytest.raises(InvalidRecordError):
        decode_credit_purchase("abc", purchase_doc)


def test_purchase_encode_decode_preserves_fields(purchase_doc):
    purchase = decode_credit_purchase("abc", purchase_doc)
    assert decode_credit_purchase("abc", encode_credit_purchase(purchase)) == purchase


def test_decode_legacy_income_entry(entry_doc):
    entry = decode_ledger_entry("e1", entry_doc)

    assert entry.kind is EntryKind.INCOME
    assert entry.amount == Decimal("150000.5")
    assert entry.occurred_at == date(2024, 3, 1)
    assert entry.recorded_by == "Dani"
    assert entry.settled is False


def test_decode_entry_without_paid_flag(entry_doc):
    del entry_doc["paid"]
    entry_doc["type"] = "Gastos"
    entry = decode_ledger_entry("e1", entry_doc)

    assert entry.kind is EntryKind.FIXED_EXPENSE
    assert entry.settled is False


def test_decode_entry_legacy_card_tag(entry_doc):
    entry_doc["type"] = "Tarjeta de Credito"
    entry_doc["category"] = "Tarjeta"

    entry = decode_ledger_entry("e1", entry_doc)

    assert entry.kind is EntryKind.CREDIT_CARD_INSTALLMENT
    assert entry.amount == Decimal("150000.5")


def test_decode_entry_rejects_unknown_tag(entry_doc):
    entry_doc["type"] = "Ahorros"
    with pytest.raises(UnknownEntryKind):
        decode_ledger_entry("e1", entry_doc)


@pytest.mark.parametrize(
    "tag, kind",
    [
        ("income", EntryKind.INCOME),
        ("fixed_expense", EntryKind.FIXED_EXPENSE),
        ("INGRESOS", EntryKind.INCOME),
        ("Tarjeta de Crédito", EntryKind.CREDIT_CARD_INSTALLMENT),
    ],
)
def test_decode_kind(tag, kind):
    assert decode_kind(tag) is kind


def test_purchase_patch_uses_document_names():
    patch = purchase_patch({"installment_count": 6, "total_amount_primary": Decimal("10.5")})
    assert patch == {"installments": 6, "amountInPesos": "10.5"}


def test_entry_patch_encodes_kind_and_date():
    patch = entry_patch({"kind": EntryKind.FIXED_EXPENSE, "occurred_at": date(2024, 2, 29), "settled": True})
    assert patch == {"type": "fixed_expense", "createdAt": "2024-02-29", "paid": True}


def test_patch_rejects_unknown_field():
    with pytest.raises(InvalidRecordError):
        purchase_patch({"colour": "red"})


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("333.333333"), Decimal("333.33")),
        (Decimal("0.005"), Decimal("0.01")),
        (Decimal("1E+27"), Decimal("1000000000000000000000000000.00")),
        (Decimal("123456789012345678901234567890.125"), Decimal("123456789012345678901234567890.13")),
    ],
)
def test_to_cents(amount, expected):
    assert to_cents(amount) == expected
