"""/v1/entries - income and fixed-expense records"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from household_ledger.api.dependencies import get_current_identity, get_request_id
from household_ledger.api.v1.schemas import (
    LedgerEntryCreate,
    LedgerEntryList,
    LedgerEntrySchema,
    LedgerEntryUpdate,
    RejectedRecordSchema,
)
from household_ledger.domain.decoding import entry_patch
from household_ledger.domain.exceptions import InvalidRecordError, RecordNotFoundError
from household_ledger.domain.models import Identity, LedgerEntry
from household_ledger.domain.summary import entries_in_month, entries_in_year
from household_ledger.infrastructure.database.repositories import LedgerEntryRepository
from household_ledger.infrastructure.database.session import get_db
from household_ledger.utils.date_utils import resolve_period

router = APIRouter(dependencies=[Depends(get_current_identity)])


@router.get("/entries", response_model=LedgerEntryList)
def list_entries(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    List ledger entries, oldest first.

    With `month` (and optionally `year`, default current) only that month's
    entries are returned; with `year` alone, that whole year; with neither,
    all of them.
    """
    snapshot = LedgerEntryRepository(db).snapshot()
    entries = snapshot.records
    if month is not None:
        month, year = resolve_period(month, year)
        entries = entries_in_month(entries, month, year)
    elif year is not None:
        entries = entries_in_year(entries, year)

    return LedgerEntryList(
        entries=[LedgerEntrySchema.from_domain(e) for e in entries],
        rejected=[RejectedRecordSchema.from_domain(r) for r in snapshot.rejected],
    )


@router.post("/entries", response_model=LedgerEntrySchema, status_code=201)
def create_entry(
    request_body: LedgerEntryCreate,
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Record income or a fixed expense on behalf of the signed-in user"""
    request_id = get_request_id(request)
    entry = LedgerEntry(
        id="",
        amount=request_body.amount,
        kind=request_body.kind,
        category=request_body.category,
        description=request_body.description,
        occurred_at=request_body.occurred_at,
        recorded_by=identity.display_name,
    )

    try:
        record_id, snapshot = LedgerEntryRepository(db).create(entry)
        db.commit()
    except InvalidRecordError as e:
        db.rollback()
        logging.warning(f"Invalid ledger entry: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return LedgerEntrySchema.from_domain(snapshot.get(record_id))


@router.patch("/entries/{entry_id}", response_model=LedgerEntrySchema)
def update_entry(
    entry_id: str,
    request_body: LedgerEntryUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    """Edit fields of an entry; the rest are left as stored"""
    changes = request_body.model_dump(exclude_unset=True, exclude_none=True)

    try:
        snapshot = LedgerEntryRepository(db).update_fields(entry_id, entry_patch(changes))
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Entry not found")
    except InvalidRecordError as e:
        db.rollback()
        logging.warning(f"Invalid ledger entry update: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return LedgerEntrySchema.from_domain(snapshot.get(entry_id))


@router.post("/entries/{entry_id}/settled", response_model=LedgerEntrySchema)
def toggle_settled(entry_id: str, db: Session = Depends(get_db)):
    """Flip the paid flag of a fixed expense"""
    try:
        snapshot = LedgerEntryRepository(db).toggle_settled(entry_id)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Entry not found")
    except InvalidRecordError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))

    return LedgerEntrySchema.from_domain(snapshot.get(entry_id))


@router.delete("/entries/{entry_id}", status_code=204)
def delete_entry(entry_id: str, request: Request, db: Session = Depends(get_db)):
    try:
        LedgerEntryRepository(db).delete_by_id(entry_id)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Entry not found")

    logging.info("Entry deleted", extra={"request_id": get_request_id(request), "record_id": entry_id})
    return Response(status_code=204)
