"""/v1/credit-purchases - card purchases, installments due and projections"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from household_ledger.api.dependencies import get_current_identity, get_request_id
from household_ledger.api.v1.schemas import (
    CreditPurchaseCreate,
    CreditPurchaseList,
    CreditPurchaseSchema,
    CreditPurchaseUpdate,
    DueItemSchema,
    DueResponse,
    ProjectionResponse,
    RejectedRecordSchema,
    ScheduleResponse,
    ScheduledInstallmentSchema,
)
from household_ledger.domain.decoding import purchase_patch
from household_ledger.domain.exceptions import InvalidRecordError, RecordNotFoundError
from household_ledger.domain.installments import aggregate_due_in, project_monthly_totals, schedule_all_installments
from household_ledger.domain.models import CreditPurchase, Identity
from household_ledger.infrastructure.database.repositories import CreditPurchaseRepository
from household_ledger.infrastructure.database.session import get_db
from household_ledger.utils.date_utils import resolve_period

router = APIRouter(dependencies=[Depends(get_current_identity)])


@router.get("/credit-purchases", response_model=CreditPurchaseList)
def list_purchases(db: Session = Depends(get_db)):
    """All purchases, oldest first, plus any stored records that failed validation"""
    snapshot = CreditPurchaseRepository(db).snapshot()
    return CreditPurchaseList(
        purchases=[CreditPurchaseSchema.from_domain(p) for p in snapshot.records],
        rejected=[RejectedRecordSchema.from_domain(r) for r in snapshot.rejected],
    )


@router.post("/credit-purchases", response_model=CreditPurchaseSchema, status_code=201)
def create_purchase(
    request_body: CreditPurchaseCreate,
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Record a card purchase split into installment_count monthly installments"""
    request_id = get_request_id(request)
    purchase = CreditPurchase(
        id="",
        purchase_date=request_body.purchase_date,
        description=request_body.description,
        total_amount_primary=request_body.total_amount_primary,
        total_amount_secondary=request_body.total_amount_secondary,
        installment_count=request_body.installment_count,
    )

    try:
        record_id, snapshot = CreditPurchaseRepository(db).create(purchase)
        db.commit()
    except InvalidRecordError as e:
        db.rollback()
        logging.warning(f"Invalid purchase: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    logging.info(
        "Purchase recorded",
        extra={"request_id": request_id, "record_id": record_id, "user": identity.email},
    )
    return CreditPurchaseSchema.from_domain(snapshot.get(record_id))


@router.get("/credit-purchases/due", response_model=DueResponse)
def installments_due(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Installments falling due in a month, with each purchase's remaining count.

    Returns:
        Due rows, their peso and dollar totals, and rejected records
    """
    month, year = resolve_period(month, year)
    snapshot = CreditPurchaseRepository(db).snapshot()
    result = aggregate_due_in(snapshot.records, month, year)

    return DueResponse(
        month=month,
        year=year,
        total=result.total,
        total_secondary=result.total_secondary,
        items=[DueItemSchema.from_domain(i) for i in result.items],
        rejected=[RejectedRecordSchema.from_domain(r) for r in snapshot.rejected + result.rejected],
    )


@router.get("/credit-purchases/projection", response_model=ProjectionResponse)
def monthly_projection(db: Session = Depends(get_db)):
    """Installment totals for every month any purchase is still being paid"""
    snapshot = CreditPurchaseRepository(db).snapshot()
    return ProjectionResponse(
        monthly_totals=project_monthly_totals(snapshot.records),
        rejected=[RejectedRecordSchema.from_domain(r) for r in snapshot.rejected],
    )


@router.get("/credit-purchases/{purchase_id}/schedule", response_model=ScheduleResponse)
def purchase_schedule(purchase_id: str, db: Session = Depends(get_db)):
    """Full month-by-month schedule of one purchase"""
    try:
        purchase = CreditPurchaseRepository(db).get(purchase_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Purchase not found")
    except InvalidRecordError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ScheduleResponse(
        purchase_id=purchase.id,
        installments=[ScheduledInstallmentSchema.from_domain(i) for i in schedule_all_installments(purchase)],
    )


@router.patch("/credit-purchases/{purchase_id}", response_model=CreditPurchaseSchema)
def update_purchase(
    purchase_id: str,
    request_body: CreditPurchaseUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    """Edit fields of a purchase; the rest are left as stored"""
    changes = request_body.model_dump(exclude_unset=True, exclude_none=True)

    try:
        snapshot = CreditPurchaseRepository(db).update_fields(purchase_id, purchase_patch(changes))
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Purchase not found")
    except InvalidRecordError as e:
        db.rollback()
        logging.warning(f"Invalid purchase update: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))

    return CreditPurchaseSchema.from_domain(snapshot.get(purchase_id))


@router.delete("/credit-purchases/{purchase_id}", status_code=204)
def delete_purchase(purchase_id: str, request: Request, db: Session = Depends(get_db)):
    try:
        CreditPurchaseRepository(db).delete_by_id(purchase_id)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Purchase not found")

    logging.info("Purchase deleted", extra={"request_id": get_request_id(request), "record_id": purchase_id})
    return Response(status_code=204)
