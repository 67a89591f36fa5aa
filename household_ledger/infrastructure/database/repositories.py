"""Data access layer: document store per collection plus typed repositories on top"""

import logging
import secrets
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

from sqlalchemy.orm import Session

from household_ledger.domain.decoding import (
    decode_credit_purchase,
    decode_ledger_entry,
    encode_credit_purchase,
    encode_ledger_entry,
)
from household_ledger.domain.exceptions import InvalidRecordError, RecordNotFoundError
from household_ledger.domain.models import CreditPurchase, EntryKind, Identity, LedgerEntry, RejectedRecord, Snapshot
from household_ledger.infrastructure.database.models import Document, UserSession
from household_ledger.infrastructure.observability.metrics import record_mutation, record_rejected

logger = logging.getLogger(__name__)

CREDIT_PURCHASES = "credit_purchases"
LEDGER_ENTRIES = "ledger_entries"

T = TypeVar("T")


class DocumentStore:
    """Per-record CRUD over one named collection; no cross-record transactions"""

    def __init__(self, db: Session, collection: str):
        self.db = db
        self.collection = collection

    def create(self, payload: Mapping[str, Any]) -> str:
        """Persist a new document and return its id"""
        document = Document(collection=self.collection, payload=dict(payload))
        self.db.add(document)
        self.db.flush()  # Get ID without committing
        return document.id

    def list_all(self) -> List[Document]:
        """Every document in the collection, oldest first"""
        return (
            self.db.query(Document)
            .filter(Document.collection == self.collection)
            .order_by(Document.created_at.asc(), Document.id.asc())
            .all()
        )

    def get(self, document_id: str) -> Document:
        document = (
            self.db.query(Document)
            .filter(Document.collection == self.collection, Document.id == document_id)
            .first()
        )
        if document is None:
            raise RecordNotFoundError(f"No document {document_id} in {self.collection}")
        return document

    def update_fields(self, document_id: str, patch: Mapping[str, Any]) -> None:
        """Merge patch into the stored body; last write wins"""
        document = self.get(document_id)
        # Reassign so SQLAlchemy sees the JSON column change
        document.payload = {**document.payload, **patch}
        self.db.flush()

    def delete_by_id(self, document_id: str) -> None:
        document = self.get(document_id)
        self.db.delete(document)
        self.db.flush()


class RecordRepository(Generic[T]):
    """
    Typed view of a collection.

    Reads decode every document and return an immutable Snapshot; documents
    that fail to decode are logged and listed in `Snapshot.rejected` instead
    of hiding the valid ones. Every command returns a fresh snapshot.
    """

    collection: str
    decode: Callable[[str, Mapping[str, Any]], T]
    encode: Callable[[T], Dict[str, Any]]

    def __init__(self, db: Session):
        self.store = DocumentStore(db, self.collection)

    def snapshot(self) -> Snapshot[T]:
        records = []
        rejected = []
        for document in self.store.list_all():
            try:
                records.append(type(self).decode(document.id, document.payload))
            except InvalidRecordError as e:
                logger.warning(
                    f"Rejected stored record: {e}",
                    extra={"collection": self.collection, "record_id": document.id, "step": "decode"},
                )
                record_rejected(self.collection, type(e).__name__)
                rejected.append(RejectedRecord(record_id=document.id, reason=str(e)))
        return Snapshot(records=tuple(records), rejected=tuple(rejected))

    def create(self, record: T) -> Tuple[str, Snapshot[T]]:
        """Store a record (its id is ignored) and return the assigned id with the new snapshot"""
        payload = type(self).encode(record)
        # Round-trip so nothing undecodable is ever written
        type(self).decode("pending", payload)
        record_id = self.store.create(payload)
        record_mutation(self.collection, "create")
        logger.info("Record created", extra={"collection": self.collection, "record_id": record_id})
        return record_id, self.snapshot()

    def update_fields(self, record_id: str, patch: Mapping[str, Any]) -> Snapshot[T]:
        """Apply a document-level patch after checking the merged body still decodes"""
        current = self.store.get(record_id)
        type(self).decode(record_id, {**current.payload, **patch})
        self.store.update_fields(record_id, patch)
        record_mutation(self.collection, "update")
        return self.snapshot()

    def delete_by_id(self, record_id: str) -> Snapshot[T]:
        self.store.delete_by_id(record_id)
        record_mutation(self.collection, "delete")
        logger.info("Record deleted", extra={"collection": self.collection, "record_id": record_id})
        return self.snapshot()

    def get(self, record_id: str) -> T:
        """Decode a single record; raises RecordNotFoundError or InvalidRecordError"""
        document = self.store.get(record_id)
        return type(self).decode(document.id, document.payload)


class CreditPurchaseRepository(RecordRepository[CreditPurchase]):
    """Repository for credit-card purchases"""

    collection = CREDIT_PURCHASES
    decode = staticmethod(decode_credit_purchase)
    encode = staticmethod(encode_credit_purchase)


class LedgerEntryRepository(RecordRepository[LedgerEntry]):
    """Repository for income and fixed-expense entries"""

    collection = LEDGER_ENTRIES
    decode = staticmethod(decode_ledger_entry)
    encode = staticmethod(encode_ledger_entry)

    def toggle_settled(self, record_id: str) -> Snapshot[LedgerEntry]:
        """Flip the paid flag of a fixed expense"""
        entry = self.get(record_id)
        if entry.kind is not EntryKind.FIXED_EXPENSE:
            raise InvalidRecordError(f"Only fixed expenses can be settled, entry {record_id} is {entry.kind.value}")
        return self.update_fields(record_id, {"paid": not entry.settled})


class SessionRepository:
    """Repository for signed-in user sessions"""

    def __init__(self, db: Session):
        self.db = db

    def create_session(self, identity: Identity) -> str:
        """Persist a session and return its bearer token"""
        token = secrets.token_urlsafe(32)
        self.db.add(
            UserSession(
                token=token,
                uid=identity.uid,
                email=identity.email,
                display_name=identity.display_name,
                photo_url=identity.photo_url,
            )
        )
        self.db.flush()
        return token

    def get_identity(self, token: str) -> Optional[Identity]:
        """Identity behind a token, or None if the session does not exist"""
        row = self.db.query(UserSession).filter(UserSession.token == token).first()
        if row is None:
            return None
        return Identity(uid=row.uid, email=row.email, display_name=row.display_name, photo_url=row.photo_url)

    def delete_session(self, token: str) -> bool:
        """Remove a session; False if it was already gone"""
        deleted = self.db.query(UserSession).filter(UserSession.token == token).delete()
        self.db.flush()
        return deleted > 0
