# storefront/services/store.py
"""
Thin document-store layer over Firestore collections.

Every collection the service touches (products, carts, orders) is reached
through a ``DocumentStore``. It only knows documents, keys and field filters;
it has no idea what an order is. Driver errors propagate unchanged so callers
decide how to report them.
"""
from __future__ import annotations

from typing import Any, Dict

from firebase_admin import firestore
from google.api_core.exceptions import NotFound

from .firebase import ensure_firestore

# Firestore rejects write batches larger than this
BATCH_LIMIT = 500


class DocumentStore:
    def __init__(self, db: firestore.Client, name: str):
        self._db = db
        self.name = name
        self._col = db.collection(name)

    # --- WRITE ----------------------------------------------------------------
    def insert_one(self, document: Dict[str, Any]) -> str:
        ref = self._col.document()
        ref.set(document)
        return ref.id

    def increment(self, doc_id: str, field: str, delta: float) -> bool:
        """
        Atomic ``field += delta``. Returns False when no document has that key,
        mirroring an update whose filter matched nothing.
        """
        try:
            self._col.document(doc_id).update({field: firestore.Increment(delta)})
        except NotFound:
            return False
        return True

    def take(self, doc_id: str, field: str, amount: float) -> bool:
        """
        Decrement ``field`` by ``amount`` only if the document exists and holds
        at least that much. Runs in a transaction so concurrent takers are
        serialized by Firestore.
        """
        ref = self._col.document(doc_id)

        @firestore.transactional
        def _take(transaction) -> bool:
            snap = ref.get(transaction=transaction)
            if not snap.exists:
                return False
            current = (snap.to_dict() or {}).get(field) or 0
            if current < amount:
                return False
            transaction.update(ref, {field: current - amount})
            return True

        return _take(self._db.transaction())

    def delete_one(self, doc_id: str) -> None:
        self._col.document(doc_id).delete()

    def delete_many(self, **equals: Any) -> int:
        """Delete every match, committing in Firestore-sized batches."""
        query = self._col
        for field, value in equals.items():
            query = query.where(field, "==", value)

        deleted = 0
        batch = self._db.batch()
        pending = 0
        for snap in query.stream():
            batch.delete(snap.reference)
            pending += 1
            if pending == BATCH_LIMIT:
                batch.commit()
                deleted += pending
                batch = self._db.batch()
                pending = 0
        if pending:
            batch.commit()
            deleted += pending
        return deleted


def collection(name: str) -> DocumentStore:
    return DocumentStore(ensure_firestore(), name)
