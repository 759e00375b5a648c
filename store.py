"""
Expense store: CRUD over the MongoDB "expense" collection.

Every write is validated here, so nothing that breaks the Expense rules can
reach the database no matter which caller issued it.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from errors import NotFound, StorageError, ValidationError
from logger import get_logger
from schemas import EDITABLE_FIELDS, Expense, ExpenseCreate, utcnow

logger = get_logger(__name__)


# ---------- Utils ----------

@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as e:
        logger.error(f"Failed to {action}: {e}")
        raise StorageError(f"Failed to {action}: {e}") from e


def validate_expense(data: Mapping[str, Any]) -> ExpenseCreate:
    try:
        return ExpenseCreate.model_validate(dict(data))
    except PydanticValidationError as e:
        fields: List[str] = []
        messages: List[str] = []
        for err in e.errors():
            name = str(err["loc"][0]) if err["loc"] else "expense"
            if name not in fields:
                fields.append(name)
            messages.append(f"{name}: {err['msg']}")
        raise ValidationError(fields, "; ".join(messages)) from e


def object_id(expense_id: str) -> Optional[ObjectId]:
    if isinstance(expense_id, ObjectId):
        return expense_id
    if not ObjectId.is_valid(expense_id):
        return None
    return ObjectId(expense_id)


def to_expense(doc: Dict[str, Any]) -> Expense:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return Expense.model_validate(doc)


class ExpenseStore:
    """Durable CRUD over expense records, backed by a pymongo collection."""

    def __init__(self, collection: Optional[Collection]):
        self.collection = collection

    @property
    def _col(self) -> Collection:
        if self.collection is None:
            raise StorageError("Database not configured")
        return self.collection

    # ---------- Create ----------

    def create(self, data: Mapping[str, Any]) -> Expense:
        expense = validate_expense(data)
        now = utcnow()
        doc = {**expense.model_dump(), "created_at": now, "updated_at": now}
        with storage_errors("create expense"):
            result = self._col.insert_one(doc)
        logger.info(f"Created expense {result.inserted_id} ({expense.category}, {expense.amount:.2f})")
        return to_expense({**doc, "_id": result.inserted_id})

    # ---------- Read ----------

    def get_all(self) -> List[Expense]:
        """All expenses, most recent first; equal dates fall back to id order."""
        with storage_errors("list expenses"):
            docs = list(self._col.find({}).sort([("date", DESCENDING), ("_id", ASCENDING)]))
        return [to_expense(d) for d in docs]

    def get_by_id(self, expense_id: str) -> Expense:
        oid = object_id(expense_id)
        if oid is None:
            raise NotFound(expense_id)
        with storage_errors(f"fetch expense {expense_id}"):
            doc = self._col.find_one({"_id": oid})
        if doc is None:
            raise NotFound(expense_id)
        return to_expense(doc)

    # ---------- Update ----------

    def update(self, expense_id: str, partial: Mapping[str, Any]) -> Expense:
        """
        Merge the supplied fields into the stored expense.

        A key missing from ``partial`` keeps its stored value; a key present
        with 0, False or "" overwrites it. The merged record is validated with
        the same rules as create. Concurrent updates are last-write-wins.
        """
        current = self.get_by_id(expense_id)
        merged = current.model_dump(include=set(EDITABLE_FIELDS))
        for key in EDITABLE_FIELDS:
            if key in partial:
                merged[key] = partial[key]
        expense = validate_expense(merged)

        changes = {**expense.model_dump(), "updated_at": utcnow()}
        with storage_errors(f"update expense {expense_id}"):
            doc = self._col.find_one_and_update(
                {"_id": object_id(current.id)},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            # Deleted between the read and the write
            raise NotFound(expense_id)
        logger.info(f"Updated expense {expense_id}")
        return to_expense(doc)

    # ---------- Delete ----------

    def delete(self, expense_id: str) -> None:
        oid = object_id(expense_id)
        if oid is None:
            raise NotFound(expense_id)
        with storage_errors(f"delete expense {expense_id}"):
            result = self._col.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFound(expense_id)
        logger.info(f"Deleted expense {expense_id}")

    # ---------- Aggregation ----------

    def monthly_totals(self, since: datetime) -> List[Dict[str, Any]]:
        """Per-month amount totals and record counts for expenses dated on or after ``since``."""
        pipeline = [
            {"$match": {"date": {"$gte": since}}},
            {"$group": {
                "_id": {"year": {"$year": "$date"}, "month": {"$month": "$date"}},
                "total": {"$sum": "$amount"},
                "count": {"$sum": 1},
            }},
            {"$sort": {"_id.year": 1, "_id.month": 1}},
        ]
        with storage_errors("aggregate monthly totals"):
            rows = list(self._col.aggregate(pipeline))
        return [
            {
                "year": row["_id"]["year"],
                "month": row["_id"]["month"],
                "total": float(row["total"]),
                "count": row["count"],
            }
            for row in rows
        ]

    # ---------- Maintenance ----------

    def ensure_indexes(self) -> None:
        with storage_errors("create indexes"):
            self._col.create_index([("date", DESCENDING)])
            self._col.create_index([("category", ASCENDING)])

    def clear(self) -> int:
        with storage_errors("clear expenses"):
            result = self._col.delete_many({})
        return result.deleted_count

    def insert_many(self, records: Iterable[Mapping[str, Any]]) -> int:
        now = utcnow()
        docs = [
            {**validate_expense(r).model_dump(), "created_at": now, "updated_at": now}
            for r in records
        ]
        if not docs:
            return 0
        with storage_errors("insert expenses"):
            result = self._col.insert_many(docs)
        return len(result.inserted_ids)
