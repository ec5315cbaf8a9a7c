"""
Record store: the only code that talks to MongoDB.

One instance is built per application (see karibu.main.lifespan) around a
Motor database handle and handed to request handlers through the
`get_store` dependency.

Collections:
  - users
  - procurements
  - sales: cash and credit sales together, told apart by `saleType`

Documents are stored with camelCase keys and a string UUID in `_id`.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
from uuid import uuid4

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from karibu.core.exceptions import NotFound, StorageUnavailable
from karibu.core.logger import get_logger
from karibu.models.base import UserSummary, utcnow
from karibu.models.procurement import Procurement
from karibu.models.sale import CashSale, CreditSale, SaleType, sale_adapter
from karibu.models.user import User

logger = get_logger("store")

Record = Union[Procurement, CashSale, CreditSale]


class Collection(str, Enum):
    USERS = "users"
    PROCUREMENTS = "procurements"
    SALES = "sales"


class RecordKind(str, Enum):
    PROCUREMENT = "Procurement"
    CASH_SALE = "Cash"
    CREDIT_SALE = "Credit"

    @property
    def collection(self) -> Collection:
        if self is RecordKind.PROCUREMENT:
            return Collection.PROCUREMENTS
        return Collection.SALES


NOT_FOUND_MESSAGES = {
    Collection.PROCUREMENTS: "Procurement record not found",
    Collection.SALES: "Sale not found",
    Collection.USERS: "User not found",
}


class DuplicateEmail(Exception):
    """Raised by create_user when the unique email index rejects the insert."""


def _to_document(model_fields: Dict[str, Any]) -> Dict[str, Any]:
    doc = dict(model_fields)
    doc["_id"] = doc.pop("id")
    return doc


def _from_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(doc)
    data["id"] = data.pop("_id")
    return data


class RecordStore:
    def __init__(self, db: AsyncIOMotorDatabase, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    def _collection(self, collection: Collection):
        return self.db[collection.value]

    async def ensure_indexes(self) -> None:
        try:
            await self._collection(Collection.USERS).create_index("email", unique=True)
            await self._collection(Collection.PROCUREMENTS).create_index([("createdAt", DESCENDING)])
            await self._collection(Collection.SALES).create_index(
                [("saleType", ASCENDING), ("createdAt", DESCENDING)]
            )
        except PyMongoError as e:
            raise StorageUnavailable() from e

    # ---------------------------------------------------------
    # USERS
    # ---------------------------------------------------------
    async def create_user(self, user: User) -> User:
        doc = _to_document(user.model_dump(by_alias=True))
        try:
            await self._collection(Collection.USERS).insert_one(doc)
        except DuplicateKeyError as e:
            raise DuplicateEmail(user.email) from e
        except PyMongoError as e:
            raise StorageUnavailable() from e
        logger.info("User %s created with role '%s'", user.id, user.role)
        return user

    async def find_user_by_email(self, email: str) -> Optional[User]:
        try:
            doc = await self._collection(Collection.USERS).find_one({"email": email})
        except PyMongoError as e:
            raise StorageUnavailable() from e
        return User.model_validate(_from_document(doc)) if doc else None

    async def delete_user(self, email: str) -> None:
        """Only used by the seeding script to replace the first manager."""
        try:
            await self._collection(Collection.USERS).delete_one({"email": email})
        except PyMongoError as e:
            raise StorageUnavailable() from e

    async def _user_summaries(self, user_ids: Iterable[str]) -> Dict[str, UserSummary]:
        ids = sorted({uid for uid in user_ids if uid})
        if not ids:
            return {}
        cursor = self._collection(Collection.USERS).find(
            {"_id": {"$in": ids}}, {"name": 1, "email": 1}
        )
        docs = await cursor.to_list(length=None)
        return {
            doc["_id"]: UserSummary(id=doc["_id"], name=doc["name"], email=doc["email"])
            for doc in docs
        }

    # ---------------------------------------------------------
    # TRANSACTIONS
    # ---------------------------------------------------------
    @staticmethod
    def _parse(collection: Collection, data: Dict[str, Any]) -> Record:
        if collection is Collection.PROCUREMENTS:
            return Procurement.model_validate(data)
        return sale_adapter.validate_python(data)

    async def _resolve(self, collection: Collection, docs: List[Dict[str, Any]]) -> List[Record]:
        """Swap each stored recordedBy id for {id, name, email}. Unknown users stay as ids."""
        summaries = await self._user_summaries(doc.get("recordedBy") for doc in docs)
        records = []
        for doc in docs:
            data = _from_document(doc)
            summary = summaries.get(data.get("recordedBy"))
            if summary is not None:
                data["recordedBy"] = summary.model_dump()
            records.append(self._parse(collection, data))
        return records

    async def create(self, kind: RecordKind, fields: Dict[str, Any], recorded_by: User) -> Record:
        """
        Persists already-validated fields (snake_case) under a fresh id.
        recordedBy is stored as the bare user id.
        """
        data = dict(fields)
        data.update(id=str(uuid4()), recorded_by=recorded_by.id, created_at=self.clock())
        if kind is RecordKind.PROCUREMENT:
            record: Record = Procurement(**data)
        elif kind is RecordKind.CASH_SALE:
            record = CashSale(**data)
        else:
            data.update(is_paid=False, payment_date=None)
            record = CreditSale(**data)

        doc = _to_document(record.model_dump(by_alias=True))
        try:
            await self._collection(kind.collection).insert_one(doc)
        except PyMongoError as e:
            raise StorageUnavailable() from e

        logger.info("%s record %s created by user %s", kind.value, record.id, recorded_by.id)
        return record

    async def find_all(self, collection: Collection, sale_type: Optional[SaleType] = None) -> List[Record]:
        """Newest first."""
        query: Dict[str, Any] = {}
        if sale_type is not None:
            query["saleType"] = sale_type.value
        try:
            cursor = self._collection(collection).find(query, sort=[("createdAt", DESCENDING)])
            docs = await cursor.to_list(length=None)
            return await self._resolve(collection, docs)
        except PyMongoError as e:
            raise StorageUnavailable() from e

    async def find_by_id(self, collection: Collection, record_id: str) -> Record:
        try:
            doc = await self._collection(collection).find_one({"_id": record_id})
            if doc is None:
                raise NotFound(NOT_FOUND_MESSAGES[collection])
            return (await self._resolve(collection, [doc]))[0]
        except PyMongoError as e:
            raise StorageUnavailable() from e

    async def mark_credit_sale_paid(self, sale_id: str) -> CreditSale:
        """
        Sets isPaid and stamps paymentDate. Calling it again re-stamps the date.
        No guard against concurrent calls: the last write wins.
        """
        try:
            doc = await self._collection(Collection.SALES).find_one_and_update(
                {"_id": sale_id, "saleType": SaleType.CREDIT.value},
                {"$set": {"isPaid": True, "paymentDate": self.clock()}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StorageUnavailable() from e

        if doc is None:
            raise NotFound("Credit sale not found")
        logger.info("Credit sale %s marked paid", sale_id)
        return CreditSale.model_validate(_from_document(doc))
