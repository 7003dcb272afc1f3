"""
Table-scoped persistence API used by the entitlement engine and data layer

Records cross this boundary as plain dicts keyed by column name.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, inspect
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Dict, List, Optional
import copy
import logging

from promosync.core.exceptions import PersistenceUnavailable, UnknownCollection
from promosync.models import (
    Profile,
    UsageCounter,
    UserMetrics,
    Contract,
    Application,
    RevenueEntry,
    MediaKit,
    Pitch,
    SavedRate,
)

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class Persistence:
    """
    Abstract persistence collaborator

    Implementations raise PersistenceUnavailable when the underlying store fails.
    """

    async def get(self, collection: str, key: str) -> Optional[Record]:
        raise NotImplementedError

    async def put(self, collection: str, key: str, value: Record) -> Record:
        raise NotImplementedError

    async def query(
        self,
        collection: str,
        filters: Optional[Record] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Record]:
        raise NotImplementedError

    async def delete(self, collection: str, key: str) -> bool:
        raise NotImplementedError


class InMemoryPersistence(Persistence):
    """Process-local store, mirrors the browser-local storage the dashboard started with"""

    def __init__(self, collections: Optional[Dict[str, Dict[str, Record]]] = None):
        self._collections: Dict[str, Dict[str, Record]] = collections or {}

    def _table(self, collection: str) -> Dict[str, Record]:
        return self._collections.setdefault(collection, {})

    async def get(self, collection: str, key: str) -> Optional[Record]:
        record = self._table(collection).get(key)
        return copy.deepcopy(record) if record is not None else None

    async def put(self, collection: str, key: str, value: Record) -> Record:
        table = self._table(collection)
        merged = dict(table.get(key, {}))
        merged.update(copy.deepcopy(value))
        table[key] = merged
        return copy.deepcopy(merged)

    async def query(
        self,
        collection: str,
        filters: Optional[Record] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Record]:
        filters = filters or {}
        rows = [
            copy.deepcopy(record)
            for record in self._table(collection).values()
            if all(record.get(field) == expected for field, expected in filters.items())
        ]
        if order_by:
            rows.sort(key=lambda record: record.get(order_by), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return rows

    async def delete(self, collection: str, key: str) -> bool:
        return self._table(collection).pop(key, None) is not None


class SqlPersistence(Persistence):
    """Persistence API over an async SQLAlchemy session"""

    MODELS = {
        "profiles": Profile,
        "usage": UsageCounter,
        "user_metrics": UserMetrics,
        "contracts": Contract,
        "applications": Application,
        "revenue": RevenueEntry,
        "media_kits": MediaKit,
        "pitches": Pitch,
        "saved_rates": SavedRate,
    }

    def __init__(self, db: AsyncSession):
        self.db = db

    @classmethod
    def _model(cls, collection: str):
        model = cls.MODELS.get(collection)
        if model is None:
            raise UnknownCollection(collection)
        return model

    @staticmethod
    def _primary_key(model) -> str:
        return inspect(model).primary_key[0].name

    @staticmethod
    def _to_record(row) -> Record:
        return {
            column.key: getattr(row, column.key)
            for column in inspect(type(row)).columns
        }

    async def get(self, collection: str, key: str) -> Optional[Record]:
        model = self._model(collection)
        try:
            row = await self.db.get(model, key)
        except SQLAlchemyError as e:
            raise PersistenceUnavailable("get", collection, e) from e
        return self._to_record(row) if row is not None else None

    async def put(self, collection: str, key: str, value: Record) -> Record:
        """
        Insert or update the record stored under key

        Args:
            collection: Collection (table) name
            key: Primary key value
            value: Column values to write; unknown keys are ignored

        Returns:
            The stored record after the write
        """
        model = self._model(collection)
        pk = self._primary_key(model)
        columns = {column.key for column in inspect(model).columns}
        values = {field: v for field, v in value.items() if field in columns and field != pk}

        try:
            row = await self.db.get(model, key)
            if row is None:
                row = model(**{pk: key}, **values)
                self.db.add(row)
            else:
                for field, v in values.items():
                    setattr(row, field, v)
            await self.db.commit()
            await self.db.refresh(row)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceUnavailable("put", collection, e) from e

        return self._to_record(row)

    async def query(
        self,
        collection: str,
        filters: Optional[Record] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Record]:
        model = self._model(collection)
        stmt = select(model)
        for field, expected in (filters or {}).items():
            stmt = stmt.where(getattr(model, field) == expected)
        if order_by:
            column = getattr(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceUnavailable("query", collection, e) from e
        return [self._to_record(row) for row in result.scalars().all()]

    async def delete(self, collection: str, key: str) -> bool:
        model = self._model(collection)
        try:
            row = await self.db.get(model, key)
            if row is None:
                return False
            await self.db.delete(row)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceUnavailable("delete", collection, e) from e
        logger.info(f"Deleted {collection} record {key}")
        return True
