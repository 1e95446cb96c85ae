"""Shared pytest fixtures."""

import copy
import re
from collections.abc import AsyncIterator, Callable
from types import SimpleNamespace
from typing import Any
from uuid import UUID, uuid4

import pytest
from pymongo import ReturnDocument

from campaigndesk.core.core import Services


def _resolve(doc: Any, path: str) -> list[Any]:
    """Values at a dotted path, descending into arrays like MongoDB does."""
    values = [doc]
    for part in path.split("."):
        found = []
        for value in values:
            if isinstance(value, dict) and part in value:
                found.append(value[part])
            elif isinstance(value, list):
                found.extend(item[part] for item in value if isinstance(item, dict) and part in item)
        values = found
    return values


def _condition_matches(values: list[Any], condition: Any) -> bool:
    if isinstance(condition, dict) and "$ne" in condition:
        return condition["$ne"] not in values
    if isinstance(condition, dict) and "$regex" in condition:
        return any(isinstance(value, str) and re.search(condition["$regex"], value) for value in values)
    return condition in values


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(_condition_matches(_resolve(doc, path), condition) for path, condition in query.items())


def _set(doc: dict[str, Any], path: str, value: Any, query: dict[str, Any]) -> None:
    parts = path.split(".")
    target: Any = doc
    for i, part in enumerate(parts[:-1]):
        if part == "$":
            # Positional operator: first array element matched by the query
            array_path = ".".join(parts[:i])
            index = next(
                index
                for index, item in enumerate(target)
                if all(
                    _condition_matches(_resolve(item, key[len(array_path) + 1 :]), condition)
                    for key, condition in query.items()
                    if key.startswith(array_path + ".")
                )
            )
            target = target[index]
        elif isinstance(target, list):
            target = target[int(part)]
        else:
            target = target.setdefault(part, {})
    target[parts[-1]] = copy.deepcopy(value)


def _apply_update(doc: dict[str, Any], update: dict[str, Any], query: dict[str, Any], inserting: bool) -> None:
    for operator, fields in update.items():
        for path, value in fields.items():
            current = _resolve(doc, path)
            if operator == "$set":
                _set(doc, path, value, query)
            elif operator == "$inc":
                _set(doc, path, (current[0] if current else 0) + value, query)
            elif operator == "$max":
                if not current or value > current[0]:
                    _set(doc, path, value, query)
            elif operator == "$setOnInsert":
                if inserting:
                    _set(doc, path, value, query)
            else:
                raise NotImplementedError(operator)


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return self._docs[:length]

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[dict[str, Any]]:
        for doc in self._docs:
            yield doc


class FakeCollection:
    """In-memory stand-in for the subset of AsyncCollection the services use."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []

    async def create_index(self, *args: Any, **kwargs: Any) -> str:
        return "index"

    def find(self, query: dict[str, Any] | None = None, projection: dict[str, Any] | None = None) -> FakeCursor:
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs if _matches(doc, query or {})])

    async def find_one(self, query: dict[str, Any], projection: dict[str, Any] | None = None) -> dict[str, Any] | None:
        doc = self._first(query)
        return copy.deepcopy(doc) if doc is not None else None

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", uuid4())
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any], upsert: bool = False) -> SimpleNamespace:
        doc = self._first(query)
        if doc is not None:
            before = copy.deepcopy(doc)
            _apply_update(doc, update, query, inserting=False)
            return SimpleNamespace(matched_count=1, modified_count=int(doc != before), upserted_id=None)
        if upsert:
            doc = self._upsert(query, update)
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=doc["_id"])
        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

    async def find_one_and_update(
        self,
        query: dict[str, Any],
        update: dict[str, Any],
        upsert: bool = False,
        return_document: bool = ReturnDocument.BEFORE,
    ) -> dict[str, Any] | None:
        doc = self._first(query)
        if doc is None:
            if not upsert:
                return None
            doc = self._upsert(query, update)
            return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else None
        before = copy.deepcopy(doc)
        _apply_update(doc, update, query, inserting=False)
        return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        doc = self._first(query)
        if doc is None:
            return SimpleNamespace(deleted_count=0)
        self.docs.remove(doc)
        return SimpleNamespace(deleted_count=1)

    def _first(self, query: dict[str, Any]) -> dict[str, Any] | None:
        return next((doc for doc in self.docs if _matches(doc, query)), None)

    def _upsert(self, query: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
        doc = {key: value for key, value in query.items() if not isinstance(value, dict)}
        _apply_update(doc, update, query, inserting=True)
        doc.setdefault("_id", uuid4())
        self.docs.append(doc)
        return doc


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeCore:
    """Core replacement wiring real services to the in-memory database."""

    def __init__(self, database: FakeDatabase) -> None:
        self.database = database
        self.services = Services(database)  # type: ignore[arg-type]
        self.services.set_core(self)  # type: ignore[arg-type]


@pytest.fixture
def database():
    """Empty in-memory database."""
    return FakeDatabase()


@pytest.fixture
def services(database):
    """Services registry backed by the in-memory database."""
    return FakeCore(database).services


@pytest.fixture
def store_campaign(database) -> Callable[..., UUID]:
    """Write a raw campaign document directly, bypassing validation and counters."""

    def store(*tag_numbers: Any, campaign_code: str | None = None) -> UUID:
        campaign_id = uuid4()
        database.get_collection("campaigns").docs.append(
            {
                "_id": campaign_id,
                "campaign_code": campaign_code,
                "name": "Imported campaign",
                "channels": [{"type": "Imported", "tag_number": tag} for tag in tag_numbers],
            }
        )
        return campaign_id

    return store


@pytest.fixture
def tag_counters(database) -> Callable[[], dict[str, int]]:
    """Snapshot of stored tag counters as {prefix: last_number}."""

    def snapshot() -> dict[str, int]:
        return {doc["prefix"]: doc["last_number"] for doc in database.get_collection("tag_counters").docs}

    return snapshot
