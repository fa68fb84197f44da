"""Firestore-backed role repository (implements IRoleRepository).

Firestore evaluates equality filters only, so the soft-delete predicate and
other equalities run server-side while pattern criteria, collated sorting
and skip/limit are applied here over the live documents.
"""

from __future__ import annotations

import unicodedata
from collections.abc import AsyncIterator
from typing import Any

from roles_service.application.dtos.role import RoleCreate, RoleResult
from roles_service.application.dtos.role_query import (
    DEFAULT_SORT_FIELD,
    FieldPattern,
    RoleQuery,
)
from roles_service.domain.enums import SortOrder
from roles_service.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    PreconditionFailedError,
    _Query,
)
from roles_service.infrastructure.firebase.collections import COLLECTION_ROLES
from roles_service.shared.utils.datetime import ensure_utc, utc_now
from roles_service.shared.utils.generators import generate_cuid

_Record = tuple[str, dict[str, Any]]

# Read-check-write rounds before a concurrently modified role gives up.
_UPDATE_ATTEMPTS = 3


def _live_filter(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    """Equality filter for every read and write: extra AND is_deleted == False."""
    return {**(extra or {}), "is_deleted": False}


def _field_value(record: _Record, field: str) -> Any:
    doc_id, data = record
    return doc_id if field == "id" else data.get(field)


def _pattern_matches(pattern: FieldPattern, record: _Record) -> bool:
    value = _field_value(record, pattern.field)
    values = value if isinstance(value, list) else [value]
    return any(isinstance(v, str) and pattern.pattern.search(v) for v in values)


def _matches(query: RoleQuery, record: _Record) -> bool:
    if record[0] in query.exclude_ids:
        return False
    if not all(_pattern_matches(p, record) for p in query.all_of):
        return False
    if query.any_of and not any(_pattern_matches(p, record) for p in query.any_of):
        return False
    return True


def _collation_key(text: str) -> tuple[str, str, str]:
    # Letters first, then accents, then case (lowercase before uppercase).
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (base.casefold(), text.casefold(), text.swapcase())


def _sort_key(value: Any, collate: bool) -> tuple:
    if value is None:
        return (0,)
    if collate and isinstance(value, str):
        return (1, _collation_key(value))
    return (1, value)


def _ordered(records: list[_Record], query: RoleQuery) -> list[_Record]:
    ordered = sorted(
        records,
        key=lambda r: (_sort_key(r[1].get(DEFAULT_SORT_FIELD), False), r[0]),
    )
    ordered.sort(
        key=lambda r: _sort_key(_field_value(r, query.sort_field), query.collate),
        reverse=query.sort_order is SortOrder.DESCENDING,
    )
    return ordered


class FirestoreRoleRepository:
    """Role store using Firestore. Soft-deleted roles are never returned or modified."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_ROLES)

    def _live_query(self, extra: dict[str, Any] | None = None) -> _Query:
        q = self._coll.query()
        for field, value in _live_filter(extra).items():
            q = q.where(field, "==", value)
        return q

    @staticmethod
    def _is_live(data: dict[str, Any], extra: dict[str, Any] | None = None) -> bool:
        return all(data.get(k) == v for k, v in _live_filter(extra).items())

    def _to_result(self, doc_id: str, data: dict[str, Any]) -> RoleResult:
        return RoleResult(
            id=doc_id,
            role_name=data.get("role_name", ""),
            description=data.get("description", ""),
            tenant_id=data.get("tenant_id"),
            permissions=list(data.get("permissions") or []),
            is_active=data.get("is_active", True),
            created_at=ensure_utc(data.get("created_at")),
            updated_at=ensure_utc(data.get("updated_at")),
        )

    async def _matching(self, query: RoleQuery) -> list[_Record]:
        """Live documents satisfying the query criteria, in created_at order."""
        records: list[_Record] = []
        async for snapshot in self._live_query().stream():
            record = (snapshot.id, snapshot.to_dict())
            if _matches(query, record):
                records.append(record)
        return _ordered(records, RoleQuery())

    async def find(self, query: RoleQuery | None = None) -> AsyncIterator[RoleResult]:
        """Yield live roles matching query, sorted, then skipped/limited."""
        query = query or RoleQuery()
        records = _ordered(await self._matching(query), query)
        if query.is_paginated:
            records = records[query.skip : query.skip + query.limit]
        for doc_id, data in records:
            yield self._to_result(doc_id, data)

    async def find_one(self, query: RoleQuery) -> RoleResult | None:
        """Return the oldest live role matching query, or None."""
        records = await self._matching(query)
        if not records:
            return None
        return self._to_result(*records[0])

    async def count(self, query: RoleQuery | None = None) -> int:
        """Return the number of live roles matching query (sort and pagination ignored)."""
        return len(await self._matching(query or RoleQuery()))

    async def find_by_id(
        self, role_id: str, extra: dict[str, Any] | None = None
    ) -> RoleResult | None:
        """Return the role if it exists, is live and matches extra equalities."""
        snapshot = await self._coll.document(role_id).get()
        if snapshot is None or not self._is_live(snapshot.to_dict(), extra):
            return None
        return self._to_result(snapshot.id, snapshot.to_dict())

    async def find_by_permission(
        self, permission_id: str, extra: dict[str, Any] | None = None
    ) -> RoleResult | None:
        """Return a live role whose permissions contain permission_id (server-side)."""
        q = self._live_query(extra).where("permissions", "array-contains", permission_id).limit(1)
        async for snapshot in q.stream():
            return self._to_result(snapshot.id, snapshot.to_dict())
        return None

    async def insert(self, data: RoleCreate, tenant_id: str | None) -> RoleResult:
        """Create a role document with a new CUID; return the stored role."""
        role_id = generate_cuid()
        now = utc_now()
        doc = {
            "role_name": data.role_name,
            "description": data.description,
            "tenant_id": tenant_id,
            "permissions": list(data.permissions),
            "is_active": data.is_active,
            "is_deleted": False,
            "created_at": now,
            "updated_at": now,
        }
        await self._coll.create(role_id, doc)
        return self._to_result(role_id, doc)

    async def update_by_id(
        self, role_id: str, patch: dict[str, Any]
    ) -> RoleResult | None:
        """Apply patch to a live role; return the updated role or None.

        The write is conditional on the update time of the snapshot that
        passed the liveness check, so a role soft-deleted in between is
        re-read (and left alone) instead of patched.
        """
        ref = self._coll.document(role_id)
        for attempt in range(1, _UPDATE_ATTEMPTS + 1):
            snapshot = await ref.get()
            if snapshot is None or not self._is_live(snapshot.to_dict()):
                return None
            try:
                updated = await ref.update(
                    {**patch, "updated_at": utc_now()},
                    last_update_time=snapshot.update_time,
                )
            except PreconditionFailedError:
                if attempt == _UPDATE_ATTEMPTS:
                    raise
                continue
            if updated is None:
                return None
            return self._to_result(role_id, updated.to_dict())
        return None

    async def soft_delete(self, role_id: str) -> RoleResult | None:
        """Set is_deleted on a live role; the document is kept."""
        return await self.update_by_id(role_id, {"is_deleted": True})
