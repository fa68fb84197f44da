"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import quote

import httpx

from roles_service.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_document,
    encode_document,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    params: list[tuple[str, str]] | None = None,
) -> Any:
    """Perform async HTTP request to Firestore REST API. 404 returns None."""
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if method == "GET":
        resp = await client.get(url, headers=headers, params=params)
    elif method == "PATCH":
        resp = await client.patch(url, headers=headers, json=body, params=params)
    elif method == "POST":
        resp = await client.post(url, headers=headers, json=body, params=params)
    else:
        raise ValueError(f"Unsupported method: {method!r}")
    if resp.status_code == 404:
        return None
    if resp.status_code == 409:
        raise DocumentExistsError("Document already exists")
    if resp.status_code == 400 and _error_status(resp) == "FAILED_PRECONDITION":
        raise PreconditionFailedError("Document changed since it was read")
    if resp.status_code not in (200, 204):
        resp.raise_for_status()
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


def _error_status(resp: httpx.Response) -> str | None:
    try:
        error = resp.json().get("error")
    except ValueError:
        return None
    return error.get("status") if isinstance(error, dict) else None


def _snapshot_from_document(doc: dict) -> DocumentSnapshot:
    name = doc.get("name", "")
    doc_id = name.split("/")[-1] if name else ""
    return DocumentSnapshot(
        doc_id, decode_document(doc.get("fields")), update_time=doc.get("updateTime")
    )


class DocumentExistsError(Exception):
    """Raised when createDocument returns 409 (document ID already exists)."""


class PreconditionFailedError(Exception):
    """Raised when a write precondition (e.g. currentDocument.updateTime) fails."""


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(
        self, client: "FirestoreRESTClient", collection_path: str, document_id: str
    ):
        self._client = client
        self.id = document_id
        # Ids are a single path segment; "/" or "?" must not reach the URL raw.
        self._path = f"{collection_path}/{quote(document_id, safe='')}"

    async def update(
        self, data: dict[str, Any], *, last_update_time: str | None = None
    ) -> DocumentSnapshot | None:
        """Update only the given fields of an existing document.

        With last_update_time the write only applies if the document has not
        changed since that snapshot; otherwise PreconditionFailedError.
        Returns the full updated snapshot, or None if the document does not exist.
        """
        params = [("updateMask.fieldPaths", key) for key in data]
        if last_update_time is not None:
            params.append(("currentDocument.updateTime", last_update_time))
        else:
            params.append(("currentDocument.exists", "true"))
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
            params=params,
        )
        if out is None:
            return None
        return DocumentSnapshot(
            self.id, decode_document(out.get("fields")), update_time=out.get("updateTime")
        )

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        url = f"{_BASE}/{self._path}"
        out = await _request_async(
            self._client._http, url, access_token=await self._client.get_token()
        )
        if not out:
            return None
        return DocumentSnapshot(
            self.id, decode_document(out.get("fields")), update_time=out.get("updateTime")
        )


class DocumentSnapshot:
    """Snapshot of a document (id, data and server update time)."""

    def __init__(self, id_: str, data: dict, update_time: str | None = None):
        self.id = id_
        self._data = data
        self.update_time = update_time

    def to_dict(self) -> dict:
        return self._data


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "array-contains": "ARRAY_CONTAINS",
}


class _Query:
    """Fluent query builder for a collection; runs via runQuery.

    Multiple where() calls are AND-ed (compositeFilter). No limit is sent
    unless limit() is called.
    """

    def __init__(
        self,
        client: "FirestoreRESTClient",
        parent: str,
        collection_id: str,
    ):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters: list[tuple[str, str, Any]] = []
        self._limit: int | None = None

    def where(self, field: str, op: str, value: Any) -> "_Query":
        self._filters.append((field, _OP_MAP.get(op, op), value))
        return self

    def limit(self, n: int) -> "_Query":
        self._limit = n
        return self

    def _where_clause(self) -> dict[str, Any] | None:
        field_filters = [
            {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": op,
                    "value": _encode_value(value),
                }
            }
            for field, op, value in self._filters
        ]
        if not field_filters:
            return None
        if len(field_filters) == 1:
            return field_filters[0]
        return {"compositeFilter": {"op": "AND", "filters": field_filters}}

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots."""
        structured: dict[str, Any] = {
            "from": [{"collectionId": self._collection_id}],
        }
        where = self._where_clause()
        if where is not None:
            structured["where"] = where
        if self._limit:
            structured["limit"] = self._limit

        url = f"{_BASE}/{self._parent}:runQuery"
        body = {"structuredQuery": structured}
        resp = await _request_async(
            self._client._http,
            url,
            method="POST",
            body=body,
            access_token=await self._client.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            yield _snapshot_from_document(item["document"])


class CollectionReference:
    """Reference to a collection; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path.rstrip("/")

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, self._path, document_id)

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create a document with the given ID (fail with DocumentExistsError if it exists)."""
        url = f"{_BASE}/{self._path}?documentId={quote(document_id, safe='')}"
        await _request_async(
            self._client._http,
            url,
            method="POST",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )

    def query(self) -> _Query:
        """Start an unfiltered query. Chain .where() and .limit(), then .stream()."""
        parent = self._path.rsplit("/", 1)[0]
        collection_id = self._path.split("/")[-1]
        return _Query(self._client, parent, collection_id)


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")
