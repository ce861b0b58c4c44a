"""
Shared fixtures for the Shelf API test suite.

Provides:
- InMemoryAirtableClient: record store double with the AirtableClient interface
- FakeHttpSession: canned aiohttp session for outbound HTTP
- Application and TestClient fixtures wired to both doubles
"""

import asyncio
import itertools
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import aiohttp
import pytest
from fastapi.testclient import TestClient

from shelf_api.src.config import Settings
from shelf_api.src.dependencies import get_airtable_client, get_http_session
from shelf_api.src.errors import Failure, Ok, UpstreamError
from shelf_api.src.main import create_app


# ============================================================================
# RECORD STORE DOUBLE
# ============================================================================


class InMemoryAirtableClient:
    """In-memory stand-in for ``AirtableClient``; same methods, same results."""

    def __init__(self):
        self.tables: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.failure: Optional[str] = None
        self.calls: List[Tuple[str, str]] = []
        self._ids = itertools.count(1)

    def fail_with(self, message: str) -> None:
        """Make every subsequent operation fail as an unreachable store would."""
        self.failure = message

    def records(self, table: str) -> List[Dict[str, Any]]:
        return list(self.tables.get(table, {}).values())

    def _check(self, operation: str, table: str):
        self.calls.append((operation, table))
        if self.failure:
            return Failure(UpstreamError(self.failure))
        return None

    async def list_records(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        sort: Optional[List[Tuple[str, str]]] = None,
        max_records: Optional[int] = None,
        fallback_message: str = "Failed to fetch records"
    ):
        failed = self._check("list", table)
        if failed:
            return failed

        matches = [
            record for record in self.records(table)
            if all(str(record["fields"].get(k, "")) == str(v) for k, v in (filters or {}).items())
        ]
        for field, direction in reversed(list(sort or ())):
            matches.sort(
                key=lambda r: (str(r["fields"].get(field, "")), r["_seq"]),
                reverse=direction == "desc"
            )
        if max_records is not None:
            matches = matches[:max_records]
        return Ok([self._public(record) for record in matches])

    async def find_first(self, table: str, filters: Mapping[str, Any], fallback_message: str = ""):
        result = await self.list_records(table, filters=filters, max_records=1)
        if isinstance(result, Failure):
            return result
        return Ok(result.value[0] if result.value else None)

    async def create_record(self, table: str, fields: Dict[str, Any], fallback_message: str = ""):
        failed = self._check("create", table)
        if failed:
            return failed

        seq = next(self._ids)
        record = {
            "id": f"rec{seq:014d}",
            "createdTime": "2024-01-01T00:00:00.000Z",
            "fields": {k: v for k, v in fields.items() if v is not None},
            "_seq": seq,
        }
        self.tables.setdefault(table, {})[record["id"]] = record
        return Ok(self._public(record))

    async def update_record(self, table: str, record_id: str, fields: Dict[str, Any], fallback_message: str = ""):
        failed = self._check("update", table)
        if failed:
            return failed

        record = self.tables.get(table, {}).get(record_id)
        if record is None:
            return Failure(UpstreamError(f"Could not find record {record_id}"))
        record["fields"].update(fields)
        return Ok(self._public(record))

    async def delete_record(self, table: str, record_id: str, fallback_message: str = ""):
        failed = self._check("delete", table)
        if failed:
            return failed

        if record_id not in self.tables.get(table, {}):
            return Failure(UpstreamError(f"Could not find record {record_id}"))
        del self.tables[table][record_id]
        return Ok({"id": record_id, "deleted": True})

    @staticmethod
    def _public(record: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": record["id"],
            "createdTime": record["createdTime"],
            "fields": dict(record["fields"]),
        }


# ============================================================================
# OUTBOUND HTTP DOUBLE
# ============================================================================


NOT_JSON = object()

Handler = Callable[[Dict[str, Any]], Tuple[int, Any]]


class FakeResponse:
    def __init__(self, status: int, payload: Any):
        self.status = status
        self._payload = payload

    async def json(self, content_type: Optional[str] = "application/json"):
        if self._payload is NOT_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeRequestContext:
    def __init__(self, session: "FakeHttpSession", method: str, url: str, kwargs: Dict[str, Any]):
        self.session = session
        self.method = method
        self.url = url
        self.kwargs = kwargs

    async def __aenter__(self) -> FakeResponse:
        return self.session.dispatch(self.method, self.url, self.kwargs)

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None


class FakeHttpSession:
    """
    Minimal ``aiohttp.ClientSession`` replacement.

    Routes are keyed by (method, url) and answer either a fixed
    ``(status, payload)`` pair or a callable receiving the request kwargs.
    Unrouted requests answer 404 with no body.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Union[Tuple[int, Any], Handler]] = {}
        self.requests: List[Dict[str, Any]] = []
        self.error: Optional[BaseException] = None
        self.closed = False

    def add(self, method: str, url: str, status: int = 200, payload: Any = None) -> None:
        self.routes[(method.upper(), url)] = (status, payload)

    def add_handler(self, method: str, url: str, handler: Handler) -> None:
        self.routes[(method.upper(), url)] = handler

    def raise_on_request(self, error: BaseException) -> None:
        self.error = error

    def dispatch(self, method: str, url: str, kwargs: Dict[str, Any]) -> FakeResponse:
        self.requests.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error

        route = self.routes.get((method.upper(), url))
        if route is None:
            return FakeResponse(404, NOT_JSON)
        if callable(route):
            return FakeResponse(*route(kwargs))
        return FakeResponse(*route)

    @property
    def last_request(self) -> Dict[str, Any]:
        return self.requests[-1]

    def request(self, method: str, url: str, **kwargs) -> FakeRequestContext:
        return FakeRequestContext(self, method, url, kwargs)

    def get(self, url: str, **kwargs) -> FakeRequestContext:
        return self.request("GET", url, **kwargs)

    async def close(self) -> None:
        self.closed = True


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def airtable() -> InMemoryAirtableClient:
    return InMemoryAirtableClient()


@pytest.fixture
def fake_http() -> FakeHttpSession:
    return FakeHttpSession()


@pytest.fixture
def transport_error() -> aiohttp.ClientError:
    return aiohttp.ClientConnectionError("Cannot connect to host")


@pytest.fixture
def timeout_error() -> asyncio.TimeoutError:
    return asyncio.TimeoutError()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Explicit settings so no environment or .env file leaks in."""
    return Settings(
        airtable_base_id="appTestBase",
        airtable_api_key="patTestKey",
        omdb_api_key="omdb-test-key",
        password_bcrypt_rounds=4,
        upload_dir=str(tmp_path / "uploads"),
        log_level="WARNING",
        log_format="text",
        _env_file=None,
    )


@pytest.fixture
def app(settings, airtable, fake_http):
    application = create_app(settings)
    application.dependency_overrides[get_airtable_client] = lambda: airtable
    application.dependency_overrides[get_http_session] = lambda: fake_http
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
