"""
Airtable REST client.

Provides async record operations against one Airtable base using a shared
aiohttp session. Every operation issues exactly one HTTP request and returns
an ``Ok``/``Failure`` result instead of raising.
"""

import asyncio
import structlog
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from datetime import datetime, timezone
from urllib.parse import quote

import aiohttp

from shelf_api.src.errors import Failure, Ok, Result, UpstreamError

logger = structlog.get_logger(__name__)

# (field, direction) pairs, direction is "asc" or "desc"
SortSpec = Sequence[Tuple[str, str]]


def escape_formula_string(value: Any) -> str:
    """
    Render a value as a double-quoted Airtable formula string literal.

    Backslashes and double quotes are escaped so the value can never close
    the literal or inject formula syntax.

    Args:
        value: Value to embed

    Returns:
        Quoted, escaped literal
    """
    text = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def build_filter_formula(filters: Mapping[str, Any]) -> Optional[str]:
    """
    Build a filterByFormula expression matching every field exactly.

    Args:
        filters: Field name to expected value

    Returns:
        Formula string, or None when there is nothing to filter on
    """
    clauses = [
        f"{{{field}}}={escape_formula_string(value)}"
        for field, value in filters.items()
    ]
    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return f"AND({', '.join(clauses)})"


def extract_error_message(payload: Any) -> Optional[str]:
    """
    Pull the human readable message out of an Airtable error body.

    Airtable answers either ``{"error": {"type": ..., "message": ...}}`` or
    ``{"error": "NOT_FOUND"}``.
    """
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict):
        return error.get("message") or error.get("type")
    if isinstance(error, str):
        return error
    return None


class AirtableClient:
    """Client for record CRUD against a single Airtable base."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_id: str,
        api_key: str,
        api_url: str = "https://api.airtable.com/v0"
    ):
        """
        Initialize Airtable client.

        Args:
            session: Shared aiohttp session
            base_id: Airtable base identifier
            api_key: Airtable access token
            api_url: REST API root
        """
        self.session = session
        self.base_id = base_id
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def table_url(self, table: str, record_id: Optional[str] = None) -> str:
        """Build the URL of a table, or of one record in it."""
        url = f"{self.api_url}/{self.base_id}/{quote(table, safe='')}"
        if record_id:
            url = f"{url}/{quote(record_id, safe='')}"
        return url

    async def _request(
        self,
        method: str,
        url: str,
        fallback_message: str,
        params: Optional[List[Tuple[str, str]]] = None,
        json: Optional[Dict[str, Any]] = None
    ) -> Result[Dict[str, Any]]:
        """
        Issue one request and normalize the outcome.

        Args:
            method: HTTP method
            url: Target URL
            fallback_message: Message used when the error body carries none
            params: Query parameters
            json: JSON body

        Returns:
            Ok with the decoded JSON body, or Failure with an UpstreamError
        """
        try:
            async with self.session.request(
                method, url, headers=self.headers, params=params, json=json
            ) as response:
                try:
                    payload = await response.json(content_type=None)
                except ValueError:
                    payload = None

                if response.status >= 400:
                    message = extract_error_message(payload) or fallback_message
                    logger.warning(
                        "airtable_request_failed",
                        method=method,
                        url=url,
                        status_code=response.status,
                        error=message
                    )
                    return Failure(UpstreamError(message))

                logger.debug("airtable_request_completed", method=method, url=url, status_code=response.status)
                return Ok(payload if isinstance(payload, dict) else {})

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("airtable_transport_error", method=method, url=url, error=str(e))
            return Failure(UpstreamError(str(e) or fallback_message))

    async def list_records(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        max_records: Optional[int] = None,
        fallback_message: str = "Failed to fetch records"
    ) -> Result[List[Dict[str, Any]]]:
        """
        List records of a table, optionally filtered and sorted.

        Args:
            table: Table name
            filters: Exact-match field filters
            sort: Sort fields and directions
            max_records: Maximum number of records to return
            fallback_message: Message used when the store gives none

        Returns:
            Ok with the raw records (``{"id", "fields", "createdTime"}``)
        """
        params: List[Tuple[str, str]] = []

        formula = build_filter_formula(filters or {})
        if formula:
            params.append(("filterByFormula", formula))

        for index, (field, direction) in enumerate(sort or ()):
            params.append((f"sort[{index}][field]", field))
            params.append((f"sort[{index}][direction]", direction))

        if max_records is not None:
            params.append(("maxRecords", str(max_records)))

        result = await self._request("GET", self.table_url(table), fallback_message, params=params)
        if isinstance(result, Failure):
            return result
        return Ok(list(result.value.get("records", [])))

    async def find_first(
        self,
        table: str,
        filters: Mapping[str, Any],
        fallback_message: str = "Failed to fetch record"
    ) -> Result[Optional[Dict[str, Any]]]:
        """
        Return the first record matching the filters.

        Returns:
            Ok with the record, or Ok(None) when nothing matches
        """
        result = await self.list_records(
            table, filters=filters, max_records=1, fallback_message=fallback_message
        )
        if isinstance(result, Failure):
            return result
        records = result.value
        return Ok(records[0] if records else None)

    async def create_record(
        self,
        table: str,
        fields: Dict[str, Any],
        fallback_message: str = "Failed to create record"
    ) -> Result[Dict[str, Any]]:
        """Create one record and return it as stored."""
        result = await self._request(
            "POST", self.table_url(table), fallback_message, json={"fields": fields}
        )
        if isinstance(result, Ok):
            logger.info("airtable_record_created", table=table, record_id=result.value.get("id"))
        return result

    async def update_record(
        self,
        table: str,
        record_id: str,
        fields: Dict[str, Any],
        fallback_message: str = "Failed to update record"
    ) -> Result[Dict[str, Any]]:
        """Partially update one record (PATCH) and return it as stored."""
        result = await self._request(
            "PATCH", self.table_url(table, record_id), fallback_message, json={"fields": fields}
        )
        if isinstance(result, Ok):
            logger.info("airtable_record_updated", table=table, record_id=record_id, fields=sorted(fields))
        return result

    async def delete_record(
        self,
        table: str,
        record_id: str,
        fallback_message: str = "Failed to delete record"
    ) -> Result[Dict[str, Any]]:
        """Delete one record. The store answers ``{"id", "deleted": true}``."""
        result = await self._request("DELETE", self.table_url(table, record_id), fallback_message)
        if isinstance(result, Ok):
            logger.info("airtable_record_deleted", table=table, record_id=record_id)
        return result


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
