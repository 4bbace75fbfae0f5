"""Google Sheets / Drive REST transport."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol
from urllib.parse import quote

import aiohttp

from urbanmon._constants import DRIVE_FILES_URL, SHEETS_BASE_URL
from urbanmon._redact import redact_for_log
from urbanmon.exceptions import SheetsTransportError
from urbanmon.sheets.auth import ServiceAccountAuth

_logger = logging.getLogger(__name__)

SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"

Row = Sequence[Any]


def _shape_error(endpoint: str, body: Mapping[str, Any], exc: Exception) -> SheetsTransportError:
    return SheetsTransportError(
        f"Unexpected response shape from {endpoint} ({exc!r}): {str(body)[:200]}",
        endpoint=endpoint,
    )


class SheetsTransport(Protocol):
    """Structural interface used by :class:`~urbanmon.sheets.mirror.SheetsMirror`.

    Keeps the mirror testable with in-memory doubles; the production
    implementation is :class:`GoogleSheetsTransport`.
    """

    async def find_spreadsheet(self, title: str) -> str | None:
        ...

    async def create_spreadsheet(self, title: str) -> str:
        ...

    async def get_sheet_titles(self, spreadsheet_id: str) -> list[str]:
        ...

    async def add_sheet(self, spreadsheet_id: str, title: str) -> None:
        ...

    async def get_values(self, spreadsheet_id: str, cell_range: str) -> list[list[str]]:
        ...

    async def update_values(self, spreadsheet_id: str, cell_range: str, rows: Sequence[Row]) -> None:
        ...

    async def append_values(self, spreadsheet_id: str, cell_range: str, rows: Sequence[Row]) -> None:
        ...


class GoogleSheetsTransport:
    """aiohttp client for the handful of Sheets v4 and Drive v3 calls the mirror makes."""

    def __init__(self, auth: ServiceAccountAuth, http_session: aiohttp.ClientSession, *, timeout: float) -> None:
        self._auth = auth
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = {"authorization": f"Bearer {await self._auth.get_token()}"}
        endpoint = url.removeprefix(SHEETS_BASE_URL).removeprefix(DRIVE_FILES_URL) or "/"

        _logger.debug("%s %s params=%s body=%s", method, url, params, redact_for_log(payload))

        try:
            async with self._http.request(
                method,
                url,
                params=params,
                json=payload,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if resp.status == 401:
                    self._auth.invalidate()
                if resp.status >= 300:
                    raise SheetsTransportError(
                        f"HTTP {resp.status} from {method} {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except SheetsTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise SheetsTransportError(
                f"Request {method} {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return {}
        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SheetsTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc
        if not isinstance(body, dict):
            raise SheetsTransportError(f"Unexpected response shape from {endpoint}", endpoint=endpoint)
        return body

    # ------------------------------------------------------------------
    # Drive
    # ------------------------------------------------------------------

    async def find_spreadsheet(self, title: str) -> str | None:
        escaped = title.replace("\\", "\\\\").replace("'", "\\'")
        query = f"name='{escaped}' and mimeType='{SPREADSHEET_MIME_TYPE}' and trashed=false"
        body = await self._request("GET", DRIVE_FILES_URL, params={"q": query, "fields": "files(id,name)"})
        files = body.get("files") or []
        if not files:
            return None
        try:
            return str(files[0]["id"])
        except (KeyError, IndexError, TypeError) as exc:
            raise _shape_error("/drive/files", body, exc) from exc

    async def create_spreadsheet(self, title: str) -> str:
        body = await self._request("POST", SHEETS_BASE_URL, payload={"properties": {"title": title}})
        spreadsheet_id = body.get("spreadsheetId")
        if not spreadsheet_id:
            raise SheetsTransportError("Spreadsheet creation returned no spreadsheetId", endpoint="/")
        return str(spreadsheet_id)

    # ------------------------------------------------------------------
    # Sheets
    # ------------------------------------------------------------------

    async def get_sheet_titles(self, spreadsheet_id: str) -> list[str]:
        body = await self._request(
            "GET",
            f"{SHEETS_BASE_URL}/{spreadsheet_id}",
            params={"fields": "sheets.properties.title"},
        )
        try:
            return [str(sheet["properties"]["title"]) for sheet in body.get("sheets", [])]
        except (KeyError, TypeError) as exc:
            raise _shape_error(f"/{spreadsheet_id}", body, exc) from exc

    async def add_sheet(self, spreadsheet_id: str, title: str) -> None:
        await self._request(
            "POST",
            f"{SHEETS_BASE_URL}/{spreadsheet_id}:batchUpdate",
            payload={"requests": [{"addSheet": {"properties": {"title": title}}}]},
        )

    def _values_url(self, spreadsheet_id: str, cell_range: str, suffix: str = "") -> str:
        return f"{SHEETS_BASE_URL}/{spreadsheet_id}/values/{quote(cell_range, safe='')}{suffix}"

    async def get_values(self, spreadsheet_id: str, cell_range: str) -> list[list[str]]:
        body = await self._request("GET", self._values_url(spreadsheet_id, cell_range))
        try:
            return [[str(cell) for cell in row] for row in body.get("values", [])]
        except TypeError as exc:
            raise _shape_error(f"/{spreadsheet_id}/values", body, exc) from exc

    async def update_values(self, spreadsheet_id: str, cell_range: str, rows: Sequence[Row]) -> None:
        await self._request(
            "PUT",
            self._values_url(spreadsheet_id, cell_range),
            params={"valueInputOption": "RAW"},
            payload={"range": cell_range, "values": [list(row) for row in rows]},
        )

    async def append_values(self, spreadsheet_id: str, cell_range: str, rows: Sequence[Row]) -> None:
        await self._request(
            "POST",
            self._values_url(spreadsheet_id, cell_range, ":append"),
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            payload={"values": [list(row) for row in rows]},
        )
