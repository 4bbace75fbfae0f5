"""Google Sheets mirror of the entity store.

The mirror observes the store through a listener. Changes are queued and
written by a single background worker, so HTTP handlers never wait on the
network. Every write is attempted once; failures are logged and dropped,
leaving the in-memory store authoritative.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

import aiohttp
from pydantic import ValidationError

from urbanmon._constants import DEFAULT_SHEETS_TIMEOUT, SPREADSHEET_TITLE
from urbanmon.config import UrbanmonConfig
from urbanmon.exceptions import SheetsError
from urbanmon.sheets.auth import ServiceAccountAuth
from urbanmon.sheets.credentials import ServiceAccountCredentials
from urbanmon.sheets.rows import SHEET_NAMES, from_row, header_row, to_row
from urbanmon.sheets.transport import GoogleSheetsTransport, SheetsTransport
from urbanmon.store import ChangeAction, Collection, EntityStore, StoreChange, StoreSnapshot

_logger = logging.getLogger(__name__)


class SheetsMirror:
    """Mirror store changes into one spreadsheet, one sheet per collection.

    Parameters
    ----------
    transport : SheetsTransport
        Sheets/Drive client. Tests pass an in-memory double.
    spreadsheet_id : str or None
        Target spreadsheet. When ``None``, :meth:`connect` finds the
        spreadsheet titled *spreadsheet_title* through Drive or creates it.
    spreadsheet_title : str
        Title used for lookup/creation.
    timeout : float
        Upper bound in seconds for each queued write.
    http_session : aiohttp.ClientSession or None
        Session owned by the mirror and closed on :meth:`stop`.
    """

    def __init__(
        self,
        transport: SheetsTransport,
        *,
        spreadsheet_id: str | None = None,
        spreadsheet_title: str = SPREADSHEET_TITLE,
        timeout: float = DEFAULT_SHEETS_TIMEOUT,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._transport = transport
        self._spreadsheet_id = spreadsheet_id
        self._spreadsheet_title = spreadsheet_title
        self._timeout = timeout
        self._http_session = http_session
        self._connected = False
        self._store: EntityStore | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue[StoreChange] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None

    @classmethod
    def from_config(cls, config: UrbanmonConfig) -> SheetsMirror:
        """Build a mirror backed by the real Google APIs.

        Must be called from a running event loop (it opens an
        ``aiohttp.ClientSession``).

        Raises
        ------
        UrbanmonConfigError
            When ``GOOGLE_API_CREDENTIALS`` is missing or malformed.
        """
        credentials = ServiceAccountCredentials.from_json(config.google_api_credentials)
        http_session = aiohttp.ClientSession()
        auth = ServiceAccountAuth(credentials, http_session, timeout=config.sheets_timeout)
        transport = GoogleSheetsTransport(auth, http_session, timeout=config.sheets_timeout)
        return cls(
            transport,
            spreadsheet_id=config.spreadsheet_id,
            spreadsheet_title=config.spreadsheet_title,
            timeout=config.sheets_timeout,
            http_session=http_session,
        )

    @property
    def spreadsheet_id(self) -> str | None:
        return self._spreadsheet_id

    # ------------------------------------------------------------------
    # Setup and load
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Resolve the spreadsheet, create missing sheets and write header rows.

        Raises
        ------
        SheetsError
            On any auth or transport failure.
        """
        if self._connected:
            return
        if not self._spreadsheet_id:
            found = await self._transport.find_spreadsheet(self._spreadsheet_title)
            if found is None:
                found = await self._transport.create_spreadsheet(self._spreadsheet_title)
                _logger.info("Created spreadsheet %r (%s)", self._spreadsheet_title, found)
            self._spreadsheet_id = found

        existing = set(await self._transport.get_sheet_titles(self._spreadsheet_id))
        for collection, sheet in SHEET_NAMES.items():
            if sheet not in existing:
                await self._transport.add_sheet(self._spreadsheet_id, sheet)
                _logger.info("Added sheet %s", sheet)
            await self._transport.update_values(self._spreadsheet_id, f"{sheet}!A1:Z1", [header_row(collection)])
        self._connected = True

    async def load(self, store: EntityStore) -> bool:
        """Replace *store* with the spreadsheet contents.

        Returns ``False`` without touching the store when every sheet is
        empty below its header row.

        Raises
        ------
        SheetsError
            When the spreadsheet cannot be reached or read. The store is
            left untouched.
        """
        await self.connect()
        snapshot = await self._read_snapshot()
        if not any(snapshot.items(collection) for collection in Collection):
            _logger.info("Spreadsheet %s is empty; nothing to load", self._spreadsheet_id)
            return False
        store.restore(snapshot)
        _logger.info(
            "Loaded spreadsheet %s (%d locations, %d reports)",
            self._spreadsheet_id,
            len(snapshot.locations),
            len(snapshot.reports),
        )
        return True

    async def _read_snapshot(self) -> StoreSnapshot:
        assert self._spreadsheet_id is not None
        collections: dict[str, list[object]] = {}
        for collection, sheet in SHEET_NAMES.items():
            rows = await self._transport.get_values(self._spreadsheet_id, f"{sheet}!A2:Z")
            parsed: list[object] = []
            for offset, row in enumerate(rows, start=2):
                if not any(str(cell).strip() for cell in row):
                    continue
                try:
                    parsed.append(from_row(collection, row))
                except (ValidationError, ValueError) as exc:
                    _logger.warning("Skipping malformed %s row %d: %s", sheet, offset, exc)
            collections[collection.value] = parsed
        # Counters are derived from the highest id on restore.
        return StoreSnapshot.model_validate(collections)

    # ------------------------------------------------------------------
    # Change queue
    # ------------------------------------------------------------------

    def _on_change(self, change: StoreChange) -> None:
        loop = self._loop
        if loop is None:
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._queue.put_nowait(change)
        else:
            loop.call_soon_threadsafe(self._queue.put_nowait, change)

    async def start(self, store: EntityStore) -> None:
        if self._worker is not None:
            return
        self._store = store
        self._loop = asyncio.get_running_loop()
        store.add_listener(self._on_change)
        self._worker = asyncio.create_task(self._drain(), name="urbanmon-sheets-writer")

    async def _drain(self) -> None:
        while True:
            change = await self._queue.get()
            try:
                await asyncio.wait_for(self._apply(change), timeout=self._timeout)
            except (SheetsError, TimeoutError) as exc:
                _logger.warning(
                    "Dropped %s of %s %s: %s",
                    change.action.value,
                    change.collection.value,
                    getattr(change.entity, "id", "?"),
                    exc,
                )
            except Exception:
                _logger.exception("Unexpected error mirroring %s change", change.collection.value)
            finally:
                self._queue.task_done()

    async def _apply(self, change: StoreChange) -> None:
        assert self._spreadsheet_id is not None
        sheet = SHEET_NAMES[change.collection]
        row = to_row(change.collection, change.entity)
        if change.action is ChangeAction.CREATE:
            await self._transport.append_values(self._spreadsheet_id, f"{sheet}!A1", [row])
            return

        # Updates and upserts rewrite the row whose id column matches.
        key = str(row[0])
        ids = await self._transport.get_values(self._spreadsheet_id, f"{sheet}!A:A")
        for index, cells in enumerate(ids):
            if index > 0 and cells and str(cells[0]) == key:
                await self._transport.update_values(
                    self._spreadsheet_id, f"{sheet}!A{index + 1}:Z{index + 1}", [row]
                )
                return
        await self._transport.append_values(self._spreadsheet_id, f"{sheet}!A1", [row])

    async def save(self, store: EntityStore) -> bool:
        """Wait until every queued change has been attempted."""
        if self._worker is None:
            return self._connected
        await self._queue.join()
        return True

    async def stop(self) -> None:
        """Drain the queue, stop the writer and close the HTTP session."""
        if self._worker is not None:
            await self._queue.join()
            worker, self._worker = self._worker, None
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker
        if self._store is not None:
            self._store.remove_listener(self._on_change)
            self._store = None
        await self.close()

    async def close(self) -> None:
        if self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
