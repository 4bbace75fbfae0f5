"""Google Sheets mirror."""

from urbanmon.sheets.auth import AccessToken, ServiceAccountAuth, build_assertion
from urbanmon.sheets.credentials import ServiceAccountCredentials
from urbanmon.sheets.mirror import SheetsMirror
from urbanmon.sheets.rows import HEADERS, SHEET_NAMES, from_row, to_row
from urbanmon.sheets.transport import GoogleSheetsTransport, SheetsTransport

__all__ = [
    "HEADERS",
    "SHEET_NAMES",
    "AccessToken",
    "GoogleSheetsTransport",
    "ServiceAccountAuth",
    "ServiceAccountCredentials",
    "SheetsMirror",
    "SheetsTransport",
    "build_assertion",
    "from_row",
    "to_row",
]
