"""Internal constants shared across the library."""

from __future__ import annotations

SPREADSHEET_TITLE = "Urban Monitoring Platform Data"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
SHEETS_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"
DRIVE_FILES_URL = "https://www.googleapis.com/drive/v3/files"
SHEETS_SCOPES: tuple[str, ...] = (
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
)

DEFAULT_AUTOSAVE_MINUTES: float = 5.0
DEFAULT_SHEETS_TIMEOUT: float = 10.0

# ------------------------------------------------------------------
# Dashboard reference values (no historical data source exists)
# ------------------------------------------------------------------

LAST_WEEK_AQI = 120
LAST_WEEK_CONGESTION = 72
YESTERDAY_REPORTS = 20

FLOOD_RISK_AREAS = 3
LAST_WEEK_FLOOD_RISK = 2
FLOOD_RISK_STATUS = "2 low risk, 1 medium risk"

# ------------------------------------------------------------------
# Banding tables  (upper bound inclusive → label, color)
# ------------------------------------------------------------------

AQI_BANDS: tuple[tuple[float, str, str], ...] = (
    (50, "Good", "#10B981"),
    (100, "Moderate", "#F59E0B"),
    (150, "Unhealthy for Sensitive Groups", "#F97316"),
    (200, "Unhealthy", "#EF4444"),
    (300, "Very Unhealthy", "#8B5CF6"),
    (float("inf"), "Hazardous", "#7F1D1D"),
)

CONGESTION_BANDS: tuple[tuple[float, str, str], ...] = (
    (30, "Light", "#10B981"),
    (60, "Moderate", "#F59E0B"),
    (80, "Heavy", "#F97316"),
    (float("inf"), "Severe", "#EF4444"),
)

# Dashboard headline wording for average congestion.
CONGESTION_SUMMARY_BANDS: tuple[tuple[float, str], ...] = (
    (40, "Light traffic"),
    (60, "Some congestion"),
    (80, "Moderate congestion"),
    (float("inf"), "Severe congestion"),
)

HOTSPOT_CONGESTION_THRESHOLD = 70
# Severity bands are strict lower bounds.
HOTSPOT_SEVERITY_HIGH = 80
HOTSPOT_SEVERITY_MEDIUM = 60
