"""Helpers for safe debug logging.

urbanmon handles user passwords, service-account private keys and bearer
tokens. Secrets show up both as dict values (token exchange forms, user
records) and embedded in free text (error bodies, credential JSON), so both
are masked before DEBUG logs are emitted.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "private_key",
        "privatekey",
        "private_key_id",
        "client_secret",
        "token",
        "access_token",
        "accesstoken",
        "refresh_token",
        "id_token",
        "assertion",
        "authorization",
        "google_api_credentials",
    }
)

_PEM_BLOCK = re.compile(r"-----BEGIN [A-Z ]+-----.*?(?:-----END [A-Z ]+-----|$)", re.DOTALL)
_BEARER = re.compile(r"(?i)\bbearer\s+[\w\-.~+/]+=*")
_JWT = re.compile(r"\beyJ[\w-]+\.[\w-]+\.[\w-]+")

REDACTED = "<redacted>"


def _scrub_text(text: str) -> str:
    text = _PEM_BLOCK.sub("<redacted-pem>", text)
    text = _BEARER.sub("Bearer <redacted>", text)
    return _JWT.sub("<redacted-jwt>", text)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Models are dumped by field name first, so ``User.password`` is caught
    like any other sensitive key.
    """
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        text = _scrub_text(value)
        return f"{text[:max_string]}…<truncated>" if len(text) > max_string else text

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")

    if isinstance(value, Mapping):
        return {
            str(key): (
                REDACTED
                if str(key).lower() in _SENSITIVE_VALUE_KEYS
                else redact_for_log(item, max_string=max_string, _depth=_depth + 1)
            )
            for key, item in value.items()
        }

    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]

    return repr(value)
