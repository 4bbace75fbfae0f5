"""Service-account OAuth: RS256 JWT assertion exchanged for a bearer token."""

from __future__ import annotations

import base64
import json
import logging
import time
from collections.abc import Sequence
from typing import Any

import aiohttp
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from pydantic import BaseModel, ConfigDict, Field

from urbanmon._constants import SHEETS_SCOPES
from urbanmon._redact import redact_for_log
from urbanmon.exceptions import SheetsAuthError
from urbanmon.sheets.credentials import ServiceAccountCredentials

_logger = logging.getLogger(__name__)

JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"

#: Lifetime requested for each assertion (Google's maximum).
ASSERTION_LIFETIME: int = 3600

#: Tokens are refreshed this many seconds before Google says they expire.
TOKEN_EXPIRY_MARGIN: float = 60.0


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _load_rsa_key(pem: str) -> rsa.RSAPrivateKey:
    try:
        key = serialization.load_pem_private_key(pem.encode("utf-8"), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise SheetsAuthError(f"Service-account private key cannot be loaded: {exc}") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise SheetsAuthError("Service-account private key is not an RSA key")
    return key


def build_assertion(
    credentials: ServiceAccountCredentials,
    *,
    scopes: Sequence[str] = SHEETS_SCOPES,
    issued_at: int | None = None,
) -> str:
    """Sign the JWT-bearer assertion for *credentials*.

    Returns the compact ``header.claims.signature`` form, signed with
    RSASSA-PKCS1-v1_5 over SHA-256.
    """
    iat = int(time.time()) if issued_at is None else issued_at
    header = {"alg": "RS256", "typ": "JWT"}
    claims = {
        "iss": credentials.client_email,
        "scope": " ".join(scopes),
        "aud": credentials.token_uri,
        "iat": iat,
        "exp": iat + ASSERTION_LIFETIME,
    }
    signing_input = ".".join(
        _b64url(json.dumps(part, separators=(",", ":")).encode("utf-8")) for part in (header, claims)
    )
    key = _load_rsa_key(credentials.private_key)
    signature = key.sign(signing_input.encode("ascii"), padding.PKCS1v15(), hashes.SHA256())
    return f"{signing_input}.{_b64url(signature)}"


class AccessToken(BaseModel):
    """A bearer token with a monotonic expiry.

    Parameters
    ----------
    token : str
        The OAuth access token.
    created_at : float
        ``time.monotonic()`` when the token was issued.
    ttl : float
        Seconds the token stays valid, as reported by the token endpoint.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    token: str = Field(repr=False)
    created_at: float = Field(default_factory=time.monotonic)
    ttl: float = ASSERTION_LIFETIME

    @property
    def is_expired(self) -> bool:
        """Whether the token is within :data:`TOKEN_EXPIRY_MARGIN` of its TTL."""
        return (time.monotonic() - self.created_at) >= self.ttl - TOKEN_EXPIRY_MARGIN


class ServiceAccountAuth:
    """Bearer-token provider for the Sheets and Drive APIs.

    Tokens are cached and re-requested only once expired.
    """

    def __init__(
        self,
        credentials: ServiceAccountCredentials,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float,
        scopes: Sequence[str] = SHEETS_SCOPES,
    ) -> None:
        self._credentials = credentials
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._scopes = tuple(scopes)
        self._token: AccessToken | None = None

    async def get_token(self) -> str:
        if self._token is None or self._token.is_expired:
            self._token = await self._fetch_token()
        return self._token.token

    def invalidate(self) -> None:
        self._token = None

    async def _fetch_token(self) -> AccessToken:
        form = {
            "grant_type": JWT_BEARER_GRANT,
            "assertion": build_assertion(self._credentials, scopes=self._scopes),
        }
        _logger.debug("POST %s %s", self._credentials.token_uri, redact_for_log(form))
        try:
            async with self._http.post(self._credentials.token_uri, data=form, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise SheetsAuthError(f"Token exchange failed with HTTP {resp.status}: {text[:200]}")
        except SheetsAuthError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise SheetsAuthError(f"Token exchange request failed: {exc}") from exc

        try:
            body: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SheetsAuthError(f"Token endpoint returned invalid JSON: {text[:200]}") from exc
        if not isinstance(body, dict) or not body.get("access_token"):
            raise SheetsAuthError("Token endpoint response has no access_token")

        _logger.debug("Token response %s", redact_for_log(body))
        return AccessToken(token=str(body["access_token"]), ttl=float(body.get("expires_in", ASSERTION_LIFETIME)))
