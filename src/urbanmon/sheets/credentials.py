"""Google service-account credentials."""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from urbanmon._constants import GOOGLE_TOKEN_URI
from urbanmon.exceptions import UrbanmonConfigError


class ServiceAccountCredentials(BaseModel):
    """The subset of a service-account key file the Sheets mirror needs.

    Parameters
    ----------
    client_email : str
        Service-account identity, used as the JWT issuer.
    private_key : str
        PEM-encoded RSA key. Escaped ``\\n`` sequences (common when the
        JSON is pasted into an environment variable) are unescaped.
    token_uri : str
        OAuth token endpoint.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    client_email: str = Field(min_length=1)
    private_key: str = Field(min_length=1, repr=False)
    token_uri: str = GOOGLE_TOKEN_URI

    @field_validator("private_key")
    @classmethod
    def _unescape_newlines(cls, value: str) -> str:
        return value.replace("\\n", "\n")

    @classmethod
    def from_json(cls, raw: str | None) -> ServiceAccountCredentials:
        """Parse the ``GOOGLE_API_CREDENTIALS`` JSON document.

        Raises
        ------
        UrbanmonConfigError
            When *raw* is missing, is not JSON, or lacks
            ``client_email``/``private_key``.
        """
        if not raw or not raw.strip():
            raise UrbanmonConfigError("GOOGLE_API_CREDENTIALS is not set")
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise UrbanmonConfigError(f"GOOGLE_API_CREDENTIALS is not valid JSON: {exc.msg}") from exc
        if not isinstance(document, dict):
            raise UrbanmonConfigError("GOOGLE_API_CREDENTIALS must be a JSON object")
        try:
            return cls.model_validate(document)
        except ValidationError as exc:
            missing = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
            raise UrbanmonConfigError(f"GOOGLE_API_CREDENTIALS is missing or has invalid: {missing}") from exc
