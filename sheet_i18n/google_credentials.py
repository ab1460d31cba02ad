"""Helpers for validating and building Google service account credentials."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from google.oauth2 import service_account

__all__ = [
    "CredentialsError",
    "GoogleEnvironment",
    "MissingCredentialsError",
    "REQUIRED_ENV_VARS",
    "SCOPES",
    "create_credentials",
    "validate_env",
]


SCOPES: Sequence[str] = ("https://www.googleapis.com/auth/spreadsheets",)
TOKEN_URI = "https://oauth2.googleapis.com/token"

REQUIRED_ENV_VARS: Sequence[str] = (
    "GOOGLE_CLIENT_EMAIL",
    "GOOGLE_PRIVATE_KEY",
    "GOOGLE_SPREADSHEET_ID",
)


class CredentialsError(Exception):
    """Raised when the service account credentials cannot be used."""


class MissingCredentialsError(CredentialsError):
    """Raised when a required environment variable is not set."""


@dataclass(frozen=True)
class GoogleEnvironment:
    client_email: str
    private_key: str
    spreadsheet_id: str


def _normalise_private_key(key: str) -> str:
    key = key.strip().strip('"')
    key = key.replace("\r\n", "\n").replace("\r", "\n")
    key = key.replace("\\n", "\n")
    if not key.endswith("\n"):
        key += "\n"
    return key


def validate_env(environ: Optional[Mapping[str, str]] = None) -> GoogleEnvironment:
    """Return the Google settings from ``environ`` or raise if any is missing."""

    source = os.environ if environ is None else environ
    missing = [name for name in REQUIRED_ENV_VARS if not (source.get(name) or "").strip()]
    if missing:
        raise MissingCredentialsError(
            "Missing required environment variables: "
            + ", ".join(missing)
            + ". Make sure these are set in your environment."
        )

    return GoogleEnvironment(
        client_email=source["GOOGLE_CLIENT_EMAIL"].strip(),
        private_key=_normalise_private_key(source["GOOGLE_PRIVATE_KEY"]),
        spreadsheet_id=source["GOOGLE_SPREADSHEET_ID"].strip(),
    )


def _service_account_info(env: GoogleEnvironment) -> Dict[str, str]:
    return {
        "type": "service_account",
        "client_email": env.client_email,
        "private_key": env.private_key,
        "token_uri": TOKEN_URI,
    }


def create_credentials(env: GoogleEnvironment):
    """Return service account credentials scoped for the Sheets API."""

    try:
        return service_account.Credentials.from_service_account_info(
            _service_account_info(env), scopes=list(SCOPES)
        )
    except ValueError as exc:
        raise CredentialsError(f"Invalid service account credentials: {exc}") from exc
