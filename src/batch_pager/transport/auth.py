"""
Authentication header construction.

The batch core only ever sees a precomputed header mapping that is copied
into every request. These helpers build that mapping from:
1. Explicit credentials
2. Environment variables
"""

from __future__ import annotations

import base64
import os


# Environment variables consulted by resolve_auth_headers
ENV_TOKEN = "BATCH_PAGER_TOKEN"
ENV_LOGIN = "BATCH_PAGER_LOGIN"
ENV_PASSWORD = "BATCH_PAGER_PASSWORD"


def basic_auth_header(login: str, password: str) -> dict[str, str]:
    """Build an HTTP Basic authorization header.

    Args:
        login: Account login
        password: Account password

    Returns:
        Header mapping with a single Authorization entry
    """
    encoded = base64.b64encode(f"{login}:{password}".encode()).decode("ascii")
    return {"Authorization": f"Basic {encoded}"}


def bearer_auth_header(token: str, header_name: str = "Authorization") -> dict[str, str]:
    """Build a bearer token header."""
    return {header_name: f"Bearer {token}"}


def resolve_auth_headers(
    *,
    login: str | None = None,
    password: str | None = None,
    token: str | None = None,
) -> dict[str, str]:
    """Resolve authentication headers.

    Resolution order:
    1. Explicit token
    2. Explicit login/password
    3. BATCH_PAGER_TOKEN
    4. BATCH_PAGER_LOGIN / BATCH_PAGER_PASSWORD

    Returns:
        Header mapping, empty when no credentials are found
    """
    if token:
        return bearer_auth_header(token)
    if login and password is not None:
        return basic_auth_header(login, password)

    env_token = os.getenv(ENV_TOKEN)
    if env_token:
        return bearer_auth_header(env_token)

    env_login = os.getenv(ENV_LOGIN)
    env_password = os.getenv(ENV_PASSWORD)
    if env_login and env_password is not None:
        return basic_auth_header(env_login, env_password)

    return {}
