"""
Transport layer - HTTP capability for the batch executor.

Provides httpx-based transport with:
- Timeout management
- Transport failure mapping
- JSON decoding
- Auth header construction
"""

from batch_pager.transport.auth import (
    basic_auth_header,
    bearer_auth_header,
    resolve_auth_headers,
)
from batch_pager.transport.http import HttpTransport, RawResponse, decode_json

__all__ = [
    "HttpTransport",
    "RawResponse",
    "basic_auth_header",
    "bearer_auth_header",
    "decode_json",
    "resolve_auth_headers",
]
