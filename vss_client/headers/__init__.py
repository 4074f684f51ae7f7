"""
vss_client.headers
------------------

Pluggable per-request header injection.

A header provider is anything with a coroutine method

    async def get_headers(self, request: bytes) -> Dict[str, str]

that receives the serialized request body (so signing providers can cover the
payload) and returns the headers to attach, or raises `HeaderProviderError`.
Providers are shared by every concurrent call of a client and must not keep
per-call state.

This package exposes:
- HeaderProvider:      the protocol above
- HeaderProviderError: failure raised by providers (the client maps it to AuthError)
- FixedHeaders:        static mapping, never fails
- SigsAuthProvider:    proof-of-key-possession `Authorization` token (see .sigs_auth)
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Protocol, runtime_checkable


class HeaderProviderError(Exception):
    """Raised by a header provider that cannot produce headers."""


@runtime_checkable
class HeaderProvider(Protocol):
    async def get_headers(self, request: bytes) -> Dict[str, str]: ...


class FixedHeaders:
    """Returns the same headers for every request, whatever its content."""

    __slots__ = ("_headers",)

    def __init__(self, headers: Optional[Mapping[str, str]] = None) -> None:
        self._headers: Dict[str, str] = dict(headers or {})

    async def get_headers(self, request: bytes) -> Dict[str, str]:
        # Fresh copy so a caller mutating the result cannot leak into later calls
        return dict(self._headers)


from .sigs_auth import SigsAuthProvider  # noqa: E402

__all__ = ["HeaderProvider", "HeaderProviderError", "FixedHeaders", "SigsAuthProvider"]
