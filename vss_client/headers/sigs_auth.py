"""
vss_client.headers.sigs_auth
============================

A header provider which authenticates every request by proving knowledge of a
secp256k1 private key, without any server-issued challenge.

Token layout (no separators)::

    hex(compressed pubkey, 33 bytes) || hex(compact signature, 64 bytes) || decimal timestamp

where the signature is ECDSA over

    SHA256(SIGNING_CONSTANT || compressed pubkey || ascii(decimal timestamp))

The server derives a per-key namespace from the embedded public key, so data of
separate clients is kept apart without account provisioning. The timestamp lets
the server reject stale tokens; freshness is enforced server-side only.

A new token is built on every call.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, Mapping, Optional, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, utils

from . import HeaderProviderError

__all__ = [
    "SIGNING_CONSTANT",
    "AUTHORIZATION_HEADER",
    "SigsAuthProvider",
    "build_token",
    "parse_token",
    "verify_token",
]

# 64 bytes; after appending the public key and timestamp it is signed to prove
# knowledge of the corresponding private key.
SIGNING_CONSTANT = b"VSS Signature Authorizer Signing Salt Constant.................."

AUTHORIZATION_HEADER = "Authorization"

_PUBKEY_LEN = 33
_SIG_LEN = 64
# secp256k1 group order
_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

_ECDSA_PREHASHED = ec.ECDSA(utils.Prehashed(hashes.SHA256()))


def _compressed_pubkey(public_key: ec.EllipticCurvePublicKey) -> bytes:
    return public_key.public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
    )


def _digest(pubkey: bytes, timestamp: int) -> bytes:
    h = hashes.Hash(hashes.SHA256())
    h.update(SIGNING_CONSTANT)
    h.update(pubkey)
    h.update(str(timestamp).encode("ascii"))
    return h.finalize()


def build_token(private_key: ec.EllipticCurvePrivateKey, timestamp: int) -> str:
    """Return the `Authorization` token for `private_key` at `timestamp` (Unix seconds)."""
    pubkey = _compressed_pubkey(private_key.public_key())
    der = private_key.sign(_digest(pubkey, timestamp), _ECDSA_PREHASHED)
    r, s = utils.decode_dss_signature(der)
    # low-S form, as produced and required by libsecp256k1
    if s > _N // 2:
        s = _N - s
    compact = r.to_bytes(32, "big") + s.to_bytes(32, "big")
    return f"{pubkey.hex()}{compact.hex()}{timestamp}"


def parse_token(token: str) -> Tuple[bytes, bytes, int]:
    """
    Split a token into (compressed pubkey, compact signature, timestamp).

    Raises ValueError on malformed input.
    """
    hex_len = (_PUBKEY_LEN + _SIG_LEN) * 2
    digits = token[hex_len:]
    if len(token) <= hex_len or not digits.isdigit():
        raise ValueError("malformed token")
    pubkey = bytes.fromhex(token[: _PUBKEY_LEN * 2])
    signature = bytes.fromhex(token[_PUBKEY_LEN * 2 : hex_len])
    return pubkey, signature, int(digits)


def verify_token(token: str) -> bool:
    """
    Check that the token's signature matches its embedded public key and timestamp.

    This is the server's view of the token; it does not judge freshness.
    """
    try:
        pubkey, signature, timestamp = parse_token(token)
        public_key = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), pubkey)
    except ValueError:
        return False
    r = int.from_bytes(signature[:32], "big")
    s = int.from_bytes(signature[32:], "big")
    if not (0 < r < _N and 0 < s <= _N // 2):
        return False
    try:
        public_key.verify(
            utils.encode_dss_signature(r, s), _digest(pubkey, timestamp), _ECDSA_PREHASHED
        )
    except InvalidSignature:
        return False
    return True


class SigsAuthProvider:
    """
    A simple auth provider which proves knowledge of a private key.

    It is a good default for testing, or where protection against
    new-account flooding is handled at another layer (e.g. remote attestation).

    In addition to the computed `Authorization` header, every header in
    `default_headers` is sent; an `Authorization` entry there is overridden.
    """

    __slots__ = ("_key", "_pubkey", "_default_headers", "_clock")

    def __init__(
        self,
        private_key: ec.EllipticCurvePrivateKey,
        default_headers: Optional[Mapping[str, str]] = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not isinstance(private_key.curve, ec.SECP256K1):
            raise ValueError(f"expected a secp256k1 key, got {private_key.curve.name}")
        self._key = private_key
        self._pubkey = _compressed_pubkey(private_key.public_key())
        self._default_headers: Dict[str, str] = dict(default_headers or {})
        self._clock = clock

    @classmethod
    def from_secret_bytes(
        cls,
        secret: bytes,
        default_headers: Optional[Mapping[str, str]] = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> "SigsAuthProvider":
        """Build from a raw 32-byte big-endian secret scalar."""
        if len(secret) != 32:
            raise ValueError("secret key must be 32 bytes")
        scalar = int.from_bytes(secret, "big")
        if not 0 < scalar < _N:
            raise ValueError("secret key out of range for secp256k1")
        key = ec.derive_private_key(scalar, ec.SECP256K1())
        return cls(key, default_headers, clock=clock)

    @property
    def public_key(self) -> bytes:
        """Compressed SEC1 public key (33 bytes)."""
        return self._pubkey

    def _timestamp(self) -> int:
        try:
            now = self._clock()
        except OSError as e:
            raise HeaderProviderError(f"unable to read system time: {e}") from e
        if now < 0:
            raise HeaderProviderError("system time must be at least Jan 1, 1970")
        return int(now)

    async def get_headers(self, request: bytes) -> Dict[str, str]:
        headers = dict(self._default_headers)
        # Drop any case variant so the computed token is the only Authorization value
        for name in [k for k in headers if k.lower() == AUTHORIZATION_HEADER.lower()]:
            del headers[name]
        headers[AUTHORIZATION_HEADER] = build_token(self._key, self._timestamp())
        return headers
