import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from vss_client.headers import FixedHeaders, HeaderProvider, HeaderProviderError
from vss_client.headers.sigs_auth import (SIGNING_CONSTANT, SigsAuthProvider,
                                          build_token, parse_token,
                                          verify_token)

# Compressed secp256k1 generator point, i.e. the public key of secret 1
G_COMPRESSED = "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"


def _clock(*values):
    it = iter(values)
    return lambda: next(it)


def test_signing_constant_is_64_bytes():
    assert len(SIGNING_CONSTANT) == 64
    assert SIGNING_CONSTANT.startswith(b"VSS Signature Authorizer Signing Salt Constant")


def test_token_layout_for_known_key():
    key = ec.derive_private_key(1, ec.SECP256K1())
    token = build_token(key, 1_700_000_000)

    assert token.startswith(G_COMPRESSED)
    assert token.endswith("1700000000")
    assert len(token) == 66 + 128 + len("1700000000")
    pubkey, sig, ts = parse_token(token)
    assert pubkey.hex() == G_COMPRESSED
    assert len(sig) == 64
    assert ts == 1_700_000_000
    assert verify_token(token)


@pytest.mark.asyncio
async def test_tokens_at_different_times_differ_but_share_pubkey(secret_key):
    auth = SigsAuthProvider.from_secret_bytes(secret_key, clock=_clock(1_700_000_000, 1_700_000_060))

    t1 = (await auth.get_headers(b"req"))["Authorization"]
    t2 = (await auth.get_headers(b"req"))["Authorization"]

    pk1, sig1, ts1 = parse_token(t1)
    pk2, sig2, ts2 = parse_token(t2)
    assert pk1 == pk2 == auth.public_key
    assert (ts1, ts2) == (1_700_000_000, 1_700_000_060)
    assert sig1 != sig2
    assert verify_token(t1) and verify_token(t2)


@pytest.mark.asyncio
async def test_default_headers_merged_and_authorization_overridden(secret_key):
    auth = SigsAuthProvider.from_secret_bytes(
        secret_key,
        {"X-Client": "tests", "authorization": "Bearer stale"},
        clock=_clock(42),
    )

    headers = await auth.get_headers(b"")

    assert headers["X-Client"] == "tests"
    assert "authorization" not in headers
    assert verify_token(headers["Authorization"])


def test_tampered_token_fails_verification(secret_key):
    key = SigsAuthProvider.from_secret_bytes(secret_key)._key
    token = build_token(key, 1_700_000_000)

    assert not verify_token(token[:-1] + "1")  # different timestamp
    assert not verify_token(token[:66] + "00" * 64 + "1700000000")
    assert not verify_token("zz" + token[2:])
    assert not verify_token(token[:150])


@pytest.mark.asyncio
async def test_pre_epoch_clock_is_a_provider_error(secret_key):
    auth = SigsAuthProvider.from_secret_bytes(secret_key, clock=lambda: -1.0)
    with pytest.raises(HeaderProviderError):
        await auth.get_headers(b"")


def test_rejects_bad_keys():
    with pytest.raises(ValueError):
        SigsAuthProvider.from_secret_bytes(b"\x01" * 31)
    with pytest.raises(ValueError):
        SigsAuthProvider.from_secret_bytes(b"\x00" * 32)
    with pytest.raises(ValueError):
        SigsAuthProvider(ec.generate_private_key(ec.SECP256R1()))


@pytest.mark.asyncio
async def test_fixed_headers_ignore_request_content():
    provider = FixedHeaders({"X-Api-Key": "abc"})
    a = await provider.get_headers(b"one")
    b = await provider.get_headers(b"two" * 100)
    assert a == b == {"X-Api-Key": "abc"}

    a["X-Api-Key"] = "mutated"
    assert (await provider.get_headers(b"")) == {"X-Api-Key": "abc"}


def test_providers_satisfy_protocol(secret_key):
    assert isinstance(FixedHeaders(), HeaderProvider)
    assert isinstance(SigsAuthProvider.from_secret_bytes(secret_key), HeaderProvider)
