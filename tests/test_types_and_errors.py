from vss_client import schema
from vss_client.errors import (ApplicationError, ConflictError, DecodeError,
                               ErrorCode, InternalServerError,
                               NoSuchKeyError, ServerAuthError,
                               ServerContractError, TransportError,
                               AuthError, from_error_response, is_retryable)
from vss_client.types import (DeleteObjectRequest, GetObjectResponse,
                              KeyValue, ListKeyVersionsRequest,
                              ListKeyVersionsResponse, PutObjectRequest,
                              StoredItem)
from vss_client.utils.printer import KeyPrinter, format_keys


def test_key_value_wire_bytes():
    # field 1 "k", field 2 varint 1, field 3 bytes "v"
    assert KeyValue(key="k", version=1, value=b"v").encode() == b"\x0a\x01k\x10\x01\x1a\x01v"
    assert StoredItem is KeyValue


def test_get_response_value_is_field_two():
    data = GetObjectResponse(value=KeyValue("k", 1, b"v")).encode()
    assert data[0] == 0x12
    assert GetObjectResponse.decode(b"").value is None


def test_optional_fields_keep_presence():
    unset = ListKeyVersionsRequest.decode(ListKeyVersionsRequest(store_id="s").encode())
    assert (unset.key_prefix, unset.page_size, unset.page_token) == (None, None, None)

    empty = ListKeyVersionsRequest.decode(
        ListKeyVersionsRequest(store_id="s", key_prefix="", page_size=0, page_token="").encode()
    )
    assert (empty.key_prefix, empty.page_size, empty.page_token) == ("", 0, "")

    put = PutObjectRequest.decode(PutObjectRequest(store_id="s", global_version=0).encode())
    assert put.global_version == 0
    assert PutObjectRequest.decode(PutObjectRequest(store_id="s").encode()).global_version is None


def test_put_request_preserves_item_order():
    items = [KeyValue(f"k{i}", i, bytes([i])) for i in range(5)]
    req = PutObjectRequest(store_id="s", transaction_items=items, delete_items=items[::-1])
    back = PutObjectRequest.decode(req.encode())
    assert back.transaction_items == items
    assert back.delete_items == items[::-1]


def test_delete_request_without_key_value():
    assert DeleteObjectRequest.decode(DeleteObjectRequest(store_id="s").encode()).key_value is None


def test_list_response_exhaustion():
    assert ListKeyVersionsResponse(next_page_token=None).has_more is False
    assert ListKeyVersionsResponse(next_page_token="").has_more is False
    assert ListKeyVersionsResponse(next_page_token="t").has_more is True


def test_error_response_selects_subclass():
    cases = {
        schema.CONFLICT_EXCEPTION: ConflictError,
        schema.NO_SUCH_KEY_EXCEPTION: NoSuchKeyError,
        schema.INTERNAL_SERVER_EXCEPTION: InternalServerError,
        schema.AUTH_EXCEPTION: ServerAuthError,
    }
    for code, cls in cases.items():
        payload = schema.ErrorResponse(error_code=code, message="why").SerializeToString()
        err = from_error_response(418, payload)
        assert type(err) is cls
        assert err.error_code == ErrorCode(code)
        assert err.message == "why"
        assert err.payload == payload
        assert err.status_code == 418


def test_unparseable_error_payload_kept_verbatim():
    payload = b"\xff"
    err = from_error_response(502, payload)
    assert type(err) is ApplicationError
    assert err.error_code is None
    assert err.payload == payload


def test_retry_classification():
    assert is_retryable(TransportError("timeout"))
    assert is_retryable(ApplicationError(status_code=500))
    assert is_retryable(ApplicationError(status_code=429))
    assert is_retryable(InternalServerError(status_code=500))
    assert not is_retryable(ApplicationError(status_code=400))
    assert not is_retryable(ConflictError(status_code=409))
    assert not is_retryable(NoSuchKeyError(status_code=404))
    assert not is_retryable(ServerAuthError(status_code=401))
    assert not is_retryable(AuthError("no key"))
    assert not is_retryable(DecodeError("garbage"))
    assert not is_retryable(ServerContractError("no value"))
    assert not is_retryable(ValueError("unrelated"))


def test_key_printer_lists_keys_only():
    items = [KeyValue("a", 1, b"secret"), KeyValue("b", 2, b"secret")]
    assert format_keys(items) == "[a, b]"
    assert str(KeyPrinter(items)) == "[a, b]"
    assert format_keys([]) == "[]"
