"""
Protobuf message classes for the VSS wire schema (package ``vss``).

The schema is assembled from a FileDescriptorProto at import time and registered
in a private descriptor pool, so the client ships no generated ``_pb2`` module and
cannot collide with another copy of ``vss.proto`` in the default pool.

Exposed message classes:

    KeyValue, GetObjectRequest, GetObjectResponse, PutObjectRequest,
    PutObjectResponse, DeleteObjectRequest, DeleteObjectResponse,
    ListKeyVersionsRequest, ListKeyVersionsResponse, ErrorResponse

and the ``ErrorCode`` enum values as module constants.
"""

from __future__ import annotations

from typing import Any, Optional

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_PACKAGE = "vss"
_FILE_NAME = "vss.proto"

_F = descriptor_pb2.FieldDescriptorProto

# ErrorCode enum (see ErrorResponse.error_code)
UNKNOWN = 0
CONFLICT_EXCEPTION = 1
INVALID_REQUEST_EXCEPTION = 2
INTERNAL_SERVER_EXCEPTION = 3
NO_SUCH_KEY_EXCEPTION = 4
AUTH_EXCEPTION = 5

_ERROR_CODES = {
    "UNKNOWN": UNKNOWN,
    "CONFLICT_EXCEPTION": CONFLICT_EXCEPTION,
    "INVALID_REQUEST_EXCEPTION": INVALID_REQUEST_EXCEPTION,
    "INTERNAL_SERVER_EXCEPTION": INTERNAL_SERVER_EXCEPTION,
    "NO_SUCH_KEY_EXCEPTION": NO_SUCH_KEY_EXCEPTION,
    "AUTH_EXCEPTION": AUTH_EXCEPTION,
}


def _field(
    msg: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    ftype: int,
    *,
    repeated: bool = False,
    type_name: Optional[str] = None,
    optional: bool = False,
) -> None:
    f = msg.field.add(
        name=name,
        number=number,
        type=ftype,
        label=_F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL,
    )
    if type_name is not None:
        f.type_name = f".{_PACKAGE}.{type_name}"
    if optional:
        # proto3 `optional`: presence tracked through a synthetic oneof
        f.proto3_optional = True
        f.oneof_index = len(msg.oneof_decl)
        msg.oneof_decl.add(name=f"_{name}")


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto(name=_FILE_NAME, package=_PACKAGE, syntax="proto3")

    enum = fdp.enum_type.add(name="ErrorCode")
    for name, number in _ERROR_CODES.items():
        enum.value.add(name=name, number=number)

    kv = fdp.message_type.add(name="KeyValue")
    _field(kv, "key", 1, _F.TYPE_STRING)
    _field(kv, "version", 2, _F.TYPE_INT64)
    _field(kv, "value", 3, _F.TYPE_BYTES)

    get_req = fdp.message_type.add(name="GetObjectRequest")
    _field(get_req, "store_id", 1, _F.TYPE_STRING)
    _field(get_req, "key", 2, _F.TYPE_STRING)

    get_resp = fdp.message_type.add(name="GetObjectResponse")
    _field(get_resp, "value", 2, _F.TYPE_MESSAGE, type_name="KeyValue")

    put_req = fdp.message_type.add(name="PutObjectRequest")
    _field(put_req, "store_id", 1, _F.TYPE_STRING)
    _field(put_req, "global_version", 2, _F.TYPE_INT64, optional=True)
    _field(put_req, "transaction_items", 3, _F.TYPE_MESSAGE, repeated=True, type_name="KeyValue")
    _field(put_req, "delete_items", 4, _F.TYPE_MESSAGE, repeated=True, type_name="KeyValue")

    fdp.message_type.add(name="PutObjectResponse")

    del_req = fdp.message_type.add(name="DeleteObjectRequest")
    _field(del_req, "store_id", 1, _F.TYPE_STRING)
    _field(del_req, "key_value", 2, _F.TYPE_MESSAGE, type_name="KeyValue")

    fdp.message_type.add(name="DeleteObjectResponse")

    list_req = fdp.message_type.add(name="ListKeyVersionsRequest")
    _field(list_req, "store_id", 1, _F.TYPE_STRING)
    _field(list_req, "key_prefix", 2, _F.TYPE_STRING, optional=True)
    _field(list_req, "page_size", 3, _F.TYPE_INT32, optional=True)
    _field(list_req, "page_token", 4, _F.TYPE_STRING, optional=True)

    list_resp = fdp.message_type.add(name="ListKeyVersionsResponse")
    _field(list_resp, "key_versions", 1, _F.TYPE_MESSAGE, repeated=True, type_name="KeyValue")
    _field(list_resp, "next_page_token", 2, _F.TYPE_STRING, optional=True)
    _field(list_resp, "global_version", 3, _F.TYPE_INT64, optional=True)

    err = fdp.message_type.add(name="ErrorResponse")
    _field(err, "error_code", 1, _F.TYPE_ENUM, type_name="ErrorCode")
    _field(err, "message", 2, _F.TYPE_STRING)

    return fdp


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name: str) -> Any:
    return message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{_PACKAGE}.{name}"))


KeyValue = _message_class("KeyValue")
GetObjectRequest = _message_class("GetObjectRequest")
GetObjectResponse = _message_class("GetObjectResponse")
PutObjectRequest = _message_class("PutObjectRequest")
PutObjectResponse = _message_class("PutObjectResponse")
DeleteObjectRequest = _message_class("DeleteObjectRequest")
DeleteObjectResponse = _message_class("DeleteObjectResponse")
ListKeyVersionsRequest = _message_class("ListKeyVersionsRequest")
ListKeyVersionsResponse = _message_class("ListKeyVersionsResponse")
ErrorResponse = _message_class("ErrorResponse")


__all__ = [
    "KeyValue",
    "GetObjectRequest",
    "GetObjectResponse",
    "PutObjectRequest",
    "PutObjectResponse",
    "DeleteObjectRequest",
    "DeleteObjectResponse",
    "ListKeyVersionsRequest",
    "ListKeyVersionsResponse",
    "ErrorResponse",
    "UNKNOWN",
    "CONFLICT_EXCEPTION",
    "INVALID_REQUEST_EXCEPTION",
    "INTERNAL_SERVER_EXCEPTION",
    "NO_SUCH_KEY_EXCEPTION",
    "AUTH_EXCEPTION",
]
