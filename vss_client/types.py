"""
Request/response records for the VSS API.

Every record is a plain dataclass owned by the caller. `encode()` produces the
canonical protobuf bytes sent on the wire; `decode()` parses a response body and
raises `google.protobuf.message.DecodeError` on malformed input (the client maps
that to `errors.DecodeError`).

Optional fields (`global_version`, `key_prefix`, `page_size`, `page_token`,
`next_page_token`) use `None` for "not set"; the wire schema tracks their
presence explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Type, TypeVar

from . import schema

__all__ = [
    "KeyValue",
    "StoredItem",
    "GetObjectRequest",
    "GetObjectResponse",
    "PutObjectRequest",
    "PutObjectResponse",
    "DeleteObjectRequest",
    "DeleteObjectResponse",
    "ListKeyVersionsRequest",
    "ListKeyVersionsResponse",
]

R = TypeVar("R", bound="_Record")


class _Record:
    """Shared encode/decode plumbing; subclasses provide to_proto/from_proto."""

    def to_proto(self) -> Any:  # pragma: no cover - abstract
        raise NotImplementedError

    @classmethod
    def from_proto(cls: Type[R], msg: Any) -> R:  # pragma: no cover - abstract
        raise NotImplementedError

    @classmethod
    def proto_type(cls) -> Any:
        return getattr(schema, cls.__name__)

    def encode(self) -> bytes:
        return self.to_proto().SerializeToString()

    @classmethod
    def decode(cls: Type[R], data: bytes) -> R:
        return cls.from_proto(cls.proto_type().FromString(bytes(data)))


def _opt(msg: Any, name: str) -> Any:
    return getattr(msg, name) if msg.HasField(name) else None


@dataclass(frozen=True)
class KeyValue(_Record):
    """
    A stored item: key, opaque value and version.

    `version` drives optimistic concurrency: a write or delete succeeds only if
    it matches the server's current version for `key`. In list responses the
    value is empty and only (key, version) is meaningful.
    """

    key: str
    version: int = 0
    value: bytes = b""

    def to_proto(self) -> Any:
        return schema.KeyValue(key=self.key, version=int(self.version), value=bytes(self.value))

    @classmethod
    def from_proto(cls, msg: Any) -> "KeyValue":
        return cls(key=msg.key, version=int(msg.version), value=bytes(msg.value))


StoredItem = KeyValue


@dataclass(frozen=True)
class GetObjectRequest(_Record):
    store_id: str
    key: str

    def to_proto(self) -> Any:
        return schema.GetObjectRequest(store_id=self.store_id, key=self.key)

    @classmethod
    def from_proto(cls, msg: Any) -> "GetObjectRequest":
        return cls(store_id=msg.store_id, key=msg.key)


@dataclass(frozen=True)
class GetObjectResponse(_Record):
    # None only in a contract-violating response; VssClient.get_object rejects it
    value: Optional[KeyValue] = None

    def to_proto(self) -> Any:
        msg = schema.GetObjectResponse()
        if self.value is not None:
            msg.value.CopyFrom(self.value.to_proto())
        return msg

    @classmethod
    def from_proto(cls, msg: Any) -> "GetObjectResponse":
        return cls(value=KeyValue.from_proto(msg.value) if msg.HasField("value") else None)


@dataclass(frozen=True)
class PutObjectRequest(_Record):
    """
    Items in `transaction_items` are written and items in `delete_items` are
    deleted as one all-or-nothing transaction.
    """

    store_id: str
    transaction_items: List[KeyValue] = field(default_factory=list)
    delete_items: List[KeyValue] = field(default_factory=list)
    global_version: Optional[int] = None

    def to_proto(self) -> Any:
        msg = schema.PutObjectRequest(
            store_id=self.store_id,
            transaction_items=[kv.to_proto() for kv in self.transaction_items],
            delete_items=[kv.to_proto() for kv in self.delete_items],
        )
        if self.global_version is not None:
            msg.global_version = int(self.global_version)
        return msg

    @classmethod
    def from_proto(cls, msg: Any) -> "PutObjectRequest":
        return cls(
            store_id=msg.store_id,
            transaction_items=[KeyValue.from_proto(kv) for kv in msg.transaction_items],
            delete_items=[KeyValue.from_proto(kv) for kv in msg.delete_items],
            global_version=_opt(msg, "global_version"),
        )


@dataclass(frozen=True)
class PutObjectResponse(_Record):
    def to_proto(self) -> Any:
        return schema.PutObjectResponse()

    @classmethod
    def from_proto(cls, msg: Any) -> "PutObjectResponse":
        return cls()


@dataclass(frozen=True)
class DeleteObjectRequest(_Record):
    """Deletes `key_value.key` if its server version matches `key_value.version`."""

    store_id: str
    key_value: Optional[KeyValue] = None

    def to_proto(self) -> Any:
        msg = schema.DeleteObjectRequest(store_id=self.store_id)
        if self.key_value is not None:
            msg.key_value.CopyFrom(self.key_value.to_proto())
        return msg

    @classmethod
    def from_proto(cls, msg: Any) -> "DeleteObjectRequest":
        kv = KeyValue.from_proto(msg.key_value) if msg.HasField("key_value") else None
        return cls(store_id=msg.store_id, key_value=kv)


@dataclass(frozen=True)
class DeleteObjectResponse(_Record):
    def to_proto(self) -> Any:
        return schema.DeleteObjectResponse()

    @classmethod
    def from_proto(cls, msg: Any) -> "DeleteObjectResponse":
        return cls()


@dataclass(frozen=True)
class ListKeyVersionsRequest(_Record):
    store_id: str
    key_prefix: Optional[str] = None
    page_size: Optional[int] = None
    page_token: Optional[str] = None

    def to_proto(self) -> Any:
        msg = schema.ListKeyVersionsRequest(store_id=self.store_id)
        if self.key_prefix is not None:
            msg.key_prefix = self.key_prefix
        if self.page_size is not None:
            msg.page_size = int(self.page_size)
        if self.page_token is not None:
            msg.page_token = self.page_token
        return msg

    @classmethod
    def from_proto(cls, msg: Any) -> "ListKeyVersionsRequest":
        return cls(
            store_id=msg.store_id,
            key_prefix=_opt(msg, "key_prefix"),
            page_size=_opt(msg, "page_size"),
            page_token=_opt(msg, "page_token"),
        )


@dataclass(frozen=True)
class ListKeyVersionsResponse(_Record):
    key_versions: List[KeyValue] = field(default_factory=list)
    next_page_token: Optional[str] = None
    global_version: Optional[int] = None

    @property
    def has_more(self) -> bool:
        """False once the listing is exhausted (token absent or empty)."""
        return bool(self.next_page_token)

    def to_proto(self) -> Any:
        msg = schema.ListKeyVersionsResponse(
            key_versions=[kv.to_proto() for kv in self.key_versions],
        )
        if self.next_page_token is not None:
            msg.next_page_token = self.next_page_token
        if self.global_version is not None:
            msg.global_version = int(self.global_version)
        return msg

    @classmethod
    def from_proto(cls, msg: Any) -> "ListKeyVersionsResponse":
        return cls(
            key_versions=[KeyValue.from_proto(kv) for kv in msg.key_versions],
            next_page_token=_opt(msg, "next_page_token"),
            global_version=_opt(msg, "global_version"),
        )
