"""
Thin async client for a hosted Versioned Storage Service (VSS).

The API is minimal and congruent to the server-side API: one coroutine per
endpoint, each taking a request record from `vss_client.types` and returning the
matching response record or raising a `vss_client.errors.VssError`.

Example:
    from vss_client import VssClient, GetObjectRequest

    async with VssClient("https://vss.example.com/vss") as vss:
        resp = await vss.get_object(GetObjectRequest(store_id="s", key="k"))
        print(resp.value.version)

Every attempt re-serializes the request and asks the header provider for fresh
headers; retries are governed by the client's RetryPolicy. Whether the transport
may pipeline a request is fixed per endpoint: reads, deletes and listings may be
pipelined, transactional puts never are.
"""

from __future__ import annotations

import copy
import logging
import random
from typing import (Any, AsyncIterator, Awaitable, Callable, Dict, Optional,
                    Type, TypeVar)

from google.protobuf.message import DecodeError as _ProtoDecodeError

from .config import ClientConfig
from .errors import (AuthError, DecodeError, ServerContractError,
                     from_error_response)
from .headers import FixedHeaders, HeaderProvider, HeaderProviderError
from .transport import HttpRequest, HttpxTransport, Transport
from .types import (DeleteObjectRequest, DeleteObjectResponse,
                    GetObjectRequest, GetObjectResponse, KeyValue,
                    ListKeyVersionsRequest, ListKeyVersionsResponse,
                    PutObjectRequest, PutObjectResponse)
from .utils.printer import KeyPrinter
from .utils.retry import RetryPolicy, default_retry_policy, retry

log = logging.getLogger(__name__)

__all__ = ["VssClient", "APPLICATION_OCTET_STREAM"]

APPLICATION_OCTET_STREAM = "application/octet-stream"
CONTENT_TYPE = "content-type"

# Never retried, whatever the policy decides
_TERMINAL_ERRORS = (DecodeError, ServerContractError)

T = TypeVar("T")
Rs = TypeVar("Rs")


def _new_request_id() -> int:
    return random.getrandbits(64)


def _with_content_type(headers: Dict[str, str]) -> Dict[str, str]:
    merged = {k: v for k, v in headers.items() if k.lower() != CONTENT_TYPE}
    merged[CONTENT_TYPE] = APPLICATION_OCTET_STREAM
    return merged


class VssClient:
    """
    Client for the VSS endpoints `getObject`, `putObjects`, `deleteObject` and
    `listKeyVersions`.

    Instances hold no per-call state and may be shared by concurrent tasks.
    `clone()` returns a client sharing the same transport, retry policy and
    header provider.
    """

    def __init__(
        self,
        base_url: str,
        retry_policy: Optional[RetryPolicy] = None,
        *,
        header_provider: Optional[HeaderProvider] = None,
        transport: Optional[Transport] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        cfg = ClientConfig.with_overrides(config or ClientConfig(), base_url=base_url)
        self._config = cfg
        self._retry_policy = retry_policy if retry_policy is not None else default_retry_policy(cfg)
        self._header_provider: HeaderProvider = (
            header_provider if header_provider is not None else FixedHeaders()
        )
        self._owns_transport = transport is None
        self._transport: Transport = (
            transport
            if transport is not None
            else HttpxTransport(capacity=cfg.client_capacity, headers={"User-Agent": cfg.user_agent})
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "VssClient":
        """Build from a ClientConfig (e.g. `ClientConfig.from_env()`)."""
        return cls(config.base_url, config=config, **kwargs)

    # --- lifecycle -------------------------------------------------------

    async def __aenter__(self) -> "VssClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if this client created it; shared transports are left open."""
        if self._owns_transport:
            await self._transport.aclose()

    def clone(self) -> "VssClient":
        other = copy.copy(self)
        other._owns_transport = False
        return other

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def config(self) -> ClientConfig:
        return self._config

    # --- public API ------------------------------------------------------

    async def get_object(self, request: GetObjectRequest) -> GetObjectResponse:
        """
        Fetch the value stored under `request.key`.

        Raises NoSuchKeyError if the key does not exist, and ServerContractError
        if the server answers 2xx without a value.
        """
        request_id = _new_request_id()
        log.debug("Sending GetObjectRequest %d for key %s.", request_id, request.key)

        async def attempt() -> GetObjectResponse:
            response = await self._post_request(request, "getObject", GetObjectResponse, pipelining=True)
            if response.value is None:
                raise ServerContractError(
                    "VSS Server API Violation, expected value in GetObjectResponse but found none"
                )
            return response

        return await self._call("GetObjectRequest", request_id, attempt)

    async def put_object(self, request: PutObjectRequest) -> PutObjectResponse:
        """
        Write `transaction_items` and delete `delete_items` in a single
        all-or-nothing transaction.
        """
        request_id = _new_request_id()
        log.debug(
            "Sending PutObjectRequest %d for transaction_items %s and delete_items %s.",
            request_id,
            KeyPrinter(request.transaction_items),
            KeyPrinter(request.delete_items),
        )

        async def attempt() -> PutObjectResponse:
            return await self._post_request(request, "putObjects", PutObjectResponse, pipelining=False)

        return await self._call("PutObjectRequest", request_id, attempt)

    async def delete_object(self, request: DeleteObjectRequest) -> DeleteObjectResponse:
        """Delete `request.key_value.key` if its version matches."""
        request_id = _new_request_id()
        key = request.key_value.key if request.key_value is not None else None
        log.debug("Sending DeleteObjectRequest %d for key %r.", request_id, key)

        async def attempt() -> DeleteObjectResponse:
            return await self._post_request(request, "deleteObject", DeleteObjectResponse, pipelining=True)

        return await self._call("DeleteObjectRequest", request_id, attempt)

    async def list_key_versions(self, request: ListKeyVersionsRequest) -> ListKeyVersionsResponse:
        """
        List one page of (key, version) pairs for `request.store_id`.

        An absent or empty `next_page_token` in the response means there are no
        further pages.
        """
        request_id = _new_request_id()
        log.debug(
            "Sending ListKeyVersionsRequest %d for key_prefix %r, page_size %r, page_token %r.",
            request_id,
            request.key_prefix,
            request.page_size,
            request.page_token,
        )

        async def attempt() -> ListKeyVersionsResponse:
            return await self._post_request(
                request, "listKeyVersions", ListKeyVersionsResponse, pipelining=True
            )

        return await self._call("ListKeyVersionsRequest", request_id, attempt)

    async def iter_key_versions(
        self,
        store_id: str,
        *,
        key_prefix: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> AsyncIterator[KeyValue]:
        """Yield every (key, version) pair, following page tokens until exhausted."""
        page_token: Optional[str] = None
        while True:
            response = await self.list_key_versions(
                ListKeyVersionsRequest(
                    store_id=store_id,
                    key_prefix=key_prefix,
                    page_size=page_size,
                    page_token=page_token,
                )
            )
            for kv in response.key_versions:
                yield kv
            if not response.has_more:
                return
            if response.next_page_token == page_token:
                raise ServerContractError(
                    f"VSS Server API Violation, listKeyVersions returned page token {page_token!r} again"
                )
            page_token = response.next_page_token

    # --- internals -------------------------------------------------------

    async def _call(self, label: str, request_id: int, attempt: Callable[[], Awaitable[T]]) -> T:
        def on_retry(attempts_made: int, error: BaseException, delay: float) -> None:
            log.debug(
                "%s %d attempt %d failed, retrying in %.3fs: %s",
                label,
                request_id,
                attempts_made,
                delay,
                error,
            )

        try:
            return await retry(attempt, self._retry_policy, give_up_on=_TERMINAL_ERRORS, on_retry=on_retry)
        except Exception as e:
            log.debug("%s %d failed: %s", label, request_id, e)
            raise

    async def _post_request(self, request: Any, path: str, response_type: Type[Rs], *, pipelining: bool) -> Rs:
        body = request.encode()
        try:
            headers = await self._header_provider.get_headers(body)
        except HeaderProviderError as e:
            raise AuthError(str(e)) from e

        http_request = HttpRequest(
            url=self._config.endpoint(path),
            body=body,
            headers=_with_content_type(headers),
            timeout=self._config.timeout,
            max_body_size=self._config.max_response_size,
            pipelining=pipelining,
        )
        response = await self._transport.send(http_request)

        if not response.ok:
            raise from_error_response(response.status_code, response.body)
        try:
            return response_type.decode(response.body)  # type: ignore[attr-defined]
        except _ProtoDecodeError as e:
            raise DecodeError(str(e), response_type=response_type.__name__) from e
