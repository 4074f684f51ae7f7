"""
VSS client for Python
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import ClientConfig  # noqa: F401
from .errors import (  # noqa: F401
    VssError,
    AuthError,
    TransportError,
    ApplicationError,
    ConflictError,
    InvalidRequestError,
    InternalServerError,
    NoSuchKeyError,
    ServerAuthError,
    DecodeError,
    ServerContractError,
    ErrorCode,
    is_retryable,
)

# Records
from .types import (  # noqa: F401
    KeyValue,
    StoredItem,
    GetObjectRequest,
    GetObjectResponse,
    PutObjectRequest,
    PutObjectResponse,
    DeleteObjectRequest,
    DeleteObjectResponse,
    ListKeyVersionsRequest,
    ListKeyVersionsResponse,
)

# Headers
from .headers import (  # noqa: F401
    HeaderProvider,
    HeaderProviderError,
    FixedHeaders,
    SigsAuthProvider,
)

# Transport
from .transport import HttpRequest, HttpResponse, Transport, HttpxTransport  # noqa: F401

# Retry
from .utils.retry import (  # noqa: F401
    RetryPolicy,
    ExponentialBackoffRetryPolicy,
    default_retry_policy,
)

# Client
from .client import VssClient  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "ClientConfig",
    "VssError", "AuthError", "TransportError", "ApplicationError",
    "ConflictError", "InvalidRequestError", "InternalServerError",
    "NoSuchKeyError", "ServerAuthError", "DecodeError", "ServerContractError",
    "ErrorCode", "is_retryable",
    # Records
    "KeyValue", "StoredItem",
    "GetObjectRequest", "GetObjectResponse",
    "PutObjectRequest", "PutObjectResponse",
    "DeleteObjectRequest", "DeleteObjectResponse",
    "ListKeyVersionsRequest", "ListKeyVersionsResponse",
    # Headers
    "HeaderProvider", "HeaderProviderError", "FixedHeaders", "SigsAuthProvider",
    # Transport
    "HttpRequest", "HttpResponse", "Transport", "HttpxTransport",
    # Retry
    "RetryPolicy", "ExponentialBackoffRetryPolicy", "default_retry_policy",
    # Client
    "VssClient",
]
