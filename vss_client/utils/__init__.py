"""
Utility helpers for the VSS client.

Re-exports:
- retry: composable retry policies and the async retry loop
- printer: key-list rendering for diagnostics
"""

from .printer import KeyPrinter, format_keys
from .retry import (ExponentialBackoffRetryPolicy, FilteredRetryPolicy,
                    JitteredRetryPolicy, MaxAttemptsRetryPolicy,
                    MaxTotalDelayRetryPolicy, RetryContext, RetryPolicy,
                    default_retry_policy, retry)

__all__ = [
    # printer
    "KeyPrinter",
    "format_keys",
    # retry
    "RetryContext",
    "RetryPolicy",
    "ExponentialBackoffRetryPolicy",
    "MaxAttemptsRetryPolicy",
    "MaxTotalDelayRetryPolicy",
    "JitteredRetryPolicy",
    "FilteredRetryPolicy",
    "default_retry_policy",
    "retry",
]
