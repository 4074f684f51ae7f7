"""
Version helpers for the VSS Python client.

We keep a static __version__ (PEP 440) and derive the default User-Agent from it.
"""

from __future__ import annotations

# Bump this when publishing
__version__ = "0.1.0"


def user_agent() -> str:
    """Default User-Agent, e.g. 'vss-client-py/0.1.0'."""
    return f"vss-client-py/{__version__}"


__all__ = ["__version__", "user_agent"]
