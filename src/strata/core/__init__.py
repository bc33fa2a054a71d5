"""Strata core library package.

The composition core is pure and in-memory; configuration, logging and
filesystem collaborators live beside it.
"""

from . import exceptions  # noqa: F401

__all__ = ["exceptions"]
