# appwire/identity.py
"""Identity tokens used to address actions, stores and widgets.

Any hashable value can act as an identity. Strings are the common case;
:class:`IdentityToken` provides opaque unique identities that can never clash
with a string or with another token, even one with the same description.
"""
from __future__ import annotations

from typing import Hashable, TypeAlias

__all__ = ["Identity", "IdentityToken"]


Identity: TypeAlias = Hashable


class IdentityToken:
    """Opaque unique identity. Compares equal only to itself."""

    __slots__ = ("description",)

    def __init__(self, description: str | None = None) -> None:
        self.description = description

    def __str__(self) -> str:
        return f"IdentityToken({self.description or ''})"

    def __repr__(self) -> str:  # pragma: no cover
        return f"<IdentityToken {self.description or ''!s} at {id(self):#x}>"
