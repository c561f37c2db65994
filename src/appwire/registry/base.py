# appwire/registry/base.py
"""Bidirectional identity <-> value map with handle-based removal."""
from __future__ import annotations

import logging
from typing import Generic, Iterator, TypeVar

from .exceptions import (
    ConflictingIdentityError,
    DuplicateIdentityError,
    IdentityNotFoundError,
    NotRegisteredError,
)
from .handles import Handle
from ..identity import Identity

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IdentityRegistry(Generic[T]):
    """Registry mapping each identity to exactly one value and back.

    Values are tracked by object identity rather than equality, so two equal
    but distinct values are separate entries and unhashable values are allowed.
    """

    def __init__(self) -> None:
        self._values: dict[Identity, T] = {}
        self._identities: dict[int, Identity] = {}
        self._handles: dict[Identity, Handle] = {}

    # --- registration ---

    def register(self, identity: Identity, value: T) -> Handle:
        """
        Register ``value`` under ``identity``.

        Registering the exact same pair again is a no-op returning the original
        handle.

        :param identity: Hashable identity for the value.
        :param value: The value to register.
        :return: A handle whose ``destroy()`` removes this pair.
        :raises DuplicateIdentityError: If the identity holds another value.
        :raises ConflictingIdentityError: If the value holds another identity.
        """
        if identity in self._values:
            if self._values[identity] is value:
                return self._handles[identity]
            raise DuplicateIdentityError(
                f"A value has already been registered for the given identity ({identity})"
            )

        if id(value) in self._identities:
            raise ConflictingIdentityError(
                "The value has already been registered with a different identity "
                f"({self._identities[id(value)]})"
            )

        self._values[identity] = value
        self._identities[id(value)] = identity
        handle = Handle(lambda: self._remove_pair(identity, value))
        self._handles[identity] = handle
        return handle

    def _remove_pair(self, identity: Identity, value: T) -> None:
        if identity in self._values and self._values[identity] is value:
            self.delete(identity)

    # --- retrieval ---

    def get(self, identity: Identity) -> T:
        try:
            return self._values[identity]
        except KeyError:
            raise IdentityNotFoundError(f"Could not find a value for identity '{identity}'") from None

    def contains(self, value: T) -> bool:
        return id(value) in self._identities

    def has_id(self, identity: Identity) -> bool:
        return identity in self._values

    def identify(self, value: T) -> Identity:
        try:
            return self._identities[id(value)]
        except KeyError:
            raise NotRegisteredError("Could not identify non-registered value") from None

    # --- mutation ---

    def delete(self, identity: Identity) -> bool:
        """Remove the entry for ``identity``. Returns ``True`` if one was removed."""
        if identity not in self._values:
            return False
        value = self._values.pop(identity)
        del self._identities[id(value)]
        # A stale handle only removes its own pair, so it is safe to drop here.
        del self._handles[identity]
        logger.debug("Deleted identity %s", identity)
        return True

    # --- enumeration ---

    def ids(self) -> tuple[Identity, ...]:
        return tuple(self._values)

    def items(self) -> tuple[tuple[Identity, T], ...]:
        return tuple(self._values.items())

    def __contains__(self, identity: Identity) -> bool:
        return identity in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Identity]:
        return iter(tuple(self._values))


__all__ = ["IdentityRegistry"]
