# appwire/registry/exceptions.py
"""Registry exceptions"""
from appwire.exceptions import AppwireError


# ----------------------------------------------------------------------------
# Registry errors
# ----------------------------------------------------------------------------
class RegistryError(AppwireError): ...


class IdentityNotFoundError(LookupError, RegistryError):
    """Raised when no value is registered for an identity."""


class NotRegisteredError(LookupError, RegistryError):
    """Raised when a value holds no identity."""


class DuplicateIdentityError(RegistryError):
    """Raised when an identity is already taken by another value."""


class ConflictingIdentityError(RegistryError):
    """Raised when a value is already registered under a different identity."""


class CrossCategoryCollisionError(RegistryError):
    """Raised when two categories try to realize the same identity."""

    def __init__(self, category, existing, identity) -> None:
        self.category = category
        self.existing = existing
        self.identity = identity
        super().__init__(
            f"Could not add {category.label}, already registered as {existing.label} "
            f"with identity {identity}"
        )


class UnknownCategoryError(ValueError, RegistryError):
    """Raised when a registry is requested for an unknown category."""


__all__ = [
    "RegistryError",
    "IdentityNotFoundError",
    "NotRegisteredError",
    "DuplicateIdentityError",
    "ConflictingIdentityError",
    "CrossCategoryCollisionError",
    "UnknownCategoryError",
]
