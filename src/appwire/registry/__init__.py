"""Identity-keyed registries for actions, stores and widgets."""

from .base import IdentityRegistry
from .categories import Category, normalize_category
from .combined import ActionConfiguration, CombinedRegistry, invoke_factory
from .exceptions import (
    ConflictingIdentityError,
    CrossCategoryCollisionError,
    DuplicateIdentityError,
    IdentityNotFoundError,
    NotRegisteredError,
    RegistryError,
    UnknownCategoryError,
)
from .handles import CompositeHandle, Handle
from .provider import ActionRegistry, RegistryProvider, StoreRegistry, WidgetRegistry

__all__ = [
    "IdentityRegistry",
    "CombinedRegistry",
    "RegistryProvider",
    "ActionRegistry",
    "StoreRegistry",
    "WidgetRegistry",
    "ActionConfiguration",
    "Category",
    "normalize_category",
    "invoke_factory",
    "Handle",
    "CompositeHandle",
    "RegistryError",
    "IdentityNotFoundError",
    "NotRegisteredError",
    "DuplicateIdentityError",
    "ConflictingIdentityError",
    "CrossCategoryCollisionError",
    "UnknownCategoryError",
]
