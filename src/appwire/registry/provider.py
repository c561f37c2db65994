# appwire/registry/provider.py
"""Read-only registry views handed to actions and widgets.

Consumers look collaborators up by identity through a
:class:`RegistryProvider`; only the application container registers.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Mapping

from .categories import Category, normalize_category
from ..identity import Identity

if TYPE_CHECKING:  # pragma: no cover - type hints only
    from .combined import CombinedRegistry

__all__ = ["ActionRegistry", "StoreRegistry", "WidgetRegistry", "RegistryProvider"]


class _ReadOnlyRegistry:
    category: Category

    __slots__ = ("_combined",)

    def __init__(self, combined: CombinedRegistry) -> None:
        self._combined = combined

    async def aget(self, identity: Identity) -> Any:
        """Resolve the instance registered under ``identity``."""
        return await self._combined.aget(self.category, identity)

    def get(self, identity: Identity) -> Any:
        return self._combined.get(self.category, identity)

    def identify(self, value: Any) -> Identity:
        """Return the identity ``value`` was registered under."""
        return self._combined.identify(self.category, value)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<{type(self).__name__}>"


class ActionRegistry(_ReadOnlyRegistry):
    category = Category.ACTIONS
    __slots__ = ()


class StoreRegistry(_ReadOnlyRegistry):
    category = Category.STORES
    __slots__ = ()


class WidgetRegistry(_ReadOnlyRegistry):
    category = Category.WIDGETS
    __slots__ = ()

    async def acreate(
        self, factory: Callable[..., Any], options: Mapping[str, Any] | None = None
    ) -> tuple[Identity, Any]:
        """Create a widget and add it to the registry. See ``CombinedRegistry.acreate_widget``."""
        return await self._combined.acreate_widget(factory, options)

    def create(
        self, factory: Callable[..., Any], options: Mapping[str, Any] | None = None
    ) -> tuple[Identity, Any]:
        return self._combined.create_widget(factory, options)


class RegistryProvider:
    """Provides access to read-only registries for actions, stores and widgets."""

    __slots__ = ("_registries",)

    def __init__(self, combined: CombinedRegistry) -> None:
        self._registries: dict[Category, _ReadOnlyRegistry] = {
            Category.ACTIONS: ActionRegistry(combined),
            Category.STORES: StoreRegistry(combined),
            Category.WIDGETS: WidgetRegistry(combined),
        }

    def get(self, category: Category | str) -> ActionRegistry | StoreRegistry | WidgetRegistry:
        """
        Get the action, store or widget registry.

        :param category: A :class:`Category` or one of ``"actions"``, ``"stores"``, ``"widgets"``.
        :raises UnknownCategoryError: For anything else.
        """
        match normalize_category(category):
            case Category.ACTIONS:
                return self._registries[Category.ACTIONS]
            case Category.STORES:
                return self._registries[Category.STORES]
            case Category.WIDGETS:
                return self._registries[Category.WIDGETS]
