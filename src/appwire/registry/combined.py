# appwire/registry/combined.py
"""Action, store and widget registries sharing one identity space.

Registration is partitioned by :class:`~appwire.registry.categories.Category`:
each category keeps its own identity -> entry map, and a duplicate identity is
only rejected within a category. Realized instances, however, live in a single
shared :class:`~appwire.registry.base.IdentityRegistry`. An identity enters it
when a category's entry is first resolved, which is also where clashes between
categories are detected.

Lookups are coroutines. Concurrent lookups of the same identity in the same
category share one ``asyncio.Task`` so each factory runs once per resolution.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping
from uuid import uuid4

from asgiref.sync import async_to_sync

from .base import IdentityRegistry
from .categories import Category
from .exceptions import CrossCategoryCollisionError, NotRegisteredError, RegistryError
from .handles import Handle
from ..identity import Identity

if TYPE_CHECKING:  # pragma: no cover - type hints only
    from .provider import RegistryProvider

logger = logging.getLogger(__name__)

_MISSING = object()

Factory = Callable[..., Any]

__all__ = ["ActionConfiguration", "CombinedRegistry", "invoke_factory"]


@dataclass(frozen=True, slots=True)
class ActionConfiguration:
    """Payload handed to ``action.configure()`` on the action's first resolution."""

    registry_provider: RegistryProvider
    state_from: Any = None


@dataclass(eq=False, slots=True)
class _Entry:
    category: Category
    identity: Identity
    factory: Factory | None = None
    instance: Any = _MISSING
    options: Mapping[str, Any] | None = None
    state_from: Identity | None = None
    handle: Handle = field(default_factory=Handle)

    @property
    def eager(self) -> bool:
        return self.instance is not _MISSING


async def invoke_factory(factory: Factory, options: Mapping[str, Any] | None = None) -> Any:
    """Call ``factory`` with ``options`` (when given) and await the result if needed."""
    result = factory(options) if options is not None else factory()
    if inspect.isawaitable(result):
        result = await result
    return result


class CombinedRegistry:
    """Registries for actions, stores and widgets with lazily realized instances."""

    def __init__(self, *, default_store: Any = None, widget_id_prefix: str = "widget-") -> None:
        self._default_store = default_store
        self.widget_id_prefix = widget_id_prefix
        self._entries: dict[Category, IdentityRegistry[_Entry]] = {c: IdentityRegistry() for c in Category}
        self._pending: dict[Category, dict[Identity, asyncio.Task]] = {c: {} for c in Category}
        self._realized: IdentityRegistry[Any] = IdentityRegistry()
        self._realized_by: dict[Identity, Category] = {}
        self._claims: dict[Identity, _Entry] = {}
        self._registry_provider: RegistryProvider | None = None

    @property
    def default_store(self) -> Any:
        return self._default_store

    @property
    def registry_provider(self) -> RegistryProvider:
        if self._registry_provider is None:
            from .provider import RegistryProvider

            self._registry_provider = RegistryProvider(self)
        return self._registry_provider

    # ------------------------------------------------------------------
    # Generic operations
    # ------------------------------------------------------------------
    def register(self, category: Category, identity: Identity, instance: Any) -> Handle:
        """
        Register an already constructed ``instance`` under ``identity``.

        :raises DuplicateIdentityError: If ``identity`` is taken in ``category``,
            even by this same instance.
        """
        return self._add_entry(_Entry(category, identity, instance=instance))

    def register_factory(
        self,
        category: Category,
        identity: Identity,
        factory: Factory,
        *,
        options: Mapping[str, Any] | None = None,
        state_from: Identity | None = None,
    ) -> Handle:
        """Register a ``factory`` that is invoked on the first lookup of ``identity``."""
        if not callable(factory):
            raise TypeError(f"{category.label} factory for identity {identity} must be callable")
        entry = _Entry(category, identity, factory=factory, options=options, state_from=state_from)
        return self._add_entry(entry)

    def has(self, category: Category, identity: Identity) -> bool:
        return self._entries[category].has_id(identity)

    def ids(self, category: Category) -> tuple[Identity, ...]:
        return self._entries[category].ids()

    def identify(self, category: Category, value: Any) -> Identity:
        """Return the identity ``value`` was realized (or eagerly registered) under."""
        try:
            return self._realized.identify(value)
        except NotRegisteredError:
            for identity, entry in self._entries[category].items():
                if entry.eager and entry.instance is value:
                    return identity
            raise

    async def aget(self, category: Category, identity: Identity) -> Any:
        """Resolve ``identity`` within ``category``, invoking its factory at most once."""
        if self._realized_by.get(identity) is category:
            return self._realized.get(identity)

        pending = self._pending[category]
        task = pending.get(identity)
        if task is None:
            entry = self._entries[category].get(identity)
            task = asyncio.ensure_future(self._resolve(entry))
            pending[identity] = task
        else:
            logger.debug("Joining pending %s resolution for identity %s", category.label, identity)
        return await asyncio.shield(task)

    def get(self, category: Category, identity: Identity) -> Any:
        """Blocking twin of :meth:`aget`."""
        return async_to_sync(self.aget)(category, identity)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _current_entry(self, category: Category, identity: Identity) -> _Entry | None:
        entries = self._entries[category]
        return entries.get(identity) if entries.has_id(identity) else None

    def _add_entry(self, entry: _Entry) -> Handle:
        inner = self._entries[entry.category].register(entry.identity, entry)
        entry.handle = Handle(lambda: self._remove_entry(entry, inner))
        logger.debug(
            "Registered %s %s for identity %s",
            entry.category.label,
            "instance" if entry.eager else "factory",
            entry.identity,
        )
        return entry.handle

    def _remove_entry(self, entry: _Entry, inner: Handle) -> None:
        category, identity = entry.category, entry.identity
        if self._current_entry(category, identity) is not entry:
            return
        inner.destroy()
        # A later registration must not join this entry's resolution.
        self._pending[category].pop(identity, None)
        if self._claims.get(identity) is entry:
            del self._claims[identity]
        if self._realized_by.get(identity) is category:
            self._realized.delete(identity)
            del self._realized_by[identity]
        logger.debug("Removed %s registration for identity %s", category.label, identity)

    async def _resolve(self, entry: _Entry) -> Any:
        category, identity = entry.category, entry.identity
        try:
            if entry.eager:
                candidate = entry.instance
            else:
                logger.debug("Invoking %s factory for identity %s", category.label, identity)
                candidate = await invoke_factory(entry.factory, self._factory_options(entry))
            if category is Category.ACTIONS:
                self._claim(entry)
                await self._configure_action(entry, candidate)
            return self._commit(entry, candidate)
        finally:
            pending = self._pending[category]
            if pending.get(identity) is asyncio.current_task():
                del pending[identity]
            if self._claims.get(identity) is entry:
                del self._claims[identity]

    def _factory_options(self, entry: _Entry) -> Mapping[str, Any] | None:
        if entry.category is not Category.WIDGETS:
            return dict(entry.options) if entry.options is not None else None
        options = dict(entry.options or {})
        options.setdefault("id", entry.identity)
        return self._widget_options(options)

    def _widget_options(self, options: dict[str, Any]) -> dict[str, Any]:
        options["registry_provider"] = self.registry_provider
        if self._default_store is not None and "id" in options:
            options.setdefault("state_from", self._default_store)
        return options

    async def _configure_action(self, entry: _Entry, action: Any) -> None:
        configure = getattr(action, "configure", None)
        if not callable(configure):
            return
        if entry.state_from is not None:
            state_from = await self.aget(Category.STORES, entry.state_from)
        else:
            state_from = self._default_store
        result = configure(ActionConfiguration(self.registry_provider, state_from))
        if inspect.isawaitable(result):
            await result

    def _holder(self, identity: Identity) -> Category | None:
        """Category that realized ``identity`` or is configuring an action for it."""
        holder = self._realized_by.get(identity)
        if holder is None and identity in self._claims:
            holder = self._claims[identity].category
        return holder

    def _check_collision(self, category: Category, identity: Identity) -> None:
        holder = self._holder(identity)
        if holder is not None and holder is not category:
            logger.warning(
                "Identity %s collision: %s already realized as %s", identity, category.label, holder.label
            )
            raise CrossCategoryCollisionError(category, holder, identity)

    def _claim(self, entry: _Entry) -> None:
        # Actions are configured before commit; the claim keeps other categories
        # from committing the identity meanwhile.
        if self._current_entry(entry.category, entry.identity) is not entry:
            return
        self._check_collision(entry.category, entry.identity)
        self._claims.setdefault(entry.identity, entry)

    def _commit(self, entry: _Entry, candidate: Any) -> Any:
        category, identity = entry.category, entry.identity
        if self._current_entry(category, identity) is not entry:
            logger.warning(
                "%s registration for identity %s was removed while resolving; not committing",
                category.label.capitalize(),
                identity,
            )
            return candidate

        if self._realized_by.get(identity) is category:
            return self._realized.get(identity)
        self._check_collision(category, identity)

        self._realized.register(identity, candidate)
        self._realized_by[identity] = category
        logger.debug("Committed %s for identity %s", category.label, identity)
        return candidate

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def register_action(self, identity: Identity, action: Any) -> Handle:
        return self.register(Category.ACTIONS, identity, action)

    def register_action_factory(
        self,
        identity: Identity,
        factory: Factory,
        *,
        options: Mapping[str, Any] | None = None,
        state_from: Identity | None = None,
    ) -> Handle:
        return self.register_factory(
            Category.ACTIONS, identity, factory, options=options, state_from=state_from
        )

    def has_action(self, identity: Identity) -> bool:
        return self.has(Category.ACTIONS, identity)

    async def aget_action(self, identity: Identity) -> Any:
        return await self.aget(Category.ACTIONS, identity)

    def get_action(self, identity: Identity) -> Any:
        return self.get(Category.ACTIONS, identity)

    def identify_action(self, action: Any) -> Identity:
        return self.identify(Category.ACTIONS, action)

    # ------------------------------------------------------------------
    # Stores
    # ------------------------------------------------------------------
    def register_store(self, identity: Identity, store: Any) -> Handle:
        return self.register(Category.STORES, identity, store)

    def register_store_factory(
        self, identity: Identity, factory: Factory, *, options: Mapping[str, Any] | None = None
    ) -> Handle:
        return self.register_factory(Category.STORES, identity, factory, options=options)

    def has_store(self, identity: Identity) -> bool:
        return self.has(Category.STORES, identity)

    async def aget_store(self, identity: Identity) -> Any:
        return await self.aget(Category.STORES, identity)

    def get_store(self, identity: Identity) -> Any:
        return self.get(Category.STORES, identity)

    def identify_store(self, store: Any) -> Identity:
        return self.identify(Category.STORES, store)

    # ------------------------------------------------------------------
    # Widgets
    # ------------------------------------------------------------------
    def register_widget(self, identity: Identity, widget: Any) -> Handle:
        return self.register(Category.WIDGETS, identity, widget)

    def register_widget_factory(
        self, identity: Identity, factory: Factory, *, options: Mapping[str, Any] | None = None
    ) -> Handle:
        return self.register_factory(Category.WIDGETS, identity, factory, options=options)

    def has_widget(self, identity: Identity) -> bool:
        return self.has(Category.WIDGETS, identity)

    async def aget_widget(self, identity: Identity) -> Any:
        return await self.aget(Category.WIDGETS, identity)

    def get_widget(self, identity: Identity) -> Any:
        return self.get(Category.WIDGETS, identity)

    def identify_widget(self, widget: Any) -> Identity:
        return self.identify(Category.WIDGETS, widget)

    async def acreate_widget(
        self, factory: Factory, options: Mapping[str, Any] | None = None
    ) -> tuple[Identity, Any]:
        """
        Create a widget from ``factory`` and add it to the registry.

        ``options`` is copied and extended with ``registry_provider``, and with
        ``state_from`` when an ``id`` is given and a default store exists. A
        widget without an ``id`` gets a generated one. If the widget has an
        ``own()`` method it receives the registration handle, so destroying the
        widget removes it from the registry.

        :return: ``(identity, widget)``
        """
        widget_options = self._widget_options(dict(options or {}))
        widget = await invoke_factory(factory, widget_options)

        identity = widget_options.get("id")
        if identity is None:
            identity = f"{self.widget_id_prefix}{uuid4().hex}"

        handle = self.register_widget(identity, widget)
        entry = self._entries[Category.WIDGETS].get(identity)
        try:
            self._commit(entry, widget)
        except RegistryError:
            handle.destroy()
            raise

        own = getattr(widget, "own", None)
        if callable(own):
            own(handle)
        return identity, widget

    def create_widget(
        self, factory: Factory, options: Mapping[str, Any] | None = None
    ) -> tuple[Identity, Any]:
        """Blocking twin of :meth:`acreate_widget`."""
        return async_to_sync(self.acreate_widget)(factory, options)
