# appwire/app.py
"""The application container.

An :class:`App` owns one :class:`~appwire.registry.CombinedRegistry` and is
the only object that registers actions, stores and widgets. Everything else
looks collaborators up through :attr:`App.registry_provider`.

Lifecycle:

1. ``configure``  -> apply settings from mappings/env/object
2. ``setup``      -> build the module resolver and load ``DEFINITION_MODULES``
3. ``close``      -> undo everything ``setup`` registered

Factories stay lazy throughout; nothing is constructed until it is looked up.
"""
from __future__ import annotations

import importlib
import logging
from typing import Any, Callable, Mapping

from .conf import ENVVAR, Settings
from .definitions import DefinitionLoader, Definitions
from .identity import Identity
from .registry import Category, CombinedRegistry, CompositeHandle, Handle, RegistryProvider
from .resolvers.base import BaseModuleResolver

logger = logging.getLogger(__name__)

Factory = Callable[..., Any]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _import_string(path: str):
    module_name, sep, attr = path.partition(":")
    if not sep:
        module_name, _, attr = path.rpartition(".")
    module = importlib.import_module(module_name)
    return getattr(module, attr) if attr else module


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

class App:
    """Wires actions, stores and widgets together by identity."""

    def __init__(
        self,
        name: str = "appwire",
        *,
        default_store: Any = None,
        resolver: BaseModuleResolver | None = None,
        conf: Settings | None = None,
    ) -> None:
        self.name = name
        self.conf = conf if conf is not None else Settings()
        self.conf.update_from_envvar()

        self._default_store = default_store
        self._resolver = resolver
        self._loader: DefinitionLoader | None = None
        self._configured = False
        self._setup_done = False
        self._setup_handle = CompositeHandle()

        self.registry = CombinedRegistry(
            default_store=default_store,
            widget_id_prefix=self.conf.widget_id_prefix,
        )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<App {self.name!r}>"

    @property
    def default_store(self) -> Any:
        return self._default_store

    @property
    def registry_provider(self) -> RegistryProvider:
        return self.registry.registry_provider

    # ------------------------------------------------------------------
    # Configuration helpers
    # ------------------------------------------------------------------
    def configure(self, mapping: Mapping[str, Any] | None = None, *, namespace: str | None = None) -> App:
        if mapping:
            self.conf.update_from_mapping(mapping, namespace=namespace)
        self.registry.widget_id_prefix = self.conf.widget_id_prefix
        self._configured = True
        return self

    def config_from_object(self, obj: str, *, namespace: str | None = None) -> App:
        self.conf.update_from_object(obj, namespace=namespace)
        return self.configure()

    def config_from_envvar(self, envvar: str = ENVVAR, *, namespace: str | None = None) -> App:
        self.conf.update_from_envvar(envvar, namespace=namespace)
        return self.configure()

    def _ensure_configured(self) -> None:
        if not self._configured:
            self.configure()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def resolver(self) -> BaseModuleResolver:
        """The module resolver, built from ``MODULE_RESOLVER`` on first access."""
        if self._resolver is None:
            self._ensure_configured()
            resolver_cls = _import_string(self.conf.module_resolver)
            prefix = self.conf.module_prefix
            self._resolver = resolver_cls(prefix=prefix) if prefix else resolver_cls()
            logger.debug("Using module resolver %r", self._resolver)
        return self._resolver

    @property
    def loader(self) -> DefinitionLoader:
        if self._loader is None:
            self._loader = DefinitionLoader(self.registry, self.resolver)
        return self._loader

    def setup(self) -> App:
        """Load every definitions object named in ``DEFINITION_MODULES``. Idempotent."""
        self._ensure_configured()
        if self._setup_done:
            return self

        for path in self.conf.definition_modules:
            definitions = _import_string(path)
            self._setup_handle.add(self.load_definition(definitions))
            logger.debug("Loaded definitions from %s", path)

        self._setup_done = True
        return self

    def close(self) -> None:
        """Undo the registrations made by :meth:`setup`."""
        self._setup_handle.destroy()
        self._setup_handle = CompositeHandle()
        self._setup_done = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def load_definition(self, definitions: Definitions | Mapping[str, Any]) -> CompositeHandle:
        """Register a batch of definitions; destroying the returned handle undoes the batch."""
        return self.loader.load(definitions)

    def register_action(self, identity: Identity, action: Any) -> Handle:
        return self.registry.register_action(identity, action)

    def register_action_factory(
        self,
        identity: Identity,
        factory: Factory,
        *,
        options: Mapping[str, Any] | None = None,
        state_from: Identity | None = None,
    ) -> Handle:
        return self.registry.register_action_factory(identity, factory, options=options, state_from=state_from)

    def register_store(self, identity: Identity, store: Any) -> Handle:
        return self.registry.register_store(identity, store)

    def register_store_factory(
        self, identity: Identity, factory: Factory, *, options: Mapping[str, Any] | None = None
    ) -> Handle:
        return self.registry.register_store_factory(identity, factory, options=options)

    def register_widget(self, identity: Identity, widget: Any) -> Handle:
        return self.registry.register_widget(identity, widget)

    def register_widget_factory(
        self, identity: Identity, factory: Factory, *, options: Mapping[str, Any] | None = None
    ) -> Handle:
        return self.registry.register_widget_factory(identity, factory, options=options)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def has_action(self, identity: Identity) -> bool:
        return self.registry.has_action(identity)

    def has_store(self, identity: Identity) -> bool:
        return self.registry.has_store(identity)

    def has_widget(self, identity: Identity) -> bool:
        return self.registry.has_widget(identity)

    async def aget_action(self, identity: Identity) -> Any:
        return await self.registry.aget_action(identity)

    async def aget_store(self, identity: Identity) -> Any:
        return await self.registry.aget_store(identity)

    async def aget_widget(self, identity: Identity) -> Any:
        return await self.registry.aget_widget(identity)

    def get_action(self, identity: Identity) -> Any:
        return self.registry.get_action(identity)

    def get_store(self, identity: Identity) -> Any:
        return self.registry.get_store(identity)

    def get_widget(self, identity: Identity) -> Any:
        return self.registry.get_widget(identity)

    def identify_action(self, action: Any) -> Identity:
        return self.registry.identify_action(action)

    def identify_store(self, store: Any) -> Identity:
        return self.registry.identify_store(store)

    def identify_widget(self, widget: Any) -> Identity:
        return self.registry.identify_widget(widget)

    async def acreate_widget(self, factory: Factory, options: Mapping[str, Any] | None = None):
        return await self.registry.acreate_widget(factory, options)

    def create_widget(self, factory: Factory, options: Mapping[str, Any] | None = None):
        return self.registry.create_widget(factory, options)

    # ------------------------------------------------------------------
    # Presentation helpers
    # ------------------------------------------------------------------
    def component_report_text(self) -> str:
        lines = [f"Registered components ({self.name}):"]
        for category in Category:
            names = sorted(str(i) for i in self.registry.ids(category))
            lines.append(f"- {category.value}: {', '.join(names) if names else '<none>'}")
        return "\n".join(lines) + "\n"


__all__ = ["App"]
