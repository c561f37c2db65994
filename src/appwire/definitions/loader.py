# appwire/definitions/loader.py
"""Batch registration of definitions with a single undo handle."""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Mapping

from asgiref.sync import async_to_sync

from .models import ActionDefinition, Definitions, BaseDefinition
from ..registry.categories import Category
from ..registry.combined import CombinedRegistry, Factory, invoke_factory
from ..registry.exceptions import RegistryError
from ..registry.handles import CompositeHandle, Handle
from ..resolvers.base import RESOLVE_CONTENTS, BaseModuleResolver
from ..resolvers.default import DefaultModuleResolver

logger = logging.getLogger(__name__)

__all__ = ["DefinitionLoader", "configure_action"]


async def configure_action(action: Any, config: Mapping[str, Any]) -> None:
    """Pass ``config`` to ``action.configure()`` when the action supports it."""
    configure = getattr(action, "configure", None)
    if not callable(configure):
        return
    result = configure(config)
    if inspect.isawaitable(result):
        await result


class DefinitionLoader:
    """Registers :class:`Definitions` into a :class:`CombinedRegistry`.

    Every registration made by :meth:`load` is owned by the returned
    :class:`CompositeHandle`; destroying it undoes the whole batch.
    """

    def __init__(self, registry: CombinedRegistry, resolver: BaseModuleResolver | None = None) -> None:
        self.registry = registry
        self.resolver = resolver if resolver is not None else DefaultModuleResolver()

    def load(self, definitions: Definitions | Mapping[str, Any]) -> CompositeHandle:
        """
        Register every record of ``definitions``, actions first, then stores and widgets.

        Duplicate identities raise at the offending record. Registrations made
        before the failure are kept; they are reachable through the partial
        handle attached to the exception as ``exc.handle``.

        :raises DefinitionError: If ``definitions`` is malformed.
        :raises DuplicateIdentityError: If an identity is taken within its category.
        """
        defs = Definitions.coerce(definitions)
        handle = CompositeHandle()
        try:
            for action in defs.actions:
                handle.add(self._register_action(action))
            for store in defs.stores:
                handle.add(self._register(Category.STORES, store))
            for widget in defs.widgets:
                handle.add(self._register(Category.WIDGETS, widget))
        except RegistryError as err:
            err.handle = handle
            raise

        logger.debug(
            "Loaded %d action(s), %d store(s), %d widget(s)",
            len(defs.actions),
            len(defs.stores),
            len(defs.widgets),
        )
        return handle

    def _register(self, category: Category, definition: BaseDefinition) -> Handle:
        if definition.has_instance:
            return self.registry.register(category, definition.id, definition.instance)
        return self.registry.register_factory(
            category, definition.id, self._factory(definition.factory), options=definition.options
        )

    def _register_action(self, definition: ActionDefinition) -> Handle:
        if definition.has_instance:
            return self.registry.register_action(definition.id, definition.instance)

        if definition.from_module is not None:
            factory = self._export(definition.from_module, definition.import_name)
        else:
            factory = self._factory(definition.factory)
        if definition.config is not None:
            factory = self._configured(factory, definition.config)

        return self.registry.register_action_factory(
            definition.id, factory, options=definition.options, state_from=definition.state_from
        )

    def _factory(self, factory: Factory | str) -> Factory:
        if not isinstance(factory, str):
            return factory
        identifier = factory

        async def resolve_and_invoke(options: Mapping[str, Any] | None = None) -> Any:
            resolved = await self.resolver.aresolve(identifier)
            return await invoke_factory(resolved, options)

        return resolve_and_invoke

    def _export(self, module_id: str, import_name: str | None) -> Factory:
        async def resolve_export() -> Any:
            return await self.resolver.aresolve(module_id, import_name)

        return resolve_export

    @staticmethod
    def _configured(factory: Factory, config: Mapping[str, Any]) -> Factory:
        # The registry configures the action again on first resolution.
        async def create_and_configure(*args: Any) -> Any:
            action = await invoke_factory(factory, *args)
            await configure_action(action, config)
            return action

        return create_and_configure

    async def aactions_from_module(
        self, module_id: str, config: Mapping[str, Any] | None = None
    ) -> list[ActionDefinition]:
        """
        Build instance definitions for every public export of ``module_id``.

        Each export becomes an action keyed by its export name. When ``config``
        is given every action is configured with it before returning.
        """
        contents = await self.resolver.aresolve(module_id, RESOLVE_CONTENTS)
        definitions = [ActionDefinition(id=name, instance=value) for name, value in contents.items()]
        if config is not None:
            await asyncio.gather(*(configure_action(d.instance, config) for d in definitions))
        return definitions

    def actions_from_module(
        self, module_id: str, config: Mapping[str, Any] | None = None
    ) -> list[ActionDefinition]:
        return async_to_sync(self.aactions_from_module)(module_id, config)
