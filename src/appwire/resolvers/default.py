"""Default importlib-backed module resolver."""

from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Any

from asgiref.sync import sync_to_async

from .base import RESOLVE_CONTENTS, BaseModuleResolver
from ..exceptions import ModuleResolutionError

logger = logging.getLogger(__name__)

DEFAULT_EXPORT = "default"


class DefaultModuleResolver(BaseModuleResolver):
    """Resolve ``"pkg.module:attr"`` / ``"pkg.module.attr"`` identifiers via importlib.

    Identifiers that name a module without an attribute resolve to the module's
    ``default`` attribute when it has one, otherwise to the module itself.
    Identifiers starting with ``.`` are relative to ``prefix``.
    """

    def __init__(self, prefix: str | None = None) -> None:
        self.prefix = prefix

    async def aresolve(self, identifier: str, export_name: Any = None) -> Any:
        return await sync_to_async(self._resolve)(identifier, export_name)

    def _resolve(self, identifier: str, export_name: Any) -> Any:
        path = self._absolute(identifier)
        module, attr = self._import(path)

        if export_name is RESOLVE_CONTENTS:
            logger.debug("Resolved all exports of %s", module.__name__)
            return self._contents(module)

        name = export_name or attr
        if name is None:
            return getattr(module, DEFAULT_EXPORT, module)
        try:
            return getattr(module, name)
        except AttributeError:
            raise ModuleResolutionError(
                f"Module {module.__name__!r} has no export {name!r}", name=module.__name__
            ) from None

    def _absolute(self, identifier: str) -> str:
        if not identifier or not identifier.strip():
            raise ModuleResolutionError("module identifier cannot be empty")
        identifier = identifier.strip()
        if not identifier.startswith("."):
            return identifier
        if not self.prefix:
            raise ModuleResolutionError(
                f"Relative module identifier {identifier!r} requires a module prefix"
            )
        return f"{self.prefix.rstrip('.')}{identifier}"

    @staticmethod
    def _import(path: str) -> tuple[ModuleType, str | None]:
        module_name, sep, attr = path.partition(":")
        if sep:
            return _import_module(module_name), attr or None

        try:
            return importlib.import_module(path), None
        except ModuleNotFoundError as err:
            # Only fall back when the missing module is the one we asked for.
            if err.name != path:
                raise ModuleResolutionError(str(err), name=err.name) from err

        module_name, _, attr = path.rpartition(".")
        if not module_name:
            raise ModuleResolutionError(f"No module named {path!r}", name=path)
        return _import_module(module_name), attr

    @staticmethod
    def _contents(module: ModuleType) -> dict[str, Any]:
        names = getattr(module, "__all__", None)
        if names is None:
            names = [
                n for n, v in vars(module).items() if not n.startswith("_") and not isinstance(v, ModuleType)
            ]
        return {name: getattr(module, name) for name in names}


def _import_module(name: str) -> ModuleType:
    try:
        return importlib.import_module(name)
    except ModuleNotFoundError as err:
        raise ModuleResolutionError(str(err), name=err.name) from err


__all__ = ["DefaultModuleResolver", "DEFAULT_EXPORT"]
