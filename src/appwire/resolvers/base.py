"""Module resolver interface."""

from __future__ import annotations

from typing import Any

from asgiref.sync import async_to_sync

__all__ = ["BaseModuleResolver", "RESOLVE_CONTENTS"]


class _ResolveContents:
    __slots__ = ()

    def __repr__(self) -> str:
        return "RESOLVE_CONTENTS"


RESOLVE_CONTENTS: Any = _ResolveContents()
"""Pass as ``export_name`` to get a dict of every public export of a module."""


class BaseModuleResolver:
    """Turns a module identifier into a factory or exported value."""

    async def aresolve(self, identifier: str, export_name: Any = None) -> Any:
        raise NotImplementedError

    def resolve(self, identifier: str, export_name: Any = None) -> Any:
        return async_to_sync(self.aresolve)(identifier, export_name)
