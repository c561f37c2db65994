# appwire/registry/handles.py
"""Destroyable handles returned by every registration."""
from __future__ import annotations

import logging
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

__all__ = ["Handle", "CompositeHandle"]


class Handle:
    """Owns a single registration; ``destroy()`` undoes it exactly once."""

    __slots__ = ("_callback", "_destroyed")

    def __init__(self, callback: Callable[[], object] | None = None) -> None:
        self._callback = callback
        self._destroyed = False

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()

    def __enter__(self) -> Handle:
        return self

    def __exit__(self, *exc_info) -> None:
        self.destroy()


class CompositeHandle(Handle):
    """Owns a group of child handles and destroys all of them together.

    Children added after the composite was destroyed are destroyed right away.
    """

    __slots__ = ("_children",)

    def __init__(self, children: Iterable[Handle] = ()) -> None:
        super().__init__()
        self._children: list[Handle] = list(children)

    def add(self, handle: Handle) -> Handle:
        if self._destroyed:
            handle.destroy()
        else:
            self._children.append(handle)
        return handle

    def __len__(self) -> int:
        return len(self._children)

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        children, self._children = self._children, []
        logger.debug("Destroying %d grouped handle(s)", len(children))
        for child in children:
            child.destroy()
