"""Application settings for :class:`~appwire.app.App`.

Lookups fall through the values set on the instance, then any layers passed at
construction and finally :data:`~appwire.conf.defaults.DEFAULTS`. Known
settings are normalized when they are set, and every overridden key remembers
where its value came from so a misconfigured app can be traced back.
"""

import importlib
import os
from collections import ChainMap
from typing import Any, Callable, Iterator, Mapping, MutableMapping

from ..exceptions import ConfigurationError
from .defaults import DEFAULTS, ENVVAR


def _string(key: str, value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"{key} must be a non-empty string (got {value!r})")
    return value


def _optional_string(key: str, value: Any) -> str | None:
    return None if value is None else _string(key, value)


def _string_tuple(key: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = (value,)
    try:
        return tuple(_string(key, item) for item in value)
    except TypeError:
        raise ConfigurationError(f"{key} must be a string or a sequence of strings (got {value!r})") from None


_NORMALIZERS: dict[str, Callable[[str, Any], Any]] = {
    "MODULE_RESOLVER": _string,
    "MODULE_PREFIX": _optional_string,
    "DEFINITION_MODULES": _string_tuple,
    "WIDGET_ID_PREFIX": _string,
}


def _normalize(key: str, value: Any) -> Any:
    normalizer = _NORMALIZERS.get(key)
    return normalizer(key, value) if normalizer else value


class Settings(MutableMapping[str, Any]):
    """Mapping of setting name to value with defaults underneath."""

    def __init__(self, *layers: Mapping[str, Any]) -> None:
        self._values: dict[str, Any] = {}
        self._origins: dict[str, str] = {}
        self._layers = ChainMap(
            self._values,
            *({k: _normalize(k, v) for k, v in layer.items()} for layer in layers),
            dict(DEFAULTS),
        )

    # Mapping protocol -------------------------------------------------
    def __getitem__(self, key: str) -> Any:
        return self._layers[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._set(key, value, origin="assignment")

    def __delitem__(self, key: str) -> None:
        del self._values[key]
        self._origins.pop(key, None)

    def __iter__(self) -> Iterator[str]:
        return iter(self._layers)

    def __len__(self) -> int:
        return len(self._layers)

    def _set(self, key: str, value: Any, *, origin: str) -> None:
        self._values[key] = _normalize(key, value)
        self._origins[key] = origin

    # Typed accessors --------------------------------------------------
    @property
    def module_resolver(self) -> str:
        return self["MODULE_RESOLVER"]

    @property
    def module_prefix(self) -> str | None:
        return self["MODULE_PREFIX"]

    @property
    def definition_modules(self) -> tuple[str, ...]:
        return self["DEFINITION_MODULES"]

    @property
    def widget_id_prefix(self) -> str:
        return self["WIDGET_ID_PREFIX"]

    def origin(self, key: str) -> str:
        """Where the current value of ``key`` came from.

        One of ``"assignment"``, ``"mapping"``, ``"object:<module>"``,
        ``"layer"`` or ``"default"``.
        """
        if key in self._origins:
            return self._origins[key]
        if key in self._layers.maps[-1] and not any(key in m for m in self._layers.maps[1:-1]):
            return "default"
        if key in self._layers:
            return "layer"
        raise KeyError(key)

    # Loading ----------------------------------------------------------
    def update_from_object(self, obj: str, *, namespace: str | None = None) -> None:
        """Read settings from the module at dotted path ``obj``."""
        module = importlib.import_module(obj)
        self._update(vars(module), namespace, origin=f"object:{obj}")

    def update_from_envvar(self, envvar: str = ENVVAR, *, namespace: str | None = None) -> bool:
        """Read settings from the module named by ``envvar``. Returns ``False`` if it is unset."""
        module_name = os.environ.get(envvar)
        if not module_name:
            return False
        self.update_from_object(module_name, namespace=namespace)
        return True

    def update_from_mapping(self, mapping: Mapping[str, Any], *, namespace: str | None = None) -> None:
        self._update(mapping, namespace, origin="mapping")

    def _update(self, mapping: Mapping[str, Any], namespace: str | None, *, origin: str) -> None:
        # Normalize everything first so a bad value leaves the settings untouched.
        selected = {k: _normalize(k, v) for k, v in _select(mapping, namespace).items()}
        self._values.update(selected)
        self._origins.update(dict.fromkeys(selected, origin))

    def as_dict(self) -> dict[str, Any]:
        return dict(self._layers)


def _select(mapping: Mapping[str, Any], namespace: str | None) -> dict[str, Any]:
    """Keep upper-case keys, stripping ``<namespace>_`` when a namespace is given."""
    if namespace is None:
        return {k: v for k, v in mapping.items() if k.isupper()}

    prefix = f"{namespace}_"
    return {k[len(prefix):]: v for k, v in mapping.items() if k.startswith(prefix) and k.isupper()}
