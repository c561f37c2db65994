# appwire/definitions/models.py
"""
Definition records consumed by :class:`~appwire.definitions.loader.DefinitionLoader`.

Each record registers one action, store or widget. A record supplies its value
either as an ``instance`` or as a ``factory``; a factory may be a callable or a
module identifier string for the module resolver. Actions may instead name a
module export via ``from_module`` (and optionally ``import_name``).

Design notes:
- Unknown keys are forbidden (extra="forbid") so typos fail at load time.
- A ``state_from`` key inside action ``options`` is lifted onto the record; it
  names the store bound to the action when the registry configures it.
"""
from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..exceptions import DefinitionError

__all__ = ["ActionDefinition", "StoreDefinition", "WidgetDefinition", "Definitions"]


class BaseDefinition(BaseModel):
    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    id: Any
    factory: Callable[..., Any] | str | None = None
    instance: Any = None
    options: dict[str, Any] | None = None

    @field_validator("id")
    @classmethod
    def _hashable_id(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("id is required")
        try:
            hash(value)
        except TypeError:
            raise ValueError(f"id must be hashable (got {type(value).__name__})") from None
        return value

    @property
    def has_instance(self) -> bool:
        return "instance" in self.model_fields_set

    def _sources(self) -> list[str]:
        sources = []
        if self.factory is not None:
            sources.append("factory")
        if self.has_instance:
            sources.append("instance")
        return sources

    @model_validator(mode="after")
    def _exactly_one_source(self):
        sources = self._sources()
        if len(sources) != 1:
            kind = type(self).__name__
            raise ValueError(
                f"{kind} {self.id!r} requires exactly one of {self._allowed_sources()} (got {sources or 'none'})"
            )
        if self.options is not None and self.has_instance:
            raise ValueError(f"options cannot be used with an instance ({self.id!r})")
        return self

    @classmethod
    def _allowed_sources(cls) -> str:
        return "'factory' or 'instance'"


class ActionDefinition(BaseDefinition):
    config: dict[str, Any] | None = None
    from_module: str | None = None
    import_name: str | None = None
    state_from: Any = None

    @model_validator(mode="before")
    @classmethod
    def _lift_state_from(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("options"), dict) and "state_from" in data["options"]:
            data = dict(data)
            options = dict(data["options"])
            if data.get("state_from") is not None:
                raise ValueError("state_from given both as a field and as an option")
            data["state_from"] = options.pop("state_from")
            data["options"] = options
        return data

    def _sources(self) -> list[str]:
        sources = super()._sources()
        if self.from_module is not None:
            sources.append("from_module")
        return sources

    @classmethod
    def _allowed_sources(cls) -> str:
        return "'factory', 'instance' or 'from_module'"

    @model_validator(mode="after")
    def _check_action_fields(self):
        if self.import_name is not None and self.from_module is None:
            raise ValueError(f"import_name requires from_module ({self.id!r})")
        if self.from_module is not None and self.options is not None:
            raise ValueError(f"options cannot be used with from_module ({self.id!r})")
        if self.has_instance and (self.config is not None or self.state_from is not None):
            raise ValueError(f"config and state_from require a factory or from_module ({self.id!r})")
        return self


class StoreDefinition(BaseDefinition):
    pass


class WidgetDefinition(BaseDefinition):
    pass


class Definitions(BaseModel):
    """Ordered definition records per category."""

    model_config = ConfigDict(extra="forbid")

    actions: list[ActionDefinition] = Field(default_factory=list)
    stores: list[StoreDefinition] = Field(default_factory=list)
    widgets: list[WidgetDefinition] = Field(default_factory=list)

    @classmethod
    def coerce(cls, value: Definitions | dict[str, Any]) -> Definitions:
        """Validate ``value`` into :class:`Definitions`, raising :class:`DefinitionError`."""
        if isinstance(value, cls):
            return value
        try:
            return cls.model_validate(value)
        except ValidationError as err:
            raise DefinitionError(str(err)) from err
