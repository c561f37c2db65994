"""Definition records and the batch loader that registers them."""

from .loader import DefinitionLoader, configure_action
from .models import ActionDefinition, BaseDefinition, Definitions, StoreDefinition, WidgetDefinition

__all__ = [
    "ActionDefinition",
    "BaseDefinition",
    "StoreDefinition",
    "WidgetDefinition",
    "Definitions",
    "DefinitionLoader",
    "configure_action",
]
