"""Module resolvers turning identifier strings into factories or values."""

from .base import RESOLVE_CONTENTS, BaseModuleResolver
from .default import DefaultModuleResolver

__all__ = ["BaseModuleResolver", "DefaultModuleResolver", "RESOLVE_CONTENTS"]
