from .defaults import DEFAULTS, ENVVAR
from .settings import Settings

__all__ = ["DEFAULTS", "ENVVAR", "Settings"]
