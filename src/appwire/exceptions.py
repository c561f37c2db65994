# appwire/exceptions.py
"""Root of the appwire exception hierarchy."""


class AppwireError(Exception): ...


class ConfigurationError(ValueError, AppwireError):
    """Raised when a setting holds a value of the wrong shape."""


class DefinitionError(ValueError, AppwireError):
    """Raised when a definition record is malformed."""


class ModuleResolutionError(ImportError, AppwireError):
    """Raised when a module identifier cannot be resolved to a value."""


__all__ = ["AppwireError", "ConfigurationError", "DefinitionError", "ModuleResolutionError"]
