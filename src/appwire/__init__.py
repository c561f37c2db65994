"""
appwire: an application container for actions, stores and widgets.

Actions, stores and widgets are registered by identity, constructed lazily
from factories and looked up asynchronously:

- Use `appwire.App` to register things and load definition batches.
- Use `App.registry_provider` to hand read-only lookups to consumers.
- Use `appwire.definitions` to describe batches declaratively.
- Use `appwire.registry` exceptions for error handling.
"""

from importlib.metadata import PackageNotFoundError, version

from .app import App
from .identity import IdentityToken
from .registry import Category, CompositeHandle, Handle, RegistryProvider

try:
    __version__ = version("appwire")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "App",
    "Category",
    "CompositeHandle",
    "Handle",
    "IdentityToken",
    "RegistryProvider",
]
