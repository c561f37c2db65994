import pytest

from appwire import App
from appwire.registry import CombinedRegistry


class Action:
    """Minimal action recording every configure() call."""

    def __init__(self, options=None):
        self.options = options
        self.configured = []

    def configure(self, configuration):
        self.configured.append(configuration)


class Store:
    def __init__(self, options=None):
        self.options = options


class Widget:
    """Destroyable widget that releases owned handles when destroyed."""

    def __init__(self, options=None):
        self.options = options
        self.owned = []
        self.destroyed = False

    def own(self, handle):
        self.owned.append(handle)

    def destroy(self):
        self.destroyed = True
        for handle in self.owned:
            handle.destroy()


@pytest.fixture
def app():
    return App("test")


@pytest.fixture
def registry():
    return CombinedRegistry()
