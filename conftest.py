import nagiosplugin.runtime
import pytest


@pytest.fixture(autouse=True)
def fresh_runtime():
    """nagiosplugin keeps a process wide Runtime singleton around."""
    nagiosplugin.runtime.Runtime.instance = None
    yield
    nagiosplugin.runtime.Runtime.instance = None
