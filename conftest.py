"""Configures pytest further."""
import pytest


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower tests")
    parser.addoption("--run-extreme", action="store_true", default=False, help="run extreme value extremely slow tests")


def pytest_collection_modifyitems(config, items):
    skipdict = {}
    if config.getoption("--skip-slow"):
        skipdict["slow"] = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    if not config.getoption("--run-extreme"):
        skipdict["extreme"] = pytest.mark.skip(reason="Extreme test: needs --run-extreme option")
    if not skipdict:
        return
    for item in items:
        for k, v in skipdict.items():
            if k in item.keywords:
                item.add_marker(v)


class ScriptedSource:
    """Hands out a fixed sequence of values, recording the bounds it was asked for."""

    def __init__(self, values):
        self.values = list(values)
        self.bounds = []

    def next_random(self, bound: int) -> int:
        value = self.values.pop(0)
        assert 0 <= value < bound, f"scripted value {value} outside [0, {bound})"
        self.bounds.append(bound)
        return value


@pytest.fixture
def scripted():
    return ScriptedSource
