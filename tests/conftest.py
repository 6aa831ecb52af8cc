import pytest

from src.gamerng.entropy import EntropyUnavailableError
from src.gamerng.locking import LockedSource
from src.gamerng.source import RandomSource


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        help="Run long statistical tests",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "slow: long statistical runs",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)


# ---------------------------------------------------------------------------
# Helpers


class ScriptedSource(RandomSource):
    """Replays a fixed list of words, cycling when it runs out."""

    name = "scripted"

    def __init__(self, words, cryptographic=False):
        self.words = list(words)
        self.calls = 0
        self.cryptographic = cryptographic

    def seed(self, seed=0):
        self.calls = 0

    def next_u32(self):
        word = self.words[self.calls % len(self.words)]
        self.calls += 1
        return word


class CountingEntropy:
    """Entropy callable returning 1, 2, 3, ... and counting its calls."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.calls


class FailingEntropy:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        raise EntropyUnavailableError("no entropy in tests")


@pytest.fixture
def fast_rng():
    return LockedSource.fast(42)


@pytest.fixture
def secure_rng():
    rng = LockedSource.secure(42)
    yield rng
    rng.close()


@pytest.fixture
def scripted():
    def make(words, cryptographic=False):
        return LockedSource(ScriptedSource(words, cryptographic))
    return make


@pytest.fixture
def counting_entropy():
    return CountingEntropy()


@pytest.fixture
def failing_entropy():
    return FailingEntropy()
