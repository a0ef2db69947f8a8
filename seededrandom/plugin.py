"""
pytest plugin providing deterministic randomness in tests.

Enable it from a ``conftest.py``::

    pytest_plugins = ["seededrandom.plugin"]

or on the command line with ``-p seededrandom.plugin``.

Every test item is one invocation. Its display name is the item's node id,
which includes the parametrize id, so each parametrized case and each
repetition gets its own seeds. Generators are cached per item: a fixture
and the test asking for the same slot receive the same instance.

Fixtures:

- ``seeded_random``: the slot 1 generator.
- ``seeded_random_factory``: ``factory(slot_index=0, declared_type=SeededRandom)``.
- ``seeded_random_store``: the invocation cache itself.

For annotation-based injection see :func:`seededrandom.inject.seeded`.

Example:
    @pytest.mark.parametrize("attempt", range(5))
    def test_orders(attempt, seeded_random):
        order_id = seeded_random.next_uuid()
        ...

When a test fails, the seeds of every generator it used are listed in a
"seeded random" report section.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, MutableMapping

import pytest

from seededrandom.config import SeededRandomConfig
from seededrandom.generator import SeededRandom
from seededrandom.resolver import SLOT_PREFIX, SeedResolver

logger = logging.getLogger(__name__)

REPORT_SECTION = "seeded random"

_CACHE_KEY = pytest.StashKey[dict]()
_CONFIG_KEY = pytest.StashKey[SeededRandomConfig]()

_resolver = SeedResolver()


def invocation_cache(node: pytest.Item | pytest.Collector) -> MutableMapping[Any, Any]:
    """Return the generator cache of *node*, creating it on first use."""
    return node.stash.setdefault(_CACHE_KEY, {})


def describe_cache(cache: MutableMapping[Any, Any]) -> list[str]:
    """One ``p<index>: <generator>`` line per cached slot, ordered by index."""
    slots = sorted(
        (key for key in cache if isinstance(key, tuple) and key[:1] == (SLOT_PREFIX,)),
        key=lambda key: key[1],
    )
    return [f"{prefix}{index}: {cache[(prefix, index)]!r}" for prefix, index in slots]


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("seededrandom")
    group.addoption(
        "--no-seed-report",
        action="store_true",
        default=False,
        help="Do not list generator seeds in failure reports",
    )


def pytest_configure(config: pytest.Config) -> None:
    settings = SeededRandomConfig.load(config.rootpath)
    if config.getoption("--no-seed-report", default=False):
        settings = SeededRandomConfig(report_seeds=False, log_level=settings.log_level)
    settings.apply_logging()
    logger.debug("seededrandom settings: %s", settings)
    config.stash[_CONFIG_KEY] = settings


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_setup(item: pytest.Item) -> None:
    # A fresh cache per run, so a rerun of the same item starts from the seed.
    item.stash[_CACHE_KEY] = {}


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]):
    outcome = yield
    report = outcome.get_result()
    if not report.failed:
        return

    settings = item.config.stash.get(_CONFIG_KEY, None)
    if settings is None or not settings.report_seeds:
        return

    lines = describe_cache(item.stash.get(_CACHE_KEY, {}))
    if lines:
        report.sections.append((REPORT_SECTION, "\n".join(lines)))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def seeded_random_store(request: pytest.FixtureRequest) -> MutableMapping[Any, Any]:
    """The generator cache of the current test."""
    return invocation_cache(request.node)


@pytest.fixture
def seeded_random_factory(
    request: pytest.FixtureRequest,
    seeded_random_store: MutableMapping[Any, Any],
) -> Callable[..., Any]:
    """
    Resolve generators for arbitrary slots of the current test.

    Calling the factory twice with the same slot returns the same instance.
    """
    display_name = request.node.nodeid

    def factory(slot_index: int = 0, declared_type: Any = SeededRandom) -> Any:
        return _resolver.resolve(slot_index, display_name, seeded_random_store, declared_type)

    return factory


@pytest.fixture
def seeded_random(seeded_random_factory: Callable[..., Any]) -> SeededRandom:
    """The generator for slot 1 of the current test."""
    return seeded_random_factory(0)
