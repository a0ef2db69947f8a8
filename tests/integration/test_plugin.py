"""Integration tests for the pytest plugin.

Testing a test plugin is a little odd: some of these tests use pytest's own
machinery (fixtures, parametrize, class instances) to check how the plugin
interacts with that machinery. The plugin is enabled in the root conftest.
"""

from __future__ import annotations

import pytest

from seededrandom.generator import SeededRandom
from seededrandom.inject import seeded
from seededrandom.resolver import compute_seed


class CoinRandom(SeededRandom):
    def flip(self) -> str:
        return "heads" if self.next_boolean() else "tails"


class TestSharedAcrossPhases:
    """A setup fixture and the test body share the generator of each slot."""

    previously_generated: list[SeededRandom] = []

    @pytest.fixture(autouse=True)
    @seeded
    def remember_setup_generator(self, random: SeededRandom):
        self.from_setup = random

    @pytest.mark.parametrize("repetition", [1, 2, 3, 4])
    @seeded
    def test_repeated(
        self,
        random: SeededRandom,
        random_with_different_index: SeededRandom,
        repetition,
    ):
        assert random is self.from_setup
        assert random_with_different_index is not self.from_setup
        for previous in self.previously_generated:
            assert previous is not random
            assert previous.initial_seed != random.initial_seed
        self.previously_generated.append(random)
        # If this fails, the test itself is invalid.
        assert len(self.previously_generated) == repetition


@pytest.fixture
def order_ids(seeded_random):
    return [seeded_random.next_uuid() for _ in range(3)]


@pytest.fixture
@seeded
def flipped(coin: CoinRandom):
    coin.flip()
    yield coin


class TestFixtures:
    def test_seeded_random_seed(self, request, seeded_random):
        assert seeded_random.initial_seed == compute_seed(0, request.node.nodeid)

    def test_fixture_and_test_share(self, order_ids, seeded_random, seeded_random_factory):
        assert seeded_random_factory(0) is seeded_random
        replay = SeededRandom(seeded_random.initial_seed)
        assert order_ids == [replay.next_uuid() for _ in range(3)]

    def test_factory_slots(self, seeded_random_factory):
        first = seeded_random_factory(0)
        second = seeded_random_factory(1)
        assert first is not second
        assert seeded_random_factory(1) is second

    def test_factory_subclass(self, seeded_random_factory):
        coin = seeded_random_factory(2, CoinRandom)
        assert isinstance(coin, CoinRandom)
        assert coin.flip() in ("heads", "tails")

    def test_store_holds_generators(self, seeded_random, seeded_random_store):
        assert seeded_random_store[("p", 1)] is seeded_random

    def test_decorated_test_matches_fixture(self, seeded_random, request):
        @seeded
        def body(random: SeededRandom):
            return random

        assert body(request=request) is seeded_random

    def test_generator_fixture(self, request, flipped):
        assert isinstance(flipped, CoinRandom)
        assert flipped.initial_seed == compute_seed(0, request.node.nodeid)


@pytest.mark.parametrize("case", ["a", "b", "c"])
def test_parametrized_cases_get_distinct_seeds(case, seeded_random):
    seen = _seeds_by_case.setdefault("seeds", set())
    assert seeded_random.initial_seed not in seen
    seen.add(seeded_random.initial_seed)


_seeds_by_case: dict[str, set[int]] = {}


# ---------------------------------------------------------------------------
# Inner pytest runs
# ---------------------------------------------------------------------------


FAILING_TEST = """
    from seededrandom import SeededRandom, seeded

    @seeded
    def test_fails(random: SeededRandom, other: SeededRandom):
        random.next_int()
        assert False
"""


@pytest.fixture
def inner(pytester):
    pytester.makeconftest('pytest_plugins = ["seededrandom.plugin"]')
    return pytester


class TestFailureReport:
    def test_lists_seeds(self, inner):
        inner.makepyfile(FAILING_TEST)
        result = inner.runpytest()
        result.assert_outcomes(failed=1)
        result.stdout.fnmatch_lines(
            [
                "*seeded random*",
                "p1: SeededRandom(*)",
                "p2: SeededRandom(*)",
            ]
        )

    def test_seed_matches_node(self, inner):
        inner.makepyfile(FAILING_TEST)
        result = inner.runpytest()
        seed = compute_seed(0, "test_seed_matches_node.py::test_fails")
        result.stdout.fnmatch_lines([f"p1: SeededRandom({seed})"])

    def test_passing_test_has_no_section(self, inner):
        inner.makepyfile(
            """
            def test_passes(seeded_random):
                assert seeded_random.next_int(10) < 10
            """
        )
        result = inner.runpytest("-rA")
        result.assert_outcomes(passed=1)
        result.stdout.no_fnmatch_line("*seeded random*")

    def test_disabled_on_command_line(self, inner):
        inner.makepyfile(FAILING_TEST)
        result = inner.runpytest("--no-seed-report")
        result.assert_outcomes(failed=1)
        result.stdout.no_fnmatch_line("*seeded random*")

    def test_disabled_in_pyproject(self, inner):
        inner.makepyprojecttoml(
            """
            [tool.seededrandom]
            report_seeds = false
            """
        )
        inner.makepyfile(FAILING_TEST)
        result = inner.runpytest()
        result.assert_outcomes(failed=1)
        result.stdout.no_fnmatch_line("*seeded random*")

    def test_invalid_config_is_an_error(self, inner):
        inner.makepyprojecttoml(
            """
            [tool.seededrandom]
            report_seed = false
            """
        )
        inner.makepyfile(FAILING_TEST)
        result = inner.runpytest()
        assert result.ret != 0
        output = pytest.LineMatcher(result.outlines + result.errlines)
        output.fnmatch_lines(["*Unknown [[]tool.seededrandom[]] keys: report_seed*"])


class TestConstructionFailureReported:
    def test_broken_subclass_fails_test(self, inner):
        inner.makepyfile(
            """
            from seededrandom import SeededRandom, seeded

            class Broken(SeededRandom):
                def __init__(self, seed, extra):
                    super().__init__(seed)

            @seeded
            def test_broken(random: Broken):
                pass
            """
        )
        result = inner.runpytest()
        result.assert_outcomes(failed=1)
        result.stdout.fnmatch_lines(["*ConstructionFailure: Could not construct Broken with seed *"])


class TestTypeCheckingOnlyAnnotations:
    def test_generator_still_injected(self, inner):
        inner.makepyfile(
            """
            from __future__ import annotations

            from typing import TYPE_CHECKING

            from seededrandom import SeededRandom, seeded

            if TYPE_CHECKING:
                from decimal import Decimal

            @seeded
            def test_uses_random(random: SeededRandom, amount: Decimal = None):
                assert isinstance(random, SeededRandom)
                assert amount is None
            """
        )
        result = inner.runpytest()
        result.assert_outcomes(passed=1)
