"""
seededrandom: Reproducible randomness for tests.

Each test invocation receives generators whose seeds are derived from the
invocation's name and the parameter slot, so a failure can always be
replayed while repetitions still see varied inputs.

Example:
    # conftest.py
    pytest_plugins = ["seededrandom.plugin"]

    # test_orders.py
    from seededrandom import SeededRandom, seeded

    @pytest.mark.parametrize("attempt", range(5))
    @seeded
    def test_orders(attempt, random: SeededRandom):
        order_id = random.next_uuid()
        status = random.pick(Status)
        ...
"""

__version__ = "0.1.0"

# Config
from seededrandom.config import SeededRandomConfig

# Errors
from seededrandom.errors import ConstructionFailure, InvalidArgument, SeededRandomError

# Generator
from seededrandom.generator import SeededRandom

# Injection
from seededrandom.inject import generator_parameters, resolve_parameters, seeded

# Factory registry
from seededrandom.registry import register_factory, unregister_factory

# Resolver
from seededrandom.resolver import SeedResolver, compute_seed, string_hash

__all__ = [
    # Version
    "__version__",
    # Generator
    "SeededRandom",
    # Resolver
    "SeedResolver",
    "compute_seed",
    "string_hash",
    # Factory registry
    "register_factory",
    "unregister_factory",
    # Injection
    "seeded",
    "generator_parameters",
    "resolve_parameters",
    # Errors
    "SeededRandomError",
    "InvalidArgument",
    "ConstructionFailure",
    # Config
    "SeededRandomConfig",
]
