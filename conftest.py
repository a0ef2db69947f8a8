"""Root conftest: enables the seededrandom plugin and pytester for the test suite."""

pytest_plugins = ["pytester", "seededrandom.plugin"]
