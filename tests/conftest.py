"""
Shared test setup: headless matplotlib and a profiler left off between tests.
"""

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from plants.profiling import profiler  # noqa: E402


@pytest.fixture(autouse=True)
def _profiler_disabled():
    profiler.enabled = False
    profiler.reset()
    yield
    profiler.enabled = False
    profiler.reset()
