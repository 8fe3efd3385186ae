"""
Hypothesis profiles for the property tests.

Recursive type-tag strategies grow quickly, so example counts stay modest.
The profile comes from HYPOTHESIS_PROFILE (dev | ci | fast); without it,
runs under CI use "ci" and everything else uses "dev".
"""

from __future__ import annotations

import os

import pytest
from hypothesis import HealthCheck, settings

from idl_layout.config import get_settings

_SLOW = (HealthCheck.too_slow, HealthCheck.filter_too_much)

settings.register_profile("dev", max_examples=75, deadline=None, suppress_health_check=_SLOW)
settings.register_profile(
    "ci", max_examples=150, deadline=None, suppress_health_check=_SLOW, derandomize=True
)
settings.register_profile("fast", max_examples=20, deadline=None, suppress_health_check=_SLOW)

_ci = os.getenv("CI", "").lower() not in ("", "0", "false", "no")
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _ci else "dev"))


@pytest.fixture(autouse=True, scope="module")
def _fresh_settings():
    # Module scoped: Hypothesis rejects function-scoped fixtures on @given tests.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
