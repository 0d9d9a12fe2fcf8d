"""
Pytest configuration for Django app tests.
"""

from typing import Any

import pytest

from apps.web.onboarding.tests.factories import OnboardingValuesFactory

ONBOARD_URL = "https://onboard.test/api/onboard"


@pytest.fixture(autouse=True)
def onboarding_settings(settings: Any) -> Any:
    """Point submissions at a test URL and drop the mock endpoint delay."""
    settings.ONBOARD_URL = ONBOARD_URL
    settings.ONBOARD_MOCK_DELAY_MS = 0
    return settings


@pytest.fixture
def onboard_url() -> str:
    return ONBOARD_URL


@pytest.fixture
def valid_values() -> dict[str, Any]:
    """Field values that pass every onboarding rule."""
    return OnboardingValuesFactory()
