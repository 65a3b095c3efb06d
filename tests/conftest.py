from datetime import date

import pytest

from dayspark.models import FeatureFlags, Observer

NYC = Observer(latitude=40.7128, longitude=-74.0060)
TROMSO = Observer(latitude=69.65, longitude=18.96)


@pytest.fixture
def nyc() -> Observer:
    return NYC


@pytest.fixture
def tromso() -> Observer:
    return TROMSO


@pytest.fixture
def all_flags() -> FeatureFlags:
    return FeatureFlags(
        advanced_astronomy=True,
        astrology_aspects=True,
        deep_astrology=True,
        cross_quarter_days=True,
        meteorological_seasons=True,
    )


@pytest.fixture
def summer_day() -> date:
    return date(2024, 6, 20)
