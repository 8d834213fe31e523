"""Shared fixtures for cliffguard-core tests."""

import pytest

from cliffguard_core.cliff import CliffEngine
from cliffguard_core.models import FilingStatus, HouseholdInput
from cliffguard_core.parameters import ParameterRegistry, get_registry


@pytest.fixture
def registry() -> ParameterRegistry:
    return get_registry()


@pytest.fixture
def tax_2024(registry):
    return registry.tax(2024)


@pytest.fixture
def md_2024(registry):
    return registry.programs("MD", 2024)


@pytest.fixture
def engine() -> CliffEngine:
    return CliffEngine()


@pytest.fixture
def single_parent() -> HouseholdInput:
    """One adult, one child in Maryland earning $24,000 with rent and childcare."""
    return HouseholdInput(
        wages=2400000,
        adults=1,
        children=1,
        filing_status=FilingStatus.HEAD_OF_HOUSEHOLD,
        qualifying_children=1,
        dependents=1,
        shelter_costs=120000,
        utility_costs=30000,
        childcare_costs=60000,
        tax_year=2024,
        state_code="MD",
    )


@pytest.fixture
def single_parent_raise(single_parent) -> HouseholdInput:
    """The same household after a raise to $30,000."""
    return single_parent.with_changes(wages=3000000)
