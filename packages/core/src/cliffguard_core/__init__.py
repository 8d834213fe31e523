"""CliffGuard core: tax, benefit and benefit-cliff calculation engine."""

__version__ = "0.1.0"

from .engine import (
    compare_cliff,
    evaluate_benefits,
    evaluate_tax,
    find_optimal_wage,
    radar_update,
)
from .exceptions import (
    CliffGuardError,
    ComputationTimeoutError,
    ConfigurationError,
    ExternalServiceError,
    InvalidInputError,
    StaleRequestError,
    UnsupportedStateError,
    UnsupportedYearError,
)
from .models import HouseholdInput

__all__ = [
    "__version__",
    "HouseholdInput",
    "compare_cliff",
    "evaluate_benefits",
    "evaluate_tax",
    "find_optimal_wage",
    "radar_update",
    "CliffGuardError",
    "ComputationTimeoutError",
    "ConfigurationError",
    "ExternalServiceError",
    "InvalidInputError",
    "StaleRequestError",
    "UnsupportedStateError",
    "UnsupportedYearError",
]
