"""Means-tested benefit program eligibility."""

from .evaluator import PROGRAM_EVALUATORS, evaluate_benefits, evaluate_programs
from .medicaid import evaluate_medicaid, medicaid_income_limit
from .snap import evaluate_snap, snap_net_income
from .ssi import evaluate_ssi, ssi_countable_income
from .tanf import evaluate_tanf, tanf_countable_income

__all__ = [
    "PROGRAM_EVALUATORS",
    "evaluate_benefits",
    "evaluate_programs",
    "evaluate_medicaid",
    "medicaid_income_limit",
    "evaluate_snap",
    "snap_net_income",
    "evaluate_ssi",
    "ssi_countable_income",
    "evaluate_tanf",
    "tanf_countable_income",
]
