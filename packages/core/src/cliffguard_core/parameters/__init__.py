"""Versioned parameter tables for tax and benefit calculations."""

from .federal import (
    FEDERAL_TAX_TABLES,
    ChildTaxCreditParams,
    DependentCareParams,
    EducationCreditParams,
    EitcRow,
    FederalTaxTables,
    SelfEmploymentRates,
    TaxBracket,
)
from .programs import BENEFIT_TABLES, BenefitTables, PovertyGuidelines, SnapTables, SsiTables
from .registry import DEFAULT_REGISTRY, ParameterRegistry, ProgramTables, get_registry
from .states import STATE_TABLES, MedicaidTable, StateTables, TanfTable

__all__ = [
    "FEDERAL_TAX_TABLES",
    "BENEFIT_TABLES",
    "STATE_TABLES",
    "DEFAULT_REGISTRY",
    "ChildTaxCreditParams",
    "DependentCareParams",
    "EducationCreditParams",
    "EitcRow",
    "FederalTaxTables",
    "SelfEmploymentRates",
    "TaxBracket",
    "BenefitTables",
    "PovertyGuidelines",
    "SnapTables",
    "SsiTables",
    "MedicaidTable",
    "StateTables",
    "TanfTable",
    "ParameterRegistry",
    "ProgramTables",
    "get_registry",
]
