"""Pluggable tax calculation strategies.

The engine computes taxes in-process by default. ``PolicyEngineTaxStrategy``
delegates the 1040 computation to the PolicyEngine US household API and maps
its variables onto a TaxResult, so that results from the two sources can be
compared or swapped without touching callers.
"""

from decimal import Decimal
from typing import Any, Optional, Protocol, runtime_checkable

import httpx
import structlog

from .exceptions import ExternalServiceError
from .models.household import FilingStatus, HouseholdInput
from .models.results import (
    CalculationStep,
    DeductionBreakdown,
    EducationCredits,
    TaxResult,
)
from .money import apply_rate, cents_to_dollars, dollars_to_cents
from .parameters.federal import FederalTaxTables
from .tax.calculator import TaxCalculator, self_employment_tax
from .tax.credits import credit_caps

logger = structlog.get_logger()

POLICYENGINE_API_URL = "https://api.policyengine.org/us/calculate"


@runtime_checkable
class TaxStrategy(Protocol):
    """Anything that can turn a household and a year's tables into a TaxResult."""

    name: str

    def calculate(self, household: HouseholdInput, tables: FederalTaxTables) -> TaxResult:
        ...


class InProcessTaxStrategy:
    """Deterministic local calculation (the default)."""

    name = "in_process"

    def calculate(self, household: HouseholdInput, tables: FederalTaxTables) -> TaxResult:
        return TaxCalculator(tables).calculate(household)


_PE_FILING_STATUS = {
    FilingStatus.SINGLE: "SINGLE",
    FilingStatus.MARRIED_FILING_JOINTLY: "JOINT",
    FilingStatus.MARRIED_FILING_SEPARATELY: "SEPARATE",
    FilingStatus.HEAD_OF_HOUSEHOLD: "HEAD_OF_HOUSEHOLD",
    FilingStatus.QUALIFYING_SURVIVING_SPOUSE: "SURVIVING_SPOUSE",
}

_ADULT_AGE = 35
_CHILD_AGE = 8
_STUDENT_AGE = 19

# Output variables requested from the API, by (entity group, entity name).
# The API only computes variables that the situation names with a null value.
_TAX_UNIT = ("tax_units", "tax_unit")
_TAXPAYER = ("people", "taxpayer")
_REQUESTED_VARIABLES: dict[tuple[str, str], tuple[str, ...]] = {
    _TAX_UNIT: (
        "adjusted_gross_income",
        "standard_deduction",
        "itemized_deductions",
        "income_tax_before_credits",
        "eitc",
        "ctc",
        "additional_ctc",
        "cdcc",
        "american_opportunity_credit",
    ),
    _TAXPAYER: ("marginal_tax_rate",),
}


class PolicyEngineTaxStrategy:
    """Federal tax via the PolicyEngine household calculation API.

    Args:
        base_url: Full URL of the ``/us/calculate`` endpoint.
        timeout: Request timeout in seconds.
        client: Optional pre-built ``httpx.Client`` (e.g. one using a
            ``MockTransport`` in tests). The strategy does not close a
            client it did not create.
    """

    name = "policyengine"

    def __init__(
        self,
        base_url: str = POLICYENGINE_API_URL,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    # -------------------------------------------------------------------------
    # Request
    # -------------------------------------------------------------------------

    def build_payload(self, household: HouseholdInput, year: int) -> dict[str, Any]:
        """Translate a household into a PolicyEngine situation."""
        y = str(year)

        def dollars(cents: int) -> float:
            return float(cents_to_dollars(cents))

        people: dict[str, dict[str, Any]] = {
            "taxpayer": {
                "age": {y: _ADULT_AGE},
                "employment_income": {y: dollars(household.wages)},
            },
        }
        if household.self_employment_net:
            people["taxpayer"]["self_employment_income"] = {y: dollars(household.self_employment_net)}
        if household.unearned_income:
            people["taxpayer"]["taxable_interest_income"] = {y: dollars(household.unearned_income)}

        tax_unit_members = ["taxpayer"]
        if household.filing_status == FilingStatus.MARRIED_FILING_JOINTLY and household.adults >= 2:
            people["spouse"] = {"age": {y: _ADULT_AGE}}
            tax_unit_members.append("spouse")

        for i in range(household.qualifying_children):
            person_id = f"dependent_{i}"
            people[person_id] = {"age": {y: _CHILD_AGE}}
            tax_unit_members.append(person_id)
        for i in range(household.students):
            person_id = f"student_{i}"
            people[person_id] = {"age": {y: _STUDENT_AGE}, "is_full_time_student": {y: True}}
            tax_unit_members.append(person_id)

        tax_unit: dict[str, Any] = {
            "members": tax_unit_members,
            "tax_unit_filing_status": {y: _PE_FILING_STATUS[household.filing_status]},
        }
        if household.federal_withholding:
            tax_unit["income_tax_withheld"] = {y: dollars(household.federal_withholding)}

        household_entity: dict[str, Any] = {
            "members": tax_unit_members,
            "state_code": {y: household.state_code},
        }
        if household.childcare_costs:
            household_entity["childcare_expenses"] = {y: dollars(household.childcare_costs * 12)}

        situation: dict[str, Any] = {
            "people": people,
            "tax_units": {"tax_unit": tax_unit},
            "families": {"family": {"members": tax_unit_members}},
            "households": {"household": household_entity},
        }
        for (group, entity), variables in _REQUESTED_VARIABLES.items():
            for variable in variables:
                situation[group][entity][variable] = {y: None}
        return {"household": situation}

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            if self._client is not None:
                response = self._client.post(self.base_url, json=payload, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.base_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "external_tax_request_failed",
                service=self.name,
                status_code=e.response.status_code,
            )
            raise ExternalServiceError(
                f"PolicyEngine returned HTTP {e.response.status_code}",
                service=self.name,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error("external_tax_request_failed", service=self.name, error=str(e))
            raise ExternalServiceError(
                f"PolicyEngine request failed: {e}",
                service=self.name,
            ) from e
        except ValueError as e:
            raise ExternalServiceError(
                "PolicyEngine returned a non-JSON response",
                service=self.name,
                recoverable=False,
            ) from e

        if not isinstance(body, dict):
            raise ExternalServiceError(
                "PolicyEngine response is not an object",
                service=self.name,
                recoverable=False,
            )
        # The API answers {"status", "message", "result": <computed situation>}
        result = body.get("result")
        return result if isinstance(result, dict) else body

    # -------------------------------------------------------------------------
    # Response
    # -------------------------------------------------------------------------

    @staticmethod
    def _value(
        data: dict[str, Any],
        entity: tuple[str, str],
        variable: str,
        year: int,
    ) -> Any:
        """Read ``variable`` for ``year`` from one entity of the computed situation.

        Scalar values are accepted as-is; anything missing reads as None.
        """
        group, name = entity
        members = data.get(group)
        node = members.get(name) if isinstance(members, dict) else None
        raw = node.get(variable) if isinstance(node, dict) else None
        if isinstance(raw, dict):
            return raw.get(str(year), raw.get(year))
        return raw

    def _cents(self, data: dict[str, Any], variable: str, year: int) -> int:
        value = self._value(data, _TAX_UNIT, variable, year)
        if value is None or isinstance(value, bool):
            return 0
        return max(0, dollars_to_cents(value))

    def _capped(self, data: dict[str, Any], variable: str, year: int, cap: int) -> int:
        """Credit reported by the service, limited to its statutory cap."""
        amount = self._cents(data, variable, year)
        if amount > cap:
            logger.warning(
                "external_credit_capped",
                service=self.name,
                variable=variable,
                reported=amount,
                cap=cap,
            )
            return cap
        return amount

    def calculate(self, household: HouseholdInput, tables: FederalTaxTables) -> TaxResult:
        year = tables.year
        logger.info("external_tax_request", service=self.name, tax_year=year)
        data = self._post(self.build_payload(household, year))

        agi = self._cents(data, "adjusted_gross_income", year)
        standard = self._cents(data, "standard_deduction", year)
        itemized = self._cents(data, "itemized_deductions", year)
        deduction = DeductionBreakdown(
            standard=standard,
            itemized=itemized,
            used_standard=standard >= itemized,
        )
        taxable_income = max(0, agi - deduction.amount)
        tax_before = self._cents(data, "income_tax_before_credits", year)

        caps = credit_caps(tables, household.qualifying_children, household.students)
        eitc = self._capped(data, "eitc", year, caps.eitc)
        ctc = self._capped(data, "ctc", year, caps.ctc)
        additional_ctc = self._capped(data, "additional_ctc", year, caps.additional_ctc)
        cdcc_reported = self._cents(data, "cdcc", year)
        aoc = self._capped(data, "american_opportunity_credit", year, caps.american_opportunity_credit)
        education = EducationCredits(
            american_opportunity_credit=aoc,
            aoc_refundable_portion=apply_rate(aoc, tables.education.aoc_refundable_rate),
        )

        remaining = tax_before
        cdcc = min(cdcc_reported, remaining)
        remaining -= cdcc
        education_applied = min(education.nonrefundable_portion, remaining)
        remaining -= education_applied
        ctc_nonrefundable = min(ctc, remaining)
        nonrefundable = cdcc + education_applied + ctc_nonrefundable

        marginal = self._value(data, _TAXPAYER, "marginal_tax_rate", year)
        marginal_rate = Decimal(str(marginal)) if isinstance(marginal, (int, float, str)) else Decimal("0")

        # Self-employment tax is not part of the income tax variables
        se = self_employment_tax(tables, household.self_employment_gross, household.self_employment_expenses)

        refundable = eitc + additional_ctc + education.aoc_refundable_portion
        income_tax_after = max(0, tax_before - nonrefundable)
        total_tax = income_tax_after + se.se_tax
        refund_or_owed = household.federal_withholding + refundable - total_tax

        step = CalculationStep(
            step="external_tax_calculation",
            input_value=f"filing_status={household.filing_status.value}, year={year}",
            output_value=f"agi={agi}, tax_before_credits={tax_before}, eitc={eitc}, ctc={ctc}, actc={additional_ctc}",
            source=self.base_url,
        )
        logger.info(
            "external_tax_response",
            service=self.name,
            tax_year=year,
            agi=agi,
            eitc=eitc,
            ctc=ctc,
            additional_ctc=additional_ctc,
        )

        return TaxResult(
            tax_year=year,
            filing_status=household.filing_status,
            total_income=agi,
            agi=agi,
            deduction=deduction,
            taxable_income=taxable_income,
            tax_before_credits=tax_before,
            marginal_rate=marginal_rate,
            eitc=eitc,
            ctc=ctc,
            ctc_nonrefundable=ctc_nonrefundable,
            additional_ctc=additional_ctc,
            cdcc=cdcc,
            education=education,
            self_employment=se,
            nonrefundable_credits=nonrefundable,
            refundable_credits=refundable,
            income_tax_after_credits=income_tax_after,
            total_tax=total_tax,
            federal_withholding=household.federal_withholding,
            refund_or_owed=refund_or_owed,
            steps=(step,),
            source=self.name,
        )


def default_strategy() -> TaxStrategy:
    return InProcessTaxStrategy()


__all__ = [
    "TaxStrategy",
    "InProcessTaxStrategy",
    "PolicyEngineTaxStrategy",
    "POLICYENGINE_API_URL",
    "default_strategy",
]
