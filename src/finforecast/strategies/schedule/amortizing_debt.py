"""
Amortizing debt schedule (mortgages and installment loans).
"""

from __future__ import annotations

from datetime import date

from finforecast.core.accounts import DebtTerms
from finforecast.core.errors import DebtScheduleError, SoftError, UnsupportedFrequencyError
from finforecast.core.frequency import MONTHLY_MULTIPLIERS, normalize_frequency
from finforecast.core.interfaces import IScheduleStrategy
from finforecast.core.state import AmortizationStep, DebtSchedule
from finforecast.core.utils import months_between


def annuity_payment(principal: float, annual_rate: float, months: int) -> float:
    """
    Level monthly payment that repays ``principal`` over ``months``.

    Uses the standard annuity formula ``A = P * r * (1+r)^n / ((1+r)^n - 1)``
    with ``r = annual_rate / 12``; a zero rate falls back to ``P / n``.

    Args:
        principal: Amount to amortize
        annual_rate: Annual interest rate as a fraction
        months: Number of monthly payments (>= 1)
    """
    if principal <= 0:
        return 0.0
    if months <= 0:
        raise ValueError("months must be > 0")
    r = annual_rate / 12.0
    if r == 0:
        return principal / months
    factor = (1.0 + r) ** months
    return principal * r * factor / (factor - 1.0)


class ScheduleAmortizingDebt(IScheduleStrategy):
    """
    Fixed-rate amortizing debt (kinds: 'mortgage', 'loan').

    Each month interest is ``balance * annual_rate / 12``; the scheduled payment
    (normalised to monthly) pays that interest first and the rest reduces the
    principal. Configured extra payments then reduce principal further. The
    balance is capped at zero and never increases.

    **Rate Convention:**
        Rates are fractions (0.03 for 3%). A rate above 1 is read as a
        percentage and divided by 100. A negative rate is serviced at 0%.

    **Payment Fallback:**
        When ``payment_amount`` is 0 the payment is derived with the annuity
        formula over the months remaining on the amortization (or term)
        schedule. Without any schedule the debt is serviced interest-only.

    **Example:**
        ```python
        terms = DebtTerms(account_id="mortgage", kind=DebtKind.MORTGAGE,
                          annual_rate=0.03, payment_amount=1896.0)
        schedule, _ = ScheduleAmortizingDebt().prepare(terms, 400_000, date(2026, 1, 1))
        step = ScheduleAmortizingDebt().step(schedule, 400_000)
        # step.interest == 1000.0, step.principal == 896.0
        ```
    """

    def prepare(
        self, terms: DebtTerms, balance: float, start: date
    ) -> tuple[DebtSchedule, list[SoftError]]:
        """
        Resolve the monthly rate and payment for ``terms`` at ``start``.

        Args:
            terms: Debt terms from the account provider
            balance: Outstanding balance at ``start`` (>= 0)
            start: Month 0 of the projection

        Returns:
            ``(schedule, soft_errors)``
        """
        errors: list[SoftError] = []
        account_id = terms.account_id

        rate = terms.annual_rate
        if rate > 1.0:
            errors.append(
                DebtScheduleError(
                    f"Debt '{account_id}': annual_rate {rate} read as a percentage "
                    f"({rate / 100.0:.4f})",
                    subject=account_id,
                    code="rate_as_percent",
                )
            )
            rate = rate / 100.0
        if rate < 0:
            errors.append(
                DebtScheduleError(
                    f"Debt '{account_id}': negative annual_rate {rate}; serviced at 0%",
                    subject=account_id,
                    code="negative_rate",
                )
            )
            rate = 0.0

        remaining = terms.schedule_months
        if remaining and terms.start_date is not None:
            remaining -= max(months_between(terms.start_date, start), 0)

        try:
            frequency = normalize_frequency(terms.payment_frequency)
        except UnsupportedFrequencyError:
            errors.append(
                UnsupportedFrequencyError(
                    f"Debt '{account_id}': unsupported payment frequency "
                    f"{terms.payment_frequency!r}; payment treated as monthly",
                    subject=account_id,
                )
            )
            frequency = None
        multiplier = MONTHLY_MULTIPLIERS[frequency] if frequency else 1.0
        payment = terms.payment_amount * multiplier

        if payment <= 0 and balance > 0:
            if terms.schedule_months:
                months = max(remaining, 1)
                payment = annuity_payment(balance, rate, months)
                errors.append(
                    DebtScheduleError(
                        f"Debt '{account_id}': no payment amount, derived "
                        f"{payment:.2f}/month over {months} months",
                        subject=account_id,
                        code="payment_derived",
                    )
                )
            else:
                payment = balance * rate / 12.0
                errors.append(
                    DebtScheduleError(
                        f"Debt '{account_id}': no payment amount or schedule; "
                        f"serviced interest-only",
                        subject=account_id,
                        code="payment_missing",
                    )
                )

        return (
            DebtSchedule(
                account_id=account_id,
                annual_rate=rate,
                monthly_payment=payment,
                remaining_months=max(remaining, 0),
            ),
            errors,
        )

    def step(
        self, schedule: DebtSchedule, balance: float, extra: float = 0.0
    ) -> AmortizationStep:
        """
        Advance ``balance`` by one month.

        Args:
            schedule: Prepared servicing parameters
            balance: Balance before this month's payment
            extra: Extra principal on top of the scheduled payment

        Returns:
            AmortizationStep with the new balance and the payment split
        """
        if balance <= 0:
            return AmortizationStep(balance=0.0)

        interest = balance * schedule.monthly_rate
        principal = schedule.monthly_payment - interest
        errors: tuple[SoftError, ...] = ()
        if principal < 0:
            errors = (
                DebtScheduleError(
                    f"Debt '{schedule.account_id}': payment "
                    f"{schedule.monthly_payment:.2f} does not cover interest "
                    f"{interest:.2f}; principal held constant",
                    subject=schedule.account_id,
                    code="negative_amortization",
                ),
            )
            principal = 0.0
        principal = min(principal, balance)
        extra = min(max(extra, 0.0), balance - principal)

        return AmortizationStep(
            balance=max(balance - principal - extra, 0.0),
            interest=interest,
            principal=principal,
            extra=extra,
            errors=errors,
        )
