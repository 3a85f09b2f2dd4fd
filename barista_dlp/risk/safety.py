"""Pre-submission safety gate for capital-moving operations.

Deposits and withdrawals are evaluated against a fixed, ordered list of
rules. A failing blocking rule records an error and stops evaluation, so
later rules (and their warnings) are never computed. Non-blocking rules only
append warnings.

The gate never raises for policy outcomes and performs no I/O apart from
logging; callers inspect errors and warnings together and decide whether
to prompt, abort, or submit.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

import structlog

from barista_dlp.core.codec import format_token_amount
from barista_dlp.core.config import SafetyConfig, safety_config
from barista_dlp.core.fixed_point import FixedPointDecimal
from barista_dlp.core.models import Portfolio
from barista_dlp.risk.metrics import open_interest

logger = structlog.get_logger(__name__)


class SafetyErrorCode(str, Enum):
    """Blocking outcomes of the safety gate."""
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    OPEN_POSITIONS_PRESENT = "open_positions_present"


@dataclass
class SafetyCheckResult:
    """Outcome of a safety evaluation.

    Attributes:
        errors: Blocking messages, in evaluation order
        warnings: Advisory messages, in evaluation order
        error_codes: One code per entry in ``errors``
        rules_evaluated: Names of the rules that actually ran
    """
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    error_codes: List[SafetyErrorCode] = field(default_factory=list)
    rules_evaluated: List[str] = field(default_factory=list)

    @property
    def safe(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


@dataclass
class SafetyRule:
    """One step of a safety policy.

    Attributes:
        name: Unique identifier for the rule
        check_fn: Returns a message when the rule triggers, else None
        is_blocking: If True, a triggered rule is an error and stops evaluation
        code: Error code recorded for a blocking rule
    """
    name: str
    check_fn: Callable[..., Optional[str]]
    is_blocking: bool = False
    code: Optional[SafetyErrorCode] = None


class SafetyGate:
    """
    Evaluates deposits and withdrawals against the configured thresholds.

    Withdrawal policy, in order:
    1. Non-positive amount (blocking)
    2. Insufficient balance (blocking)
    3. Open positions present (blocking)
    4. Unrealized PnL present (warning)
    5. Large share of equity (warning)
    6. Low remaining balance vs. safety buffer (warning)
    7. Remaining capital below minimum (warning)

    Deposit policy, in order:
    1. Non-positive amount (blocking)
    2. Below minimum deposit (warning)
    3. Below recommended minimum (warning)
    4. Unusually large (warning)
    """

    def __init__(self, config: Optional[SafetyConfig] = None):
        self.config = config or safety_config
        self._withdrawal_rules = [
            SafetyRule(
                name="positive_amount",
                check_fn=self._check_withdrawal_positive,
                is_blocking=True,
                code=SafetyErrorCode.NON_POSITIVE_AMOUNT,
            ),
            SafetyRule(
                name="sufficient_balance",
                check_fn=self._check_sufficient_balance,
                is_blocking=True,
                code=SafetyErrorCode.INSUFFICIENT_BALANCE,
            ),
            SafetyRule(
                name="open_positions",
                check_fn=self._check_open_positions,
                is_blocking=True,
                code=SafetyErrorCode.OPEN_POSITIONS_PRESENT,
            ),
            SafetyRule(name="unrealized_pnl", check_fn=self._check_unrealized_pnl),
            SafetyRule(name="large_withdrawal", check_fn=self._check_large_withdrawal),
            SafetyRule(name="withdrawal_buffer", check_fn=self._check_withdrawal_buffer),
            SafetyRule(name="minimum_capital", check_fn=self._check_minimum_capital),
        ]
        self._deposit_rules = [
            SafetyRule(
                name="positive_amount",
                check_fn=self._check_deposit_positive,
                is_blocking=True,
                code=SafetyErrorCode.NON_POSITIVE_AMOUNT,
            ),
            SafetyRule(name="minimum_deposit", check_fn=self._check_minimum_deposit),
            SafetyRule(
                name="recommended_minimum", check_fn=self._check_recommended_minimum
            ),
            SafetyRule(name="unusually_large", check_fn=self._check_unusually_large),
        ]

    def check_withdrawal(
        self, portfolio: Portfolio, amount: FixedPointDecimal
    ) -> SafetyCheckResult:
        """
        Evaluate a withdrawal of ``amount`` from ``portfolio``.

        Args:
            portfolio: Current ledger state
            amount: Withdrawal amount at the equity scale

        Returns:
            SafetyCheckResult; ``safe`` is False if any blocking rule triggered
        """
        result = self._run(self._withdrawal_rules, portfolio, amount)
        logger.info(
            "safety.withdrawal_checked",
            amount=str(amount),
            equity=str(portfolio.equity),
            safe=result.safe,
            errors=result.error_codes or None,
            warnings=len(result.warnings),
        )
        return result

    def check_deposit(self, amount: FixedPointDecimal) -> SafetyCheckResult:
        """Evaluate a deposit of ``amount`` (equity scale)."""
        result = self._run(self._deposit_rules, amount)
        logger.info(
            "safety.deposit_checked",
            amount=str(amount),
            safe=result.safe,
            errors=result.error_codes or None,
            warnings=len(result.warnings),
        )
        return result

    def _run(self, rules: List[SafetyRule], *args) -> SafetyCheckResult:
        result = SafetyCheckResult()
        for rule in rules:
            result.rules_evaluated.append(rule.name)
            message = rule.check_fn(*args)
            if message is None:
                continue
            if rule.is_blocking:
                result.errors.append(message)
                result.error_codes.append(rule.code)
                return result
            result.warnings.append(message)
        return result

    # === Withdrawal Rules ===

    def _check_withdrawal_positive(
        self, portfolio: Portfolio, amount: FixedPointDecimal
    ) -> Optional[str]:
        if not amount.is_positive():
            return "Withdrawal amount must be greater than zero"
        return None

    def _check_sufficient_balance(
        self, portfolio: Portfolio, amount: FixedPointDecimal
    ) -> Optional[str]:
        if portfolio.equity < amount:
            return (
                f"Insufficient balance: portfolio equity is "
                f"{format_token_amount(portfolio.equity)}, but withdrawal is "
                f"{format_token_amount(amount)}"
            )
        return None

    def _check_open_positions(
        self, portfolio: Portfolio, amount: FixedPointDecimal
    ) -> Optional[str]:
        interest = open_interest(portfolio)
        if interest.is_positive():
            return (
                f"Cannot withdraw with open positions. Open interest: "
                f"{format_token_amount(interest)} ({portfolio.exposure_count} exposures)"
            )
        return None

    def _check_unrealized_pnl(
        self, portfolio: Portfolio, amount: FixedPointDecimal
    ) -> Optional[str]:
        if not portfolio.pnl.is_zero():
            return f"Portfolio has unrealized PnL: {format_token_amount(portfolio.pnl)}"
        return None

    def _check_large_withdrawal(
        self, portfolio: Portfolio, amount: FixedPointDecimal
    ) -> Optional[str]:
        if portfolio.equity.is_zero():
            return None
        pct = (amount.value * 100) // portfolio.equity.value
        if pct > self.config.large_withdrawal_pct:
            return (
                f"Large withdrawal: {pct}% of portfolio equity "
                f"(more than {self.config.large_withdrawal_pct}%)"
            )
        return None

    def _check_withdrawal_buffer(
        self, portfolio: Portfolio, amount: FixedPointDecimal
    ) -> Optional[str]:
        equity_after = portfolio.equity - amount
        buffer = amount.percent(self.config.withdrawal_buffer_pct)
        if equity_after < buffer:
            return (
                f"Low remaining balance after withdrawal: "
                f"{format_token_amount(equity_after)}"
            )
        return None

    def _check_minimum_capital(
        self, portfolio: Portfolio, amount: FixedPointDecimal
    ) -> Optional[str]:
        equity_after = portfolio.equity - amount
        minimum = self.config.min_remaining_capital_amount
        if equity_after < minimum:
            return (
                f"Remaining capital below recommended minimum "
                f"({self.config.min_remaining_capital}): "
                f"{format_token_amount(equity_after)}"
            )
        return None

    # === Deposit Rules ===

    def _check_deposit_positive(self, amount: FixedPointDecimal) -> Optional[str]:
        if not amount.is_positive():
            return "Deposit amount must be greater than zero"
        return None

    def _check_minimum_deposit(self, amount: FixedPointDecimal) -> Optional[str]:
        if amount < self.config.min_deposit_amount:
            return (
                f"Deposit amount is less than {self.config.min_deposit}. "
                f"Consider depositing more for meaningful liquidity."
            )
        return None

    def _check_recommended_minimum(self, amount: FixedPointDecimal) -> Optional[str]:
        if amount < self.config.recommended_min_deposit_amount:
            return (
                f"Deposit amount is below recommended minimum "
                f"({self.config.recommended_min_deposit})"
            )
        return None

    def _check_unusually_large(self, amount: FixedPointDecimal) -> Optional[str]:
        if amount > self.config.max_sane_deposit_amount:
            return (
                f"Deposit amount is unusually large "
                f"(over {self.config.max_sane_deposit}). Double-check the amount."
            )
        return None


# =============================================================================
# Module-level API
# =============================================================================

def check_withdrawal_safety(
    portfolio: Portfolio,
    amount: FixedPointDecimal,
    config: Optional[SafetyConfig] = None,
) -> SafetyCheckResult:
    """Run the withdrawal policy with ``config`` (default: global safety config)."""
    return SafetyGate(config).check_withdrawal(portfolio, amount)


def check_deposit_amount(
    amount: FixedPointDecimal, config: Optional[SafetyConfig] = None
) -> SafetyCheckResult:
    """Run the deposit policy with ``config`` (default: global safety config)."""
    return SafetyGate(config).check_deposit(amount)
