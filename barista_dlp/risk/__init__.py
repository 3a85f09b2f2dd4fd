"""Risk module for the Barista DLP client.

This module provides:
- Open interest, risk ratio and margin estimates
- The deposit and withdrawal safety gate
"""

from barista_dlp.risk.metrics import (
    PositionMargin,
    RiskLevel,
    RiskMetricsResult,
    classify_risk,
    evaluate,
    free_collateral,
    margin_ratio,
    open_interest,
    position_margin,
    risk_ratio,
)
from barista_dlp.risk.safety import (
    SafetyCheckResult,
    SafetyErrorCode,
    SafetyGate,
    SafetyRule,
    check_deposit_amount,
    check_withdrawal_safety,
)

__all__ = [
    'PositionMargin',
    'RiskLevel',
    'RiskMetricsResult',
    'classify_risk',
    'evaluate',
    'free_collateral',
    'margin_ratio',
    'open_interest',
    'position_margin',
    'risk_ratio',
    'SafetyCheckResult',
    'SafetyErrorCode',
    'SafetyGate',
    'SafetyRule',
    'check_deposit_amount',
    'check_withdrawal_safety',
]
