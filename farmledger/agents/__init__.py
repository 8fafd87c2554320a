"""AI Agents package."""

from farmledger.agents.insights import (
    NO_DATA_MESSAGE,
    FinancialInsightsInput,
    InsightsAgent,
)

__all__ = [
    "NO_DATA_MESSAGE",
    "FinancialInsightsInput",
    "InsightsAgent",
]
