"""
Financial Insights Agent

Client for the external text-generation collaborator that writes a short
natural-language summary of the farm's finances.

CRITICAL BOUNDARIES:
- CAN: Summarize the transactions it is given
- CANNOT: Read or mutate the store; it only sees the request
- MUST: Return the no-data message on empty input or on any failure

The LLM is a WRITER, not a CALCULATOR of record. The numbers it sees
come straight from the store's query layer.
"""

import json
from typing import Any, Optional

import google.generativeai as genai
from pydantic import BaseModel, Field
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from farmledger.audit import AuditLogger
from farmledger.config import GeminiSettings, get_settings
from farmledger.models.audit import AuditEventBuilder
from farmledger.models.records import Transaction


NO_DATA_MESSAGE = "There is no transaction data to analyze."


class FinancialInsightsInput(BaseModel):
    """The request contract of the insights collaborator."""

    currency: str = Field(
        ...,
        description="The currency symbol (e.g., USD, EUR)"
    )
    transactions: list[Transaction] = Field(
        default_factory=list,
        description="A list of recent financial transactions"
    )


class InsightsAgent:
    """
    AI agent for the dashboard summary.

    RESPONSIBILITIES:
    - Build the analyst prompt from the request
    - Call the model, retrying transient failures
    - Degrade to NO_DATA_MESSAGE instead of raising
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model: Optional[Any] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Args:
            settings: Gemini settings. Loaded from the environment if None.
            model: Anything with an async `generate_content_async(prompt)`.
                A Gemini model is configured if None.
            audit_logger: Audit logger for success/failure events
        """
        self._settings = settings or get_settings().gemini
        self._audit = audit_logger or AuditLogger()
        if model is None:
            self._configure_genai()
        else:
            self._model = model

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
            }
        )

    def build_prompt(self, request: FinancialInsightsInput) -> str:
        transactions_json = json.dumps(
            [t.model_dump(mode="json") for t in request.transactions],
            indent=2,
        )
        return f"""You are a financial analyst for a farming business. Analyze the following list of recent transactions and provide a short, insightful summary (2-3 sentences) of the farm's financial health.

Your analysis should be concise and easy to understand for a busy farmer.

- Identify the total income, total expenses, and net profit.
- Mention the category with the highest expense.
- Conclude with a brief, encouraging, and forward-looking statement.
- All monetary values should be prefixed with the currency symbol: {request.currency}

Here are the transactions:
{transactions_json}
"""

    async def get_financial_insights(self, request: FinancialInsightsInput) -> str:
        """
        Generate a short summary of the given transactions.

        Never raises. Returns NO_DATA_MESSAGE if there are no
        transactions, if the model keeps failing, or if it returns
        nothing.
        """
        if not request.transactions:
            return NO_DATA_MESSAGE

        prompt = self.build_prompt(request)
        count = len(request.transactions)

        try:
            text = await self._generate(prompt)
        except Exception as e:
            self._audit.log(AuditEventBuilder.insights_failed(count, str(e)))
            return NO_DATA_MESSAGE

        if not text:
            self._audit.log(AuditEventBuilder.insights_failed(count, "empty response"))
            return NO_DATA_MESSAGE

        self._audit.log(
            AuditEventBuilder.insights_generated(count, self._settings.model_name)
        )
        return text

    async def _generate(self, prompt: str) -> str:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._settings.retry_attempts),
            wait=wait_exponential(
                multiplier=1,
                min=self._settings.retry_wait_min,
                max=self._settings.retry_wait_max,
            ),
            reraise=True,
        ):
            with attempt:
                response = await self._model.generate_content_async(prompt)
                text = (response.text or "").strip()
        return text
