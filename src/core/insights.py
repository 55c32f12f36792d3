"""
AI-assisted discrepancy brief using structured outputs.

Uses Pydantic models to ensure LLM outputs are well-structured
and can be programmatically processed.
"""

import json
import logging
from typing import Literal

from openai import OpenAI, OpenAIError
from pydantic import BaseModel, Field

from core.analysis import top_discrepancies
from core.columns import COL_CENTRO, COL_DIFFERENCE, COL_NAME, COL_SAP, COL_SKU, COL_WMS
from core.errors import BriefUnavailableError
from core.reconciliation import ReconciliationResult

logger = logging.getLogger(__name__)


class DiscrepancyFinding(BaseModel):
    """A SKU whose SAP and WMS stock disagree and needs investigation."""

    sku: str = Field(description="The material code")
    product_name: str = Field(description="The product name, empty if unknown")
    centro: str = Field(description="Plant the material belongs to")
    sap_quantity: float = Field(description="Stock per SAP on the storage location")
    wms_quantity: float = Field(description="Stock per WMS on the storage location")
    difference: float = Field(description="WMS minus SAP")
    likely_cause: str = Field(description="Most probable reason for the discrepancy")
    priority: Literal["high", "medium", "low"]


class CentroObservation(BaseModel):
    """What the adjustment, shrinkage and expiry totals say about one centro."""

    centro: str
    observation: str
    recommendation: str | None = None


class DiscrepancyBrief(BaseModel):
    """Complete AI-generated reconciliation brief."""

    executive_summary: str = Field(
        description="2-3 sentence summary for an inventory manager"
    )
    findings: list[DiscrepancyFinding] = Field(
        description="The discrepancies worth investigating first"
    )
    centro_observations: list[CentroObservation] = Field(
        description="Patterns in adjustments, shrinkage and expiry per centro"
    )
    recommended_actions: list[str] = Field(
        description="Concrete next steps for the warehouse and SAP teams"
    )


def _records(df, columns: list[str] | None = None, limit: int = 20) -> list[dict]:
    if columns:
        df = df[columns]
    return json.loads(df.head(limit).to_json(orient="records", force_ascii=False))


class InsightGenerator:
    """
    Generates a discrepancy brief using an LLM with structured output.

    What to trust vs verify:
    - TRUST: Pattern synthesis, natural language generation
    - VERIFY: Specific numbers (always computed by the reconciler)
    """

    def __init__(self, model: str = "gpt-4o-mini", client: OpenAI | None = None):
        self.client = client or OpenAI()
        self.model = model

    def generate_brief(self, result: ReconciliationResult) -> DiscrepancyBrief:
        """Generate a structured brief for a finished reconciliation."""
        prompt = self._build_prompt(result)
        logger.info("Requesting discrepancy brief from %s", self.model)

        try:
            response = self._request(prompt)
        except OpenAIError as exc:
            logger.error("Discrepancy brief failed: %s", exc)
            raise BriefUnavailableError(
                f"Could not generate the AI summary: {exc}"
            ) from exc

        return response.choices[0].message.parsed

    def _request(self, prompt: str):
        return self.client.beta.chat.completions.parse(
            model=self.model,
            messages=[
                {
                    "role": "system",
                    "content": """You are a supply chain analyst reconciling SAP stock against the warehouse management system (WMS).

Your job is to:
1. Interpret the pre-computed numbers and explain the most likely causes of each gap
2. Write clearly for an inventory manager
3. Prioritize the discrepancies with the largest operational impact
4. Provide specific, actionable recommendations

Never invent numbers. Use the exact figures provided.""",
                },
                {"role": "user", "content": prompt},
            ],
            response_format=DiscrepancyBrief,
        )

    def _build_prompt(self, result: ReconciliationResult) -> str:
        """Build the prompt with all the pre-computed data."""
        discrepancies = _records(
            top_discrepancies(result.analysis_report, limit=20),
            [COL_CENTRO, COL_SKU, COL_NAME, COL_SAP, COL_WMS, COL_DIFFERENCE],
        )
        return f"""Analyze this SAP vs WMS stock reconciliation and write a brief.

## Key Metrics (pre-computed, use these exact numbers)
{json.dumps(result.summary(), indent=2)}

## Largest Discrepancies (Diferencia = WMS - SAP)
{json.dumps(discrepancies, indent=2, ensure_ascii=False)}

## Monthly Inventory-Difference Adjustments by Centro
{json.dumps(_records(result.adjustment_by_centro), indent=2, ensure_ascii=False)}

## Shrinkage (Merma, Z42) by Centro
{json.dumps(_records(result.shrinkage_report), indent=2, ensure_ascii=False)}

## Expiry (Vencimiento, Z44) by Centro
{json.dumps(_records(result.expiry_report), indent=2, ensure_ascii=False)}

Generate a complete DiscrepancyBrief with:
1. A 2-3 sentence executive summary
2. The discrepancies to investigate first, with likely causes
3. Observations per centro
4. Recommended actions"""
