"""
Suggest project risks from a project description.

The reply only contains descriptions. Time estimate, probability and impact are
filled in by the user afterwards.

PROMPT> python -m codecraft.ai.suggest_risks
"""
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from pydantic import Field
from llama_index.core.llms.llm import LLM
from codecraft.ai.llm_json import chat_json
from codecraft.estimate.decimal_util import ZERO
from codecraft.estimate.time_units import TimeUnit
from codecraft.model.project_model import CamelModel, Risk

logger = logging.getLogger(__name__)

class SuggestedRisks(CamelModel):
    suggested_risks: list[str] = Field(
        description="A list of concise descriptions of potential project risks."
    )

SYSTEM_PROMPT = """
You are an expert project manager and risk analyst.
Based on the following project description, identify and list potential risks.
For each risk, provide a concise description (around 5-15 words).
Focus on common software project risks related to technology, team, scope, timeline, and external factors.
"""

@dataclass
class SuggestRisks:
    query: str
    response: SuggestedRisks
    metadata: dict

    @classmethod
    def format_query(cls, project_description: str) -> str:
        if not isinstance(project_description, str):
            raise ValueError("Invalid project_description.")
        if not project_description.strip():
            raise ValueError("The project description must not be empty.")
        return f"Project Description:\n{project_description.strip()}"

    @classmethod
    def execute(cls, llm: LLM, query: str) -> 'SuggestRisks':
        if not isinstance(query, str):
            raise ValueError("Invalid query.")
        response, metadata = chat_json(llm, SYSTEM_PROMPT, query, SuggestedRisks)
        logger.info(f"Received {len(response.suggested_risks)} risk suggestions")
        return cls(query=query, response=response, metadata=metadata)

    def to_risks(self, time_estimate: Decimal = ZERO, time_unit: TimeUnit = TimeUnit.hours) -> list[Risk]:
        """New risks with Medium probability and impact. Blank descriptions are dropped."""
        return [
            Risk(description=description.strip(), time_estimate=time_estimate, time_unit=time_unit)
            for description in self.response.suggested_risks
            if description.strip()
        ]

    def to_dict(self, include_metadata=True, include_query=True) -> dict:
        d = self.response.model_dump(mode="json", by_alias=True)
        if include_metadata:
            d['metadata'] = self.metadata
        if include_query:
            d['query'] = self.query
        return d

if __name__ == "__main__":
    from codecraft.llm_factory import get_llm
    logging.basicConfig(level=logging.DEBUG)

    query = SuggestRisks.format_query("Migrate a legacy PHP monolith to microservices on Kubernetes within 6 months.")
    result = SuggestRisks.execute(get_llm(), query)
    print(json.dumps(result.to_dict(include_query=False), indent=2))
