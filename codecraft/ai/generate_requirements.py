"""
Write a software requirements document from a short project description.

PROMPT> python -m codecraft.ai.generate_requirements
"""
import json
import logging
from dataclasses import dataclass
from pydantic import Field
from llama_index.core.llms.llm import LLM
from codecraft.ai.llm_json import chat_json
from codecraft.model.project_model import CamelModel

logger = logging.getLogger(__name__)

class RequirementsDocument(CamelModel):
    requirement_document: str = Field(
        description="A comprehensive software requirement document."
    )

SYSTEM_PROMPT = """
You are an expert software project manager.

You will generate a comprehensive software requirement document based on the user's project description,
incorporating best practices for functional and non-functional requirements, security, and deployment.
Use standard requirement IDs like FR1, NFR1, SEC1.
The requirementDocument is markdown text.
"""

@dataclass
class GenerateRequirements:
    query: str
    response: RequirementsDocument
    metadata: dict

    @classmethod
    def format_query(cls, project_description: str) -> str:
        if not isinstance(project_description, str):
            raise ValueError("Invalid project_description.")
        if not project_description.strip():
            raise ValueError("The project description must not be empty.")
        return f"Project Description:\n{project_description.strip()}"

    @classmethod
    def execute(cls, llm: LLM, query: str) -> 'GenerateRequirements':
        if not isinstance(query, str):
            raise ValueError("Invalid query.")
        response, metadata = chat_json(llm, SYSTEM_PROMPT, query, RequirementsDocument)
        logger.debug(f"Requirements document with {len(response.requirement_document)} characters")
        return cls(query=query, response=response, metadata=metadata)

    @property
    def requirement_document(self) -> str:
        return self.response.requirement_document

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

    llm = get_llm()
    query = GenerateRequirements.format_query("A mobile app for booking tennis courts, with payments and a waiting list.")
    result = GenerateRequirements.execute(llm, query)
    print(json.dumps(result.to_dict(include_query=False), indent=2))
