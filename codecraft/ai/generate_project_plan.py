"""
Generate a requirements document, and break it down into modules of estimated tasks.

All time estimates in the reply are in hours.

PROMPT> python -m codecraft.ai.generate_project_plan
"""
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from pydantic import Field
from llama_index.core.llms.llm import LLM
from codecraft.ai.llm_json import chat_json
from codecraft.model.project_editor import modules_from_generated_plan
from codecraft.model.project_model import CamelModel, Module, TaskCategory

logger = logging.getLogger(__name__)

class GeneratedTask(CamelModel):
    description: str = Field(
        description="Task description, e.g. 'Design user registration UI'."
    )
    optimistic_time: Decimal = Field(ge=0, description="Optimistic time estimate in hours.")
    most_likely_time: Decimal = Field(ge=0, description="Most likely time estimate in hours.")
    pessimistic_time: Decimal = Field(ge=0, description="Pessimistic time estimate in hours.")
    category: Optional[TaskCategory] = Field(
        default=None,
        description="Optional category of the task."
    )

class GeneratedModule(CamelModel):
    name: str = Field(
        description="Module name, e.g. 'FR1: User Authentication'."
    )
    tasks: list[GeneratedTask] = Field(
        description="List of tasks for this module."
    )

class GeneratedProjectPlan(CamelModel):
    requirement_document: str = Field(
        description="A comprehensive software requirement document."
    )
    modules: list[GeneratedModule] = Field(
        description="Modules extracted from the requirements document, with tasks and time estimates in hours."
    )

SYSTEM_PROMPT = """
You are an expert software project manager and technical analyst.
Based on the user's project description, you will perform two tasks:
1. Generate a comprehensive software requirements document. The document should be well-structured,
   detailing functional requirements (FR), non-functional requirements (NFR), security considerations (SEC),
   and deployment aspects. Use standard requirement IDs like FR1, NFR1, SEC1, etc.
2. Extract a list of modules and tasks directly from the generated requirements document.
   - Module names should correspond to major sections or distinct functionalities identified in the
     requirements, e.g. "FR1: User Authentication", "NFR2: Performance".
   - For each module, list specific, actionable tasks required to implement it.
   - For each task, provide an optimistic, a most likely, and a pessimistic time estimate in hours.
   - Phrase task descriptions clearly.

Ensure the time estimates are reasonable for software development tasks.
The requirementDocument is markdown text.
"""

@dataclass
class GenerateProjectPlan:
    query: str
    response: GeneratedProjectPlan
    metadata: dict

    @classmethod
    def format_query(cls, project_description: str) -> str:
        if not isinstance(project_description, str):
            raise ValueError("Invalid project_description.")
        if not project_description.strip():
            raise ValueError("The project description must not be empty.")
        return f"Project Description:\n{project_description.strip()}"

    @classmethod
    def execute(cls, llm: LLM, query: str) -> 'GenerateProjectPlan':
        if not isinstance(query, str):
            raise ValueError("Invalid query.")
        response, metadata = chat_json(llm, SYSTEM_PROMPT, query, GeneratedProjectPlan)
        task_count = sum(len(module.tasks) for module in response.modules)
        logger.info(f"Generated plan with {len(response.modules)} modules and {task_count} tasks")
        return cls(query=query, response=response, metadata=metadata)

    def to_modules(self) -> list[Module]:
        """Modules with fresh ids, ready to be added to a project."""
        plan_modules = [module.model_dump(mode="json", by_alias=True) for module in self.response.modules]
        return modules_from_generated_plan(plan_modules)

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
    query = GenerateProjectPlan.format_query("A web shop for handmade furniture with a custom order configurator.")
    result = GenerateProjectPlan.execute(llm, query)
    print(json.dumps(result.to_dict(include_query=False), indent=2))
    for module in result.to_modules():
        print(f"{module.name}: {len(module.tasks)} tasks")
