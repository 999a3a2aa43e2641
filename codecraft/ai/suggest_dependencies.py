"""
Suggest which tasks must be finished before other tasks can start.

The suggestions are merged into the existing predecessors, never replacing them.
See codecraft.model.project_editor.apply_dependency_suggestions

PROMPT> python -m codecraft.ai.suggest_dependencies
"""
import json
import logging
from dataclasses import dataclass
from typing import Sequence
from pydantic import Field
from llama_index.core.llms.llm import LLM
from codecraft.ai.llm_json import chat_json
from codecraft.model.project_editor import apply_dependency_suggestions
from codecraft.model.project_model import CamelModel, DependencySuggestion, Module, Project

logger = logging.getLogger(__name__)

class DependencySuggestions(CamelModel):
    suggestions: list[DependencySuggestion] = Field(
        description="Suggested predecessors, one item per task that has predecessors."
    )

SYSTEM_PROMPT = """
You are a project management expert. Analyze the provided tasks and suggest logical dependencies between them.
A dependency means task B cannot start until task A is finished.

Consider:
- Design tasks should precede development tasks
- API development should precede frontend/backend development that uses it
- Database design should precede tests that use the database
- Backend development should generally precede testing
- Security tasks often need to be done before deployment

Be conservative: only suggest dependencies that are clearly necessary. Don't over-constrain the project.

Use the task ids shown in square brackets for taskId and predecessorTaskIds.
Include a suggestion for each task that has predecessors. Tasks with no predecessors should not be in the array.
"""

@dataclass
class SuggestDependencies:
    query: str
    response: DependencySuggestions
    metadata: dict

    @classmethod
    def format_query(cls, modules: Sequence[Module]) -> str:
        """
        One block per module, one line per task: "- [id] description (category)".
        """
        if not isinstance(modules, (list, tuple)):
            raise ValueError("Invalid modules.")
        blocks = []
        for module in modules:
            if not isinstance(module, Module):
                raise ValueError("Invalid module.")
            lines = [f"Module: {module.name}"]
            for task in module.tasks:
                category = task.category.value if task.category is not None else "Other"
                lines.append(f"  - [{task.id}] {task.description} ({category})")
            blocks.append("\n".join(lines))
        if not blocks:
            raise ValueError("There are no modules to analyze.")
        return "Here are the project tasks:\n\n" + "\n\n".join(blocks)

    @classmethod
    def execute(cls, llm: LLM, query: str) -> 'SuggestDependencies':
        if not isinstance(query, str):
            raise ValueError("Invalid query.")
        response, metadata = chat_json(llm, SYSTEM_PROMPT, query, DependencySuggestions)
        logger.info(f"Received {len(response.suggestions)} dependency suggestions")
        return cls(query=query, response=response, metadata=metadata)

    def apply_to(self, project: Project) -> Project:
        return apply_dependency_suggestions(project, self.response.suggestions)

    def to_dict(self, include_metadata=True, include_query=True) -> dict:
        d = self.response.model_dump(mode="json", by_alias=True)
        if include_metadata:
            d['metadata'] = self.metadata
        if include_query:
            d['query'] = self.query
        return d

if __name__ == "__main__":
    from codecraft.llm_factory import get_llm
    from codecraft.model.project_model import Task, TaskCategory
    logging.basicConfig(level=logging.DEBUG)

    module = Module(name="FR1: User Authentication", tasks=[
        Task(description="Design login UI", optimistic_time=2, most_likely_time=4, pessimistic_time=8, category=TaskCategory.design),
        Task(description="Implement login API", optimistic_time=4, most_likely_time=6, pessimistic_time=10, category=TaskCategory.api_development),
        Task(description="Implement login page", optimistic_time=3, most_likely_time=5, pessimistic_time=8, category=TaskCategory.development_frontend),
    ])
    query = SuggestDependencies.format_query([module])
    print(query)
    result = SuggestDependencies.execute(get_llm(), query)
    print(json.dumps(result.to_dict(include_query=False), indent=2))
