"""
Add tasks to a module, and adjust the estimates of existing ones, guided by a prompt.

Every task in the reply has a category and estimates in hours.

PROMPT> python -m codecraft.ai.augment_tasks
"""
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from pydantic import Field
from llama_index.core.llms.llm import LLM
from codecraft.ai.llm_json import chat_json
from codecraft.estimate.pert import Rejected, estimate_task_time
from codecraft.estimate.time_units import TimeUnit
from codecraft.model.project_model import CamelModel, Module, Task, TaskCategory

logger = logging.getLogger(__name__)

class AugmentedTask(CamelModel):
    description: str
    category: TaskCategory = Field(description="Exactly one of the task categories.")
    optimistic_time: Decimal = Field(ge=0, description="Optimistic time estimate in hours.")
    most_likely_time: Decimal = Field(ge=0, description="Most likely time estimate in hours.")
    pessimistic_time: Decimal = Field(ge=0, description="Pessimistic time estimate in hours.")

class AugmentedTasks(CamelModel):
    augmented_tasks: list[AugmentedTask] = Field(
        description="The augmented tasks with categories and adjusted time estimates."
    )

CATEGORY_NAMES = ", ".join(category.value for category in TaskCategory)

SYSTEM_PROMPT = f"""
You are a project management assistant. You will be provided with a module description, a list of existing tasks, and a prompt.
Your job is to augment the existing tasks with new tasks and adjusted time estimates based on the prompt.
For each task, assign ONE of these categories: {CATEGORY_NAMES}.
All time estimates are in hours.
Return the existing tasks together with the new tasks in augmentedTasks.
"""

@dataclass
class AugmentTasks:
    query: str
    response: AugmentedTasks
    metadata: dict

    @classmethod
    def format_query(cls, module: Module, prompt: str) -> str:
        if not isinstance(module, Module):
            raise ValueError("Invalid module.")
        if not isinstance(prompt, str) or not prompt.strip():
            raise ValueError("Invalid prompt.")
        if module.tasks:
            existing_tasks = "\n".join(
                f"- {task.description} ({task.optimistic_time}/{task.most_likely_time}/{task.pessimistic_time} {task.time_unit.value})"
                for task in module.tasks
            )
        else:
            existing_tasks = "None"
        return (
            f"Module Description: {module.name}\n\n"
            f"Existing Tasks:\n{existing_tasks}\n\n"
            f"Augmentation Prompt: {prompt.strip()}"
        )

    @classmethod
    def execute(cls, llm: LLM, query: str) -> 'AugmentTasks':
        if not isinstance(query, str):
            raise ValueError("Invalid query.")
        response, metadata = chat_json(llm, SYSTEM_PROMPT, query, AugmentedTasks)
        logger.info(f"Received {len(response.augmented_tasks)} augmented tasks")
        return cls(query=query, response=response, metadata=metadata)

    def to_tasks(self) -> list[Task]:
        """Tasks with fresh ids, in hours. Out of order estimates are kept and logged."""
        tasks = []
        for item in self.response.augmented_tasks:
            outcome = estimate_task_time(item.optimistic_time, item.most_likely_time, item.pessimistic_time, TimeUnit.hours)
            if isinstance(outcome, Rejected):
                logger.warning(f"Augmented task {item.description!r}: {outcome.reason} Keeping it.")
            tasks.append(Task(
                description=item.description,
                optimistic_time=item.optimistic_time,
                most_likely_time=item.most_likely_time,
                pessimistic_time=item.pessimistic_time,
                time_unit=TimeUnit.hours,
                category=item.category,
            ))
        return tasks

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

    module = Module(name="FR2: Payments", tasks=[
        Task(description="Integrate payment provider", optimistic_time=8, most_likely_time=12, pessimistic_time=20),
    ])
    query = AugmentTasks.format_query(module, "Add refunds and invoice generation.")
    result = AugmentTasks.execute(get_llm(), query)
    print(json.dumps(result.to_dict(include_query=False), indent=2))
