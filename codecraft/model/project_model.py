"""
Data model of an estimation project: modules of tasks, risks and the cost settings.

The JSON representation uses camelCase field names, e.g. "optimisticTime",
"weightedAverageTimeInMinutes". Decimals are serialized as strings, so no precision
is lost when a project is written to disk and read back.

Derived values (a task's weighted average, a risk's time in minutes) are computed
from the raw fields every time they are read. They are included when serializing,
but values found in incoming JSON are ignored.

PROMPT> python -m codecraft.model.project_model
"""
import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel
from codecraft.estimate.decimal_util import ZERO
from codecraft.estimate.pert import weighted_average
from codecraft.estimate.time_units import TimeUnit, to_minutes

def generate_id() -> str:
    return str(uuid.uuid4())

class TaskCategory(str, Enum):
    design = 'Design'
    development_frontend = 'Development (Frontend)'
    development_backend = 'Development (Backend)'
    api_development = 'API Development'
    database = 'Database'
    testing_qa = 'Testing/QA'
    deployment = 'Deployment'
    management = 'Management'
    documentation = 'Documentation'
    research = 'Research'
    communication = 'Communication'
    other = 'Other'

class TaskStatus(str, Enum):
    pending = 'pending'
    in_progress = 'in-progress'
    completed = 'completed'

class RiskLevel(str, Enum):
    low = 'Low'
    medium = 'Medium'
    high = 'High'

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class Task(CamelModel):
    id: str = Field(default_factory=generate_id, description="Stable id, assigned at creation.")
    description: str = Field(description="What needs to be done.")
    optimistic_time: Decimal = Field(ge=0, description="Best case estimate, in time_unit.")
    most_likely_time: Decimal = Field(ge=0, description="Most likely estimate, in time_unit.")
    pessimistic_time: Decimal = Field(ge=0, description="Worst case estimate, in time_unit.")
    time_unit: TimeUnit = Field(default=TimeUnit.hours)
    category: Optional[TaskCategory] = None
    status: TaskStatus = Field(default=TaskStatus.pending)
    predecessor_task_ids: list[str] = Field(default_factory=list, description="Tasks that must finish before this task can start.")

    @field_validator('category', mode='before')
    @classmethod
    def empty_category_is_none(cls, value):
        if value == "":
            return None
        return value

    @field_validator('predecessor_task_ids', mode='before')
    @classmethod
    def missing_predecessors_is_empty(cls, value):
        if value is None:
            return []
        return value

    @computed_field(alias="weightedAverageTimeInMinutes")
    @property
    def weighted_average_time_in_minutes(self) -> Decimal:
        return weighted_average(self.optimistic_time, self.most_likely_time, self.pessimistic_time, self.time_unit)

class Module(CamelModel):
    id: str = Field(default_factory=generate_id)
    name: str
    tasks: list[Task] = Field(default_factory=list)

class Risk(CamelModel):
    id: str = Field(default_factory=generate_id)
    description: str
    time_estimate: Decimal = Field(ge=0, description="Extra time if the risk materializes, in time_unit.")
    time_unit: TimeUnit = Field(default=TimeUnit.hours)
    probability: RiskLevel = Field(default=RiskLevel.medium)
    impact_severity: RiskLevel = Field(default=RiskLevel.medium)

    @computed_field(alias="riskTimeInMinutes")
    @property
    def risk_time_in_minutes(self) -> Decimal:
        """Plain unit conversion. Risks are not PERT weighted."""
        return to_minutes(self.time_estimate, self.time_unit)

class Project(CamelModel):
    id: str = Field(default_factory=generate_id)
    name: str = "Untitled project"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    requirements_document: str = ""
    modules: list[Module] = Field(default_factory=list)
    risks: list[Risk] = Field(default_factory=list)
    effort_multiplier: Decimal = Field(default=Decimal("1.0"), description="Scales the total base time. Typically 0.5 to 2.5.")
    hourly_rate: Decimal = Field(default=Decimal("50"))
    fixed_costs: Decimal = Field(default=ZERO, description="Flat cost added on top of the labor cost.")

    # Summary totals, refreshed on save. See codecraft.model.project_editor.recalculate_project
    total_base_time_in_minutes: Decimal = ZERO
    total_adjusted_time_in_minutes: Decimal = ZERO
    total_project_cost: Decimal = ZERO

    def all_tasks(self) -> list[Task]:
        return all_tasks(self.modules)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

class DependencySuggestion(CamelModel):
    """Proposed predecessors for one task. Applied on top of the existing ones, never replacing them."""
    task_id: str = Field(description="Id of the task that depends on the predecessors.")
    predecessor_task_ids: list[str] = Field(default_factory=list, description="Ids of the tasks that must finish first.")

def all_tasks(modules: Iterable[Module]) -> list[Task]:
    """Flatten the tasks of all modules, preserving order."""
    return [task for module in modules for task in module.tasks]

if __name__ == "__main__":
    import json
    task = Task(description="Design login UI", optimistic_time=4, most_likely_time=6, pessimistic_time=10)
    risk = Risk(description="Third party API changes", time_estimate=2, time_unit=TimeUnit.days, probability=RiskLevel.high)
    project = Project(name="Demo", modules=[Module(name="FR1: User Authentication", tasks=[task])], risks=[risk])
    print(json.dumps(project.to_json_dict(), indent=2))
