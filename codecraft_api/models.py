"""
Request and response models for the CodeCraft HTTP service.

JSON uses camelCase field names, like the project model.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import Field
from codecraft.estimate.time_units import TimeUnit
from codecraft.model.project_model import CamelModel, DependencySuggestion, Module, Risk, Task


class APIError(CamelModel):
    """Standard API error response"""
    error: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=datetime.now)


class HealthResponse(CamelModel):
    status: str = Field("healthy", description="API status")
    version: str = Field(..., description="API version")


class LLMModel(CamelModel):
    """An entry in llm_config.json"""
    id: str = Field(..., description="Model identifier")
    label: str = Field(..., description="Human-readable model name")
    priority: Optional[int] = Field(None, description="Lower values are tried first")


class EstimateRequest(CamelModel):
    modules: List[Module] = Field(default_factory=list)
    risks: List[Risk] = Field(default_factory=list)
    effort_multiplier: Optional[Decimal] = Field(None, ge=0, description="Defaults to the service setting.")
    hourly_rate: Optional[Decimal] = Field(None, ge=0, description="Defaults to the service setting.")
    fixed_costs: Decimal = Field(Decimal("0"), ge=0)


class EstimateResponse(CamelModel):
    total_tasks_time_in_minutes: Decimal
    total_risk_time_in_minutes: Decimal
    total_base_time_in_minutes: Decimal
    total_adjusted_time_in_minutes: Decimal
    total_project_cost: Decimal
    total_base_time_formatted: str
    total_adjusted_time_formatted: str
    total_project_cost_formatted: str


class ModulesRequest(CamelModel):
    modules: List[Module] = Field(default_factory=list)


class RisksRequest(CamelModel):
    risks: List[Risk] = Field(default_factory=list)


class TaskEstimateRequest(CamelModel):
    """Raw form input. Values may be missing or not numbers at all."""
    optimistic_time: Optional[Any] = None
    most_likely_time: Optional[Any] = None
    pessimistic_time: Optional[Any] = None
    time_unit: Optional[str] = TimeUnit.hours.value


class TaskEstimateResponse(CamelModel):
    weighted_average_time_in_minutes: Decimal
    formatted: str


class ProjectDescriptionRequest(CamelModel):
    project_description: str = Field(..., min_length=1)


class RequirementsResponse(CamelModel):
    requirement_document: str


class ProjectPlanResponse(CamelModel):
    requirement_document: str
    modules: List[Module]


class DependencySuggestionsResponse(CamelModel):
    suggestions: List[DependencySuggestion]
    modules: List[Module] = Field(..., description="The modules with the suggestions merged into the predecessors.")


class SuggestedRisksResponse(CamelModel):
    suggested_risks: List[str]
    risks: List[Risk]


class AugmentTasksRequest(CamelModel):
    module: Module
    prompt: str = Field(..., min_length=1)


class AugmentTasksResponse(CamelModel):
    tasks: List[Task]
