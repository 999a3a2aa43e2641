"""
FastAPI service around the CodeCraft estimation engine.

The service is stateless. Every request carries the data it needs, and projects are
stored by the client.

PROMPT> uvicorn codecraft_api.api:app --reload --port 8000
"""
import logging
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from codecraft.ai.augment_tasks import AugmentTasks
from codecraft.ai.generate_project_plan import GenerateProjectPlan
from codecraft.ai.generate_requirements import GenerateRequirements
from codecraft.ai.llm_executor import LLMExecutor, LLMExhaustedError, LLMModelFromName
from codecraft.ai.suggest_dependencies import SuggestDependencies
from codecraft.ai.suggest_risks import SuggestRisks
from codecraft.estimate.aggregation import compute_project_totals
from codecraft.estimate.analytics import ProjectAnalytics, category_distribution, module_durations, scenario_totals
from codecraft.estimate.pert import Rejected, estimate_task_time
from codecraft.estimate.progress import compute_progress
from codecraft.estimate.risk_priority import build_risk_matrix, rank_risks
from codecraft.estimate.time_units import format_currency, format_duration
from codecraft.llm_factory import LLMInfo, get_llm_names_by_priority
from codecraft.model.project_model import Project, all_tasks
from codecraft.schedule.critical_path import analyze_schedule
from codecraft.utils.codecraft_config import CodeCraftConfigError
from codecraft_api.config import ServiceSettings, load_settings
from codecraft_api.models import (
    APIError, AugmentTasksRequest, AugmentTasksResponse, DependencySuggestionsResponse,
    EstimateRequest, EstimateResponse, HealthResponse, LLMModel, ModulesRequest,
    ProjectDescriptionRequest, ProjectPlanResponse, RequirementsResponse, RisksRequest,
    SuggestedRisksResponse, TaskEstimateRequest, TaskEstimateResponse,
)

API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> ServiceSettings:
    return load_settings()


def get_llm_executor(settings: ServiceSettings = Depends(get_settings)) -> LLMExecutor:
    llm_names = list(settings.llm_names) or get_llm_names_by_priority()
    return LLMExecutor(LLMModelFromName.from_names(llm_names))


app = FastAPI(
    title="CodeCraft Estimator API",
    description="PERT estimates, costs, critical path and risk scoring for software projects",
    version=API_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, error: str, details: Optional[dict] = None) -> JSONResponse:
    body = APIError(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


@app.exception_handler(LLMExhaustedError)
async def llm_exhausted_handler(request: Request, exc: LLMExhaustedError):
    logger.error(f"{request.url.path}: {exc}")
    details = {
        "attempts": [
            {"llm": repr(attempt.llm_model), "stage": attempt.stage, "error": str(attempt.exception)}
            for attempt in exc.attempts
        ]
    }
    return _error_response(502, "All LLMs failed to produce a usable response.", details)


@app.exception_handler(CodeCraftConfigError)
async def config_error_handler(request: Request, exc: CodeCraftConfigError):
    logger.error(f"{request.url.path}: {exc}")
    return _error_response(503, str(exc))


@app.get("/health", response_model=HealthResponse)
def health_check():
    return HealthResponse(version=API_VERSION)


@app.get("/api/models", response_model=List[LLMModel])
def get_models():
    info = LLMInfo.obtain_info()
    return [LLMModel(id=item.id, label=item.label, priority=item.priority) for item in info.llm_config_items]


# ────────────────────────────────────────────────────────────────────────────────
#  Estimation
# ----------------------------------------------------------------------------
@app.post("/api/estimate", response_model=EstimateResponse)
def estimate(request: EstimateRequest, settings: ServiceSettings = Depends(get_settings)):
    effort_multiplier = request.effort_multiplier if request.effort_multiplier is not None else settings.default_effort_multiplier
    hourly_rate = request.hourly_rate if request.hourly_rate is not None else settings.default_hourly_rate
    totals = compute_project_totals(request.modules, request.risks, effort_multiplier, hourly_rate, request.fixed_costs)
    return EstimateResponse(
        total_tasks_time_in_minutes=totals.total_tasks_time,
        total_risk_time_in_minutes=totals.total_risk_time,
        total_base_time_in_minutes=totals.total_base_time,
        total_adjusted_time_in_minutes=totals.total_adjusted_time,
        total_project_cost=totals.total_cost,
        total_base_time_formatted=format_duration(totals.total_base_time),
        total_adjusted_time_formatted=format_duration(totals.total_adjusted_time),
        total_project_cost_formatted=format_currency(totals.total_cost),
    )


@app.post("/api/tasks/validate", response_model=TaskEstimateResponse)
def validate_task(request: TaskEstimateRequest):
    outcome = estimate_task_time(request.optimistic_time, request.most_likely_time, request.pessimistic_time, request.time_unit)
    if isinstance(outcome, Rejected):
        return _error_response(400, outcome.reason)
    return TaskEstimateResponse(weighted_average_time_in_minutes=outcome.minutes, formatted=format_duration(outcome.minutes))


@app.post("/api/critical-path")
def critical_path(request: ModulesRequest):
    try:
        report = analyze_schedule(all_tasks(request.modules))
    except ValueError as e:
        return _error_response(400, str(e))
    return report.to_dict()


@app.post("/api/risks/priority")
def risk_priority(request: RisksRequest):
    return {
        "assessments": [assessment.to_dict() for assessment in rank_risks(request.risks)],
        "matrix": build_risk_matrix(request.risks).to_dict(),
    }


@app.post("/api/progress")
def progress(request: ModulesRequest):
    return compute_progress(request.modules).to_dict()


@app.post("/api/analytics")
def analytics(request: EstimateRequest, settings: ServiceSettings = Depends(get_settings)):
    effort_multiplier = request.effort_multiplier if request.effort_multiplier is not None else settings.default_effort_multiplier
    result = ProjectAnalytics(
        scenarios=scenario_totals(request.modules, request.risks, effort_multiplier),
        modules=module_durations(request.modules),
        categories=category_distribution(request.modules),
    )
    return result.to_dict()


# ────────────────────────────────────────────────────────────────────────────────
#  AI assistance
# ----------------------------------------------------------------------------
def _format_query_or_400(format_query, *args) -> str:
    try:
        return format_query(*args)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/ai/requirements", response_model=RequirementsResponse)
def ai_requirements(request: ProjectDescriptionRequest, executor: LLMExecutor = Depends(get_llm_executor)):
    query = _format_query_or_400(GenerateRequirements.format_query, request.project_description)
    result = executor.run(lambda llm: GenerateRequirements.execute(llm, query))
    return RequirementsResponse(requirement_document=result.requirement_document)


@app.post("/api/ai/project-plan", response_model=ProjectPlanResponse)
def ai_project_plan(request: ProjectDescriptionRequest, executor: LLMExecutor = Depends(get_llm_executor)):
    query = _format_query_or_400(GenerateProjectPlan.format_query, request.project_description)
    result = executor.run(lambda llm: GenerateProjectPlan.execute(llm, query))
    return ProjectPlanResponse(requirement_document=result.response.requirement_document, modules=result.to_modules())


@app.post("/api/ai/dependencies", response_model=DependencySuggestionsResponse)
def ai_dependencies(request: ModulesRequest, executor: LLMExecutor = Depends(get_llm_executor)):
    query = _format_query_or_400(SuggestDependencies.format_query, request.modules)
    result = executor.run(lambda llm: SuggestDependencies.execute(llm, query))
    updated = result.apply_to(Project(modules=request.modules))
    return DependencySuggestionsResponse(suggestions=result.response.suggestions, modules=updated.modules)


@app.post("/api/ai/risks", response_model=SuggestedRisksResponse)
def ai_risks(request: ProjectDescriptionRequest, executor: LLMExecutor = Depends(get_llm_executor)):
    query = _format_query_or_400(SuggestRisks.format_query, request.project_description)
    result = executor.run(lambda llm: SuggestRisks.execute(llm, query))
    return SuggestedRisksResponse(suggested_risks=result.response.suggested_risks, risks=result.to_risks())


@app.post("/api/ai/augment-tasks", response_model=AugmentTasksResponse)
def ai_augment_tasks(request: AugmentTasksRequest, executor: LLMExecutor = Depends(get_llm_executor)):
    query = _format_query_or_400(AugmentTasks.format_query, request.module, request.prompt)
    result = executor.run(lambda llm: AugmentTasks.execute(llm, query))
    return AugmentTasksResponse(tasks=result.to_tasks())


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.DEBUG)
    uvicorn.run(app, host="0.0.0.0", port=8000)
