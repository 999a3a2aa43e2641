"""
Save, load, list, import and export projects.

Each project is stored as JSON text under its own key in a KeyValueStore. Decimal
values are written as strings, so they are read back exactly.

The summary totals are recomputed on every save. Derived values found in
imported JSON are never trusted.

PROMPT> python -m codecraft.storage.project_store
"""
import json
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from pydantic import ValidationError
from codecraft.estimate.time_units import format_currency, format_duration
from codecraft.model.project_editor import recalculate_project
from codecraft.model.project_model import Project, generate_id
from codecraft.storage.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

KEY_PREFIX = "codecraft-project:"
DEFAULT_PAGE_SIZE = 10

class ProjectNotFoundError(KeyError):
    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(project_id)

    def __str__(self) -> str:
        return f"Project not found: {self.project_id!r}"

class ProjectImportError(ValueError):
    pass

@dataclass
class ProjectListItem:
    id: str
    name: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    total_project_cost: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "totalProjectCost": self.total_project_cost,
        }

@dataclass
class ProjectPage:
    items: List[ProjectListItem] = field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total_items: int = 0

    @property
    def page_count(self) -> int:
        return max(1, math.ceil(self.total_items / self.page_size))

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "page": self.page,
            "pageSize": self.page_size,
            "totalItems": self.total_items,
            "pageCount": self.page_count,
        }

def project_summary(project: Project) -> dict[str, str]:
    """Raw totals as exact decimal strings, next to their human readable form."""
    return {
        "totalBaseTimeInMinutes": str(project.total_base_time_in_minutes),
        "totalBaseTimeFormatted": format_duration(project.total_base_time_in_minutes),
        "totalAdjustedTimeInMinutes": str(project.total_adjusted_time_in_minutes),
        "totalAdjustedTimeFormatted": format_duration(project.total_adjusted_time_in_minutes),
        "totalProjectCost": str(project.total_project_cost),
        "totalProjectCostFormatted": format_currency(project.total_project_cost),
    }

def _updated_at_sort_key(project: Project) -> datetime:
    # Imported projects may carry naive timestamps. Treat them as UTC.
    if project.updated_at is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if project.updated_at.tzinfo is None:
        return project.updated_at.replace(tzinfo=timezone.utc)
    return project.updated_at

class ProjectStore:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def __repr__(self) -> str:
        return f"ProjectStore(store={self.store!r})"

    @staticmethod
    def _key(project_id: str) -> str:
        return f"{KEY_PREFIX}{project_id}"

    def save(self, name: str, project: Project, project_id: Optional[str] = None) -> Project:
        """
        Store the project under the given name.

        Without project_id, the project is saved as a new entry with a fresh id.
        With project_id, the existing entry is overwritten and keeps its creation time.
        """
        if not name or not name.strip():
            raise ValueError("Project name must not be empty.")
        now = datetime.now(timezone.utc)
        if project_id is None:
            project_id = generate_id()
            created_at = now
        else:
            created_at = self.load(project_id).created_at or now

        saved = recalculate_project(project).model_copy(update={
            "id": project_id,
            "name": name.strip(),
            "created_at": created_at,
            "updated_at": now,
        })
        self.store.set(self._key(project_id), json.dumps(saved.to_json_dict()))
        logger.info(f"Saved project {project_id!r} ({saved.name!r})")
        return saved

    def load(self, project_id: str) -> Project:
        text = self.store.get(self._key(project_id))
        if text is None:
            raise ProjectNotFoundError(project_id)
        return Project.model_validate_json(text)

    def delete(self, project_id: str) -> None:
        if not self.store.delete(self._key(project_id)):
            raise ProjectNotFoundError(project_id)
        logger.info(f"Deleted project {project_id!r}")

    def all_projects(self) -> List[Project]:
        projects: List[Project] = []
        for key in self.store.keys():
            if not key.startswith(KEY_PREFIX):
                continue
            text = self.store.get(key)
            if text is None:
                continue
            try:
                projects.append(Project.model_validate_json(text))
            except ValidationError as e:
                logger.error(f"Skipping unreadable project {key!r}: {e}")
        return projects

    def list_projects(self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> ProjectPage:
        """Most recently updated first."""
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")

        projects = sorted(self.all_projects(), key=_updated_at_sort_key, reverse=True)
        start = (page - 1) * page_size
        items = [
            ProjectListItem(
                id=p.id,
                name=p.name,
                created_at=p.created_at,
                updated_at=p.updated_at,
                total_project_cost=str(p.total_project_cost),
            )
            for p in projects[start:start + page_size]
        ]
        return ProjectPage(items=items, page=page, page_size=page_size, total_items=len(projects))

    def export_json(self, project_id: str) -> str:
        project = recalculate_project(self.load(project_id))
        data = project.to_json_dict()
        data["projectSummary"] = project_summary(project)
        return json.dumps(data, indent=2)

    def import_json(self, text: str) -> Project:
        """
        Parse an exported project and save it as a new entry.

        The imported project gets a fresh id. Its totals are parsed as exact decimals
        and recomputed from the modules and risks when saving.
        """
        try:
            data = json.loads(text, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise ProjectImportError(f"Invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ProjectImportError(f"Expected a JSON object, got {type(data).__name__}")
        if not isinstance(data.get("modules"), list):
            raise ProjectImportError("Missing 'modules' list.")

        data.pop("projectSummary", None)
        data.pop("id", None)
        try:
            project = Project.model_validate(data)
        except ValidationError as e:
            raise ProjectImportError(f"Invalid project data: {e}") from e

        name = project.name.strip() or "Imported project"
        saved = self.save(name, project)
        logger.info(f"Imported project as {saved.id!r}")
        return saved

if __name__ == "__main__":
    from codecraft.model.project_model import Module, Task
    from codecraft.storage.key_value_store import InMemoryKeyValueStore
    logging.basicConfig(level=logging.DEBUG)

    store = ProjectStore(InMemoryKeyValueStore())
    project = Project(modules=[Module(name="Backend", tasks=[Task(description="API", optimistic_time=4, most_likely_time=6, pessimistic_time=10)])])
    saved = store.save("Demo", project)
    print(store.list_projects().to_dict())
    print(store.export_json(saved.id))
