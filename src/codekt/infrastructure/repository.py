from __future__ import annotations

from datetime import UTC, datetime
from threading import RLock
from typing import Any, Dict, List, Optional, Protocol

from ..domain.models import (
    ArchitectureNode,
    CodeFlow,
    CodeModule,
    CodeModuleCreate,
    Component,
    ComponentCreate,
    Dependency,
    DependencyCreate,
    FileTreeNode,
    Project,
    ProjectCreate,
    ProjectMetrics,
    ProjectMetricsUpdate,
    Route,
    RouteCreate,
    Service,
    ServiceCreate,
)
from . import demo_data


class ProjectRepository(Protocol):
    def get_project(self, project_id: int) -> Optional[Project]: ...
    def get_current_project(self) -> Optional[Project]: ...
    def list_projects(self) -> List[Project]: ...
    def create_project(self, payload: ProjectCreate) -> Project: ...
    def update_project(self, project_id: int, **updates: Any) -> Optional[Project]: ...

    def get_metrics(self, project_id: int) -> Optional[ProjectMetrics]: ...
    def create_metrics(self, project_id: int, payload: ProjectMetricsUpdate) -> ProjectMetrics: ...
    def update_metrics(self, project_id: int, payload: ProjectMetricsUpdate) -> Optional[ProjectMetrics]: ...

    def list_components(self, project_id: int) -> List[Component]: ...
    def create_component(self, project_id: int, payload: ComponentCreate) -> Component: ...
    def list_services(self, project_id: int) -> List[Service]: ...
    def create_service(self, project_id: int, payload: ServiceCreate) -> Service: ...
    def list_routes(self, project_id: int) -> List[Route]: ...
    def create_route(self, project_id: int, payload: RouteCreate) -> Route: ...
    def list_modules(self, project_id: int) -> List[CodeModule]: ...
    def create_module(self, project_id: int, payload: CodeModuleCreate) -> CodeModule: ...
    def list_dependencies(self, project_id: int) -> List[Dependency]: ...
    def create_dependency(self, project_id: int, payload: DependencyCreate) -> Dependency: ...

    def architecture_nodes(self, project_id: int) -> List[ArchitectureNode]: ...
    def code_flows(self, project_id: int) -> List[CodeFlow]: ...
    def file_tree(self, project_id: int) -> List[FileTreeNode]: ...
    def file_content(self, path: str) -> str: ...


class InMemoryProjectRepository:
    """In-memory metadata store for the KT dashboard.

    Every entity type draws ids from its own sequence starting at 1. Records are
    kept in insertion order, which is the order every ``list_*`` call returns.
    Pass ``seed=False`` for an empty repository.
    """

    def __init__(self, seed: bool = True) -> None:
        self._lock = RLock()
        self._counters: Dict[str, int] = {}
        self._projects: Dict[int, Project] = {}
        self._metrics: Dict[int, ProjectMetrics] = {}
        self._components: Dict[int, Component] = {}
        self._services: Dict[int, Service] = {}
        self._routes: Dict[int, Route] = {}
        self._modules: Dict[int, CodeModule] = {}
        self._dependencies: Dict[int, Dependency] = {}
        self._current_project_id: Optional[int] = None
        if seed:
            self._seed_demo_data()

    def _next_id(self, kind: str) -> int:
        self._counters[kind] = self._counters.get(kind, 0) + 1
        return self._counters[kind]

    def _now(self) -> datetime:
        return datetime.now(UTC)

    def _seed_demo_data(self) -> None:
        project = self.create_project(demo_data.DEMO_PROJECT)
        self.update_project(project.id, last_scanned=self._now())
        self.create_metrics(project.id, demo_data.DEMO_METRICS)
        for comp in demo_data.DEMO_COMPONENTS:
            self.create_component(project.id, comp)
        for svc in demo_data.DEMO_SERVICES:
            self.create_service(project.id, svc)
        for route in demo_data.DEMO_ROUTES:
            self.create_route(project.id, route)
        for dep in demo_data.DEMO_DEPENDENCIES:
            self.create_dependency(project.id, dep)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    def get_project(self, project_id: int) -> Optional[Project]:
        with self._lock:
            return self._projects.get(project_id)

    def get_current_project(self) -> Optional[Project]:
        with self._lock:
            if self._current_project_id is not None:
                return self._projects.get(self._current_project_id)
            return next(iter(self._projects.values()), None)

    def list_projects(self) -> List[Project]:
        with self._lock:
            return list(self._projects.values())

    def create_project(self, payload: ProjectCreate) -> Project:
        with self._lock:
            pid = self._next_id("project")
            project = Project(id=pid, created_at=self._now(), last_scanned=None, **payload.model_dump())
            self._projects[pid] = project
            self._current_project_id = pid
            return project

    def update_project(self, project_id: int, **updates: Any) -> Optional[Project]:
        with self._lock:
            proj = self._projects.get(project_id)
            if not proj:
                return None
            updated = proj.model_copy(update=updates)
            self._projects[project_id] = updated
            return updated

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------
    def get_metrics(self, project_id: int) -> Optional[ProjectMetrics]:
        with self._lock:
            for metrics in self._metrics.values():
                if metrics.project_id == project_id:
                    return metrics
            return None

    def create_metrics(self, project_id: int, payload: ProjectMetricsUpdate) -> ProjectMetrics:
        with self._lock:
            mid = self._next_id("metrics")
            metrics = ProjectMetrics(
                id=mid,
                project_id=project_id,
                updated_at=self._now(),
                **payload.model_dump(exclude_none=True),
            )
            self._metrics[mid] = metrics
            return metrics

    def update_metrics(self, project_id: int, payload: ProjectMetricsUpdate) -> Optional[ProjectMetrics]:
        with self._lock:
            current = self.get_metrics(project_id)
            if not current:
                return None
            changes = payload.model_dump(exclude_none=True)
            changes["updated_at"] = self._now()
            updated = current.model_copy(update=changes)
            self._metrics[current.id] = updated
            return updated

    # ------------------------------------------------------------------
    # Project-scoped records
    # ------------------------------------------------------------------
    def list_components(self, project_id: int) -> List[Component]:
        with self._lock:
            return [c for c in self._components.values() if c.project_id == project_id]

    def create_component(self, project_id: int, payload: ComponentCreate) -> Component:
        with self._lock:
            cid = self._next_id("component")
            comp = Component(id=cid, project_id=project_id, **payload.model_dump())
            self._components[cid] = comp
            return comp

    def list_services(self, project_id: int) -> List[Service]:
        with self._lock:
            return [s for s in self._services.values() if s.project_id == project_id]

    def create_service(self, project_id: int, payload: ServiceCreate) -> Service:
        with self._lock:
            sid = self._next_id("service")
            svc = Service(id=sid, project_id=project_id, **payload.model_dump())
            self._services[sid] = svc
            return svc

    def list_routes(self, project_id: int) -> List[Route]:
        with self._lock:
            return [r for r in self._routes.values() if r.project_id == project_id]

    def create_route(self, project_id: int, payload: RouteCreate) -> Route:
        with self._lock:
            rid = self._next_id("route")
            route = Route(id=rid, project_id=project_id, **payload.model_dump())
            self._routes[rid] = route
            return route

    def list_modules(self, project_id: int) -> List[CodeModule]:
        with self._lock:
            return [m for m in self._modules.values() if m.project_id == project_id]

    def create_module(self, project_id: int, payload: CodeModuleCreate) -> CodeModule:
        with self._lock:
            mid = self._next_id("module")
            module = CodeModule(id=mid, project_id=project_id, **payload.model_dump())
            self._modules[mid] = module
            return module

    def list_dependencies(self, project_id: int) -> List[Dependency]:
        with self._lock:
            return [d for d in self._dependencies.values() if d.project_id == project_id]

    def create_dependency(self, project_id: int, payload: DependencyCreate) -> Dependency:
        with self._lock:
            did = self._next_id("dependency")
            dep = Dependency(id=did, project_id=project_id, **payload.model_dump())
            self._dependencies[did] = dep
            return dep

    # ------------------------------------------------------------------
    # Derived and static views
    # ------------------------------------------------------------------
    def architecture_nodes(self, project_id: int) -> List[ArchitectureNode]:
        nodes: List[ArchitectureNode] = [
            ArchitectureNode(id="module-app", label="App Module", type="module", file_path="src/App.tsx")
        ]
        for route in self.list_routes(project_id):
            nodes.append(
                ArchitectureNode(
                    id=f"page-{route.id}",
                    label=route.component_name or route.path,
                    type="page",
                    file_path=route.file_path,
                )
            )
        for comp in self.list_components(project_id):
            nodes.append(ArchitectureNode(id=f"component-{comp.id}", label=comp.name, type="component", file_path=comp.file_path))
        for svc in self.list_services(project_id):
            nodes.append(ArchitectureNode(id=f"service-{svc.id}", label=svc.name, type="service", file_path=svc.file_path))
        return nodes

    def code_flows(self, project_id: int) -> List[CodeFlow]:
        # Fixed demo flows; the scanner never derives them.
        return demo_data.demo_code_flows()

    def file_tree(self, project_id: int) -> List[FileTreeNode]:
        return demo_data.demo_file_tree()

    def file_content(self, path: str) -> str:
        return demo_data.SAMPLE_FILES.get(path) or demo_data.placeholder_file_content(path)


_repo: ProjectRepository | None = None


def get_repo() -> ProjectRepository:
    global _repo
    if _repo is None:
        _repo = InMemoryProjectRepository()
    return _repo
