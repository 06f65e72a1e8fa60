from __future__ import annotations

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from ...domain.models import (
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
    ScanResponse,
    Service,
    ServiceCreate,
)
from ...infrastructure.repository import ProjectRepository, get_repo
from ...services.scanner import start_scan


router = APIRouter(prefix="/projects", tags=["projects"])


def _require_current(repo: ProjectRepository) -> Project:
    project = repo.get_current_project()
    if not project:
        raise HTTPException(status_code=404, detail="No project found")
    return project


@router.get("", response_model=List[Project])
def list_projects(repo: ProjectRepository = Depends(get_repo)) -> List[Project]:
    return repo.list_projects()


@router.get("/current", response_model=Project)
def get_current_project(repo: ProjectRepository = Depends(get_repo)) -> Project:
    return _require_current(repo)


@router.get("/current/metrics")
def get_current_metrics(repo: ProjectRepository = Depends(get_repo)):
    project = _require_current(repo)
    metrics = repo.get_metrics(project.id)
    if not metrics:
        return {}
    return metrics.model_dump(mode="json", by_alias=True)


@router.patch("/current/metrics", response_model=ProjectMetrics)
def update_current_metrics(
    payload: ProjectMetricsUpdate,
    repo: ProjectRepository = Depends(get_repo),
) -> ProjectMetrics:
    project = _require_current(repo)
    updated = repo.update_metrics(project.id, payload)
    if not updated:
        raise HTTPException(status_code=404, detail="Metrics not found")
    return updated


# Listing endpoints answer with an empty list when no project is configured.


@router.get("/current/dependencies", response_model=List[Dependency])
def list_dependencies(repo: ProjectRepository = Depends(get_repo)) -> List[Dependency]:
    project = repo.get_current_project()
    return repo.list_dependencies(project.id) if project else []


@router.get("/current/components", response_model=List[Component])
def list_components(repo: ProjectRepository = Depends(get_repo)) -> List[Component]:
    project = repo.get_current_project()
    return repo.list_components(project.id) if project else []


@router.get("/current/services", response_model=List[Service])
def list_services(repo: ProjectRepository = Depends(get_repo)) -> List[Service]:
    project = repo.get_current_project()
    return repo.list_services(project.id) if project else []


@router.get("/current/routes", response_model=List[Route])
def list_routes(repo: ProjectRepository = Depends(get_repo)) -> List[Route]:
    project = repo.get_current_project()
    return repo.list_routes(project.id) if project else []


@router.get("/current/modules", response_model=List[CodeModule])
def list_modules(repo: ProjectRepository = Depends(get_repo)) -> List[CodeModule]:
    project = repo.get_current_project()
    return repo.list_modules(project.id) if project else []


@router.get("/current/architecture", response_model=List[ArchitectureNode])
def get_architecture(repo: ProjectRepository = Depends(get_repo)) -> List[ArchitectureNode]:
    project = repo.get_current_project()
    return repo.architecture_nodes(project.id) if project else []


@router.get("/current/flows", response_model=List[CodeFlow])
def get_flows(repo: ProjectRepository = Depends(get_repo)) -> List[CodeFlow]:
    project = repo.get_current_project()
    return repo.code_flows(project.id) if project else []


@router.get("/current/files", response_model=List[FileTreeNode])
def get_file_tree(repo: ProjectRepository = Depends(get_repo)) -> List[FileTreeNode]:
    project = repo.get_current_project()
    return repo.file_tree(project.id) if project else []


@router.post("/current/components", response_model=Component, status_code=status.HTTP_201_CREATED)
def create_component(payload: ComponentCreate, repo: ProjectRepository = Depends(get_repo)) -> Component:
    project = _require_current(repo)
    return repo.create_component(project.id, payload)


@router.post("/current/services", response_model=Service, status_code=status.HTTP_201_CREATED)
def create_service(payload: ServiceCreate, repo: ProjectRepository = Depends(get_repo)) -> Service:
    project = _require_current(repo)
    return repo.create_service(project.id, payload)


@router.post("/current/routes", response_model=Route, status_code=status.HTTP_201_CREATED)
def create_route(payload: RouteCreate, repo: ProjectRepository = Depends(get_repo)) -> Route:
    project = _require_current(repo)
    return repo.create_route(project.id, payload)


@router.post("/current/modules", response_model=CodeModule, status_code=status.HTTP_201_CREATED)
def create_module(payload: CodeModuleCreate, repo: ProjectRepository = Depends(get_repo)) -> CodeModule:
    project = _require_current(repo)
    return repo.create_module(project.id, payload)


@router.post("/current/dependencies", response_model=Dependency, status_code=status.HTTP_201_CREATED)
def create_dependency(payload: DependencyCreate, repo: ProjectRepository = Depends(get_repo)) -> Dependency:
    project = _require_current(repo)
    return repo.create_dependency(project.id, payload)


@router.post("/configure", response_model=Project, status_code=status.HTTP_201_CREATED)
def configure_project(payload: ProjectCreate, repo: ProjectRepository = Depends(get_repo)) -> Project:
    project = repo.create_project(payload)
    repo.create_metrics(project.id, ProjectMetricsUpdate())
    return project


@router.post("/scan", response_model=ScanResponse)
async def scan_project(repo: ProjectRepository = Depends(get_repo)) -> ScanResponse:
    start_scan(repo)
    return ScanResponse(success=True, message="Scan started")


files_router = APIRouter(prefix="/files", tags=["files"])


@files_router.get("/content/{path:path}")
def get_file_content(path: str, repo: ProjectRepository = Depends(get_repo)) -> str:
    if not path:
        raise HTTPException(status_code=400, detail="Path is required")
    return repo.file_content(path)
