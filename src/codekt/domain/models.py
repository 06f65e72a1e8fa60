from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys (the dashboard client's wire format)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


ScanStatus = Literal["pending", "scanning", "completed"]


class ProjectCreate(CamelModel):
    name: str = "New Project"
    root_path: str = "./src"
    framework: Optional[str] = None
    language: Optional[str] = None
    build_tool: Optional[str] = None
    status: ScanStatus = "pending"


class Project(CamelModel):
    id: int
    name: str
    root_path: str
    framework: Optional[str] = None
    language: Optional[str] = None
    build_tool: Optional[str] = None
    status: ScanStatus = "pending"
    last_scanned: Optional[datetime] = None
    created_at: datetime


class ProjectMetricsUpdate(CamelModel):
    total_files: Optional[int] = None
    total_lines: Optional[int] = None
    total_components: Optional[int] = None
    total_services: Optional[int] = None
    total_directives: Optional[int] = None
    total_pipes: Optional[int] = None
    total_modules: Optional[int] = None
    total_routes: Optional[int] = None


class ProjectMetrics(CamelModel):
    id: int
    project_id: int
    total_files: int = 0
    total_lines: int = 0
    total_components: int = 0
    total_services: int = 0
    total_directives: int = 0
    total_pipes: int = 0
    total_modules: int = 0
    total_routes: int = 0
    updated_at: datetime


class ComponentCreate(CamelModel):
    name: str
    type: str
    file_path: str
    module_id: Optional[int] = None
    props: List[str] = Field(default_factory=list)
    state: List[str] = Field(default_factory=list)
    description: Optional[str] = None


class Component(ComponentCreate):
    id: int
    project_id: int


class ServiceCreate(CamelModel):
    name: str
    file_path: str
    methods: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    description: Optional[str] = None


class Service(ServiceCreate):
    id: int
    project_id: int


class RouteCreate(CamelModel):
    path: str
    component_name: Optional[str] = None
    file_path: Optional[str] = None
    guards: List[str] = Field(default_factory=list)
    children: List[str] = Field(default_factory=list)


class Route(RouteCreate):
    id: int
    project_id: int


class CodeModuleCreate(CamelModel):
    name: str
    type: str
    file_path: str
    description: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    exports: List[str] = Field(default_factory=list)
    lines_of_code: int = 0


class CodeModule(CodeModuleCreate):
    id: int
    project_id: int


class DependencyCreate(CamelModel):
    name: str
    version: Optional[str] = None
    type: str
    category: Optional[str] = None


class Dependency(DependencyCreate):
    id: int
    project_id: int


# Derived / static view entities (never stored)


class ArchitectureNode(CamelModel):
    id: str
    label: str
    type: str
    file_path: Optional[str] = None
    children: Optional[List[ArchitectureNode]] = None


class FlowStep(CamelModel):
    id: str
    type: str
    name: str
    file_path: Optional[str] = None
    description: Optional[str] = None


class CodeFlow(CamelModel):
    id: str
    name: str
    steps: List[FlowStep] = Field(default_factory=list)


class FileTreeNode(CamelModel):
    name: str
    path: str
    type: Literal["file", "folder"]
    children: Optional[List[FileTreeNode]] = None
    language: Optional[str] = None
    size: Optional[int] = None


class ScanResponse(BaseModel):
    success: bool
    message: str
