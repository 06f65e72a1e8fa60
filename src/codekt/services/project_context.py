"""Project snapshot and system prompt for the KT chat assistant."""

from __future__ import annotations

from typing import Dict, List

from ..domain.models import Component
from ..infrastructure.repository import ProjectRepository

MAX_CONTEXT_DEPENDENCIES = 10

DEFAULT_PROJECT_NAME = "Demo Frontend App"
DEFAULT_FRAMEWORK = "React"
DEFAULT_LANGUAGE = "TypeScript"
DEFAULT_BUILD_TOOL = "Vite"


def group_components_by_type(components: List[Component]) -> Dict[str, List[Component]]:
    grouped: Dict[str, List[Component]] = {}
    for comp in components:
        grouped.setdefault(comp.type, []).append(comp)
    return grouped


def _lines_or(lines: List[str], placeholder: str) -> str:
    return "\n".join(lines) if lines else placeholder


def build_project_context(repo: ProjectRepository, project_id: int) -> str:
    """Render every metadata collection of a project as one plain-text block.

    The fetches are independent reads; a write landing between them shows up in
    some sections and not others.
    """
    project = repo.get_project(project_id)
    components = repo.list_components(project_id)
    services = repo.list_services(project_id)
    routes = repo.list_routes(project_id)
    flows = repo.code_flows(project_id)
    dependencies = repo.list_dependencies(project_id)
    metrics = repo.get_metrics(project_id)

    component_summary = [
        f"  {type_}: " + ", ".join(f"{c.name} ({c.file_path})" for c in comps)
        for type_, comps in group_components_by_type(components).items()
    ]
    component_details = [f"- {c.name}: {c.description or c.type} at [{c.file_path}]" for c in components]
    service_details = [
        f"- {s.name}: {s.description or 'Service'} at [{s.file_path}]\n"
        f"  Methods: {', '.join(s.methods) or 'N/A'}\n"
        f"  Dependencies: {', '.join(s.dependencies) or 'None'}"
        for s in services
    ]
    route_lines = [f"- {r.path} -> {r.component_name} [{r.file_path}]" for r in routes]
    flow_lines = [f"- {f.name}: " + " -> ".join(step.name for step in f.steps) for f in flows]
    dependency_lines = [
        f"- {d.name}@{d.version} ({d.type})" if d.version else f"- {d.name} ({d.type})"
        for d in dependencies[:MAX_CONTEXT_DEPENDENCIES]
    ]

    name = project.name if project else DEFAULT_PROJECT_NAME
    framework = (project.framework if project else None) or DEFAULT_FRAMEWORK
    language = (project.language if project else None) or DEFAULT_LANGUAGE
    build_tool = (project.build_tool if project else None) or DEFAULT_BUILD_TOOL
    status = project.status if project else "completed"

    total_files = metrics.total_files if metrics else 0
    total_lines = metrics.total_lines if metrics else 0
    total_components = (metrics.total_components if metrics else 0) or len(components)
    total_services = (metrics.total_services if metrics else 0) or len(services)
    total_routes = (metrics.total_routes if metrics else 0) or len(routes)

    return f"""
PROJECT: {name}
FRAMEWORK: {framework} with {language}
BUILD TOOL: {build_tool}
STATUS: {status}

METRICS:
- Total Files: {total_files}
- Total Lines: {total_lines}
- Components: {total_components}
- Services: {total_services}
- Routes: {total_routes}

COMPONENTS BY TYPE:
{_lines_or(component_summary, "No components found")}

DETAILED COMPONENTS:
{_lines_or(component_details, "None")}

SERVICES:
{_lines_or(service_details, "None")}

ROUTES:
{_lines_or(route_lines, "None")}

WORKFLOWS/CODE FLOWS:
{_lines_or(flow_lines, "None")}

DEPENDENCIES:
{_lines_or(dependency_lines, "None")}
"""


_PREAMBLE = (
    "You are a Code KT (Knowledge Transfer) Assistant specializing in this specific project. "
    "Your role is to help developers understand THIS codebase, not provide general coding advice.\n\n"
    "IMPORTANT: Always answer based on the actual project data below. "
    "Reference specific files, components, and services from this project."
)

_CAPABILITIES = [
    "Explain this project's architecture and how components are organized",
    "Describe specific components, their props, and how they work together",
    "Trace code flows through the application (e.g., user login, data fetching)",
    "Suggest which files to modify for specific changes",
    "Explain the design patterns and libraries used in THIS project",
    "If shown a screenshot, identify which components from THIS project match the UI",
]

_GUIDELINES = [
    "Always reference actual files from the project using markdown links: [ComponentName](path/to/file)",
    "When explaining flows, show the step-by-step path through components/services",
    "Be specific to THIS project - don't give generic React/TypeScript advice unless asked",
    "Use the project's actual component names, service names, and file paths",
    "If asked about something not in the project, say so and suggest alternatives",
]

_FORMAT_RULES = [
    "Use markdown formatting for readability",
    "Use code blocks for code snippets",
    "Use tables for comparisons",
    "Link to files when mentioning them",
]


def compose_system_prompt(project_context: str) -> str:
    capabilities = "\n".join(f"{i}. {line}" for i, line in enumerate(_CAPABILITIES, start=1))
    guidelines = "\n".join(f"- {line}" for line in _GUIDELINES)
    format_rules = "\n".join(f"- {line}" for line in _FORMAT_RULES)
    return (
        f"\n{_PREAMBLE}\n\n{project_context}\n"
        f"YOUR CAPABILITIES:\n{capabilities}\n\n"
        f"RESPONSE GUIDELINES:\n{guidelines}\n\n"
        f"FORMAT:\n{format_rules}\n"
    )
