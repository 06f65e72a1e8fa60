"""Deterministic chat answers used when no model provider is configured.

A reply is picked by walking ``FALLBACK_TEMPLATES`` in order and taking the
first template whose keywords appear in the lower-cased message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..domain.models import CodeFlow, Component, Project, Route, Service
from .project_context import (
    DEFAULT_BUILD_TOOL,
    DEFAULT_FRAMEWORK,
    DEFAULT_LANGUAGE,
    DEFAULT_PROJECT_NAME,
    group_components_by_type,
)

EMPTY_MESSAGE_REPLY = "Please ask a question about this project."


@dataclass(frozen=True)
class FallbackContext:
    components: List[Component]
    services: List[Service]
    routes: List[Route]
    flows: List[CodeFlow]
    project: Optional[Project] = None

    @property
    def project_name(self) -> str:
        return self.project.name if self.project else DEFAULT_PROJECT_NAME


def _path(value: Optional[str]) -> str:
    return value or "unknown"


def _contains_any(*keywords: str) -> Callable[[str], bool]:
    def predicate(lowered: str) -> bool:
        return any(word in lowered for word in keywords)

    return predicate


def _architecture_reply(ctx: FallbackContext) -> str:
    project = ctx.project
    counts = {type_: len(comps) for type_, comps in group_components_by_type(ctx.components).items()}
    type_breakdown = "\n".join(f"  - {count} {type_} components" for type_, count in counts.items()) or "  - No components found"
    key_components = "\n".join(
        f"- [{c.name}]({_path(c.file_path)}) - {c.description or c.type}" for c in ctx.components[:5]
    ) or "- No components found"
    services_list = "\n".join(
        f"- [{s.name}]({_path(s.file_path)}) - {s.description or 'Business logic'}" for s in ctx.services
    ) or "- No services found"
    routes_list = "\n".join(
        f"- `{r.path}` -> [{r.component_name or 'Unknown'}]({_path(r.file_path)})" for r in ctx.routes
    ) or "- No routes found"

    framework = (project.framework if project else None) or DEFAULT_FRAMEWORK
    language = (project.language if project else None) or DEFAULT_LANGUAGE
    build_tool = (project.build_tool if project else None) or DEFAULT_BUILD_TOOL

    return f"""## {ctx.project_name} - Architecture Overview

This is a **{framework}** application built with **{language}** and bundled using **{build_tool}**.

### Project Structure

**Components ({len(ctx.components)} total):**
{type_breakdown}

**Key Components:**
{key_components}

**Services ({len(ctx.services)}):**
{services_list}

**Routes ({len(ctx.routes)}):**
{routes_list}

### Entry Point
The main entry is [App.tsx](src/App.tsx), which sets up routing, providers, and the overall layout with sidebar navigation.

### Data Flow
State management uses **TanStack React Query** for server state. The [queryClient.ts](src/lib/queryClient.ts) configures API calls and caching."""


def _components_reply(ctx: FallbackContext) -> str:
    response = f"## Components in {ctx.project_name}\n\n"
    grouped = group_components_by_type(ctx.components)
    if not grouped:
        return response + "No components found in this project."
    for type_, comps in grouped.items():
        response += f"### {type_[:1].upper()}{type_[1:]} Components\n"
        response += "\n".join(
            f"- **[{c.name}]({_path(c.file_path)})** - {c.description or 'Component'}" for c in comps
        )
        response += "\n\n"
    return response


def _routes_reply(ctx: FallbackContext) -> str:
    rows = "\n".join(
        f"| `{r.path}` | [{r.component_name or 'Unknown'}]({_path(r.file_path)}) |" for r in ctx.routes
    ) or "| No routes | found |"
    return f"""## Routing in {ctx.project_name}

Routes are defined in [App.tsx](src/App.tsx) using **wouter** for lightweight client-side routing.

### Available Routes:
{rows}

### Navigation
The sidebar uses the **SidebarProvider** from shadcn/ui for collapsible navigation. Each route renders its page component in the main content area."""


def _services_reply(ctx: FallbackContext) -> str:
    blocks = "\n".join(
        f"""
**[{s.name}]({_path(s.file_path)})**
- Description: {s.description or 'Business logic service'}
- Methods: {', '.join(s.methods) or 'Various'}
- Dependencies: {', '.join(s.dependencies) or 'None'}"""
        for s in ctx.services
    ) or "\nNo services found."
    return f"""## Services & API in {ctx.project_name}

### Services:
{blocks}

### API Client
The [queryClient.ts](src/lib/queryClient.ts) provides:
- `apiRequest(method, url, data)` - Makes HTTP requests
- TanStack Query integration for caching and refetching"""


def _flows_reply(ctx: FallbackContext) -> str:
    if not ctx.flows:
        return (
            f"## Code Flows in {ctx.project_name}\n\n"
            "No code flows have been detected yet. Try scanning the project to analyze code flows."
        )
    sections = []
    for flow in ctx.flows:
        steps = "\n".join(
            f"{i}. **{step.name}** ([{_path(step.file_path)}]({_path(step.file_path)}))\n"
            f"   {step.description or 'Step in the flow'}"
            for i, step in enumerate(flow.steps, start=1)
        )
        sections.append(f"\n### {flow.name}\n{steps}")
    return f"## Code Flows in {ctx.project_name}\n" + "\n".join(sections)


def _welcome_reply(ctx: FallbackContext) -> str:
    return f"""## Welcome to {ctx.project_name} Knowledge Transfer

I can help you understand this codebase! Here's a quick overview:

| Metric | Count |
|--------|-------|
| Components | {len(ctx.components)} |
| Services | {len(ctx.services)} |
| Routes | {len(ctx.routes)} |
| Code Flows | {len(ctx.flows)} |

### Try asking about:
- "Explain the project architecture"
- "Show me the components"
- "How does routing work?"
- "What services are available?"
- "Explain the login flow"

Or upload a screenshot of the UI and I'll identify the relevant components!"""


# Priority order matters: "explain the routes" is an architecture question.
FALLBACK_TEMPLATES: Sequence[Tuple[Callable[[str], bool], Callable[[FallbackContext], str]]] = (
    (_contains_any("structure", "architecture", "explain", "overview"), _architecture_reply),
    (_contains_any("component"), _components_reply),
    (_contains_any("route", "navigation", "page"), _routes_reply),
    (_contains_any("service", "api", "data"), _services_reply),
    (_contains_any("flow", "workflow", "how does"), _flows_reply),
)


def generate_fallback_response(
    message: Optional[str],
    components: List[Component],
    services: List[Service],
    routes: List[Route],
    flows: List[CodeFlow],
    project: Optional[Project] = None,
) -> str:
    if not (message or "").strip():
        return EMPTY_MESSAGE_REPLY
    ctx = FallbackContext(components=components, services=services, routes=routes, flows=flows, project=project)
    lowered = message.lower()
    for predicate, template in FALLBACK_TEMPLATES:
        if predicate(lowered):
            return template(ctx)
    return _welcome_reply(ctx)
