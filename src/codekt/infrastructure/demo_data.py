"""Seed records and static demo views for the in-memory repository.

The scanner is a stub, so flows, the file tree and file bodies below are fixed
fixtures rather than the output of any analysis.
"""

from __future__ import annotations

from typing import Dict, List

from ..domain.models import (
    CodeFlow,
    ComponentCreate,
    DependencyCreate,
    FileTreeNode,
    FlowStep,
    ProjectCreate,
    ProjectMetricsUpdate,
    RouteCreate,
    ServiceCreate,
)


DEMO_PROJECT = ProjectCreate(
    name="Demo Frontend App",
    root_path="./src",
    framework="React",
    language="TypeScript",
    build_tool="Vite",
    status="completed",
)

DEMO_METRICS = ProjectMetricsUpdate(
    total_files=45,
    total_lines=8500,
    total_components=24,
    total_services=8,
    total_directives=3,
    total_pipes=5,
    total_modules=6,
    total_routes=12,
)

DEMO_COMPONENTS: List[ComponentCreate] = [
    ComponentCreate(name="AppSidebar", type="layout", file_path="src/components/layout/AppSidebar.tsx", props=["items"], description="Main navigation sidebar"),
    ComponentCreate(name="Header", type="layout", file_path="src/components/layout/Header.tsx", props=["onScan"], description="Top header with search and actions"),
    ComponentCreate(name="Dashboard", type="page", file_path="src/pages/Dashboard.tsx", description="Main dashboard view"),
    ComponentCreate(name="MetricsCard", type="ui", file_path="src/components/dashboard/MetricsCard.tsx", props=["title", "value", "icon"], description="Displays a single metric"),
    ComponentCreate(name="ChatMessage", type="ui", file_path="src/components/chat/ChatMessage.tsx", props=["role", "content"], description="Chat message bubble"),
    ComponentCreate(name="FileTree", type="ui", file_path="src/components/explorer/FileTree.tsx", props=["nodes", "onSelect"], state=["expanded"], description="File browser tree"),
    ComponentCreate(name="CodeViewer", type="ui", file_path="src/components/explorer/CodeViewer.tsx", props=["file", "content"], description="Source code display"),
    ComponentCreate(name="ArchitectureGraph", type="visualization", file_path="src/components/architecture/ArchitectureGraph.tsx", props=["nodes"], state=["zoom"], description="Architecture diagram"),
]

DEMO_SERVICES: List[ServiceCreate] = [
    ServiceCreate(name="ApiService", file_path="src/lib/queryClient.ts", methods=["apiRequest", "getQueryClient"], description="HTTP API client"),
    ServiceCreate(name="ThemeService", file_path="src/lib/theme.tsx", methods=["useTheme", "setTheme"], description="Theme management"),
    ServiceCreate(name="StorageService", file_path="src/lib/storage.ts", methods=["get", "set", "remove"], description="Local storage wrapper"),
    ServiceCreate(name="AuthService", file_path="src/lib/auth.ts", methods=["login", "logout", "getUser"], dependencies=["ApiService"], description="Authentication handling"),
]

DEMO_ROUTES: List[RouteCreate] = [
    RouteCreate(path="/", component_name="Dashboard", file_path="src/pages/Dashboard.tsx"),
    RouteCreate(path="/architecture", component_name="Architecture", file_path="src/pages/Architecture.tsx"),
    RouteCreate(path="/explorer", component_name="Explorer", file_path="src/pages/Explorer.tsx"),
    RouteCreate(path="/chat", component_name="Chat", file_path="src/pages/Chat.tsx"),
    RouteCreate(path="/workflows", component_name="Workflows", file_path="src/pages/Workflows.tsx"),
    RouteCreate(path="/config", component_name="Config", file_path="src/pages/Config.tsx"),
]

DEMO_DEPENDENCIES: List[DependencyCreate] = [
    DependencyCreate(name="react", version="18.3.0", type="production", category="ui"),
    DependencyCreate(name="react-dom", version="18.3.0", type="production", category="ui"),
    DependencyCreate(name="@tanstack/react-query", version="5.0.0", type="production", category="state"),
    DependencyCreate(name="wouter", version="3.0.0", type="production", category="utility"),
    DependencyCreate(name="tailwindcss", version="3.4.0", type="production", category="ui"),
    DependencyCreate(name="lucide-react", version="0.400.0", type="production", category="ui"),
    DependencyCreate(name="typescript", version="5.5.0", type="development", category="utility"),
    DependencyCreate(name="vite", version="5.0.0", type="development", category="utility"),
]


def _step(idx: int, type_: str, name: str, file_path: str, description: str) -> FlowStep:
    return FlowStep(id=f"step-{idx}", type=type_, name=name, file_path=file_path, description=description)


def demo_code_flows() -> List[CodeFlow]:
    return [
        CodeFlow(
            id="flow-login",
            name="User Login Flow",
            steps=[
                _step(1, "component", "LoginForm", "src/components/auth/LoginForm.tsx", "User enters credentials"),
                _step(2, "service", "AuthService.login", "src/lib/auth.ts", "Validate and authenticate"),
                _step(3, "store", "UserStore", "src/stores/user.ts", "Store user session"),
                _step(4, "route", "Navigate to Dashboard", "src/App.tsx", "Redirect after login"),
            ],
        ),
        CodeFlow(
            id="flow-chat",
            name="Chat with AI",
            steps=[
                _step(1, "component", "ChatInput", "src/components/chat/ChatInput.tsx", "User enters message or uploads image"),
                _step(2, "service", "ChatService.send", "src/lib/chat.ts", "Send message to API"),
                _step(3, "service", "AIService.analyze", "server/routes.ts", "Process with AI model"),
                _step(4, "component", "ChatMessage", "src/components/chat/ChatMessage.tsx", "Display AI response"),
            ],
        ),
        CodeFlow(
            id="flow-scan",
            name="Project Scan",
            steps=[
                _step(1, "component", "Header.onScan", "src/components/layout/Header.tsx", "User clicks scan button"),
                _step(2, "service", "ScanService.scan", "server/routes.ts", "Traverse file system"),
                _step(3, "service", "AnalyzerService", "server/analyzer.ts", "Parse and analyze code"),
                _step(4, "store", "ProjectStore", "src/stores/project.ts", "Update project data"),
                _step(5, "component", "Dashboard", "src/pages/Dashboard.tsx", "Refresh metrics display"),
            ],
        ),
    ]


def _file(path: str, language: str = "typescript") -> FileTreeNode:
    return FileTreeNode(name=path.rsplit("/", 1)[-1], path=path, type="file", language=language)


def _folder(path: str, children: List[FileTreeNode]) -> FileTreeNode:
    return FileTreeNode(name=path.rsplit("/", 1)[-1], path=path, type="folder", children=children)


def demo_file_tree() -> List[FileTreeNode]:
    return [
        _folder(
            "src",
            [
                _folder(
                    "src/components",
                    [
                        _folder("src/components/layout", [
                            _file("src/components/layout/AppSidebar.tsx"),
                            _file("src/components/layout/Header.tsx"),
                        ]),
                        _folder("src/components/dashboard", [
                            _file("src/components/dashboard/MetricsCard.tsx"),
                            _file("src/components/dashboard/ProjectOverview.tsx"),
                            _file("src/components/dashboard/QuickActions.tsx"),
                        ]),
                        _folder("src/components/chat", [
                            _file("src/components/chat/ChatMessage.tsx"),
                            _file("src/components/chat/ChatInput.tsx"),
                        ]),
                        _folder("src/components/explorer", [
                            _file("src/components/explorer/FileTree.tsx"),
                            _file("src/components/explorer/CodeViewer.tsx"),
                        ]),
                    ],
                ),
                _folder("src/pages", [
                    _file("src/pages/Dashboard.tsx"),
                    _file("src/pages/Architecture.tsx"),
                    _file("src/pages/Explorer.tsx"),
                    _file("src/pages/Chat.tsx"),
                    _file("src/pages/Workflows.tsx"),
                    _file("src/pages/Config.tsx"),
                ]),
                _folder("src/lib", [
                    _file("src/lib/queryClient.ts"),
                    _file("src/lib/theme.tsx"),
                    _file("src/lib/utils.ts"),
                ]),
                _file("src/App.tsx"),
                _file("src/main.tsx"),
                _file("src/index.css", language="css"),
            ],
        ),
        _folder("server", [
            _file("server/index.ts"),
            _file("server/routes.ts"),
            _file("server/storage.ts"),
        ]),
        _file("package.json", language="json"),
        _file("tsconfig.json", language="json"),
        _file("vite.config.ts"),
    ]


SAMPLE_FILES: Dict[str, str] = {
    "src/App.tsx": """import { Switch, Route } from "wouter";
import { QueryClientProvider } from "@tanstack/react-query";
import { queryClient } from "./lib/queryClient";
import { ThemeProvider } from "@/lib/theme";
import { SidebarProvider } from "@/components/ui/sidebar";
import { AppSidebar } from "@/components/layout/AppSidebar";
import { Header } from "@/components/layout/Header";
import Dashboard from "@/pages/Dashboard";
import Architecture from "@/pages/Architecture";
import Explorer from "@/pages/Explorer";
import Chat from "@/pages/Chat";

function Router() {
  return (
    <Switch>
      <Route path="/" component={Dashboard} />
      <Route path="/architecture" component={Architecture} />
      <Route path="/explorer" component={Explorer} />
      <Route path="/chat" component={Chat} />
    </Switch>
  );
}

export default function App() {
  return (
    <QueryClientProvider client={queryClient}>
      <ThemeProvider>
        <SidebarProvider>
          <div className="flex h-screen w-full">
            <AppSidebar />
            <div className="flex-1 flex flex-col">
              <Header />
              <main className="flex-1 overflow-hidden">
                <Router />
              </main>
            </div>
          </div>
        </SidebarProvider>
      </ThemeProvider>
    </QueryClientProvider>
  );
}""",
    "src/components/layout/Header.tsx": """import { SidebarTrigger } from "@/components/ui/sidebar";
import { Button } from "@/components/ui/button";
import { Input } from "@/components/ui/input";
import { Search, Moon, Sun } from "lucide-react";
import { useTheme } from "@/lib/theme";

interface HeaderProps {
  onScan?: () => void;
}

export function Header({ onScan }: HeaderProps) {
  const { theme, toggleTheme } = useTheme();

  return (
    <header className="flex items-center justify-between h-14 px-4 border-b">
      <div className="flex items-center gap-4">
        <SidebarTrigger />
        <div className="relative">
          <Search className="absolute left-3 w-4 h-4 text-muted-foreground" />
          <Input placeholder="Search..." className="pl-9 w-80" />
        </div>
      </div>
      <div className="flex items-center gap-2">
        <Button onClick={onScan}>Scan Project</Button>
        <Button variant="ghost" size="icon" onClick={toggleTheme}>
          {theme === "light" ? <Moon className="w-4 h-4" /> : <Sun className="w-4 h-4" />}
        </Button>
      </div>
    </header>
  );
}""",
    "src/pages/Architecture.tsx": """import { useQuery } from "@tanstack/react-query";
import { ArchitectureGraph } from "@/components/architecture/ArchitectureGraph";
import { ComponentTree } from "@/components/architecture/ComponentTree";
import type { ArchitectureNode, Component, Service } from "@shared/schema";

export default function Architecture() {
  const { data: nodes = [] } = useQuery<ArchitectureNode[]>({
    queryKey: ["/api/projects/current/architecture"],
  });

  const { data: components = [] } = useQuery<Component[]>({
    queryKey: ["/api/projects/current/components"],
  });

  const { data: services = [] } = useQuery<Service[]>({
    queryKey: ["/api/projects/current/services"],
  });

  return (
    <div className="h-full overflow-auto p-6">
      <h1 className="text-2xl font-bold">Architecture</h1>
      <div className="grid gap-6 lg:grid-cols-2">
        <ArchitectureGraph nodes={nodes} />
        <ComponentTree components={components} services={services} />
      </div>
    </div>
  );
}""",
}


def placeholder_file_content(path: str) -> str:
    return f"""// File: {path}
//
// This file is part of the demo project structure.
// In a real project scan, actual file contents would be loaded here.
//
// The Code KT platform analyzes:
// - Component structure and props
// - Service dependencies
// - Route definitions
// - Import/export relationships
//
export default function Component() {{
  return <div>Component content</div>;
}}"""
