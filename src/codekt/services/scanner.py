"""Stub project scan: a timed status flip, no file system analysis."""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import UTC, datetime
from typing import Optional

from ..infrastructure.repository import ProjectRepository


LOG = logging.getLogger("codekt.scan")

DEFAULT_SCAN_DELAY_SECONDS = 3.0


def scan_delay_seconds() -> float:
    raw = (os.getenv("CODEKT_SCAN_DELAY_SECONDS") or "").strip()
    try:
        return max(0.0, float(raw)) if raw else DEFAULT_SCAN_DELAY_SECONDS
    except ValueError:
        return DEFAULT_SCAN_DELAY_SECONDS


def complete_scan(repo: ProjectRepository, project_id: int) -> None:
    repo.update_project(project_id, status="completed")
    LOG.info("scan_completed", extra={"project_id": project_id})


def start_scan(repo: ProjectRepository, delay: Optional[float] = None) -> bool:
    """Mark the current project as scanning and schedule its completion.

    Must be called from a running event loop. Returns False when there is no
    current project to scan.
    """
    project = repo.get_current_project()
    if not project:
        return False
    repo.update_project(project.id, status="scanning", last_scanned=datetime.now(UTC))
    wait = scan_delay_seconds() if delay is None else delay
    asyncio.get_running_loop().call_later(wait, complete_scan, repo, project.id)
    LOG.info("scan_started", extra={"project_id": project.id, "delay_s": wait})
    return True
