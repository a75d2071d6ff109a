"""
Type Definitions

Pydantic models and small value types for all data structures.

File System Models:
    - Directory, File, DirectoryNode - Simulated tree nodes
    - ResolvedPath, DirectoryEntry - Path resolution and listing results

Session Models:
    - OutcomeKind, CommandOutcome - Result of a submitted command line
    - GuideResult - Result of a tutorial request

Cost Telemetry Models:
    - CostUsageRecord, StageCostBreakdown, CostBreakdown, CostDebugReport
"""

from shell_tutor.types.filesystem import (
    Directory,
    DirectoryEntry,
    DirectoryNode,
    File,
    ResolvedPath,
)
from shell_tutor.types.results import (
    CommandOutcome,
    CostBreakdown,
    CostDebugReport,
    CostUsageRecord,
    GuideResult,
    OutcomeKind,
    StageCostBreakdown,
)

__all__ = [
    # File System Models
    "Directory",
    "DirectoryEntry",
    "DirectoryNode",
    "File",
    "ResolvedPath",
    # Session Models
    "CommandOutcome",
    "GuideResult",
    "OutcomeKind",
    # Cost Telemetry Models
    "CostBreakdown",
    "CostDebugReport",
    "CostUsageRecord",
    "StageCostBreakdown",
]
