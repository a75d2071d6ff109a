"""
Result Types

Types returned by the session controller and the cost telemetry layer.

Session Models:
    - OutcomeKind: What happened to one submitted command line
    - CommandOutcome: Full result of one submitted command line
    - GuideResult: Result of a tutorial request

Cost Telemetry Models:
    - CostUsageRecord: One provider call
    - StageCostBreakdown: Aggregates for one telemetry stage
    - CostBreakdown: Aggregates for a whole request
    - CostDebugReport: Breakdown plus pricing metadata and warnings
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# -----------------------------------------------------------------------------
# Session Models
# -----------------------------------------------------------------------------


class OutcomeKind(str, Enum):
    """Classification of a submitted command line."""

    RESPONSE = "response"
    """Remote command answered by the response engine"""

    NAVIGATED = "navigated"
    """Local navigation committed a new current path"""

    NO_SUCH_DIRECTORY = "no_such_directory"
    """Navigation target is missing or is a file"""

    REMOTE_ERROR = "remote_error"
    """Response engine call failed"""

    IGNORED = "ignored"
    """Empty or whitespace-only input"""

    BUSY = "busy"
    """Dropped because a remote call was already in flight"""

    NOT_READY = "not_ready"
    """Dropped because the session never initialized"""


class CommandOutcome(BaseModel):
    """
    Result of submitting one command line to a session.

    Attributes:
        kind: What happened
        command: The trimmed command line as submitted
        output: Text to display (response text or error message)
        warning: Non-fatal warning, e.g. the engine context could not be refreshed
        cwd: Current path segments after the command settled
    """

    kind: OutcomeKind
    command: str = ""
    output: str | None = None
    warning: str | None = None
    cwd: list[str] = Field(default_factory=list)

    @property
    def is_error(self) -> bool:
        """True for outcomes that should be displayed as errors."""
        return self.kind in (OutcomeKind.NO_SUCH_DIRECTORY, OutcomeKind.REMOTE_ERROR)


class GuideResult(BaseModel):
    """
    Result of a tutorial request.

    Attributes:
        goal: The goal as submitted
        markdown: Generated guide (markdown), None on failure or empty goal
        error: User-facing message when generation failed
    """

    goal: str
    markdown: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.markdown is not None


# -----------------------------------------------------------------------------
# Cost Telemetry Models
# -----------------------------------------------------------------------------


class CostUsageRecord(BaseModel):
    """Usage and estimated cost for a single provider call."""

    provider: str
    model: str
    operation: str
    stage: str
    input_tokens: int
    output_tokens: int
    total_tokens: int
    estimated_cost_usd: float
    latency_ms: int
    estimated: bool
    metadata: dict[str, Any] = {}


class StageCostBreakdown(BaseModel):
    """Aggregated usage for one telemetry stage."""

    stage: str
    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    estimated_cost_usd: float = 0.0
    total_latency_ms: int = 0


class CostBreakdown(BaseModel):
    """Aggregated usage for a whole session."""

    total_calls: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_tokens: int = 0
    total_estimated_cost_usd: float = 0.0
    total_latency_ms: int = 0
    by_stage: list[StageCostBreakdown] = []


class CostDebugReport(BaseModel):
    """Cost breakdown with pricing metadata."""

    enabled: bool
    pricing_version: str
    breakdown: CostBreakdown
    warnings: list[str] = []
