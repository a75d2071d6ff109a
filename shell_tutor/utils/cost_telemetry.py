"""
Session Cost Telemetry

Tracks estimated API spend for one tutor session. The CLI attaches a
CostCollector for the whole session; providers report each call through
record_usage() and tag it with the stage that is active at the time.

Stages:
    command - one remote terminal command
    guide   - one tutorial request
    unknown - calls made outside any stage

Usage:
    >>> collector = CostCollector(warn_threshold_usd=0.05)
    >>> with telemetry_collector(collector):
    ...     await controller.submit("ls")
    >>> collector.summary().breakdown.total_calls
    1
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar

from shell_tutor.config.pricing import PRICING_VERSION
from shell_tutor.types.results import (
    CostBreakdown,
    CostDebugReport,
    CostUsageRecord,
    StageCostBreakdown,
)

logger = logging.getLogger(__name__)

_COLLECTOR: ContextVar[CostCollector | None] = ContextVar(
    "shell_tutor_session_collector",
    default=None,
)
_STAGE: ContextVar[str] = ContextVar("shell_tutor_session_stage", default="unknown")


class CostCollector:
    """
    Running cost tally for one session.

    Stage totals are updated as each call is recorded, so the session total
    is always current. Crossing the warning threshold is logged once, when
    it happens, and repeated in the final summary.

    Args:
        warn_threshold_usd: Session spend that triggers a warning
    """

    def __init__(self, *, warn_threshold_usd: float | None = None) -> None:
        self._warn_threshold_usd = warn_threshold_usd
        self._records: list[CostUsageRecord] = []
        self._stages: dict[str, StageCostBreakdown] = {}
        self._unpriced: set[tuple[str, str]] = set()
        self._threshold_logged = False

    @property
    def records(self) -> list[CostUsageRecord]:
        return list(self._records)

    @property
    def session_cost_usd(self) -> float:
        return sum(stage.estimated_cost_usd for stage in self._stages.values())

    @property
    def over_threshold(self) -> bool:
        return (
            self._warn_threshold_usd is not None
            and self.session_cost_usd >= self._warn_threshold_usd
        )

    def add(self, record: CostUsageRecord) -> None:
        """Record one provider call against its stage."""
        self._records.append(record)

        stage = self._stages.setdefault(record.stage, StageCostBreakdown(stage=record.stage))
        stage.calls += 1
        stage.input_tokens += record.input_tokens
        stage.output_tokens += record.output_tokens
        stage.total_tokens += record.total_tokens
        stage.estimated_cost_usd += record.estimated_cost_usd
        stage.total_latency_ms += record.latency_ms

        if record.metadata.get("pricing_found") is False:
            self._unpriced.add((record.model, record.stage))

        if self.over_threshold and not self._threshold_logged:
            self._threshold_logged = True
            logger.warning(
                f"Session cost ${self.session_cost_usd:.6f} reached the "
                f"${self._warn_threshold_usd:.6f} warning threshold"
            )

    def summary(self) -> CostDebugReport:
        """Session totals, stages ordered by spend (highest first)."""
        stages = sorted(
            (stage.model_copy() for stage in self._stages.values()),
            key=lambda s: s.estimated_cost_usd,
            reverse=True,
        )
        breakdown = CostBreakdown(
            total_calls=sum(s.calls for s in stages),
            total_input_tokens=sum(s.input_tokens for s in stages),
            total_output_tokens=sum(s.output_tokens for s in stages),
            total_tokens=sum(s.total_tokens for s in stages),
            total_estimated_cost_usd=sum(s.estimated_cost_usd for s in stages),
            total_latency_ms=sum(s.total_latency_ms for s in stages),
            by_stage=stages,
        )

        warnings = [
            f"Missing pricing for model '{model}' in stage '{stage}'. "
            "Cost shown as 0.0 for those calls."
            for model, stage in sorted(self._unpriced)
        ]
        if self.over_threshold:
            warnings.append(
                f"Estimated session cost ${breakdown.total_estimated_cost_usd:.6f} "
                f"exceeded threshold ${self._warn_threshold_usd:.6f}."
            )

        return CostDebugReport(
            enabled=True,
            pricing_version=PRICING_VERSION,
            breakdown=breakdown,
            warnings=warnings,
        )


@contextmanager
def telemetry_collector(collector: CostCollector | None):
    """Attach a session collector; None disables telemetry."""
    token = _COLLECTOR.set(collector)
    try:
        yield
    finally:
        _COLLECTOR.reset(token)


@contextmanager
def telemetry_stage(stage: str):
    """Tag calls made inside the block with a stage name."""
    token = _STAGE.set(stage)
    try:
        yield
    finally:
        _STAGE.reset(token)


def current_stage() -> str:
    return _STAGE.get()


def record_usage(record: CostUsageRecord) -> None:
    """Report one call to the session collector, if one is attached."""
    collector = _COLLECTOR.get()
    if collector is not None:
        collector.add(record)
