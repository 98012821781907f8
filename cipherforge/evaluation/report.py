"""Structured evaluation report builder.

Aggregates roundtrip, SAC and CBC propagation results into a single
serializable report for JSON export and console display.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from .avalanche import PropagationResult, SACResult
from .roundtrip import RoundtripResult


@dataclass
class EvaluationReport:
    """Complete evaluation report aggregating all analysis results."""
    timestamp: str = ""
    roundtrip_results: List[RoundtripResult] = field(default_factory=list)
    sac_results: List[SACResult] = field(default_factory=list)
    propagation_results: List[PropagationResult] = field(default_factory=list)

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize full report for JSON export."""
        return {
            "timestamp": self.timestamp,
            "roundtrip": [r.to_dict() for r in self.roundtrip_results],
            "sac": [s.to_dict() for s in self.sac_results],
            "cbc_propagation": [p.to_dict() for p in self.propagation_results],
            "summary": {
                "configurations_tested": len(self.roundtrip_results),
                "roundtrip_all_pass": all(r.is_perfect for r in self.roundtrip_results),
                "sac_all_pass": all(s.passes_sac for s in self.sac_results),
                "cbc_propagation_holds": all(p.holds for p in self.propagation_results),
                "failing_configurations": self.failing_configurations(),
            },
        }

    def to_summary(self) -> str:
        """Human-readable summary for the console."""
        lines = [f"Evaluation Report - {self.timestamp}", "=" * 50]

        if self.roundtrip_results:
            rt_pass = sum(1 for r in self.roundtrip_results if r.is_perfect)
            lines.append(f"\nRoundtrip Tests: {rt_pass}/{len(self.roundtrip_results)} configurations pass")
            for r in self.roundtrip_results:
                lines.append(f"  {r.summary()}")

        if self.sac_results:
            sac_pass = sum(1 for s in self.sac_results if s.passes_sac)
            lines.append(f"\nSAC Analysis: {sac_pass}/{len(self.sac_results)} pass")
            for s in self.sac_results:
                lines.append(f"  {s.summary()}")

        if self.propagation_results:
            lines.append(f"\nCBC Propagation: {len(self.propagation_results)} runs")
            for p in self.propagation_results:
                lines.append(f"  {p.summary()}")

        return "\n".join(lines)

    def failing_configurations(self) -> List[str]:
        """Return "MODE/bits" labels with roundtrip failures."""
        return [f"{r.mode}/{r.key_size_bytes * 8}" for r in self.roundtrip_results if not r.is_perfect]

    @property
    def all_pass(self) -> bool:
        return (
            all(r.is_perfect for r in self.roundtrip_results)
            and all(s.passes_sac for s in self.sac_results)
            and all(p.holds for p in self.propagation_results)
        )
