"""Deterministic evaluation of the Twofish core.

Provides algebraic unit testing (roundtrip verification across key sizes and
modes), statistical diffusion analysis (SAC) and the CBC error-propagation
check, aggregated into a JSON-serializable report.

Research / education only. Do NOT use in production.
"""

from .roundtrip import RoundtripResult, RoundtripFailure, run_roundtrip_tests, run_all_configurations
from .avalanche import SACResult, PropagationResult, compute_sac, cbc_error_propagation
from .report import EvaluationReport

__all__ = [
    "RoundtripResult",
    "RoundtripFailure",
    "run_roundtrip_tests",
    "run_all_configurations",
    "SACResult",
    "PropagationResult",
    "compute_sac",
    "cbc_error_propagation",
    "EvaluationReport",
]
