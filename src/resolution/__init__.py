"""Date resolution and toolchain naming."""

from .models import AttemptStatus, DateAttempt, ResolutionOutcome, ResolutionStatus
from .naming import ToolchainSpec, format_components, parse_toolchain, toolchain_name
from .resolver import Resolver, utc_today

__all__ = [
    "AttemptStatus",
    "DateAttempt",
    "ResolutionOutcome",
    "ResolutionStatus",
    "Resolver",
    "ToolchainSpec",
    "format_components",
    "parse_toolchain",
    "toolchain_name",
    "utc_today",
]
