"""Configuration models and primitives for peergraph.

- **Primitives** (`primitives.py`): frozen `ExecutionOptions` and `RankOptions`
- **CLI Models** (`models.py`): Pydantic `AnalysisConfig` for boundary validation
"""

from peergraph.config.models import AnalysisConfig, MetricName
from peergraph.config.primitives import (
    DEFAULT_DAMPING,
    DEFAULT_ITERATIONS,
    DEFAULT_THRESHOLD,
    DEFAULT_TOP_N,
    MAX_CONVERGENCE_ITERATIONS,
    ExecutionOptions,
    ExecutorKind,
    RankOptions,
)

__all__ = [
    "DEFAULT_DAMPING",
    "DEFAULT_ITERATIONS",
    "DEFAULT_THRESHOLD",
    "DEFAULT_TOP_N",
    "MAX_CONVERGENCE_ITERATIONS",
    "AnalysisConfig",
    "ExecutionOptions",
    "ExecutorKind",
    "MetricName",
    "RankOptions",
]
