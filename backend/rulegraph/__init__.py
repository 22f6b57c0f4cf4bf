from .engine import RuleGraphEngine, rank, solve
from .errors import (
    CycleDetected,
    EvaluationError,
    EvaluationTypeError,
    GraphDefinitionError,
    RuleGraphError,
)
from .models import Node, RankedNode

__all__ = [
    "CycleDetected",
    "EvaluationError",
    "EvaluationTypeError",
    "GraphDefinitionError",
    "Node",
    "RankedNode",
    "RuleGraphEngine",
    "RuleGraphError",
    "rank",
    "solve",
]
