from typing import Any, Dict, List, Optional

from .models import ErrorDetail


class RuleGraphError(Exception):
    """Base class for every failure surfaced by a solve call or the graph loader."""

    code = "RULEGRAPH_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(code=self.code, message=self.message)


class EvaluationError(RuleGraphError):
    """The logic evaluator could not process a rule expression."""

    code = "EVALUATION_ERROR"

    def __init__(
        self,
        rule: Dict[str, Any],
        data: Dict[str, Any],
        field: str = "rules",
        node_id: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.rule = rule
        self.data = data
        self.field = field
        self.node_id = node_id
        if message is None:
            message = f"error applying {field} {rule!r} with data {data!r}"
        if node_id is not None:
            message = f"node {node_id!r}: {message}"
        super().__init__(message)


class EvaluationTypeError(EvaluationError):
    """The evaluator succeeded but returned a value of the wrong type for the rule's role."""

    code = "EVALUATION_TYPE_ERROR"

    def __init__(
        self,
        rule: Dict[str, Any],
        data: Dict[str, Any],
        result: Any,
        field: str = "rules",
        node_id: Optional[str] = None,
    ):
        self.result = result
        expected = "a number" if field == "weight_rules" else "a boolean"
        kind = "rule weight" if field == "weight_rules" else "rule"
        message = f"{kind} did not return {expected}, got {type(result).__name__}"
        super().__init__(rule, data, field=field, node_id=node_id, message=message)


class CycleDetected(RuleGraphError):
    code = "CYCLE_DETECTED"

    def __init__(self, path: List[str]):
        self.path = list(path)
        super().__init__("cycle detected in graph: " + " -> ".join(self.path))


class GraphDefinitionError(RuleGraphError, ValueError):
    code = "GRAPH_DEFINITION_ERROR"
