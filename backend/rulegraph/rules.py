import math
from typing import Any, Callable, Dict, Optional

from json_logic import jsonLogic

from .errors import EvaluationError, EvaluationTypeError

# (expression, data) -> value
LogicEvaluator = Callable[[Dict[str, Any], Dict[str, Any]], Any]


class RulesEngine:
    """Gates and weighs nodes by evaluating their JsonLogic expressions.

    Every evaluator invocation is wrapped so that a malformed expression (unknown
    operator, bad arity, evaluator bug) surfaces as an ``EvaluationError`` that
    carries the offending rule and data, never as a raw exception.
    """

    def __init__(self, evaluator: Optional[LogicEvaluator] = None):
        self.evaluator = evaluator or jsonLogic

    def is_reachable(
        self,
        rules: Optional[Dict[str, Any]],
        data: Dict[str, Any],
        node_id: Optional[str] = None,
    ) -> bool:
        if not rules:
            return True
        result = self._apply(rules, data, "rules", node_id)
        if isinstance(result, bool):
            return result
        raise EvaluationTypeError(rules, data, result, field="rules", node_id=node_id)

    def resolve_weight(
        self,
        weight: int,
        weight_rules: Optional[Dict[str, Any]],
        data: Dict[str, Any],
        node_id: Optional[str] = None,
    ) -> int:
        if not weight_rules:
            return weight
        result = self._apply(weight_rules, data, "weight_rules", node_id)
        # bool is an int subclass but never a weight
        if isinstance(result, (int, float)) and not isinstance(result, bool):
            if isinstance(result, float) and not math.isfinite(result):
                raise EvaluationTypeError(weight_rules, data, result, field="weight_rules", node_id=node_id)
            return int(result)
        raise EvaluationTypeError(weight_rules, data, result, field="weight_rules", node_id=node_id)

    def _apply(self, rule: Dict[str, Any], data: Dict[str, Any], field: str, node_id: Optional[str]) -> Any:
        try:
            return self.evaluator(rule, data)
        except Exception as exc:
            raise EvaluationError(rule, data, field=field, node_id=node_id) from exc
