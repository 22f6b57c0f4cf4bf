import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import get_settings
from .models import Node, RankedNode
from .rules import LogicEvaluator, RulesEngine
from .walker import FrontierWalker

logger = logging.getLogger(__name__)


def rank(records: Iterable[RankedNode]) -> List[RankedNode]:
    # sorted() is stable with reverse=True, so equal weights keep discovery order.
    return sorted(records, key=lambda record: record.weight, reverse=True)


class RuleGraphEngine:
    """Solves rule-gated graphs: walk, weigh, then rank.

    A solve call is all-or-nothing. The first evaluation failure or detected
    cycle propagates to the caller and no partial result is returned.
    """

    def __init__(self, evaluator: Optional[LogicEvaluator] = None, max_rounds: Optional[int] = None):
        self.rules_engine = RulesEngine(evaluator)
        if max_rounds is None:
            max_rounds = get_settings().max_rounds
        self.walker = FrontierWalker(self.rules_engine, max_rounds=max_rounds)

    def solve(self, nodes: Sequence[Node], data: Optional[Dict[str, Any]] = None) -> List[RankedNode]:
        data = data if data is not None else {}
        reached = self.walker.walk(nodes, data)

        # Weight rules run only after the walk so they can never affect reachability.
        records = [
            RankedNode(
                node=node,
                weight=self.rules_engine.resolve_weight(node.weight, node.weight_rules, data, node_id=node.id),
            )
            for node in reached
        ]
        ranked = rank(records)
        logger.debug("Solved %d start nodes into %d results", len(nodes), len(ranked))
        return ranked


def solve(
    nodes: Sequence[Node],
    data: Optional[Dict[str, Any]] = None,
    evaluator: Optional[LogicEvaluator] = None,
    max_rounds: Optional[int] = None,
) -> List[RankedNode]:
    """Return the terminal nodes reachable from ``nodes`` under ``data``, heaviest first."""
    return RuleGraphEngine(evaluator=evaluator, max_rounds=max_rounds).solve(nodes, data)
