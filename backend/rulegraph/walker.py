import collections
import logging
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

from .errors import CycleDetected
from .models import Node
from .rules import RulesEngine

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 10


class _Arena:
    """Traversal-local interning of nodes to stable integer indices."""

    def __init__(self):
        self.nodes: List[Node] = []
        self._index: Dict[int, int] = {}

    def index_of(self, node: Node) -> int:
        key = id(node)
        idx = self._index.get(key)
        if idx is None:
            idx = len(self.nodes)
            # Holding the reference keeps id(node) stable for the whole walk.
            self.nodes.append(node)
            self._index[key] = idx
        return idx


class _Entry:
    __slots__ = ("index", "node", "ancestors", "trail")

    def __init__(self, index: int, node: Node, ancestors: FrozenSet[int], trail: Tuple[int, ...] = ()):
        self.index = index
        self.node = node
        # Every node known to reach this one, and the first path it was found on.
        self.ancestors = ancestors
        self.trail = trail


class FrontierWalker:
    """Expands a frontier of nodes through their gated transitions.

    Each step gates every frontier node, collects the terminal ones and replaces
    the routing ones with their passing children. The walk stops once a step
    yields no children. A node met again on its own ancestry raises
    ``CycleDetected``; ``max_rounds`` bounds the number of expansion steps.
    """

    def __init__(self, rules_engine: Optional[RulesEngine] = None, max_rounds: int = DEFAULT_MAX_ROUNDS):
        if max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")
        self.rules_engine = rules_engine or RulesEngine()
        self.max_rounds = max_rounds

    def walk(self, start: Sequence[Node], data: Dict[str, Any]) -> List[Node]:
        arena = _Arena()
        gates: Dict[int, bool] = {}
        collected: Dict[int, Node] = {}

        frontier: Dict[int, _Entry] = {}
        for node in start:
            idx = arena.index_of(node)
            if idx not in frontier:
                frontier[idx] = _Entry(idx, node, frozenset())

        rounds = 0
        while frontier:
            next_frontier = self._step(frontier, data, arena, gates, collected)
            if not next_frontier:
                break
            rounds += 1
            if rounds > self.max_rounds:
                logger.warning(
                    "Walk stopped after %d rounds with %d nodes still in the frontier; returning %d collected nodes",
                    self.max_rounds,
                    len(next_frontier),
                    len(collected),
                )
                break
            logger.debug("Round %d: %d nodes in frontier", rounds, len(next_frontier))
            frontier = next_frontier

        return list(collected.values())

    def _step(
        self,
        frontier: Dict[int, _Entry],
        data: Dict[str, Any],
        arena: _Arena,
        gates: Dict[int, bool],
        collected: Dict[int, Node],
    ) -> Dict[int, _Entry]:
        next_frontier: Dict[int, _Entry] = {}
        for entry in frontier.values():
            node = entry.node
            if not self._gate(entry.index, node, data, gates):
                continue
            if node.is_terminal:
                collected.setdefault(entry.index, node)
                continue

            lineage = entry.ancestors | {entry.index}
            for child in node.transitions:
                child_idx = arena.index_of(child)
                if child_idx in lineage:
                    raise CycleDetected(self._cycle_path(arena, gates, entry, child_idx))
                if not self._gate(child_idx, child, data, gates):
                    continue
                merged = next_frontier.get(child_idx)
                if merged is None:
                    next_frontier[child_idx] = _Entry(child_idx, child, lineage, entry.trail + (entry.index,))
                else:
                    # Every ancestor on either path still reaches the child.
                    merged.ancestors = merged.ancestors | lineage
        return next_frontier

    def _gate(self, idx: int, node: Node, data: Dict[str, Any], gates: Dict[int, bool]) -> bool:
        passed = gates.get(idx)
        if passed is None:
            passed = self.rules_engine.is_reachable(node.rules, data, node_id=node.id)
            gates[idx] = passed
        return passed

    @staticmethod
    def _cycle_path(arena: _Arena, gates: Dict[int, bool], entry: _Entry, revisited: int) -> List[str]:
        path = entry.trail + (entry.index,)
        if revisited in path:
            path = path[path.index(revisited):]
        else:
            # The ancestor came in through a merged path; search the gated nodes for it.
            path = _path_between(arena, gates, revisited, entry.index)
        return [arena.nodes[i].id for i in path] + [arena.nodes[revisited].id]


def _path_between(arena: _Arena, gates: Dict[int, bool], source: int, target: int) -> Tuple[int, ...]:
    parents: Dict[int, int] = {source: source}
    queue = collections.deque([source])
    while queue:
        curr = queue.popleft()
        if curr == target:
            path = [curr]
            while curr != source:
                curr = parents[curr]
                path.append(curr)
            return tuple(reversed(path))
        for child in arena.nodes[curr].transitions:
            child_idx = arena.index_of(child)
            if child_idx not in parents and gates.get(child_idx):
                parents[child_idx] = curr
                queue.append(child_idx)
    return (source, target)
