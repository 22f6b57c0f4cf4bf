from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Node(BaseModel):
    id: str
    payload: Any = None
    # Children reachable from this node. Empty means terminal.
    transitions: List["Node"] = Field(default_factory=list)
    # Ranking weight used when weight_rules is absent.
    weight: int = 0
    # JsonLogic expressions (https://jsonlogic.com)
    rules: Optional[Dict[str, Any]] = None
    weight_rules: Optional[Dict[str, Any]] = None

    @property
    def is_terminal(self) -> bool:
        return not self.transitions

    def __repr__(self) -> str:
        # Transitions may loop back to this node.
        return f"Node(id={self.id!r}, transitions={[t.id for t in self.transitions]!r})"

    __str__ = __repr__


Node.model_rebuild()


class RankedNode(BaseModel):
    """A solved node paired with its resolved weight.

    The caller's ``Node.weight`` is left untouched; the effective weight lives here.
    """

    node: Node
    weight: int

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def payload(self) -> Any:
        return self.node.payload

    def to_result(self) -> "RankedResult":
        return RankedResult(id=self.node.id, payload=self.node.payload, weight=self.weight)


class Graph(BaseModel):
    name: str
    description: Optional[str] = None
    start: List[Node] = Field(default_factory=list)
    nodes: Dict[str, Node] = Field(default_factory=dict)


class GraphSummary(BaseModel):
    name: str
    description: Optional[str] = None
    node_count: int
    start: List[str] = Field(default_factory=list)


class NodeSpec(BaseModel):
    id: str
    payload: Any = None
    weight: int = 0
    rules: Optional[Dict[str, Any]] = None
    weight_rules: Optional[Dict[str, Any]] = None
    # Ids of other nodes in the same definition.
    transitions: List[str] = Field(default_factory=list)


class GraphSpec(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    start: List[str] = Field(default_factory=list)
    nodes: List[NodeSpec] = Field(default_factory=list)


class SolveRequest(GraphSpec):
    data: Dict[str, Any] = Field(default_factory=dict)


class GraphSolveRequest(BaseModel):
    data: Dict[str, Any] = Field(default_factory=dict)


class RankedResult(BaseModel):
    id: str
    payload: Any = None
    weight: int


class SolveResponse(BaseModel):
    results: List[RankedResult] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    code: str
    message: str
