import logging
from typing import Dict, List

from fastapi import APIRouter, HTTPException

from .config import get_settings
from .engine import RuleGraphEngine
from .errors import RuleGraphError
from .graph_loader import GraphLoader, build_graph
from .models import Graph, GraphSolveRequest, GraphSummary, Node, SolveRequest, SolveResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# Initialize graph loader and engine
settings = get_settings()
loader = GraphLoader(settings.graphs_dir)
graphs: Dict[str, Graph] = loader.load_all()
engine = RuleGraphEngine(max_rounds=settings.max_rounds)


def _reload_graphs():
    global graphs
    graphs = loader.load_all()


def _solve(nodes: List[Node], data: Dict) -> SolveResponse:
    try:
        ranked = engine.solve(nodes, data)
    except RuleGraphError as e:
        logger.info("Solve failed: %s", e)
        raise HTTPException(status_code=422, detail=e.to_detail().model_dump())
    return SolveResponse(results=[record.to_result() for record in ranked])


@router.post("/solve", response_model=SolveResponse)
async def solve(request: SolveRequest):
    try:
        graph = build_graph(request, "inline")
    except RuleGraphError as e:
        raise HTTPException(status_code=422, detail=e.to_detail().model_dump())
    return _solve(graph.start, request.data)


@router.get("/graphs", response_model=List[GraphSummary])
async def list_graphs():
    return [
        GraphSummary(
            name=graph.name,
            description=graph.description,
            node_count=len(graph.nodes),
            start=[node.id for node in graph.start],
        )
        for graph in graphs.values()
    ]


@router.post("/graphs/{name}/solve", response_model=SolveResponse)
async def solve_graph(name: str, request: GraphSolveRequest):
    graph = graphs.get(name)
    if graph is None:
        raise HTTPException(status_code=404, detail=f"Unknown graph: {name}")
    return _solve(graph.start, request.data)


@router.post("/reload")
async def reload_graphs():
    try:
        _reload_graphs()
    except RuleGraphError as e:
        raise HTTPException(status_code=422, detail=e.to_detail().model_dump())
    return {"status": "success", "graph_count": len(graphs)}
