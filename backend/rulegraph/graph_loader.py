import json
import logging
import os
from typing import Dict, Optional

import yaml
from pydantic import ValidationError

from .errors import GraphDefinitionError
from .models import Graph, GraphSpec, Node

logger = logging.getLogger(__name__)

GRAPH_EXTENSIONS = (".yaml", ".yml", ".json")


class GraphLoader:
    def __init__(self, graphs_dir: str):
        self.graphs_dir = graphs_dir
        self.graphs: Dict[str, Graph] = {}

    def load_all(self) -> Dict[str, Graph]:
        # Reset state to allow for reloads
        self.graphs = {}

        if not os.path.isdir(self.graphs_dir):
            logger.warning("Graph directory %s does not exist", self.graphs_dir)
            return self.graphs

        for root, _, files in sorted(os.walk(self.graphs_dir)):
            for file in sorted(files):
                if file.endswith(GRAPH_EXTENSIONS):
                    graph = self.load_file(os.path.join(root, file))
                    if graph.name in self.graphs:
                        raise GraphDefinitionError(f"Duplicate graph name: {graph.name}")
                    self.graphs[graph.name] = graph
        logger.info("Loaded %d graphs from %s", len(self.graphs), self.graphs_dir)
        return self.graphs

    def load_file(self, graph_path: str) -> Graph:
        with open(graph_path, "r") as f:
            try:
                if graph_path.endswith(".json"):
                    raw = json.load(f)
                else:
                    raw = yaml.safe_load(f)
            except (yaml.YAMLError, ValueError) as exc:
                raise GraphDefinitionError(f"Could not parse {graph_path}: {exc}") from exc

        try:
            spec = GraphSpec(**(raw or {}))
        except (TypeError, ValidationError) as exc:
            raise GraphDefinitionError(f"Invalid graph definition in {graph_path}: {exc}") from exc

        default_name = os.path.splitext(os.path.basename(graph_path))[0]
        return build_graph(spec, default_name)

    def get_graph(self, name: str) -> Optional[Graph]:
        return self.graphs.get(name)


def build_graph(spec: GraphSpec, default_name: str) -> Graph:
    """Link node specs into shared ``Node`` instances.

    Transitions reference node ids, so several parents can share a child and a
    definition may describe a cycle; the solver decides what to do with those.
    """
    name = spec.name or default_name
    nodes: Dict[str, Node] = {}
    for node_spec in spec.nodes:
        if node_spec.id in nodes:
            raise GraphDefinitionError(f"Duplicate node ID in graph {name}: {node_spec.id}")
        nodes[node_spec.id] = Node(
            id=node_spec.id,
            payload=node_spec.payload,
            weight=node_spec.weight,
            rules=node_spec.rules,
            weight_rules=node_spec.weight_rules,
        )

    for node_spec in spec.nodes:
        node = nodes[node_spec.id]
        for target in node_spec.transitions:
            if target not in nodes:
                raise GraphDefinitionError(f"Transition target not found in graph {name}: {node_spec.id} -> {target}")
            node.transitions.append(nodes[target])

    for start_id in spec.start:
        if start_id not in nodes:
            raise GraphDefinitionError(f"Start node not found in graph {name}: {start_id}")

    return Graph(
        name=name,
        description=spec.description,
        start=[nodes[start_id] for start_id in spec.start],
        nodes=nodes,
    )
