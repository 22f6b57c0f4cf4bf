import json
import sys
from typing import List

from rulegraph.config import get_settings
from rulegraph.errors import GraphDefinitionError
from rulegraph.graph_loader import GraphLoader


def _rule(rule) -> str:
    return json.dumps(rule, sort_keys=True) if rule else ""


def validate(graphs_dir: str) -> List[str]:
    loader = GraphLoader(graphs_dir)
    graphs = loader.load_all()

    # Generate Markdown Table
    lines = [
        "# Rule Graph Table\n",
        "| Graph | Node | Weight | Rules | Weight Rules | Transitions |",
        "| :--- | :--- | :--- | :--- | :--- | :--- |",
    ]
    for name in sorted(graphs):
        for node in sorted(graphs[name].nodes.values(), key=lambda n: n.id):
            transitions = ", ".join(t.id for t in node.transitions)
            lines.append(
                f"| {name} | {node.id} | {node.weight} | {_rule(node.rules)} | {_rule(node.weight_rules)} | {transitions} |"
            )
    return lines


def main(argv: List[str]) -> int:
    graphs_dir = argv[0] if argv else get_settings().graphs_dir
    try:
        lines = validate(graphs_dir)
    except GraphDefinitionError as e:
        print(f"Invalid graph definition: {e}", file=sys.stderr)
        return 1
    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
