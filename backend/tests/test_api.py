from fastapi.testclient import TestClient

from rulegraph.main import app


client = TestClient(app)


def test_root():
    response = client.get("/")
    assert response.status_code == 200


def test_solve_inline_graph():
    payload = {
        "start": ["a"],
        "nodes": [
            {"id": "a", "transitions": ["b", "c"]},
            {"id": "b", "weight_rules": {"if": [{"var": ["is_smoker"]}, 100, 50]}},
            {"id": "c", "weight": 75, "payload": {"plan": "basic"}},
        ],
        "data": {"is_smoker": False},
    }
    response = client.post("/api/solve", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert [(r["id"], r["weight"]) for r in body["results"]] == [("c", 75), ("b", 50)]
    assert body["results"][0]["payload"] == {"plan": "basic"}


def test_solve_inline_diamond_returns_shared_node_once():
    payload = {
        "start": ["a"],
        "nodes": [
            {"id": "a", "transitions": ["b", "c"]},
            {"id": "b", "transitions": ["d"]},
            {"id": "c", "transitions": ["d"]},
            {"id": "d", "weight": 4},
        ],
    }
    response = client.post("/api/solve", json=payload)

    assert response.status_code == 200
    assert [r["id"] for r in response.json()["results"]] == ["d"]


def test_solve_inline_cycle_is_reported():
    payload = {
        "start": ["a"],
        "nodes": [
            {"id": "a", "transitions": ["b"]},
            {"id": "b", "transitions": ["a"]},
        ],
    }
    response = client.post("/api/solve", json=payload)

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "CYCLE_DETECTED"


def test_solve_inline_dangling_transition():
    payload = {"start": ["a"], "nodes": [{"id": "a", "transitions": ["ghost"]}]}
    response = client.post("/api/solve", json=payload)

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "GRAPH_DEFINITION_ERROR"


def test_solve_with_bad_rule_returns_error_detail():
    payload = {"start": ["a"], "nodes": [{"id": "a", "rules": {"no_such_op": [1]}}], "data": {}}
    response = client.post("/api/solve", json=payload)

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["code"] == "EVALUATION_ERROR"
    assert "no_such_op" in detail["message"]


def test_list_graphs():
    response = client.get("/api/graphs")

    assert response.status_code == 200
    by_name = {g["name"]: g for g in response.json()}
    assert by_name["life_insurance"]["start"] == ["standard", "smoker"]
    assert by_name["pie_selection"]["node_count"] == 4


def test_solve_named_graph():
    response = client.post("/api/graphs/life_insurance/solve", json={"data": {"is_smoker": False}})

    assert response.status_code == 200
    assert [r["id"] for r in response.json()["results"]] == ["term_life", "whole_life_basic"]


def test_solve_unknown_graph():
    response = client.post("/api/graphs/nope/solve", json={"data": {}})
    assert response.status_code == 404


def test_reload():
    response = client.post("/api/reload")
    assert response.status_code == 200
    assert response.json()["graph_count"] == 2
