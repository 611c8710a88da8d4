import pytest

from app import create_app


def _client(settings: dict | None = None):
    app = create_app("TestingConfig")
    if settings is not None:
        app.config["PLUGIN_SETTINGS"]["function_grapher"] = settings
    return app.test_client()


def test_vocabulary_endpoint():
    client = _client()
    resp = client.get("/api/function_grapher/vocabulary")
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["variable"] == "x"
    assert set(data["functions"]) == {"sin", "cos", "tan", "sqrt", "log", "ln", "abs"}
    assert data["constants"] == ["e", "pi"]
    assert "tan(x)" in data["examples"]


def test_compile_endpoint_returns_program():
    client = _client()
    resp = client.post("/api/function_grapher/compile", json={"expression": "2x + 1"})
    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["success"] is True
    assert payload["data"]["rpn"] == "2 x * 1 +"
    assert payload["data"]["tokens"][1]["kind"] == "variable"
    assert payload["data"]["normalized"] == "2 x + 1"
    assert resp.headers.get("X-Request-ID")


def test_compile_endpoint_reports_syntax_errors():
    client = _client()
    resp = client.post("/api/function_grapher/compile", json={"expression": "(2+3"})
    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "function_grapher.syntax_error"
    assert error["details"]["position"] == 0


def test_compile_endpoint_reports_lex_errors():
    client = _client()
    resp = client.post("/api/function_grapher/compile", json={"expression": "2 ? x"})
    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "function_grapher.lex_error"
    assert error["details"] == {"position": 2, "char": "?"}


def test_lenient_mode_can_be_requested_or_configured():
    client = _client()
    resp = client.post(
        "/api/function_grapher/compile",
        json={"expression": "2 ? x", "lex_mode": "lenient"},
    )
    assert resp.status_code == 200

    client = _client({"lex_mode": "lenient"})
    resp = client.post("/api/function_grapher/compile", json={"expression": "2 ? x"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["rpn"] == "2 x *"


def test_evaluate_endpoint():
    client = _client()
    resp = client.post("/api/function_grapher/evaluate", json={"expression": "2x", "x": 3})
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["result"] == 6
    assert data["domain_error"] is None


def test_evaluate_endpoint_domain_error_is_null_not_zero():
    client = _client()
    resp = client.post("/api/function_grapher/evaluate", json={"expression": "sqrt(x)", "x": -1})
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["result"] is None
    assert "sqrt" in data["domain_error"]


def test_sample_endpoint():
    client = _client()
    resp = client.post(
        "/api/function_grapher/sample",
        json={
            "expression": "x",
            "width": 10,
            "height": 10,
            "x_range": [-1, 1],
            "y_range": [-1, 1],
        },
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert len(data["points"]) == 11
    assert data["gaps"] == 0
    assert len(data["segments"]) == 1
    assert data["points"][0] == [0.0, pytest.approx(10.0)]
    assert data["window"] == {"x_range": [-1.0, 1.0], "y_range": [-1.0, 1.0]}


def test_sample_endpoint_emits_null_gaps():
    client = _client()
    resp = client.post(
        "/api/function_grapher/sample",
        json={"expression": "log(x)", "width": 4, "height": 4, "x_range": [-2, 2]},
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["points"][:3] == [None, None, None]
    assert data["gaps"] == 3


def test_sample_endpoint_enforces_canvas_limits():
    client = _client({"max_width": 100})
    resp = client.post(
        "/api/function_grapher/sample",
        json={"expression": "x", "width": 101, "height": 10},
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "function_grapher.invalid_request"


def test_sample_endpoint_rejects_inverted_window():
    client = _client()
    resp = client.post(
        "/api/function_grapher/sample",
        json={"expression": "x", "width": 10, "height": 10, "x_range": [1, -1]},
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "function_grapher.invalid_window"


def test_invalid_payload_is_rejected():
    client = _client()
    resp = client.post("/api/function_grapher/sample", json={"expression": "x", "width": 0})
    assert resp.status_code == 400
    payload = resp.get_json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "function_grapher.invalid_request"
    assert payload["error"]["details"]


def test_view_endpoints():
    client = _client()
    resp = client.get("/api/function_grapher/view/default")
    assert resp.get_json()["data"] == {"x_range": [-10.0, 10.0], "y_range": [-10.0, 10.0]}

    resp = client.post("/api/function_grapher/view/zoom", json={"factor": 1.2})
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["x_range"] == [pytest.approx(-12.0), pytest.approx(12.0)]

    resp = client.post("/api/function_grapher/view/zoom", json={"factor": -1})
    assert resp.status_code == 400

    resp = client.post("/api/function_grapher/view/zoom", json={"direction": "in"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["x_range"] == [pytest.approx(-8.0), pytest.approx(8.0)]

    resp = client.post(
        "/api/function_grapher/view/zoom",
        json={"direction": "out", "x_range": [0, 4], "y_range": [-1, 1]},
    )
    assert resp.get_json()["data"]["x_range"] == [pytest.approx(-0.4), pytest.approx(4.4)]

    resp = client.post("/api/function_grapher/view/zoom", json={})
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "function_grapher.invalid_request"
