"""End to end API tests for the AutoML wizard blueprint."""

from __future__ import annotations

from io import BytesIO

import pytest

from app import create_app
from plugins.automl_wizard.backend.advisor import MISSING_KEY_MESSAGE
from plugins.automl_wizard.backend.utils import reset_session_store

BASE = "/api/automl_wizard"

HOUSES_CSV = b"a,b,c\n1,2,x\n2,4,y\n,6,x\n4,8,y\n5,10,x\n5,10,x\n"


@pytest.fixture()
def client():
    reset_session_store()
    app = create_app("TestingConfig")
    yield app.test_client()
    reset_session_store()


def _upload(client, content: bytes = HOUSES_CSV, filename: str = "data.csv", **form):
    return client.post(
        f"{BASE}/datasets/load",
        data={"csv": (BytesIO(content), filename), **form},
        content_type="multipart/form-data",
    )


def _session_id(client, content: bytes = HOUSES_CSV) -> str:
    response = _upload(client, content)
    assert response.status_code == 200, response.get_json()
    return response.get_json()["data"]["session_id"]


def test_full_wizard_flow(client, monkeypatch):
    monkeypatch.delenv("AUTOML_WIZARD_TEST_GEMINI_KEY", raising=False)

    response = _upload(client)
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["shape"] == [6, 3]
    columns = {column["name"]: column for column in data["columns"]}
    assert columns["a"]["type"] == "number"
    assert columns["a"]["missing_count"] == 1
    assert columns["c"]["type"] == "string"
    assert data["head"][2]["a"] is None
    session_id = data["session_id"]

    response = client.post(
        f"{BASE}/clean",
        json={"session_id": session_id, "method": "fill_mean", "target_columns": ["a"]},
    )
    assert response.status_code == 200
    cleaned = response.get_json()["data"]
    assert cleaned["rows_removed"] == 1
    assert cleaned["shape"] == [5, 3]
    assert cleaned["head"][2]["a"] == pytest.approx(3.4)
    assert all(column["missing_count"] == 0 for column in cleaned["columns"])

    response = client.post(
        f"{BASE}/model/train",
        json={"session_id": session_id, "target": "b", "features": ["a"], "learning_rate": 0.05},
    )
    assert response.status_code == 200
    trained = response.get_json()["data"]
    assert trained["model"]["algorithm"] == "linear_regression"
    assert trained["model"]["features"] == ["a"]
    metrics = trained["metrics"]
    assert metrics["rows"] == {"train": 4, "test": 1}
    assert set(metrics) >= {"mse", "mae", "r2", "predictions"}

    response = client.post(f"{BASE}/model/advice", json={"session_id": session_id})
    assert response.status_code == 200
    assert response.get_json()["data"]["tips"] == MISSING_KEY_MESSAGE


def test_cleaning_restarts_from_uploaded_rows(client):
    session_id = _session_id(client)
    first = client.post(f"{BASE}/clean", json={"session_id": session_id, "method": "drop_rows", "target_columns": ["a"]})
    assert first.get_json()["data"]["shape"] == [4, 3]
    second = client.post(f"{BASE}/clean", json={"session_id": session_id, "method": "fill_mode", "target_columns": ["a"]})
    assert second.get_json()["data"]["shape"] == [5, 3]


def test_advice_requires_a_trained_model(client):
    session_id = _session_id(client)
    response = client.post(f"{BASE}/model/advice", json={"session_id": session_id})
    assert response.status_code == 400
    assert "Train a model" in response.get_json()["error"]["message"]


def test_unknown_session_is_rejected(client):
    response = client.post(f"{BASE}/clean", json={"session_id": "missing", "method": "fill_mean"})
    assert response.status_code == 400
    payload = response.get_json()
    assert payload["success"] is False
    assert payload["error"]["message"] == "Session expired or not found"


def test_invalid_payload_reports_field_errors(client):
    session_id = _session_id(client)
    response = client.post(
        f"{BASE}/model/train",
        json={"session_id": session_id, "target": "b", "features": ["a"], "split_ratio": 0.95},
    )
    assert response.status_code == 400
    error = response.get_json()["error"]
    assert error["code"] == "automl_wizard.invalid_request"
    assert error["details"]["errors"][0]["loc"] == ["split_ratio"]


def test_unknown_columns_are_rejected(client):
    session_id = _session_id(client)
    response = client.post(
        f"{BASE}/model/train", json={"session_id": session_id, "target": "b", "features": ["zzz"]}
    )
    assert response.status_code == 400
    assert "zzz" in response.get_json()["error"]["message"]


def test_target_cannot_be_a_feature(client):
    session_id = _session_id(client)
    response = client.post(
        f"{BASE}/model/train", json={"session_id": session_id, "target": "b", "features": ["a", "b"]}
    )
    assert response.status_code == 400


def test_too_few_rows_is_unprocessable(client):
    session_id = _session_id(client, b"x,y\n1,2\n2,4\n")
    response = client.post(
        f"{BASE}/model/train",
        json={"session_id": session_id, "target": "y", "features": ["x"], "split_ratio": 0.1},
    )
    assert response.status_code == 422
    assert response.get_json()["error"]["code"] == "automl_wizard.insufficient_data"


def test_header_only_csv_is_rejected(client):
    response = _upload(client, b"a,b\n")
    assert response.status_code == 400
    assert response.get_json()["error"]["message"] == "Could not parse CSV or file is empty."


def test_binary_upload_is_rejected(client):
    response = _upload(client, b"\x00\x01\x02", filename="data.bin")
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "automl_wizard.upload.invalid"


def test_missing_file_is_rejected(client):
    response = client.post(f"{BASE}/datasets/load", data={}, content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "automl_wizard.dataset.missing"


def test_system_config_reports_limits(client):
    response = client.get(f"{BASE}/system/config")
    assert response.status_code == 200
    upload = response.get_json()["data"]["upload"]
    assert upload["max_files"] == 1
    assert upload["max_columns"] == 200
    assert upload["max_train_steps"] == 5_000_000
    assert response.get_json()["data"]["session_ttl_minutes"] == 5


def test_advice_uses_key_from_configured_variable(client, monkeypatch):
    monkeypatch.setenv("AUTOML_WIZARD_TEST_GEMINI_KEY", "test-key")
    seen = {}

    class _Response:
        def raise_for_status(self):
            return None

        def json(self):
            return {"candidates": [{"content": {"parts": [{"text": "- Collect more rows"}]}}]}

    def _post(url, params=None, json=None, timeout=None):
        seen.update(params=params, timeout=timeout)
        return _Response()

    monkeypatch.setattr("plugins.automl_wizard.backend.advisor.requests.post", _post)
    session_id = _session_id(client)
    client.post(f"{BASE}/model/train", json={"session_id": session_id, "target": "b", "features": ["a"]})
    response = client.post(f"{BASE}/model/advice", json={"session_id": session_id})

    assert response.get_json()["data"]["tips"] == "- Collect more rows"
    assert seen == {"params": {"key": "test-key"}, "timeout": 5.0}


def test_cleaning_unknown_columns_is_a_no_op(client):
    session_id = _session_id(client)
    response = client.post(
        f"{BASE}/clean",
        json={"session_id": session_id, "method": "drop_rows", "target_columns": ["nope"]},
    )
    assert response.status_code == 200
    data = response.get_json()["data"]
    # Only the duplicate row goes.
    assert data["shape"] == [5, 3]
    assert data["rows_removed"] == 1


def test_upload_can_replace_an_existing_session(client):
    old_id = _session_id(client)
    response = _upload(client, b"x,y\n1,2\n2,4\n", replace_session=old_id)
    assert response.status_code == 200
    new_id = response.get_json()["data"]["session_id"]
    assert new_id != old_id

    stale = client.post(f"{BASE}/clean", json={"session_id": old_id, "method": "fill_mean"})
    assert stale.status_code == 400
    assert stale.get_json()["error"]["message"] == "Session expired or not found"


def test_oversized_training_job_is_unprocessable(client):
    client.application.config["PLUGIN_SETTINGS"]["automl_wizard"]["max_train_steps"] = 100
    session_id = _session_id(client)
    response = client.post(
        f"{BASE}/model/train",
        json={"session_id": session_id, "target": "b", "features": ["a"], "epochs": 500},
    )
    assert response.status_code == 422
    error = response.get_json()["error"]
    assert error["code"] == "automl_wizard.training_too_large"
    assert error["details"] == {"steps": 3000, "max_train_steps": 100}
