"""
ThreatLens - API Tests

Tests for API routes using the FastAPI test client.
"""

import pytest
from fastapi.testclient import TestClient

from app.services.detection import init_threat_detector, reset_threat_detector

from conftest import StubClassifier

DDOS_EXAMPLE = "Plan DDoS on examplebank.com this Friday at 3 AM UTC"


@pytest.fixture
def client():
    """Test client whose detector uses the stub classifier."""
    from app.main import app

    init_threat_detector(classifier=StubClassifier())
    yield TestClient(app)
    reset_threat_detector()


class TestHealthRoutes:
    """Tests for health endpoints."""

    def test_root(self, client):
        """Test root endpoint."""
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "ThreatLens API"

    def test_health(self, client):
        """Test basic health check."""
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready_reports_model_status(self, client):
        """Readiness is degraded until the classifier loads."""
        before = client.get("/api/v1/health/ready").json()
        assert before["status"] == "degraded"
        assert before["model"] == {"isReady": False, "isLoading": False}
        assert before["checks"]["cache"]["size"] == 0

        client.post("/api/v1/predict", json={"text": DDOS_EXAMPLE})

        after = client.get("/api/v1/health/ready").json()
        assert after["status"] == "ready"
        assert after["model"]["isReady"] is True
        assert after["checks"]["cache"]["size"] == 1


class TestPredictRoutes:
    """Tests for prediction endpoints."""

    def test_predict(self, client):
        """Test single prediction uses camelCase fields."""
        response = client.post("/api/v1/predict", json={"text": DDOS_EXAMPLE})

        assert response.status_code == 200
        data = response.json()
        assert data["label"] == "threat"
        assert data["riskScore"] == 1.0
        assert data["riskLevel"] == "high"
        assert data["source"] == "model"
        assert data["entities"]["targets"] == ["examplebank.com"]
        assert "processingTime" in data

    def test_predict_missing_text(self, client):
        """Test request validation."""
        response = client.post("/api/v1/predict", json={})
        assert response.status_code == 422

    def test_predict_text_too_long(self, client):
        """Test oversized text is rejected."""
        response = client.post("/api/v1/predict", json={"text": "a" * 5001})
        assert response.status_code == 413

    def test_batch(self, client):
        """Test batch prediction keeps order and count."""
        response = client.post(
            "/api/v1/predict/batch",
            json={"texts": [DDOS_EXAMPLE, "Team lunch next Friday", None]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert len(data["predictions"]) == 3
        assert data["predictions"][0]["entities"]["targets"] == ["examplebank.com"]

    def test_batch_too_large(self, client):
        """Test oversized batch is rejected."""
        response = client.post("/api/v1/predict/batch", json={"texts": [""] * 1001})
        assert response.status_code == 413
        assert "Batch too large" in response.json()["detail"]

    def test_batch_item_too_long(self, client):
        """Each batch item is held to the text length limit."""
        response = client.post(
            "/api/v1/predict/batch",
            json={"texts": [DDOS_EXAMPLE, "a" * 5001]},
        )
        assert response.status_code == 413

    def test_batch_csv_with_labels(self, client):
        """Labelled CSV rows produce accuracy metrics."""
        content = (
            "text,label\n"
            f"{DDOS_EXAMPLE},threat\n"
            "Reminder: team meeting tomorrow,benign\n"
        )
        response = client.post(
            "/api/v1/predict/batch/csv",
            files={"file": ("batch.csv", content.encode(), "text/csv")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert data["results"][0]["id"] == "message_1"
        assert data["results"][0]["originalLabel"] == "threat"
        assert data["metrics"]["total"] == 2
        assert data["metrics"]["correct"] == 1
        assert data["metrics"]["confusionMatrix"] == [[0, 1], [0, 1]]

    def test_batch_csv_without_labels(self, client):
        """Unlabelled CSV has no metrics."""
        response = client.post(
            "/api/v1/predict/batch/csv",
            files={"file": ("batch.csv", b"message\nhello there\n", "text/csv")},
        )

        assert response.status_code == 200
        assert response.json()["metrics"] is None

    def test_batch_csv_download(self, client):
        """Test results can be downloaded as CSV."""
        response = client.post(
            "/api/v1/predict/batch/csv?download=true",
            files={"file": ("batch.csv", f"text\n{DDOS_EXAMPLE}\n".encode(), "text/csv")},
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text.splitlines()[0].startswith("id,text,label,confidence")

    def test_batch_csv_missing_column(self, client):
        """Test CSV without a text column is rejected."""
        response = client.post(
            "/api/v1/predict/batch/csv",
            files={"file": ("batch.csv", b"id,label\n1,threat\n", "text/csv")},
        )
        assert response.status_code == 422

    def test_batch_csv_row_too_long(self, client):
        """CSV rows are held to the text length limit."""
        content = "text\n" + "a" * 5001 + "\n"
        response = client.post(
            "/api/v1/predict/batch/csv",
            files={"file": ("batch.csv", content.encode(), "text/csv")},
        )
        assert response.status_code == 413


class TestDatasetRoutes:
    """Tests for dataset and evaluation endpoints."""

    def test_samples(self, client):
        """Test the sample messages endpoint."""
        response = client.get("/api/v1/dataset/samples")

        assert response.status_code == 200
        assert len(response.json()) == 6

    def test_synthetic_seeded(self, client):
        """The same seed returns the same dataset."""
        first = client.get("/api/v1/dataset/synthetic?count=20&seed=1").json()
        second = client.get("/api/v1/dataset/synthetic?count=20&seed=1").json()

        assert len(first) == 20
        assert [m["text"] for m in first] == [m["text"] for m in second]

    def test_synthetic_invalid_ratio(self, client):
        """Test out-of-range ratio is rejected."""
        response = client.get("/api/v1/dataset/synthetic?threat_ratio=2")
        assert response.status_code == 422

    def test_synthetic_too_large(self, client):
        """Test a dataset above the batch limit is rejected."""
        response = client.get("/api/v1/dataset/synthetic?count=1001")

        assert response.status_code == 413
        assert "Batch too large" in response.json()["detail"]

    def test_synthetic_csv(self, client):
        """Test the CSV dataset download."""
        response = client.get("/api/v1/dataset/synthetic.csv?count=5&seed=3")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.splitlines()
        assert lines[0] == "id,text,label,type,timestamp"
        assert len(lines) == 6

    def test_evaluate_synthetic(self, client):
        """Test evaluation over a generated dataset."""
        response = client.post("/api/v1/evaluate", json={"count": 20, "seed": 5})

        assert response.status_code == 200
        data = response.json()
        assert data["metrics"]["total"] == 20
        assert 0.0 <= data["metrics"]["accuracy"] <= 1.0
        assert data["results"] is None

    def test_evaluate_messages(self, client):
        """Test evaluation over supplied messages with per-message results."""
        response = client.post("/api/v1/evaluate", json={
            "messages": [
                {
                    "id": "m1",
                    "text": DDOS_EXAMPLE,
                    "label": "threat",
                    "type": "ddos",
                    "timestamp": "2025-10-30T00:00:00Z",
                },
            ],
            "include_results": True,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["metrics"]["total"] == 1
        assert data["metrics"]["correct"] == 1
        assert data["results"][0]["id"] == "m1"
