from typing import Any, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from motion_control.config import Settings
from motion_control.jobs.provider import InferenceProvider, ProviderPrediction
from motion_control.main import create_app


class FakeProvider(InferenceProvider):
    """In-memory stand-in for the inference service."""

    def __init__(self):
        self.predictions: Dict[str, ProviderPrediction] = {}
        self.submissions: List[Tuple[str, Dict[str, Any]]] = []
        self.fetch_count = 0
        self.submit_error: Optional[Exception] = None
        self.fetch_error: Optional[Exception] = None

    async def submit(self, model_ref, input):
        if self.submit_error is not None:
            raise self.submit_error
        self.submissions.append((model_ref, input))
        prediction = ProviderPrediction(id=f"pred-{len(self.submissions)}", status="starting")
        self.predictions[prediction.id] = prediction
        return prediction

    async def fetch(self, prediction_id):
        self.fetch_count += 1
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.predictions[prediction_id].model_copy()

    def set_state(self, prediction_id, status, output=None, error=None):
        self.predictions[prediction_id] = ProviderPrediction(
            id=prediction_id, status=status, output=output, error=error,
        )


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        upload_dir=str(tmp_path / "uploads"),
        replicate_api_token="test-token",
        max_upload_mb=1,
    )


@pytest.fixture
def app(settings, provider):
    return create_app(settings=settings, provider=provider)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
