"""Inference provider interface and the Replicate implementation."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import replicate
from pydantic import BaseModel

logger = logging.getLogger("motion_control.provider")


class ProviderPrediction(BaseModel):
    """Point-in-time view of a provider prediction."""
    id: str
    status: str
    output: Optional[str] = None
    error: Optional[str] = None


def normalize_output(output: Any) -> Optional[str]:
    """Reduce a provider output to a single URL (first item of list outputs)."""
    if output is None:
        return None
    if isinstance(output, (list, tuple)):
        return normalize_output(output[0]) if output else None
    return str(output) or None


class InferenceProvider(ABC):
    """Abstract interface for the external inference service."""

    @abstractmethod
    async def submit(self, model_ref: str, input: Dict[str, Any]) -> ProviderPrediction:
        """Create an asynchronous prediction. Returns its initial state."""
        ...

    @abstractmethod
    async def fetch(self, prediction_id: str) -> ProviderPrediction:
        """Read the current state of a prediction."""
        ...


class ReplicateProvider(InferenceProvider):
    """Replicate-hosted predictions via the official async client API."""

    def __init__(self, api_token: Optional[str] = None):
        self._client = replicate.Client(api_token=api_token)

    @staticmethod
    def _version_id(model_ref: str) -> str:
        # "owner/name:version" -> "version"
        return model_ref.rsplit(":", 1)[-1]

    @staticmethod
    def _to_prediction(prediction) -> ProviderPrediction:
        error = prediction.error
        return ProviderPrediction(
            id=prediction.id,
            status=str(prediction.status),
            output=normalize_output(prediction.output),
            error=str(error) if error else None,
        )

    async def submit(self, model_ref: str, input: Dict[str, Any]) -> ProviderPrediction:
        prediction = await self._client.predictions.async_create(
            version=self._version_id(model_ref),
            input=input,
        )
        logger.info("replicate prediction created id=%s status=%s", prediction.id, prediction.status)
        return self._to_prediction(prediction)

    async def fetch(self, prediction_id: str) -> ProviderPrediction:
        prediction = await self._client.predictions.async_get(prediction_id)
        return self._to_prediction(prediction)
