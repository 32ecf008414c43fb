from typing import Any

import httpx
import pydantic
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from moodmate.core.core import Service
from moodmate.core.modules.mood.models import MoodPrediction
from moodmate.errors import PredictionError, ValidationError

logger = structlog.get_logger(__name__)


class MoodService(Service):
    """Forwards journal text to the external mood-prediction service."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._client: httpx.AsyncClient | None = None

    async def on_start(self) -> None:
        config = self.core.config
        self._client = httpx.AsyncClient(base_url=config.ml_api_url, timeout=config.ml_api_timeout)

    async def on_stop(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Mood service not started")
        return self._client

    async def predict(self, text: str | None) -> MoodPrediction:
        if not text or not text.strip():
            raise ValidationError("Text is required")

        try:
            response = await self.client.post("/predict", json={"text": text})
        except httpx.HTTPError as e:
            logger.warning("mood_prediction_unreachable", error=str(e))
            raise PredictionError(f"Prediction failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.is_error:
            detail = payload.get("detail") if isinstance(payload, dict) else None
            message = detail if isinstance(detail, str) else "ML service returned an error"
            logger.warning("mood_prediction_failed", status_code=response.status_code)
            raise PredictionError(f"Prediction failed: {message}")

        if not isinstance(payload, dict):
            raise PredictionError("Prediction failed: unexpected response from ML service")
        try:
            return MoodPrediction.model_validate(payload)
        except pydantic.ValidationError as e:
            raise PredictionError("Prediction failed: unexpected response from ML service") from e
