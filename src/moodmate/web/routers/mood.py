from fastapi import APIRouter
from pydantic import BaseModel

from moodmate.core.modules.mood.models import MoodPrediction
from moodmate.web.deps import AppDep, SessionTokenDep
from moodmate.web.openapi import ErrorResponse

router = APIRouter(tags=["mood"])


class PredictRequest(BaseModel):
    text: str | None = None


@router.post(
    "/predict-mood",
    summary="Predict mood",
    description="Forward text to the mood-prediction service and return its result unchanged.",
    operation_id="predictMood",
    responses={
        200: {"description": "Prediction from the ML service"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        502: {"model": ErrorResponse, "description": "Prediction service failed"},
    },
)
async def predict_mood(request: PredictRequest, app: AppDep, token: SessionTokenDep) -> MoodPrediction:
    return await app.predict_mood(token, request.text)
