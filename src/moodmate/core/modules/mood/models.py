from pydantic import BaseModel, ConfigDict, Field


class MoodPrediction(BaseModel):
    """Prediction returned by the mood service.

    Unknown keys from the service are kept and passed through.
    """

    label_name: str | None = Field(None, description="Predicted mood label")
    label_index: int | None = Field(None, description="Index of the predicted label")
    confidence: float | None = Field(None, description="Prediction confidence")

    model_config = ConfigDict(extra="allow")
