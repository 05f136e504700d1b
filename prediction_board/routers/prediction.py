import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import Field, field_validator

from prediction_board.repositories.document_store import StorageError
from prediction_board.services.prediction import PredictionService
from prediction_board.validation import CamelModel, parse_iso8601

log = logging.getLogger(__name__)


class PredictionCreateRequest(CamelModel):
    question: str = Field(
        ...,
        min_length=1,
        examples=["Will it rain?"],
        description="Yes/no question to predict",
    )
    category: str = Field(
        ...,
        min_length=1,
        examples=["weather"],
        description="Category used to filter predictions",
    )
    expiry_time: datetime = Field(
        ...,
        examples=["2099-01-01T00:00:00Z"],
        description="ISO-8601 moment after which opinions are refused",
    )

    @field_validator("expiry_time", mode="before")
    @classmethod
    def validate_expiry_time(cls, v):
        return parse_iso8601(v)


class PredictionCreateResponse(CamelModel):
    prediction_id: str = Field(..., description="Identifier of the new prediction")
    message: str


class Prediction(CamelModel):
    id: str
    question: str
    category: str
    expiry_time: datetime
    created_at: datetime | None = Field(
        None, description="Store-assigned creation time, absent until stamped"
    )


class PredictionListResponse(CamelModel):
    predictions: list[Prediction]


def make_prediction_router(prediction_service: PredictionService) -> APIRouter:
    router = APIRouter(tags=["predictions"])

    @router.post(
        "/prediction",
        status_code=status.HTTP_201_CREATED,
        response_model=PredictionCreateResponse,
        summary="Create a prediction",
    )
    async def create_prediction(data: PredictionCreateRequest):
        try:
            prediction_id = await prediction_service.create_prediction(
                data.question, data.category, data.expiry_time
            )
        except StorageError:
            log.error("Error creating prediction", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create prediction",
            )
        return PredictionCreateResponse(
            prediction_id=prediction_id, message="Prediction created successfully"
        )

    @router.get(
        "/predictions",
        response_model=PredictionListResponse,
        response_model_exclude_none=True,
        summary="List active predictions",
    )
    async def list_predictions(
        category: str | None = Query(None, description="Exact category to match"),
    ):
        try:
            predictions = await prediction_service.list_predictions(category)
        except StorageError:
            log.error("Error retrieving predictions", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to retrieve predictions",
            )
        return PredictionListResponse(
            predictions=[Prediction(**p) for p in predictions]
        )

    return router
