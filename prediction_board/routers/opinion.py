import logging
from typing import Any, Literal

from fastapi import APIRouter, HTTPException, status
from pydantic import Field, field_validator

from prediction_board.repositories.document_store import StorageError
from prediction_board.services.opinion import (
    OpinionAlreadySubmittedError,
    OpinionService,
    PredictionExpiredError,
    PredictionInactiveError,
    PredictionNotFoundError,
)
from prediction_board.validation import CamelModel, check_numeric

log = logging.getLogger(__name__)


class OpinionSubmitRequest(CamelModel):
    prediction_id: str = Field(
        ..., min_length=1, description="Prediction the opinion is about"
    )
    user_id: str = Field(..., min_length=1, examples=["u1"])
    opinion: Literal["Yes", "No"] = Field(..., examples=["Yes"])
    amount: Any = Field(
        ...,
        examples=[10, "42"],
        description="Stake, as a number or a numeric string",
    )

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v):
        return check_numeric(v)


class OpinionSubmitResponse(CamelModel):
    opinion_id: str = Field(..., description="Identifier of the recorded opinion")
    message: str


def make_opinion_router(opinion_service: OpinionService) -> APIRouter:
    router = APIRouter(tags=["opinions"])

    @router.post(
        "/opinion",
        status_code=status.HTTP_201_CREATED,
        response_model=OpinionSubmitResponse,
        summary="Submit an opinion with a stake",
    )
    async def submit_opinion(data: OpinionSubmitRequest):
        try:
            opinion_id = await opinion_service.submit_opinion(
                data.prediction_id, data.user_id, data.opinion, data.amount
            )
        except PredictionNotFoundError:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Prediction not found",
            )
        except PredictionInactiveError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This prediction is no longer active",
            )
        except PredictionExpiredError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This prediction has expired",
            )
        except OpinionAlreadySubmittedError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You have already submitted an opinion for this prediction",
            )
        except StorageError:
            log.error("Error submitting opinion", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to submit opinion",
            )
        return OpinionSubmitResponse(
            opinion_id=opinion_id, message="Opinion submitted successfully"
        )

    return router
