import math
import uuid
from datetime import datetime, timezone
from typing import Union

from prediction_board.repositories.opinion import OpinionRepository
from prediction_board.repositories.prediction import PredictionRepository


class PredictionNotFoundError(Exception):
    pass


class PredictionInactiveError(Exception):
    pass


class PredictionExpiredError(Exception):
    pass


class OpinionAlreadySubmittedError(Exception):
    pass


INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def to_number(amount: Union[int, float, str]) -> Union[int, float]:
    """Coerce a validated stake to a number.

    Whole values that fit the store's 64-bit integers stay integral, anything
    else is kept as a float.
    """
    value = float(amount)
    if math.isfinite(value) and value.is_integer():
        integral = int(value)
        if INT64_MIN <= integral <= INT64_MAX:
            return integral
    return value


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class OpinionService:
    """Records a user's stake on a prediction.

    Preconditions are checked in a fixed order, each with its own error:
    existence, active flag, expiry, then one opinion per user. The checks and
    the write are not atomic, so two concurrent submissions for the same
    (prediction, user) pair can both be stored.
    """

    def __init__(
        self,
        prediction_repository: PredictionRepository,
        opinion_repository: OpinionRepository,
    ):
        self.prediction_repository = prediction_repository
        self.opinion_repository = opinion_repository

    async def submit_opinion(
        self,
        prediction_id: str,
        user_id: str,
        opinion: str,
        amount: Union[int, float, str],
    ) -> str:
        prediction = await self.prediction_repository.get_by_id(prediction_id)
        if not prediction:
            raise PredictionNotFoundError
        if not prediction.get("active"):
            raise PredictionInactiveError
        # Compared against this process's clock, not the store's
        if as_utc(prediction["expiryTime"]) < datetime.now(timezone.utc):
            raise PredictionExpiredError

        existing = await self.opinion_repository.find_by_prediction_and_user(
            prediction_id, user_id
        )
        if existing:
            raise OpinionAlreadySubmittedError

        opinion_id = str(uuid.uuid4())
        await self.opinion_repository.create(
            opinion_id, prediction_id, user_id, opinion, to_number(amount)
        )
        return opinion_id


def make_opinion_service(
    prediction_repository: PredictionRepository,
    opinion_repository: OpinionRepository,
) -> OpinionService:
    return OpinionService(
        prediction_repository=prediction_repository,
        opinion_repository=opinion_repository,
    )
