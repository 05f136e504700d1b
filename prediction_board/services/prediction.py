import uuid
from datetime import datetime
from typing import Optional

from prediction_board.repositories.prediction import PredictionRepository


class PredictionService:
    def __init__(self, prediction_repository: PredictionRepository):
        self.prediction_repository = prediction_repository

    async def create_prediction(
        self, question: str, category: str, expiry_time: datetime
    ) -> str:
        prediction_id = str(uuid.uuid4())
        await self.prediction_repository.create(
            prediction_id, question, category, expiry_time
        )
        return prediction_id

    async def list_predictions(self, category: Optional[str] = None) -> list[dict]:
        documents = await self.prediction_repository.list_active(category)
        return [
            {
                "id": doc["id"],
                "question": doc["question"],
                "category": doc["category"],
                "expiry_time": doc["expiryTime"],
                "created_at": doc.get("createdAt"),
            }
            for doc in documents
        ]


def make_prediction_service(
    prediction_repository: PredictionRepository,
) -> PredictionService:
    return PredictionService(prediction_repository=prediction_repository)
