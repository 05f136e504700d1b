import datetime
import logging
from typing import Dict, List, Optional

from prediction_board.repositories.document_store import SERVER_TIMESTAMP, DocumentStore

log: logging.Logger = logging.getLogger(__name__)

COLLECTION = "predictions"


class PredictionRepository:
    def __init__(self, store: DocumentStore) -> None:
        self.store: DocumentStore = store

    async def create(
        self,
        prediction_id: str,
        question: str,
        category: str,
        expiry_time: datetime.datetime,
    ) -> None:
        data = {
            "id": prediction_id,
            "question": question,
            "category": category,
            "expiryTime": expiry_time,
            "createdAt": SERVER_TIMESTAMP,
            "active": True,
        }
        await self.store.set(COLLECTION, prediction_id, data)
        log.info(f"Prediction {prediction_id} saved in category {category}")

    async def get_by_id(self, prediction_id: str) -> Optional[Dict]:
        return await self.store.get(COLLECTION, prediction_id)

    async def list_active(self, category: Optional[str] = None) -> List[Dict]:
        filters = {"active": True}
        if category:
            filters["category"] = category
        results = await self.store.query(COLLECTION, filters)
        log.info(f"Found {len(results)} active predictions (category={category})")
        return results


def make_prediction_repository(store: DocumentStore) -> PredictionRepository:
    return PredictionRepository(store)
