import logging
from typing import Dict, List, Union

from prediction_board.repositories.document_store import SERVER_TIMESTAMP, DocumentStore

log: logging.Logger = logging.getLogger(__name__)

COLLECTION = "opinions"


class OpinionRepository:
    def __init__(self, store: DocumentStore) -> None:
        self.store: DocumentStore = store

    async def create(
        self,
        opinion_id: str,
        prediction_id: str,
        user_id: str,
        opinion: str,
        amount: Union[int, float],
    ) -> None:
        data = {
            "id": opinion_id,
            "predictionId": prediction_id,
            "userId": user_id,
            "opinion": opinion,
            "amount": amount,
            "createdAt": SERVER_TIMESTAMP,
        }
        await self.store.set(COLLECTION, opinion_id, data)
        log.info(f"Opinion {opinion_id} saved for prediction {prediction_id}")

    async def find_by_prediction_and_user(
        self, prediction_id: str, user_id: str
    ) -> List[Dict]:
        return await self.store.query(
            COLLECTION, {"predictionId": prediction_id, "userId": user_id}
        )


def make_opinion_repository(store: DocumentStore) -> OpinionRepository:
    return OpinionRepository(store)
