from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from prediction_board.config import Settings
from prediction_board.repositories.document_store import SERVER_TIMESTAMP, DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed stand-in for Firestore used across the test suite."""

    def __init__(self) -> None:
        self.collections: Dict[str, Dict[str, Dict]] = defaultdict(dict)
        self.healthy = True

    async def get(self, collection: str, document_id: str) -> Optional[Dict]:
        document = self.collections[collection].get(document_id)
        return dict(document) if document is not None else None

    async def query(self, collection: str, filters: Dict[str, Any]) -> List[Dict]:
        return [
            dict(document)
            for document in self.collections[collection].values()
            if all(document.get(k) == v for k, v in filters.items())
        ]

    async def set(self, collection: str, document_id: str, data: Dict) -> None:
        now = datetime.now(timezone.utc)
        self.collections[collection][document_id] = {
            k: (now if v is SERVER_TIMESTAMP else v) for k, v in data.items()
        }

    async def ping(self) -> bool:
        return self.healthy


@pytest.fixture
def memory_store():
    return InMemoryDocumentStore()


@pytest.fixture
def settings():
    return Settings(_env_file=None, APP_ENV="production", LOG_LEVEL="INFO")
