import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from google.oauth2 import service_account

from prediction_board.config import Settings

log: logging.Logger = logging.getLogger(__name__)

# Sentinel replaced by the store with its own commit time
SERVER_TIMESTAMP = firestore.SERVER_TIMESTAMP

MAX_DOCUMENT_ID_BYTES = 1500
RESERVED_DOCUMENT_ID = re.compile(r"__.*__")


class StorageError(Exception):
    pass


def is_valid_document_id(document_id: str) -> bool:
    """Firestore document ids are single path segments with a few reserved forms."""
    return (
        bool(document_id)
        and "/" not in document_id
        and document_id not in (".", "..")
        and not RESERVED_DOCUMENT_ID.fullmatch(document_id)
        and len(document_id.encode("utf-8")) <= MAX_DOCUMENT_ID_BYTES
    )


class DocumentStore(ABC):
    """Minimal document-database surface used by the repositories.

    Documents are plain dicts addressed by (collection, document_id).
    """

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Optional[Dict]:
        """Return the document, or None when no such document can exist."""

    @abstractmethod
    async def query(self, collection: str, filters: Dict[str, Any]) -> List[Dict]:
        """Return every document whose fields equal all of ``filters``."""

    @abstractmethod
    async def set(self, collection: str, document_id: str, data: Dict) -> None:
        pass

    @abstractmethod
    async def ping(self) -> bool:
        pass


class FirestoreDocumentStore(DocumentStore):
    def __init__(self, client: firestore.AsyncClient) -> None:
        self.client: firestore.AsyncClient = client

    async def get(self, collection: str, document_id: str) -> Optional[Dict]:
        if not is_valid_document_id(document_id):
            log.info(f"Document id {document_id!r} is not addressable in {collection}")
            return None
        try:
            snapshot = (
                await self.client.collection(collection).document(document_id).get()
            )
        except (GoogleAPIError, GoogleAuthError) as e:
            raise StorageError(f"Failed to read {collection}/{document_id}") from e
        if not snapshot.exists:
            log.info(f"Document {collection}/{document_id} not found")
            return None
        return snapshot.to_dict()

    async def query(self, collection: str, filters: Dict[str, Any]) -> List[Dict]:
        query = self.client.collection(collection)
        for field, value in filters.items():
            query = query.where(filter=FieldFilter(field, "==", value))
        try:
            snapshots = await query.get()
        except (GoogleAPIError, GoogleAuthError) as e:
            raise StorageError(f"Failed to query {collection}") from e
        results = [snapshot.to_dict() for snapshot in snapshots]
        log.info(f"Query on {collection} with {filters} returned {len(results)} documents")
        return results

    async def set(self, collection: str, document_id: str, data: Dict) -> None:
        try:
            await self.client.collection(collection).document(document_id).set(data)
        except (GoogleAPIError, GoogleAuthError) as e:
            raise StorageError(f"Failed to write {collection}/{document_id}") from e
        log.info(f"Document {collection}/{document_id} written")

    async def ping(self) -> bool:
        try:
            async for _ in self.client.collections():
                break
            return True
        except (GoogleAPIError, GoogleAuthError):
            log.warning("Firestore ping failed", exc_info=True)
            return False


def make_firestore_document_store(settings: Settings) -> FirestoreDocumentStore:
    credentials = service_account.Credentials.from_service_account_info(
        settings.FIREBASE_SERVICE_ACCOUNT_INFO
    )
    client = firestore.AsyncClient(
        project=settings.FIREBASE_PROJECT_ID, credentials=credentials
    )
    return FirestoreDocumentStore(client)
