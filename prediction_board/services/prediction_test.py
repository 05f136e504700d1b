import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from prediction_board.repositories.document_store import StorageError
from prediction_board.services.prediction import PredictionService

EXPIRY = datetime(2099, 1, 1, tzinfo=timezone.utc)
CREATED = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_create_prediction_returns_fresh_id():
    prediction_repo = AsyncMock()

    service = PredictionService(prediction_repo)
    first = await service.create_prediction("Will it rain?", "weather", EXPIRY)
    second = await service.create_prediction("Will it rain?", "weather", EXPIRY)

    assert first != second
    assert uuid.UUID(first).version == 4
    prediction_repo.create.assert_any_await(first, "Will it rain?", "weather", EXPIRY)
    assert prediction_repo.create.await_count == 2


@pytest.mark.asyncio
async def test_create_prediction_storage_error_propagates():
    prediction_repo = AsyncMock()
    prediction_repo.create.side_effect = StorageError("write failed")

    service = PredictionService(prediction_repo)

    with pytest.raises(StorageError):
        await service.create_prediction("Will it rain?", "weather", EXPIRY)


@pytest.mark.asyncio
async def test_list_predictions_maps_documents():
    prediction_repo = AsyncMock()
    prediction_repo.list_active.return_value = [
        {
            "id": "p1",
            "question": "Will it rain?",
            "category": "weather",
            "expiryTime": EXPIRY,
            "createdAt": CREATED,
            "active": True,
        },
        {
            "id": "p2",
            "question": "Snow in May?",
            "category": "weather",
            "expiryTime": EXPIRY,
            "active": True,
        },
    ]

    service = PredictionService(prediction_repo)
    predictions = await service.list_predictions("weather")

    assert predictions == [
        {
            "id": "p1",
            "question": "Will it rain?",
            "category": "weather",
            "expiry_time": EXPIRY,
            "created_at": CREATED,
        },
        {
            "id": "p2",
            "question": "Snow in May?",
            "category": "weather",
            "expiry_time": EXPIRY,
            "created_at": None,
        },
    ]
    prediction_repo.list_active.assert_awaited_once_with("weather")


@pytest.mark.asyncio
async def test_list_predictions_empty():
    prediction_repo = AsyncMock()
    prediction_repo.list_active.return_value = []

    service = PredictionService(prediction_repo)

    assert await service.list_predictions() == []
    prediction_repo.list_active.assert_awaited_once_with(None)
