from unittest.mock import AsyncMock

import pytest

from prediction_board.repositories.document_store import SERVER_TIMESTAMP, DocumentStore
from prediction_board.repositories.opinion import OpinionRepository


@pytest.mark.asyncio
async def test_create_writes_opinion():
    store = AsyncMock(spec=DocumentStore)
    repo = OpinionRepository(store)

    await repo.create("o1", "p1", "u1", "Yes", 10)

    store.set.assert_awaited_once_with(
        "opinions",
        "o1",
        {
            "id": "o1",
            "predictionId": "p1",
            "userId": "u1",
            "opinion": "Yes",
            "amount": 10,
            "createdAt": SERVER_TIMESTAMP,
        },
    )


@pytest.mark.asyncio
async def test_find_by_prediction_and_user(memory_store):
    repo = OpinionRepository(memory_store)
    await repo.create("o1", "p1", "u1", "Yes", 10)
    await repo.create("o2", "p1", "u2", "No", 5)
    await repo.create("o3", "p2", "u1", "No", 7)

    results = await repo.find_by_prediction_and_user("p1", "u1")

    assert [r["id"] for r in results] == ["o1"]
    assert await repo.find_by_prediction_and_user("p2", "u2") == []
