"""
Like/bookmark state machine and its side effects.
"""
from unittest.mock import AsyncMock

import pytest

from knowledge_workspace.api.exceptions import (
    CardNotFoundError,
    InteractionStateError,
    InvalidIdError,
    PermissionDeniedError,
)
from knowledge_workspace.models.card import Visibility
from knowledge_workspace.models.interaction import InteractionType

from conftest import make_user


@pytest.fixture
async def card_setup(services):
    author = await make_user(services, "Author")
    reader = await make_user(services, "Reader")
    card = await services.cards.create_card(author["id"], "Caching patterns", "Read-through and write-behind caches")
    return author, reader, card


class TestLike:
    """absent -> present -> absent"""

    async def test_like_increments_counter(self, services, card_setup):
        _, reader, card = card_setup

        result = await services.interactions.add(reader, card["id"], InteractionType.LIKE)

        assert result["like_count"] == 1
        assert result["interaction"]["type"] == "like"
        assert (await services.db.get_card(card["id"]))["like_count"] == 1

    async def test_like_twice_fails_without_double_count(self, services, card_setup):
        _, reader, card = card_setup
        await services.interactions.add(reader, card["id"], InteractionType.LIKE)

        with pytest.raises(InteractionStateError) as exc_info:
            await services.interactions.add(reader, card["id"], InteractionType.LIKE)

        assert exc_info.value.code == "ALREADY_LIKED"
        assert (await services.db.get_card(card["id"]))["like_count"] == 1

    async def test_unlike_without_like_fails_and_stays_at_zero(self, services, card_setup):
        _, reader, card = card_setup

        with pytest.raises(InteractionStateError) as exc_info:
            await services.interactions.remove(reader, card["id"], InteractionType.LIKE)

        assert exc_info.value.code == "NOT_LIKED"
        assert (await services.db.get_card(card["id"]))["like_count"] == 0

    async def test_unlike_decrements(self, services, card_setup):
        _, reader, card = card_setup
        await services.interactions.add(reader, card["id"], InteractionType.LIKE)

        result = await services.interactions.remove(reader, card["id"], InteractionType.LIKE)

        assert result == {"like_count": 0}
        assert await services.db.find_interaction(reader["id"], card["id"], "like") is None

    async def test_decrement_floored_at_zero(self, services, card_setup):
        _, reader, card = card_setup
        await services.interactions.add(reader, card["id"], InteractionType.LIKE)
        # Simulate drift: counter lost an increment
        await services.db.update_card(card["id"], {"like_count": 0})

        result = await services.interactions.remove(reader, card["id"], InteractionType.LIKE)

        assert result["like_count"] == 0

    async def test_like_and_bookmark_are_independent(self, services, card_setup):
        _, reader, card = card_setup
        await services.interactions.add(reader, card["id"], InteractionType.LIKE)

        result = await services.interactions.add(reader, card["id"], InteractionType.BOOKMARK)

        assert result["bookmark_count"] == 1
        with pytest.raises(InteractionStateError) as exc_info:
            await services.interactions.add(reader, card["id"], InteractionType.BOOKMARK)
        assert exc_info.value.code == "ALREADY_BOOKMARKED"

    async def test_unknown_and_malformed_cards(self, services, card_setup):
        _, reader, _ = card_setup
        with pytest.raises(InvalidIdError):
            await services.interactions.add(reader, "not-a-uuid", InteractionType.LIKE)
        with pytest.raises(CardNotFoundError):
            await services.interactions.add(reader, "00000000-0000-0000-0000-000000000000", InteractionType.LIKE)

    async def test_private_card_hidden(self, services, card_setup):
        author, reader, _ = card_setup
        private = await services.cards.create_card(author["id"], "Secret", "Body", visibility=Visibility.PRIVATE)

        with pytest.raises(CardNotFoundError):
            await services.interactions.add(reader, private["id"], InteractionType.LIKE)


class TestSideEffects:
    """Best-effort notification and analytics"""

    async def test_author_notified(self, services, card_setup):
        author, reader, card = card_setup

        await services.interactions.add(reader, card["id"], InteractionType.LIKE)
        await services.queue.join()

        notifications = await services.db.list_notifications(author["id"])
        assert len(notifications) == 1
        assert notifications[0]["message"] == 'Reader liked your card "Caching patterns"'
        assert notifications[0]["type"] == "like"
        assert notifications[0]["related_user_id"] == reader["id"]

        logs = await services.db.list_analytics_logs(user_id=reader["id"], action_types=["like"])
        assert [log["card_id"] for log in logs] == [card["id"]]

    async def test_self_like_not_notified(self, services, card_setup):
        author, _, card = card_setup

        await services.interactions.add(author, card["id"], InteractionType.BOOKMARK)
        await services.queue.join()

        assert await services.db.list_notifications(author["id"]) == []

    async def test_notification_failure_does_not_fail_like(self, services, card_setup):
        _, reader, card = card_setup
        services.notifications.create = AsyncMock(side_effect=RuntimeError("datastore down"))

        result = await services.interactions.add(reader, card["id"], InteractionType.LIKE)
        await services.queue.join()

        assert result["like_count"] == 1
        assert services.queue.stats["failed"] == 1


class TestQueries:
    async def test_stats_from_rows(self, services, card_setup):
        author, reader, card = card_setup
        await services.interactions.add(reader, card["id"], InteractionType.LIKE)
        await services.interactions.add(author, card["id"], InteractionType.LIKE)
        await services.interactions.add(reader, card["id"], InteractionType.BOOKMARK)

        stats = await services.interactions.card_stats(card["id"], reader["id"])

        assert stats["like_count"] == 2
        assert stats["bookmark_count"] == 1
        assert stats["has_liked"] is True
        assert stats["has_bookmarked"] is True

        anonymous = await services.interactions.card_stats(card["id"])
        assert anonymous["has_liked"] is False

    async def test_list_liked_cards(self, services, card_setup):
        _, reader, card = card_setup
        await services.interactions.add(reader, card["id"], InteractionType.LIKE)

        result = await services.interactions.list_cards(reader["id"], InteractionType.LIKE)

        assert [entry["id"] for entry in result["cards"]] == [card["id"]]
        assert result["cards"][0]["liked_at"]
        assert result["pagination"]["total"] == 1

    async def test_delete_by_id_owner_only(self, services, card_setup):
        author, reader, card = card_setup
        created = await services.interactions.add(reader, card["id"], InteractionType.BOOKMARK)
        row_id = created["interaction"]["id"]

        with pytest.raises(PermissionDeniedError):
            await services.interactions.delete_by_id(author["id"], row_id)

        result = await services.interactions.delete_by_id(reader["id"], row_id)
        assert result["bookmark_count"] == 0

    async def test_deleting_card_removes_interactions(self, services, card_setup):
        author, reader, card = card_setup
        await services.interactions.add(reader, card["id"], InteractionType.LIKE)

        await services.cards.delete_card(card["id"], author["id"])

        assert await services.db.list_interactions(card_id=card["id"]) == []
