"""
Notification and analytics service tests.
"""
import pytest

from knowledge_workspace.api.exceptions import NotificationNotFoundError, PermissionDeniedError
from knowledge_workspace.models.interaction import ActionType
from knowledge_workspace.models.notification import MAX_MESSAGE_LENGTH, NotificationType
from knowledge_workspace.utils.validators import new_id


class TestNotificationService:
    async def test_list_counts_unread(self, services):
        user_id = new_id()
        first = await services.notifications.create(user_id, "Someone liked your card", NotificationType.LIKE)
        await services.notifications.create(user_id, "Welcome aboard")
        await services.notifications.mark_read(first["id"], user_id)

        everything = await services.notifications.list_for_user(user_id)
        unread = await services.notifications.list_for_user(user_id, read=False)

        assert everything["pagination"]["total"] == 2
        assert everything["unread_count"] == 1
        assert [n["message"] for n in unread["notifications"]] == ["Welcome aboard"]

    async def test_message_truncated(self, services):
        notification = await services.notifications.create(new_id(), "x" * (MAX_MESSAGE_LENGTH + 50))
        assert len(notification["message"]) == MAX_MESSAGE_LENGTH

    async def test_mark_read_sets_timestamp(self, services):
        user_id = new_id()
        notification = await services.notifications.create(user_id, "Hello")

        updated = await services.notifications.mark_read(notification["id"], user_id)

        assert updated["read"] is True
        assert updated["read_at"]

    async def test_only_owner_can_touch_notification(self, services):
        notification = await services.notifications.create(new_id(), "Private")

        with pytest.raises(PermissionDeniedError):
            await services.notifications.mark_read(notification["id"], new_id())
        with pytest.raises(PermissionDeniedError):
            await services.notifications.delete(notification["id"], new_id())
        with pytest.raises(NotificationNotFoundError):
            await services.notifications.mark_read(new_id(), notification["user_id"])

    async def test_mark_all_read_and_delete(self, services):
        user_id = new_id()
        for i in range(3):
            await services.notifications.create(user_id, f"Message {i}")

        assert await services.notifications.mark_all_read(user_id) == 3
        assert await services.notifications.mark_all_read(user_id) == 0

        listing = await services.notifications.list_for_user(user_id)
        await services.notifications.delete(listing["notifications"][0]["id"], user_id)
        assert (await services.notifications.list_for_user(user_id))["pagination"]["total"] == 2

    async def test_background_notification(self, services):
        user_id = new_id()

        assert services.notifications.notify_in_background(user_id, "Queued", NotificationType.BOOKMARK)
        await services.queue.join()

        listing = await services.notifications.list_for_user(user_id)
        assert listing["notifications"][0]["type"] == "bookmark"

    async def test_delete_read_keeps_unread_and_other_users(self, services):
        user_id = new_id()
        other_id = new_id()
        for i in range(3):
            await services.notifications.create(user_id, f"Message {i}")
        kept = await services.notifications.create(user_id, "Still unread")
        await services.notifications.create(other_id, "Not yours")
        for notification in (await services.notifications.list_for_user(user_id))["notifications"]:
            if notification["id"] != kept["id"]:
                await services.notifications.mark_read(notification["id"], user_id)
        other = (await services.notifications.list_for_user(other_id))["notifications"][0]
        await services.notifications.mark_read(other["id"], other_id)

        assert await services.notifications.delete_read(user_id) == 3
        assert await services.notifications.delete_read(user_id) == 0

        remaining = (await services.notifications.list_for_user(user_id))["notifications"]
        assert [n["id"] for n in remaining] == [kept["id"]]
        assert (await services.notifications.list_for_user(other_id))["pagination"]["total"] == 1


class TestAnalyticsService:
    async def test_summary_counts_by_action(self, services):
        user_id = new_id()
        await services.analytics.record(user_id, ActionType.VIEW, new_id())
        await services.analytics.record(user_id, ActionType.VIEW, new_id())
        await services.analytics.record(user_id, ActionType.SEARCH, metadata={"query": "kafka"})

        summary = await services.analytics.summary(user_id)

        assert summary["total"] == 3
        assert summary["by_action"]["view"] == 2
        assert summary["by_action"]["search"] == 1
        assert summary["by_action"]["like"] == 0

    async def test_list_logs_filters_by_action(self, services):
        user_id = new_id()
        await services.analytics.record(user_id, ActionType.VIEW, new_id())
        await services.analytics.record(user_id, ActionType.LIKE, new_id())

        result = await services.analytics.list_logs(user_id, ActionType.LIKE)

        assert [log["action_type"] for log in result["logs"]] == ["like"]
        assert result["logs"][0]["timestamp"]

    async def test_background_record_keeps_event_time(self, services):
        user_id = new_id()

        services.analytics.record_in_background(user_id, ActionType.SHARE)
        await services.queue.join()

        logs = (await services.analytics.list_logs(user_id))["logs"]
        assert len(logs) == 1
        assert logs[0]["action_type"] == "share"
