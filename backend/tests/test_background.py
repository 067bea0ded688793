"""
Background queue and maintenance job tests.
"""
import asyncio
from datetime import datetime, timedelta, timezone

from knowledge_workspace.models.interaction import InteractionType
from knowledge_workspace.services.background import BackgroundTaskQueue
from knowledge_workspace.services.maintenance import MaintenanceJob
from knowledge_workspace.utils.validators import new_id

from conftest import make_user


class TestBackgroundTaskQueue:
    """Best-effort execution"""

    async def test_runs_submitted_tasks(self):
        queue = BackgroundTaskQueue(maxsize=10, workers=2)
        await queue.start()
        done = []

        async def work(value):
            done.append(value)

        for i in range(5):
            assert queue.submit(f"task-{i}", lambda i=i: work(i))
        await queue.join()
        await queue.stop()

        assert sorted(done) == [0, 1, 2, 3, 4]
        assert queue.stats["completed"] == 5

    async def test_failures_are_logged_not_raised(self):
        queue = BackgroundTaskQueue(maxsize=10, workers=1)
        await queue.start()

        async def boom():
            raise RuntimeError("side effect failed")

        queue.submit("boom", boom)
        await queue.join()

        assert queue.stats["failed"] == 1
        # Workers survive the failure
        done = asyncio.Event()

        async def ok():
            done.set()

        queue.submit("ok", ok)
        await asyncio.wait_for(done.wait(), timeout=1)
        await queue.stop()

    async def test_full_queue_drops(self):
        queue = BackgroundTaskQueue(maxsize=1, workers=1)
        await queue.start()
        gate = asyncio.Event()

        async def blocked():
            await gate.wait()

        queue.submit("first", blocked)
        await asyncio.sleep(0.01)  # let the worker take the first task
        queue.submit("second", blocked)

        assert queue.submit("third", blocked) is False
        assert queue.stats["dropped"] == 1

        gate.set()
        await queue.stop()

    async def test_not_running_drops(self):
        queue = BackgroundTaskQueue()

        async def noop():
            pass

        assert queue.submit("early", noop) is False

    async def test_stop_drains(self):
        queue = BackgroundTaskQueue(maxsize=10, workers=1)
        await queue.start()
        done = []

        async def slow():
            await asyncio.sleep(0.01)
            done.append(True)

        queue.submit("slow", slow)
        await queue.stop(drain=True)

        assert done == [True]
        assert queue.is_running is False


class TestMaintenanceJob:
    """Retention purge and counter reconciliation"""

    async def test_purges_old_analytics_and_read_notifications(self, services):
        now = datetime.now(timezone.utc)
        user = await make_user(services, "Ada")
        await services.queue.join()
        for days_ago in (400, 10):
            await services.db.create_analytics_log({
                "id": new_id(),
                "user_id": user["id"],
                "action_type": "view",
                "card_id": None,
                "metadata": {},
                "timestamp": (now - timedelta(days=days_ago)).isoformat(),
            })
        old_read = await services.notifications.create(user["id"], "old and read")
        await services.db.update_notification(old_read["id"], {"read": True, "read_at": (now - timedelta(days=31)).isoformat()})
        recent_read = await services.notifications.create(user["id"], "recent and read")
        await services.db.update_notification(recent_read["id"], {"read": True, "read_at": (now - timedelta(days=2)).isoformat()})
        await services.notifications.create(user["id"], "unread")

        job = MaintenanceJob(services.db)
        removed = await job.purge_expired(now=now)

        assert removed == {"analytics_logs": 1, "notifications": 1}
        remaining = await services.db.list_notifications(user["id"])
        assert sorted(n["message"] for n in remaining) == ["recent and read", "unread"]

    async def test_reconciles_drifted_counters(self, services):
        author = await make_user(services, "Author")
        reader = await make_user(services, "Reader")
        card = await services.cards.create_card(author["id"], "Drift", "Counter drift example")
        await services.interactions.add(reader, card["id"], InteractionType.LIKE)
        await services.db.update_card(card["id"], {"like_count": 7, "bookmark_count": 2})

        job = MaintenanceJob(services.db)
        corrected = await job.reconcile_counters()

        refreshed = await services.db.get_card(card["id"])
        assert corrected == 1
        assert refreshed["like_count"] == 1
        assert refreshed["bookmark_count"] == 0
        assert await job.reconcile_counters() == 0

    async def test_reconcile_interleaved_with_likes_finds_no_drift(self, services, monkeypatch):
        async def slow_commit(*collections):
            await asyncio.sleep(0)

        monkeypatch.setattr(services.db, "_commit", slow_commit)
        author = await make_user(services, "Author")
        readers = [await make_user(services, f"Reader{i}") for i in range(8)]
        card = await services.cards.create_card(author["id"], "Busy", "Popular card")
        job = MaintenanceJob(services.db)

        results = await asyncio.gather(
            *(job.reconcile_counters() for _ in range(4)),
            *(services.interactions.add(reader, card["id"], InteractionType.LIKE) for reader in readers)
        )
        assert results[:4] == [0, 0, 0, 0]
        results = await asyncio.gather(
            *(job.reconcile_counters() for _ in range(4)),
            *(services.interactions.remove(reader, card["id"], InteractionType.LIKE) for reader in readers[:3])
        )
        assert results[:4] == [0, 0, 0, 0]

        refreshed = await services.db.get_card(card["id"])
        assert refreshed["like_count"] == 5
        assert len(await services.db.list_interactions(card_id=card["id"])) == 5
        assert await job.reconcile_counters() == 0

    async def test_start_and_stop(self, services):
        job = MaintenanceJob(services.db, interval_seconds=3600)
        job.start()
        await asyncio.sleep(0)
        await job.stop()
        assert job._task is None
