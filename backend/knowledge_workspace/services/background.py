"""
Best-effort background task queue.

Side effects that must never fail or slow down the request that caused
them (notifications, analytics events) are submitted here and executed
by a small pool of asyncio worker tasks.
"""
import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional

from ..core.config import BACKGROUND_QUEUE_SIZE, BACKGROUND_WORKERS
from ..core.logging_config import get_logger, request_id_var

logger = get_logger(__name__)

TaskFactory = Callable[[], Awaitable[object]]


@dataclass
class BackgroundTask:
    """A named unit of best-effort work."""
    name: str
    factory: TaskFactory
    request_id: str = "-"
    created_at: datetime = field(default_factory=datetime.now)


class BackgroundTaskQueue:
    """
    Bounded queue drained by worker tasks.

    ``submit`` never blocks and never raises: when the queue is full the
    task is dropped and logged. Failures inside a task are logged with a
    traceback and counted, never propagated.
    """
    
    def __init__(self, maxsize: int = BACKGROUND_QUEUE_SIZE, workers: int = BACKGROUND_WORKERS):
        self.maxsize = maxsize
        self.worker_count = max(1, workers)
        self._queue: Optional[asyncio.Queue] = None
        self._workers: List[asyncio.Task] = []
        self.is_running = False
        
        # Statistics
        self.stats: Dict[str, int] = {
            "submitted": 0,
            "completed": 0,
            "failed": 0,
            "dropped": 0
        }
    
    async def start(self):
        """Start the worker pool. Must be called from a running event loop."""
        if self.is_running:
            return
        self._queue = asyncio.Queue(maxsize=self.maxsize)
        self._workers = [
            asyncio.create_task(self._worker(i), name=f"background-worker-{i}")
            for i in range(self.worker_count)
        ]
        self.is_running = True
        logger.info(f"Background queue started with {self.worker_count} workers (capacity {self.maxsize})")
    
    def submit(self, name: str, factory: TaskFactory) -> bool:
        """
        Enqueue best-effort work.
        
        Args:
            name: Label used in logs
            factory: Zero-argument callable returning an awaitable
        
        Returns:
            True if the task was queued, False if it was dropped
        """
        if not self.is_running or self._queue is None:
            self.stats["dropped"] += 1
            logger.warning(f"Background queue not running, dropping task '{name}'")
            return False
        try:
            self._queue.put_nowait(BackgroundTask(name=name, factory=factory, request_id=request_id_var.get()))
        except asyncio.QueueFull:
            self.stats["dropped"] += 1
            logger.warning(f"Background queue full ({self.maxsize}), dropping task '{name}'")
            return False
        self.stats["submitted"] += 1
        return True
    
    async def join(self):
        """Wait until every queued task has been processed."""
        if self._queue is not None:
            await self._queue.join()
    
    async def stop(self, drain: bool = True):
        """
        Stop the worker pool.
        
        Args:
            drain: Finish queued tasks before cancelling the workers
        """
        if not self.is_running:
            return
        if drain:
            await self.join()
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        self.is_running = False
        logger.info(f"Background queue stopped (stats: {self.stats})")
    
    async def _worker(self, worker_id: int):
        while True:
            task = await self._queue.get()
            # Log lines from the task carry the submitting request's id
            token = request_id_var.set(task.request_id)
            try:
                await task.factory()
                self.stats["completed"] += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.stats["failed"] += 1
                logger.error(f"Background task '{task.name}' failed on worker {worker_id}: {e}", exc_info=True)
            finally:
                request_id_var.reset(token)
                self._queue.task_done()
