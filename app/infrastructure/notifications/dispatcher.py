import asyncio
import logging
from typing import Optional

from ...application.ports.notifier import EmailSender, Notifier, NotificationIntent

logger = logging.getLogger(__name__)


class NotificationDispatcher(Notifier):
    """Hands notifications to a background worker so requests never wait on email.

    ``enqueue`` is safe to call from the event loop or from a worker thread.
    Delivery failures are logged and dropped; nothing is retried.
    """

    def __init__(self, sender: EmailSender, max_queue_size: int = 1000) -> None:
        self.sender = sender
        self.max_queue_size = max_queue_size
        self._queue: Optional[asyncio.Queue] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._worker: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self) -> None:
        if self.running:
            return
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue(maxsize=self.max_queue_size)
        self._worker = self._loop.create_task(self._run())
        logger.info("Notification dispatcher started")

    async def stop(self, drain_timeout: float = 10.0) -> None:
        if not self.running:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=drain_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Dropping {self._queue.qsize()} undelivered notifications on shutdown")
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        logger.info("Notification dispatcher stopped")

    def enqueue(self, intent: NotificationIntent) -> None:
        if not self.running:
            raise RuntimeError("Notification dispatcher is not running")
        try:
            running_loop = asyncio.get_running_loop()
        except RuntimeError:
            running_loop = None
        if running_loop is self._loop:
            self._put(intent)
        else:
            self._loop.call_soon_threadsafe(self._put, intent)

    def _put(self, intent: NotificationIntent) -> None:
        try:
            self._queue.put_nowait(intent)
        except asyncio.QueueFull:
            logger.error(f"Notification queue full, dropping {intent.kind.value} notification")

    async def _run(self) -> None:
        while True:
            intent = await self._queue.get()
            try:
                await self.sender.send(intent)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception(f"Failed to deliver {intent.kind.value} notification")
            finally:
                self._queue.task_done()
