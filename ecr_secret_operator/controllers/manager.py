# ecr_secret_operator/controllers/manager.py

"""
Controller manager: feeds change notifications from watches and the renewal
scanner into one bounded queue and reconciles them with a pool of workers.
"""

import asyncio
from collections.abc import Callable, Iterator
from concurrent import futures
import logging
import threading
import time
from typing import Any

from ..api.v1beta1 import KIND
from ..core.exceptions import EcrSecretOperatorError, FatalConfigurationError
from ..ksecret.record import ManagedSecretRecord
from .reconciler import Reconciler
from .renewal import RenewalScanner
from .store import KubernetesStore, ObjectKey

logger = logging.getLogger(__name__)

WatchStream = Callable[[], Iterator[dict[str, Any]]]


def ecr_secret_event_key(event: dict[str, Any]) -> ObjectKey | None:
    """Key to reconcile for a watch event on an ECRSecret."""
    if event.get("type") not in ("ADDED", "MODIFIED"):
        return None
    metadata = (event.get("object") or {}).get("metadata") or {}
    name = metadata.get("name")
    if not name:
        return None
    return ObjectKey(namespace=metadata.get("namespace", "default"), name=name)


def secret_event_key(event: dict[str, Any]) -> ObjectKey | None:
    """Key of the owning ECRSecret for a watch event on a secret."""
    obj = event.get("object")
    if obj is None or getattr(obj, "metadata", None) is None:
        return None
    record = ManagedSecretRecord.from_k8s(obj)
    owner = record.controller_owner()
    if owner is None or owner.kind != KIND:
        return None
    return ObjectKey(namespace=record.namespace, name=owner.name)


class ControllerManager:
    """Runs watches, the renewal scanner and reconcile workers until stopped."""

    def __init__(
        self,
        reconciler: Reconciler,
        scanner_factory: Callable[[asyncio.Queue], RenewalScanner],
        watches: list[tuple[str, WatchStream, Callable[[dict], ObjectKey | None]]]
        | None = None,
        queue_size: int = 1024,
        workers: int = 2,
        requeue_delay: float = 30.0,
    ) -> None:
        self.reconciler = reconciler
        self.queue: asyncio.Queue[ObjectKey] = asyncio.Queue(maxsize=queue_size)
        self.scanner = scanner_factory(self.queue)
        self.watches = watches or []
        self.workers = workers
        self.requeue_delay = requeue_delay

        self.stop_event = asyncio.Event()
        self._in_flight: set[ObjectKey] = set()
        self._dirty: set[ObjectKey] = set()
        self._fatal: FatalConfigurationError | None = None
        self._tasks: list[asyncio.Task] = []
        self._requeue_tasks: set[asyncio.Task] = set()

    @classmethod
    def for_kubernetes(
        cls, store: KubernetesStore, reconciler: Reconciler, **kwargs: Any
    ) -> "ControllerManager":
        """Manager wired to ECRSecret and secret watches on a live cluster."""
        watches = [
            ("ecrsecrets", store.stream_ecr_secret_events, ecr_secret_event_key),
            ("secrets", store.stream_secret_events, secret_event_key),
        ]
        return cls(reconciler, watches=watches, **kwargs)

    async def enqueue(self, key: ObjectKey) -> None:
        """Queue a key, waiting while the queue is full."""
        await self.queue.put(key)

    async def run(self) -> None:
        """
        Run until ``stop()`` is called.

        Raises:
            FatalConfigurationError: If a reconcile hit a fatal configuration error.
        """
        loop = asyncio.get_running_loop()

        self._tasks = [
            asyncio.create_task(self.scanner.start(self.stop_event), name="renewal-scanner")
        ]
        for i in range(self.workers):
            self._tasks.append(asyncio.create_task(self._worker(), name=f"worker-{i}"))
        for name, stream, to_key in self.watches:
            self._start_watch(loop, name, stream, to_key)

        logger.info(f"Controller manager started with {self.workers} worker(s)")
        try:
            await self.stop_event.wait()
        finally:
            await self._shutdown()

        if self._fatal is not None:
            raise self._fatal

    def stop(self) -> None:
        self.stop_event.set()

    async def _shutdown(self) -> None:
        for task in [*self._tasks, *self._requeue_tasks]:
            task.cancel()
        await asyncio.gather(*self._tasks, *self._requeue_tasks, return_exceptions=True)
        self._tasks.clear()
        self._requeue_tasks.clear()
        logger.info("Controller manager stopped")

    async def _worker(self) -> None:
        while not self.stop_event.is_set():
            key = await self.queue.get()
            try:
                if key in self._in_flight:
                    self._dirty.add(key)
                    continue
                await self._process(key)
            finally:
                self.queue.task_done()

    async def _process(self, key: ObjectKey) -> None:
        self._in_flight.add(key)
        try:
            result = await self.reconciler.reconcile(key)
            logger.debug(f"Reconciled {key}: {result.value}")
        except FatalConfigurationError as e:
            logger.critical(f"Fatal configuration error, stopping: {e}")
            self._fatal = e
            self.stop()
        except EcrSecretOperatorError as e:
            logger.error(f"Reconcile of {key} failed, retrying in {self.requeue_delay}s: {e}")
            self._requeue_later(key)
        except Exception:
            logger.exception(f"Unexpected error reconciling {key}")
            self._requeue_later(key)
        finally:
            self._in_flight.discard(key)

        if key in self._dirty:
            self._dirty.discard(key)
            await self.queue.put(key)

    def _requeue_later(self, key: ObjectKey) -> None:
        async def requeue() -> None:
            await asyncio.sleep(self.requeue_delay)
            await self.queue.put(key)

        task = asyncio.create_task(requeue())
        self._requeue_tasks.add(task)
        task.add_done_callback(self._requeue_tasks.discard)

    def _start_watch(
        self,
        loop: asyncio.AbstractEventLoop,
        name: str,
        stream: WatchStream,
        to_key: Callable[[dict], ObjectKey | None],
    ) -> threading.Thread:
        """Relay a blocking watch stream from a daemon thread into the queue."""

        def pump() -> None:
            while not self.stop_event.is_set():
                try:
                    for event in stream():
                        if self.stop_event.is_set():
                            return
                        key = to_key(event)
                        if key is None:
                            continue
                        if loop.is_closed():
                            return
                        # Blocks this thread while the queue is full
                        asyncio.run_coroutine_threadsafe(self.queue.put(key), loop).result()
                except futures.CancelledError:
                    return
                except Exception as e:
                    logger.error(f"Watch on {name} failed: {e}")
                    time.sleep(max(self.requeue_delay, 1))

        thread = threading.Thread(target=pump, name=f"watch-{name}", daemon=True)
        thread.start()
        return thread
