# dispatch.py
# Runs provider work and hands completions back to the session owner.
#
# Completion callbacks always run on the owner: inline for
# ImmediateDispatcher, inside process_pending() for ThreadedDispatcher.

import logging
import queue
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Work = Callable[[], Any]
Completion = Callable[[Any, Optional[Exception]], None]


class ImmediateDispatcher:
    """Runs work synchronously on the caller's thread."""

    def submit(self, work: Work, on_done: Completion) -> None:
        try:
            result = work()
        except Exception as e:
            on_done(None, e)
            return
        on_done(result, None)

    def process_pending(self) -> int:
        return 0

    def shutdown(self) -> None:
        pass


class ThreadedDispatcher:
    """
    Runs work on a thread pool and queues completions for the owner.

    The owning thread must call process_pending() regularly (for example
    once per GPS poll) to apply finished work.

    Args:
        max_workers: Size of the worker pool.
    """

    def __init__(self, max_workers: int = 4) -> None:
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="wayfinder")
        self._completed: "queue.Queue[tuple]" = queue.Queue()

    def submit(self, work: Work, on_done: Completion) -> None:
        def _run() -> None:
            try:
                result = work()
            except Exception as e:
                self._completed.put((on_done, None, e))
                return
            self._completed.put((on_done, result, None))

        self._pool.submit(_run)

    def process_pending(self, block: bool = False, timeout: Optional[float] = None) -> int:
        """
        Apply queued completions on the calling thread.

        Args:
            block:   Wait for at least one completion.
            timeout: Upper bound on the wait when block is True.

        Returns:
            Number of completions applied.
        """
        applied = 0
        if block:
            try:
                on_done, result, error = self._completed.get(timeout=timeout)
            except queue.Empty:
                return 0
            on_done(result, error)
            applied += 1
        while True:
            try:
                on_done, result, error = self._completed.get_nowait()
            except queue.Empty:
                break
            on_done(result, error)
            applied += 1
        return applied

    def shutdown(self) -> None:
        self._pool.shutdown(wait=True)
        logger.debug("Dispatcher pool stopped.")
