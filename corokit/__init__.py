"""Coroutine synchronisation primitives, a thread pool and helpers for driving awaitables."""

__version__ = "0.1.0"
__all__ = ["sync_wait", "generator", "semaphore", "when_all", "thread_pool", "net"]