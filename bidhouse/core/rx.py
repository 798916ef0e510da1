"""
Provides reactivex support
"""
import multiprocessing

from reactivex.scheduler import ThreadPoolScheduler


def threadpool_scheduler(max_workers: int | None = None) -> ThreadPoolScheduler:
    """
    Used to deliver auction events off the caller's thread.

    :param max_workers: if not specified, the max workers will be set to the CPU count
    """
    return ThreadPoolScheduler(
        max_workers if max_workers else multiprocessing.cpu_count()
    )
