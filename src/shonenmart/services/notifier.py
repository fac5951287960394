import logging

logger = logging.getLogger(__name__)


def run_detached(job, *args, **kwargs):
    """Run `job`, logging and dropping any exception it raises."""
    try:
        job(*args, **kwargs)
    except Exception:
        logger.exception(f"Detached job {getattr(job, '__name__', job)!r} failed")


class Notifier:
    """Schedules fire-and-forget jobs such as transactional emails.

    Inside a request the jobs go to FastAPI's `BackgroundTasks` and run after
    the response is sent. Without one (scripts, unit tests) they run inline.
    Either way a failing job is logged and never reaches the caller.
    """

    def __init__(self, background_tasks=None):
        self.background_tasks = background_tasks

    def notify_async(self, job, *args, **kwargs):
        if self.background_tasks is not None:
            self.background_tasks.add_task(run_detached, job, *args, **kwargs)
        else:
            run_detached(job, *args, **kwargs)
