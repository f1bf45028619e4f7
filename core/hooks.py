# core/hooks.py

from typing import Callable

from fastapi import BackgroundTasks

from core.audit import record_action
from core.logging_config import logger


def run_guarded(fn: Callable, *args, **kwargs):
    """Run a side effect; log and swallow anything it raises."""
    try:
        fn(*args, **kwargs)
    except Exception as e:
        logger.warning(f"Post-commit hook {getattr(fn, '__name__', fn)} failed: {e}")


class PostCommitHooks:
    """
    Side effects queued by a route after its write succeeded.

    Hooks run once the response has been produced (FastAPI
    BackgroundTasks). Routes must only queue hooks after the write
    returned, never before.
    """

    def __init__(self, background_tasks: BackgroundTasks):
        self._tasks = background_tasks

    def audit(self, enterprise_id: str, user_email: str, action, details: str):
        self._tasks.add_task(run_guarded, record_action, enterprise_id, user_email, action, details)

    def notify(self, fn: Callable, *args, **kwargs):
        self._tasks.add_task(run_guarded, fn, *args, **kwargs)


def get_post_commit_hooks(background_tasks: BackgroundTasks) -> PostCommitHooks:
    return PostCommitHooks(background_tasks)
