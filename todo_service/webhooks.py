"""Outbound completion notifications."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any

import requests

logger = logging.getLogger(__name__)

TASK_COMPLETED_EVENT = "task_completed"


def build_completion_payload(task_name: str, list_name: str) -> dict[str, str]:
    return {
        "event": TASK_COMPLETED_EVENT,
        "task": task_name,
        "list": list_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


class WebhookNotifier:
    """Posts webhook events on a background worker.

    Callers never wait for delivery; failures are logged and dropped.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 5.0,
        session: requests.Session | None = None,
        max_workers: int = 2,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="webhook"
        )

    def notify_task_completed(self, task_name: str, list_name: str) -> Future:
        payload = build_completion_payload(task_name, list_name)
        future = self._executor.submit(self._post, payload)
        future.add_done_callback(self._log_failure)
        return future

    def _post(self, payload: dict[str, Any]) -> int:
        response = self._session.post(self.url, json=payload, timeout=self.timeout)
        response.raise_for_status()
        logger.info("webhook triggered for %s", payload.get("task"))
        return response.status_code

    @staticmethod
    def _log_failure(future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.warning("webhook failed: %s", exc)

    def close(self) -> None:
        self._executor.shutdown(wait=False)
        self._session.close()
