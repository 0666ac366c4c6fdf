from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from tasklist.domain.errors import PersistenceError, TaskDecodeError
from tasklist.domain.task_models import Task, TaskPriority, decode_task_row

logger = logging.getLogger("tasklist.store")

COLUMNS = "id,text,done,priority,created_at"


class RestTaskRepo:
    """Task table behind a PostgREST-style backend-as-a-service endpoint.

    One row per task: ``id`` (store-assigned), ``text``, ``done``, ``priority``
    and ``created_at`` (ordering only). Every failure surfaces as
    PersistenceError; nothing is retried.
    """

    def __init__(
        self,
        url: str,
        key: str,
        table: str = "todos",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.table = table
        self.client = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def _send(self, method: str, *, params: dict[str, str], **kwargs: Any) -> httpx.Response:
        try:
            resp = await self.client.request(method, f"/{self.table}", params=params, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PersistenceError(
                f"{method} {self.table} returned {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise PersistenceError(f"{method} {self.table} failed: {e!r}") from e
        return resp

    @staticmethod
    def _rows(resp: httpx.Response) -> list:
        try:
            body = resp.json()
        except ValueError as e:
            raise TaskDecodeError("response body is not JSON") from e
        if not isinstance(body, list):
            raise TaskDecodeError(f"expected a list of rows, got {type(body).__name__}")
        return body

    async def fetch_all(self) -> List[Task]:
        resp = await self._send("GET", params={"select": COLUMNS, "order": "created_at.desc"})
        return [decode_task_row(r) for r in self._rows(resp)]

    async def insert(self, text: str, done: bool, priority: TaskPriority) -> Task:
        resp = await self._send(
            "POST",
            params={"select": COLUMNS},
            json={"text": text, "done": done, "priority": TaskPriority(priority).value},
            headers={"Prefer": "return=representation"},
        )
        rows = self._rows(resp)
        if len(rows) != 1:
            raise TaskDecodeError(f"insert returned {len(rows)} rows, expected 1")
        return decode_task_row(rows[0])

    async def update_done(self, task_id: int, done: bool) -> None:
        resp = await self._send(
            "PATCH",
            params={"id": f"eq.{task_id}", "select": "id"},
            json={"done": done},
            headers={"Prefer": "return=representation"},
        )
        if not self._rows(resp):
            raise PersistenceError(f"no task row with id {task_id}")

    async def delete_by_id(self, task_id: int) -> None:
        resp = await self._send(
            "DELETE",
            params={"id": f"eq.{task_id}", "select": "id"},
            headers={"Prefer": "return=representation"},
        )
        if not self._rows(resp):
            raise PersistenceError(f"no task row with id {task_id}")

    async def close(self) -> None:
        await self.client.aclose()
        logger.debug("store.closed", extra={"category": "store", "event": "store.closed", "table": self.table})
