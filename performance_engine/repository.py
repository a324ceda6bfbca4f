"""Week-scoped reads against the Supabase backend."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from performance_engine.adapters.rows import (
    map_rows,
    to_external_intensity,
    to_external_task,
    to_feedback_record,
    to_internal_intensity,
    to_internal_task,
)
from performance_engine.config import Settings
from performance_engine.errors import RepositoryError
from performance_engine.schema import (
    ExternalIntensity,
    ExternalTask,
    FeedbackRecord,
    InternalIntensity,
    InternalTask,
)

logger = logging.getLogger(__name__)

_INTERNAL_TASK_COLUMNS = (
    "id, activity_id, title, description, completed, task_template_id, feedback_template_id, "
    "activities!inner(id, activity_date, user_id)"
)
_EXTERNAL_TASK_COLUMNS = "id, completed, events_local_meta!inner(user_id, events_external!inner(start_date, deleted))"
_EXTERNAL_INTENSITY_COLUMNS = "id, intensity, intensity_enabled, events_external!inner(start_date, deleted)"


class SupabaseRepository:
    """Read-only access to the rows the performance counters are built from.

    Every fetch takes an inclusive ``start`` day and an exclusive ``end`` day
    (see ``dates.query_bounds``).
    """

    def __init__(self, client: AsyncClient):
        self._client = client

    async def _rows(self, operation: str, query: Any) -> list:
        try:
            response = await query.execute()
        except (APIError, httpx.HTTPError) as exc:
            raise RepositoryError(operation, str(exc)) from exc

        rows = response.data or []
        logger.debug("%s returned %d rows", operation, len(rows))
        return rows

    async def fetch_internal_tasks(self, user_id: str, start: str, end: str) -> list[InternalTask]:
        query = (
            self._client.table("activity_tasks")
            .select(_INTERNAL_TASK_COLUMNS)
            .eq("activities.user_id", user_id)
            .gte("activities.activity_date", start)
            .lt("activities.activity_date", end)
        )
        return map_rows(await self._rows("fetch_internal_tasks", query), to_internal_task)

    async def fetch_external_tasks(self, user_id: str, start: str, end: str) -> list[ExternalTask]:
        query = (
            self._client.table("external_event_tasks")
            .select(_EXTERNAL_TASK_COLUMNS)
            .eq("events_local_meta.user_id", user_id)
            .gte("events_local_meta.events_external.start_date", start)
            .lt("events_local_meta.events_external.start_date", end)
        )
        return map_rows(await self._rows("fetch_external_tasks", query), to_external_task)

    async def fetch_internal_intensity(self, user_id: str, start: str, end: str) -> list[InternalIntensity]:
        query = (
            self._client.table("activities")
            .select("id, activity_date, intensity, intensity_enabled")
            .eq("user_id", user_id)
            .gte("activity_date", start)
            .lt("activity_date", end)
        )
        return map_rows(await self._rows("fetch_internal_intensity", query), to_internal_intensity)

    async def fetch_external_intensity(self, user_id: str, start: str, end: str) -> list[ExternalIntensity]:
        query = (
            self._client.table("events_local_meta")
            .select(_EXTERNAL_INTENSITY_COLUMNS)
            .eq("user_id", user_id)
            .gte("events_external.start_date", start)
            .lt("events_external.start_date", end)
        )
        return map_rows(await self._rows("fetch_external_intensity", query), to_external_intensity)

    async def fetch_feedback(self, user_id: str, activity_ids: list[str]) -> list[FeedbackRecord]:
        """Fetch self-feedback for ``activity_ids``, newest first."""

        if not activity_ids:
            return []
        query = (
            self._client.table("task_template_self_feedback")
            .select("*")
            .eq("user_id", user_id)
            .in_("activity_id", activity_ids)
            .order("created_at", desc=True)
        )
        return map_rows(await self._rows("fetch_feedback", query), to_feedback_record)


async def connect(settings: Settings) -> SupabaseRepository:
    url, key = settings.require_credentials()
    client = await acreate_client(url, key)
    return SupabaseRepository(client)
