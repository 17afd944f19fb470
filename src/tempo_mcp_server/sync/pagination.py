"""Cursor-driven retrieval of Tempo worklog listings."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from ..api.tempo_client import TempoClient

logger = logging.getLogger(__name__)

# 500 pages of 50 worklogs is 25,000 worklogs
MAX_PAGES = 500


@dataclass(frozen=True)
class PageResult:
    """Accumulated worklogs and the number of pages fetched."""

    worklogs: List[Dict[str, Any]]
    pages_processed: int


class PaginatedRetriever:
    """Follows ``metadata.next`` cursors until the listing is exhausted."""

    def __init__(self, tempo_client: TempoClient, max_pages: int = MAX_PAGES) -> None:
        self.tempo_client = tempo_client
        self.max_pages = max_pages

    async def fetch_all(self, account_id: str, start_date: str, end_date: str) -> PageResult:
        """Fetch every worklog of a user within a date range.

        The first request carries the date query; follow-up requests use
        the cursor URL as returned. Fetching stops after ``max_pages``
        pages even if a cursor remains.

        Args:
            account_id: Jira account ID of the worklog author
            start_date: Start date (YYYY-MM-DD)
            end_date: End date (YYYY-MM-DD)

        Returns:
            PageResult with all worklogs and the page count
        """
        worklogs: List[Dict[str, Any]] = []
        pages_processed = 0
        next_url = None

        while True:
            if pages_processed >= self.max_pages:
                logger.warning(
                    f"Reached maximum page limit ({self.max_pages}) while fetching worklogs"
                )
                break

            if pages_processed == 0:
                data = await asyncio.to_thread(
                    self.tempo_client.get_user_worklogs, account_id, start_date, end_date
                )
            else:
                data = await asyncio.to_thread(self.tempo_client.get_page, next_url)

            worklogs.extend(data.get("results") or [])
            pages_processed += 1

            next_url = (data.get("metadata") or {}).get("next")
            if not next_url:
                break

        logger.info(f"Retrieved {len(worklogs)} worklogs from Tempo in {pages_processed} page(s)")
        return PageResult(worklogs=worklogs, pages_processed=pages_processed)
