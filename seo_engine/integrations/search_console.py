"""Google Search Console integration for query performance data.

Authenticates with a long-lived OAuth refresh token and pages through the
Search Analytics API, flattening rows into ``RawQueryRecord`` values.
"""

import logging
from datetime import date, timedelta
from typing import Any
from urllib.parse import quote

import httpx

from seo_engine.config import settings
from seo_engine.core.exceptions import APIKeyMissingError, ExternalAPIError, RateLimitExceededError
from seo_engine.services.analysis.types import RawQueryRecord

logger = logging.getLogger(__name__)

API_NAME = "Google Search Console"


class SearchConsoleClient:
    """Client for the Search Console Search Analytics API."""

    TOKEN_URL = "https://oauth2.googleapis.com/token"
    BASE_URL = "https://www.googleapis.com/webmasters/v3"

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        refresh_token: str | None = None,
        site_url: str | None = None,
        row_limit: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client_id = client_id or settings.gsc_client_id
        self.client_secret = client_secret or settings.gsc_client_secret
        self.refresh_token = refresh_token or settings.gsc_refresh_token
        self.site_url = site_url or settings.gsc_site_url
        self.row_limit = row_limit or settings.gsc_row_limit
        self.timeout = timeout or settings.http_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._access_token: str | None = None

        missing = [
            name
            for name, value in (
                ("GSC_CLIENT_ID", self.client_id),
                ("GSC_CLIENT_SECRET", self.client_secret),
                ("GSC_REFRESH_TOKEN", self.refresh_token),
                ("GSC_SITE_URL", self.site_url),
            )
            if not value
        ]
        if missing:
            raise APIKeyMissingError(API_NAME, missing)

    async def __aenter__(self) -> "SearchConsoleClient":
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Client must be used as async context manager")
        return self._client

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as e:
            raise ExternalAPIError(API_NAME, "response body is not valid JSON") from e
        if not isinstance(payload, dict):
            raise ExternalAPIError(API_NAME, "unexpected response shape")
        return payload

    async def _get_access_token(self) -> str:
        """Exchange the refresh token for a short-lived access token."""
        if self._access_token:
            return self._access_token

        try:
            response = await self.client.post(
                self.TOKEN_URL,
                data={
                    "grant_type": "refresh_token",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "refresh_token": self.refresh_token,
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Search Console token refresh failed", extra={"error": str(e)})
            raise ExternalAPIError(API_NAME, f"token refresh failed: {e}") from e

        token = self._decode(response).get("access_token")
        if not token:
            raise ExternalAPIError(API_NAME, "token response did not include an access token")
        self._access_token = token
        return token

    async def _query(self, body: dict[str, Any]) -> list[dict[str, Any]]:
        """POST one Search Analytics query and return its rows."""
        token = await self._get_access_token()
        url = f"{self.BASE_URL}/sites/{quote(self.site_url or '', safe='')}/searchAnalytics/query"

        try:
            response = await self.client.post(
                url,
                json=body,
                headers={"Authorization": f"Bearer {token}"},
            )
            if response.status_code == 429:
                logger.warning("Search Console rate limit hit", extra={"site_url": self.site_url})
                raise RateLimitExceededError(API_NAME)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Search Console HTTP error", extra={"error": str(e)})
            raise ExternalAPIError(API_NAME, str(e)) from e

        return self._decode(response).get("rows") or []

    async def fetch_query_performance(
        self,
        *,
        days: int,
        country: str,
        today: date | None = None,
    ) -> list[RawQueryRecord]:
        """Fetch daily query rows for the trailing window.

        Args:
            days: Window length; the start date is ``today - days``.
            country: Country code to filter on, or ``"all"`` for no filter.
                Records are labelled with this value.
            today: End date of the window (defaults to the current date).

        Returns:
            Flattened rows, one per (query, date).
        """
        end_date = today or date.today()
        start_date = end_date - timedelta(days=days)
        body: dict[str, Any] = {
            "startDate": start_date.isoformat(),
            "endDate": end_date.isoformat(),
            "dimensions": ["query", "date"],
            "rowLimit": self.row_limit,
        }
        if country.lower() != "all":
            body["dimensionFilterGroups"] = [
                {
                    "filters": [
                        {
                            "dimension": "country",
                            "operator": "equals",
                            "expression": country.lower(),
                        }
                    ]
                }
            ]

        logger.info(
            "Fetching Search Console data",
            extra={"start_date": body["startDate"], "end_date": body["endDate"], "country": country},
        )

        records: list[RawQueryRecord] = []
        start_row = 0
        while True:
            rows = await self._query({**body, "startRow": start_row})
            records.extend(self._to_record(row, country) for row in rows)
            if len(rows) < self.row_limit:
                break
            start_row += self.row_limit

        logger.info("Fetched Search Console rows", extra={"rows": len(records)})
        return records

    @staticmethod
    def _to_record(row: dict[str, Any], country: str) -> RawQueryRecord:
        keys = row.get("keys") or []
        query = keys[0] if len(keys) > 0 else ""
        raw_date = keys[1] if len(keys) > 1 else ""
        try:
            row_date = date.fromisoformat(raw_date)
        except ValueError as e:
            raise ExternalAPIError(API_NAME, f"unexpected date in row: {raw_date!r}") from e

        return RawQueryRecord(
            query=query,
            country=country,
            date=row_date,
            clicks=int(row.get("clicks") or 0),
            impressions=int(row.get("impressions") or 0),
            ctr=float(row.get("ctr") or 0.0),
            position=float(row.get("position") or 0.0),
        )
