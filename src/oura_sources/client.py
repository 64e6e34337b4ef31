from __future__ import annotations

import logging
from typing import Any

import requests

from oura_config.settings import DEFAULT_API_BASE_URL
from oura_sources.http_client import HttpClient, HttpClientConfig


logger = logging.getLogger(__name__)

DAILY_SLEEP_PATH = "/usercollection/daily_sleep"
DAILY_READINESS_PATH = "/usercollection/daily_readiness"
DAILY_ACTIVITY_PATH = "/usercollection/daily_activity"
HEART_RATE_PATH = "/usercollection/heartrate"


def _date_params(start_date: str, end_date: str | None) -> dict[str, str]:
    params = {"start_date": start_date}
    if end_date:
        params["end_date"] = end_date
    return params


class OuraClient:
    """
    Authenticated access to the Oura v2 user collection.

    Every method returns the raw JSON body. Transport and HTTP errors from
    `requests` propagate unchanged; status codes are interpreted by the caller.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        config: HttpClientConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key must be a non-empty string")
        self.base_url = base_url.rstrip("/")
        self.http = HttpClient(
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            config=config,
            session=session,
        )

    def _get(self, path: str, start_date: str, end_date: str | None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s start_date=%s end_date=%s", path, start_date, end_date)
        return self.http.get_json(url, params=_date_params(start_date, end_date))

    def get_daily_sleep(self, start_date: str, end_date: str | None = None) -> Any:
        return self._get(DAILY_SLEEP_PATH, start_date, end_date)

    def get_daily_readiness(self, start_date: str, end_date: str | None = None) -> Any:
        return self._get(DAILY_READINESS_PATH, start_date, end_date)

    def get_daily_activity(self, start_date: str, end_date: str | None = None) -> Any:
        return self._get(DAILY_ACTIVITY_PATH, start_date, end_date)

    def get_heart_rate(self, start_date: str, end_date: str | None = None) -> Any:
        return self._get(HEART_RATE_PATH, start_date, end_date)
