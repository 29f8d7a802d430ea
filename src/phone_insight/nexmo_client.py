from __future__ import annotations

import logging

import httpx

from .config import ConfigurationError, Settings, get_settings

logger = logging.getLogger(__name__)


class NexmoClient:
    """Thin wrapper around the Nexmo Number Insight Advanced (async) endpoint."""

    def __init__(self, settings: Settings, http_client: httpx.Client | None = None) -> None:
        if not settings.nexmo_api_key or not settings.nexmo_api_secret:
            raise ConfigurationError(
                "Nexmo credentials are not configured (NEXMO_API_KEY / NEXMO_API_SECRET)"
            )
        self.settings = settings
        self._http = http_client

    def lookup(self, number: str, callback_url: str) -> str:
        """
        Ask Nexmo to enrich `number`; results are POSTed later to `callback_url`.

        Returns the raw response body. The body is not parsed and the HTTP
        status is not checked; transport errors propagate to the caller.
        """
        params = {
            "api_key": self.settings.nexmo_api_key,
            "api_secret": self.settings.nexmo_api_secret,
            "number": number,
            "callback": callback_url,
        }

        if self._http is not None:
            response = self._http.post(self.settings.nexmo_insight_url, data=params)
        else:
            with httpx.Client() as client:
                response = client.post(self.settings.nexmo_insight_url, data=params)

        logger.info("Nexmo lookup response (%s): %s", response.status_code, response.text)
        return response.text


def get_nexmo_client() -> NexmoClient:
    return NexmoClient(get_settings())
