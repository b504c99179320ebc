"""
Project Cmxdump - Dashboard API Client

Interface to the Meraki Dashboard REST API for SSID and device inventory.
"""

import logging
import requests
from typing import Optional, List, Any, Type

from core.models import (
    DEFAULT_TIMEOUT,
    ESSID,
    AccessPoint,
    FetchResult,
    FetchStatus,
    MerakiConfig,
)
from core.utils import has_model_prefix, WIRELESS_AP_PREFIX

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Cisco-Meraki-API-Key"


class DashboardClient:
    """
    Client for the Meraki Dashboard API.

    Every request carries the API key header. Redirects (the API answers
    on a shard host such as n123.meraki.com) are followed by requests,
    which keeps custom headers on each hop.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize Dashboard client.

        Args:
            api_url: Base API URL, e.g. https://api.meraki.com/api/v0
            api_key: Dashboard API key
            timeout: Seconds to wait for connect and for each read
        """
        self.base_url = api_url.rstrip("/")
        self.timeout = timeout

        self._session = requests.Session()
        self._session.headers.update({
            API_KEY_HEADER: api_key,
            "Accept": "application/json",
        })

    @classmethod
    def from_config(
        cls,
        config: MerakiConfig,
        api_key: Optional[str] = None,
    ) -> "DashboardClient":
        """Build a client from configuration, optionally with another key."""
        return cls(
            config.api_url,
            api_key if api_key is not None else config.api_key,
            timeout=config.timeout,
        )

    def close(self):
        """Release pooled connections."""
        self._session.close()

    def __enter__(self) -> "DashboardClient":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _api_request(self, endpoint: str) -> FetchResult:
        """
        GET an endpoint that returns a JSON array.

        Args:
            endpoint: API path below the base URL

        Returns:
            FetchResult whose items are the raw JSON objects
        """
        url = f"{self.base_url}{endpoint}"
        logger.info(f"Requesting {url}")

        try:
            resp = self._session.get(url, timeout=self.timeout, allow_redirects=True)
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Cannot connect to Dashboard API at {url}: {e}")
            return FetchResult(FetchStatus.TRANSPORT_ERROR, url=url, reason=str(e))
        except requests.exceptions.Timeout:
            logger.error(f"Dashboard API request timeout: {url}")
            return FetchResult(FetchStatus.TRANSPORT_ERROR, url=url, reason="timeout")
        except requests.exceptions.RequestException as e:
            logger.error(f"Dashboard API request failed: {e}")
            return FetchResult(FetchStatus.TRANSPORT_ERROR, url=url, reason=str(e))

        try:
            for hop in resp.history:
                logger.debug(f"Redirected ({hop.status_code}) from {hop.url}")
            final_url = resp.url or url

            if resp.status_code != 200:
                logger.error(
                    f"Dashboard API error {resp.status_code} for {final_url}: {resp.text[:200]}"
                )
                return FetchResult(
                    FetchStatus.HTTP_ERROR,
                    url=final_url,
                    status_code=resp.status_code,
                    reason=resp.reason,
                )

            try:
                payload = resp.json()
            except ValueError as e:
                logger.error(f"Cannot decode Dashboard API response from {final_url}: {e}")
                return FetchResult(
                    FetchStatus.DECODE_ERROR,
                    url=final_url,
                    status_code=resp.status_code,
                    reason=str(e),
                )

            if not isinstance(payload, list):
                logger.error(
                    f"Expected a JSON array from {final_url}, got {type(payload).__name__}"
                )
                return FetchResult(
                    FetchStatus.DECODE_ERROR,
                    url=final_url,
                    status_code=resp.status_code,
                    reason="response is not a JSON array",
                )

            return FetchResult(
                FetchStatus.OK,
                items=tuple(payload),
                url=final_url,
                status_code=resp.status_code,
            )
        finally:
            resp.close()

    def _decode_items(self, result: FetchResult, model: Type) -> FetchResult:
        """Turn raw JSON objects of a successful result into model records."""
        if not result.ok:
            return result

        records = []
        for raw in result.items:
            if not isinstance(raw, dict):
                logger.warning(f"Skipping non-object {model.__name__} entry: {raw!r}")
                continue
            try:
                records.append(model.from_dict(raw))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed {model.__name__} entry {raw!r}: {e}")

        return FetchResult(
            result.status,
            items=tuple(records),
            url=result.url,
            status_code=result.status_code,
        )

    def list_essids(self, network_id: str) -> FetchResult:
        """
        Get the SSIDs configured on a network.

        Args:
            network_id: Meraki network identifier

        Returns:
            FetchResult of ESSID records
        """
        result = self._decode_items(
            self._api_request(f"/networks/{network_id}/ssids"),
            ESSID,
        )
        if result.ok:
            logger.info(f"Network {network_id}: {len(result.items)} SSIDs")
        return result

    def list_access_points(self, network_id: str) -> FetchResult:
        """
        Get the wireless access points of a network.

        Devices whose model does not start with the MR family code
        (switches, appliances, cameras, blank models) are dropped.

        Args:
            network_id: Meraki network identifier

        Returns:
            FetchResult of AccessPoint records
        """
        result = self._decode_items(
            self._api_request(f"/networks/{network_id}/devices"),
            AccessPoint,
        )
        if not result.ok:
            return result

        aps = tuple(ap for ap in result.items if has_model_prefix(ap.model, WIRELESS_AP_PREFIX))
        logger.info(
            f"Network {network_id}: {len(aps)} access points out of {len(result.items)} devices"
        )
        return FetchResult(
            result.status,
            items=aps,
            url=result.url,
            status_code=result.status_code,
        )


def fetch_essids(config: MerakiConfig, api_key: str, network_id: str) -> List[ESSID]:
    """
    List the SSIDs of a network.

    Never raises for request failures; they are logged and yield [].
    """
    with DashboardClient.from_config(config, api_key=api_key) as client:
        return client.list_essids(network_id).items_or_empty()


def fetch_access_points(config: MerakiConfig, api_key: str, network_id: str) -> List[AccessPoint]:
    """
    List the wireless access points of a network.

    Never raises for request failures; they are logged and yield [].
    """
    with DashboardClient.from_config(config, api_key=api_key) as client:
        return client.list_access_points(network_id).items_or_empty()
