"""
Project Cmxdump - Dashboard Module

Meraki Dashboard API access for SSIDs and access points.
"""

from .api_client import (
    API_KEY_HEADER,
    DashboardClient,
    fetch_essids,
    fetch_access_points,
)

__all__ = [
    "API_KEY_HEADER",
    "DashboardClient",
    "fetch_essids",
    "fetch_access_points",
]
