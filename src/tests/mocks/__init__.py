"""
Project Cmxdump - Mocks Module

Mock data and helpers for testing.
"""

from .mock_data import (
    MOCK_ESSIDS,
    MOCK_DEVICES,
    MOCK_CMX_POST,
    get_mock_essids,
    get_mock_devices,
    get_mock_cmx_post,
    make_response,
)

__all__ = [
    "MOCK_ESSIDS",
    "MOCK_DEVICES",
    "MOCK_CMX_POST",
    "get_mock_essids",
    "get_mock_devices",
    "get_mock_cmx_post",
    "make_response",
]
