"""
Project Cmxdump - CMX Module

Location-analytics (CMX) webhook payload handling.
"""

from .receiver import (
    CMXPayloadError,
    parse_envelope,
    verify_secret,
    validator_response,
)

__all__ = [
    "CMXPayloadError",
    "parse_envelope",
    "verify_secret",
    "validator_response",
]
