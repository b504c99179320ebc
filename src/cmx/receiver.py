"""
Project Cmxdump - CMX Receiver

Decoding side of the Meraki CMX scanning webhook: the validator handshake,
shared-secret check and payload parsing. Serving HTTP is left to the caller.
"""

import hmac
import json
import logging
from typing import Optional, Union, Dict, Any

from core.models import AnalyticsEnvelope, MerakiConfig
from core.timestamp import TimestampCodec
from core.utils import ConfigurationError

logger = logging.getLogger(__name__)

# Scanning API versions whose payload layout the models follow
SUPPORTED_VERSIONS = ("2.0",)


class CMXPayloadError(ValueError):
    """Raised when a CMX post cannot be decoded."""


def validator_response(config: MerakiConfig) -> str:
    """
    Body to answer the vendor's GET on the webhook URL with.

    Raises:
        ConfigurationError: If no validator token is configured
    """
    if not config.cmx_validator:
        raise ConfigurationError("meraki.cmx_validator is not set")
    return config.cmx_validator


def parse_envelope(
    body: Union[str, bytes, Dict[str, Any]],
    codec: Optional[TimestampCodec] = None,
) -> AnalyticsEnvelope:
    """
    Decode a CMX scanning post.

    Args:
        body: Raw request body, or the already-decoded JSON object
        codec: Timestamp codec for ``seenTime`` (default zone if None)

    Returns:
        AnalyticsEnvelope

    Raises:
        CMXPayloadError: If the body is not a JSON object or a field has the
            wrong type
    """
    if isinstance(body, (str, bytes)):
        try:
            body = json.loads(body)
        except ValueError as e:
            raise CMXPayloadError(f"CMX body is not valid JSON: {e}") from e

    if not isinstance(body, dict):
        raise CMXPayloadError(f"CMX body must be a JSON object, got {type(body).__name__}")

    try:
        envelope = AnalyticsEnvelope.from_dict(body, codec)
    except (AttributeError, TypeError, ValueError) as e:
        raise CMXPayloadError(f"CMX body has malformed fields: {e}") from e

    if envelope.version and envelope.version not in SUPPORTED_VERSIONS:
        logger.warning(f"Unexpected CMX version {envelope.version!r}")

    logger.debug(
        f"CMX {envelope.type or 'post'} from {envelope.data.ap_mac}: "
        f"{len(envelope.data.observations)} observations"
    )
    return envelope


def verify_secret(envelope: AnalyticsEnvelope, expected: Optional[str]) -> bool:
    """
    Check the post's shared secret.

    Posts are accepted when no secret is configured.
    """
    if not expected:
        logger.warning("No CMX secret configured, accepting post without verification")
        return True

    if hmac.compare_digest(envelope.secret.encode(), expected.encode()):
        return True

    logger.warning(f"CMX secret mismatch for post from {envelope.data.ap_mac}")
    return False
