"""
Project Cmxdump - CMX Receiver Tests

Unit tests for cmx/receiver.py.
"""

import json
import pytest
from datetime import datetime, timezone

from core.models import AnalyticsEnvelope, MerakiConfig
from core.timestamp import EPOCH
from core.utils import ConfigurationError
from cmx.receiver import (
    CMXPayloadError,
    parse_envelope,
    verify_secret,
    validator_response,
)


class TestValidatorResponse:
    """Tests for the validator handshake."""

    def test_returns_token(self, meraki_config):
        """Test configured validator is echoed."""
        assert validator_response(meraki_config) == "validator-token"

    def test_missing_token(self):
        """Test unset validator is a configuration error."""
        with pytest.raises(ConfigurationError):
            validator_response(MerakiConfig())


class TestParseEnvelope:
    """Tests for parse_envelope."""

    def test_parse_text(self, mock_cmx_post):
        """Test decoding a JSON string body."""
        envelope = parse_envelope(json.dumps(mock_cmx_post))
        assert envelope.version == "2.0"
        assert envelope.secret == "s3cret"
        assert envelope.data.ap_mac == "00:18:0a:13:dd:b0"
        first, second = envelope.data.observations
        assert first.seen_time == datetime(2020, 1, 1, tzinfo=timezone.utc)
        assert second.seen_time == EPOCH

    def test_parse_bytes_and_dict(self, mock_cmx_post):
        """Test bytes and decoded bodies give the same result."""
        from_bytes = parse_envelope(json.dumps(mock_cmx_post).encode())
        from_dict = parse_envelope(mock_cmx_post)
        assert from_bytes == from_dict

    def test_invalid_json(self):
        """Test malformed body."""
        with pytest.raises(CMXPayloadError):
            parse_envelope("{not json")

    def test_not_an_object(self):
        """Test JSON array body."""
        with pytest.raises(CMXPayloadError):
            parse_envelope("[1, 2]")

    def test_payload_error_is_value_error(self):
        """Test callers can catch ValueError."""
        with pytest.raises(ValueError):
            parse_envelope(b"")

    def test_location_not_an_object(self, mock_cmx_post):
        """Test a list-valued location is rejected."""
        mock_cmx_post["data"]["observations"][0]["location"] = [1, 2]
        with pytest.raises(CMXPayloadError):
            parse_envelope(mock_cmx_post)

    def test_non_numeric_seen_epoch(self, mock_cmx_post):
        """Test a text seenEpoch is rejected."""
        mock_cmx_post["data"]["observations"][0]["seenEpoch"] = "abc"
        with pytest.raises(CMXPayloadError):
            parse_envelope(json.dumps(mock_cmx_post))

    def test_data_not_an_object(self, mock_cmx_post):
        """Test a list-valued data block is rejected."""
        mock_cmx_post["data"] = ["x"]
        with pytest.raises(CMXPayloadError):
            parse_envelope(mock_cmx_post)

    def test_unknown_version_still_parsed(self, mock_cmx_post):
        """Test other versions decode with a warning only."""
        mock_cmx_post["version"] = "3.0"
        assert parse_envelope(mock_cmx_post).version == "3.0"

    def test_round_trip(self, sample_envelope, utc_codec):
        """Test to_json output parses back to the same envelope."""
        assert parse_envelope(sample_envelope.to_json(utc_codec), utc_codec) == sample_envelope


class TestVerifySecret:
    """Tests for verify_secret."""

    def test_match(self, sample_envelope):
        """Test matching secret."""
        assert verify_secret(sample_envelope, "s3cret") is True

    def test_mismatch(self, sample_envelope):
        """Test wrong secret."""
        assert verify_secret(sample_envelope, "other") is False

    def test_no_secret_configured(self):
        """Test posts are accepted when no secret is set."""
        assert verify_secret(AnalyticsEnvelope(secret="anything"), None) is True
        assert verify_secret(AnalyticsEnvelope(), "") is True
