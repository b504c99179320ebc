"""
Project Cmxdump - Test Configuration

Pytest fixtures and configuration for all tests.
"""

import sys
import pytest
from pathlib import Path
from datetime import datetime, timezone

# Add project root and this directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from core.models import (
    MerakiConfig, GeoLocation, ClientObservation,
    AnalyticsPayload, AnalyticsEnvelope,
)
from core.timestamp import TimestampCodec
from mocks import (
    get_mock_essids,
    get_mock_devices,
    get_mock_cmx_post,
    make_response as _make_response,
)


# =============================================================================
# FIXTURES - CONFIGURATION
# =============================================================================

@pytest.fixture
def meraki_config():
    """Connection settings pointing at a fake API host."""
    return MerakiConfig(
        api_url="https://api.example.test/api/v0",
        api_key="test-api-key",
        network_id="N_1234",
        cmx_validator="validator-token",
        cmx_secret="s3cret",
    )


@pytest.fixture
def sample_config():
    """Sample configuration dictionary."""
    return {
        "meraki": {
            "api_url": "https://api.example.test/api/v0/",
            "api_key": "file-key",
            "network_id": "N_FILE",
            "cmx_validator": "validator-token",
            "cmx_secret": "s3cret",
            "timezone": "UTC",
            "timeout": 5,
        },
    }


@pytest.fixture
def temp_config_file(sample_config, tmp_path):
    """Temporary config file."""
    import yaml

    config_path = tmp_path / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return str(config_path)


@pytest.fixture(autouse=True)
def clean_meraki_env(monkeypatch):
    """Keep the caller's environment out of config loading."""
    monkeypatch.delenv("MERAKI_API_KEY", raising=False)
    monkeypatch.delenv("MERAKI_NETWORK_ID", raising=False)


# =============================================================================
# FIXTURES - TIMESTAMPS
# =============================================================================

@pytest.fixture
def utc_codec():
    """Codec rendering in UTC."""
    return TimestampCodec("UTC")


@pytest.fixture
def mexico_codec():
    """Codec for the default zone."""
    return TimestampCodec("America/Mexico_City")


# =============================================================================
# FIXTURES - DASHBOARD API
# =============================================================================

@pytest.fixture
def mock_essids():
    """Raw SSID list as returned by the API."""
    return get_mock_essids()


@pytest.fixture
def mock_devices():
    """Raw device list: one MR, one MS, one MX."""
    return get_mock_devices()


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects."""
    return _make_response


# =============================================================================
# FIXTURES - CMX
# =============================================================================

@pytest.fixture
def mock_cmx_post():
    """Raw CMX scanning post."""
    return get_mock_cmx_post()


@pytest.fixture
def sample_observation():
    """A fully populated client observation."""
    return ClientObservation(
        client_mac="00:26:ab:b8:a9:a5",
        ipv4="/192.168.0.15",
        ipv6="",
        seen_time=datetime(2020, 1, 1, 12, 30, 15, 123000, tzinfo=timezone.utc),
        seen_epoch=1577881815,
        ssid="Corporate",
        rssi=24,
        manufacturer="Seiko Epson",
        os="Linux",
        location=GeoLocation(lat=19.43, lng=-99.13, unc=4.5, x=(1.0, 2.0), y=(3.0, 4.0)),
    )


@pytest.fixture
def sample_envelope(sample_observation):
    """A CMX envelope holding one observation."""
    return AnalyticsEnvelope(
        version="2.0",
        secret="s3cret",
        type="DevicesSeen",
        data=AnalyticsPayload(
            ap_mac="00:18:0a:13:dd:b0",
            ap_tags=("lobby",),
            ap_floors=("Floor 1",),
            observations=(sample_observation,),
        ),
    )
