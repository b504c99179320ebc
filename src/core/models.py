"""
Project Cmxdump - Core Data Models

Data classes for the Meraki Dashboard resources and the CMX
location-analytics payload.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple, Dict, Any
from enum import Enum
import json

from .timestamp import DEFAULT_TIMEZONE, EPOCH, TimestampCodec, default_codec
from .utils import ConfigurationError


DEFAULT_API_URL = "https://api.meraki.com/api/v0"
DEFAULT_TIMEOUT = 10.0


class FetchStatus(Enum):
    """Outcome of a Dashboard API fetch."""
    OK = "ok"
    TRANSPORT_ERROR = "transport_error"
    HTTP_ERROR = "http_error"
    DECODE_ERROR = "decode_error"


def _tuple_of(value: Any) -> Tuple:
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return ()


@dataclass(frozen=True)
class MerakiConfig:
    """Connection settings for the Dashboard API and the CMX receiver."""
    api_url: str = DEFAULT_API_URL
    api_key: str = ""
    network_id: str = ""
    cmx_validator: Optional[str] = None
    cmx_secret: Optional[str] = None
    timezone: str = DEFAULT_TIMEZONE
    timeout: float = DEFAULT_TIMEOUT

    # Key names used by the JSON config files of earlier deployments
    LEGACY_KEYS = {
        "MerakiAPI": "api_url",
        "MerakiKey": "api_key",
        "NetworkID": "network_id",
        "MerakiCMXValidator": "cmx_validator",
        "MerakiCMXSecret": "cmx_secret",
    }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MerakiConfig":
        values = {cls.LEGACY_KEYS.get(k, k): v for k, v in data.items()}
        try:
            timeout = float(values.get("timeout") or DEFAULT_TIMEOUT)
        except (TypeError, ValueError):
            raise ConfigurationError(f"meraki.timeout must be a number, got {values['timeout']!r}")
        return cls(
            api_url=(values.get("api_url") or DEFAULT_API_URL).rstrip("/"),
            api_key=values.get("api_key") or "",
            network_id=values.get("network_id") or "",
            cmx_validator=values.get("cmx_validator"),
            cmx_secret=values.get("cmx_secret"),
            timezone=values.get("timezone") or DEFAULT_TIMEZONE,
            timeout=timeout,
        )

    def codec(self) -> TimestampCodec:
        """Timestamp codec for the configured zone."""
        if self.timezone == DEFAULT_TIMEZONE:
            return default_codec()
        return TimestampCodec(self.timezone)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "api_url": self.api_url,
            "network_id": self.network_id,
            "cmx_validator": self.cmx_validator,
            "timezone": self.timezone,
            "timeout": self.timeout,
        }


@dataclass(frozen=True)
class ESSID:
    """One SSID slot of a Meraki network."""
    number: int = 0
    name: str = ""
    enabled: bool = False
    auth_mode: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "name": self.name,
            "enabled": self.enabled,
            "authMode": self.auth_mode,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ESSID":
        return cls(
            number=int(data.get("number") or 0),
            name=data.get("name") or "",
            enabled=bool(data.get("enabled", False)),
            auth_mode=data.get("authMode") or "",
        )


@dataclass(frozen=True)
class AccessPoint:
    """A device from the network inventory."""
    name: str = ""
    lat: float = 0.0
    lng: float = 0.0
    serial: str = ""
    mac: str = ""
    model: str = ""
    address: str = ""
    lan_ip: str = ""
    tags: str = ""
    network_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "lat": self.lat,
            "lng": self.lng,
            "serial": self.serial,
            "mac": self.mac,
            "model": self.model,
            "address": self.address,
            "lanIp": self.lan_ip,
            "tags": self.tags,
            "networkId": self.network_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessPoint":
        tags = data.get("tags") or ""
        # Newer API versions return tags as a list
        if isinstance(tags, (list, tuple)):
            tags = " ".join(str(t) for t in tags)
        return cls(
            name=data.get("name") or "",
            lat=float(data.get("lat") or 0.0),
            lng=float(data.get("lng") or 0.0),
            serial=data.get("serial") or "",
            mac=data.get("mac") or "",
            model=data.get("model") or "",
            address=data.get("address") or "",
            lan_ip=data.get("lanIp") or "",
            tags=tags,
            network_id=data.get("networkId") or "",
        )


@dataclass(frozen=True)
class GeoLocation:
    """Position estimate of a CMX client."""
    lat: float = 0.0
    lng: float = 0.0
    unc: float = 0.0
    x: Tuple[float, ...] = ()
    y: Tuple[float, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lat": self.lat,
            "lng": self.lng,
            "unc": self.unc,
            "x": list(self.x),
            "y": list(self.y),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeoLocation":
        return cls(
            lat=float(data.get("lat") or 0.0),
            lng=float(data.get("lng") or 0.0),
            unc=float(data.get("unc") or 0.0),
            x=_tuple_of(data.get("x")),
            y=_tuple_of(data.get("y")),
        )


@dataclass(frozen=True)
class ClientObservation:
    """A wireless client seen by an AP at one point in time."""
    client_mac: str = ""
    ipv4: str = ""
    ipv6: str = ""
    seen_time: datetime = EPOCH
    seen_epoch: int = 0
    ssid: str = ""
    rssi: int = 0
    manufacturer: str = ""
    os: str = ""
    location: GeoLocation = field(default_factory=GeoLocation)

    def to_dict(self, codec: Optional[TimestampCodec] = None) -> Dict[str, Any]:
        codec = codec or default_codec()
        return {
            "clientMac": self.client_mac,
            "ipv4": self.ipv4,
            "ipv6": self.ipv6,
            "seenTime": codec.encode(self.seen_time),
            "seenEpoch": self.seen_epoch,
            "ssid": self.ssid,
            "rssi": self.rssi,
            "manufacturer": self.manufacturer,
            "os": self.os,
            "location": self.location.to_dict(),
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        codec: Optional[TimestampCodec] = None,
    ) -> "ClientObservation":
        codec = codec or default_codec()
        seen_time = data.get("seenTime")
        return cls(
            client_mac=data.get("clientMac") or "",
            ipv4=data.get("ipv4") or "",
            ipv6=data.get("ipv6") or "",
            seen_time=codec.decode(seen_time) if seen_time is not None else EPOCH,
            seen_epoch=int(data.get("seenEpoch") or 0),
            ssid=data.get("ssid") or "",
            rssi=int(data.get("rssi") or 0),
            manufacturer=data.get("manufacturer") or "",
            os=data.get("os") or "",
            location=GeoLocation.from_dict(data.get("location") or {}),
        )


@dataclass(frozen=True)
class AnalyticsPayload:
    """The ``data`` block of a CMX post: one AP and what it saw."""
    ap_mac: str = ""
    ap_tags: Tuple[str, ...] = ()
    ap_floors: Tuple[str, ...] = ()
    observations: Tuple[ClientObservation, ...] = ()

    def to_dict(self, codec: Optional[TimestampCodec] = None) -> Dict[str, Any]:
        return {
            "apMac": self.ap_mac,
            "apTags": list(self.ap_tags),
            "apFloors": list(self.ap_floors),
            "observations": [o.to_dict(codec) for o in self.observations],
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        codec: Optional[TimestampCodec] = None,
    ) -> "AnalyticsPayload":
        return cls(
            ap_mac=data.get("apMac") or "",
            ap_tags=_tuple_of(data.get("apTags")),
            ap_floors=_tuple_of(data.get("apFloors")),
            observations=tuple(
                ClientObservation.from_dict(o, codec)
                for o in _tuple_of(data.get("observations"))
                if isinstance(o, dict)
            ),
        )


@dataclass(frozen=True)
class AnalyticsEnvelope:
    """Outer CMX scanning post with version and shared secret."""
    version: str = ""
    secret: str = ""
    type: str = ""
    data: AnalyticsPayload = field(default_factory=AnalyticsPayload)

    def to_dict(self, codec: Optional[TimestampCodec] = None) -> Dict[str, Any]:
        return {
            "version": self.version,
            "secret": self.secret,
            "type": self.type,
            "data": self.data.to_dict(codec),
        }

    def to_json(self, codec: Optional[TimestampCodec] = None) -> str:
        return json.dumps(self.to_dict(codec))

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        codec: Optional[TimestampCodec] = None,
    ) -> "AnalyticsEnvelope":
        return cls(
            version=str(data.get("version") or ""),
            secret=data.get("secret") or "",
            type=data.get("type") or "",
            data=AnalyticsPayload.from_dict(data.get("data") or {}, codec),
        )


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one Dashboard API request."""
    status: FetchStatus
    items: Tuple[Any, ...] = ()
    url: str = ""
    status_code: Optional[int] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == FetchStatus.OK

    def items_or_empty(self) -> list:
        """Items on success, an empty list on any failure."""
        return list(self.items) if self.ok else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "url": self.url,
            "status_code": self.status_code,
            "reason": self.reason,
            "count": len(self.items),
        }
