"""Read-only views over decoded Easee API payloads."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import IntEnum
from types import MappingProxyType
from typing import Any

_LOGGER = logging.getLogger(__name__)


class ChargerOpMode(IntEnum):
    """Charger operating mode as reported in ``chargerOpMode``."""

    UNKNOWN = -1
    OFFLINE = 0
    DISCONNECTED = 1
    AWAITING_START = 2
    CHARGING = 3
    COMPLETED = 4
    ERROR = 5
    READY_TO_CHARGE = 6

    @classmethod
    def _missing_(cls, value: object) -> ChargerOpMode:
        _LOGGER.debug("Unknown charger op mode %r", value)
        return cls.UNKNOWN


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 API timestamp into an aware UTC datetime."""

    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        _LOGGER.debug("Unparseable timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


@dataclass(frozen=True)
class MeterReading:
    """Lifetime energy counter at a point in time."""

    reading_kwh: float
    timestamp: datetime


class _PayloadView:
    """Immutable wrapper around one decoded response body."""

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = MappingProxyType(dict(data))

    def asdict(self) -> dict[str, Any]:
        return dict(self._data)


class Charger(_PayloadView):
    """Charger as listed for the account."""

    @property
    def id(self) -> str:
        return self._data["id"]

    @property
    def name(self) -> str:
        return self._data["name"]

    @property
    def color(self) -> int:
        return self._data["color"]

    @property
    def product_code(self) -> int:
        return self._data["productCode"]

    def __repr__(self) -> str:
        return f"Charger(id={self._data.get('id')!r}, name={self._data.get('name')!r})"


class State(_PayloadView):
    """Live charger state."""

    @property
    def op_mode(self) -> ChargerOpMode:
        return ChargerOpMode(self._data["chargerOpMode"])

    @property
    def charging(self) -> bool:
        # AWAITING_START is not charging
        return self.op_mode is ChargerOpMode.CHARGING

    @property
    def disconnected(self) -> bool:
        return self.op_mode is ChargerOpMode.DISCONNECTED

    @property
    def online(self) -> bool:
        return bool(self._data["isOnline"])

    @property
    def meter_reading(self) -> MeterReading:
        """Lifetime energy stamped with the charger's latest pulse.

        Falls back to the current time when the payload has no pulse.
        """
        timestamp = _parse_timestamp(self._data.get("latestPulse"))
        if timestamp is None:
            timestamp = datetime.now(UTC)
        return MeterReading(
            reading_kwh=float(self._data["lifetimeEnergy"]), timestamp=timestamp
        )

    def __repr__(self) -> str:
        return (
            f"State(op_mode={self._data.get('chargerOpMode')!r}, "
            f"online={self._data.get('isOnline')!r})"
        )


class Configuration(_PayloadView):
    """Technical charger configuration."""

    @property
    def phase_mode(self) -> int:
        return self._data["phaseMode"]

    @property
    def max_charger_current(self) -> float:
        return self._data["maxChargerCurrent"]


class Site(_PayloadView):
    """Site the charger is installed at: name, address and location."""

    @property
    def _address(self) -> Mapping[str, Any]:
        return self._data["address"]

    @property
    def name(self) -> str:
        return self._data["name"]

    @property
    def street(self) -> str:
        return self._address["street"]

    @property
    def building_number(self) -> str:
        return self._address["buildingNumber"]

    @property
    def zip(self) -> str:
        return self._address["zip"]

    @property
    def area(self) -> str:
        return self._address["area"]

    @property
    def country_id(self) -> str | None:
        country = self._address.get("country") or {}
        return country.get("id")

    @property
    def latitude(self) -> float:
        return self._address["latitude"]

    @property
    def longitude(self) -> float:
        return self._address["longitude"]
