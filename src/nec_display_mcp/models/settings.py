"""Requested display settings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..protocol.commands import BACKLIGHT_MAX, BACKLIGHT_MIN, POWER_OFF, POWER_ON


class PowerState(Enum):
    """Power directive and the value the power command carries for it."""

    ON = "on"
    OFF = "off"

    @property
    def command_value(self) -> int:
        return POWER_ON if self is PowerState.ON else POWER_OFF


@dataclass(frozen=True)
class DisplaySettings:
    """Settings to apply to a display. ``None`` leaves a setting alone."""

    power: PowerState | None = None
    backlight: int | None = None

    def __post_init__(self) -> None:
        if self.backlight is not None and not (
            BACKLIGHT_MIN <= self.backlight <= BACKLIGHT_MAX
        ):
            raise ValueError(
                f"Backlight must be {BACKLIGHT_MIN}-{BACKLIGHT_MAX}, "
                f"got {self.backlight}"
            )

    @property
    def is_empty(self) -> bool:
        return self.power is None and self.backlight is None

    @classmethod
    def from_strings(
        cls, power: str | None = None, backlight: str | int | None = None
    ) -> DisplaySettings:
        """Build settings from textual input such as CLI or tool arguments.

        Raises:
            ValueError: If power is not ``on``/``off`` or backlight is not
                an integer in range.
        """
        state = PowerState(power.lower()) if power is not None else None
        level = int(backlight) if backlight is not None else None
        return cls(power=state, backlight=level)

    def to_dict(self) -> dict:
        return {
            "power": self.power.value if self.power else None,
            "backlight": self.backlight,
        }
