"""
Pydantic models for camera responses.

Models are frozen (immutable) and validate field ranges against the
wire widths they are decoded from.
"""

from __future__ import annotations

import struct
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from ambercam.exceptions import ParseError

_STATUS_LAYOUT: Final[struct.Struct] = struct.Struct("<HHI")


class CameraStatus(BaseModel):
    """
    Camera lifetime counters reported by STATUS_GET.

    Payload layout (little-endian):
        bytes 0-1: number of cooler cycles (uint16)
        bytes 2-3: number of power cycles (uint16)
        bytes 4-7: cooler run time (uint32)

    Example:
        >>> CameraStatus.from_payload(bytes.fromhex("e656635722385755"))
        CameraStatus(num_cooler_cycles=22246, num_power_cycles=22371, cooler_time=1431779362)
    """

    model_config = ConfigDict(frozen=True)

    num_cooler_cycles: int = Field(ge=0, le=0xFFFF, description="Cryo cooler start count")
    num_power_cycles: int = Field(ge=0, le=0xFFFF, description="Power-on count")
    cooler_time: int = Field(ge=0, le=0xFFFFFFFF, description="Cumulative cooler run time")

    @classmethod
    def from_payload(cls, payload: bytes) -> CameraStatus:
        """
        Decode a STATUS_GET response payload.

        Raises:
            ParseError: If the payload is shorter than 8 bytes.
        """
        if len(payload) < _STATUS_LAYOUT.size:
            raise ParseError(
                f"Status payload needs {_STATUS_LAYOUT.size} bytes, got {len(payload)}",
                record_type="CameraStatus",
                raw_data=bytes(payload),
            )
        cooler_cycles, power_cycles, cooler_time = _STATUS_LAYOUT.unpack_from(payload)
        return cls(
            num_cooler_cycles=cooler_cycles,
            num_power_cycles=power_cycles,
            cooler_time=cooler_time,
        )

    def __repr__(self) -> str:
        return (
            f"CameraStatus(num_cooler_cycles={self.num_cooler_cycles}, "
            f"num_power_cycles={self.num_power_cycles}, cooler_time={self.cooler_time})"
        )
