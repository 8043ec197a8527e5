"""
Human-readable camera modes and their wire values.

Each option map is a bidirectional table between mode names accepted by
the Camera setters and the 16-bit values the camera stores. Values the
camera reports that are missing from a table decode to UnknownMode rather
than None, so callers always get an explicit outcome.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ambercam.exceptions import InvalidOptionError


@dataclass(frozen=True)
class UnknownMode:
    """
    A mode value reported by the camera that has no known name.

    Attributes:
        value: Raw value from the response payload.
        option_map: Name of the option map the value was looked up in.
    """

    value: int
    option_map: str

    def __str__(self) -> str:
        return f"unknown {self.option_map} mode {self.value}"


class OptionMap:
    """
    Immutable bidirectional mapping between mode names and wire values.

    Name order is preserved and is the order reported in
    InvalidOptionError.

    Example:
        >>> NUC_MODES.validate("hot")
        4
        >>> NUC_MODES.name_for(2)
        'mid'
        >>> NUC_MODES.name_for(9)
        UnknownMode(value=9, option_map='NUC')
    """

    def __init__(self, name: str, options: Mapping[str, int]) -> None:
        self._name = name
        self._options: Mapping[str, int] = MappingProxyType(dict(options))
        self._names_by_value: Mapping[int, str] = MappingProxyType(
            {value: option for option, value in options.items()}
        )

    @property
    def name(self) -> str:
        """Short name of the mode set (e.g. "AGC")."""
        return self._name

    @property
    def names(self) -> list[str]:
        """Valid mode names in table order."""
        return list(self._options)

    def validate(self, option: str) -> int:
        """
        Resolve a mode name to its wire value.

        Raises:
            InvalidOptionError: If option is not a recognized name.
        """
        if not isinstance(option, str) or option not in self._options:
            raise InvalidOptionError(option, self.names)
        return self._options[option]

    def name_for(self, value: int) -> str | UnknownMode:
        """Map a wire value back to its mode name."""
        try:
            return self._names_by_value[value]
        except KeyError:
            return UnknownMode(value=value, option_map=self._name)

    def __contains__(self, option: object) -> bool:
        return option in self._options

    def __iter__(self) -> Iterator[str]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __repr__(self) -> str:
        return f"OptionMap({self._name!r}, {dict(self._options)!r})"


def validate_option(value: str, options: OptionMap) -> int:
    """
    Validate a mode name against an option map.

    Args:
        value: Mode name supplied by the caller.
        options: Option map to check against.

    Returns:
        Wire value of the mode.

    Raises:
        InvalidOptionError: Listing every valid name, e.g.
            'Option "fake" is invalid. Available options are ["cold", "mid", "warm", "hot"]'.
    """
    return options.validate(value)


# Automatic Gain Control. "off" is never sent as a value: it selects AGC_OFF.
AGC_MODES = OptionMap(
    "AGC",
    {
        "off": -1,
        "full": 0,
        "midsize": 1,
        "center": 2,
        "horizon": 3,
    },
)

# Intensity Transform Table
ITT_MODES = OptionMap(
    "ITT",
    {
        "linear": 1,
        "inverse": 2,
        "s-curve": 3,
        "two-cycle": 4,
    },
)

# Non-Uniformity Correction
NUC_MODES = OptionMap(
    "NUC",
    {
        "cold": 1,
        "mid": 2,
        "warm": 3,
        "hot": 4,
    },
)

# Look-Up Table
LUT_MODES = OptionMap(
    "LUT",
    {
        "black-and-white": 1,
        "color": 2,
        "sepia": 3,
    },
)
