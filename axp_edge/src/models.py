"""
Data model for decoded AXP209 telemetry.

- :class:`QuantityDef` and :class:`ChartDef` describe the static metric
  registry (see :mod:`axp_edge.src.metrics` for the tables themselves).
- :class:`Reading` is one decoded value tagged with its numeric kind and
  validated by pydantic against that kind's range.
- :class:`Snapshot` holds one cycle's readings.  Every quantity starts out
  invalid; the sampler marks a quantity valid by writing a reading for it.
  An invalid quantity renders as an empty string, never as zero.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-004)

TODO:
- None
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator


class ValueKind(StrEnum):
    """Numeric representation of a quantity."""

    # Held as a double; every decode scale renders the same text as single precision.
    FLOAT = "float"
    U8 = "u8"
    U16 = "u16"


_INT_LIMITS: dict[ValueKind, int] = {
    ValueKind.U8: 0xFF,
    ValueKind.U16: 0xFFFF,
}


# ---------------------------------------------------------------------------
# Static registry records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class QuantityDef:
    """Definition of one reported quantity (a netdata dimension).

    Attributes:
        name: Stable identifier, used as the dimension id.
        kind: Numeric representation of the value.
        fmt: ``format()`` spec used to render a valid value.
        label: Display name shown by the monitoring daemon.
        algorithm: Accumulation mode; always ``"absolute"``.
    """

    name: str
    kind: ValueKind
    fmt: str
    label: str
    algorithm: str = "absolute"

    @property
    def properties(self) -> str:
        """Dimension properties as written after the id in ``DIMENSION``."""
        return f'"{self.label}" {self.algorithm}'


@dataclass(frozen=True, slots=True)
class ChartDef:
    """A named group of up to four quantities drawn on one chart.

    Attributes:
        chart_id: ``type.id`` of the chart.
        title: Chart title.
        units: Unit label for the vertical axis.
        dimensions: Quantity names, in display order.
        name: Optional display name; empty means "use the id".
    """

    chart_id: str
    title: str
    units: str
    dimensions: tuple[str, ...]
    name: str = ""

    @property
    def properties(self) -> str:
        """Chart properties as written after the id in ``CHART``."""
        return f'"{self.name}" "{self.title}" "{self.units}"'


# ---------------------------------------------------------------------------
# Per-cycle values
# ---------------------------------------------------------------------------


class Reading(BaseModel):
    """One decoded value tagged with its numeric kind."""

    model_config = ConfigDict(frozen=True)

    kind: ValueKind
    value: int | float

    @field_validator("value")
    @classmethod
    def _value_fits_kind(cls, v: int | float, info: ValidationInfo) -> int | float:
        """Integer kinds must hold an in-range int; floats are coerced."""
        kind = info.data.get("kind")
        if kind is None:
            return v
        if kind is ValueKind.FLOAT:
            return float(v)
        limit = _INT_LIMITS[kind]
        if not isinstance(v, int):
            raise ValueError(f"{kind} reading must be an int, got {v!r}")
        if not (0 <= v <= limit):
            raise ValueError(f"{kind} reading {v} outside 0..{limit}")
        return v

    def render(self, fmt: str) -> str:
        """Format the value with a ``format()`` spec."""
        return format(self.value, fmt)


class Snapshot:
    """One cycle's decoded values keyed by quantity name.

    Args:
        quantities: The quantity table.  Every quantity starts invalid.
    """

    def __init__(self, quantities: Iterable[QuantityDef]) -> None:
        self._defs: dict[str, QuantityDef] = {q.name: q for q in quantities}
        self._readings: dict[str, Reading | None] = dict.fromkeys(self._defs)

    def set(self, name: str, value: int | float) -> None:
        """Store *value* for quantity *name* and mark it valid.

        Raises:
            KeyError: If *name* is not a known quantity.
            pydantic.ValidationError: If *value* does not fit the kind.
        """
        definition = self._defs[name]
        self._readings[name] = Reading(kind=definition.kind, value=value)

    def is_valid(self, name: str) -> bool:
        return self._readings[name] is not None

    def get(self, name: str) -> int | float | None:
        """Return the value of *name*, or None when invalid this cycle."""
        reading = self._readings[name]
        return None if reading is None else reading.value

    def render(self, name: str) -> str:
        """Render *name* with its format rule, or ``""`` when invalid."""
        reading = self._readings[name]
        if reading is None:
            return ""
        return reading.render(self._defs[name].fmt)

    def valid_names(self) -> list[str]:
        return [name for name, reading in self._readings.items() if reading is not None]

    def __iter__(self) -> Iterator[str]:
        return iter(self._readings)
