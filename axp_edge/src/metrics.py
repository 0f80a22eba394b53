"""
Static metric registry: the quantity table and the chart table.

Both tables are immutable and declared once.  The protocol emitter walks
:data:`CHARTS` in order for the one-time announcement and for every report,
so the two outputs always share the same structure.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-004)

TODO:
- None
"""

from __future__ import annotations

from axp_edge.src.models import ChartDef, QuantityDef, Snapshot, ValueKind

MAX_CHART_DIMENSIONS: int = 4
"""Upper bound on quantities per chart."""

# ---------------------------------------------------------------------------
# Quantities
# ---------------------------------------------------------------------------

QUANTITIES: tuple[QuantityDef, ...] = (
    QuantityDef("internaltemp", ValueKind.FLOAT, ".1f", "Internal Temp"),
    QuantityDef("batlevel", ValueKind.U8, "d", "Charge"),
    QuantityDef("chargelimit", ValueKind.U16, "d", "Charge Limit"),
    QuantityDef("chargeterm", ValueKind.U16, "d", "Charge Termination Limit"),
    QuantityDef("batcharge", ValueKind.FLOAT, ".1f", "Batt Charge"),
    QuantityDef("batdischarge", ValueKind.U16, "d", "Batt Discharge"),
    QuantityDef("batvoltage", ValueKind.FLOAT, ".1f", "Voltage"),
    QuantityDef("acinvoltage", ValueKind.FLOAT, ".1f", "Voltage"),
    QuantityDef("acincurrent", ValueKind.FLOAT, ".3f", "Current"),
    QuantityDef("vbusvoltage", ValueKind.FLOAT, ".1f", "Voltage"),
    QuantityDef("vbusvoltagelimit", ValueKind.U16, "d", "Limit"),
    QuantityDef("vbuscurrent", ValueKind.FLOAT, ".3f", "Current"),
    QuantityDef("vbuscurrentlimit", ValueKind.U16, "d", "Limit"),
)

QUANTITY_INDEX: dict[str, QuantityDef] = {q.name: q for q in QUANTITIES}
"""Flat lookup of every quantity by name."""

# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------

CHARTS: tuple[ChartDef, ...] = (
    ChartDef("Chip.temps", "Temperature", "Degrees (F)", ("internaltemp",)),
    ChartDef("Chip.batterylevel", "Battery Level", "%", ("batlevel",)),
    ChartDef(
        "Chip.batterycurrent",
        "Battery Current",
        "mA",
        ("chargelimit", "chargeterm", "batcharge", "batdischarge"),
    ),
    ChartDef("Chip.batteryvoltage", "Battery Voltage", "mV", ("batvoltage",)),
    ChartDef("Chip.acinvoltage", "ACIN Voltage", "mV", ("acinvoltage",)),
    ChartDef("Chip.acincurrent", "ACIN Current", "mA", ("acincurrent",)),
    ChartDef(
        "Chip.vbusvoltage", "VBUS Voltage", "mV", ("vbusvoltage", "vbusvoltagelimit")
    ),
    ChartDef(
        "Chip.vbuscurrent", "VBUS Current", "mA", ("vbuscurrent", "vbuscurrentlimit")
    ),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def new_snapshot() -> Snapshot:
    """Return an empty snapshot with every quantity invalid."""
    return Snapshot(QUANTITIES)


def validate_registry(
    quantities: tuple[QuantityDef, ...] = QUANTITIES,
    charts: tuple[ChartDef, ...] = CHARTS,
) -> None:
    """Check the structural invariants between the two tables.

    Raises:
        ValueError: On a duplicate quantity or chart id, a chart with no
            dimensions or more than :data:`MAX_CHART_DIMENSIONS`, or a chart
            referencing an unknown quantity.
    """
    names = [q.name for q in quantities]
    if len(set(names)) != len(names):
        raise ValueError("Duplicate quantity name in registry")

    chart_ids = [c.chart_id for c in charts]
    if len(set(chart_ids)) != len(chart_ids):
        raise ValueError("Duplicate chart id in registry")

    known = set(names)
    for chart in charts:
        if not (1 <= len(chart.dimensions) <= MAX_CHART_DIMENSIONS):
            raise ValueError(
                f"Chart '{chart.chart_id}' has {len(chart.dimensions)} dimensions, "
                f"expected 1..{MAX_CHART_DIMENSIONS}"
            )
        unknown = [d for d in chart.dimensions if d not in known]
        if unknown:
            raise ValueError(f"Chart '{chart.chart_id}' references unknown {unknown}")
