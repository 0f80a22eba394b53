"""
Netdata external-plugin protocol emitter.

Renders the static metric registry and per-cycle snapshots as the line
protocol netdata reads from a plugin's standard output::

    CHART type.id name title units       (once per chart, at startup)
    DIMENSION id name algorithm          (once per dimension, at startup)
    BEGIN type.id [microseconds]         (every cycle, per chart)
    SET id = value                       (every cycle, per dimension)
    END

Formatting is pure: :func:`format_announce` and :func:`format_report`
return lists of lines.  :class:`ProtocolEmitter` writes them to a stream and
flushes once per block so netdata sees each block whole.

References:
    - https://learn.netdata.cloud/docs/developer-and-contributor-corner/external-plugins

CHANGELOG:
- 2026-10-18: Initial creation (STORY-007)

TODO:
- None
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING, TextIO

from axp_edge.src.metrics import CHARTS, QUANTITY_INDEX

if TYPE_CHECKING:
    from axp_edge.src.models import ChartDef, Snapshot


# ---------------------------------------------------------------------------
# Pure formatting
# ---------------------------------------------------------------------------


def format_announce(charts: Sequence[ChartDef] = CHARTS) -> list[str]:
    """Return the chart and dimension declarations for every chart."""
    lines: list[str] = []
    for chart in charts:
        lines.append(f"CHART {chart.chart_id} {chart.properties}")
        for name in chart.dimensions:
            lines.append(f"DIMENSION {name} {QUANTITY_INDEX[name].properties}")
    return lines


def format_report(
    snapshot: Snapshot,
    elapsed_us: int | None = None,
    charts: Sequence[ChartDef] = CHARTS,
) -> list[str]:
    """Return one BEGIN/SET/END block per chart for *snapshot*.

    Args:
        snapshot: The cycle's decoded values.
        elapsed_us: Microseconds since the previous report, or None on the
            first report (the BEGIN line then carries no timing field).
        charts: Chart table to walk.
    """
    lines: list[str] = []
    for chart in charts:
        if elapsed_us is None:
            lines.append(f"BEGIN {chart.chart_id}")
        else:
            lines.append(f"BEGIN {chart.chart_id} {elapsed_us}")
        for name in chart.dimensions:
            lines.append(f"SET {name} = {snapshot.render(name)}")
        lines.append("END")
    return lines


# ---------------------------------------------------------------------------
# Stream writer
# ---------------------------------------------------------------------------


class ProtocolEmitter:
    """Writes protocol blocks to a text stream.

    Args:
        stream: Destination, standard output by default.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def announce(self) -> None:
        """Declare every chart and dimension.  Call once, before reporting."""
        self._write(format_announce())

    def report(self, snapshot: Snapshot, elapsed_us: int | None = None) -> None:
        """Emit one cycle of values."""
        self._write(format_report(snapshot, elapsed_us))

    def _write(self, lines: list[str]) -> None:
        self._stream.write("".join(f"{line}\n" for line in lines))
        self._stream.flush()
