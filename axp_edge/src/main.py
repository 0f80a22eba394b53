"""
Collector entrypoint and cadence loop for the AXP209 netdata plugin.

Startup:
1. Parse the optional update period argument (1-360 seconds).
2. Load settings, open the I2C bus, address the AXP209, enable its ADC.
3. Announce every chart and dimension on standard output.

Then, once per period, the cadence loop samples the registers, reports the
snapshot, and sleeps for the period minus the time the cycle took.  The
first report carries no timing field; later ones carry the microseconds
since the end of the previous cycle.

Standard output belongs to the netdata protocol.  Structured JSON logs go
to standard error, which netdata copies into its error log.  Any bus
failure is fatal: it is logged and the process exits with status 1.  SIGTERM
and SIGINT end the loop at the next cycle boundary; a second signal ends the
process immediately.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-008)

TODO:
- None
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import signal
import sys
import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from pydantic import ValidationError

from axp_edge.src.adc import enable_adc
from axp_edge.src.bus import BusError, RegisterChannel
from axp_edge.src.config import MAX_UPDATE_EVERY_S, MIN_UPDATE_EVERY_S, AxpSettings
from axp_edge.src.emitter import ProtocolEmitter
from axp_edge.src.health import HealthWriter
from axp_edge.src.metrics import validate_registry
from axp_edge.src.sampler import sample

logger = logging.getLogger(__name__)

USEC_PER_SEC = 1_000_000


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging for the collector.

    Sets up the root logger with a JSON-formatted handler writing to stderr.
    """

    class _JsonFormatter(logging.Formatter):
        """Minimal JSON log formatter."""

        def format(self, record: logging.LogRecord) -> str:
            log_entry = {
                "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
            }
            if record.exc_info and record.exc_info[1] is not None:
                log_entry["exception"] = self.formatException(record.exc_info)
            return json.dumps(log_entry)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def log_config_summary(settings: AxpSettings) -> None:
    """Log a config summary at startup."""
    logger.info(
        "AXP209 collector starting with config: "
        "i2c_bus=%s, pmic_address=%#04x, update_every_s=%s, "
        "adc_settle_ms=%s, health_path=%s",
        settings.i2c_bus,
        settings.pmic_address,
        settings.update_every_s,
        settings.adc_settle_ms,
        settings.health_path or "disabled",
    )


# ---------------------------------------------------------------------------
# Command line
# ---------------------------------------------------------------------------


class _UsageParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on bad arguments."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _update_period(value: str) -> int:
    try:
        period = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid update period '{value}'") from None
    if period < MIN_UPDATE_EVERY_S or period > MAX_UPDATE_EVERY_S:
        raise argparse.ArgumentTypeError(
            f"update period must be between {MIN_UPDATE_EVERY_S} "
            f"and {MAX_UPDATE_EVERY_S}, got {period}"
        )
    return period


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Exits with status 1 and a usage line on stderr when the period is not
    an integer in 1-360 or extra arguments are given.
    """
    p = _UsageParser(
        prog="axp-edge",
        description="netdata plugin reporting AXP209 power and battery status",
    )
    p.add_argument(
        "update_every",
        nargs="?",
        type=_update_period,
        default=None,
        metavar="update_frequency",
        help=(
            f"Seconds between reports "
            f"({MIN_UPDATE_EVERY_S}-{MAX_UPDATE_EVERY_S}, default 1)"
        ),
    )
    return p.parse_args(argv)


# ---------------------------------------------------------------------------
# Cadence
# ---------------------------------------------------------------------------


def _monotonic_us() -> int:
    return time.monotonic_ns() // 1000


def compute_sleep_us(period_s: int, latency_us: int) -> int:
    """Microseconds to sleep so the next cycle starts one period after this one.

    Clamped to zero when the cycle took longer than the period.
    """
    return max(period_s * USEC_PER_SEC - latency_us, 0)


async def _sleep_or_shutdown(shutdown_event: asyncio.Event, sleep_us: int) -> None:
    """Sleep for *sleep_us*, returning early if shutdown is requested."""
    # Use wait with timeout so we can check shutdown between sleeps
    with contextlib.suppress(TimeoutError):
        await asyncio.wait_for(shutdown_event.wait(), timeout=sleep_us / USEC_PER_SEC)


async def run_cadence_loop(
    *,
    channel: RegisterChannel,
    emitter: ProtocolEmitter,
    period_s: int,
    shutdown_event: asyncio.Event,
    health: HealthWriter | None = None,
    clock: Callable[[], int] = _monotonic_us,
) -> None:
    """Announce once, then sample and report every *period_s* seconds.

    Runs until *shutdown_event* is set.  Bus errors propagate to the caller.

    Args:
        channel: Register channel with the AXP209 selected and ADC enabled.
        emitter: Protocol emitter writing to netdata.
        period_s: Seconds between cycle starts.
        shutdown_event: Event to signal graceful shutdown.
        health: HealthWriter instance, or None to skip health writes.
        clock: Monotonic microsecond clock.
    """
    emitter.announce()
    logger.info("Announced charts, cadence loop started (period=%ss)", period_s)

    previous_end_us: int | None = None
    while not shutdown_event.is_set():
        start_us = clock()
        elapsed_us = None if previous_end_us is None else start_us - previous_end_us

        # Transfers block; keep the loop free to service signals meanwhile.
        snapshot = await asyncio.to_thread(sample, channel)
        emitter.report(snapshot, elapsed_us)

        end_us = clock()
        previous_end_us = end_us
        latency_us = end_us - start_us
        sleep_us = compute_sleep_us(period_s, latency_us)
        logger.debug("Cycle latency=%dus, sleeping %dus", latency_us, sleep_us)

        if health is not None:
            try:
                health.record_cycle(latency_us)
            except OSError:
                logger.warning("Failed to write health file", exc_info=True)

        await _sleep_or_shutdown(shutdown_event, sleep_us)
    logger.info("Cadence loop stopped")


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


async def async_main(settings: AxpSettings) -> None:
    """Async entrypoint: open the bus, enable the ADC, run the loop.

    Sets up SIGTERM/SIGINT handlers to trigger graceful shutdown.

    Raises:
        BusError: If the bus cannot be opened or any register transfer fails.
    """
    validate_registry()

    shutdown_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _handle_signal, shutdown_event, sig)

    health = HealthWriter(settings.health_path) if settings.health_path else None

    with RegisterChannel(settings.i2c_bus) as channel:
        channel.select(settings.pmic_address)
        enable_adc(channel, settle_s=settings.adc_settle_ms / 1000.0)
        await run_cadence_loop(
            channel=channel,
            emitter=ProtocolEmitter(),
            period_s=settings.update_every_s,
            shutdown_event=shutdown_event,
            health=health,
        )


def _handle_signal(shutdown_event: asyncio.Event, sig: int) -> None:
    """Handle SIGTERM/SIGINT by setting the shutdown event.

    A repeated signal restores the default action and re-raises it, so the
    process dies at once even if a bus transfer never returns.
    """
    if shutdown_event.is_set():
        logger.warning("Received signal %d again, terminating immediately", sig)
        signal.signal(sig, signal.SIG_DFL)
        signal.raise_signal(sig)
        return
    logger.info("Received shutdown signal, stopping after the current cycle")
    shutdown_event.set()


def load_settings(update_every: int | None) -> AxpSettings:
    """Load settings from the environment, letting the CLI period win."""
    if update_every is None:
        return AxpSettings()
    return AxpSettings(update_every_s=update_every)


def main(argv: Sequence[str] | None = None) -> None:
    """Synchronous entrypoint for the collector."""
    args = parse_args(argv)
    configure_logging()

    try:
        settings = load_settings(args.update_every)
    except ValidationError:
        logger.error("Invalid configuration", exc_info=True)
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)
    log_config_summary(settings)

    try:
        asyncio.run(async_main(settings))
    except BusError:
        logger.error("Unable to communicate with AXP209", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
