"""Командний інтерфейс симулятора логів."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import uvicorn

from logsim.api.app import create_app
from logsim.contracts.record import StoredRecord
from logsim.contracts.timefmt import parse_ts, utc_now
from logsim.emulator.synthesizer import EventSynthesizer
from logsim.runtime import Simulator
from logsim.shared.errors import ConfigError
from logsim.shared.logger import setup_logging
from logsim.shared.seed import init_rng
from logsim.shared.settings import Settings, load_settings
from logsim.storage.history import HistoryStore

log = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to simulator YAML config (default: $LOGSIM_CONFIG, else built-in defaults).",
    )
    common.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible output (overrides generator.seed).",
    )
    common.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO).",
    )

    p = argparse.ArgumentParser(
        prog="logsim",
        description="Synthetic application/access log simulator with attack campaigns.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    run = sub.add_parser(
        "run",
        parents=[common],
        help="Run the live simulator with the REST API and WebSocket stream.",
    )
    run.add_argument("--host", type=str, default=None, help="Bind address (overrides api.host).")
    run.add_argument("--port", type=int, default=None, help="Bind port (overrides api.port).")

    gen = sub.add_parser(
        "generate",
        parents=[common],
        help="Generate a batch of events without any live sinks.",
    )
    gen.add_argument(
        "--count",
        type=int,
        default=1000,
        help="Number of ticks (event pairs) to generate (default: 1000).",
    )
    gen.add_argument(
        "--out",
        type=str,
        default="data/events.jsonl",
        help="Output JSONL path, one wire payload per line (default: data/events.jsonl).",
    )
    gen.add_argument(
        "--start-time",
        type=str,
        default=None,
        help="Timestamp of the first tick in ISO-8601 (default: now minus the batch span).",
    )
    gen.add_argument(
        "--to-store",
        action="store_true",
        default=False,
        help="Also append the batch to the configured history store.",
    )
    return p.parse_args(argv)


def _settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    if args.seed is not None:
        settings = replace(settings, generator=replace(settings.generator, seed=args.seed))
    return settings


# ------------------------------------------------------------------
# generate
# ------------------------------------------------------------------


def generate(
    settings: Settings,
    count: int,
    out_path: Path,
    start_time: datetime | None = None,
    store: HistoryStore | None = None,
) -> int:
    """Synthesize *count* pairs on a simulated clock and write them as JSONL.

    Ticks are spaced by ``1 / log_rate`` seconds.  Returns the number of
    lines written (two per tick).
    """
    rng = init_rng(settings.generator.seed)
    synth = EventSynthesizer(
        rng,
        generator=settings.generator,
        attacks=settings.attacks,
        patterns=settings.patterns,
    )
    step = timedelta(seconds=1.0 / settings.generator.log_rate)
    t = start_time if start_time is not None else utc_now() - step * count

    out_path.parent.mkdir(parents=True, exist_ok=True)
    lines = 0
    with out_path.open("w", encoding="utf-8") as fh:
        for _ in range(count):
            pair = synth.tick(t)
            for event in (pair.application, pair.access):
                rec = StoredRecord.from_event(event)
                fh.write(json.dumps(rec.wire_payload(), ensure_ascii=False) + "\n")
                lines += 1
                if store is not None:
                    store.append(rec)
            t += step

    log.info("Generated %d records -> %s (%s)", lines, out_path, synth.stats())
    return lines


# ------------------------------------------------------------------
# run
# ------------------------------------------------------------------


async def serve(simulator: Simulator, host: str, port: int, server: Any = None) -> int:
    """Run the API server and the driver until either one finishes.

    The ordered shutdown runs on every exit path, including the task
    cancellation that ``asyncio.run`` issues on Ctrl+C.  Returns the process
    exit code: 1 after a fatal driver fault, else 0.
    """
    if server is None:
        config = uvicorn.Config(create_app(simulator), host=host, port=port, log_config=None)
        server = uvicorn.Server(config)

    await simulator.start()
    server_task = asyncio.create_task(server.serve(), name="api-server")
    watched = {server_task}
    if simulator.driver is not None:
        watched.add(simulator.driver)

    try:
        done, _ = await asyncio.wait(watched, return_when=asyncio.FIRST_COMPLETED)
        if server_task not in done:
            # driver stopped on its own, which only happens on a fatal fault
            server.should_exit = True
            await server_task
    finally:
        server.should_exit = True
        await asyncio.shield(simulator.stop())
    return 1 if simulator.fatal is not None else 0


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    setup_logging(args.log_level)

    try:
        settings = _settings(args)
    except (ConfigError, FileNotFoundError) as exc:
        log.critical("Invalid configuration: %s", exc)
        sys.exit(2)

    if args.command == "generate":
        start_time = parse_ts(args.start_time) if args.start_time else None
        store = HistoryStore(settings.storage.path) if args.to_store else None
        try:
            lines = generate(settings, args.count, Path(args.out), start_time, store)
        finally:
            if store is not None:
                store.close()
        print(f"logsim generate complete: {lines} records -> {args.out}")
        return

    host = args.host or settings.api.host
    port = args.port or settings.api.port
    print(f"logsim live mode -> http://{host}:{port}")
    print(
        f"  rate: {settings.generator.log_rate}/s, "
        f"error: {settings.generator.error_rate:.0%}, warning: {settings.generator.warning_rate:.0%}"
    )
    print(f"  attacks: {'on' if settings.attacks.enabled else 'off'}, WebSocket: ws://{host}:{port}/ws")
    print("  Press Ctrl+C to stop.")
    simulator = Simulator(settings)
    try:
        code = asyncio.run(serve(simulator, host, port))
    except KeyboardInterrupt:
        # serve() already ran the ordered shutdown before the interrupt surfaced
        log.info("Interrupted, simulator stopped after %d ticks", simulator.ticks)
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
