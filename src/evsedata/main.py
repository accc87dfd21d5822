"""Command line entry point for the evsedata station cache."""

import argparse
import asyncio
import json
import logging
import sys

from prometheus_client import start_http_server

from . import config
from .client import EVSERestClient
from .database import Database
from .encoding import operator_to_dict, station_to_dict
from .logging_utils import JSONFormatter, log_error
from .manager import EVSEManager
from .plugins import FluentdAuditPlugin, PrometheusMetricsPlugin

logger = logging.getLogger(__name__)


def setup_logging(level: str = config.LOG_LEVEL, log_file: str | None = config.LOG_FILE):
    """Configure JSON logging for the application."""
    json_formatter = JSONFormatter()

    # stdout carries command results
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(json_formatter)
    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(json_formatter)
        handlers.append(file_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers = handlers

    # Suppress verbose logging from dependencies
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def parse_fluentd_endpoint(parser: argparse.ArgumentParser, endpoint: str) -> tuple[str, int]:
    """Split host:port, reporting malformed values through the parser."""
    if ":" not in endpoint:
        parser.error("--fluentd-endpoint must be in host:port format (e.g., localhost:24224)")
    host, port_str = endpoint.rsplit(":", 1)
    if not host:
        parser.error("--fluentd-endpoint host cannot be empty")
    try:
        port = int(port_str)
    except ValueError:
        parser.error(f"Invalid port in --fluentd-endpoint: {endpoint}")
    return host, port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="evsedata - Swiss EV charging station open data with SQLite cache"
    )
    parser.add_argument(
        "--db",
        default=config.DB_PATH,
        help=f"Path to SQLite database file (default: {config.DB_PATH})",
    )
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Port for Prometheus metrics HTTP server (default: disabled)",
    )
    parser.add_argument(
        "--fluentd-endpoint",
        default=config.FLUENTD_ENDPOINT,
        help="Fluentd endpoint in host:port format (e.g., localhost:24224). If provided, enables Fluentd audit logging.",
    )
    parser.add_argument(
        "--fluentd-tag",
        default="evse",
        help="Tag prefix for Fluentd events (default: evse)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    sync = commands.add_parser("sync", help="Fill the cache from the station feed")
    sync.add_argument(
        "--force",
        action="store_true",
        help="Fetch the feed even when the cache is already populated",
    )

    statuses = commands.add_parser("statuses", help="Merge the live status feed into the cache")
    statuses.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Keep polling the status feed every INTERVAL seconds (default: run once)",
    )

    commands.add_parser("count", help="Print the number of cached stations")

    find = commands.add_parser("find", help="Query cached stations")
    criteria = find.add_mutually_exclusive_group(required=True)
    criteria.add_argument("--id", dest="station_id", help="Charging station id")
    criteria.add_argument("--evse-id", help="EVSE id")
    criteria.add_argument("--city", help="City name (case-insensitive)")
    criteria.add_argument("--country", help="Country code, e.g. CHE")
    criteria.add_argument("--postal-code", help="Postal code")
    criteria.add_argument("--plug", help='Plug type, e.g. "Type 2 Outlet"')
    criteria.add_argument("--open-24h", action="store_true", help="Stations open around the clock")
    criteria.add_argument("--renewable", action="store_true", help="Stations on renewable energy")

    operators = commands.add_parser("operators", help="List charging point operators")
    operators.add_argument("--name", help="Case-insensitive name filter")
    real_time = operators.add_mutually_exclusive_group()
    real_time.add_argument(
        "--real-time",
        dest="real_time",
        action="store_const",
        const=True,
        help="Only operators that publish live status data",
    )
    real_time.add_argument(
        "--no-real-time",
        dest="real_time",
        action="store_const",
        const=False,
        help="Only operators without live status data",
    )

    return parser


def create_plugins(args, fluentd_host: str | None, fluentd_port: int | None):
    plugins = []

    if args.metrics_port:
        plugins.append(PrometheusMetricsPlugin())

    if fluentd_host:
        plugins.append(
            FluentdAuditPlugin(
                tag_prefix=args.fluentd_tag,
                host=fluentd_host,
                port=fluentd_port,
                timeout=3.0,
            )
        )

    return plugins


def emit(payload):
    print(json.dumps(payload, indent=2, ensure_ascii=False))


async def find_stations(manager: EVSEManager, args):
    if args.station_id:
        station = await manager.find_by_id(args.station_id)
        return [station] if station else []
    if args.evse_id:
        station = await manager.find_by_evse_id(args.evse_id)
        return [station] if station else []
    if args.city:
        return await manager.find_by_city(args.city)
    if args.country:
        return await manager.find_by_country(args.country)
    if args.postal_code:
        return await manager.find_by_postal_code(args.postal_code)
    if args.plug:
        return await manager.find_by_plug_type(args.plug)
    if args.open_24h:
        return await manager.find_24_hour_stations()
    return await manager.find_renewable_energy_stations()


async def find_operators(manager: EVSEManager, args):
    # The catalog is static, make sure it is present even before the first sync
    await manager.load_operators()

    if args.real_time is None:
        if args.name:
            return await manager.find_operators_by_name(args.name)
        return await manager.find_all_operators()

    if args.real_time:
        operators = await manager.find_operators_with_real_time_data()
    else:
        operators = await manager.find_operators_without_real_time_data()

    if args.name:
        needle = args.name.lower()
        operators = [op for op in operators if needle in op.name.lower()]
    return operators


async def run_command(manager: EVSEManager, args):
    """Execute one subcommand and print its result as JSON."""
    if args.command == "sync":
        stations = await manager.get_charging_stations(force_refresh=args.force)
        emit({"stations": len(stations)})

    elif args.command == "statuses":
        while True:
            report = await manager.refresh_statuses()
            emit(
                {
                    "matched": report.matched,
                    "unmatched": report.unmatched,
                    "total": report.total,
                }
            )
            if args.interval is None:
                break
            await asyncio.sleep(args.interval)

    elif args.command == "count":
        emit({"stations": await manager.cached_station_count()})

    elif args.command == "find":
        stations = await find_stations(manager, args)
        emit([station_to_dict(station, include_status=True) for station in stations])

    elif args.command == "operators":
        emit([operator_to_dict(op) for op in await find_operators(manager, args)])


async def main(argv: list[str] | None = None):
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    fluentd_host = None
    fluentd_port = None
    if args.fluentd_endpoint:
        fluentd_host, fluentd_port = parse_fluentd_endpoint(parser, args.fluentd_endpoint)

    setup_logging(args.log_level)

    logger.info(
        "Command starting",
        extra={
            "event_type": "command_start",
            "event_data": {
                "command": args.command,
                "database": args.db,
                "base_url": config.BASE_URL,
                "metrics_port": args.metrics_port,
                "fluentd_enabled": fluentd_host is not None,
            },
        },
    )

    if args.metrics_port:
        start_http_server(args.metrics_port)

    db = Database(args.db)
    connection = await db.connect()
    try:
        await db.initialize_schema()

        async with EVSERestClient() as client:
            plugins = create_plugins(args, fluentd_host, fluentd_port)
            manager = EVSEManager(client, connection, plugins=plugins)
            await manager.initialize_plugins()
            try:
                await run_command(manager, args)
            except Exception as e:
                log_error(logger, "command_error", f"{args.command} failed: {e}", exc_info=e)
                raise
            finally:
                await manager.close()
    finally:
        await db.disconnect()


def run():
    """Entry point for console script."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
