# reelsync/main.py
import argparse
import asyncio
import logging
import os
import sys
import time

from reelsync.infrastructure.config.loaders.yaml_loader import ConfigError, YamlConfigLoader
from reelsync.infrastructure.config.validators.schema_validator import SchemaValidator
from reelsync.infrastructure.logging.log_manager import initialize_logging
from reelsync.infrastructure.rng.rng_provider import RNGProvider

from reelsync.domain.events.event_dispatcher import EventDispatcher
from reelsync.domain.machine.factories.reel_manager_factory import ReelManagerFactory

from reelsync.application.simulation.spin_runner import SpinRunner


CONFIG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "application", "config")
DEFAULT_CONFIG_PATH = os.path.join(CONFIG_DIR, "default_machine.yaml")
DEFAULT_SCHEMA_PATH = os.path.join(CONFIG_DIR, "schemas", "machine_schema.json")


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Multi-reel spin/stop simulator")

    parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to machine configuration file"
    )

    parser.add_argument(
        "-n", "--cycles",
        type=int,
        default=None,
        help="Number of spin cycles (overrides simulation.cycles)"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="RNG seed (overrides rng.seed)"
    )

    parser.add_argument(
        "--time-scale",
        type=float,
        default=None,
        help="Timer scale, 0 disables waiting (overrides timing.time_scale)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--log-mode",
        choices=["all", "app", "domain", "none"],
        default=None,
        help="Select logging mode: 'all'=verbose, 'app'=application only, 'domain'=domain only, 'none'=minimal"
    )

    return parser.parse_args(argv)


def apply_overrides(config, args):
    """Fold command line overrides into the loaded configuration."""
    if args.seed is not None:
        config.setdefault("rng", {})["seed"] = args.seed

    if args.time_scale is not None:
        config.setdefault("timing", {})["time_scale"] = args.time_scale

    if args.cycles is not None:
        config.setdefault("simulation", {})["cycles"] = args.cycles

    log_config = config.setdefault("logging", {})
    loggers = log_config.setdefault("loggers", {})

    if args.log_mode == "all":
        log_config["level"] = "DEBUG"
        log_config["console_level"] = "DEBUG"
        loggers.clear()
    elif args.log_mode == "app":
        log_config["level"] = "WARNING"
        loggers["domain"] = {"level": "WARNING"}
        loggers["application"] = {"level": "DEBUG"}
        loggers["infrastructure"] = {"level": "WARNING"}
    elif args.log_mode == "domain":
        log_config["level"] = "WARNING"
        loggers["domain"] = {"level": "DEBUG"}
        loggers["application"] = {"level": "WARNING"}
        loggers["infrastructure"] = {"level": "WARNING"}
    elif args.log_mode == "none":
        log_config["level"] = "WARNING"
        log_config["console_level"] = "WARNING"

    # verbose wins over any log mode
    if args.verbose:
        log_config["level"] = "DEBUG"
        log_config["console_level"] = "DEBUG"

    return config


def print_summary(results):
    stats = results["stats"]

    print("\nRun Summary:")
    print(f"- Machine: {results['manager']['id']} ({results['manager']['number_of_reels']} reels)")
    print(f"- Cycles: {stats['total_cycles']}")
    print(f"- Victories: {stats['victory_count']} ({stats['victory_rate']:.1%})")
    print(f"- No match: {stats['no_match_count']}")
    print(f"- Failures: {stats['failure_count']}")

    if stats["symbol_victory_counts"]:
        counts = ", ".join(f"{symbol}: {count}" for symbol, count in
                           sorted(stats["symbol_victory_counts"].items(), key=lambda item: -item[1]))
        print(f"- Winning symbols: {counts}")


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)
    start_time = time.time()

    config_loader = YamlConfigLoader(SchemaValidator())

    try:
        config = config_loader.load_file(args.config, DEFAULT_SCHEMA_PATH)
    except ConfigError as e:
        print(f"Error loading configuration: {str(e)}")
        return 1

    config = apply_overrides(config, args)

    initialize_logging(config.get("logging", {}))
    logger = logging.getLogger("main")
    logger.info(f"Loaded configuration from {args.config}")

    event_dispatcher = EventDispatcher()
    factory = ReelManagerFactory(RNGProvider(), event_dispatcher)

    try:
        manager = factory.create_manager(config)
    except ValueError as e:
        logger.error(f"Invalid machine configuration: {str(e)}")
        return 1

    runner = SpinRunner(manager, event_dispatcher, config.get("simulation", {}))
    results = asyncio.run(runner.run())

    print_summary(results)
    logger.info(f"Finished in {time.time() - start_time:.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
