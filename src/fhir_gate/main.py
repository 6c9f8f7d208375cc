"""
Command-line entry point for FHIR Gate.

Usage:
    fhir-gate                 # watch INPUT_DIR until SIGINT/SIGTERM
    fhir-gate --once          # single poll cycle, exit 0
    python -m fhir_gate.main --input-dir inbox --valid-dir out/ok --invalid-dir out/rejected
"""

import argparse
import signal
from typing import Optional, Sequence

import structlog
from prometheus_client import start_http_server

from fhir_gate import __version__
from fhir_gate.config import Settings, settings as default_settings
from fhir_gate.dispatcher import Dispatcher
from fhir_gate.logging_config import configure_logging
from fhir_gate.persistence.processed_set import build_processed_set
from fhir_gate.persistence.redis_client import RedisClient
from fhir_gate.persistence.sinks import DirectorySink
from fhir_gate.persistence.sources import DirectorySource
from fhir_gate.routing.error_handler import ErrorHandler
from fhir_gate.routing.router import Router
from fhir_gate.validation.stage import ValidationStage
from fhir_gate.validators import build_validator

logger = structlog.get_logger(__name__)


def build_dispatcher(settings: Settings) -> Dispatcher:
    """Wire source, validator, sinks and processed set from settings."""
    source = DirectorySource(settings.INPUT_DIR, pattern=settings.INPUT_GLOB)
    router = Router(
        valid_sink=DirectorySink(settings.VALID_DIR, "valid", settings.DIAGNOSTIC_SUFFIX),
        invalid_sink=DirectorySink(settings.INVALID_DIR, "invalid", settings.DIAGNOSTIC_SUFFIX),
    )
    validator = build_validator(settings)
    handler = ErrorHandler(source, ValidationStage(validator), router)

    logger.info(
        "Pipeline assembled",
        input_dir=settings.INPUT_DIR,
        valid_dir=settings.VALID_DIR,
        invalid_dir=settings.INVALID_DIR,
        processed_backend=settings.PROCESSED_BACKEND,
        **validator.describe(),
    )

    return Dispatcher(
        source=source,
        handler=handler,
        processed=build_processed_set(settings),
        concurrency=settings.WORKER_CONCURRENCY,
        poll_interval=settings.POLL_INTERVAL_SECONDS,
    )


def shutdown(dispatcher: Dispatcher) -> None:
    """Release the validator's HTTP client and any pooled Redis connections."""
    dispatcher.handler.stage.validator.close()
    RedisClient.close_pool()
    logger.info("Resources released")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fhir-gate",
        description="Validate FHIR JSON documents and route them to valid/invalid sinks.",
    )
    parser.add_argument("--once", action="store_true", help="run a single poll cycle and exit")
    parser.add_argument("--input-dir", help="override INPUT_DIR")
    parser.add_argument("--valid-dir", help="override VALID_DIR")
    parser.add_argument("--invalid-dir", help="override INVALID_DIR")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {
        key: value
        for key, value in {
            "INPUT_DIR": args.input_dir,
            "VALID_DIR": args.valid_dir,
            "INVALID_DIR": args.invalid_dir,
        }.items()
        if value
    }
    return settings.model_copy(update=overrides) if overrides else settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = apply_overrides(default_settings, args)

    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
    logger.info("Starting FHIR validation gate", version=settings.APP_VERSION, once=args.once)

    if settings.PROMETHEUS_ENABLED and not args.once:
        start_http_server(settings.METRICS_PORT)
        logger.info("Prometheus exporter listening", port=settings.METRICS_PORT)

    dispatcher = build_dispatcher(settings)

    if args.once:
        try:
            results = dispatcher.run_once()
        finally:
            shutdown(dispatcher)
        logger.info(
            "Single cycle complete",
            routed=len(results),
            pending=dispatcher.stats.pending,
            by_destination=dispatcher.stats.by_destination,
        )
        return 0

    def _request_stop(signum, frame):
        logger.info("Stop requested", signal=signal.Signals(signum).name)
        dispatcher.stop()

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)

    try:
        dispatcher.run_forever()
    finally:
        shutdown(dispatcher)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
