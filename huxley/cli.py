"""CLI interface for Huxley diagnostics and maintenance."""

import argparse
import asyncio
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

import yaml
from dotenv import load_dotenv

from huxley.core.config import Config, load_config
from huxley.core.logging import setup_logging
from huxley.model.message import InboundContext
from huxley.runtime.context import RuntimeContext
from huxley.runtime.dispatch import DispatchOrchestrator, validate_natural_conversation
from huxley.runtime.resume import AutoResumeSweeper
from huxley.stores.resume import is_auto_resume_enabled

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _format_ms(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


def load_environment(config_path: Path) -> None:
    """Load a ``.env`` file sitting next to the config file, if present."""
    env_file = config_path.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)
        logger.debug(f"Loaded environment from {env_file}")


def run_doctor(config: Config) -> int:
    """Print the natural conversation report; exit 1 when invalid."""
    report = validate_natural_conversation(config)

    for error in report.errors:
        print(f"ERROR: {error}")
    for warning in report.warnings:
        print(f"WARNING: {warning}")

    if report.valid:
        print("Natural conversation configuration OK")
        return 0
    return 1


def run_tasks(runtime: RuntimeContext, args: argparse.Namespace) -> int:
    """List tracked tasks, or drop stale ones with ``tasks cleanup``."""
    tracker = runtime.tracker
    if tracker is None:
        print("Task tracking unavailable: configure agents.defaults.workspace or HUXLEY_STATE_DIR")
        return 1

    if args.action == "cleanup":
        removed = tracker.cleanup()
        print(f"Removed {removed} task(s)")
        return 0

    tasks = tracker.list(args.session)
    if not tasks:
        print("No tracked tasks")
        return 0

    for task in tasks:
        print(
            f"{task.id}  {task.status.value:<9} {task.type.value:<6} "
            f"{task.session_key}  {_format_ms(task.last_update_at)}  {task.description}"
        )
    return 0


def run_sentinels(runtime: RuntimeContext) -> int:
    """List unexpired in-progress sentinels."""
    states = runtime.sentinels.list_all()
    if not states:
        print(f"No in-progress sentinels in {runtime.sentinels.directory}")
        return 0

    for state in states:
        print(f"{state.session_key}  {state.run_id}  {_format_ms(state.timestamp)}  {state.user_prompt[:80]}")
    return 0


async def log_reply(ctx: InboundContext) -> None:
    """Reply handler for the CLI: records what would have been dispatched."""
    logger.info(f"Resume prompt for {ctx.session_key}: {ctx.text[:100]}")


async def run_resume(runtime: RuntimeContext) -> int:
    """Run the startup resume sweep once."""
    if not is_auto_resume_enabled(runtime.config, runtime.env):
        print("Auto-resume is disabled (set agents.defaults.autoResume or OPENCLAW_AUTO_RESUME)")
        return 0

    sweeper = AutoResumeSweeper(DispatchOrchestrator(runtime), log_reply, env=runtime.env)
    if not sweeper.should_run():
        print("Auto-resume skipped in test environment")
        return 0

    report = await sweeper.run()
    print(f"Processed {report.processed}, resumed {report.resumed}, failed {report.failed}")
    return 1 if report.failed else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Huxley - interrupt-aware natural conversation")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to configuration file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    subparsers.add_parser("doctor", help="Validate natural conversation configuration")

    tasks_parser = subparsers.add_parser("tasks", help="List or clean up tracked tasks")
    tasks_parser.add_argument(
        "action",
        nargs="?",
        choices=["list", "cleanup"],
        default="list",
        help="list (default) or cleanup",
    )
    tasks_parser.add_argument(
        "--session",
        type=str,
        help="Only show tasks for this session key",
    )

    subparsers.add_parser("sentinels", help="List in-progress auto-resume sentinels")
    subparsers.add_parser("resume", help="Replay recent in-progress sentinels")

    return parser


async def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    load_environment(args.config)
    config = load_config(args.config)

    if args.command == "doctor":
        return run_doctor(config)

    runtime = RuntimeContext(config)
    if args.command == "tasks":
        return run_tasks(runtime, args)
    if args.command == "sentinels":
        return run_sentinels(runtime)

    setup_logging(config.logging, verbose=args.verbose)
    return await run_resume(runtime)


def run() -> None:
    """Entry point for the ``huxley`` console script."""
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        return
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Invalid YAML in configuration: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Startup failed: {e} (run with -v for details)", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    run()
