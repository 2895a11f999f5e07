"""PowerPredict CLI - Main Entry Point."""

import argparse
import asyncio
import logging
import os
import sys

from powerpredict import __version__
from powerpredict.config import DEFAULT_HOST, DEFAULT_PORT, PORT_ENV
from powerpredict.enums import EfficiencyRating, HomeSize, Season
from powerpredict.exceptions import (
    AdvisoryInputError,
    AssistantUnavailableError,
    InvalidApplianceError,
    NoDataError,
    PowerPredictError,
    ValidationError,
)
from powerpredict.models import BillSettings
from powerpredict.registry import ApplianceRegistry

from . import commands as cmds
from .rich_output import get_formatter

_logger = logging.getLogger(__name__)
_formatter = get_formatter()


def build_settings(args: argparse.Namespace) -> BillSettings:
    return BillSettings(
        region=args.region,
        use_time_of_use=args.time_of_use,
        season=Season(args.season),
        home_size=HomeSize(args.home_size),
        efficiency_rating=EfficiencyRating(args.efficiency),
    )


async def async_main(args: argparse.Namespace) -> int:
    """Asynchronous main function."""
    try:
        cmd = args.command
        if cmd == "topics":
            cmds.handle_topics()
            return 0

        registry = ApplianceRegistry(
            cmds.load_appliances(getattr(args, "appliances", None)),
            build_settings(args),
        )
        if cmd == "estimate":
            cmds.handle_estimate(registry, args.json)
        elif cmd == "ask":
            cmds.handle_ask(registry, args.query)
        elif cmd == "chat":
            await cmds.handle_chat(registry, args.assistant_url)
        return 0

    except InvalidApplianceError as e:
        _logger.error(f"Invalid appliance: {e}")
        _formatter.print_error(str(e), title="Invalid Appliance")
    except NoDataError as e:
        _logger.error(f"No data: {e}")
        _formatter.print_error(
            str(e),
            title="Nothing To Estimate",
            details=["Add at least one appliance to the input file."],
        )
    except AdvisoryInputError as e:
        _formatter.print_error(str(e), title="Empty Question")
    except ValidationError as e:
        _logger.error(f"Validation error: {e}")
        _formatter.print_error(str(e), title="Validation Error")
    except AssistantUnavailableError as e:
        _logger.error(f"Assistant error: {e}")
        _formatter.print_error(str(e), title="Assistant Unavailable")
    except PowerPredictError as e:
        _logger.error(f"Library error: {e}")
        _formatter.print_error(str(e), title="Library Error")
    except Exception as e:
        _logger.error(f"Unexpected error: {e}", exc_info=True)
        _formatter.print_error(str(e), title="Unexpected Error")
    return 1


def parse_args(args: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="PowerPredict electricity bill estimator"
    )
    parser.add_argument(
        "--version", action="version", version=f"powerpredict {__version__}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        dest="loglevel",
        action="store_const",
        const=logging.INFO,
    )
    parser.add_argument(
        "-vv",
        "--very-verbose",
        dest="loglevel",
        action="store_const",
        const=logging.DEBUG,
    )

    # Options shared by every command that computes a bill
    billing = argparse.ArgumentParser(add_help=False)
    billing.add_argument("--region", default="National Average")
    billing.add_argument(
        "--season",
        choices=[s.value for s in Season],
        default=Season.SUMMER.value,
    )
    billing.add_argument(
        "--home-size",
        choices=[h.value for h in HomeSize],
        default=HomeSize.MEDIUM.value,
    )
    billing.add_argument(
        "--efficiency",
        choices=[e.value for e in EfficiencyRating],
        default=EfficiencyRating.AVERAGE.value,
    )
    billing.add_argument(
        "--time-of-use",
        action="store_true",
        help="Bill with time-of-use rates",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    estimate = subparsers.add_parser(
        "estimate",
        parents=[billing],
        help="Estimate the monthly bill from an appliance JSON file",
    )
    estimate.add_argument("appliances", help="JSON file of appliances")
    estimate.add_argument("--json", action="store_true")

    ask = subparsers.add_parser(
        "ask", parents=[billing], help="Ask the energy assistant one question"
    )
    ask.add_argument("query")
    ask.add_argument("--appliances", help="JSON file of appliances")

    chat = subparsers.add_parser(
        "chat", parents=[billing], help="Chat with the energy assistant"
    )
    chat.add_argument("--appliances", help="JSON file of appliances")
    chat.add_argument(
        "--assistant-url",
        help="Assistant proxy URL used when no canned answer fits "
        "(default: $POWERPREDICT_ASSISTANT_URL)",
    )

    subparsers.add_parser("topics", help="List knowledge base topics")

    serve = subparsers.add_parser("serve", help="Run the assistant proxy")
    serve.add_argument("--host", default=DEFAULT_HOST)
    serve.add_argument(
        "--port",
        type=int,
        default=int(os.getenv(PORT_ENV, str(DEFAULT_PORT))),
    )

    return parser.parse_args(args)


def main(args_list: list[str]) -> None:
    args = parse_args(args_list)
    logging.basicConfig(
        level=logging.WARNING,
        stream=sys.stdout,
        format="[%(asctime)s] %(levelname)s:%(name)s:%(message)s",
    )
    logging.getLogger("powerpredict").setLevel(args.loglevel or logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    if args.command == "serve":
        # aiohttp runs its own event loop
        logging.getLogger("powerpredict").setLevel(
            args.loglevel or logging.INFO
        )
        cmds.handle_serve(args.host, args.port)
        return

    try:
        sys.exit(asyncio.run(async_main(args)))
    except KeyboardInterrupt:
        _logger.info("Interrupted.")


def run() -> None:
    main(sys.argv[1:])


if __name__ == "__main__":
    run()
