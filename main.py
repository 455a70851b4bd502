#!/usr/bin/env python3
"""IBM MaaS360 Device & Application CLI.

This module provides a command-line interface over the MaaS360 REST API.
Each subcommand authenticates, performs one operation and prints a summary.

Architecture:
    - MaaS360Client is the facade over one shared MaaS360Transport
    - TokenProvider handles the password and refresh-token flows
    - ConsolePresenter renders results; library code never prints

Environment Variables Required:
    - MAAS360_BILLING_ID: Customer billing ID
    - MAAS360_APP_ID: Application ID registered for API access
    - MAAS360_ACCESS_KEY: Application access key
    - MAAS360_USERNAME: Administrator username
    - MAAS360_PASSWORD or MAAS360_REFRESH_TOKEN
    - MAAS360_TIMEOUT: Request timeout in seconds (optional)

Example Usage:
    $ python main.py auth                                  # Print masked tokens
    $ python main.py search --filter platformName=iOS      # Search devices
    $ python main.py action DEVICE_ID MDM_LOCATE           # Perform an action
    $ python main.py catalog --filter appId=com.example.app
"""
import argparse
import asyncio
import logging
import sys
from datetime import datetime

from dotenv import load_dotenv

load_dotenv()

# Local imports
from src.maas360.api import (
    ConsolePresenter,
    Credentials,
    MaaS360Client,
    MaaS360Error,
    timeout_from_env,
)

logger = logging.getLogger("maas360.cli")


def parse_filters(pairs: list[str]) -> dict[str, str]:
    """Turn ["key=value", ...] into a dict.

    Raises:
        argparse.ArgumentTypeError: If an item has no '='
    """
    filters = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Filter must be KEY=VALUE, got {pair!r}")
        filters[key] = value
    return filters


def parse_target_time(value: str) -> datetime:
    try:
        return datetime.strptime(value, "%Y-%m-%dT%H:%M:%S")
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Target time must look like 2024-01-31T22:00:00, got {value!r}"
        ) from None


async def dispatch(
    client: MaaS360Client,
    args: argparse.Namespace,
    presenter: ConsolePresenter,
) -> None:
    """Run the selected subcommand against an authenticated client."""
    command = args.command

    if command == "auth":
        presenter.show_tokens(client.tokens, reveal=args.reveal)
        presenter.show_basic_auth(client.basic_auth())

    elif command == "device":
        presenter.show_device(await client.get_device(args.device_id))

    elif command == "search":
        presenter.show_devices(await client.search_devices(parse_filters(args.filter)))

    elif command == "identity":
        identity = await client.get_device_identity(args.device_id)
        presenter.show_identity(args.device_id, identity)

    elif command == "hardware":
        inventory = await client.get_hardware_inventory(args.device_id)
        presenter.show_hardware(args.device_id, inventory)

    elif command == "software":
        inventory = await client.get_software_installed(args.device_id)
        presenter.show_software(args.device_id, inventory)

    elif command == "network":
        attributes = await client.get_network_info(args.device_id)
        presenter.show_network(args.device_id, attributes)

    elif command == "actions":
        presenter.show_actions(await client.get_device_actions(args.device_id))

    elif command == "action":
        params = parse_filters(args.param) or None
        result = await client.perform_device_action(args.device_id, args.action_id, params)
        presenter.show_action_result(args.action_id, result)

    elif command == "message":
        result = await client.send_message(args.device_id, args.subject, args.message)
        presenter.show_action_result("Message", result)

    elif command == "lock":
        presenter.show_action_result("Lock", await client.lock_device(args.device_id))

    elif command == "hide":
        presenter.show_action_result("Hide", await client.hide_device(args.device_id))

    elif command == "update-os":
        result = await client.update_os(args.device_id, args.os_version, args.target_time)
        presenter.show_action_result("OS update", result)

    elif command == "catalog":
        presenter.show_catalog_apps(await client.search_catalog(parse_filters(args.filter)))

    elif command == "installed":
        apps = await client.search_installed_apps(parse_filters(args.filter))
        presenter.show_installed_apps(apps)


async def run(args: argparse.Namespace, presenter: ConsolePresenter) -> int:
    """Authenticate and run one subcommand. Returns the process exit code."""
    try:
        credentials = Credentials.from_env()
        timeout = timeout_from_env()

        async with MaaS360Client(credentials, timeout=timeout) as client:
            await client.authenticate()
            await dispatch(client, args, presenter)

    except MaaS360Error as e:
        logger.error(f"{e}")
        logger.debug(f"Error details: {e.to_dict()}")
        return 1

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query and manage IBM MaaS360 devices and applications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py auth                                   # Authenticate, print masked tokens
  python main.py search --filter partialDeviceName=ipad # Search devices
  python main.py hardware DEVICE_ID                     # Hardware inventory
  python main.py action DEVICE_ID ANDROID_CUSTOM_CMDS --param command=reboot
  python main.py update-os DEVICE_ID 17.4 2024-06-01T22:00:00
  python main.py installed --filter partialAppName=Slack
        """,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    auth = subparsers.add_parser("auth", help="Authenticate and print tokens")
    auth.add_argument(
        "--reveal",
        action="store_true",
        help="Print tokens in full instead of masked",
    )

    for name, help_text in (
        ("device", "Show core device attributes"),
        ("identity", "Show device identity and custom attributes"),
        ("hardware", "Show hardware inventory"),
        ("software", "Show installed software"),
        ("network", "Show network information"),
        ("actions", "List actions available for a device"),
        ("lock", "Lock a device"),
        ("hide", "Hide a device"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("device_id", help="MaaS360 device ID")

    for name, help_text in (
        ("search", "Search devices"),
        ("catalog", "Search the app catalog (requires appId filter)"),
        ("installed", "Search installed apps"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--filter",
            action="append",
            metavar="KEY=VALUE",
            default=[],
            help="Query filter (repeatable)",
        )

    action = subparsers.add_parser("action", help="Perform a device action")
    action.add_argument("device_id", help="MaaS360 device ID")
    action.add_argument("action_id", help="Action ID from the device's catalog")
    action.add_argument(
        "--param",
        action="append",
        metavar="KEY=VALUE",
        default=[],
        help="Additional action parameter (repeatable)",
    )

    message = subparsers.add_parser("message", help="Send a message to a device")
    message.add_argument("device_id", help="MaaS360 device ID")
    message.add_argument("subject", help="Message title")
    message.add_argument("message", help="Message body")

    update_os = subparsers.add_parser("update-os", help="Schedule an OS update")
    update_os.add_argument("device_id", help="MaaS360 device ID")
    update_os.add_argument("os_version", help="Target OS version")
    update_os.add_argument(
        "target_time",
        type=parse_target_time,
        help="Device-local time, YYYY-MM-DDTHH:MM:SS",
    )

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        parse_filters(getattr(args, "filter", []) + getattr(args, "param", []))
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    exit_code = asyncio.run(run(args, ConsolePresenter()))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
