"""CLI entry point for notifymcp.

notifymcp exposes macOS notifications to MCP clients (Claude Desktop and
friends). Commands:
- serve: run the MCP server on stdio (the default)
- send: post a notification from the shell, through the same code path
- sounds / tools / config: inspection helpers
"""

import argparse
import asyncio
import json
import sys

from .config import ensure_config_exists, get_config_path, load_config
from .log import set_level
from .tools import SOUND_CHOICES, build_tools


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the MCP server on stdio."""
    from .server import run

    config = load_config()
    set_level(config.log.level)
    run(config)


def cmd_send(args: argparse.Namespace) -> None:
    """Send one notification and print the result."""
    from .driver import Failed, deliver
    from .notifier import TerminalNotifier
    from .options import NotificationRequest, normalize
    from .results import format_outcome

    config = load_config()
    set_level(config.log.level)

    request = NotificationRequest(
        title=args.title,
        message=args.message,
        subtitle=args.subtitle,
        sound=args.sound,
        icon=args.icon,
        content_image=args.content_image,
        wait=args.wait,
        timeout=args.timeout,
        close_label=args.close_label,
        actions=args.action or [],
        reply=args.reply,
    )
    options = normalize(request, default_timeout=config.notifier.default_timeout)
    notifier = TerminalNotifier(binary=config.notifier.binary, sender=config.notifier.sender)

    outcome = asyncio.run(deliver(options, notifier))
    text = format_outcome(outcome, request.title)
    if isinstance(outcome, Failed):
        print(text, file=sys.stderr)
        sys.exit(1)
    print(text)


def cmd_sounds(args: argparse.Namespace) -> None:
    """List the accepted sound names."""
    for sound in SOUND_CHOICES:
        print(sound)


def cmd_tools(args: argparse.Namespace) -> None:
    """Print the tool descriptors as JSON."""
    strict = load_config().server.strict
    tools = [
        {"name": t.name, "description": t.description, "inputSchema": t.schema_dict()}
        for t in build_tools(strict)
    ]
    print(json.dumps(tools, indent=2))


def cmd_config_init(args: argparse.Namespace) -> None:
    """Initialize config file with defaults."""
    config_path = ensure_config_exists()
    print(f"Config file at: {config_path}")


def cmd_config_path(args: argparse.Namespace) -> None:
    """Print config file path."""
    print(get_config_path())


def cmd_config_show(args: argparse.Namespace) -> None:
    """Show current config."""
    config_path = get_config_path()
    if config_path.exists():
        print(config_path.read_text())
    else:
        print(f"No config file at {config_path}")
        print("Run 'notifymcp config init' to create one.")


def _action_label(value: str) -> str:
    """argparse type for action labels; the binary splits them on commas."""
    if "," in value:
        raise argparse.ArgumentTypeError(f"action labels may not contain commas: {value!r}")
    return value


def setup_send_parser(subparsers: argparse._SubParsersAction) -> None:
    """Set up the send subcommand."""
    send_parser = subparsers.add_parser("send", help="Send a notification from the shell")
    send_parser.add_argument("title", help="Notification title")
    send_parser.add_argument("-m", "--message", default="", help="Notification body")
    send_parser.add_argument("--subtitle", help="Notification subtitle")
    send_parser.add_argument("--sound", choices=SOUND_CHOICES, help="Sound name, or 'none'")
    send_parser.add_argument("--icon", help="Path to an icon image")
    send_parser.add_argument("--content-image", help="Path to an image shown in the body")
    send_parser.add_argument(
        "-w", "--wait", action="store_true", help="Wait for the user to interact"
    )
    send_parser.add_argument("-t", "--timeout", type=float, help="Timeout in seconds")
    send_parser.add_argument("--close-label", help="Label for the close button")
    send_parser.add_argument(
        "-a",
        "--action",
        action="append",
        type=_action_label,
        help="Action button label (repeat for a second button)",
    )
    send_parser.add_argument("--reply", action="store_true", help="Offer a reply field")
    send_parser.set_defaults(func=cmd_send)


def setup_config_parser(subparsers: argparse._SubParsersAction) -> None:
    """Set up the config subcommand."""
    config_parser = subparsers.add_parser(
        "config",
        help="Manage notifymcp configuration",
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")

    # config init
    init_parser = config_subparsers.add_parser("init", help="Create default config file")
    init_parser.set_defaults(func=cmd_config_init)

    # config path
    path_parser = config_subparsers.add_parser("path", help="Print config file path")
    path_parser.set_defaults(func=cmd_config_path)

    # config show
    show_parser = config_subparsers.add_parser("show", help="Show current config")
    show_parser.set_defaults(func=cmd_config_show)

    config_parser.set_defaults(func=cmd_config_show, config_command=None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notifymcp",
        description="macOS notifications for MCP clients",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Run the MCP server on stdio")
    serve_parser.set_defaults(func=cmd_serve)

    setup_send_parser(subparsers)

    sounds_parser = subparsers.add_parser("sounds", help="List notification sounds")
    sounds_parser.set_defaults(func=cmd_sounds)

    tools_parser = subparsers.add_parser("tools", help="Print tool descriptors as JSON")
    tools_parser.set_defaults(func=cmd_tools)

    setup_config_parser(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        # MCP clients launch us with no arguments
        cmd_serve(args)
    elif hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
