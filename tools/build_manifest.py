#!/usr/bin/env python3
"""
Slack App Manifest Builder - generate the image bot's app manifest.

Slack slash commands are declared in the app manifest rather than registered
at runtime, so this scans the image directory and writes a manifest whose
slash command usage hint lists the available categories.

Usage:
    python -m tools.build_manifest --image-dir img --out manifests/image-bot.json
    python -m tools.build_manifest --name "Wooper Bot" --command /wooper
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from image_bot.exceptions import DirectoryScanError, EmptyIndexError
from image_bot.image_index import ImageIndex
from image_bot.replies import build_slash_usage

# Slack rejects slash command usage hints longer than this
MAX_USAGE_HINT = 1000

BOT_SCOPES = [
    "channels:history",
    "chat:write",
    "commands",
    "files:write",
    "groups:history",
    "im:history",
    "mpim:history",
]

BOT_EVENTS = [
    "message.channels",
    "message.groups",
    "message.im",
    "message.mpim",
]


def build_manifest(
    app_name: str, slash_command: str, categories: List[str]
) -> Dict[str, Any]:
    """
    Build a Socket Mode app manifest for the image bot.

    Args:
        app_name: Display name of the app and bot user
        slash_command: Slash command name, e.g. "/image"
        categories: Category names offered in the usage hint

    Returns:
        Manifest dict ready for json.dump
    """
    if not slash_command.startswith("/"):
        raise ValueError(f"Slash command must start with '/': {slash_command}")

    usage_hint = build_slash_usage(categories)
    if len(usage_hint) > MAX_USAGE_HINT:
        usage_hint = build_slash_usage([])

    return {
        "display_information": {
            "name": app_name,
            "description": "Posts a random image from a category",
        },
        "features": {
            "bot_user": {"display_name": app_name, "always_online": True},
            "slash_commands": [
                {
                    "command": slash_command,
                    "description": "Get a random image from a category",
                    "usage_hint": usage_hint,
                    "should_escape": False,
                }
            ],
        },
        "oauth_config": {"scopes": {"bot": list(BOT_SCOPES)}},
        "settings": {
            "event_subscriptions": {"bot_events": list(BOT_EVENTS)},
            "interactivity": {"is_enabled": True},
            "socket_mode_enabled": True,
            "org_deploy_enabled": False,
            "token_rotation_enabled": False,
        },
    }


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="build-manifest",
        description="Generate a Slack app manifest for the image bot.",
    )
    parser.add_argument("--image-dir", default="img", help="Image base directory.")
    parser.add_argument("--name", default="Image Bot", help="App display name.")
    parser.add_argument("--command", default="/image", help="Slash command name.")
    parser.add_argument("--out", help="Output file path (prints to stdout if omitted).")
    args = parser.parse_args(argv)

    try:
        index = ImageIndex.build(args.image_dir)
        manifest = build_manifest(
            args.name, args.command, index.get_available_categories()
        )
    except (DirectoryScanError, EmptyIndexError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    text = json.dumps(manifest, indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n")
        print(f"Manifest written to {out_path}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
