"""
Message processor for extracting image commands from Slack events.
"""

from typing import Any, Dict, Optional

DEFAULT_COMMAND_PREFIX = "!"

# Reserved command names; a category with the same name takes precedence
HELP_COMMANDS = frozenset({"help", "list"})


def is_bot_message(event: Dict[str, Any]) -> bool:
    """Check whether a message event was posted by a bot (including ourselves)."""
    return event.get("subtype") == "bot_message" or bool(event.get("bot_id"))


def is_user_message(event: Dict[str, Any]) -> bool:
    """
    Check whether a message event is a plain user message.

    Edits, joins, deletions and other subtyped events are not commands.
    """
    if is_bot_message(event):
        return False
    return not event.get("subtype")


def parse_command(text: Optional[str], prefix: str = DEFAULT_COMMAND_PREFIX) -> Optional[str]:
    """
    Extract the command name from a message.

    Args:
        text: Raw message text
        prefix: Trigger prefix marking a command

    Returns:
        Trimmed text after the prefix ("" for a bare prefix), or None when
        the message is not a command
    """
    content = (text or "").strip()
    if not prefix or not content.startswith(prefix):
        return None
    return content[len(prefix):].strip()


def is_help_command(command: str) -> bool:
    return command in HELP_COMMANDS
