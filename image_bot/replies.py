"""
Reply text builders for image commands.
"""

from typing import List

from image_bot.image_index import ImageIndex
from image_bot.message_processor import DEFAULT_COMMAND_PREFIX


def build_category_listing(
    index: ImageIndex, prefix: str = DEFAULT_COMMAND_PREFIX
) -> str:
    """Build the help/list reply: one line per category with its image count."""
    categories = index.get_available_categories()
    if not categories:
        return "no image categories available"

    lines = ["Available image categories:"]
    for category in categories:
        count = index.get_image_count(category)
        lines.append(f"• `{prefix}{category}` ({count} images)")
    return "\n".join(lines) + "\n"


def build_category_not_found(category: str, categories: List[str]) -> str:
    return (
        f"Category '{category}' not found. "
        f"Available categories: {', '.join(categories)}"
    )


def build_no_images(category: str) -> str:
    return f"No {category} images available"


def build_load_failed(category: str, error: Exception) -> str:
    return f"Failed to load {category}: {error}"


def build_send_failed(category: str, error: Exception) -> str:
    return f"Failed to send {category}: {error}"


def build_timed_out(category: str, timeout_seconds: float) -> str:
    return f"Timed out sending {category} (limit {timeout_seconds:g}s)"


def build_slash_usage(categories: List[str]) -> str:
    """Usage hint for the slash command, e.g. "[cats|wooper]"."""
    if not categories:
        return "<category>"
    return f"[{'|'.join(categories)}]"
