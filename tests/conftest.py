"""
Core pytest fixtures and configuration for the test suite.

Provides a small on-disk image tree, an index built from it, and realistic
Slack message / slash command payloads with mocked Slack clients.
"""

import logging
import random
import sys
from pathlib import Path
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add parent directory to path so we can import agents and image_bot modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from image_bot.image_index import ImageIndex


# ============================================================================
# File System Fixtures
# ============================================================================


@pytest.fixture
def image_dir(tmp_path) -> Path:
    """
    Temporary image tree with two categories.

    Layout:
        img/wooper/a.jpg
        img/wooper/b.png
        img/cats/c.gif
    """
    base = tmp_path / "img"
    (base / "wooper").mkdir(parents=True)
    (base / "cats").mkdir()
    (base / "wooper" / "a.jpg").write_bytes(b"jpeg-a")
    (base / "wooper" / "b.png").write_bytes(b"png-b")
    (base / "cats" / "c.gif").write_bytes(b"gif-c")
    return base


@pytest.fixture
def image_index(image_dir) -> ImageIndex:
    """Index over image_dir with a seeded random generator."""
    return ImageIndex.build(str(image_dir), rng=random.Random(1234))


# ============================================================================
# Slack Event Fixtures
# ============================================================================


@pytest.fixture
def sample_message_event() -> Dict[str, Any]:
    """Slack channel message carrying a text command."""
    return {
        "type": "message",
        "channel_type": "channel",
        "user": "U01TEST123",
        "text": "!wooper",
        "ts": "1234567890.123456",
        "channel": "C01TEST",
    }


@pytest.fixture
def sample_slash_command() -> Dict[str, Any]:
    """Slash command payload as delivered to a bolt command listener."""
    return {
        "command": "/image",
        "text": "wooper",
        "user_id": "U01TEST123",
        "user_name": "tester",
        "channel_id": "C01TEST",
        "team_id": "T01TEST",
    }


# ============================================================================
# Slack Client Mocks
# ============================================================================


@pytest.fixture
def mock_slack_client() -> MagicMock:
    """Slack web client with async upload and auth methods."""
    client = MagicMock()
    client.files_upload_v2 = AsyncMock(return_value={"ok": True, "files": []})
    client.auth_test = AsyncMock(return_value={"user": "imagebot", "user_id": "U0BOT"})
    return client


@pytest.fixture
def mock_say() -> AsyncMock:
    """say()/respond() replacement recording reply text."""
    return AsyncMock(return_value={"ok": True, "ts": "1234567890.999999"})


# ============================================================================
# Logging Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def reset_service_logger():
    """
    Restore the "image_bot" logger after each test.

    configure_logging() replaces its handlers and turns off propagation,
    which would hide records from caplog in later tests.
    """
    service_logger = logging.getLogger("image_bot")
    handlers = list(service_logger.handlers)
    level = service_logger.level
    propagate = service_logger.propagate

    yield

    for handler in list(service_logger.handlers):
        service_logger.removeHandler(handler)
    for handler in handlers:
        service_logger.addHandler(handler)
    service_logger.setLevel(level)
    service_logger.propagate = propagate
