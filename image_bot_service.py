#!/usr/bin/env python3
"""
Image Bot Launcher - Entry point for the Slack image bot service

Loads configuration, builds the image index, initializes ImageAgent, and
starts the service. Designed to run as systemd service or standalone.
"""

import asyncio
import logging
import os
import signal
import sys
from pathlib import Path
from typing import Dict, Optional

from agent_platform import AgentPlatform
from agents.image_agent import ImageAgent
from image_bot.exceptions import DirectoryScanError, EmptyIndexError
from image_bot.image_index import ImageIndex
from image_bot.logging_config import configure_logging

REQUIRED_VARS = [
    "SLACK_BOT_TOKEN",
    "SLACK_APP_TOKEN",
]

OPTIONAL_VARS = {
    "IMAGE_DIR": "img",
    "COMMAND_PREFIX": "!",
    "SLASH_COMMAND": "/image",
    "IMAGE_REQUEST_TIMEOUT": "10",
    "SLOW_RESPONSE_THRESHOLD": "5",
    "LOG_LEVEL": "info",
}


class ConfigurationError(Exception):
    """Raised when required environment variables are missing or invalid."""

    pass


def load_secrets(secrets_file: Path) -> int:
    """
    Load KEY=value lines from a secrets file into the environment.

    Variables already present in the environment take precedence.

    Returns:
        Number of variables set
    """
    if not secrets_file.exists():
        return 0

    loaded = 0
    with open(secrets_file) as f:
        for line in f:
            line = line.strip()

            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue

            # Skip SOPS encrypted lines
            if "ENC[" in line:
                continue

            if "=" not in line:
                continue

            if line.startswith("export "):
                line = line[7:]

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")

            if key not in os.environ:
                os.environ[key] = value
                loaded += 1

    return loaded


def validate_environment() -> None:
    """
    Check required variables and fill in defaults for optional ones.

    Raises:
        ConfigurationError: If a required variable is missing
    """
    missing = [var for var in REQUIRED_VARS if not os.getenv(var)]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    for var, default in OPTIONAL_VARS.items():
        if not os.getenv(var):
            os.environ[var] = default


def build_agent_config() -> Dict:
    """
    Build the ImageAgent configuration from the environment.

    Raises:
        ConfigurationError: If a numeric setting cannot be parsed
    """
    try:
        request_timeout = float(os.getenv("IMAGE_REQUEST_TIMEOUT", "10"))
        slow_threshold = float(os.getenv("SLOW_RESPONSE_THRESHOLD", "5"))
    except ValueError as e:
        raise ConfigurationError(f"Invalid numeric setting: {e}") from e

    if request_timeout <= 0:
        raise ConfigurationError("IMAGE_REQUEST_TIMEOUT must be positive")

    return {
        "image_dir": os.getenv("IMAGE_DIR", "img"),
        "command_prefix": os.getenv("COMMAND_PREFIX", "!"),
        "slash_command": os.getenv("SLASH_COMMAND", "/image"),
        "request_timeout": request_timeout,
        "slow_response_threshold": slow_threshold,
    }


class ImageBotService:
    """Service wrapper for the image bot"""

    def __init__(self, secrets_file: Optional[Path] = None):
        self.secrets_file = secrets_file or Path(__file__).parent / "secrets.env"
        self.logger: logging.Logger = logging.getLogger("image_bot")
        self.platform: Optional[AgentPlatform] = None
        self.agent: Optional[ImageAgent] = None
        self.shutdown_event: Optional[asyncio.Event] = None

    def setup_signals(self):
        """Setup signal handlers for graceful shutdown"""
        loop = asyncio.get_running_loop()

        def signal_handler(signum):
            self.logger.info(f"Received signal {signum}, shutting down gracefully...")
            self.shutdown_event.set()

        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, signal_handler, signum)
            except NotImplementedError:
                # Windows event loops have no signal handler support
                signal.signal(signum, lambda s, _frame: signal_handler(s))

    def setup(self) -> ImageAgent:
        """
        Load configuration, build the index and create the agent.

        Raises:
            ConfigurationError: On missing or invalid configuration
            DirectoryScanError: If the image directory cannot be scanned
            EmptyIndexError: If the image directory holds no categories
        """
        loaded = load_secrets(self.secrets_file)
        validate_environment()

        self.logger = configure_logging(os.getenv("LOG_LEVEL"))
        if loaded:
            self.logger.info(f"Loaded {loaded} settings from {self.secrets_file}")

        config = build_agent_config()
        self.logger.info(
            f"Configuration: image_dir={config['image_dir']}, "
            f"prefix={config['command_prefix']!r}, slash={config['slash_command']}, "
            f"timeout={config['request_timeout']}s"
        )

        index = ImageIndex.build(
            config["image_dir"], logger=self.logger.getChild("index")
        )

        self.platform = AgentPlatform(logger=self.logger.getChild("platform"))
        self.agent = ImageAgent(config, index, logger=self.logger.getChild("agent"))
        return self.agent

    async def run(self):
        """Main service loop"""
        agent = self.setup()
        # Created here so the event belongs to the loop asyncio.run() started
        self.shutdown_event = asyncio.Event()
        self.setup_signals()

        self.logger.info("Starting image bot service...")

        service_task = asyncio.create_task(self.platform.start_service(agent))
        shutdown_task = asyncio.create_task(self.shutdown_event.wait())

        try:
            done, pending = await asyncio.wait(
                [service_task, shutdown_task], return_when=asyncio.FIRST_COMPLETED
            )

            for task in pending:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

            if service_task in done:
                # Raises if the service crashed
                service_task.result()

            self.logger.info("Image bot service stopped gracefully")

        finally:
            self.logger.info("Cleaning up...")
            await self.platform.close()


def main():
    """Entry point"""
    service = ImageBotService()

    try:
        asyncio.run(service.run())
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        print("\nRequired variables:", file=sys.stderr)
        print("  SLACK_BOT_TOKEN   - Bot token from api.slack.com (xoxb-...)", file=sys.stderr)
        print("  SLACK_APP_TOKEN   - App token for Socket Mode (xapp-...)", file=sys.stderr)
        print("\nOptional variables (with defaults):", file=sys.stderr)
        for var, default in OPTIONAL_VARS.items():
            print(f"  {var:24s} - {default}", file=sys.stderr)
        sys.exit(1)
    except (DirectoryScanError, EmptyIndexError) as e:
        service.logger.error(f"Image index error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        service.logger.info("Interrupted by user")
    except Exception as e:
        service.logger.error(f"Service crashed: {e}", exc_info=True)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
