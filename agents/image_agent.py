"""
Image Agent - random image replies over Slack

Connects to Slack via Socket Mode and answers:
- Text commands: "!<category>" posts a random image, "!help" / "!list"
  lists the categories
- Slash command: "/image <category>"
"""

import asyncio
import os
import time
from typing import Any, Awaitable, Callable, Dict, Optional

from slack_bolt.async_app import AsyncApp
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_sdk.errors import SlackApiError

from agent_platform import Agent
from image_bot.exceptions import ImageOpenError
from image_bot.image_file import open_image
from image_bot.image_index import ImageIndex
from image_bot.message_processor import (
    DEFAULT_COMMAND_PREFIX,
    is_help_command,
    is_user_message,
    parse_command,
)
from image_bot.performance_monitor import PerformanceMonitor
from image_bot.replies import (
    build_category_listing,
    build_category_not_found,
    build_load_failed,
    build_no_images,
    build_send_failed,
    build_timed_out,
)

# say() for message events, respond() for slash commands
Notifier = Callable[..., Awaitable[Any]]

DEFAULT_SLASH_COMMAND = "/image"
DEFAULT_REQUEST_TIMEOUT = 10.0


class ImageAgent(Agent):
    """Slack bot that replies with random images from an ImageIndex"""

    def __init__(self, config: Dict, image_index: ImageIndex, logger=None):
        super().__init__("image_agent", logger)

        # Slack setup
        self.bot_token = os.getenv("SLACK_BOT_TOKEN")
        self.app_token = os.getenv("SLACK_APP_TOKEN")

        if not self.bot_token or not self.app_token:
            raise ValueError(
                "Missing Slack tokens. Set SLACK_BOT_TOKEN and SLACK_APP_TOKEN in environment."
            )

        self.app = AsyncApp(token=self.bot_token)
        self.socket_handler = None

        self.index = image_index

        # Configuration
        self.command_prefix = config.get("command_prefix", DEFAULT_COMMAND_PREFIX)
        self.slash_command = config.get("slash_command", DEFAULT_SLASH_COMMAND)
        self.request_timeout = float(
            config.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)
        )

        self.performance_monitor = PerformanceMonitor(
            slow_threshold_seconds=config.get("slow_response_threshold", 5.0),
            logger=self.logger.getChild("performance"),
        )

        self._register_handlers()

    def _register_handlers(self):
        """Register Slack event handlers"""

        @self.app.event("message")
        async def handle_message(event, say, client):
            """Handle text commands in channels and DMs"""
            await self._handle_message(event, say, client)

        @self.app.command(self.slash_command)
        async def handle_image_command(ack, command, respond, client):
            """Handle the image slash command"""
            # Slack expects an ack within 3 seconds; the image follows separately
            await ack()
            await self._handle_slash_command(command, respond, client)

    async def _handle_message(self, event: Dict, say: Notifier, client) -> None:
        if not is_user_message(event):
            return

        text = (event.get("text") or "").strip()
        user_id = event.get("user")
        channel_id = event.get("channel")

        self.logger.debug(
            f"Message received: user={user_id}, channel={channel_id}, text={text!r}"
        )

        category = parse_command(text, self.command_prefix)
        if category is None:
            return

        self.logger.info(
            f"Command received: {text} (category={category}, user={user_id}, channel={channel_id})"
        )

        if self.index.has_category(category):
            await self._send_random_image(client, channel_id, category, say, user_id)

        elif is_help_command(category):
            self.logger.info(f"Help command requested by {user_id}")
            listing = build_category_listing(self.index, self.command_prefix)
            await self._notify(say, listing)
            self.logger.info(
                f"Help response sent to {user_id} ({len(self.index)} categories)"
            )

        else:
            self.logger.info(
                f"Unknown command received: {text} (category={category}, user={user_id})"
            )

    async def _handle_slash_command(self, command: Dict, respond: Notifier, client) -> None:
        category = (command.get("text") or "").strip()
        user_id = command.get("user_id")
        channel_id = command.get("channel_id")

        self.logger.info(
            f"Slash command received: {self.slash_command} {category} "
            f"(user={command.get('user_name')}, user_id={user_id}, channel={channel_id})"
        )

        if not self.index.has_category(category):
            categories = self.index.get_available_categories()
            self.logger.warning(
                f"Invalid category requested: {category!r} by {user_id} "
                f"(available: {', '.join(categories)})"
            )
            await self._notify(respond, build_category_not_found(category, categories))
            return

        await self._send_random_image(client, channel_id, category, respond, user_id)

    async def _send_random_image(
        self,
        client,
        channel_id: str,
        category: str,
        notify: Notifier,
        user_id: Optional[str] = None,
    ) -> bool:
        """
        Pick, open and upload one image from a category.

        Failures are reported back through notify and never raised, so one
        bad request leaves the agent serving the next.

        Returns:
            True if the image was uploaded
        """
        start_time = time.monotonic()

        image_path = self.index.get_random_image(category)
        if not image_path:
            self.logger.warning(
                f"No images available for category {category} (user={user_id})"
            )
            await self._notify(notify, build_no_images(category))
            return False

        try:
            file_name = await asyncio.wait_for(
                self._upload_image(client, channel_id, image_path),
                timeout=self.request_timeout,
            )
        except ImageOpenError as e:
            self.logger.error(
                f"Failed to load image file: category={category}, "
                f"image_path={image_path}, user={user_id}: {e}"
            )
            await self._notify(notify, build_load_failed(category, e))
            return False
        except SlackApiError as e:
            duration = time.monotonic() - start_time
            self.logger.error(
                f"Failed to send image: category={category}, "
                f"image_path={image_path}, user={user_id}, duration={duration:.2f}s: {e}"
            )
            await self._notify(notify, build_send_failed(category, e))
            return False
        except asyncio.TimeoutError:
            self.logger.error(
                f"Timed out sending image: category={category}, "
                f"image_path={image_path}, user={user_id}, limit={self.request_timeout}s"
            )
            await self._notify(notify, build_timed_out(category, self.request_timeout))
            return False
        except Exception as e:
            self.logger.error(
                f"Failed to send image: category={category}, "
                f"image_path={image_path}, user={user_id}: {e}",
                exc_info=True,
            )
            await self._notify(notify, build_send_failed(category, e))
            return False

        duration = time.monotonic() - start_time
        self.performance_monitor.record_response_time(
            category, duration, user_id=user_id, channel_id=channel_id
        )
        self.logger.info(
            f"Image sent: category={category}, filename={file_name}, "
            f"user={user_id}, channel={channel_id}, duration={duration:.2f}s"
        )
        return True

    async def _upload_image(self, client, channel_id: str, image_path: str) -> str:
        """Stream one image file into a Slack upload. The file is closed on every exit path."""
        with open_image(image_path, logger=self.logger) as image:
            await client.files_upload_v2(
                channel=channel_id,
                file=image.stream,
                filename=image.file_name,
                title=image.file_name,
            )
            return image.file_name

    async def _notify(self, notify: Notifier, text: str) -> None:
        try:
            await notify(text=text)
        except SlackApiError as e:
            self.logger.warning(f"Failed to send reply: {e}")

    async def run(self):
        """
        Main agent loop - starts Socket Mode handler (blocks indefinitely)
        """
        self.logger.info("Starting image agent with Socket Mode...")

        try:
            await self._health_check()

            self.socket_handler = AsyncSocketModeHandler(self.app, self.app_token)

            self.logger.info("Image agent connected and ready")

            # This blocks forever, listening for events
            await self.socket_handler.start_async()

        except KeyboardInterrupt:
            self.logger.info("Received shutdown signal")

        except Exception as e:
            self.logger.error(f"Fatal error in image agent: {e}", exc_info=True)
            raise

        return True

    async def _health_check(self):
        """Check Slack auth and report the loaded index"""
        self.logger.info(
            f"Image index OK: {len(self.index)} categories, "
            f"{self.index.total_images} images from {self.index.base_dir or '(memory)'}"
        )

        try:
            auth_test = await self.app.client.auth_test()
            bot_name = auth_test.get("user", "Unknown")
            self.logger.info(f"Slack auth OK (bot: {bot_name})")
        except SlackApiError as e:
            self.logger.error(f"Slack auth failed: {e}")
            raise RuntimeError(f"Health check failed: Slack auth failed: {e}") from e

    async def close(self):
        """Disconnect the Socket Mode handler if running"""
        self.performance_monitor.log_summary()
        if self.socket_handler is not None:
            await self.socket_handler.close_async()
            self.socket_handler = None
