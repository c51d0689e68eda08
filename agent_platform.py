"""
Agent Platform - base classes for running long-lived bot agents
"""

import asyncio
import logging
from typing import Optional


class Agent:
    """Base class for all agents"""

    def __init__(self, name: str, logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger(self.name)

    async def run(self) -> bool:
        """
        Main agent execution. Override in subclass.

        Returns:
            True if successful, False otherwise
        """
        raise NotImplementedError("Subclass must implement run()")

    async def close(self) -> None:
        """Release agent resources. Override in subclass if needed."""
        pass


class AgentPlatform:
    """Platform for running service agents"""

    def __init__(
        self,
        max_restarts: int = 5,
        base_delay: float = 5.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.max_restarts = max_restarts
        self.base_delay = base_delay
        self.logger = logger or logging.getLogger("image_bot.platform")
        self.agents = []

    async def start_service(self, agent: Agent) -> None:
        """
        Start a long-running service agent (runs until stopped).

        Restarts the agent's run loop after a crash, with linear back-off,
        up to max_restarts times. The final failure is re-raised.

        Args:
            agent: Agent instance to run as service
        """
        self.logger.info(f"Starting service agent: {agent.name}")
        if agent not in self.agents:
            self.agents.append(agent)

        restart_count = 0

        while True:
            try:
                await agent.run()
                self.logger.info(f"Service agent {agent.name} stopped gracefully")
                return

            except asyncio.CancelledError:
                self.logger.info(f"Service agent {agent.name} cancelled")
                raise

            except Exception as e:
                restart_count += 1
                self.logger.error(
                    f"Service agent {agent.name} crashed "
                    f"(attempt {restart_count}/{self.max_restarts}): {e}",
                    exc_info=True,
                )

                if restart_count >= self.max_restarts:
                    self.logger.error(
                        f"Service agent {agent.name} exceeded max restarts, giving up"
                    )
                    raise

                delay = self.base_delay * restart_count
                self.logger.info(f"Restarting in {delay} seconds...")
                await asyncio.sleep(delay)

    async def close(self) -> None:
        """Close all agents started by this platform"""
        for agent in self.agents:
            try:
                await agent.close()
            except Exception as e:
                self.logger.warning(f"Failed to close agent {agent.name}: {e}")
