"""Base agent with shared session and logging patterns.

Provides:
- BaseAgent with session ID management and a bound structured logger
"""

import structlog
from uuid import uuid4

from vulngate.core.config import Config

logger = structlog.get_logger()


class BaseAgent:
    """Base agent holding configuration, session ID and a bound logger.

    Every log line emitted through self.log carries the agent name and the
    session ID, so one build's scan can be followed across stages.
    """

    def __init__(self, config: Config, session_id: str | None = None):
        """Initialize base agent.

        Args:
            config: Resolved scan configuration
            session_id: Optional session ID (generates new UUID if not provided)
        """
        self.config = config
        self.session_id = session_id or str(uuid4())
        self.log = logger.bind(agent=self.__class__.__name__, session_id=self.session_id)
