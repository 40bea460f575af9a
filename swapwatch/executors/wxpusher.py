"""
WxPusher notification executor

Pushes alert summaries via the WxPusher service with bounded retries.
Delivery failures are logged and reported through the return value.
"""

import asyncio
from datetime import datetime
from typing import List, Optional, Union

from wxpusher import WxPusher

from ..core.actions import Action
from ..core.base import Executor
from ..logger import logger
from .formatting import format_action


class WxPusherExecutor(Executor):
    __component_name__ = "wxpusher"

    def __init__(
        self,
        app_token: str,
        uids: Union[str, List[str]],
        default_summary: Optional[str] = None,
        retry_times: int = 3,
        retry_delay: int = 1,
    ):
        """
        Initialize the WxPusher executor

        Args:
            app_token: WxPusher application token
            uids: Recipient uid or list of uids
            default_summary: Summary line shown in the notification list
            retry_times: Delivery attempts per action
            retry_delay: Seconds between attempts
        """
        super().__init__()

        if not app_token or len(app_token) < 10:
            raise ValueError("Invalid app_token")

        self.app_token = app_token
        self.uids = [uids] if isinstance(uids, str) else uids

        if not self.uids:
            raise ValueError("At least one uid is required")

        self.default_summary = default_summary or "Unusual native swaps"
        self.retry_times = retry_times
        self.retry_delay = retry_delay

        logger.info(f"Initialized WxPusher executor with {len(self.uids)} recipients")

    async def execute(self, action: Action) -> bool:
        message = self._format_message(action)

        for attempt in range(self.retry_times):
            try:
                if await self._send_message(message):
                    return True
                logger.warning(
                    f"Failed to send message, attempt {attempt + 1}/{self.retry_times}"
                )
            except Exception as e:
                logger.error(f"Error sending message (attempt {attempt + 1}): {e}")

            if attempt < self.retry_times - 1:
                await asyncio.sleep(self.retry_delay)

        return False

    async def _send_message(self, message: str) -> bool:
        # The WxPusher client is blocking
        result = await asyncio.to_thread(
            WxPusher.send_message,
            content=message,
            uids=self.uids,
            token=self.app_token,
            summary=self.default_summary,
        )

        if result.get("success", False):
            logger.info(f"Successfully sent message: {message[:100]}...")
            return True

        logger.error(f"Failed to send message: {result}")
        return False

    def _format_message(self, action: Action) -> str:
        return (
            f"【{self.default_summary}】\n\n"
            f"{format_action(action)}\n\n"
            f"Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
        )
