from ..core.actions import Action
from ..core.base import Executor
from ..logger import logger
from ..strategies.native_swaps.models import ALERT_ACTION_TYPE
from .formatting import format_action


class LoggerExecutor(Executor):
    """Writes actions to the log, alerts at WARNING level"""

    __component_name__ = "logger"

    async def execute(self, action: Action):
        if action.type == ALERT_ACTION_TYPE:
            logger.warning(f"Alert raised:\n{format_action(action)}")
        else:
            logger.info(f"Executing action: {action}")
