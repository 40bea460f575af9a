from typing import Any, Dict

from pydantic import BaseModel


class Action(BaseModel):
    """
    Base class for actions that are passed between strategies and executors

    An action represents a task to be performed by executors, such as
    delivering an alert to a notification channel.
    """

    type: str  # Action type identifier
    data: Dict[str, Any]  # Action payload data

    def __str__(self) -> str:
        return f"Action(type={self.type}, data={self.data})"

    class Config:
        """Pydantic configuration"""

        frozen = True
