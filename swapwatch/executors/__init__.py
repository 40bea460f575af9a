from .logger import LoggerExecutor
from .wxpusher import WxPusherExecutor

__all__ = ["LoggerExecutor", "WxPusherExecutor"]
