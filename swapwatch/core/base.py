from abc import ABC, abstractmethod
from typing import (
    AsyncIterable,
    Awaitable,
    Callable,
    ClassVar,
    Dict,
    List,
    Optional,
    Type,
    TypeVar,
)

from ..logger import logger
from .actions import Action
from .events import Event

T = TypeVar("T", bound="Component")


class Component(ABC):
    """Base class of collectors, strategies and executors"""

    _registry: ClassVar[Dict[str, Type["Component"]]] = {}
    _component_name: str = None

    def __init_subclass__(cls, **kwargs):
        """
        Register subclasses that declare ``__component_name__``

        Each of Collector, Strategy and Executor owns its own registry, so the
        same name may be reused across component kinds.
        """
        super().__init_subclass__(**kwargs)

        if "_registry" not in cls.__dict__ and Component in cls.__bases__:
            cls._registry = {}

        component_name = getattr(cls, "__component_name__", None)
        if component_name:
            for base in cls.__mro__[1:]:
                if "_registry" in base.__dict__ and base is not Component:
                    base._registry[component_name] = cls
                    cls._component_name = component_name
                    break

    @classmethod
    def create(cls: Type[T], name: str, **kwargs) -> T:
        """
        Create component instance by registered name

        Args:
            name: Component name
            **kwargs: Component initialization parameters

        Returns:
            Component: Component instance

        Raises:
            ValueError: Component not registered
        """
        if name not in cls._registry:
            raise ValueError(f"No {cls.__name__} registered with name: {name}")

        try:
            return cls._registry[name](**kwargs)
        except Exception as e:
            logger.error(f"Error creating component {name}: {e}")
            raise

    @classmethod
    @abstractmethod
    def config_prefix(cls) -> str:
        """Configuration prefix"""

    @property
    def name(self) -> str:
        """Component name"""
        return self._component_name


class Collector(Component):
    """Collector base class"""

    def __init__(self):
        self._running = False
        self._started = False

    @classmethod
    def config_prefix(cls) -> str:
        return "collectors"

    async def start(self):
        """Start collector"""
        if self._started:
            return
        try:
            self._started = True
            self._running = True
            await self._start()
            logger.info(f"Collector {self.name} started")
        except Exception as e:
            self._started = False
            self._running = False
            logger.error(f"Error starting collector {self.name}: {e}")
            raise

    async def stop(self):
        """Stop collector"""
        if not self._started:
            return
        self._running = False
        await self._stop()
        self._started = False
        logger.info(f"Collector {self.name} stopped")

    async def _start(self):
        """Subclasses can override this method to implement custom startup logic"""

    async def _stop(self):
        """Subclasses can override this method to implement custom shutdown logic"""

    @property
    def is_running(self) -> bool:
        return self._running

    @abstractmethod
    def events(self) -> AsyncIterable[Event]:
        """Generate event stream"""


class Strategy(Component):
    """Strategy base class"""

    @classmethod
    def config_prefix(cls) -> str:
        return "strategies"

    @abstractmethod
    async def process_event(self, event: Event) -> List[Action]:
        """Process event and generate actions"""

    async def close(self):
        """Release resources held by the strategy"""


class Executor(Component):
    """Executor base class"""

    @classmethod
    def config_prefix(cls) -> str:
        return "executors"

    @abstractmethod
    async def execute(self, action: Action) -> None:
        """Execute action"""


class FunctionCollector(Collector):
    """Wraps an async generator function as a collector"""

    def __init__(
        self, func: Callable[[], AsyncIterable[Event]], name: Optional[str] = None
    ):
        super().__init__()
        self._func = func
        self._component_name = name or func.__name__

    async def events(self) -> AsyncIterable[Event]:
        if not self._started:
            await self.start()

        try:
            async for event in self._func():
                if not self._running:
                    break
                yield event
        finally:
            if self._running:
                await self.stop()


class FunctionStrategy(Strategy):
    """Wraps an async function as a strategy"""

    def __init__(
        self,
        func: Callable[[Event], Awaitable[List[Action]]],
        name: Optional[str] = None,
    ):
        super().__init__()
        self._func = func
        self._component_name = name or func.__name__

    async def process_event(self, event: Event) -> List[Action]:
        return await self._func(event)


class FunctionExecutor(Executor):
    """Wraps an async function as an executor"""

    def __init__(
        self, func: Callable[[Action], Awaitable[None]], name: Optional[str] = None
    ):
        super().__init__()
        self._func = func
        self._component_name = name or func.__name__

    async def execute(self, action: Action) -> None:
        await self._func(action)
