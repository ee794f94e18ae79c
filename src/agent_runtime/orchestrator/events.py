"""Lifecycle event bus.

The bus is an explicit object owned by the orchestrator; there is no global
instance. Observers are plain callables (sync or async) receiving a
LifecycleEvent. A failing observer is logged and skipped; it never affects
the request that produced the event or the other observers.
"""

import inspect
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from agent_runtime.telemetry import LIFECYCLE_EVENT, LIFECYCLE_OBSERVER_FAILED, get_logger

log = get_logger(__name__)


class LifecycleEventType(str, Enum):
    """Kinds of lifecycle events."""

    AGENT_REGISTERED = "agent_registered"
    AGENT_EXECUTED = "agent_executed"
    AGENT_ERRORED = "agent_errored"
    TOOL_REGISTERED = "tool_registered"


@dataclass(frozen=True)
class LifecycleEvent:
    """Something that happened to an agent or tool.

    Attributes:
        type: Event kind.
        name: Agent or tool name.
        timestamp: When the event was published (UTC).
        data: Event-specific payload.
    """

    type: LifecycleEventType
    name: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] = field(default_factory=dict)


LifecycleObserver = Callable[[LifecycleEvent], Any]


class EventBus:
    """Publishes lifecycle events to subscribed observers in subscription order."""

    def __init__(self) -> None:
        self._observers: list[LifecycleObserver] = []

    def subscribe(self, observer: LifecycleObserver) -> Callable[[], None]:
        """Add an observer.

        Returns:
            Function that unsubscribes the observer again.
        """
        self._observers.append(observer)
        return lambda: self.unsubscribe(observer)

    def unsubscribe(self, observer: LifecycleObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    async def publish(self, event: LifecycleEvent) -> None:
        """Deliver ``event`` to every observer; observer failures are isolated."""
        for observer in list(self._observers):
            try:
                result = observer(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                log.error(
                    LIFECYCLE_OBSERVER_FAILED,
                    event_type=event.type.value,
                    name=event.name,
                    observer=getattr(observer, "__name__", type(observer).__name__),
                    error=str(e),
                    exc_info=True,
                )

    async def emit(
        self, event_type: LifecycleEventType, name: str, **data: Any
    ) -> LifecycleEvent:
        """Build and publish an event.

        Returns:
            The published event.
        """
        event = LifecycleEvent(type=event_type, name=name, data=data)
        await self.publish(event)
        return event


class LoggingObserver:
    """Writes every lifecycle event to the structured log."""

    def __call__(self, event: LifecycleEvent) -> None:
        fields = {"event_type": event.type.value, "name": event.name}
        if event.type is LifecycleEventType.AGENT_ERRORED:
            log.error(LIFECYCLE_EVENT, error=event.data.get("error"), **fields)
        else:
            log.info(LIFECYCLE_EVENT, **fields)
