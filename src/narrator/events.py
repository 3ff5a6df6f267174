from __future__ import annotations

import logging

from typing import Any, Callable, Dict, List, Protocol, Type, TypeVar, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:  # pragma: no cover
    from narrator.model import Scenario
    from narrator.results import AnyScenarioResult


logger = logging.getLogger(__name__)


class Event:
    sender: Any


@dataclass(frozen=True)
class ScenarioStartedEvent(Event):
    sender: Any = field(repr=False, compare=False)
    scenario: Scenario


@dataclass(frozen=True)
class ScenarioResultEvent(Event):
    sender: Any = field(repr=False, compare=False)
    result: AnyScenarioResult


@dataclass(frozen=True)
class ScenarioFinishedEvent(Event):
    sender: Any = field(repr=False, compare=False)
    scenario: Scenario


class EventBus(Protocol):
    def publish(self, event: Event) -> None: ...


E = TypeVar('E', bound=Event)
Handler = Callable[[Any], None]


@dataclass(frozen=True)
class Subscription:
    event_type: Type[Event]
    handler: Handler = field(compare=False)
    token: int = field(default=0)


class EventHub:
    """In-process event bus, handlers are called synchronously before `publish` returns."""

    _subscriptions: Dict[Type[Event], List[Subscription]]
    _counter: int

    def __init__(self) -> None:
        self._subscriptions = {}
        self._counter = 0

    def subscribe(self, event_type: Type[E], handler: Callable[[E], None]) -> Subscription:
        self._counter += 1
        subscription = Subscription(event_type, handler, self._counter)
        self._subscriptions.setdefault(event_type, []).append(subscription)
        logger.debug(f'{handler!r} subscribed to {event_type.__name__}')

        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscriptions = self._subscriptions.get(subscription.event_type, [])

        try:
            subscriptions.remove(subscription)
        except ValueError:
            raise ValueError(f'unknown subscription for {subscription.event_type.__name__}')

    def handlers(self, event_type: Type[Event]) -> List[Handler]:
        matching: List[Subscription] = []
        for base in event_type.__mro__:
            matching.extend(self._subscriptions.get(base, []))

        return [subscription.handler for subscription in sorted(matching, key=lambda s: s.token)]

    def publish(self, event: Event) -> None:
        for handler in self.handlers(type(event)):
            handler(event)
