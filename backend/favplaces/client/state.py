"""
Favorite Places — Observable State Cells
=========================================

What:  A value with observers, split into an owner handle and a read-only view.
How:   `StateCell` is held privately by the component that mutates the value
       (the synchronizer, the catalog loader, the error channel). Consumers
       only ever receive `cell.as_readonly()`, which can read and subscribe
       but has no `set`.

    owner                      consumers
    ┌───────────────┐          ┌──────────────────┐
    │ StateCell     │─────────▶│ ReadOnlyState    │──▶ observer(value)
    │  .set(value)  │  view    │  .value          │
    └───────────────┘          │  .subscribe(fn)  │
                               └──────────────────┘

Observers run synchronously inside `set`, in subscription order, and only
when the new value differs from the old one.
"""

from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")

Observer = Callable[[T], None]


class Subscription:
    """Handle returned by `subscribe`; `unsubscribe()` is idempotent."""

    def __init__(self, observers: List[Observer], observer: Observer):
        self._observers = observers
        self._observer = observer

    def unsubscribe(self) -> None:
        if self._observer in self._observers:
            self._observers.remove(self._observer)


class StateCell(Generic[T]):
    """Owned mutable value. Keep it private; hand out `as_readonly()`."""

    def __init__(self, initial: T):
        self._value = initial
        self._observers: List[Observer] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if value == self._value:
            return
        self._value = value
        for observer in list(self._observers):
            observer(value)

    def subscribe(self, observer: Observer) -> Subscription:
        self._observers.append(observer)
        return Subscription(self._observers, observer)

    def clear_observers(self) -> None:
        self._observers.clear()

    def as_readonly(self) -> "ReadOnlyState[T]":
        return ReadOnlyState(self)


class ReadOnlyState(Generic[T]):
    """Read and subscribe access to a StateCell owned by someone else."""

    def __init__(self, cell: StateCell[T]):
        self._cell = cell

    @property
    def value(self) -> T:
        return self._cell.value

    def subscribe(self, observer: Observer) -> Subscription:
        return self._cell.subscribe(observer)

    def __repr__(self) -> str:
        return f"ReadOnlyState({self._cell.value!r})"
