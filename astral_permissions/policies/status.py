"""
Preparation status state machine.

Tracks whether the data needed for permission decisions is ready::

    idle -> loading -> success | error
              ^            |
              +------------+

``idle`` is only ever the initial state. Every new preparation cycle
re-enters ``loading``; there is no terminal state. Transitions happen only
through the named methods below, and each one notifies the subscribed
listeners with the new snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from astral_permissions.types import PreparationStatus

logger = logging.getLogger(__name__)

StatusListener = Callable[[PreparationStatus], None]


class PreparationStatusMachine:
    """
    Single-owner state machine for the preparation status.

    Example:
        >>> machine = PreparationStatusMachine()
        >>> unsubscribe = machine.subscribe(lambda s: print(s.state))
        >>> machine.begin_loading()
        loading
        >>> machine.mark_success()
        success
        >>> unsubscribe()
    """

    def __init__(self) -> None:
        self._status = PreparationStatus.idle()
        self._listeners: list[StatusListener] = []

    @property
    def status(self) -> PreparationStatus:
        return self._status

    def begin_loading(self) -> None:
        """Start a preparation cycle. Clears any previously recorded error."""
        self._transition(PreparationStatus.loading())

    def mark_success(self) -> None:
        self._transition(PreparationStatus.success())

    def mark_error(self, error: BaseException) -> None:
        self._transition(PreparationStatus.failed(error))

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """
        Register a listener called with the new status after each transition.

        Returns:
            A function that unsubscribes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: StatusListener) -> bool:
        """
        Remove a listener.

        Returns:
            True if the listener was subscribed, False otherwise.
        """
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def _transition(self, status: PreparationStatus) -> None:
        logger.debug(f"Preparation status: {self._status.state} -> {status.state}")
        self._status = status

        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception as e:
                logger.error(f"Preparation status listener error: {e}")
