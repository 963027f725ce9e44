"""Deferred registration handshake between catalogue producers and consumers.

A generated fragment builds its :class:`~implementors.catalogue.Catalogue`
without knowing whether the consumer that renders it has started. The
:func:`hand_off` coordinator delivers the catalogue straight to the bound
registration function when there is one, and otherwise parks it on the
:class:`HandoffContext` until a consumer binds and drains it.

The context replaces the page-wide ``register_implementors`` and
``pending_implementors`` globals. Hosts create one per page, pass it to
every producer and to the consumer, and call :meth:`HandoffContext.clear`
on unload.
"""

from __future__ import annotations

import collections
import contextlib
import contextvars
import enum
import logging
import threading
import typing as typ

from implementors.catalogue import describe_catalogue

if typ.TYPE_CHECKING:  # pragma: no cover - typing helper only
    from implementors.catalogue import Catalogue

LOGGER = logging.getLogger(__name__)

type RegisterFunction = typ.Callable[[Catalogue], object]
PendingPolicy = typ.Literal["queue", "overwrite"]
PENDING_POLICIES: typ.Final[frozenset[str]] = frozenset({"queue", "overwrite"})
DEFAULT_PENDING_POLICY: typ.Final[PendingPolicy] = "queue"


class HandoffError(RuntimeError):
    """Raised when a handoff context is used incorrectly."""


class HandoffContextNotSetError(HandoffError):
    """Raised when code asks for the active context before one is set."""


class HandoffOutcome(enum.StrEnum):
    """Describe what :func:`hand_off` did with a catalogue."""

    DELIVERED = "delivered"
    DEFERRED = "deferred"


def _pending_store(policy: PendingPolicy) -> collections.deque[Catalogue]:
    """Return the pending store matching ``policy``."""
    if policy not in PENDING_POLICIES:
        choices = ", ".join(sorted(PENDING_POLICIES))
        message = f"Unknown pending policy {policy!r}; expected one of: {choices}."
        raise HandoffError(message)
    return collections.deque(maxlen=1 if policy == "overwrite" else None)


class HandoffContext:
    """Hold the registration function and undelivered catalogues for one host.

    With the ``overwrite`` policy only the most recently deferred catalogue
    is kept; earlier ones are lost unless a consumer binds in between. The
    ``queue`` policy keeps every deferred catalogue in arrival order.

    While pending catalogues are being drained, newly offered catalogues are
    queued behind them so the consumer always sees arrival order.
    """

    __slots__ = ("_draining", "_lock", "_pending", "_policy", "_register")

    def __init__(self, policy: PendingPolicy = DEFAULT_PENDING_POLICY) -> None:
        """Create an unbound context whose pending store follows ``policy``."""
        self._pending = _pending_store(policy)
        self._policy = policy
        self._register: RegisterFunction | None = None
        self._draining = False
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"HandoffContext(policy={self._policy!r}, "
            f"bound={self._register is not None}, pending={len(self._pending)})"
        )

    @property
    def policy(self) -> PendingPolicy:
        """Return how undelivered catalogues are kept."""
        return self._policy

    @property
    def register(self) -> RegisterFunction | None:
        """Return the bound registration function, if any."""
        with self._lock:
            return self._register

    @property
    def pending(self) -> Catalogue | None:
        """Return the most recent undelivered catalogue, if any."""
        with self._lock:
            return self._pending[-1] if self._pending else None

    @property
    def pending_queue(self) -> tuple[Catalogue, ...]:
        """Return every undelivered catalogue, oldest first."""
        with self._lock:
            return tuple(self._pending)

    def defer(self, catalogue: Catalogue) -> None:
        """Store ``catalogue`` until a consumer binds."""
        with self._lock:
            self._pending.append(catalogue)

    def offer(self, catalogue: Catalogue) -> HandoffOutcome:
        """Deliver ``catalogue`` now or store it, keeping arrival order.

        The catalogue is stored when no consumer is bound or when a drain is
        already running; the running drain delivers it after the catalogues
        ahead of it. If a consumer is bound and earlier catalogues are still
        pending, the caller drains them and then ``catalogue``.
        """
        with self._lock:
            register = self._register
            if register is None or self._draining:
                self._pending.append(catalogue)
                return HandoffOutcome.DEFERRED
            drain = bool(self._pending)
            if drain:
                self._pending.append(catalogue)
                self._draining = True
        if drain:
            self._drain(register)
        else:
            register(catalogue)
        return HandoffOutcome.DELIVERED

    def bind(self, register: RegisterFunction) -> int:
        """Bind ``register`` and deliver any pending catalogues to it.

        Pending catalogues are delivered in arrival order, including any
        offered while the drain runs. Exceptions raised by ``register``
        propagate unchanged; catalogues not yet delivered remain pending.

        Returns
        -------
        int
            The number of pending catalogues delivered while binding.

        Raises
        ------
        HandoffError
            If a registration function is already bound.

        """
        with self._lock:
            if self._register is not None:
                message = "A registration function is already bound."
                raise HandoffError(message)
            self._register = register
            self._draining = True
        drained = self._drain(register)
        if drained:
            LOGGER.info("Delivered %d pending catalogue(s) on bind", drained)
        return drained

    def _drain(self, register: RegisterFunction) -> int:
        """Deliver pending catalogues until none remain."""
        drained = 0
        try:
            while (catalogue := self._take_pending()) is not None:
                register(catalogue)
                drained += 1
        except BaseException:
            with self._lock:
                self._draining = False
            raise
        return drained

    def _take_pending(self) -> Catalogue | None:
        """Remove the oldest pending catalogue, ending the drain when empty."""
        with self._lock:
            if self._pending:
                return self._pending.popleft()
            self._draining = False
            return None

    def unbind(self) -> RegisterFunction | None:
        """Drop the registration function, keeping pending catalogues."""
        with self._lock:
            previous, self._register = self._register, None
        return previous

    def clear(self) -> None:
        """Forget the registration function and every pending catalogue."""
        with self._lock:
            self._register = None
            self._pending.clear()


def hand_off(catalogue: Catalogue, context: HandoffContext) -> HandoffOutcome:
    """Deliver ``catalogue`` to the bound consumer or leave it pending.

    When ``context`` has a registration function and nothing is waiting
    ahead of ``catalogue``, the function is invoked once, before this
    function returns, and anything it raises propagates to the caller.
    Otherwise the catalogue is stored according to ``context.policy``.
    """
    outcome = context.offer(catalogue)
    if outcome is HandoffOutcome.DEFERRED:
        LOGGER.debug("Deferred %s", describe_catalogue(catalogue))
    else:
        LOGGER.debug("Delivered %s", describe_catalogue(catalogue))
    return outcome


_active_context: contextvars.ContextVar[HandoffContext] = contextvars.ContextVar(
    "implementors_active_handoff_context"
)


@contextlib.contextmanager
def use_context(context: HandoffContext) -> typ.Iterator[HandoffContext]:
    """Set ``context`` as the active handoff context for the current context."""
    token = _active_context.set(context)
    try:
        yield context
    finally:
        _active_context.reset(token)


def current_context() -> HandoffContext:
    """Return the active handoff context or raise if none has been set."""
    try:
        return _active_context.get()
    except LookupError as exc:
        message = "No handoff context is active."
        raise HandoffContextNotSetError(message) from exc


__all__ = [
    "DEFAULT_PENDING_POLICY",
    "PENDING_POLICIES",
    "HandoffContext",
    "HandoffContextNotSetError",
    "HandoffError",
    "HandoffOutcome",
    "PendingPolicy",
    "RegisterFunction",
    "current_context",
    "hand_off",
    "use_context",
]
