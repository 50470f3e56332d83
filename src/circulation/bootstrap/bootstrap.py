"""Bootstrap the message bus with handlers, units of work and a clock."""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from circulation import config
from circulation.adapters.clock import FixedClock, SystemClock
from circulation.adapters.db.engine import make_engine
from circulation.adapters.memory import InMemoryLibraryData, InMemoryUnitOfWork
from circulation.adapters.unit_of_work import SqlAlchemyUnitOfWork
from circulation.service_layer import queries
from circulation.service_layer.handlers import COMMAND_HANDLERS
from circulation.service_layer.messagebus import MessageBus

if TYPE_CHECKING:
    from circulation.domain.model import Loan
    from circulation.interfaces.clock import Clock
    from circulation.interfaces.id_generator import IdGenerator
    from circulation.interfaces.unit_of_work import AbstractUnitOfWork
    from circulation.service_layer.commands import Command

logger = logging.getLogger(__name__)

UowFactory = Callable[[], "AbstractUnitOfWork"]


@dataclass(frozen=True)
class LoanQueries:
    """Read-side facade bound to a unit-of-work factory and a clock."""

    uow_factory: UowFactory
    clock: Clock

    def get_loan(self, loan_id: str) -> Loan:
        """See `circulation.service_layer.queries.get_loan`."""
        return queries.get_loan(loan_id, self.uow_factory())

    def current_fine(self, loan_id: str) -> Decimal:
        """See `circulation.service_layer.queries.current_fine`."""
        return queries.current_fine(loan_id, self.uow_factory(), self.clock)

    def list_member_loans(self, member_id: str) -> Sequence[Loan]:
        """See `circulation.service_layer.queries.list_member_loans`."""
        return queries.list_member_loans(member_id, self.uow_factory())

    def list_overdue_loans(self, member_id: str) -> Sequence[Loan]:
        """See `circulation.service_layer.queries.list_overdue_loans`."""
        return queries.list_overdue_loans(member_id, self.uow_factory(), self.clock)

    def outstanding_fines(self, member_id: str) -> Decimal:
        """See `circulation.service_layer.queries.outstanding_fines`."""
        return queries.outstanding_fines(member_id, self.uow_factory(), self.clock)


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring constants."""

    message_bus: MessageBus
    queries: LoanQueries
    uow_factory: UowFactory
    clock: Clock

    def handle(self, cmd: Command) -> Any:
        """Shortcut for ``message_bus.handle``."""
        return self.message_bus.handle(cmd)


def build_sql_uow_factory(
    url: str,
    lock_timeout: float = config.DEFAULT_LOCK_TIMEOUT_S,
    id_generator: IdGenerator | None = None,
) -> UowFactory:
    """Build a factory of SQLAlchemy units of work sharing one engine."""
    engine = make_engine(url, lock_timeout=lock_timeout)
    return functools.partial(SqlAlchemyUnitOfWork, engine, id_generator)


def build_memory_uow_factory(
    data: InMemoryLibraryData | None = None,
    lock_timeout: float = config.DEFAULT_LOCK_TIMEOUT_S,
) -> UowFactory:
    """Build a factory of in-memory units of work sharing one data set."""
    shared = data if data is not None else InMemoryLibraryData()
    return functools.partial(InMemoryUnitOfWork, shared, lock_timeout=lock_timeout)


def build_clock(settings: config.LifecycleSettings) -> Clock:
    """A fixed clock when the settings pin a date, otherwise the wall clock."""
    if settings.today is not None:
        logger.debug("Clock pinned to %s", settings.today.isoformat())
        return FixedClock(settings.today)
    return SystemClock()


def build_message_bus(
    uow_factory: UowFactory,
    clock: Clock,
    command_handlers: Mapping[type[Command], Callable[..., Any]] = COMMAND_HANDLERS,
    max_attempts: int = config.DEFAULT_MAX_ATTEMPTS,
) -> MessageBus:
    """Build a message bus with injected dependencies.

    The unit of work is provided by ``uow_factory`` on every call, so each
    (re)try of a command gets a fresh one.
    """
    providers: dict[str, Callable[[], object]] = {
        "uow": uow_factory,
        "clock": lambda: clock,
    }
    injected_command_handlers = {
        command_type: inject_dependencies(handler, providers)
        for command_type, handler in command_handlers.items()
    }

    return MessageBus(injected_command_handlers, max_attempts=max_attempts)


def bootstrap(
    uow_factory: UowFactory | None = None,
    clock: Clock | None = None,
    settings: config.LifecycleSettings | None = None,
) -> AppContainer:
    """Wire the application.

    Missing pieces are built from the environment: the settings from
    `config.get_settings`, the clock from the settings and the units of work
    from ``CIRCULATION_DB_URL``.

    Raises:
        DatabaseUrlNotSetError: If no factory is given and no URL is set.
        InvalidSettingError: If an environment setting cannot be parsed.
    """
    settings = settings or config.get_settings()
    if uow_factory is None:
        uow_factory = build_sql_uow_factory(
            config.get_db_url(), lock_timeout=settings.lock_timeout_s
        )
    clock = clock or build_clock(settings)

    return AppContainer(
        message_bus=build_message_bus(
            uow_factory, clock, max_attempts=settings.max_attempts
        ),
        queries=LoanQueries(uow_factory=uow_factory, clock=clock),
        uow_factory=uow_factory,
        clock=clock,
    )


def inject_dependencies(
    handler: Callable, providers: Mapping[str, Callable[[], object]]
) -> Callable:
    """Bind a handler to the providers matching its parameter names.

    Providers are called on every invocation, so a handler asking for ``uow``
    gets a new unit of work each time.
    """
    params = inspect.signature(handler).parameters
    needed = {name: provider for name, provider in providers.items() if name in params}

    def injected(message):
        return handler(message, **{name: make() for name, make in needed.items()})

    return functools.update_wrapper(injected, handler)
