"""Message bus implementation for handling commands."""

import logging
import random
import time
from collections.abc import Callable
from typing import Any

from circulation.config import DEFAULT_MAX_ATTEMPTS
from circulation.domain.errors import LoanRejectedError
from circulation.interfaces.errors import (
    AlreadyExistsError,
    ConcurrencyError,
    NotFoundError,
)

from .commands import Command

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods

DEFAULT_BACKOFF_S = 0.01


class NoHandlerForCommand(LookupError):
    """Exception raised when no handler is found for a command."""

    def __init__(self, cmd: Command) -> None:
        super().__init__(f"No handler found for command {type(cmd).__name__}")


class MessageBus:
    """Route commands to their handlers and retry lost races.

    Handlers must be callables taking only the command; their unit of work is
    injected per call (see `circulation.bootstrap.inject_dependencies`), so
    every attempt runs on a fresh one.

    Retry policy: a `ConcurrencyError` (conflict or busy) is retried until
    ``max_attempts`` attempts have been made, then re-raised. Business
    rejections and missing/duplicate records are terminal and propagate on the
    first attempt.

    Args:
        command_handlers: A mapping of command types to their handlers.
        max_attempts: Total attempts per command, first one included.
        backoff_s: Upper bound of the random pause before the n-th retry,
            multiplied by n.
    """

    def __init__(
        self,
        command_handlers: dict[type[Command], Callable[..., Any]],
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_s: float = DEFAULT_BACKOFF_S,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self._command_handlers = command_handlers
        self.max_attempts = max_attempts
        self.backoff_s = backoff_s

    def handle(self, cmd: Command) -> Any:
        """Handle a command by dispatching it to the appropriate handler.

        Args:
            cmd: The command to handle.

        Returns:
            Whatever the handler returns.

        Raises:
            NoHandlerForCommand: If no handler is found for the command type.
            ConcurrencyError: If every attempt lost a race.
            Exception: Anything else the handler raises, unchanged.
        """
        if not (handler := self._command_handlers.get(type(cmd))):
            logger.error("No handler found for command %s", type(cmd).__name__)
            raise NoHandlerForCommand(cmd)

        handler_name = self._get_handler_name(handler)
        attempt = 0
        while True:
            attempt += 1
            logger.debug(
                "Handling command %s with handler %s (attempt %d/%d)",
                cmd,
                handler_name,
                attempt,
                self.max_attempts,
            )
            try:
                return handler(cmd)
            except LoanRejectedError as e:
                logger.info("%s rejected (%s): %s", cmd, e.reason.value, e)
                raise
            except (NotFoundError, AlreadyExistsError) as e:
                logger.info("%s refused: %s", cmd, e)
                raise
            except ConcurrencyError as e:
                if attempt >= self.max_attempts:
                    logger.warning(
                        "%s failed after %d attempts: %s", cmd, attempt, e
                    )
                    raise
                logger.warning(
                    "%s lost a concurrent update (%s); retrying (%d/%d)",
                    cmd,
                    e,
                    attempt + 1,
                    self.max_attempts,
                )
                self._pause(attempt)
            except Exception:  # pylint: disable=broad-except
                logger.exception(
                    "Exception handling command %s with handler %s", cmd, handler_name
                )
                raise

    def _pause(self, attempt: int) -> None:
        if self.backoff_s > 0:
            time.sleep(random.uniform(0, self.backoff_s * attempt))

    @staticmethod
    def _get_handler_name(fn: Callable[..., Any]) -> str:
        if hasattr(fn, "__name__"):
            return fn.__name__
        if hasattr(fn, "func") and hasattr(fn.func, "__name__"):
            return fn.func.__name__
        return repr(fn)
