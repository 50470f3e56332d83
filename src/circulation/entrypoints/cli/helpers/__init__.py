"""CLI helpers for CIRCULATION.

Utilities used by the command-line interface: URL sanitization for safe
display, OSC-8 terminal hyperlinks when supported, message emitters that write
to stderr with emoji→ASCII fallbacks, rendering of loans for humans and
machines, and the mapping of application errors to exit codes.
"""

from .db_url import sanitize_url
from .errors import CommandFailed, reported_errors
from .hyperlinks import hyperlink
from .messages import error, success, warn
from .render import echo_json, format_amount, loan_to_dict

__all__ = [
    "CommandFailed",
    "echo_json",
    "error",
    "format_amount",
    "hyperlink",
    "loan_to_dict",
    "reported_errors",
    "sanitize_url",
    "success",
    "warn",
]
