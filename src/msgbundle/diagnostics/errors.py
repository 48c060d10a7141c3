"""msgbundle exception hierarchy with structured diagnostics.

None of these errors reach callers of MessageManager or MessageBundle during
normal lookups: they are raised at the point of failure, caught by the layer
that owns the fallback policy, logged, and converted to best-effort output.
They are public so that custom loaders and bundle factories can raise them.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class MessageError(Exception):
    """Base exception for all msgbundle errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize MessageError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class GroupResolutionError(MessageError):
    """Backing data for a group could not be loaded or parsed.

    Fallback: the bundle is built with no local data and defers to its parent.
    """


class GroupNotFoundError(GroupResolutionError):
    """No backing data exists for a group in any candidate locale.

    Loaders raise this as their definite "not found" signal.
    """


class MissingTranslationError(MessageError):
    """Key not found in a bundle or any of its ancestors.

    Fallback: the key itself (plus stringified arguments).
    """


class FormatMismatchError(MessageError):
    """A pattern could not accept the supplied arguments.

    Examples:
    - Placeholder index beyond the argument count
    - Unknown format type ({0,choice})
    - Non-numeric argument for {0,number}

    Fallback: the raw pattern plus stringified arguments.
    """


class CustomBundleError(MessageError):
    """A registered custom bundle behavior could not be constructed.

    Fallback: the default MessageBundle behavior.
    """


class CyclicParentError(MessageError):
    """Explicit parent declarations form a cycle.

    Example:
        a.__parent = b
        b.__parent = a   <- cycle

    Fallback: the bundle closing the cycle is parented to the root bundle.
    """


__all__ = [
    "CustomBundleError",
    "CyclicParentError",
    "FormatMismatchError",
    "GroupNotFoundError",
    "GroupResolutionError",
    "MessageError",
    "MissingTranslationError",
]
