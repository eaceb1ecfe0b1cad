"""
Jargon faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every condition the
  library can raise. Codes are grouped by domain so logs and searches stay
  predictable.
- JargonException: base type that carries message + options and knows how to
  render itself with rich.
- MissingArgumentError / DelegatedError: the two user-facing kinds. The first
  carries the Key that was sought, the second wraps an arbitrary failure
  coming from caller code (typically a subcommand handler).
- InvalidTokenError / InvalidDualError / EmptyBufferError: programming errors,
  raised immediately where the misuse happens.
- trigger(): central entry point to surface a fault (raise, or print and exit).

Integration
- Library code only raises. Host programs that prefer a friendly report over a
  traceback catch a JargonException and hand it to trigger(fault, shell=True).
- Hosts may customize presentation from __main__ via __prog__, __styles__ and
  __codes__ (see JargonException.__rich__ and FaultCode.normalize).
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - tokens (2111x)
      • INVALID_TOKEN, INVALID_DUAL
    - buffer (2112x)
      • EMPTY_BUFFER
    - queries (2113x)
      • MISSING_ARGUMENT
    - delegated (2114x)
      • DELEGATED_ERROR

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- token errors (2111x) ---
    INVALID_TOKEN    = 21111
    INVALID_DUAL     = 21112

    # --- buffer errors (2112x) ---
    EMPTY_BUFFER     = 21121

    # --- query errors (2113x) ---
    MISSING_ARGUMENT = 21131

    # --- delegated errors (2114x) ---
    DELEGATED_ERROR  = 21141

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class JargonException(Exception):
    """
    base class of every fault raised by jargon.

    attributes
    - message: str, the one-sentence body (also what str() returns).
    - options: read-only mapping of render context (code, title, hint, shell,
      fancy, colorful, deferred, prog). subclasses provide defaults for code
      and title; anything passed at construction or through trigger() wins.
    """
    code = Unset
    title = Unset

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("%s() message must be a string" % type(self).__name__)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": self.code, "title": self.title} | options)

    def __str__(self):
        return self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), style)

        prog = coalesce(self.options.get("prog", Unset), getattr(main, "__prog__", Unset))
        if prog is Unset:
            prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "jargon"

        code = self.options["code"]
        header = Text.assemble(
            "[ ",
            text(prog, styler("prog-name")),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else code, styler("code")),
            " | ",
            text(str(coalesce(self.options["title"], "error")).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))

        parts = [message]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return _restore(type(self), self.args, self._state(), {**self.options, **overrides})

    def __reduce__(self):
        return _restore, (type(self), self.args, self._state(), dict(self.options))

    def _state(self):
        return {name: value for name, value in self.__dict__.items() if name != "options"}


def _restore(cls, args, state, options):
    """
    rebuild a fault without running its __init__ (copies and unpickling).
    """
    fault = cls.__new__(cls)
    fault.args = args
    fault.__dict__.update(state)
    fault.options = MappingProxyType(options)
    return fault


class MissingArgumentError(JargonException):
    """
    a required option value or subcommand was absent.

    carries the exact Key that was queried so callers can render their own
    message; str() reads: Missing argument: '-a, --all'.
    """
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"

    def __init__(self, key, /, **options):
        self.key = key
        options.setdefault("hint", "pass %s on the command line" % key)
        super().__init__("Missing argument: '%s'" % key, **options)


class DelegatedError(JargonException):
    """
    wraps an arbitrary failure from caller code as a plain message.

    used at integration boundaries only, for example when a subcommand
    handler raised something that is not itself a jargon fault.
    """
    code = FaultCode.DELEGATED_ERROR
    title = "delegated error"

    @classmethod
    def wrap(cls, exception, /, **options):
        """
        build a DelegatedError from any exception, keeping only its text.
        """
        return cls(str(exception), **options)


class InvalidTokenError(JargonException, ValueError):
    code = FaultCode.INVALID_TOKEN
    title = "invalid token"


class InvalidDualError(JargonException, ValueError):
    code = FaultCode.INVALID_DUAL
    title = "invalid dual key"


class EmptyBufferError(JargonException, IndexError):
    code = FaultCode.EMPTY_BUFFER
    title = "empty buffer"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see JargonException).
    - options are merged into a copy of the fault before triggering; the
      original fault is left untouched.
    - shell=False (default): the fault is raised.
    - shell=True: the fault is printed on stderr via rich and the process exits
      with status 1, unless deferred=True.

    typical options
    - shell, fancy, colorful, deferred, prog, title, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "JargonException",
    "MissingArgumentError",
    "DelegatedError",
    "InvalidTokenError",
    "InvalidDualError",
    "EmptyBufferError",
    "FaultCode",
    "trigger",
)
