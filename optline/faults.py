"""
Optline faults (parse failures) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse failure.
  Codes are grouped by domain to keep messages consistent and logs searchable.
- ParseFailure: the single recoverable failure kind raised by the parser. It
  carries a message plus read-only context options, and knows how to render
  itself with rich.
- report(): print a fault to stderr (rendering only; exit codes stay with the caller).
- getdoc(): optional description lookup for a code from the host application.

Propagation
- Failures raised while resolving one option are caught at the dispatch boundary
  and re-raised through copy.replace() with the option identity prefixed to the
  message. The original failure is kept as __cause__.

Host hooks (read from __main__)
- __prog__: program label shown in rendered headers.
- __styles__: rich style overrides.
- __codes__: FaultCode -> label overrides (see FaultCode.normalize).
- __docs__: FaultCode -> short documentation string (see getdoc).
"""
import copy
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

stderr = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - tokens (1111x)
      • MALFORMED_TOKEN, UNKNOWN_OPTION
    - values (1112x)
      • UNEXPECTED_VALUE, MISSING_VALUE, MALFORMED_VALUE, VALUE_OUT_OF_RANGE
    - program name / residuals (1113x)
      • UNEXPECTED_OPERAND, MISSING_PROGRAM_NAME
    - registration (1114x)
      • DUPLICATED_OPTION
    - delegated (1115x)
      • DELEGATED_ERROR (raised by user callbacks)
    """
    # --- token errors ---
    MALFORMED_TOKEN         = 11111
    UNKNOWN_OPTION          = 11112

    # --- value errors ---
    UNEXPECTED_VALUE        = 11121
    MISSING_VALUE           = 11122
    MALFORMED_VALUE         = 11123
    VALUE_OUT_OF_RANGE      = 11124

    # --- program name errors ---
    UNEXPECTED_OPERAND      = 11131
    MISSING_PROGRAM_NAME    = 11132

    # --- registration errors ---
    DUPLICATED_OPTION       = 11141

    # --- delegated errors ---
    DELEGATED_ERROR         = 11151

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(sys.modules.get("__main__"), "__codes__", {}).get(self, self.value))


class ParseFailure(Exception):
    """
    recoverable failure raised while parsing an argument vector.

    attributes
    - message: str, the human-readable description (also str(self)).
    - options: read-only mapping of context (code, title, hint, name, token, ...).

    user callbacks may raise ParseFailure directly with just a message; the
    dispatcher wraps it like any other coercion failure.
    """

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("%s message must be a string" % type(self).__name__)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __rich__(self):
        main = sys.modules.get("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        code = self.options.get("code", FaultCode.DELEGATED_ERROR)
        prog = getattr(main, "__prog__", os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "optline")
        title = self.options.get("title", "parse failure")

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(code.normalize(), "code"),
            " | ",
            text(title.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __replace__(self, *unused, message=Unset, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(coalesce(message, self.message), **{**self.options, **overrides})


class UnknownOptionError(ParseFailure): ...
class MalformedTokenError(ParseFailure): ...
class UnexpectedValueError(ParseFailure): ...
class MissingValueError(ParseFailure): ...
class MalformedValueError(ParseFailure): ...
class ValueOutOfRangeError(ParseFailure): ...
class UnexpectedOperandError(ParseFailure): ...
class MissingProgramNameError(ParseFailure): ...
class DuplicatedOptionError(ParseFailure): ...


def report(fault, /, *, console=Unset, fancy=False, colorful=True):
    """
    print a rich rendering of a fault.

    parameters
    - fault: ParseFailure
    - console: rich Console to print on (defaults to the module stderr console).
    - fancy: wrap the message in a panel.
    - colorful: apply styles (plain text when False).

    notes
    - rendering only: mapping a failure to an exit status is the caller's job.
    """
    if not isinstance(fault, ParseFailure):
        raise TypeError("report() argument must be a parse failure")
    coalesce(console, stderr).print(copy.replace(fault, fancy=fancy, colorful=colorful))


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances. returns None when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(sys.modules.get("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "ParseFailure",
    "UnknownOptionError",
    "MalformedTokenError",
    "UnexpectedValueError",
    "MissingValueError",
    "MalformedValueError",
    "ValueOutOfRangeError",
    "UnexpectedOperandError",
    "MissingProgramNameError",
    "DuplicatedOptionError",
    "report",
    "getdoc",
)
