"""
Optline parser: classify argv tokens, resolve options, capture residuals.

Grammar
- <program-name>     first token without a leading '-', or shorter than 2 chars.
- -c[c2c3...][=value] short cluster; each letter is a value-less switch unless
                      '=' is present, in which case only the letter right
                      before '=' receives the value.
- --name[=value]     long option; split on the first '=' only.
- --                 terminator; every following token is captured verbatim as
                     the residual argument vector.

States
- SCANNING  tokens are classified and resolved left to right.
- RESIDUAL  entered on '--'; scanning stops, remaining tokens are kept as-is.
- DONE      the vector was consumed without a terminator.
- FAILED    a failure aborted the run; options resolved before it keep their values.

Quick example:
    >>> from optline import OptParser, BoolOption, IntOption
    >>> verbose = BoolOption("-v", "--verbose")
    >>> jobs = IntOption("-j", "--jobs", default=1)
    >>> parser = OptParser().add(verbose).add(jobs)
    >>> parser.parse(["optline", "-vj=4", "script.py", "--", "-x", "arg"]).program_argv
    ('-x', 'arg')
    >>> verbose.value, jobs.value, parser.program_name
    (True, 4, 'script.py')
"""
import copy
import difflib
import logging
import sys
from enum import Enum
from typing import NamedTuple

from .faults import *
from .registry import Registry
from .utils import *

logger = logging.getLogger(__name__)


class State(Enum):
    SCANNING = "scanning"
    RESIDUAL = "residual"
    DONE = "done"
    FAILED = "failed"


class Kind(Enum):
    OPERAND = "operand"
    TERMINATOR = "terminator"
    LONG = "long"
    SHORT = "short"


class Token(NamedTuple):
    kind: Kind
    text: str
    body: str


def classify(token, /):
    """
    classify a raw argv element.

    returns
    - Token(kind, text, body) where body is the text after the dash prefix for
      LONG/SHORT tokens and the whole text otherwise.

    rules (checked in order)
    - shorter than 2 chars, or no leading '-' → OPERAND
    - exactly '--'                            → TERMINATOR
    - starts with '--'                        → LONG  (body: text after '--')
    - starts with '-'                         → SHORT (body: text after '-')
    """
    if not isinstance(token, str):
        raise TypeError("argument vector entries must be strings, got %r" % type(token).__name__)
    if len(token) < 2 or not token.startswith("-"):
        return Token(Kind.OPERAND, token, token)
    if token == "--":
        return Token(Kind.TERMINATOR, token, token)
    if token[1] == "-":
        return Token(Kind.LONG, token, token[2:])
    return Token(Kind.SHORT, token, token[1:])


class OptParser:
    """
    POSIX-style short/long option parser over a registry of typed options.

    usage
    - register options with add() (chainable) or the constructor, call parse()
      once with the raw argument vector, then read option values and the
      program_name / program_argc / program_argv accessors.

    failures
    - every failure is a ParseFailure subclass; the first one aborts the scan.
    - failures from an option's coercion (or a ParseFailure raised by its callback)
      are re-raised with "parsing of <name> failed: " prefixed to the message.
    - any other exception raised by a callback propagates unchanged.
    """

    def __init__(self, *options, strict=False):
        self._registry = Registry(strict=strict)
        self._program_name = ""
        self._program_argv = ()
        self._state = State.SCANNING
        for option in options:
            self.add(option)

    @property
    def registry(self):
        return self._registry

    @property
    def state(self):
        return self._state

    def add(self, option, /):
        """
        register an option and return the parser for chaining.
        """
        self._registry.add(option)
        return self

    @property
    def program_name(self):
        """
        program file name given in the vector; empty string when none was given.
        only meaningful after parse() completed without failure.
        """
        return self._program_name

    @property
    def program_argc(self):
        """
        number of residual arguments captured after '--'.
        """
        return len(self._program_argv)

    @property
    def program_argv(self):
        """
        residual arguments captured after '--', verbatim and in original order.
        """
        return self._program_argv

    def parse(self, argv=Unset, /):
        """
        parse an argument vector as received by a program's entry point.

        parameters
        - argv: Sequence[str], defaults to sys.argv. index 0 (the invocation
          path) is skipped.

        returns
        - self, for chaining accessors.

        raises
        - ParseFailure subclasses on the first malformed, unknown or invalid token.
        - TypeError when the vector contains non-string entries.
        """
        argv = list(coalesce(argv, sys.argv))
        index = 1
        try:
            while index < len(argv):
                token = classify(argv[index])
                logger.debug("token %d %r classified as %s", index, token.text, token.kind.value)
                match token.kind:
                    case Kind.OPERAND:
                        self._parse_program_name(token, index)
                    case Kind.TERMINATOR:
                        self._capture(argv, index)
                        return self
                    case Kind.LONG:
                        self._parse_long(token, index)
                    case Kind.SHORT:
                        self._parse_short(token, index)
                index += 1
        except Exception:
            self._state = State.FAILED
            raise
        self._state = State.DONE
        return self

    def _parse_program_name(self, token, index):
        if self._program_name:
            raise UnexpectedOperandError(
                "bad option %r, program name is already %r" % (token.text, self._program_name),
                title="unexpected operand",
                code=FaultCode.UNEXPECTED_OPERAND,
                hint="pass arguments meant for the program after '--'",
                token=token.text,
                index=index,
                docs=getdoc(FaultCode.UNEXPECTED_OPERAND)
            )
        self._program_name = token.text
        logger.debug("program name set to %r", token.text)

    def _capture(self, argv, index):
        if not self._program_name:
            raise MissingProgramNameError(
                "program filename must be specified before arguments",
                title="missing program name",
                code=FaultCode.MISSING_PROGRAM_NAME,
                hint="give the program file name before '--'",
                token=argv[index],
                index=index,
                docs=getdoc(FaultCode.MISSING_PROGRAM_NAME)
            )
        self._program_argv = tuple(argv[index + 1:])
        self._state = State.RESIDUAL
        logger.debug("captured %d residual argument(s)", len(self._program_argv))

    def _parse_long(self, token, index):
        name, separator, value = token.body.partition("=")
        self._resolve("--" + name, self._registry.find_by_long(name), value if separator else Unset, index=index)

    def _parse_short(self, token, index):
        letters, separator, value = token.body.partition("=")
        if not separator:
            for letter in letters:
                self._resolve("-" + letter, self._registry.find_by_short(letter), index=index)
            return

        if not letters:
            raise MalformedTokenError(
                "option name missing before '=' in %r" % token.text,
                title="malformed option",
                code=FaultCode.MALFORMED_TOKEN,
                hint="write the option letter before '=' (for example: -n=value)",
                token=token.text,
                index=index,
                docs=getdoc(FaultCode.MALFORMED_TOKEN)
            )
        *switches, last = letters
        for letter in switches:
            self._resolve("-" + letter, self._registry.find_by_short(letter), index=index)
        self._resolve("-" + last, self._registry.find_by_short(last), value, index=index)

    def _resolve(self, name, option, value=Unset, /, *, index):
        """
        mark the option present and run its coercion, wrapping failures with its name.
        """
        if option is Unset:
            spellings = [spelling for slot in self._registry for spelling in slot.names]
            try:
                hint = "did you mean %r?" % difflib.get_close_matches(name, spellings, 1)[0]
            except IndexError:
                hint = "check the spelling against the registered options"
            raise UnknownOptionError(
                "no such option %s" % name,
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                hint=hint,
                name=name,
                index=index,
                docs=getdoc(FaultCode.UNKNOWN_OPTION)
            )

        option.mark_present()
        try:
            option.coerce(value)
        except ParseFailure as fault:
            message = "parsing of %s failed: %s" % (name, getattr(fault, "message", str(fault)))
            try:
                wrapped = copy.replace(fault, message=message, name=name, index=index)
            except TypeError:
                # subclasses with their own constructor signature fall back to the base kind
                wrapped = ParseFailure(message, **{**getattr(fault, "options", {}), "name": name, "index": index})
            raise wrapped from fault
        logger.debug("resolved %s to %r", name, option.value)


__all__ = (
    "State",
    "Kind",
    "Token",
    "classify",
    "OptParser",
)
