r"""
Optline option descriptors, typed coercion and decorators.

Overview
- Descriptors
  • Option: abstract named option (short and/or long name, description, presence).
  • BoolOption: value-less switch; presence turns its value to True.
  • IntOption: signed 64-bit integer value.
  • UintOption: unsigned 64-bit integer value.
  • StrOption: verbatim string value.

- Coercion protocol (uniform, dispatched by the parser)
  • mark_present(): record that the option appeared during the parse run.
  • coerce(value=Unset, /): convert and validate the raw text. Unset means no
    value was attached to the token ("--name" or "-n"); "" means an empty one
    ("--name=" or "-n="). On success the typed value is stored and the bound
    callback (if any) receives it.

- Decorators
  • @bool_option(...), @int_option(...), @uint_option(...), @str_option(...):
    build an option and bind the decorated function as its callback.

Naming
- Names are declared shell-style, in any order:
    IntOption("-j", "--js", default=1100)
    UintOption("--ks", default=2200)
- Exactly one long name is required; a short name is optional.
- Short: one character other than '-', '=' or whitespace (e.g. "-j", "-5").
- Long: no '=' or whitespace, must not start with '-' after the prefix.

Quick example:
    >>> from optline.options import ParseFailure, int_option
    >>> @int_option("-j", "--jobs", default=1)
    ... def on_jobs(jobs):
    ...     if jobs > 64:
    ...         raise ParseFailure("at most 64 jobs are supported")
    ...
"""
import functools
import operator
import re
from abc import ABCMeta, abstractmethod

from .faults import *
from .utils import *

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")


class OptionType(ABCMeta):
    """
    Metaclass that gives option classes a typename, read-only properties and
    stable representations.

    Responsibilities
    - __typename__ is derived from the class name (camel-case split with hyphens),
      e.g. IntOption -> "int-option", and used in diagnostics.
    - Every name listed in __introspectable__ becomes a read-only property
      mirroring the private backing field "_<name>".
    - __repr__/__rich_repr__ list the introspectable fields.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, names, /):
    """
    Internal: split shell-style names into (short, long).

    Raises
    - TypeError: no long name, or a non-string entry.
    - ValueError: malformed spelling, duplicates, or more than one short/long name.
    """
    short = long = Unset
    seen = set()
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif name in seen:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        seen.add(name)

        if re.fullmatch(r"--[^\s=-][^\s=]*", name):
            if long is not Unset:
                raise ValueError(f"{cls.__typename__} accepts a single long name")
            long = name[2:]
        elif re.fullmatch(r"-[^\s=-]", name):
            if short is not Unset:
                raise ValueError(f"{cls.__typename__} accepts a single short name")
            short = name[1:]
        else:
            raise ValueError(f"{cls.__typename__} name {name!r} is not a valid short (-c) or long (--name) option")

    if long is Unset:
        raise TypeError(f"{cls.__typename__} must specify a long name")
    return short, long


class Option[_T](metaclass=OptionType):
    """
    Abstract named option with presence tracking and a typed value.

    Subclasses define __fallback__ (the default when none is given), _check()
    (validation of a default) and coerce() (conversion of raw text).

    Properties
    - short: str | None, the short letter without its dash.
    - long: str, the long name without its dashes.
    - default: the value the option started with.
    - value: the current typed value.
    - present: whether the option appeared during the parse run.
    - descr: str | None, a short description.
    """

    __introspectable__ = (
        "short",
        "long",
        "default",
        "value",
        "present",
        "descr",
    )

    __fallback__ = None

    def __init__(self, *names, default=Unset, descr=Unset, callback=Unset):
        cls = type(self)
        self._short, self._long = _sanitize_names(cls, names)

        if not isinstance(descr, str | Unset):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")

        if callback is None:
            callback = Unset
        elif callback is not Unset and not callable(callback):
            raise TypeError(f"{cls.__typename__} 'callback' must be callable")

        default = coalesce(default, cls.__fallback__)
        self._check(default)

        self._descr = descr
        self._default = default
        self._value = default
        self._present = False
        self._callback = callback

    @property
    def callback(self):
        return coalesce(self._callback)

    @property
    def names(self):
        """
        shell spellings of this option, short first ("-j", "--js").
        """
        if self._short is Unset:
            return ("--" + self._long,)
        return ("-" + self._short, "--" + self._long)

    def mark_present(self):
        self._present = True

    def __call__(self, value, /):
        """
        forward a successfully coerced value to the bound callback (no-op when unbound).
        """
        if self._callback is Unset:
            return
        return self._callback(value)

    def _store(self, value):
        self._value = value
        self(value)

    @abstractmethod
    def _check(self, default, /):
        """
        validate a default value (TypeError/ValueError on mismatch).
        """

    @abstractmethod
    def coerce(self, value=Unset, /):
        """
        convert raw text into the typed value, raising a ParseFailure on bad input.
        """

    def _missing(self, expected):
        return MissingValueError(
            "option expects %s" % expected,
            title="missing value",
            code=FaultCode.MISSING_VALUE,
            hint="attach a value with '=' (for example: --%s=<value>)" % self._long,
            docs=getdoc(FaultCode.MISSING_VALUE)
        )

    def _malformed(self, value, expected):
        return MalformedValueError(
            "option expects %s, got %r" % (expected, value),
            title="malformed value",
            code=FaultCode.MALFORMED_VALUE,
            hint="pass a decimal number (for example: --%s=42)" % self._long,
            value=value,
            docs=getdoc(FaultCode.MALFORMED_VALUE)
        )

    def _out_of_range(self, value, kind):
        return ValueOutOfRangeError(
            "value %s is not in range of a %s" % (value, kind),
            title="value out of range",
            code=FaultCode.VALUE_OUT_OF_RANGE,
            hint="pick a value the option can hold",
            value=value,
            docs=getdoc(FaultCode.VALUE_OUT_OF_RANGE)
        )


class BoolOption(Option):
    """
    Value-less switch. Presence sets the value to True; parsing never sets it
    back to False.
    """
    __fallback__ = False

    def _check(self, default, /):
        if not isinstance(default, bool):
            raise TypeError(f"{type(self).__typename__} 'default' must be a bool")

    def coerce(self, value=Unset, /):
        if value is not Unset:
            raise UnexpectedValueError(
                "option does not expect a value",
                title="switch cannot take a value",
                code=FaultCode.UNEXPECTED_VALUE,
                hint="remove everything from '=' (for example: --%s)" % self._long,
                value=value,
                docs=getdoc(FaultCode.UNEXPECTED_VALUE)
            )
        self._store(True)


class IntOption(Option):
    """
    Signed 64-bit integer option. Accepts optionally signed decimal digits
    within [-2**63, 2**63 - 1]; the stored value is untouched on failure.
    """
    __fallback__ = 0

    def _check(self, default, /):
        if not isinstance(default, int) or isinstance(default, bool):
            raise TypeError(f"{type(self).__typename__} 'default' must be an integer")
        if not INT64_MIN <= default <= INT64_MAX:
            raise ValueError(f"{type(self).__typename__} 'default' is not in range of a 64 bit integer")

    def coerce(self, value=Unset, /):
        if value is Unset:
            raise self._missing("an integer value")
        if not _SIGNED.fullmatch(value):
            raise self._malformed(value, "an integer value")
        if not INT64_MIN <= (number := int(value)) <= INT64_MAX:
            raise self._out_of_range(value, "64 bit integer")
        self._store(number)


class UintOption(Option):
    """
    Unsigned 64-bit integer option.

    Only plain decimal digits are accepted: a leading '-' (or '+') is rejected
    instead of being reinterpreted as a large magnitude.
    """
    __fallback__ = 0

    def _check(self, default, /):
        if not isinstance(default, int) or isinstance(default, bool):
            raise TypeError(f"{type(self).__typename__} 'default' must be an integer")
        if not 0 <= default <= UINT64_MAX:
            raise ValueError(f"{type(self).__typename__} 'default' is not in range of a 64 bit unsigned integer")

    def coerce(self, value=Unset, /):
        if value is Unset:
            raise self._missing("a non negative integer value")
        if not _UNSIGNED.fullmatch(value):
            raise self._malformed(value, "a non negative integer value")
        if (number := int(value)) > UINT64_MAX:
            raise self._out_of_range(value, "64 bit unsigned integer")
        self._store(number)


class StrOption(Option):
    """
    String option; the attached text is stored verbatim (no trimming).
    """
    __fallback__ = ""

    def _check(self, default, /):
        if not isinstance(default, str):
            raise TypeError(f"{type(self).__typename__} 'default' must be a string")

    def coerce(self, value=Unset, /):
        if value is Unset:
            raise self._missing("a value")
        self._store(value)


def _binder(cls, name, /):
    """
    Internal: build a decorator factory that constructs a cls option and binds
    the decorated function as its callback (single application only).
    """

    @rename(name)
    def factory(*names, **metadata):
        option = cls(*names, **metadata)

        @rename(name)
        def wrapper(callback, /):
            if not callable(callback):
                raise TypeError(f"@{name}() must be applied to a callable")
            if option._callback is not Unset:
                raise TypeError(f"@{name}() must be applied only once")
            option._callback = callback
            return option

        return wrapper

    factory.__doc__ = f"""
        Decorator/factory for a {cls.__typename__} with a bound callback.

        Usage
            @{name}("-x", "--example")
            def on_example(value): ...

        The decorator returns the {cls.__name__} itself; register it with
        OptParser.add(). *names and **metadata are forwarded to {cls.__name__}(...).
    """
    return factory


bool_option = _binder(BoolOption, "bool_option")
int_option = _binder(IntOption, "int_option")
uint_option = _binder(UintOption, "uint_option")
str_option = _binder(StrOption, "str_option")


__all__ = (
    # Classes (descriptors)
    "Option",
    "BoolOption",
    "IntOption",
    "UintOption",
    "StrOption",

    # Decorators
    "bool_option",
    "int_option",
    "uint_option",
    "str_option",

    # Limits
    "INT64_MIN",
    "INT64_MAX",
    "UINT64_MAX",
)

del OptionType
