"""
Optline option registry.

Options live in an append-only arena; each registration yields an OptionId,
the stable index of its slot. Short and long names map to ids, so lookups
never depend on where the caller keeps its own option objects.

Shadowing
- By default names are not checked for uniqueness: when two options share a
  name, the first registered wins and later ones are unreachable by that name.
- With strict=True, a second option reusing a short or long name is rejected
  with DuplicatedOptionError at registration time.
"""
import logging

from .faults import *
from .options import Option
from .utils import *

logger = logging.getLogger(__name__)


class OptionId(int):
    """
    stable identifier of a registry slot.
    """

    def __repr__(self):
        return "OptionId(%d)" % self


class Registry:
    """
    ordered collection of option slots addressed by OptionId.

    operations
    - add(option) -> OptionId
    - find_by_short(letter) -> Option | Unset
    - find_by_long(name) -> Option | Unset
    - registry[id] -> Option; iteration yields options in registration order.
    """

    def __init__(self, *, strict=False):
        self._slots = []
        self._shorts = {}
        self._longs = {}
        self._strict = bool(strict)

    @property
    def strict(self):
        return self._strict

    def add(self, option, /):
        if not isinstance(option, Option):
            raise TypeError("registry accepts option descriptors only, got %r" % type(option).__name__)
        if any(slot is option for slot in self._slots):
            raise ValueError("option %r is already registered" % option.names[-1])

        short, long = option._short, option._long
        if self._strict:
            for name, table, spelling in ((short, self._shorts, "-%s"), (long, self._longs, "--%s")):
                if name is not Unset and name in table:
                    raise DuplicatedOptionError(
                        "option %r is already registered" % (spelling % name),
                        title="duplicated option",
                        code=FaultCode.DUPLICATED_OPTION,
                        hint="give every option its own short and long name",
                        name=spelling % name,
                        docs=getdoc(FaultCode.DUPLICATED_OPTION)
                    )

        identifier = OptionId(len(self._slots))
        self._slots.append(option)

        if short is not Unset:
            if short in self._shorts:
                logger.debug("short name -%s of slot %d is shadowed by slot %d", short, identifier, self._shorts[short])
            self._shorts.setdefault(short, identifier)
        if long in self._longs:
            logger.debug("long name --%s of slot %d is shadowed by slot %d", long, identifier, self._longs[long])
        self._longs.setdefault(long, identifier)

        logger.debug("registered %r as slot %d", option, identifier)
        return identifier

    def find_by_short(self, letter, /):
        try:
            return self._slots[self._shorts[letter]]
        except KeyError:
            return Unset

    def find_by_long(self, name, /):
        try:
            return self._slots[self._longs[name]]
        except KeyError:
            return Unset

    def __getitem__(self, identifier, /):
        if not isinstance(identifier, OptionId):
            raise TypeError("registry indices must be option ids")
        return self._slots[identifier]

    def __contains__(self, option, /):
        return any(slot is option for slot in self._slots)

    def __iter__(self):
        return iter(self._slots)

    def __len__(self):
        return len(self._slots)

    def __rich_repr__(self):
        yield from self._slots

    def __repr__(self):
        return "Registry(%s)" % ", ".join(map(repr, self._slots))


__all__ = (
    "OptionId",
    "Registry",
)
