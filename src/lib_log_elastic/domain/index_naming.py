"""Index name resolution with optional date-based rotation.

Purpose
-------
Derive the active Elasticsearch index name from a base name and, when
rotation is enabled, the current UTC date rendered through an LDML date
pattern such as ``yyyyMMdd`` or ``yyyy.MM.dd``.

Contents
--------
* :class:`DatePattern` - LDML pattern compiled once into tokens.
* :class:`IndexRotation` - rotation policy wrapping a :class:`DatePattern`.
* :class:`IndexDescriptor` - base name plus optional rotation; resolves names.

System Role
-----------
Pure domain logic consumed by
:class:`lib_log_elastic.application.use_cases.index_manager.IndexManager`.
Resolution never reads the clock itself; callers pass the instant so that the
result is a function of ``(base_name, rotation, utc_date)`` only.

Alignment Notes
---------------
Pattern letters follow the ICU/LDML conventions (``y`` year, ``M`` month,
``d`` day, ``H`` hour ...). Text fields (``MMM``, ``EEEE``, ``a``) render in
English.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_FIELDS = frozenset("yMLdDEaHhkKmsS")


def _pad(value: int, width: int) -> str:
    return str(value).zfill(width)


def _format_field(letter: str, width: int, moment: datetime) -> str:
    if letter == "y":
        if width == 2:
            return _pad(moment.year % 100, 2)
        return _pad(moment.year, width)
    if letter in ("M", "L"):
        if width >= 4:
            return _MONTHS[moment.month - 1]
        if width == 3:
            return _MONTHS[moment.month - 1][:3]
        return _pad(moment.month, width)
    if letter == "d":
        return _pad(moment.day, width)
    if letter == "D":
        return _pad(moment.timetuple().tm_yday, width)
    if letter == "E":
        name = _WEEKDAYS[moment.weekday()]
        return name if width >= 4 else name[:3]
    if letter == "a":
        return "AM" if moment.hour < 12 else "PM"
    if letter == "H":
        return _pad(moment.hour, width)
    if letter == "h":
        return _pad(moment.hour % 12 or 12, width)
    if letter == "k":
        return _pad(moment.hour or 24, width)
    if letter == "K":
        return _pad(moment.hour % 12, width)
    if letter == "m":
        return _pad(moment.minute, width)
    if letter == "s":
        return _pad(moment.second, width)
    # "S": fractional seconds at millisecond precision, truncated or zero padded.
    millis = f"{moment.microsecond // 1000:03d}"
    return millis[:width] if width <= 3 else millis + "0" * (width - 3)


@dataclass(slots=True, frozen=True)
class DatePattern:
    """LDML date pattern compiled once at construction.

    Examples
    --------
    >>> moment = datetime(2024, 1, 5, 7, 8, 9, tzinfo=timezone.utc)
    >>> DatePattern("yyyyMMdd").format(moment)
    '20240105'
    >>> DatePattern("yyyy.M.dd").format(moment)
    '2024.1.05'
    >>> DatePattern("yyyy'w'D").format(moment)
    '2024w5'
    """

    pattern: str
    _tokens: tuple[tuple[str, str | int], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.pattern:
            raise ValueError("date pattern must not be empty")
        object.__setattr__(self, "_tokens", self._tokenize(self.pattern))

    @staticmethod
    def _tokenize(pattern: str) -> tuple[tuple[str, str | int], ...]:
        """Split ``pattern`` into ``(letter, width)`` fields and ``("", text)`` literals."""
        tokens: list[tuple[str, str | int]] = []
        literal: list[str] = []
        index = 0
        length = len(pattern)

        def flush_literal() -> None:
            if literal:
                tokens.append(("", "".join(literal)))
                literal.clear()

        while index < length:
            char = pattern[index]
            if char == "'":
                if index + 1 < length and pattern[index + 1] == "'":
                    literal.append("'")
                    index += 2
                    continue
                closing = index + 1
                while True:
                    closing = pattern.find("'", closing)
                    if closing == -1:
                        raise ValueError(f"Unterminated quote in date pattern: {pattern!r}")
                    if closing + 1 < length and pattern[closing + 1] == "'":
                        closing += 2
                        continue
                    break
                literal.append(pattern[index + 1 : closing].replace("''", "'"))
                index = closing + 1
                continue
            if char.isascii() and char.isalpha():
                if char not in _FIELDS:
                    raise ValueError(f"Unsupported date pattern field {char!r} in {pattern!r}")
                run = index
                while run < length and pattern[run] == char:
                    run += 1
                flush_literal()
                tokens.append((char, run - index))
                index = run
                continue
            literal.append(char)
            index += 1
        flush_literal()
        return tuple(tokens)

    def format(self, moment: datetime) -> str:
        """Render ``moment`` through the compiled pattern."""

        parts: list[str] = []
        for letter, value in self._tokens:
            if not letter:
                parts.append(str(value))
            else:
                parts.append(_format_field(letter, int(value), moment))
        return "".join(parts)


@dataclass(slots=True, frozen=True)
class IndexRotation:
    """Rotation policy appending a formatted date suffix to the base name."""

    date_pattern: DatePattern

    @classmethod
    def daily(cls, pattern: str = "yyyyMMdd") -> "IndexRotation":
        return cls(DatePattern(pattern))

    def suffix(self, moment: datetime) -> str:
        return self.date_pattern.format(moment)


@dataclass(slots=True, frozen=True)
class IndexDescriptor:
    """Base index name and optional rotation.

    The rotation granularity is whatever the pattern encodes: a month-only
    pattern such as ``yyyy.MM`` rotates monthly.

    Examples
    --------
    >>> descriptor = IndexDescriptor("log", IndexRotation.daily("yyyyMMdd"))
    >>> descriptor.resolve(datetime(2024, 1, 1, 23, 59, 59, tzinfo=timezone.utc))
    'log-20240101'
    >>> IndexDescriptor("log").resolve(datetime(2024, 1, 1, tzinfo=timezone.utc))
    'log'
    """

    base_name: str
    rotation: IndexRotation | None = None

    def __post_init__(self) -> None:
        if not self.base_name or not self.base_name.strip():
            raise ValueError("index base name must not be empty")

    @property
    def rotates(self) -> bool:
        return self.rotation is not None

    def resolve(self, at: datetime) -> str:
        """Return the index name active at ``at`` (converted to UTC)."""

        if self.rotation is None:
            return self.base_name
        if at.tzinfo is None or at.tzinfo.utcoffset(at) is None:
            raise ValueError("resolution instant must be timezone-aware")
        return f"{self.base_name}-{self.rotation.suffix(at.astimezone(timezone.utc))}"


__all__ = ["DatePattern", "IndexDescriptor", "IndexRotation"]
