"""Cabal style version ranges.

A range is kept as a sorted union of disjoint intervals over
``packaging.version.Version``. Every operation returns a normalized
value, so two ranges accepting the same versions compare equal and
rendering a range then parsing it back yields the same range.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

from packaging.version import InvalidVersion, Version


ZERO = Version("0")

# (version, inclusive)
Bound = Tuple[Version, bool]

_TOKEN_RE = re.compile(
    r"\s*(\|\||&&|\(|\)|\^>=|>=|<=|==|>|<|-any|-none|[0-9][0-9A-Za-z.!+*_-]*)"
)


class VersionRangeError(ValueError):
    pass


def _lower_key(bound: Bound):
    version, inclusive = bound
    return (version, 0 if inclusive else 1)


def _upper_key(bound: Optional[Bound]):
    if bound is None:
        return (1, ZERO, 0)
    version, inclusive = bound
    return (0, version, 1 if inclusive else 0)


def _non_empty(lower: Bound, upper: Optional[Bound]) -> bool:
    if upper is None:
        return True
    if lower[0] < upper[0]:
        return True
    return lower[0] == upper[0] and lower[1] and upper[1]


def _touches(upper: Optional[Bound], lower: Bound) -> bool:
    """True if an interval ending at ``upper`` meets one starting at ``lower``."""
    if upper is None:
        return True
    if lower[0] < upper[0]:
        return True
    return lower[0] == upper[0] and (lower[1] or upper[1])


def _bump(release: Tuple[int, ...]) -> Version:
    return Version(".".join(str(part) for part in release))


def major_upper_bound(version: Version) -> Version:
    """Upper bound of ``^>=``: ``1.2.3`` -> ``1.3``, ``1`` -> ``1.1``."""
    release = version.release
    if len(release) == 1:
        return _bump((release[0], 1))
    return _bump((release[0], release[1] + 1))


def wildcard_upper_bound(prefix: Version) -> Version:
    """Upper bound of ``==1.2.*``, i.e. ``1.3``."""
    release = prefix.release
    return _bump(release[:-1] + (release[-1] + 1,))


class VersionRange:
    """A set of versions described as a union of intervals."""

    __slots__ = ("intervals",)

    def __init__(self, intervals: Iterable[Tuple[Bound, Optional[Bound]]] = ()):
        self.intervals: Tuple[Tuple[Bound, Optional[Bound]], ...] = _normalize(intervals)

    @classmethod
    def any(cls) -> "VersionRange":
        return cls([((ZERO, True), None)])

    @classmethod
    def none(cls) -> "VersionRange":
        return cls([])

    @classmethod
    def parse(cls, text: str) -> "VersionRange":
        if not text or not text.strip():
            return cls.any()
        return _Parser(text).parse()

    @classmethod
    def coerce(cls, value) -> "VersionRange":
        if isinstance(value, VersionRange):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        raise VersionRangeError(f"cannot interpret {value!r} as a version range")

    def intersect(self, other: "VersionRange") -> "VersionRange":
        out = []
        for lo1, up1 in self.intervals:
            for lo2, up2 in other.intervals:
                lower = max(lo1, lo2, key=_lower_key)
                upper = min(up1, up2, key=_upper_key)
                out.append((lower, upper))
        return VersionRange(out)

    def union(self, other: "VersionRange") -> "VersionRange":
        return VersionRange(self.intervals + other.intervals)

    def contains(self, version) -> bool:
        if not isinstance(version, Version):
            version = Version(str(version))
        for lower, upper in self.intervals:
            if _non_empty(lower, (version, True)) and _non_empty((version, True), upper):
                return True
        return False

    __contains__ = contains

    def is_any(self) -> bool:
        return self == VersionRange.any()

    def is_empty(self) -> bool:
        return not self.intervals

    def bounds(self) -> List[Version]:
        """All versions mentioned as interval endpoints."""
        out = []
        for lower, upper in self.intervals:
            if lower != (ZERO, True):
                out.append(lower[0])
            if upper is not None:
                out.append(upper[0])
        return out

    def __and__(self, other: "VersionRange") -> "VersionRange":
        return self.intersect(other)

    def __or__(self, other: "VersionRange") -> "VersionRange":
        return self.union(other)

    def __eq__(self, other):
        if not isinstance(other, VersionRange):
            return NotImplemented
        return self.intervals == other.intervals

    def __hash__(self):
        return hash(self.intervals)

    def __str__(self):
        if not self.intervals:
            return "<0"
        if self.is_any():
            return "-any"
        return " || ".join(_render_interval(lower, upper) for lower, upper in self.intervals)

    def __repr__(self):
        return f"VersionRange({str(self)!r})"


def _render_interval(lower: Bound, upper: Optional[Bound]) -> str:
    if upper is not None and lower[0] == upper[0]:
        return f"=={lower[0]}"
    parts = []
    if lower != (ZERO, True):
        parts.append(f"{'>=' if lower[1] else '>'}{lower[0]}")
    if upper is not None:
        parts.append(f"{'<=' if upper[1] else '<'}{upper[0]}")
    if not parts:
        return "-any"
    return " && ".join(parts)


def _normalize(intervals) -> Tuple[Tuple[Bound, Optional[Bound]], ...]:
    live = sorted(
        ((lower, upper) for lower, upper in intervals if _non_empty(lower, upper)),
        key=lambda iv: _lower_key(iv[0]),
    )
    merged: List[Tuple[Bound, Optional[Bound]]] = []
    for lower, upper in live:
        if merged and _touches(merged[-1][1], lower):
            prev_lower, prev_upper = merged[-1]
            merged[-1] = (prev_lower, max(prev_upper, upper, key=_upper_key))
        else:
            merged.append((lower, upper))
    return tuple(merged)


class _Parser:
    """Recursive descent over ``||`` / ``&&`` / parenthesised atoms."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = self._tokenize(text)
        self.pos = 0

    def _tokenize(self, text: str) -> List[str]:
        tokens = []
        pos = 0
        stripped = text.rstrip()
        while pos < len(stripped):
            match = _TOKEN_RE.match(stripped, pos)
            if match is None:
                raise VersionRangeError(f"unexpected input in version range {text!r} at {pos}")
            tokens.append(match.group(1))
            pos = match.end()
        return tokens

    def _peek(self) -> Optional[str]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            raise VersionRangeError(f"unexpected end of version range {self.text!r}")
        self.pos += 1
        return token

    def parse(self) -> VersionRange:
        result = self._disjunction()
        if self._peek() is not None:
            raise VersionRangeError(f"trailing input {self._peek()!r} in version range {self.text!r}")
        return result

    def _disjunction(self) -> VersionRange:
        result = self._conjunction()
        while self._peek() == "||":
            self.pos += 1
            result = result | self._conjunction()
        return result

    def _conjunction(self) -> VersionRange:
        result = self._atom()
        while self._peek() == "&&":
            self.pos += 1
            result = result & self._atom()
        return result

    def _version(self) -> str:
        token = self._next()
        if not token[0].isdigit():
            raise VersionRangeError(f"expected a version in {self.text!r}, got {token!r}")
        return token

    def _parse_version(self, raw: str) -> Version:
        try:
            return Version(raw)
        except InvalidVersion:
            raise VersionRangeError(f"invalid version {raw!r} in {self.text!r}")

    def _atom(self) -> VersionRange:
        token = self._next()
        if token == "(":
            inner = self._disjunction()
            if self._next() != ")":
                raise VersionRangeError(f"unbalanced parentheses in {self.text!r}")
            return inner
        if token == "-any":
            return VersionRange.any()
        if token == "-none":
            return VersionRange.none()
        if token == "==":
            raw = self._version()
            if raw.endswith(".*"):
                prefix = self._parse_version(raw[:-2])
                return VersionRange([((prefix, True), (wildcard_upper_bound(prefix), False))])
            version = self._parse_version(raw)
            return VersionRange([((version, True), (version, True))])
        if token == "^>=":
            version = self._parse_version(self._version())
            return VersionRange([((version, True), (major_upper_bound(version), False))])
        if token in (">", ">="):
            version = self._parse_version(self._version())
            return VersionRange([((version, token == ">="), None)])
        if token in ("<", "<="):
            version = self._parse_version(self._version())
            return VersionRange([((ZERO, True), (version, token == "<="))])
        raise VersionRangeError(f"unexpected {token!r} in version range {self.text!r}")
