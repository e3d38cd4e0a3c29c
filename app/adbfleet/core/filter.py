"""Package filter expressions.

A filter is a comma-separated list of terms. Each term is an exact
package identifier or a glob pattern using ``*``; a term prefixed with
``!`` excludes matching packages. Packages are selected if they match
any inclusion term (or there are none) and no exclusion term.

Example:
    >>> expression = parse_filter("com.*,!com.keep")
    >>> [p.identifier for p in find_matches(expression, [
    ...     PackageRef("com.a"), PackageRef("com.keep"), PackageRef("org.x")])]
    ['com.a']
"""

import fnmatch
from collections.abc import Iterable
from dataclasses import dataclass

from adbfleet.core.errors import FilterError
from adbfleet.models.package import PackageRef

TERM_SEPARATOR = ","
NEGATION_MARKER = "!"
WILDCARD = "*"


@dataclass(frozen=True, slots=True)
class FilterTerm:
    """A single term of a filter expression.

    Attributes:
        pattern: Literal identifier or glob pattern (without the marker).
        negated: True if matching packages are excluded.
    """

    pattern: str
    negated: bool = False

    @property
    def is_wildcard(self) -> bool:
        """Check if the pattern contains a wildcard."""
        return WILDCARD in self.pattern

    def matches(self, identifier: str) -> bool:
        """Check whether a package identifier matches this term."""
        if self.is_wildcard:
            return fnmatch.fnmatchcase(identifier, self.pattern)
        return identifier == self.pattern

    def __str__(self) -> str:
        return f"{NEGATION_MARKER}{self.pattern}" if self.negated else self.pattern


@dataclass(frozen=True, slots=True)
class PackageFilter:
    """Compiled filter expression.

    Attributes:
        terms: Terms in the order they were written.
    """

    terms: tuple[FilterTerm, ...] = ()

    @property
    def includes(self) -> tuple[FilterTerm, ...]:
        """Non-negated terms."""
        return tuple(t for t in self.terms if not t.negated)

    @property
    def excludes(self) -> tuple[FilterTerm, ...]:
        """Negated terms."""
        return tuple(t for t in self.terms if t.negated)

    @property
    def matches_all(self) -> bool:
        """Check if the expression has no terms at all."""
        return not self.terms

    def accepts(self, identifier: str) -> bool:
        """Check whether a single package identifier is selected.

        Exclusion terms always win over inclusion terms.
        """
        includes = self.includes
        if includes and not any(term.matches(identifier) for term in includes):
            return False
        return not any(term.matches(identifier) for term in self.excludes)

    def __str__(self) -> str:
        return TERM_SEPARATOR.join(str(term) for term in self.terms)


def parse_filter(filter_string: str | None) -> PackageFilter:
    """Compile a filter string into a PackageFilter.

    Args:
        filter_string: Comma-separated terms. None or blank selects everything.

    Returns:
        PackageFilter with terms in written order, duplicates removed.

    Raises:
        FilterError: If a negation marker is not followed by a pattern.
    """
    if not filter_string:
        return PackageFilter()

    terms: list[FilterTerm] = []
    for raw in filter_string.split(TERM_SEPARATOR):
        text = raw.strip()
        if not text:
            continue

        negated = text.startswith(NEGATION_MARKER)
        pattern = text[len(NEGATION_MARKER) :].strip() if negated else text
        if not pattern:
            msg = (
                f"Exclusion marker '{NEGATION_MARKER}' needs a package pattern "
                f"in '{filter_string}'"
            )
            raise FilterError(msg)

        term = FilterTerm(pattern=pattern, negated=negated)
        if term not in terms:
            terms.append(term)

    return PackageFilter(terms=tuple(terms))


def find_matches(expression: PackageFilter, packages: Iterable[PackageRef]) -> list[PackageRef]:
    """Select packages accepted by a filter expression.

    The result keeps the order of ``packages`` and contains each identifier
    once, so the same input always yields the same sequence.

    Args:
        expression: Compiled filter.
        packages: Packages in device listing order.

    Returns:
        Accepted packages in input order.
    """
    matches: list[PackageRef] = []
    seen: set[str] = set()
    for package in packages:
        if package.identifier in seen:
            continue
        if expression.accepts(package.identifier):
            seen.add(package.identifier)
            matches.append(package)
    return matches
