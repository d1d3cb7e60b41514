"""Core data models shared across apiver components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, FrozenSet, Iterable, List, Mapping, Optional, Union

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .errors import RevisionError


class Category(str, Enum):
    """Kinds of exported symbols tracked in a signature."""

    FUNCTIONS = "functions"
    FIELDS = "fields"
    CONSTANTS = "constants"
    STRUCTS = "structs"
    INTERFACES = "interfaces"


CATEGORIES: tuple[Category, ...] = tuple(Category)


@dataclass(frozen=True)
class Signature:
    """Exported symbols of a single package, one descriptor set per category."""

    functions: FrozenSet[str] = frozenset()
    fields: FrozenSet[str] = frozenset()
    constants: FrozenSet[str] = frozenset()
    structs: FrozenSet[str] = frozenset()
    interfaces: FrozenSet[str] = frozenset()

    @classmethod
    def build(
        cls,
        *,
        functions: Iterable[str] = (),
        fields: Iterable[str] = (),
        constants: Iterable[str] = (),
        structs: Iterable[str] = (),
        interfaces: Iterable[str] = (),
    ) -> "Signature":
        return cls(
            functions=frozenset(functions),
            fields=frozenset(fields),
            constants=frozenset(constants),
            structs=frozenset(structs),
            interfaces=frozenset(interfaces),
        )

    def symbols(self, category: Category) -> FrozenSet[str]:
        return getattr(self, category.value)

    def to_dict(self) -> dict[str, list[str]]:
        return {category.value: sorted(self.symbols(category)) for category in CATEGORIES}


EMPTY_SIGNATURE = Signature()

PackageMap = Mapping[str, Signature]


@dataclass(frozen=True)
class Diff:
    """Added/removed counts between two comparable sets."""

    added: int = 0
    removed: int = 0

    def is_zero(self) -> bool:
        return self.added == 0 and self.removed == 0


@dataclass(frozen=True)
class PackageDiff:
    """Per-category changes for one package."""

    name: str
    functions: Diff = Diff()
    fields: Diff = Diff()
    constants: Diff = Diff()
    structs: Diff = Diff()
    interfaces: Diff = Diff()

    def for_category(self, category: Category) -> Diff:
        return getattr(self, category.value)

    def categories(self) -> Iterable[Diff]:
        return (self.for_category(category) for category in CATEGORIES)


@dataclass(frozen=True)
class SummaryDiff:
    """Changes across every package known on either side of a comparison."""

    package_changes: Diff = Diff()
    packages: List[PackageDiff] = field(default_factory=list)

    def package(self, name: str) -> Optional[PackageDiff]:
        for package in self.packages:
            if package.name == name:
                return package
        return None


@dataclass(frozen=True, order=True)
class Version:
    """Major, minor and build counters."""

    major: int = 0
    minor: int = 0
    build: int = 0

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.build) < 0:
            raise ValueError(f"Version components must be non-negative: {self!r}")

    def __add__(self, other: object) -> "Version":
        if not isinstance(other, Version):
            return NotImplemented
        return Version(
            major=self.major + other.major,
            minor=self.minor + other.minor,
            build=self.build + other.build,
        )

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.build}"


@dataclass(frozen=True)
class Revision:
    """One commit of a linear history, as reported by the revision source."""

    hash: str
    subject: str
    name: str
    email: str
    date: datetime


@dataclass(frozen=True)
class Extracted:
    """Successful extraction of a revision's package signatures."""

    signatures: PackageMap


@dataclass(frozen=True)
class Failed:
    """A revision that could not be analyzed."""

    error: "RevisionError"


Outcome = Union[Extracted, Failed]


@dataclass(frozen=True)
class RevisionResult:
    """Per-revision output record."""

    revision: Revision
    outcome: Outcome
    version: Version
    package: str

    @property
    def signatures(self) -> Optional[PackageMap]:
        if isinstance(self.outcome, Extracted):
            return self.outcome.signatures
        return None

    @property
    def error(self) -> Optional["RevisionError"]:
        if isinstance(self.outcome, Failed):
            return self.outcome.error
        return None


@dataclass
class HistoryOutcome:
    """Ordered results of a pipeline run, plus the fatal error that stopped it, if any."""

    results: List[RevisionResult] = field(default_factory=list)
    failure: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def version(self) -> Optional[Version]:
        if not self.results:
            return None
        return self.results[-1].version
