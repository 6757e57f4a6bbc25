"""Core data models for GradleFix."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TemplateEntry:
    """One segment of a string template, as written in the source."""

    text: str
    interpolated: bool = False  # "$name" or "${...}" rather than literal text


@dataclass(frozen=True)
class Expression:
    """An argument expression of a build script call.

    String templates keep their segments in ``entries``; any other expression
    (``libs.foo``, ``project(":x")``, a variable) is opaque and has
    ``entries`` set to None.
    """

    text: str
    entries: tuple[TemplateEntry, ...] | None = None

    @classmethod
    def literal(cls, value: str) -> "Expression":
        """Build a plain string literal expression."""
        entries = (TemplateEntry(value),) if value else ()
        return cls(text=f'"{value}"', entries=entries)

    @property
    def is_string(self) -> bool:
        return self.entries is not None

    @property
    def is_simple(self) -> bool:
        """Whether this is a string literal without any interpolation."""
        return self.entries is not None and len(self.entries) <= 1 and not any(
            entry.interpolated for entry in self.entries
        )

    @property
    def interpolation_count(self) -> int:
        if self.entries is None:
            return 0
        return sum(1 for entry in self.entries if entry.interpolated)

    @property
    def value(self) -> str | None:
        """Literal value of a simple string, None for anything else."""
        if not self.is_simple:
            return None
        return self.entries[0].text if self.entries else ""


@dataclass(frozen=True)
class DependencyDeclaration:
    """A dependency decoupled from the syntax it was written in."""

    group: Expression
    name: Expression
    version: Expression | None = None

    @classmethod
    def of(cls, group: str, name: str, version: str | None = None) -> "DependencyDeclaration":
        """Create a declaration from plain strings."""
        return cls(
            group=Expression.literal(group),
            name=Expression.literal(name),
            version=Expression.literal(version) if version is not None else None,
        )


@dataclass(frozen=True)
class Argument:
    """A call argument, named (``group = "x"``) or positional."""

    expression: Expression
    name: str | None = None

    @property
    def is_named(self) -> bool:
        return self.name is not None


@dataclass(frozen=True)
class CallOccurrence:
    """A call found in a build script, with its ``[start, end)`` span."""

    callee: str
    arguments: tuple[Argument, ...]
    start: int
    end: int
    has_trailing_lambda: bool = False
    arguments_start: int | None = None  # offset of "(" in the source
    arguments_end: int | None = None  # offset just after ")"

    @property
    def named_arguments(self) -> list[Argument]:
        return [argument for argument in self.arguments if argument.is_named]

    @property
    def positional_arguments(self) -> list[Argument]:
        return [argument for argument in self.arguments if not argument.is_named]


@dataclass(frozen=True)
class PluginDeclaration:
    """A plugin request such as ``id("x") version "y"``."""

    id: str
    version: str | None = None
    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class Edit:
    """Replace ``[start, end)`` of a buffer with ``replacement``."""

    start: int
    end: int
    replacement: str

    @property
    def delta(self) -> int:
        return len(self.replacement) - (self.end - self.start)
