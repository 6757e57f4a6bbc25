"""Dependency declaration formats.

A dependency can be written in several shapes in the Kotlin DSL::

    implementation("org.example:lib:1.0")                               # notation
    implementation("org.example", "lib", "1.0")                         # positional
    implementation(group = "org.example", name = "lib", version = "1.0")  # named
    implementation("org.example", name = "lib", version = "1.0")        # semi-named

Each shape is a ``DependencyFormat`` that can recognize a call, tell whether
it decomposes without loss, extract a ``DependencyDeclaration`` from it and
generate the argument list for a declaration. The semi-named shape is only
ever detected, never generated.
"""

from abc import ABC, abstractmethod

from .errors import NotConvertible, UnsupportedOperation
from .logging import get_logger
from .models import CallOccurrence, DependencyDeclaration, Edit, Expression, TemplateEntry
from .templates import template_body, template_from_entries

logger = get_logger(__name__)

PARAMETER_ORDER = ("group", "name", "version")


class DependencyFormat(ABC):
    """One syntactic convention for writing a dependency declaration."""

    name: str
    human_name: str
    generatable: bool = True

    @abstractmethod
    def matches(self, occurrence: CallOccurrence) -> bool:
        """Structural test: does the call have this format's shape?"""

    @abstractmethod
    def is_convertible(self, occurrence: CallOccurrence) -> bool:
        """Can group, name and version be extracted without losing anything?"""

    @abstractmethod
    def extract(self, occurrence: CallOccurrence) -> DependencyDeclaration:
        """Decompose a convertible occurrence.

        Raises:
            NotConvertible: If ``is_convertible`` is False for the occurrence
        """

    @abstractmethod
    def generate(self, declaration: DependencyDeclaration) -> str:
        """Render the parenthesized argument list for ``declaration``."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"

    def _not_convertible(self, occurrence: CallOccurrence) -> NotConvertible:
        return NotConvertible(
            f"{occurrence.callee}(...) at offset {occurrence.start} cannot be extracted as {self.human_name}"
        )


class NotationFormat(DependencyFormat):
    """Single ``"group:name:version"`` string."""

    name = "notation"
    human_name = "Notation"

    def matches(self, occurrence: CallOccurrence) -> bool:
        if len(occurrence.arguments) != 1:
            return False
        argument = occurrence.arguments[0]
        return not argument.is_named and argument.expression.is_string

    def is_convertible(self, occurrence: CallOccurrence) -> bool:
        return self.matches(occurrence) and _split_notation(occurrence.arguments[0].expression) is not None

    def extract(self, occurrence: CallOccurrence) -> DependencyDeclaration:
        parts = _split_notation(occurrence.arguments[0].expression) if self.matches(occurrence) else None
        if parts is None:
            raise self._not_convertible(occurrence)
        return DependencyDeclaration(*parts)

    def generate(self, declaration: DependencyDeclaration) -> str:
        components = [declaration.group, declaration.name]
        if declaration.version is not None:
            components.append(declaration.version)
        body = ":".join(template_body(component) for component in components)
        return f'("{body}")'


class PositionalFormat(DependencyFormat):
    """``("group", "name", "version")`` without labels."""

    name = "positional"
    human_name = "Positional"

    def matches(self, occurrence: CallOccurrence) -> bool:
        return len(occurrence.arguments) >= 2 and not occurrence.named_arguments

    def is_convertible(self, occurrence: CallOccurrence) -> bool:
        # configuration, classifier and ext arguments have no place in the model
        return self.matches(occurrence) and len(occurrence.arguments) <= len(PARAMETER_ORDER)

    def extract(self, occurrence: CallOccurrence) -> DependencyDeclaration:
        if not self.is_convertible(occurrence):
            raise self._not_convertible(occurrence)
        expressions = [argument.expression for argument in occurrence.arguments]
        return DependencyDeclaration(*expressions)

    def generate(self, declaration: DependencyDeclaration) -> str:
        components = [declaration.group, declaration.name]
        if declaration.version is not None:
            components.append(declaration.version)
        return "(" + ", ".join(component.text for component in components) + ")"


class NamedFormat(DependencyFormat):
    """``(group = "group", name = "name", version = "version")``."""

    name = "named"
    human_name = "Named"

    def matches(self, occurrence: CallOccurrence) -> bool:
        return bool(occurrence.arguments) and not occurrence.positional_arguments

    def is_convertible(self, occurrence: CallOccurrence) -> bool:
        return self.matches(occurrence) and _assign_parameters(occurrence) is not None

    def extract(self, occurrence: CallOccurrence) -> DependencyDeclaration:
        assigned = _assign_parameters(occurrence) if self.matches(occurrence) else None
        if assigned is None:
            raise self._not_convertible(occurrence)
        return DependencyDeclaration(**assigned)

    def generate(self, declaration: DependencyDeclaration) -> str:
        arguments = [f"group = {declaration.group.text}", f"name = {declaration.name.text}"]
        if declaration.version is not None:
            arguments.append(f"version = {declaration.version.text}")
        return "(" + ", ".join(arguments) + ")"


class SemiNamedFormat(DependencyFormat):
    """Mix of positional and named arguments; recognized but never generated."""

    name = "semi_named"
    human_name = "Semi-named"
    generatable = False

    def matches(self, occurrence: CallOccurrence) -> bool:
        return bool(occurrence.named_arguments) and bool(occurrence.positional_arguments)

    def is_convertible(self, occurrence: CallOccurrence) -> bool:
        return self.matches(occurrence) and _assign_parameters(occurrence) is not None

    def extract(self, occurrence: CallOccurrence) -> DependencyDeclaration:
        assigned = _assign_parameters(occurrence) if self.matches(occurrence) else None
        if assigned is None:
            raise self._not_convertible(occurrence)
        return DependencyDeclaration(**assigned)

    def generate(self, declaration: DependencyDeclaration) -> str:
        raise UnsupportedOperation("The semi-named format can only be detected, not generated")


NOTATION = NotationFormat()
POSITIONAL = PositionalFormat()
NAMED = NamedFormat()
SEMI_NAMED = SemiNamedFormat()

# Priority order used by classify()
ALL_FORMATS: tuple[DependencyFormat, ...] = (NOTATION, POSITIONAL, NAMED, SEMI_NAMED)


def _split_notation(expression: Expression) -> tuple[Expression, Expression, Expression | None] | None:
    """Split a notation string into group, name and optional version."""
    entries = expression.entries
    if entries is None:
        return None

    interpolations = [index for index, entry in enumerate(entries) if entry.interpolated]
    if not interpolations:
        parts = (expression.value or "").split(":")
        if len(parts) not in (2, 3) or not all(parts):
            return None
        version = Expression.literal(parts[2]) if len(parts) == 3 else None
        return Expression.literal(parts[0]), Expression.literal(parts[1]), version

    if len(interpolations) > 1:
        return None

    index = interpolations[0]
    prefix = "".join(entry.text for entry in entries[:index])
    suffix = "".join(entry.text for entry in entries[index + 1 :])
    if prefix.count(":") != 2 or ":" in suffix:
        return None

    group, name, version_prefix = prefix.split(":")
    if not group or not name:
        return None

    version = template_from_entries([TemplateEntry(version_prefix), entries[index], TemplateEntry(suffix)])
    return Expression.literal(group), Expression.literal(name), version


def _assign_parameters(occurrence: CallOccurrence) -> dict[str, Expression] | None:
    """Map positional then named arguments onto group/name/version."""
    assigned: dict[str, Expression] = {}
    seen_named = False
    for position, argument in enumerate(occurrence.arguments):
        if argument.is_named:
            seen_named = True
            key = argument.name
        elif seen_named or position >= len(PARAMETER_ORDER):
            return None
        else:
            key = PARAMETER_ORDER[position]

        if key not in PARAMETER_ORDER or key in assigned:
            return None
        assigned[key] = argument.expression

    if "group" not in assigned or "name" not in assigned:
        return None
    return assigned


def classify(occurrence: CallOccurrence) -> DependencyFormat | None:
    """Return the format an occurrence is written in, or None if it is not a declaration."""
    matching = [fmt for fmt in ALL_FORMATS if fmt.matches(occurrence)]
    if not matching:
        return None
    if len(matching) > 1:
        logger.warning(
            "%s(...) at offset %d matches several formats (%s), using %s",
            occurrence.callee,
            occurrence.start,
            ", ".join(fmt.name for fmt in matching),
            matching[0].name,
        )
    return matching[0]


def generatable_formats() -> list[DependencyFormat]:
    """Formats that can be chosen as a project's preferred format."""
    return [fmt for fmt in ALL_FORMATS if fmt.generatable]


def get_format(name: str) -> DependencyFormat:
    """Look up a format by name, human name or legacy class name.

    Raises:
        ValueError: If no format has that name
    """
    wanted = name.strip().lower().replace("-", "_")
    for fmt in ALL_FORMATS:
        aliases = {
            fmt.name,
            fmt.human_name.lower().replace("-", "_"),
            f"{fmt.name.replace('_', '')}dependencyformat",
        }
        if wanted in aliases:
            return fmt
    raise ValueError(f"Unknown dependency format: {name}")


def render_call(callee: str, declaration: DependencyDeclaration, fmt: DependencyFormat) -> str:
    """Render a complete dependency call such as ``implementation("g:a:1.0")``."""
    return callee + fmt.generate(declaration)


def reformat_edit(occurrence: CallOccurrence, target: DependencyFormat) -> Edit | None:
    """Edit that rewrites an occurrence's arguments into ``target``.

    Returns:
        The edit, or None if the occurrence already uses ``target``, is not a
        dependency declaration or cannot be converted
    """
    current = classify(occurrence)
    if current is None or current is target or not current.is_convertible(occurrence):
        return None

    declaration = current.extract(occurrence)
    replacement = target.generate(declaration)
    start = occurrence.arguments_start if occurrence.arguments_start is not None else occurrence.start
    end = occurrence.arguments_end if occurrence.arguments_end is not None else occurrence.end
    if occurrence.arguments_start is None:
        replacement = occurrence.callee + replacement
    return Edit(start, end, replacement)
