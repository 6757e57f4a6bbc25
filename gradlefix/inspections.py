"""Diagnostics over Gradle Kotlin DSL build scripts."""

import re
from dataclasses import dataclass
from enum import Enum

from packaging.version import InvalidVersion, Version

from .formats import DependencyFormat, classify, reformat_edit
from .logging import get_logger
from .models import CallOccurrence, DependencyDeclaration, Edit
from .plugins import builtin_name, find_plugin_declarations, kotlin_module, render_plugin
from .rewrite import apply_all, drop_overlapping
from .scanner import find_blocks, find_dependency_calls, mask_literals

logger = get_logger(__name__)

KOTLIN_GROUP = "org.jetbrains.kotlin"
KOTLIN_STDLIB_IMPLICIT_SINCE = Version("1.4")

DEPRECATED_CONFIGURATIONS = {
    "compile": "implementation",
    "testCompile": "testImplementation",
    "runtime": "runtimeOnly",
}

# kotlin("jvm") version "1.9.0"
KOTLIN_PLUGIN = re.compile(r'\bkotlin\(\s*"(?P<module>[\w.\-]+)"\s*\)\s*version\s*"(?P<version>[^"$]+)"')

# kotlin("stdlib", "1.9.0") inside a dependency call
KOTLIN_DEPENDENCY = re.compile(
    r"""\bkotlin\(\s*"(?P<module>[\w.\-]+)"(?:\s*,\s*"(?P<version>[^"$]+)")?\s*\)"""
)


class Level(str, Enum):
    WARNING = "warning"
    WEAK_WARNING = "weak_warning"


@dataclass(frozen=True)
class Problem:
    """A diagnostic with its source span and an optional quick fix."""

    code: str
    message: str
    start: int
    end: int
    level: Level = Level.WARNING
    fix: Edit | None = None


def kotlin_plugin_version(text: str) -> str | None:
    """Version of the Kotlin Gradle plugin requested in ``plugins { }``, if any."""
    masked = mask_literals(text)
    for block in find_blocks(text, "plugins", masked=masked):
        match = KOTLIN_PLUGIN.search(text, block.open + 1, block.close)
        if match and masked[match.start()] == text[match.start()]:
            return match.group("version")
        for plugin in find_plugin_declarations(text, block.open + 1, block.close):
            if kotlin_module(plugin.id) is not None and plugin.version:
                return plugin.version
    return None


def _declaration(call: CallOccurrence) -> DependencyDeclaration | None:
    fmt = classify(call)
    if fmt is None or not fmt.is_convertible(call):
        return None
    return fmt.extract(call)


def _line_removal(text: str, start: int, end: int) -> Edit:
    """Edit deleting ``[start, end)``, or its whole line when nothing else is on it."""
    line_start = text.rfind("\n", 0, start) + 1
    line_end = text.find("\n", end)
    line_end = len(text) if line_end == -1 else line_end + 1
    if not text[line_start:start].strip() and not text[end:line_end].strip():
        return Edit(line_start, line_end, "")
    return Edit(start, end, "")


def check_formats(text: str, preferred: DependencyFormat) -> list[Problem]:
    """Report dependency calls not written in the ``preferred`` format."""
    problems = []
    for call in find_dependency_calls(text):
        current = classify(call)
        if current is None or current is preferred:
            continue
        fix = reformat_edit(call, preferred)
        if fix is None:
            message = (
                f"{current.human_name} declaration cannot be converted to {preferred.human_name}; "
                "change the preferred format instead"
            )
        else:
            message = f"{current.human_name} declaration, project prefers {preferred.human_name}"
        problems.append(Problem("inconsistent-format", message, call.start, call.end, fix=fix))
    return problems


def check_deprecated_configurations(text: str) -> list[Problem]:
    problems = []
    for call in find_dependency_calls(text):
        replacement = DEPRECATED_CONFIGURATIONS.get(call.callee)
        if replacement is None:
            continue
        callee_end = call.start + len(call.callee)
        problems.append(
            Problem(
                "deprecated-configuration",
                f"'{call.callee}' is deprecated, use '{replacement}'",
                call.start,
                callee_end,
                fix=Edit(call.start, callee_end, replacement),
            )
        )
    return problems


def check_kotlin_coordinates(text: str, plugin_version: str | None = None) -> list[Problem]:
    """Report ``org.jetbrains.kotlin:kotlin-*`` coordinates that ``kotlin()`` can express."""
    problems = []
    for call in find_dependency_calls(text):
        declaration = _declaration(call)
        if declaration is None or call.arguments_start is None:
            continue
        group, name = declaration.group.value, declaration.name.value
        if group != KOTLIN_GROUP or not name or not name.startswith("kotlin-"):
            continue

        module = name[len("kotlin-") :]
        version = declaration.version
        if version is not None and plugin_version is not None and version.value == plugin_version:
            version = None
        arguments = f'"{module}"' if version is None else f'"{module}", {version.text}'
        problems.append(
            Problem(
                "kotlin-coordinates",
                f"Kotlin module can be declared as kotlin(\"{module}\")",
                call.start,
                call.end,
                level=Level.WEAK_WARNING,
                fix=Edit(call.arguments_start, call.arguments_end, f"(kotlin({arguments}))"),
            )
        )
    return problems


def check_redundant_kotlin_version(text: str, plugin_version: str | None) -> list[Problem]:
    """Report ``kotlin("m", "v")`` where ``v`` repeats the Kotlin plugin version."""
    if plugin_version is None:
        return []

    masked = mask_literals(text)
    problems = []
    for block in find_blocks(text, "dependencies", masked=masked):
        for match in KOTLIN_DEPENDENCY.finditer(text, block.open + 1, block.close):
            if masked[match.start()] != text[match.start()]:
                continue  # inside a comment or string
            if match.group("version") != plugin_version:
                continue
            # drop `, "v"` keeping the closing quote of the module and the paren
            removal = Edit(match.end("module") + 1, match.end() - 1, "")
            problems.append(
                Problem(
                    "redundant-kotlin-version",
                    "Version is already provided by the Kotlin plugin",
                    match.start("version") - 1,
                    match.end("version") + 1,
                    level=Level.WEAK_WARNING,
                    fix=removal,
                )
            )
    return problems


def _is_stdlib(call: CallOccurrence) -> bool:
    declaration = _declaration(call)
    if declaration is not None:
        name = declaration.name.value or ""
        return declaration.group.value == KOTLIN_GROUP and name.startswith("kotlin-stdlib")
    if len(call.arguments) == 1:
        match = KOTLIN_DEPENDENCY.fullmatch(call.arguments[0].expression.text)
        return bool(match) and match.group("module").startswith("stdlib")
    return False


def check_explicit_stdlib(text: str, plugin_version: str | None) -> list[Problem]:
    """Report kotlin-stdlib dependencies the Kotlin plugin already adds."""
    if plugin_version is None:
        return []
    try:
        if Version(plugin_version) < KOTLIN_STDLIB_IMPLICIT_SINCE:
            return []
    except InvalidVersion:
        logger.debug("Unrecognized Kotlin plugin version %s", plugin_version)
        return []

    return [
        Problem(
            "explicit-stdlib",
            f"Kotlin {plugin_version} adds the standard library automatically",
            call.start,
            call.end,
            fix=_line_removal(text, call.start, call.end),
        )
        for call in find_dependency_calls(text)
        if _is_stdlib(call)
    ]


def check_plugin_ids(text: str) -> list[Problem]:
    """Report ``id(...)`` requests for plugins that have a dedicated accessor."""
    problems = []
    masked = mask_literals(text)
    for block in find_blocks(text, "plugins", masked=masked):
        for plugin in find_plugin_declarations(text, block.open + 1, block.close):
            if masked[plugin.start] != text[plugin.start]:
                continue
            if builtin_name(plugin.id) is not None:
                code, message = "builtin-plugin-id", f"Built-in plugin '{plugin.id}' can be applied without id()"
            elif kotlin_module(plugin.id) is not None:
                code, message = "kotlin-plugin-id", f"Kotlin plugin '{plugin.id}' can be applied with kotlin()"
            else:
                continue
            problems.append(
                Problem(
                    code,
                    message,
                    plugin.start,
                    plugin.end,
                    level=Level.WEAK_WARNING,
                    fix=Edit(plugin.start, plugin.end, render_plugin(plugin)),
                )
            )
    return problems


def inspect(text: str, preferred: DependencyFormat) -> list[Problem]:
    """Run every inspection over a build script.

    Args:
        text: Kotlin DSL build script content
        preferred: The project's preferred dependency format

    Returns:
        Problems sorted by start offset
    """
    plugin_version = kotlin_plugin_version(text)
    problems = [
        *check_formats(text, preferred),
        *check_deprecated_configurations(text),
        *check_kotlin_coordinates(text, plugin_version),
        *check_redundant_kotlin_version(text, plugin_version),
        *check_explicit_stdlib(text, plugin_version),
        *check_plugin_ids(text),
    ]
    problems.sort(key=lambda problem: (problem.start, problem.end))
    logger.debug("Found %d problems", len(problems))
    return problems


def fix_all(text: str, problems: list[Problem]) -> str:
    """Apply every available quick fix.

    When fixes overlap only the first one is applied; running the
    inspections again picks up the rest.
    """
    edits = drop_overlapping(problem.fix for problem in problems if problem.fix is not None)
    return apply_all(text, edits)
