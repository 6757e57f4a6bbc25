"""Convert pasted build script snippets into the project's Kotlin DSL style."""

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from .formats import DependencyFormat, classify, reformat_edit, render_call
from .logging import get_logger
from .models import CallOccurrence, DependencyDeclaration, Edit, Expression, PluginDeclaration
from .plugins import find_plugin_declarations, render_plugin
from .rewrite import apply_all, drop_overlapping
from .scanner import find_blocks, find_calls, find_dependency_calls, mask_literals
from .templates import parse_expression, skip_comment, skip_string

logger = get_logger(__name__)

# implementation 'group:name:version'  /  implementation("group:name")
GROOVY_NOTATION = re.compile(
    r"""(?P<config>\b[A-Za-z_]\w*)[ \t]*\(?[ \t]*(?P<q>['"])"""
    r"""(?P<group>[^'"\s:/][^'"\s:]*):(?P<name>[^'"\s:/][^'"\s:]*)(?::(?P<version>[^'"\s:]+))?(?P=q)(?:[ \t]*\))?"""
)

# Keys whose string value is a location, never a dependency
NON_DEPENDENCY_KEYS = frozenset({"from", "setUrl", "uri", "url"})

# implementation group: 'group', name: 'name', version: 'version'
GROOVY_MAP = re.compile(
    r"""(?P<config>\b[A-Za-z_]\w*)[ \t]*\(?[ \t]*"""
    r"""group[ \t]*:[ \t]*(?P<q1>['"])(?P<group>[^'"]+)(?P=q1)[ \t]*,[ \t]*"""
    r"""(?:name|artifact)[ \t]*:[ \t]*(?P<q2>['"])(?P<name>[^'"]+)(?P=q2)"""
    r"""(?:[ \t]*,[ \t]*version[ \t]*:[ \t]*(?P<q3>['"])(?P<version>[^'"]+)(?P=q3))?(?:[ \t]*\))?"""
)


@dataclass
class PasteResult:
    """Outcome of converting a pasted snippet."""

    original: str
    text: str
    dependencies: list[DependencyDeclaration] = field(default_factory=list)
    plugins: list[PluginDeclaration] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.text != self.original


def _groovy_value(value: str, quote: str) -> Expression:
    if quote == '"':
        return parse_expression(f'"{value}"')
    # single quoted Groovy strings never interpolate
    return Expression.literal(value.replace("$", "\\$"))


def _groovy_declaration(match: re.Match) -> DependencyDeclaration:
    quotes = match.groupdict()
    group_quote = quotes.get("q") or quotes.get("q1")
    name_quote = quotes.get("q") or quotes.get("q2")
    version_quote = quotes.get("q") or quotes.get("q3")
    version = match.group("version")
    return DependencyDeclaration(
        group=_groovy_value(match.group("group"), group_quote),
        name=_groovy_value(match.group("name"), name_quote),
        version=_groovy_value(version, version_quote) if version else None,
    )


def convert_single_quotes(text: str) -> str:
    """Turn Groovy single quoted strings into Kotlin double quoted strings.

    Three character literals such as ``'a'`` are left alone since they are
    valid Kotlin characters.
    """
    edits: list[Edit] = []
    i = 0
    while i < len(text):
        after_comment = skip_comment(text, i)
        if after_comment != i:
            i = after_comment
            continue
        char = text[i]
        if char == '"':
            i = skip_string(text, i)
            continue
        if char == "'":
            end = skip_string(text, i)
            literal = text[i:end]
            if len(literal) >= 2 and literal.endswith("'") and len(literal) != 3:
                inner = literal[1:-1].replace("\\'", "'").replace('"', '\\"').replace("$", "\\$")
                edits.append(Edit(i, end, f'"{inner}"'))
            i = end
            continue
        i += 1
    return apply_all(text, edits)


def convert_groovy(text: str, target: DependencyFormat, convert_quotes: bool = True) -> PasteResult:
    """Rewrite a pasted Groovy DSL snippet into Kotlin DSL.

    Every recognized dependency is rendered in the ``target`` format and every
    plugin request through ``render_plugin``. Text without recognizable
    declarations comes back unchanged apart from quote conversion.
    """
    edits: list[Edit] = []
    dependencies: list[DependencyDeclaration] = []
    plugins: list[PluginDeclaration] = []

    for pattern in (GROOVY_MAP, GROOVY_NOTATION):
        for match in pattern.finditer(text):
            config = match.group("config")
            if config == "id":
                continue  # plugin request, handled below
            if config in NON_DEPENDENCY_KEYS:
                continue
            declaration = _groovy_declaration(match)
            dependencies.append(declaration)
            edits.append(Edit(match.start(), match.end(), render_call(match.group("config"), declaration, target)))

    for plugin in find_plugin_declarations(text):
        plugins.append(plugin)
        edits.append(Edit(plugin.start, plugin.end, render_plugin(plugin)))

    edits = [edit for edit in drop_overlapping(edits) if text[edit.start : edit.end] != edit.replacement]
    logger.debug("Converting %d Groovy declarations", len(edits))

    converted = apply_all(text, edits)
    if convert_quotes:
        converted = convert_single_quotes(converted)
    return PasteResult(original=text, text=converted, dependencies=dependencies, plugins=plugins)


def convert_kotlin(
    text: str,
    target: DependencyFormat,
    accept: Callable[[CallOccurrence], bool] | None = None,
) -> PasteResult:
    """Re-format pasted Kotlin DSL dependency calls into the ``target`` format.

    Calls already in the target format, calls that cannot be converted and
    calls rejected by ``accept`` are left untouched.
    """
    masked = mask_literals(text)
    if find_blocks(text, "dependencies", masked=masked):
        calls = find_dependency_calls(text)
    else:
        calls = find_calls(text, masked=masked)

    edits: list[Edit] = []
    dependencies: list[DependencyDeclaration] = []
    for call in calls:
        if accept is not None and not accept(call):
            continue
        edit = reformat_edit(call, target)
        if edit is None:
            continue
        edits.append(edit)
        dependencies.append(classify(call).extract(call))

    return PasteResult(original=text, text=apply_all(text, edits), dependencies=dependencies)
