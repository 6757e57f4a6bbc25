"""String template parsing and low level lexing helpers for build script text."""

import re

from .models import Expression, TemplateEntry

IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_CLOSERS = {"(": ")", "{": "}", "[": "]"}


def skip_comment(text: str, index: int) -> int:
    """Return the index just after a comment starting at ``index``, or ``index`` if none."""
    if text.startswith("//", index):
        newline = text.find("\n", index)
        return len(text) if newline == -1 else newline
    if text.startswith("/*", index):
        close = text.find("*/", index + 2)
        return len(text) if close == -1 else close + 2
    return index


def skip_string(text: str, index: int) -> int:
    """Return the index just after the string literal starting at ``index``.

    Handles ``"..."`` with ``${...}`` templates, ``\"\"\"raw\"\"\"`` strings and
    single quoted literals. An unterminated literal ends at the line break.
    """
    quote = text[index]
    if text.startswith('"""', index):
        close = text.find('"""', index + 3)
        return len(text) if close == -1 else close + 3

    i = index + 1
    while i < len(text):
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == "\n":
            return i
        if char == quote:
            return i + 1
        if quote == '"' and text.startswith("${", i):
            close = find_closing(text, i + 1)
            if close is None:
                return len(text)
            i = close + 1
            continue
        i += 1
    return len(text)


def find_closing(text: str, index: int) -> int | None:
    """Find the bracket matching the opener at ``index``.

    Brackets inside string literals and comments are ignored.

    Returns:
        Index of the closing bracket, or None if it is never closed
    """
    if text[index] not in _CLOSERS:
        raise ValueError(f"No opening bracket at offset {index}")

    depth = 0
    i = index
    while i < len(text):
        after_comment = skip_comment(text, i)
        if after_comment != i:
            i = after_comment
            continue

        char = text[i]
        if char in "\"'":
            i = skip_string(text, i)
            continue
        if char in _CLOSERS:
            depth += 1
        elif char in _CLOSERS.values():
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def parse_template(text: str) -> tuple[TemplateEntry, ...] | None:
    """Split a double quoted string literal into literal and interpolated segments.

    Returns:
        The segments, or None when ``text`` is not exactly one string literal
    """
    if len(text) < 2 or text[0] != '"' or text[-1] != '"' or text.startswith('"""'):
        return None

    entries: list[TemplateEntry] = []
    literal: list[str] = []
    end = len(text) - 1

    def flush() -> None:
        if literal:
            entries.append(TemplateEntry("".join(literal)))
            literal.clear()

    i = 1
    while i < end:
        char = text[i]
        if char == "\\":
            if i + 1 >= end:
                return None  # closing quote is escaped
            literal.append(text[i : i + 2])
            i += 2
            continue
        if char == '"':
            return None  # e.g. "a" + "b"
        if char == "$" and i + 1 < end:
            if text[i + 1] == "{":
                close = find_closing(text, i + 1)
                if close is None or close >= end:
                    return None
                flush()
                entries.append(TemplateEntry(text[i : close + 1], interpolated=True))
                i = close + 1
                continue
            match = IDENTIFIER.match(text, i + 1)
            if match and match.end() <= end:
                flush()
                entries.append(TemplateEntry(text[i : match.end()], interpolated=True))
                i = match.end()
                continue
        literal.append(char)
        i += 1

    flush()
    return tuple(entries)


def parse_expression(source: str) -> Expression:
    """Parse the source text of a single argument expression."""
    text = source.strip()
    return Expression(text=text, entries=parse_template(text))


def template_from_entries(entries: list[TemplateEntry] | tuple[TemplateEntry, ...]) -> Expression:
    """Build a string template expression from segments."""
    merged: list[TemplateEntry] = []
    for entry in entries:
        if not entry.text:
            continue
        if merged and not entry.interpolated and not merged[-1].interpolated:
            merged[-1] = TemplateEntry(merged[-1].text + entry.text)
        else:
            merged.append(entry)
    body = "".join(entry.text for entry in merged)
    return Expression(text=f'"{body}"', entries=tuple(merged))


def template_body(expression: Expression) -> str:
    """Text that embeds ``expression`` inside another string template."""
    if expression.is_string:
        return expression.text[1:-1]
    return "${" + expression.text + "}"
