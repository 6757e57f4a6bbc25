"""Locate blocks and calls in Gradle Kotlin DSL text.

This is a narrow scanner for the dependency sublanguage, not a Kotlin parser.
Structure is searched on a masked copy of the text in which comments and the
contents of string literals are blanked out, so brackets and commas inside
literals never confuse it. Offsets are identical in both copies.
"""

import re
from dataclasses import dataclass

from .formats import classify
from .models import Argument, CallOccurrence
from .templates import find_closing, parse_expression, skip_comment, skip_string

STATEMENT_CALL = re.compile(
    r"(?m)(?:^|(?<=[{;]))[ \t]*"
    r"(?!(?:if|for|while|when|catch|return|throw)\b)"  # control flow, not calls
    r"(?P<callee>[A-Za-z_][A-Za-z0-9_]*)[ \t]*\("
)
BLOCK_START = re.compile(r"\b(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*\{")
NAMED_ARGUMENT = re.compile(r"\s*(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*=(?!=)\s*")

# Statement-level calls in a dependencies block that do not declare a dependency
NON_DECLARATION_CALLS = frozenset(
    {
        "add",
        "artifactTypes",
        "attributesSchema",
        "because",
        "components",
        "constraints",
        "exclude",
        "modules",
        "registerTransform",
        "requireCapability",
    }
)


@dataclass(frozen=True)
class Block:
    """A ``name { ... }`` block; ``open`` and ``close`` are the brace offsets."""

    name: str
    start: int
    open: int
    close: int

    def contains(self, offset: int) -> bool:
        return self.open < offset <= self.close


def mask_literals(text: str) -> str:
    """Blank out comments and string contents, keeping offsets and line breaks."""
    chars = list(text)

    def blank(start: int, end: int) -> None:
        for index in range(start, end):
            if chars[index] != "\n":
                chars[index] = " "

    i = 0
    while i < len(text):
        after_comment = skip_comment(text, i)
        if after_comment != i:
            blank(i, after_comment)
            i = after_comment
            continue
        if text[i] in "\"'":
            end = skip_string(text, i)
            # keep the quotes so literals stay recognizable as arguments
            closed = end - 1 > i and text[end - 1] == text[i]
            blank(i + 1, end - 1 if closed else end)
            i = end
            continue
        i += 1
    return "".join(chars)


def split_arguments(masked: str, start: int, end: int) -> list[tuple[int, int]]:
    """Split ``masked[start:end]`` at top-level commas into trimmed spans."""
    spans: list[tuple[int, int]] = []
    segment_start = start
    i = start
    while i < end:
        char = masked[i]
        if char in "({[":
            close = find_closing(masked, i)
            i = end if close is None else close + 1
            continue
        if char == ",":
            spans.append((segment_start, i))
            segment_start = i + 1
        i += 1
    spans.append((segment_start, end))

    trimmed = []
    for span_start, span_end in spans:
        while span_start < span_end and masked[span_start].isspace():
            span_start += 1
        while span_end > span_start and masked[span_end - 1].isspace():
            span_end -= 1
        if span_start < span_end:
            trimmed.append((span_start, span_end))
    return trimmed


def _parse_argument(text: str, masked: str, start: int, end: int) -> Argument:
    named = NAMED_ARGUMENT.match(masked, start, end)
    if named:
        return Argument(expression=parse_expression(text[named.end() : end]), name=named.group("name"))
    return Argument(expression=parse_expression(text[start:end]))


def find_calls(text: str, start: int = 0, end: int | None = None, masked: str | None = None) -> list[CallOccurrence]:
    """Find statement-level calls ``callee(args)`` between ``start`` and ``end``.

    A ``{ ... }`` lambda directly after the closing parenthesis is part of the
    call. Calls nested inside an earlier call are not reported separately.
    """
    if masked is None:
        masked = mask_literals(text)
    if end is None:
        end = len(text)

    calls: list[CallOccurrence] = []
    position = start
    for match in STATEMENT_CALL.finditer(masked, start, end):
        if match.start() < position:
            continue

        open_index = match.end() - 1
        close = find_closing(masked, open_index)
        if close is None or close >= end:
            continue

        arguments = tuple(
            _parse_argument(text, masked, span_start, span_end)
            for span_start, span_end in split_arguments(masked, open_index + 1, close)
        )

        call_end = close + 1
        has_lambda = False
        lookahead = call_end
        while lookahead < end and masked[lookahead] in " \t":
            lookahead += 1
        if lookahead < end and masked[lookahead] == "{":
            lambda_close = find_closing(masked, lookahead)
            if lambda_close is not None and lambda_close < end:
                has_lambda = True
                call_end = lambda_close + 1

        calls.append(
            CallOccurrence(
                callee=match.group("callee"),
                arguments=arguments,
                start=match.start("callee"),
                end=call_end,
                has_trailing_lambda=has_lambda,
                arguments_start=open_index,
                arguments_end=close + 1,
            )
        )
        position = call_end
    return calls


def find_blocks(text: str, name: str | None = None, masked: str | None = None) -> list[Block]:
    """Find ``name { ... }`` blocks (all named blocks when ``name`` is None)."""
    if masked is None:
        masked = mask_literals(text)

    blocks = []
    for match in BLOCK_START.finditer(masked):
        if name is not None and match.group("name") != name:
            continue
        open_index = match.end() - 1
        close = find_closing(masked, open_index)
        if close is None:
            continue
        blocks.append(Block(match.group("name"), match.start(), open_index, close))
    return blocks


def find_dependency_calls(text: str) -> list[CallOccurrence]:
    """Calls written inside ``dependencies { }`` blocks that may declare a dependency."""
    masked = mask_literals(text)
    calls: list[CallOccurrence] = []
    seen: set[int] = set()

    def scan(start: int, end: int) -> None:
        for call in find_calls(text, start, end, masked=masked):
            if call.start in seen:
                continue
            seen.add(call.start)
            declares = call.callee not in NON_DECLARATION_CALLS and classify(call) is not None
            if call.callee not in NON_DECLARATION_CALLS:
                calls.append(call)
            if call.has_trailing_lambda and not declares:
                # with(x) { ... } and similar wrap declarations in a lambda
                lambda_open = masked.index("{", call.arguments_end, call.end)
                scan(lambda_open + 1, call.end - 1)

    for block in find_blocks(text, "dependencies", masked=masked):
        scan(block.open + 1, block.close)
    calls.sort(key=lambda call: call.start)
    return calls


def enclosing_blocks(text: str, offset: int) -> list[str]:
    """Names of the blocks containing ``offset``, outermost first."""
    containing = [block for block in find_blocks(text) if block.contains(offset)]
    containing.sort(key=lambda block: block.open)
    return [block.name for block in containing]


def in_block(text: str, offset: int, name: str) -> bool:
    """Whether ``offset`` lies inside a ``name { }`` block."""
    return name in enclosing_blocks(text, offset)
