"""Deterministic lexical scanning helpers for the JS/TS grammar variants."""

from __future__ import annotations

import re
from dataclasses import dataclass

_REGEX_PRECEDING_CHARS = frozenset("(,=:[!&|?{};+-*%~^")
_REGEX_PRECEDING_KEYWORD_RE = re.compile(
    r"(?<![\w$])(?:return|typeof|case|do|else|in|of|void|yield|await|delete|throw|instanceof)\s*$"
)


@dataclass(slots=True, frozen=True)
class LexicalRules:
    """Configurable lexical markers used while masking non-code text."""

    line_comment_prefixes: tuple[str, ...] = ("//",)
    block_comment_pairs: tuple[tuple[str, str], ...] = (("/*", "*/"),)
    string_delimiters: tuple[str, ...] = ("'", '"', "`")
    multiline_string_delimiters: tuple[str, ...] = ("`",)
    interpolation_open: str = "${"
    escape_char: str = "\\"
    regex_literals: bool = True
    # `/>` closes a self-closing tag instead of starting a regex literal
    markup: bool = False


@dataclass(slots=True, frozen=True)
class MaskedSource:
    """Two offset-preserving views of one source text.

    ``code`` blanks comments, string literals and regex literals.
    ``literals`` blanks comments only, so string contents stay readable at
    the same offsets as in ``code``.
    """

    code: str
    literals: str
    unterminated: str | None


@dataclass(slots=True, frozen=True)
class BraceScanResult:
    """Brace depth at every offset plus balance counts."""

    depths: tuple[int, ...]
    unmatched_closing: int
    unclosed_opening: int


def mask_source(text: str, rules: LexicalRules | None = None) -> MaskedSource:
    """Mask comments, strings and regex literals while preserving offsets."""
    active_rules = rules or LexicalRules()
    line_prefixes = _longest_first(active_rules.line_comment_prefixes)
    block_pairs = tuple(
        sorted(
            ((start, end) for start, end in active_rules.block_comment_pairs if start and end),
            key=lambda pair: len(pair[0]),
            reverse=True,
        )
    )
    string_delimiters = _longest_first(active_rules.string_delimiters)
    multiline = set(active_rules.multiline_string_delimiters)
    interpolation = active_rules.interpolation_open

    code = list(text)
    literals = list(text)
    length = len(text)
    index = 0
    state: tuple[str, str] | None = None
    in_regex_class = False
    # brace counters for template interpolations currently open, innermost last
    template_stack: list[int] = []

    def blank(start: int, count: int, *, keep_literal: bool) -> None:
        for offset in range(count):
            position = start + offset
            if text[position] == "\n":
                continue
            code[position] = " "
            if not keep_literal:
                literals[position] = " "

    while index < length:
        char = text[index]
        if state is None:
            line_marker = _match_any(text, index, line_prefixes)
            if line_marker is not None:
                blank(index, len(line_marker), keep_literal=False)
                state = ("line_comment", line_marker)
                index += len(line_marker)
                continue

            block_marker = _match_block_start(text, index, block_pairs)
            if block_marker is not None:
                start_marker, end_marker = block_marker
                blank(index, len(start_marker), keep_literal=False)
                state = ("block_comment", end_marker)
                index += len(start_marker)
                continue

            string_marker = _match_any(text, index, string_delimiters)
            if string_marker is not None:
                blank(index, len(string_marker), keep_literal=True)
                state = ("string", string_marker)
                index += len(string_marker)
                continue

            if (
                char == "/"
                and active_rules.regex_literals
                and not (active_rules.markup and text.startswith("/>", index))
                and _regex_may_start(text, code, index)
            ):
                blank(index, 1, keep_literal=True)
                state = ("regex", "/")
                in_regex_class = False
                index += 1
                continue

            if template_stack:
                if char == "{":
                    template_stack[-1] += 1
                elif char == "}":
                    if template_stack[-1] == 0:
                        template_stack.pop()
                        blank(index, 1, keep_literal=True)
                        state = ("string", "`")
                        index += 1
                        continue
                    template_stack[-1] -= 1

            index += 1
            continue

        mode, marker = state
        if mode == "line_comment":
            if char == "\n":
                state = None
            else:
                blank(index, 1, keep_literal=False)
            index += 1
            continue

        if mode == "block_comment":
            if text.startswith(marker, index):
                blank(index, len(marker), keep_literal=False)
                state = None
                index += len(marker)
            else:
                blank(index, 1, keep_literal=False)
                index += 1
            continue

        if mode == "string":
            if text.startswith(marker, index) and not _is_escaped(
                text, index, marker, active_rules.escape_char
            ):
                blank(index, len(marker), keep_literal=True)
                state = None
                index += len(marker)
                continue
            if (
                marker in multiline
                and interpolation
                and text.startswith(interpolation, index)
                and not _is_escaped(text, index, interpolation, active_rules.escape_char)
            ):
                blank(index, len(interpolation), keep_literal=True)
                template_stack.append(0)
                state = None
                index += len(interpolation)
                continue
            if char == "\n" and marker not in multiline:
                state = None
                index += 1
                continue
            blank(index, 1, keep_literal=True)
            index += 1
            continue

        # regex literal
        if char == "\n":
            state = None
            index += 1
            continue
        blank(index, 1, keep_literal=True)
        if char == active_rules.escape_char:
            if index + 1 < length and text[index + 1] != "\n":
                blank(index + 1, 1, keep_literal=True)
                index += 2
                continue
        elif char == "[":
            in_regex_class = True
        elif char == "]":
            in_regex_class = False
        elif char == "/" and not in_regex_class:
            state = None
        index += 1

    unterminated: str | None = None
    if state is not None and state[0] == "block_comment":
        unterminated = "block_comment"
    elif state is not None and state[0] == "string" and state[1] in multiline:
        unterminated = "template_literal"
    elif template_stack:
        unterminated = "template_literal"
    return MaskedSource(code="".join(code), literals="".join(literals), unterminated=unterminated)


def scan_braces(masked_text: str) -> BraceScanResult:
    """Track brace depth per character offset and count unbalanced braces."""
    depths: list[int] = []
    depth = 0
    unmatched_closing = 0
    for char in masked_text:
        if char == "}":
            if depth == 0:
                unmatched_closing += 1
            else:
                depth -= 1
        depths.append(depth)
        if char == "{":
            depth += 1
    return BraceScanResult(
        depths=tuple(depths),
        unmatched_closing=unmatched_closing,
        unclosed_opening=depth,
    )


def _longest_first(markers: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(sorted((marker for marker in markers if marker), key=len, reverse=True))


def _regex_may_start(text: str, code: list[str], index: int) -> bool:
    if text.startswith("//", index) or text.startswith("/*", index):
        return False
    cursor = index - 1
    while cursor >= 0 and text[cursor] in " \t\r\n":
        cursor -= 1
    if cursor < 0:
        return True
    if text[cursor] in _REGEX_PRECEDING_CHARS:
        return True
    window = "".join(code[max(0, cursor - 11) : cursor + 1])
    return _REGEX_PRECEDING_KEYWORD_RE.search(window) is not None


def _match_any(text: str, index: int, markers: tuple[str, ...]) -> str | None:
    for marker in markers:
        if text.startswith(marker, index):
            return marker
    return None


def _match_block_start(
    text: str,
    index: int,
    pairs: tuple[tuple[str, str], ...],
) -> tuple[str, str] | None:
    for start, end in pairs:
        if text.startswith(start, index):
            return start, end
    return None


def _is_escaped(text: str, index: int, marker: str, escape_char: str) -> bool:
    if len(marker) > 1 and marker != "${":
        return False
    backslashes = 0
    cursor = index - 1
    while cursor >= 0 and text[cursor] == escape_char:
        backslashes += 1
        cursor -= 1
    return backslashes % 2 == 1
