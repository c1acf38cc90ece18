"""Lexical TypeScript/JavaScript extractor for import and export facts."""

from __future__ import annotations

import re

from relindex.adapters.base import ExportFacts, GrammarVariant, ModuleFacts
from relindex.adapters.lexical import LexicalRules, mask_source, scan_braces
from relindex.errors import SourceParseError

_NAME = r"[A-Za-z_$][\w$]*"

TYPESCRIPT = GrammarVariant(name="typescript", typed=True, markup=False)
TSX = GrammarVariant(name="tsx", typed=True, markup=True)
JAVASCRIPT = GrammarVariant(name="javascript", typed=False, markup=False)
JSX = GrammarVariant(name="jsx", typed=False, markup=True)

_VARIANTS_BY_SUFFIX = {
    ".ts": TYPESCRIPT,
    ".tsx": TSX,
    ".js": JAVASCRIPT,
    ".mjs": JAVASCRIPT,
    ".cjs": JAVASCRIPT,
    ".jsx": JSX,
}

_IMPORT_KEYWORD_RE = re.compile(r"(?<![\w$.])import(?![\w$])")
_EXPORT_KEYWORD_RE = re.compile(r"(?<![\w$.])export(?=[\s=*{])")
_DYNAMIC_CALL_RE = re.compile(r"(?<![\w$.])(?:import|require)\s*\(")

_SIDE_EFFECT_IMPORT_RE = re.compile(r"import\s*(['\"])([^'\"\n]+)\1")
_IMPORT_FROM_RE = re.compile(r"import\s+[\w$*{}\s,]+?\s*from\s*(['\"])([^'\"\n]+)\1")
_EXPORT_FROM_RE = re.compile(
    rf"export\s+(?:type\s+)?(?:\*(?:\s+as\s+{_NAME})?|\{{[^}}]*\}})\s*from\s*(['\"])([^'\"\n]+)\1"
)
_CALL_ARGUMENT_RE = re.compile(r"\(\s*(['\"])([^'\"\n]*)\1\s*[,)]")

_DEFAULT_RE = re.compile(r"export\s+default(?![\w$])")
_DEFAULT_DECLARATION_RE = re.compile(
    r"export\s+default\s+(?:(?:async\s+)?function(?![\w$])\s*\*?"
    r"|(?:abstract\s+)?class(?![\w$])|interface(?![\w$]))"
    rf"\s*(?!extends(?![\w$]))({_NAME})?"
)
_EXPORT_ASSIGNMENT_RE = re.compile(r"export\s*=(?!=)")
_DECLARATOR_RE = re.compile(rf"\s*({_NAME})\s*!?\s*(?:[=:]|$)")
_CONTINUATION_CHARS = frozenset("=,+-*/%&|^!?:<>.([{")
_LEADING_CONTINUATION_CHARS = frozenset(",=.?:+-*/%&|)]}")

# JSX text runs that carry quote characters, e.g. <p>Don't panic</p>.
_JSX_TEXT_RE = re.compile(
    r"(<[A-Za-z][\w$.:-]*(?:\s[^<>]*?)?>|</[\w$.:-]*>|<>)"
    r"([^<>{}()=;\n]*['\"`][^<>{}()=;\n]*)"
)
# The same runs following an embedded expression, e.g. {user.name}'s settings {.
_JSX_EXPRESSION_TEXT_RE = re.compile(r"(\})([^<>{}()=;\n]*['\"`][^<>{}()=;\n]*)(?=[<{])")
_MARKUP_RULES = LexicalRules(markup=True)


def _declaration_patterns(variant: GrammarVariant) -> tuple[re.Pattern[str], ...]:
    declare = r"(?:declare\s+)?" if variant.typed else ""
    abstract = r"(?:abstract\s+)?" if variant.typed else ""
    patterns = [
        rf"export\s+{declare}(?:async\s+)?function(?![\w$])\s*\*?\s*({_NAME})",
        rf"export\s+{declare}{abstract}class\s+({_NAME})",
    ]
    if variant.typed:
        patterns.extend(
            [
                rf"export\s+{declare}interface\s+({_NAME})",
                rf"export\s+{declare}type\s+({_NAME})\s*[=<]",
                rf"export\s+{declare}(?:const\s+)?enum\s+({_NAME})",
            ]
        )
    return tuple(re.compile(pattern) for pattern in patterns)


_VARIABLE_PATTERNS = {
    True: re.compile(r"export\s+(?:declare\s+)?(?:const|let|var)\s+"),
    False: re.compile(r"export\s+(?:const|let|var)\s+"),
}
_DECLARATION_PATTERNS = {
    variant.name: _declaration_patterns(variant) for variant in (TYPESCRIPT, TSX, JAVASCRIPT, JSX)
}


class TypeScriptJavaScriptExtractor:
    """Deterministic lexical extractor for TypeScript and JavaScript source files."""

    name = "ts_js_lexical"

    def variant_for(self, path: str) -> GrammarVariant:
        """Select the grammar variant for a path; unknown suffixes parse as TypeScript."""
        lowered = path.lower()
        for suffix, variant in _VARIANTS_BY_SUFFIX.items():
            if lowered.endswith(suffix):
                return variant
        return TYPESCRIPT

    def extract(self, path: str, text: str) -> ModuleFacts:
        """Extract import specifiers and export facts from one file's text."""
        variant = self.variant_for(path)
        source = _blank_jsx_text(text) if variant.markup else text
        masked = mask_source(source, _MARKUP_RULES if variant.markup else None)
        if masked.unterminated is not None:
            raise SourceParseError(f"{path}: unterminated {masked.unterminated.replace('_', ' ')}")
        braces = scan_braces(masked.code)
        if braces.unmatched_closing or braces.unclosed_opening:
            raise SourceParseError(
                f"{path}: unbalanced braces ({braces.unclosed_opening} unclosed, "
                f"{braces.unmatched_closing} unmatched)"
            )

        code = masked.code
        literals = masked.literals
        depths = braces.depths

        static: set[str] = set()
        for match in _IMPORT_KEYWORD_RE.finditer(code):
            position = match.start()
            if depths[position] != 0:
                continue
            following = _next_significant(code, match.end())
            if following in {"(", "."}:
                continue
            for pattern in (_SIDE_EFFECT_IMPORT_RE, _IMPORT_FROM_RE):
                found = pattern.match(literals, position)
                if found is not None:
                    static.add(found.group(2))
                    break

        dynamic: set[str] = set()
        for match in _DYNAMIC_CALL_RE.finditer(code):
            found = _CALL_ARGUMENT_RE.match(literals, match.end() - 1)
            if found is not None and found.group(2):
                dynamic.add(found.group(2))

        named: set[str] = set()
        has_default = False
        declarations = _DECLARATION_PATTERNS[variant.name]
        variable_pattern = _VARIABLE_PATTERNS[variant.typed]
        for match in _EXPORT_KEYWORD_RE.finditer(code):
            position = match.start()
            if depths[position] != 0:
                continue
            reexport = _EXPORT_FROM_RE.match(literals, position)
            if reexport is not None:
                static.add(reexport.group(2))
                continue
            if _DEFAULT_RE.match(code, position) is not None:
                declared_default = _DEFAULT_DECLARATION_RE.match(code, position)
                if declared_default is None:
                    has_default = True
                elif declared_default.group(1):
                    named.add(declared_default.group(1))
                continue
            if variant.typed and _EXPORT_ASSIGNMENT_RE.match(code, position) is not None:
                has_default = True
                continue
            declared = _match_declaration(code, position, declarations)
            if declared is not None:
                named.add(declared)
                continue
            variables = variable_pattern.match(code, position)
            if variables is not None:
                named.update(_declarator_names(code, literals, variables.end()))

        return ModuleFacts(
            import_specifiers=tuple(sorted(static)),
            dynamic_import_specifiers=tuple(sorted(dynamic)),
            exports=ExportFacts(named=tuple(sorted(named)), default=has_default),
        )


def extract_module_facts(path: str, text: str) -> ModuleFacts:
    """Extract facts with the default TS/JS extractor."""
    return TypeScriptJavaScriptExtractor().extract(path, text)


def _match_declaration(
    code: str, position: int, patterns: tuple[re.Pattern[str], ...]
) -> str | None:
    for pattern in patterns:
        found = pattern.match(code, position)
        if found is not None:
            return found.group(1)
    return None


def _declarator_names(code: str, literals: str, start: int) -> list[str]:
    """Split one variable statement into declarators and keep simple identifiers."""
    segments: list[str] = []
    nesting = 0
    segment_start = start
    index = start
    length = len(code)
    while index < length:
        char = code[index]
        if char in "([{":
            nesting += 1
        elif char in ")]}":
            if nesting == 0:
                break
            nesting -= 1
        elif nesting == 0:
            if char == ",":
                segments.append(code[segment_start:index])
                segment_start = index + 1
            elif char == ";":
                break
            elif char == "\n" and _ends_statement(literals, segment_start, index):
                break
        index += 1
    segments.append(code[segment_start:index])

    names: list[str] = []
    for segment in segments:
        found = _DECLARATOR_RE.match(segment)
        if found is not None:
            names.append(found.group(1))
    return names


def _ends_statement(literals: str, segment_start: int, newline: int) -> bool:
    before = literals[segment_start:newline].rstrip()
    if not before or before[-1] in _CONTINUATION_CHARS:
        return False
    following = _next_significant(literals, newline + 1)
    return following is None or following not in _LEADING_CONTINUATION_CHARS


def _next_significant(text: str, index: int) -> str | None:
    length = len(text)
    while index < length and text[index] in " \t\r\n":
        index += 1
    if index >= length:
        return None
    return text[index]


def _blank_jsx_text(text: str) -> str:
    def blank(match: re.Match[str]) -> str:
        return match.group(1) + " " * len(match.group(2))

    return _JSX_EXPRESSION_TEXT_RE.sub(blank, _JSX_TEXT_RE.sub(blank, text))
