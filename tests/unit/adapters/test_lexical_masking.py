from __future__ import annotations

from relindex.adapters import LexicalRules, mask_source, scan_braces


def test_masking_preserves_length_and_newlines() -> None:
    text = "const a = 'x'; // note\n/* block\ncomment */ const b = `t`;\n"

    masked = mask_source(text)

    assert len(masked.code) == len(text)
    assert len(masked.literals) == len(text)
    assert masked.code.count("\n") == text.count("\n")
    assert masked.unterminated is None


def test_code_view_blanks_strings_while_literal_view_keeps_them() -> None:
    text = "import x from 'pkg'; // 'comment'"

    masked = mask_source(text)

    assert "pkg" not in masked.code
    assert "'pkg'" in masked.literals
    assert "comment" not in masked.literals


def test_template_interpolation_code_stays_visible() -> None:
    text = "const s = `a ${ { k: 1 }.k } b`; const after = 1;"

    masked = mask_source(text)

    assert "k: 1" in masked.code
    assert " a " not in masked.code
    assert "const after = 1;" in masked.code
    assert masked.unterminated is None


def test_division_is_not_mistaken_for_a_regex() -> None:
    text = "const ratio = total / count; const s = 'keep';"

    masked = mask_source(text)

    assert "total / count" in masked.code


def test_brace_scan_tracks_nesting_per_offset() -> None:
    code = "a{b{c}d}e"

    braces = scan_braces(code)
    depths = braces.depths

    assert depths[code.index("a")] == 0
    assert depths[code.index("b")] == 1
    assert depths[code.index("c")] == 2
    assert depths[code.index("d")] == 1
    assert depths[code.index("e")] == 0
    assert braces.unmatched_closing == 0
    assert braces.unclosed_opening == 0


def test_self_closing_tag_slash_is_not_a_regex_in_markup_rules() -> None:
    text = "x = <Icon size={16} /> {open && 'y'}\n"

    plain = mask_source(text)
    markup = mask_source(text, LexicalRules(markup=True))

    assert "{open && " not in plain.code
    assert "{open && " in markup.code
    assert scan_braces(markup.code).unclosed_opening == 0
