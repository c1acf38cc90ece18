from __future__ import annotations

from relindex.adapters import extract_module_facts


def test_declaration_exports_are_collected_and_sorted() -> None:
    source = "\n".join(
        [
            "export function formatDate(d: Date): string { return d.toISOString(); }",
            "export async function load() {}",
            "export class Store {}",
            "export abstract class Base {}",
            "export interface Options { a: string }",
            "export type Id = string;",
            "export enum Color { Red }",
            "export const enum Flag { On }",
            "export declare const VERSION: string;",
        ]
    )

    facts = extract_module_facts("utils/fmt.ts", source)

    assert facts.exports.named == (
        "Base",
        "Color",
        "Flag",
        "Id",
        "Options",
        "Store",
        "VERSION",
        "formatDate",
        "load",
    )
    assert facts.exports.default is False


def test_variable_statements_export_each_simple_declarator() -> None:
    source = "\n".join(
        [
            "export const a = 1, b = { x: [1, 2] }, c = (y) => y;",
            "export let d: number;",
            "export var e",
            "export const { hidden } = obj;",
            "const notExported = 2;",
        ]
    )

    facts = extract_module_facts("vars.ts", source)

    assert facts.exports.named == ("a", "b", "c", "d", "e")


def test_variable_statement_without_semicolon_stops_at_line_end() -> None:
    source = "\n".join(
        [
            "export const first = 1",
            "const second = 2",
            "export const third =",
            "  3",
        ]
    )

    facts = extract_module_facts("asi.js", source)

    assert facts.exports.named == ("first", "third")


def test_default_export_expression_sets_flag_only() -> None:
    facts = extract_module_facts("App.tsx", "const App = () => <div />;\nexport default App;\n")

    assert facts.exports.default is True
    assert facts.exports.named == ()


def test_default_declarations_record_name_without_default_flag() -> None:
    source = "export default function Home() { return null; }\n"

    facts = extract_module_facts("pages/home.tsx", source)

    assert facts.exports.default is False
    assert facts.exports.named == ("Home",)

    facts = extract_module_facts("models/user.ts", "export default abstract class User {}\n")

    assert facts.exports.default is False
    assert facts.exports.named == ("User",)


def test_anonymous_default_declarations_add_nothing() -> None:
    source = "\n".join(
        [
            "export default function () {}",
            "export default class extends Base {}",
        ]
    )

    facts = extract_module_facts("anon.js", source)

    assert facts.exports.default is False
    assert facts.exports.named == ()


def test_typescript_export_assignment_counts_as_default() -> None:
    facts = extract_module_facts("legacy.ts", "const api = {};\nexport = api;\n")

    assert facts.exports.default is True


def test_nested_export_keywords_are_ignored() -> None:
    source = "\n".join(
        [
            "declare module 'x' {",
            "  export function inner(): void;",
            "}",
            "export function outer() {}",
        ]
    )

    facts = extract_module_facts("types.d.ts", source)

    assert facts.exports.named == ("outer",)


def test_untyped_variants_do_not_report_type_only_declarations() -> None:
    facts = extract_module_facts("plain.js", "export function run() {}\n")

    assert facts.exports.named == ("run",)


def test_jsx_text_with_apostrophes_does_not_break_extraction() -> None:
    source = "\n".join(
        [
            "import React from 'react';",
            "export function Note() {",
            "  return <p>Don't panic, it's fine</p>;",
            "}",
            "export const after = 1;",
        ]
    )

    facts = extract_module_facts("components/Note.jsx", source)

    assert facts.import_specifiers == ("react",)
    assert facts.exports.named == ("Note", "after")
