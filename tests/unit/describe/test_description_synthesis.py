from __future__ import annotations

from relindex.adapters import ExportFacts, ModuleFacts
from relindex.describe import describe_file
from relindex.index import DependencySet, FileRecord, SemanticFacts
from relindex.index.semantic import extract_semantic


def _record(
    path: str,
    *,
    named: tuple[str, ...] = (),
    default: bool = False,
    semantic: SemanticFacts | None = None,
) -> FileRecord:
    return FileRecord(
        path=path,
        kind="ts",
        size=0,
        content_hash="h",
        facts=ModuleFacts(exports=ExportFacts(named=named, default=default)),
        semantic=semantic or extract_semantic(path, ""),
    )


def test_page_description_names_its_route() -> None:
    record = _record("pages/home.ts", named=("Home",))
    deps = DependencySet(local=("utils/fmt.ts",), external=("react",))

    description = describe_file("pages/home.ts", record, deps)

    assert description == (
        "Page for route `/home` (route/page). Exports: Home. "
        "Ext deps: react | Local deps: utils/fmt.ts Routes: /home | Tags: route"
    )


def test_templates_follow_feature_classification() -> None:
    assert describe_file("components/Card.tsx", _record("components/Card.tsx")).startswith(
        "UI component `Card` (ui/component)."
    )
    assert describe_file("utils/fmt.ts", _record("utils/fmt.ts")).startswith(
        "Utility module `fmt` (utility)."
    )
    assert describe_file("worker/jobs.ts", _record("worker/jobs.ts")).startswith(
        "Worker module `jobs` (worker/backend)."
    )
    assert describe_file("App.tsx", _record("App.tsx")).startswith("App entry `App` (app/entry).")
    assert describe_file("lib/x.mjs", _record("lib/x.mjs")).startswith("Module `x` (module).")


def test_empty_exports_and_dependencies_use_placeholders() -> None:
    description = describe_file("lib/x.ts", _record("lib/x.ts"))

    assert description == "Module `x` (module). Exports: (none detected). Deps: (none detected)."


def test_lists_are_truncated_and_default_comes_first() -> None:
    record = _record(
        "lib/many.ts",
        named=tuple(f"n{index}" for index in range(10)),
        default=True,
        semantic=SemanticFacts(
            feature="module",
            tags=tuple(f"t{index}" for index in range(12)),
            api_endpoints=("/api/a", "/api/b", "/api/c"),
            env_vars=("A", "B", "C", "D", "E"),
        ),
    )
    deps = DependencySet(
        local=tuple(f"l{index}.ts" for index in range(6)),
        external=tuple(f"pkg{index}" for index in range(8)),
    )

    description = describe_file("lib/many.ts", record, deps)

    assert "Exports: default, n0, n1, n2, n3, n4, n5." in description
    assert "Ext deps: pkg0, pkg1, pkg2, pkg3, pkg4, pkg5 |" in description
    assert "Local deps: l0.ts, l1.ts, l2.ts, l3.ts " in description
    assert "Tags: t0, t1, t2, t3, t4, t5, t6, t7 |" in description
    assert "API: /api/a, /api/b |" in description
    assert description.endswith("Env: A, B, C, D")
