from __future__ import annotations

from pathlib import Path

from relindex.config import DEFAULT_RESOLVE_EXTENSIONS
from relindex.index import AliasRule, EdgeKind, ImportResolver, external_package_name


def _touch(root: Path, relative: str) -> None:
    target = root / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text("", encoding="utf-8")


def test_relative_specifier_tries_extensions_in_order(tmp_path: Path) -> None:
    _touch(tmp_path, "utils/fmt.tsx")
    _touch(tmp_path, "utils/fmt.js")
    resolver = ImportResolver(tmp_path, (), DEFAULT_RESOLVE_EXTENSIONS)

    resolved = resolver.resolve("pages/home.ts", "../utils/fmt")

    assert resolved.kind is EdgeKind.LOCAL
    assert resolved.value == "utils/fmt.tsx"


def test_directory_specifier_falls_back_to_index_file(tmp_path: Path) -> None:
    _touch(tmp_path, "components/index.ts")
    resolver = ImportResolver(tmp_path, (), DEFAULT_RESOLVE_EXTENSIONS)

    resolved = resolver.resolve("App.tsx", "./components")

    assert resolved.value == "components/index.ts"


def test_direct_file_wins_over_index_file(tmp_path: Path) -> None:
    _touch(tmp_path, "lib.json")
    _touch(tmp_path, "lib/index.ts")
    resolver = ImportResolver(tmp_path, (), DEFAULT_RESOLVE_EXTENSIONS)

    assert resolver.resolve("a.ts", "./lib").value == "lib.json"


def test_specifier_with_extension_is_checked_as_is(tmp_path: Path) -> None:
    _touch(tmp_path, "styles/app.css")
    resolver = ImportResolver(tmp_path, (), DEFAULT_RESOLVE_EXTENSIONS)

    assert resolver.resolve("App.tsx", "./styles/app.css").value == "styles/app.css"
    missing = resolver.resolve("App.tsx", "./styles/missing.css")
    assert missing.kind is EdgeKind.LOCAL_UNRESOLVED
    assert missing.value == "./styles/missing.css"


def test_root_relative_specifier_resolves_from_repo_root(tmp_path: Path) -> None:
    _touch(tmp_path, "src/api.ts")
    resolver = ImportResolver(tmp_path, (), DEFAULT_RESOLVE_EXTENSIONS)

    assert resolver.resolve("deep/nested/file.ts", "/src/api").value == "src/api.ts"
    assert resolver.resolve("a.ts", "/").kind is EdgeKind.LOCAL_UNRESOLVED


def test_candidates_escaping_the_root_stay_unresolved(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()
    _touch(tmp_path, "outside.ts")
    resolver = ImportResolver(repo, (), DEFAULT_RESOLVE_EXTENSIONS)

    resolved = resolver.resolve("a.ts", "../outside")

    assert resolved.kind is EdgeKind.LOCAL_UNRESOLVED
    assert resolved.value == "../outside"


def test_bare_specifiers_reduce_to_package_identity(tmp_path: Path) -> None:
    resolver = ImportResolver(tmp_path, (), DEFAULT_RESOLVE_EXTENSIONS)

    assert resolver.resolve("a.ts", "lodash/fp").value == "lodash"
    assert resolver.resolve("a.ts", "@scope/pkg/deep/path").value == "@scope/pkg"
    assert resolver.resolve("a.ts", "react").kind is EdgeKind.EXTERNAL
    assert external_package_name("@scope") == "@scope"
    assert external_package_name("node:fs") == "node:fs"


def test_alias_specifier_resolves_locally(tmp_path: Path) -> None:
    _touch(tmp_path, "src/lib/x.ts")
    rules = (AliasRule(pattern="@/*", targets=("src/*",)),)
    resolver = ImportResolver(tmp_path, rules, DEFAULT_RESOLVE_EXTENSIONS)

    resolved = resolver.resolve("pages/a.ts", "@/lib/x")
    unresolved = resolver.resolve("pages/a.ts", "@/lib/missing")

    assert resolved.kind is EdgeKind.LOCAL
    assert resolved.value == "src/lib/x.ts"
    assert unresolved.kind is EdgeKind.LOCAL_UNRESOLVED
    assert unresolved.value == "@/lib/missing"


def test_resolve_file_sorts_and_deduplicates_each_bucket(tmp_path: Path) -> None:
    _touch(tmp_path, "b.ts")
    _touch(tmp_path, "a.ts")
    resolver = ImportResolver(tmp_path, (), DEFAULT_RESOLVE_EXTENSIONS)

    deps = resolver.resolve_file(
        "main.ts",
        ("./b", "./a", "./a.ts", "react-dom/client", "react", "react", "./gone"),
    )

    assert deps.local == ("a.ts", "b.ts")
    assert deps.local_unresolved == ("./gone",)
    assert deps.external == ("react", "react-dom")
