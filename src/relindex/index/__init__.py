"""Index building, resolution and persistence package."""

from .aliases import AliasLoadResult, apply_alias, load_alias_rules, strip_jsonc
from .cache import (
    INDEX_SCHEMA_VERSION,
    load_previous_index,
    reusable_record,
)
from .discovery import (
    detect_index_delta,
    filter_source_files,
    list_tracked_files,
    read_source,
    sha256_text,
)
from .graph import build_graph
from .manager import IndexManager, IndexStatus, RefreshResult
from .models import (
    AliasRule,
    DependencySet,
    EdgeKind,
    FileRecord,
    Graph,
    IndexDelta,
    IndexSnapshot,
    PreviousIndex,
    SemanticFacts,
)
from .resolver import ImportResolver, ResolvedImport, external_package_name, external_packages
from .semantic import extract_semantic

__all__ = [
    "AliasLoadResult",
    "AliasRule",
    "DependencySet",
    "EdgeKind",
    "FileRecord",
    "Graph",
    "INDEX_SCHEMA_VERSION",
    "ImportResolver",
    "IndexDelta",
    "IndexManager",
    "IndexSnapshot",
    "IndexStatus",
    "PreviousIndex",
    "RefreshResult",
    "ResolvedImport",
    "SemanticFacts",
    "apply_alias",
    "build_graph",
    "detect_index_delta",
    "external_package_name",
    "external_packages",
    "extract_semantic",
    "filter_source_files",
    "list_tracked_files",
    "load_alias_rules",
    "load_previous_index",
    "read_source",
    "reusable_record",
    "sha256_text",
    "strip_jsonc",
]
