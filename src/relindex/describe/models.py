"""Typed models for persisted file descriptions."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(slots=True, frozen=True)
class DescriptionRecord:
    """Short summary of one file, keyed by path and content hash."""

    path: str
    content_hash: str | None
    feature: str
    description: str
    needs_review: bool
    carried: bool = False
    carried_from: str | None = None

    def carry(self, generated_at: str | None) -> DescriptionRecord:
        """Copy of this record marked as carried from the run at generated_at."""
        return replace(self, carried=True, carried_from=generated_at)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "path": self.path,
            "sha256": self.content_hash,
            "feature": self.feature,
            "description": self.description,
            "needsReview": self.needs_review,
        }
        if self.carried:
            payload["carriedFrom"] = self.carried_from
        return payload

    @classmethod
    def from_dict(cls, payload: object) -> DescriptionRecord | None:
        if not isinstance(payload, dict):
            return None
        path = payload.get("path")
        content_hash = payload.get("sha256")
        feature = payload.get("feature")
        description = payload.get("description")
        needs_review = payload.get("needsReview")
        carried_from = payload.get("carriedFrom")
        if not isinstance(path, str):
            return None
        if content_hash is not None and not isinstance(content_hash, str):
            return None
        if not isinstance(feature, str) or not isinstance(description, str):
            return None
        return cls(
            path=path,
            content_hash=content_hash,
            feature=feature,
            description=description,
            needs_review=needs_review if isinstance(needs_review, bool) else True,
            carried="carriedFrom" in payload,
            carried_from=carried_from if isinstance(carried_from, str) else None,
        )


@dataclass(slots=True, frozen=True)
class DescriptionSet:
    """All descriptions of one describe run."""

    schema_version: int | None
    generated_at: str | None
    files: dict[str, DescriptionRecord]

    def to_dict(self) -> dict[str, object]:
        return {
            "schemaVersion": self.schema_version,
            "generatedAt": self.generated_at,
            "files": {path: self.files[path].to_dict() for path in sorted(self.files)},
        }
