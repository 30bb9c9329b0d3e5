"""Client for the import-commit endpoint.

Platform matching, duplicate detection and persistence happen server-side.
The response is treated as opaque feedback for the operator: it is read
leniently and never interpreted beyond rendering messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from spaceops.common.http import HttpClient

IMPORT_PATH = "/api/import/csv"


@dataclass(frozen=True)
class CommitFeedback:
    inserted: int = 0
    skipped: int = 0
    unmapped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[Any] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CommitFeedback":
        def as_int(value: Any) -> int:
            try:
                return int(value or 0)
            except (TypeError, ValueError):
                return 0

        return cls(
            inserted=as_int(payload.get("inserted")),
            skipped=as_int(payload.get("skipped")),
            unmapped=[str(name) for name in payload.get("unmapped") or []],
            warnings=[str(warning) for warning in payload.get("warnings") or []],
            errors=list(payload.get("errors") or []),
        )

    @property
    def is_partial(self) -> bool:
        return bool(self.unmapped or self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "inserted": self.inserted,
            "skipped": self.skipped,
            "unmapped": list(self.unmapped),
            "warnings": list(self.warnings),
            "errors": list(self.errors),
        }


def operator_messages(feedback: CommitFeedback) -> list[str]:
    messages = [f"{feedback.inserted}件を取り込みました"]
    messages.extend(f"未マッピング施設: {name}" for name in feedback.unmapped)
    messages.extend(feedback.warnings)
    if feedback.skipped > 0:
        messages.append(f"{feedback.skipped}件の重複データをスキップしました")
    return messages


class ImportCommitClient:
    def __init__(self, base_url: str, http: HttpClient) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http

    def commit(self, text: str, *, platform_code: str, file_name: str) -> CommitFeedback:
        payload = self.http.post_text_json(
            f"{self.base_url}{IMPORT_PATH}",
            body=text,
            params={"platformCode": platform_code, "fileName": file_name},
        )
        return CommitFeedback.from_payload(payload if isinstance(payload, dict) else {})
