"""
Structured diagnostics for conversion warnings and successes.

The :mod:`wxr_converter.utils.errors` module centralizes the recording of
recoverable problems found while walking a WXR export.  Every entry is kept
in memory so the run can finish with a summary, and when a report directory
is configured it is also appended to a JSON Lines file so the information
can be reviewed or parsed after a run.

``DiagnosticLog.report_error``
    Record a recoverable problem for an entity.  An optional exception can
    be supplied and will be serialized to the log.

``DiagnosticLog.report_ok``
    Record a successful step for an entity.  Additional key/value
    information can be attached to the entry via the ``extra`` parameter.

The ``ERRORS`` dictionary maps error or event codes to human readable
messages.  Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Mapping of event codes used throughout the conversion to descriptive
# messages.  The keys include both error and success codes as the same lookup
# is used by :meth:`DiagnosticLog.report_error` and :meth:`DiagnosticLog.report_ok`.
ERRORS: Dict[str, str] = {
    "METADATA_DECODE": "Could not decode serialized attachment metadata",
    "UNKNOWN_POST_TYPE": "Unknown post type, item skipped",
    "AUTHOR_UNRESOLVED": "Creator does not match any exported author",
    "SITE_HOST_MISSING": "Channel has no usable host, URLs are left untouched",
    "INVALID_NUMBER": "Expected a numeric value",
    "MISSING_USERNAME": "Author without login name, author skipped",
    "WXR_VERSION": "Unexpected WXR version",
    "TRANSFORM_LOAD": "Configured transform could not be loaded",
    "CONVERTED": "Entity converted",
}

_ERROR_LOG = "errors.jsonl"
_OK_LOG = "success.jsonl"


@dataclass
class Diagnostic:
    code: str
    message: str
    entity: Optional[str] = None
    id: Any = None
    name: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "entity": self.entity,
            "id": self.id,
            "name": self.name,
        }
        entry.update(self.extra)
        return entry


def describe_entity(entity: Any) -> Dict[str, Any]:
    """Return the ``entity``, ``id`` and ``name`` keys identifying ``entity``."""
    if entity is None:
        return {"entity": None, "id": None, "name": None}
    name = getattr(entity, "username", None) or getattr(entity, "name", None) or getattr(entity, "title", None)
    return {
        "entity": type(entity).__name__,
        "id": getattr(entity, "id", None),
        "name": name or None,
    }


class DiagnosticLog:
    """
    Collects diagnostics for one conversion run.

    ``report_dir`` is optional; without it nothing is written to disk and
    the entries are only available through :attr:`errors` and :attr:`ok`.
    """

    def __init__(self, report_dir: Optional[str] = None, *, echo: bool = True) -> None:
        self.report_dir = report_dir
        self.echo = echo
        self.errors: List[Diagnostic] = []
        self.ok: List[Diagnostic] = []

    def _write_jsonl(self, filename: str, data: Dict[str, Any]) -> None:
        """Append ``data`` as a JSON object followed by a newline."""
        if not self.report_dir:
            return
        os.makedirs(self.report_dir, exist_ok=True)
        with open(os.path.join(self.report_dir, filename), "a", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, default=str)
            f.write("\n")

    def report_error(
        self,
        code: str,
        entity: Any = None,
        exc: Optional[BaseException] = None,
        **extra: Any,
    ) -> Diagnostic:
        """Record a recoverable problem for ``entity``.

        Parameters
        ----------
        code:
            A key identifying the type of problem.  If ``code`` is present in
            :data:`ERRORS` its value will be used as the message.
        entity:
            The entity being built when the problem occurred, if any.
        exc:
            Optional exception instance that triggered the problem.  Its
            string representation is included in the entry.
        """
        if exc is not None:
            extra["error"] = str(exc)
        diagnostic = Diagnostic(code=code, message=ERRORS.get(code, code), extra=extra, **describe_entity(entity))
        self.errors.append(diagnostic)
        if self.echo:
            print(f"[WARNING] {diagnostic.message} - {diagnostic.entity or ''} {diagnostic.name or diagnostic.id or ''}".rstrip())
        self._write_jsonl(_ERROR_LOG, diagnostic.to_dict())
        return diagnostic

    def report_ok(self, code: str, entity: Any = None, extra: Optional[Dict[str, Any]] = None) -> Diagnostic:
        """Record a successful event for ``entity``."""
        diagnostic = Diagnostic(code=code, message=ERRORS.get(code, code), extra=dict(extra or {}), **describe_entity(entity))
        self.ok.append(diagnostic)
        self._write_jsonl(_OK_LOG, diagnostic.to_dict())
        return diagnostic

    def codes(self) -> List[str]:
        return [d.code for d in self.errors]

    def __len__(self) -> int:
        return len(self.errors)
