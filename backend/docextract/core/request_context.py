"""
Request/extraction context helpers.

We keep a small context (request_id, extraction_id, filename) in ContextVars.
The HTTP middleware and the extraction service set these values so every log
line emitted while a document is processed can be correlated.

No external dependencies.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Dict, Optional


_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_extraction_id: ContextVar[Optional[str]] = ContextVar("extraction_id", default=None)
_filename: ContextVar[Optional[str]] = ContextVar("filename", default=None)


def set_context(
    *,
    request_id: Optional[str] = None,
    extraction_id: Optional[str] = None,
    filename: Optional[str] = None,
) -> None:
    if request_id is not None:
        _request_id.set(request_id)
    if extraction_id is not None:
        _extraction_id.set(extraction_id)
    if filename is not None:
        _filename.set(filename)


def clear_context() -> None:
    _request_id.set(None)
    _extraction_id.set(None)
    _filename.set(None)


def clear_extraction_context() -> None:
    # Leaves request_id alone; one request may run several extractions.
    _extraction_id.set(None)
    _filename.set(None)


def get_context() -> Dict[str, Any]:
    ctx: Dict[str, Any] = {}
    rid = _request_id.get()
    eid = _extraction_id.get()
    fname = _filename.get()

    if rid:
        ctx["request_id"] = rid
    if eid:
        ctx["extraction_id"] = eid
    if fname:
        ctx["filename"] = fname
    return ctx
