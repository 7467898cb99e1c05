"""Cleanup of raw LLM output before it is parsed into speaker tracks."""

from __future__ import annotations

import re

from podcast_studio.models.script import Speaker

_NAMES = "|".join(s.name for s in Speaker)

_BOLD_RE = re.compile(r"\*\*")
_ITALIC_RE = re.compile(r"\*")
# "#", "##", ... markers (possibly stacked) at line start or right after a
# speaker label, followed by heading text
_HEADING_RE = re.compile(
    rf"^([ \t]*(?:\[?(?:{_NAMES})\]?:[ \t]*)?)(?:#+[ \t]+)+(?=\S)",
    re.MULTILINE | re.IGNORECASE,
)
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def format_script(raw: str) -> str:
    """Strip markdown emphasis and heading markers, collapse blank-line runs.

    Idempotent: ``format_script(format_script(s)) == format_script(s)``.
    """
    text = _BOLD_RE.sub("", raw)
    text = _ITALIC_RE.sub("", text)
    previous = None
    while text != previous:
        previous, text = text, _HEADING_RE.sub(r"\1", text)
    return _BLANK_RUN_RE.sub("\n\n", text)
