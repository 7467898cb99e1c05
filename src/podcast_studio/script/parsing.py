"""Split a podcast script into ordered speaker segments and per-speaker tracks."""

from __future__ import annotations

import re

import structlog

from podcast_studio.models.script import ParsedScript, ScriptTracks, Segment, Speaker

logger = structlog.get_logger()

_NAMES = "|".join(s.name for s in Speaker)

# "[HOST]: text" or "HOST: text", any case
_LABEL_RE = re.compile(
    rf"^(?:\[(?P<bracketed>{_NAMES})\]|(?P<bare>{_NAMES})):\s*",
    re.IGNORECASE,
)


def match_label(line: str) -> tuple[Speaker, str] | None:
    """Return ``(speaker, remainder)`` if *line* starts with a speaker label."""
    match = _LABEL_RE.match(line)
    if match is None:
        return None
    name = match.group("bracketed") or match.group("bare")
    return Speaker[name.upper()], line[match.end():]


def parse_script(script: str) -> ParsedScript:
    """Partition *script* into segments (script order) and tracks (per speaker).

    Blank lines are ignored. A labelled line opens a new segment even when the
    speaker does not change. Unlabelled lines continue the current segment, or
    open a narrator segment when no label has been seen yet.
    """
    segments: list[tuple[Speaker, list[str]]] = []
    track_lines: dict[Speaker, list[str]] = {speaker: [] for speaker in Speaker}
    current: Speaker | None = None

    for raw_line in script.split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        labelled = match_label(line)
        if labelled is not None:
            current, content = labelled
            segments.append((current, [content] if content else []))
            if content:
                track_lines[current].append(content)
        elif current is not None:
            segments[-1][1].append(line)
            track_lines[current].append(line)
        else:
            current = Speaker.NARRATOR
            segments.append((current, [line]))
            track_lines[current].append(line)

    parsed = ParsedScript(
        segments=[Segment(speaker=speaker, text="\n".join(lines)) for speaker, lines in segments],
        tracks=ScriptTracks(**{speaker.value: "\n".join(lines) for speaker, lines in track_lines.items()}),
    )
    logger.debug(
        "script.parsed",
        segments=len(parsed.segments),
        **{f"{speaker.value}_chars": len(parsed.tracks.for_speaker(speaker)) for speaker in Speaker},
    )
    return parsed
