"""Scriptwriter step: turns a topic into a cleaned three-speaker podcast script."""

from __future__ import annotations

import structlog

from podcast_studio.script.formatting import format_script
from podcast_studio.tools.llm_providers import ProviderFailoverClient

logger = structlog.get_logger()

# ---------------------------------------------------------------------------
# Prompt templates
# ---------------------------------------------------------------------------

SCRIPT_SYSTEM_PROMPT = """\
You are a professional podcast script writer. Create an engaging podcast script about the given topic.

The script should have THREE distinct speakers:
1. NARRATOR: Introduces the podcast and provides transitions between segments
2. HOST: The main presenter who leads the discussion
3. GUEST: An expert on the topic who provides insights and perspectives

Format the script clearly with speaker labels as follows:
[NARRATOR]: (narration text)
[HOST]: (host's dialogue)
[GUEST]: (guest's dialogue)

Start with an introduction by the narrator, then have the host introduce themselves and the topic,
followed by introducing the guest. Then proceed with a natural conversation about the topic.
Include approximately equal speaking time for the host and guest, with occasional narrator transitions.
End with a conclusion from all three speakers."""


def build_messages(topic: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SCRIPT_SYSTEM_PROMPT},
        {"role": "user", "content": topic},
    ]


async def write_script(llm: ProviderFailoverClient, topic: str) -> str:
    """Generate and clean a script for *topic*.

    Raises:
        ProviderExhaustedError: If no provider produced a completion.
    """
    logger.info("scriptwriter.start", topic=topic)
    raw = await llm.generate(build_messages(topic))
    script = format_script(raw)
    logger.info("scriptwriter.done", raw_chars=len(raw), chars=len(script))
    return script
