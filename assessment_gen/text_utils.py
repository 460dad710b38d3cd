"""Shared text utility functions for LLM response handling."""

import re

_FENCED_BLOCK = re.compile(r"^```[\w+-]*[ \t]*\n?(.*?)\n?```$", re.DOTALL)
_OPENING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n?")


def strip_markdown_code_blocks(text: str) -> str:
    """Strip a markdown code fence wrapped around the whole text.

    LLMs often wrap JSON responses in markdown code blocks like:
    ```json
    [...]
    ```

    The fence may carry any language tag or none. When the response starts
    with a fence that is never closed (a truncated response), only the
    opening marker is removed.

    Args:
        text: Raw text that may be wrapped in a code block

    Returns:
        Text with the fence markers stripped, or the stripped original text if
        it does not start with a fence
    """
    if not text:
        return text

    stripped = text.strip()
    match = _FENCED_BLOCK.match(stripped)
    if match:
        return match.group(1).strip()

    if stripped.startswith("```"):
        return _OPENING_FENCE.sub("", stripped, count=1).strip()

    return stripped
