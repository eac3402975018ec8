"""
Strips the code-fence markers models wrap around JSON answers.
"""

from __future__ import annotations

JSON_FENCE = "```json"
FENCE = "```"


def sanitize_model_response(text: str) -> str:
    """
    Remove every ```json and ``` marker, then trim surrounding whitespace.

    Nothing else in the text is touched and the result is not checked for
    JSON validity; parsing happens in the normalizer.
    """
    return text.replace(JSON_FENCE, "").replace(FENCE, "").strip()
