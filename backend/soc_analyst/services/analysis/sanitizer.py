# backend/soc_analyst/services/analysis/sanitizer.py
"""
Blocklist scrubbing of model output before it is stored or returned.

This only neutralises a handful of executable patterns (script/iframe blocks,
javascript: and HTML data: URIs, inline on*= handlers). It is not an HTML
sanitizer: anything rendering the text as markup must still escape it.
"""

import re
from typing import Optional

DEFAULT_MAX_LENGTH = 8000

FALLBACK_RESPONSE = (
    "I apologize, but I was unable to generate a response. Please try again."
)

_SCRIPT_BLOCK = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE
)
_IFRAME_BLOCK = re.compile(
    r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE
)
_JAVASCRIPT_URI = re.compile(r"javascript\s*:", re.IGNORECASE)
_HTML_DATA_URI = re.compile(
    r"data\s*:\s*(?:text/html|application/javascript)", re.IGNORECASE
)
# on<word>= handlers; quoted values first, then bare values up to space / '>'
_QUOTED_EVENT_HANDLER = re.compile(
    r"[ \t]*\bon\w+\s*=\s*(['\"])[^'\"]*\1", re.IGNORECASE
)
_UNQUOTED_EVENT_HANDLER = re.compile(
    r"[ \t]*\bon\w+\s*=\s*[^\s>]*", re.IGNORECASE
)

# Applied in this order, each over the output of the previous one
_RULES = (
    (_SCRIPT_BLOCK, "[removed script]"),
    (_IFRAME_BLOCK, "[removed iframe]"),
    (_JAVASCRIPT_URI, "javascript-blocked:"),
    (_HTML_DATA_URI, "data-blocked:"),
    (_QUOTED_EVENT_HANDLER, ""),
    (_UNQUOTED_EVENT_HANDLER, ""),
)


def sanitize(raw_text: Optional[str], max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Return a safe, bounded version of `raw_text`.

    Empty input yields FALLBACK_RESPONSE, so the result is never empty and
    never longer than `max_length`. Pure: same input, same output.
    """
    if not raw_text:
        return FALLBACK_RESPONSE[:max_length]

    # Truncate before matching so regex work is bounded
    sanitized = raw_text[:max_length]

    for pattern, replacement in _RULES:
        sanitized = pattern.sub(replacement, sanitized)

    # Markers such as "javascript-blocked:" are longer than what they replace
    sanitized = sanitized[:max_length]

    return sanitized or FALLBACK_RESPONSE[:max_length]
