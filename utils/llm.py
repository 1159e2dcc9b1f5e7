"""Claude API client for code generation, plus extraction of generated files."""

import logging
import os
import re
import time

import anthropic

from config.defaults import DEFAULTS

logger = logging.getLogger(__name__)

MODEL = DEFAULTS["model"]
MAX_TOKENS = DEFAULTS["max_tokens"]

TRUNCATION_NOTE = "\n\n<!-- TRUNCATED: Response hit token limit -->"

# One header line per file, in any of the comment styles the model uses:
#   <!-- File: index.html -->   // File: app.js   /* File: style.css */   # File: x.py
_FILE_HEADER_RE = re.compile(
    r"^[ \t]*(?:<!--|//|/\*|#)[ \t]*(?:File|Filename)[ \t]*:[ \t]*(?P<path>[^\s*>]+?)[ \t]*(?:-->|\*/)?[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)
_FENCE_LINE_RE = re.compile(r"^[ \t]*```[\w.+-]*[ \t]*$", re.MULTILINE)


def get_client():
    """Return an Anthropic client. Raises if no API key is set."""
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        raise RuntimeError(
            "ANTHROPIC_API_KEY environment variable is not set. "
            "Get a key at https://console.anthropic.com/ and run:\n"
            "  export ANTHROPIC_API_KEY='your-key-here'"
        )
    return anthropic.Anthropic(api_key=api_key)


def call_llm(system_prompt, user_message):
    """Call Claude and return the raw text response.

    Streams to avoid SDK timeouts on large max_tokens. Retries once on an
    API error; a second failure propagates to the caller.
    """
    client = get_client()

    for attempt in range(2):
        try:
            text = ""
            with client.messages.stream(
                model=MODEL,
                max_tokens=MAX_TOKENS,
                system=system_prompt,
                messages=[{"role": "user", "content": user_message}],
            ) as stream:
                for chunk in stream.text_stream:
                    text += chunk
                response_msg = stream.get_final_message()

            # Cut off mid-file: downstream extraction keeps what it can.
            if response_msg.stop_reason == "max_tokens":
                logger.warning("Generation hit the %d token limit", MAX_TOKENS)
                text += TRUNCATION_NOTE
            return text

        except anthropic.APIError as e:
            if attempt == 0:
                logger.warning("Generation call failed, retrying once: %s", e)
                time.sleep(2)
                continue
            raise


def _strip_fences(content):
    """Drop markdown fence lines the model sometimes wraps around files."""
    return _FENCE_LINE_RE.sub("", content).strip("\n")


def parse_files(response):
    """Extract (path, content) pairs from a response in the file-header format.

    Each file starts at a header line such as ``<!-- File: about.html -->``
    and runs until the next header or the end of the response. Code fences
    around files are removed; files with no content are skipped.

    Returns list of (relative_path, content) tuples in response order.
    """
    headers = list(_FILE_HEADER_RE.finditer(response))
    files = []
    for idx, match in enumerate(headers):
        end = headers[idx + 1].start() if idx + 1 < len(headers) else len(response)
        content = response[match.end():end]
        if idx + 1 == len(headers):
            content = content.replace(TRUNCATION_NOTE, "")
        content = _strip_fences(content)
        if not content.strip():
            continue
        files.append((match.group("path").strip(), content))
    return files
