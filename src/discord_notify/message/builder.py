from __future__ import annotations
import sys
from datetime import datetime
from typing import Optional, TextIO

FENCE = "```"

def now_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now().astimezone()
    return now.isoformat(timespec="seconds")

def read_stdin(stream: Optional[TextIO] = None) -> str:
    stream = stream if stream is not None else sys.stdin
    # job output may carry stray non-UTF-8 bytes
    if hasattr(stream, "reconfigure"):
        stream.reconfigure(errors="replace")
    return "\n".join(line.rstrip("\r\n") for line in stream)

def build_message(timestamp: str, stdin_requested: bool, stdin_text: Optional[str], header: Optional[str]) -> str:
    content = f"completed at {timestamp}"
    if stdin_requested:
        # empty input still gets its (blank) section
        content += "\n\n" + (stdin_text or "")

    if header is None:
        return content
    return f"> {header}\n{FENCE}\n{content}\n{FENCE}"
