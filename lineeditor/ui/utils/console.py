#!/usr/bin/env python3
# lineeditor/ui/utils/console.py
from __future__ import annotations

import sys
import threading

# Single shared print mutex for all UI output (logging + demo shell).
PRINT_MUTEX = threading.Lock()


def print_line(text: str = "", *, file=None, flush: bool = False) -> None:
    """Single-line print that cooperates with the colorizing log handler."""
    stream = file if file is not None else sys.stdout
    with PRINT_MUTEX:
        stream.write(f"{text}\n")
        if flush:
            stream.flush()
