#!/usr/bin/env python3
# lineeditor/__main__.py
from __future__ import annotations

"""
Demo shell: python -m lineeditor [--name NAME] [--history PATH] [--backend KIND] [--config FILE]

Echoes every line back, completes the demo command words, exits on
'quit', 'q' or end of input.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from lineeditor.config import BACKENDS, ConfigError, load_config
from lineeditor.interface import LineEditor, WordListCompleter, render_highlighted
from lineeditor.ui import colorize, enable_windows_vt, init_logger, print_line

DEMO_COMMANDS: tuple[str, ...] = (
    "help", "quit", "set", "enable", "disable", "match", "let",
    "true", "false",
)

HELP_TEXT = "Commands: " + ", ".join(DEMO_COMMANDS) + ". Tab completes, 'quit' exits."


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="lineeditor", description="Line editor demo shell.")
    parser.add_argument("--name", default="lineeditor", help="program name used for prompt and history")
    parser.add_argument("--history", default=None, help="history file (default ~/.<name>-history)")
    parser.add_argument("--backend", choices=BACKENDS, default=None)
    parser.add_argument("--config", default=None, help=".env/.ini/.json/.toml config file")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        config = load_config(args.config)
    except (ConfigError, OSError) as exc:
        print_line(colorize(f"[FAILED] configuration: {exc}", "red"), file=sys.stderr)
        return 2

    logger = init_logger(
        "lineeditor",
        level=config.log_level or logging.WARNING,
        logfile=str(config.log_file_path) if config.log_file_path else None,
    )

    # Echo with the same rules the editor highlights with, terminals only.
    color_echo = config.enable_highlight and sys.stdout.isatty() and enable_windows_vt()

    with LineEditor(
        args.name,
        args.history,
        completer=WordListCompleter(DEMO_COMMANDS),
        backend=args.backend,
        config=config,
    ) as editor:
        logger.info("history file: %s", editor.history_path)
        while True:
            line = editor.read_line()
            if line is None:
                break
            word = line.strip()
            if word in ("quit", "q"):
                break
            if word == "help":
                print_line(HELP_TEXT)
            elif word:
                print_line(render_highlighted(line) if color_echo else line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
