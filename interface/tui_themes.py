#!/usr/bin/env python3
"""TUI styling."""

from typing import Dict

from prompt_toolkit.styles import Style


PALETTE: Dict[str, str] = {
    "": "#d7dfe6",
    "text": "#d7dfe6",
    "text.dim": "#97a0a9",
    "text.done": "#6d717a strike",
    "selected": "bg:#3b3b3b #d7dfe6 bold",
    "section": "#ffb347 bold",
    "chevron": "#97a0a9",
    "priority.max": "#ff5156 bold",
    "priority.high": "#f9ac60 bold",
    "priority.medium": "#e5c07b",
    "priority.low": "#7aa6da",
    "priority.none": "#4b525a",
    "row.max": "bg:#3a2326",
    "due": "#9ad974",
    "due.overdue": "#e06c75 bold",
    "start": "#7a7f85",
    "mode": "#282c34 bg:#9ad974 bold",
    "mode.insert": "#282c34 bg:#e5c07b bold",
    "mode.command": "#282c34 bg:#7aa6da bold",
    "status": "#97a0a9",
    "notice": "#9ad974",
    "notice.error": "#ff6b6b bold",
    "entry": "#d7dfe6",
    "header": "#ffb347 bold",
    "border": "#4b525a",
}


def get_palette() -> Dict[str, str]:
    return dict(PALETTE)


def build_style() -> Style:
    return Style.from_dict(get_palette())
