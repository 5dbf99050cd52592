#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Built-in keyboard shortcuts, toolbar icons and line prefixes.

These are appended after every extension contribution, so extensions always
match first.  Actions only talk to the input surface through the narrow
editing methods of ``quire.services.input.InputSurface``.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re

from quire.schemas import Icon, KeyboardShortcut, Prefix


# -----------------------------------------------------------------------------
# Actions
# -----------------------------------------------------------------------------

def _surround(delimiter: str):
    def action(input) -> None:
        input.surface.toggle_selection_surrounding(delimiter)
    return action


def _line_prefix(prefix: str, whitespace: str = "attach"):
    def action(input) -> None:
        input.surface.toggle_line_prefix(prefix, whitespace)
    return action


def _link(input) -> None:
    input.surface.insert_link()


def _undo(input) -> None:
    input.surface.undo()


def _redo(input) -> None:
    input.surface.redo()


# -----------------------------------------------------------------------------
# Shortcuts
# -----------------------------------------------------------------------------

DEFAULT_SHORTCUTS: tuple[KeyboardShortcut, ...] = (
    KeyboardShortcut(id="bold",          combination={"control", "b"},          action=_surround("**")),
    KeyboardShortcut(id="italic",        combination={"control", "i"},          action=_surround("*")),
    KeyboardShortcut(id="quote",         combination={"control", "shift", ","}, action=_line_prefix(">")),
    KeyboardShortcut(id="link",          combination={"control", "k"},          action=_link),
    KeyboardShortcut(id="strikethrough", combination={"control", "shift", "x"}, action=_surround("~~")),
    KeyboardShortcut(id="code",          combination={"control", "e"},          action=_surround("`")),
    KeyboardShortcut(id="h1",            combination={"control", "1"},          action=_line_prefix("#")),
    KeyboardShortcut(id="h2",            combination={"control", "2"},          action=_line_prefix("##")),
    KeyboardShortcut(id="h3",            combination={"control", "3"},          action=_line_prefix("###")),
    KeyboardShortcut(id="bulletedList",  combination={"control", "shift", "8"}, action=_line_prefix("-")),
    KeyboardShortcut(id="numberedList",  combination={"control", "shift", "7"}, action=_line_prefix("1.")),
    KeyboardShortcut(id="taskList",      combination={"control", "shift", "9"}, action=_line_prefix("- [ ]")),
    KeyboardShortcut(id="undo",          combination={"control", "z"},          action=_undo, prevent_save=True),
    KeyboardShortcut(id="redo",          combination={"control", "y"},          action=_redo, prevent_save=True),
)


# -----------------------------------------------------------------------------
# Icons
# -----------------------------------------------------------------------------

DEFAULT_ICONS: tuple[Icon, ...] = (
    Icon(id="heading",       label="Heading",        action=_line_prefix("###")),
    Icon(id="bold",          label="Bold",           action=_surround("**")),
    Icon(id="italic",        label="Italic",         action=_surround("*")),
    Icon(id="strikethrough", label="Strikethrough",  action=_surround("~~")),
    Icon(id="quote",         label="Quote",          action=_line_prefix(">")),
    Icon(id="code",          label="Code",           action=_surround("`")),
    Icon(id="link",          label="Link",           action=_link),
    Icon(id="bulletedList",  label="Bulleted list",  action=_line_prefix("-")),
    Icon(id="numberedList",  label="Numbered list",  action=_line_prefix("1.")),
    Icon(id="taskList",      label="Task list",      action=_line_prefix("- [ ]")),
)


# -----------------------------------------------------------------------------
# Prefixes
# -----------------------------------------------------------------------------

_TASK_RE     = re.compile(r"^(\s*)([-*+]) \[[ xX]\] ")
_BULLET_RE   = re.compile(r"^(\s*)([-*+]) ")
_NUMBERED_RE = re.compile(r"^(\s*)(\d+)([.)]) ")
_QUOTE_RE    = re.compile(r"^(\s*>+) ")


def _match_with(regex: re.Pattern):
    def match(line: str) -> str | None:
        m = regex.match(line)
        return m.group(0) if m else None
    return match


def _task_maker(previous: str, line: str) -> str:
    m = _TASK_RE.match(previous)
    return f"{m.group(1)}{m.group(2)} [ ] "


def _numbered_maker(previous: str, line: str) -> str:
    m = _NUMBERED_RE.match(previous)
    return f"{m.group(1)}{int(m.group(2)) + 1}{m.group(3)} "


def _same(previous: str, line: str) -> str:
    return previous


DEFAULT_PREFIXES: tuple[Prefix, ...] = (
    Prefix(id="taskList",     match=_match_with(_TASK_RE),     maker=_task_maker),
    Prefix(id="bulletedList", match=_match_with(_BULLET_RE),   maker=_same),
    Prefix(id="numberedList", match=_match_with(_NUMBERED_RE), maker=_numbered_maker),
    Prefix(id="blockquote",   match=_match_with(_QUOTE_RE),    maker=_same),
)


# -----------------------------------------------------------------------------

DEFAULT_SHORTCUT_IDS = tuple(s.id for s in DEFAULT_SHORTCUTS)
DEFAULT_ICON_IDS     = tuple(i.id for i in DEFAULT_ICONS)
DEFAULT_PREFIX_IDS   = tuple(p.id for p in DEFAULT_PREFIXES)


# -----------------------------------------------------------------------------
