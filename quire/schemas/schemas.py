#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 models for extension descriptors and instance options.

Every descriptor is frozen; sequences are coerced to tuples so nothing a
caller registers can be mutated afterwards.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quire.core.config import get_settings


_FROZEN = ConfigDict(frozen=True, arbitrary_types_allowed=True)

ComponentParent = Literal["editor", "input", "renderer", "preview"]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Markup rules
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class MarkupRule(BaseModel):
    """A unit of markup transformation folded onto both parsers.

    ``plugins`` are ordinary mistune plugins (``plugin(md)``).  ``renderers``
    maps a token type to ``func(renderer, text, **attrs)`` and is registered
    on the HTML renderer.  ``walk_tokens`` sees every block-level token after
    block parsing and before rendering; it may return an awaitable only when
    ``is_async`` is set.
    """

    model_config = _FROZEN

    name: str
    is_async: bool = False
    plugins: tuple[Callable[..., Any], ...] = ()
    renderers: Mapping[str, Callable[..., str]] = Field(default_factory=dict)
    walk_tokens: Optional[Callable[[dict], Any]] = None
    preprocess: Optional[Callable[[str], Any]] = None
    postprocess: Optional[Callable[[str], Any]] = None

    def passthrough(self) -> MarkupRule:
        """Same rule slot, nothing executed."""
        return MarkupRule(name=self.name)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Editor contributions
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class KeyboardShortcut(BaseModel):
    model_config = _FROZEN

    id: str
    combination: frozenset[str]
    action: Callable[[Any], Any]
    prevent_save: bool = False

    @field_validator("combination", mode="before")
    @classmethod
    def normalise_keys(cls, v: Any) -> frozenset[str]:
        keys = frozenset(str(k).lower() for k in v)
        if not keys:
            raise ValueError("A shortcut needs at least one key")
        return keys


# -----------------------------------------------------------------------------

class Icon(BaseModel):
    model_config = _FROZEN

    id: str
    action: Callable[[Any], Any]
    label: str = ""
    component: Any = None


# -----------------------------------------------------------------------------

class Prefix(BaseModel):
    """Line prefix continued on the next line (list bullets, quotes...)."""

    model_config = _FROZEN

    id: str
    match: Callable[[str], Optional[str]]
    maker: Callable[[str, str], str]


# -----------------------------------------------------------------------------

class HighlightRule(BaseModel):
    """A single pattern of a highlight language definition."""

    model_config = _FROZEN

    match: Union[str, re.Pattern]
    type: str

    @property
    def pattern(self) -> str:
        return self.match.pattern if isinstance(self.match, re.Pattern) else self.match


# -----------------------------------------------------------------------------

class ListenerOptions(BaseModel):
    model_config = _FROZEN

    once: bool = False
    capture: bool = False
    passive: bool = False


class Listener(BaseModel):
    model_config = _FROZEN

    event: str
    handler: Callable[[Any], Any]
    options: Union[ListenerOptions, bool, None] = None


# -----------------------------------------------------------------------------

class ExtensionComponent(BaseModel):
    """A UI add-on; the core only stores it for the editor components."""

    model_config = _FROZEN

    component: Any
    props: Mapping[str, Any] = Field(default_factory=dict)
    parent: tuple[ComponentParent, ...]

    @field_validator("parent", mode="before")
    @classmethod
    def parent_as_tuple(cls, v: Any) -> Any:
        if isinstance(v, str):
            return (v,)
        return v


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Extensions
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class Extension(BaseModel):
    model_config = _FROZEN

    markup_rules: tuple[MarkupRule, ...] = ()
    shortcuts: tuple[KeyboardShortcut, ...] = ()
    icons: tuple[Icon, ...] = ()
    prefixes: tuple[Prefix, ...] = ()
    highlight_rules: tuple[HighlightRule, ...] = ()
    listeners: tuple[Listener, ...] = ()
    components: tuple[ExtensionComponent, ...] = ()
    # Called once with OnLoadData when an instance loads the extension.
    on_load: Optional[Callable[[Any], Any]] = None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Options
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HistoryOptions(BaseModel):
    model_config = _FROZEN

    min_interval: int = Field(default_factory=lambda: get_settings().history_min_interval, ge=0)
    max_size: int = Field(default_factory=lambda: get_settings().history_max_size, gt=0)


class HeadingIdOptions(BaseModel):
    model_config = _FROZEN

    prefix: str = Field(default_factory=lambda: get_settings().heading_id_prefix)


def _default_heading_id() -> Union[HeadingIdOptions, Literal[False]]:
    return HeadingIdOptions() if get_settings().gfm_heading_id else False


# -----------------------------------------------------------------------------

DisableList = Union[Literal[True], tuple[str, ...], None]


class QuireOptions(BaseModel):
    model_config = _FROZEN

    extensions: tuple[Extension, ...] = ()
    renderer_debounce: int = Field(default_factory=lambda: get_settings().renderer_debounce, ge=0)
    disable_shortcuts: DisableList = None
    disable_icons: DisableList = None
    disable_prefixes: DisableList = None
    history_options: HistoryOptions = Field(default_factory=HistoryOptions)
    sanitizer: Optional[Callable[[str], str]] = None
    mangle: bool = Field(default_factory=lambda: get_settings().mangle)
    gfm_heading_id: Union[HeadingIdOptions, Literal[False]] = Field(default_factory=_default_heading_id)

    @field_validator("disable_shortcuts", "disable_icons", "disable_prefixes", mode="before")
    @classmethod
    def false_means_none(cls, v: Any) -> Any:
        if v is False:
            return None
        return v

    @field_validator("disable_shortcuts")
    @classmethod
    def known_shortcut_ids(cls, v: DisableList) -> DisableList:
        from quire.services.defaults import DEFAULT_SHORTCUT_IDS
        return _check_ids(v, DEFAULT_SHORTCUT_IDS, "shortcut")

    @field_validator("disable_icons")
    @classmethod
    def known_icon_ids(cls, v: DisableList) -> DisableList:
        from quire.services.defaults import DEFAULT_ICON_IDS
        return _check_ids(v, DEFAULT_ICON_IDS, "icon")

    @field_validator("disable_prefixes")
    @classmethod
    def known_prefix_ids(cls, v: DisableList) -> DisableList:
        from quire.services.defaults import DEFAULT_PREFIX_IDS
        return _check_ids(v, DEFAULT_PREFIX_IDS, "prefix")


def _check_ids(v: DisableList, known: tuple[str, ...], kind: str) -> DisableList:
    if v is None or v is True:
        return v
    unknown = [i for i in v if i not in known]
    if unknown:
        raise ValueError(
            f"Unknown default {kind} id(s): {', '.join(unknown)} "
            f"(expected any of: {', '.join(known)})"
        )
    return v


# -----------------------------------------------------------------------------
