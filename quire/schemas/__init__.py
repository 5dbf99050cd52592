from quire.schemas.schemas import (
    MarkupRule,
    KeyboardShortcut, Icon, Prefix,
    HighlightRule,
    Listener, ListenerOptions,
    ExtensionComponent,
    Extension,
    HistoryOptions, HeadingIdOptions,
    QuireOptions,
)

__all__ = [
    "MarkupRule",
    "KeyboardShortcut", "Icon", "Prefix",
    "HighlightRule",
    "Listener", "ListenerOptions",
    "ExtensionComponent",
    "Extension",
    "HistoryOptions", "HeadingIdOptions",
    "QuireOptions",
]
