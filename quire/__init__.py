from quire._version import __version__
from quire.main import OnLoadData, Quire
from quire.schemas import (
    MarkupRule,
    KeyboardShortcut, Icon, Prefix,
    HighlightRule,
    Listener, ListenerOptions,
    ExtensionComponent,
    Extension,
    HistoryOptions, HeadingIdOptions,
    QuireOptions,
)
from quire.services.events import QuireEvent
from quire.services.highlight import (
    COMPOSITE_LANGUAGE,
    highlight, highlight_autodetect, load_custom_language,
)
from quire.services.registry import RESERVED_EVENTS, RENDER_EVENT, RENDER_SSR_EVENT

__all__ = [
    "__version__",
    "Quire", "OnLoadData",
    "MarkupRule",
    "KeyboardShortcut", "Icon", "Prefix",
    "HighlightRule",
    "Listener", "ListenerOptions",
    "ExtensionComponent",
    "Extension",
    "HistoryOptions", "HeadingIdOptions",
    "QuireOptions",
    "QuireEvent",
    "COMPOSITE_LANGUAGE",
    "highlight", "highlight_autodetect", "load_custom_language",
    "RESERVED_EVENTS", "RENDER_EVENT", "RENDER_SSR_EVENT",
]
