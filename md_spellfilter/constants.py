"""Constants used across the md-spellfilter package."""

from __future__ import annotations

# Sentinel returned by the cursor at end of line or end of buffer.
EOL = ""

LINE_TERMINATORS = "\r\n"
BLANK = " "

# Markdown layout
TAB_STOP = 4
CODE_INDENT = 4
MAX_LIST_MARKER_SPACING = 4
MIN_FENCE_LENGTH = 3
FENCE_CHARS = ("`", "~")
BULLET_MARKERS = ("-", "+", "*")
ORDERED_DELIMITERS = (".", ")")
THEMATIC_BREAK_CHARS = ("-", "_", "*")
SETEXT_UNDERLINE_CHARS = ("=",)

# Inline syntax
CODE_SPAN_CHAR = "`"
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
UNQUOTED_VALUE_STOP_CHARS = "\"'=<>`"

# Configuration defaults
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_RAW_START_TAGS = ("script", "style", "pre", "textarea")
DEFAULT_BLOCK_START_TAGS = (
    "address",
    "article",
    "aside",
    "blockquote",
    "details",
    "div",
    "dl",
    "fieldset",
    "figure",
    "footer",
    "form",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "header",
    "hr",
    "main",
    "nav",
    "ol",
    "p",
    "section",
    "table",
    "ul",
)
