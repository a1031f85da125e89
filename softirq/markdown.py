"""Shared Markdown rendering helpers."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import cast

from markdown_it import MarkdownIt
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

FENCE_RE = re.compile(r"^\s*(```|~~~)")
MDX_STATEMENT_RE = re.compile(r"^(import|export)\s")
IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]+\)")
LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
CODE_RE = re.compile(r"`([^`]+)`")
TAG_RE = re.compile(r"<[^>]+>")

OPENING_BRACKETS = "{(["
CLOSING_BRACKETS = "})]"

# Spans only; markdown-it wraps them in <pre><code class="language-...">.
CODE_FORMATTER = HtmlFormatter(nowrap=True)


def highlight_code(code: str, lang: str, attrs: str) -> str:
    """Highlight a fenced block with Pygments.

    An empty string tells markdown-it to fall back to escaped plain text,
    which happens for fences without a language or with one Pygments does
    not know.
    """
    if not lang:
        return ""
    try:
        lexer = get_lexer_by_name(lang, stripnl=False)
    except ClassNotFound:
        return ""
    return highlight(code, lexer, CODE_FORMATTER)


@lru_cache(maxsize=1)
def _renderer() -> MarkdownIt:
    """Configure and cache a CommonMark-compliant renderer."""
    md = MarkdownIt(
        "commonmark",
        {"html": True, "linkify": False, "typographer": True, "highlight": highlight_code},
    )
    md.enable("table").enable("strikethrough")
    md.use(anchors_plugin, min_level=2, max_level=3)
    md.use(deflist_plugin)
    md.use(footnote_plugin)
    md.use(tasklists_plugin, label=True)
    return md


def render_markdown(text: str) -> str:
    """Render Markdown to HTML using the shared renderer."""
    if not text.strip():
        return ""
    return cast(str, _renderer().render(text))


def strip_mdx_statements(text: str) -> str:
    """Drop top-level MDX ``import``/``export`` statements outside fenced code.

    A statement continues onto following lines while it has unclosed
    brackets, so ``import {\\n  a,\\n  b,\\n} from "x"`` is removed whole.
    """
    kept: list[str] = []
    in_fence = False
    depth = 0
    for line in text.splitlines():
        if depth > 0:
            depth += _bracket_balance(line)
            continue
        if FENCE_RE.match(line):
            in_fence = not in_fence
        elif not in_fence and MDX_STATEMENT_RE.match(line):
            depth = max(0, _bracket_balance(line))
            continue
        kept.append(line)
    return "\n".join(kept)


def _bracket_balance(line: str) -> int:
    return sum(line.count(char) for char in OPENING_BRACKETS) - sum(
        line.count(char) for char in CLOSING_BRACKETS
    )


def extract_plain_text(body: str) -> str:
    """Approximate the readable text of a markdown body, skipping code blocks."""
    text_parts: list[str] = []
    in_fence = False
    for line in strip_mdx_statements(body).splitlines():
        if FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        stripped = line.strip()
        if not stripped:
            continue
        stripped = IMAGE_RE.sub("", stripped)
        stripped = LINK_RE.sub(r"\1", stripped)
        stripped = CODE_RE.sub(r"\1", stripped)
        stripped = TAG_RE.sub("", stripped)
        stripped = stripped.lstrip("#>*-1234567890. ").strip()
        if stripped:
            text_parts.append(stripped)
    return " ".join(text_parts)
