#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Page renderer
=============
Renders wiki page content to HTML.

Pipeline, each stage consuming the previous stage's output:

  1. subtopics   : ``INCLUDE_HEAD <url>`` lines become an embedded frame
  2. tasks       : task lines become task HTML, INCLUDE lines the task list
                   they resolve to (see ``services.aggregator``)
  3. markdown    : rendered via mistune (tables, strikethrough, urls) with
                   Pygments highlighting for fenced code
  4. heading     : an <h1> with the page title is added when none exists
  5. sections    : nested ``section1`` / ``section2`` containers
  6. links       : reserved; WikiWord auto-linking is disabled
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html as _html
import logging
import re
from typing import Optional

from taskwiki.core.config import Settings
from taskwiki.services.aggregator import Fetcher, PageSource, TaskAggregator
from taskwiki.services.pages import titleize
from taskwiki.services.sections import structure
from taskwiki.services.tasks import parse_task

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Markdown renderer via mistune
# -----------------------------------------------------------------------------

def _highlight_code(code: str, lang: str) -> str:
    """Highlight *code* using Pygments.  Unknown languages render as plain text."""
    from pygments import highlight
    from pygments.lexers import get_lexer_by_name, TextLexer
    from pygments.formatters import HtmlFormatter
    from pygments.util import ClassNotFound
    try:
        lexer = get_lexer_by_name(lang.strip(), stripall=True) if lang.strip() else TextLexer()
    except ClassNotFound:
        lexer = TextLexer()
    formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
    return highlight(code, lexer, formatter)


def _make_md_renderer():
    import mistune
    from mistune.plugins.table import table
    from mistune.plugins.formatting import strikethrough
    from mistune.plugins.url import url

    class _HighlightRenderer(mistune.HTMLRenderer):
        def codespan(self, code: str) -> str:
            return f'<code>{_html.escape(code)}</code>'

        def block_code(self, code: str, **kwargs) -> str:
            info = kwargs.get('info') or ''
            lang = info.split()[0] if info else ''
            if lang:
                return _highlight_code(code, lang)
            return f'<pre><code>{_html.escape(code)}</code></pre>'

    md = mistune.create_markdown(
        renderer=_HighlightRenderer(escape=False),
        plugins=[table, strikethrough, url],
    )
    return md


_md_renderer = None


def _get_md_renderer():
    global _md_renderer
    if _md_renderer is None:
        _md_renderer = _make_md_renderer()
    return _md_renderer


def render_markdown(text: str) -> str:
    return _get_md_renderer()(text)


# -----------------------------------------------------------------------------
# Pre-markdown line substitutions
# -----------------------------------------------------------------------------

_SUBTOPIC_RE = re.compile(r"^INCLUDE_HEAD\s+(\S+)\s*$")
_H1_RE       = re.compile(r"<h1[\s>]", re.IGNORECASE)


def _html_block(fragment: str) -> str:
    # Trailing blank line closes the raw HTML block for the markdown parser.
    return fragment + "\n"


def subtopic_html(url: str) -> str:
    src = _html.escape(url, quote=True)
    return _html_block(f'<div class="subtopic"><iframe src="{src}"></iframe></div>')


def substitute_subtopics(content: str) -> str:
    out: list[str] = []
    for line in content.splitlines():
        m = _SUBTOPIC_RE.match(line)
        out.append(subtopic_html(m.group(1)) if m else line)
    return "\n".join(out)


# -----------------------------------------------------------------------------

class PageRenderer:
    """Turns one page's source text into its final HTML."""

    def __init__(
        self,
        settings: Settings,
        pages: PageSource,
        fetch: Optional[Fetcher] = None,
    ) -> None:
        self.settings   = settings
        self.aggregator = TaskAggregator(pages, settings, fetch=fetch)

    def substitute_tasks(self, content: str, page_name: str) -> str:
        out: list[str] = []
        for line in content.splitlines():
            task = parse_task(line)
            if task is None:
                out.append(line)
            elif task.is_include:
                visited = [f"/{page_name}"] if task.get("recursive") == "true" else None
                out.append(_html_block(self.aggregator.resolve(task, visited).to_html()))
            else:
                out.append(_html_block(task.to_html()))
        return "\n".join(out)

    def add_heading(self, html: str, page_name: str) -> str:
        if _H1_RE.search(html):
            return html
        return f"<h1>{_html.escape(titleize(page_name))}</h1>\n{html}"

    def add_links(self, html: str) -> str:
        return html

    def to_html(self, content: str, page_name: str) -> str:
        text = substitute_subtopics(content)
        text = self.substitute_tasks(text, page_name)
        html = render_markdown(text)
        html = self.add_heading(html, page_name)
        html = structure(html, 1)
        return self.add_links(html)


# -----------------------------------------------------------------------------

def render_page(
    name: str,
    content: str,
    pages: PageSource,
    settings: Settings,
    fetch: Optional[Fetcher] = None,
) -> str:
    """Render page *name* whose source is *content*."""
    log.debug("Rendering %s", name)
    return PageRenderer(settings, pages, fetch=fetch).to_html(content, name)


# -----------------------------------------------------------------------------
