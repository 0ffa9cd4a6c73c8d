#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Section structuring
===================
Wraps rendered HTML into nested, addressable sections::

    <div class="section1"><h1 id="title">Title</h1>
      ...
      <div class="section2"><h2 id="part-one">Part one</h2>...</div>
    </div>

The HTML is handled as text: it is split on the opening ``<hN`` prefix of
the current level and every piece after the first becomes one section.
Only levels 1 and 2 are structured; h3 and deeper stay flat inside their
level-2 section.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re


MAX_SECTION_LEVEL = 2

_TEXT_RUN_RE  = re.compile(r">\s*([^\W\d_][^<]*)")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_ID_ATTR_RE   = re.compile(r"""\s+id\s*=\s*("[^"]*"|'[^']*'|[^\s>]+)""", re.IGNORECASE)


# -----------------------------------------------------------------------------

def section_slug(fragment: str) -> str:
    """Slug from the first text run starting with a letter, e.g. ``part-one``."""
    m = _TEXT_RUN_RE.search(fragment)
    if not m:
        return "section"
    slug = _NON_ALNUM_RE.sub("-", m.group(1).lower())
    return slug.rstrip("-") or "section"


# -----------------------------------------------------------------------------

def _section(fragment: str, level: int) -> str:
    slug = section_slug(fragment)

    # fragment looks like ' class="x">Heading</hN>rest' or '>Heading</hN>rest'
    attrs, gt, after = fragment.partition(">")
    attrs = _ID_ATTR_RE.sub("", attrs)

    if level < MAX_SECTION_LEVEL:
        close = f"</h{level}>"
        idx = after.find(close)
        if idx != -1:
            idx += len(close)
            after = after[:idx] + structure(after[idx:], level + 1)

    return f'<div class="section{level}"><h{level} id="{slug}"{attrs}{gt}{after}</div>'


def structure(html: str, level: int = 1) -> str:
    """Nest *html* into ``section<level>`` containers, recursing to level 2."""
    if level > MAX_SECTION_LEVEL:
        return html
    fragments = html.split(f"<h{level}")
    out = [fragments[0]]
    out.extend(_section(fragment, level) for fragment in fragments[1:])
    return "".join(out)


# -----------------------------------------------------------------------------
