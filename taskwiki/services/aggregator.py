#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Task aggregation
================
Resolves an ``INCLUDE`` task into the list of tasks it points at.

Targets, first match wins:

  - ``INCLUDE wiki:all``            every page, in case-insensitive name order
  - ``INCLUDE http://host/file``    a remote text file
  - ``INCLUDE wiki:PageName``       one page; otherwise ``Context<context>``
                                    or ``Project<project>``

Nested INCLUDEs are only expanded when the caller passes a ``visited`` list
(``recursive:true`` on the page's INCLUDE line).  The list collects every
origin name seen along one top-level expansion and is the sole cycle breaker.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html as _html
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Protocol

import httpx

from taskwiki.core.config import Settings
from taskwiki.services.pages import PageNotFound
from taskwiki.services.tasks import Origin, Task, parse_task

log = logging.getLogger(__name__)


# Attributes an INCLUDE hands down to the tasks it collects.
INHERITED_KEYS = ("project", "context")

_PREFIXED_PAGE_RE = re.compile(r"^(Project|Context)([A-Z]\w*)$")


# -----------------------------------------------------------------------------

class PageSource(Protocol):
    def find(self, name: str) -> str: ...
    def list_all(self) -> Iterable[tuple[str, str]]: ...


class FetchFailure(Exception):
    """A remote INCLUDE target could not be retrieved."""


Fetcher = Callable[[str], str]


# -----------------------------------------------------------------------------

def make_fetcher(timeout: Optional[float] = None) -> Fetcher:
    """Blocking GET returning the response body; errors become FetchFailure."""
    def _fetch(url: str) -> str:
        try:
            resp = httpx.get(url, timeout=timeout, follow_redirects=True)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise FetchFailure(f"{url}: {exc}") from exc
        return resp.text
    return _fetch


# -----------------------------------------------------------------------------

@dataclass
class TaskList:
    example: Task
    tasks: list[Task] = field(default_factory=list)
    error: Optional[str] = None

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self):
        return iter(self.tasks)

    def to_html(self) -> str:
        if self.error:
            status = f'<span class="task-error">{_html.escape(self.error)}</span>'
        else:
            status = f'<span class="tasklist-count">({len(self.tasks)})</span>'
        lines = [
            '<div class="tasklist">',
            f'<h4 class="tasklist-head">{self.example.inline_html()} {status}</h4>',
        ]
        lines.extend(task.to_html() for task in self.tasks)
        lines.append("</div>")
        return "\n".join(lines)


# -----------------------------------------------------------------------------

def page_attributes(name: str) -> dict[str, str]:
    """``ProjectWidgets`` implies project:Widgets, ``ContextHome`` context:Home."""
    m = _PREFIXED_PAGE_RE.match(name)
    if not m:
        return {}
    return {m.group(1).lower(): m.group(2)}


def target_page(example: Task) -> Optional[str]:
    """Page an INCLUDE names: wiki:, then Context<context>, then Project<project>."""
    if example.get("wiki"):
        return example["wiki"]
    if example.get("context"):
        return "Context" + example["context"]
    if example.get("project"):
        return "Project" + example["project"]
    return None


# -----------------------------------------------------------------------------

class TaskAggregator:

    def __init__(
        self,
        pages: PageSource,
        settings: Settings,
        fetch: Optional[Fetcher] = None,
    ) -> None:
        self.pages    = pages
        self.settings = settings
        self.fetch    = fetch or make_fetcher(settings.fetch_timeout)

    # ── Origins ───────────────────────────────────────────────────────────

    def page_origin(self, name: str, carried: dict[str, str]) -> Origin:
        base = self.settings.base_url
        return Origin(
            name=f"/{name}",
            view_url=f"{base}/{name}",
            edit_url=f"{base}/e/{name}",
            attributes=carried,
            implied=page_attributes(name),
        )

    def _carried(self, example: Task) -> dict[str, str]:
        return {k: example[k] for k in INHERITED_KEYS if example.get(k)}

    # ── Resolution ────────────────────────────────────────────────────────

    def resolve(self, example: Task, visited: Optional[list[str]] = None) -> TaskList:
        result = TaskList(example=example)
        carried = self._carried(example)

        if example.get("wiki") == "all":
            for name, content in sorted(self.pages.list_all(), key=lambda p: p[0].lower()):
                self.fill_from_string(result, content, self.page_origin(name, carried), visited)
            return result

        if example.description.startswith("http"):
            url = example.description
            try:
                body = self.fetch(url)
            except FetchFailure as exc:
                log.warning("INCLUDE fetch failed: %s", exc)
                result.error = f"could not fetch {url}"
                return result
            origin = Origin(name=url, view_url=url, attributes=carried)
            self.fill_from_string(result, body, origin, visited)
            return result

        name = target_page(example)
        if name is None:
            return result
        try:
            content = self.pages.find(name)
        except PageNotFound:
            log.info("INCLUDE target page %r not found", name)
            result.error = f"page not found: {name}"
            return result
        self.fill_from_string(result, content, self.page_origin(name, carried), visited)
        return result

    def fill_from_string(
        self,
        result: TaskList,
        text: str,
        origin: Origin,
        visited: Optional[list[str]],
    ) -> None:
        """Fold the tasks found in *text* into *result*."""
        if visited is not None:
            if origin.name in visited:
                log.debug("INCLUDE cycle: %s already visited", origin.name)
                return
            visited.append(origin.name)

        for line in text.splitlines():
            task = parse_task(line)
            if task is None:
                continue
            task.inherit(origin.attributes)
            if not task.is_include:
                task.inherit(origin.implied)
            task.origin = origin
            if task.is_include and visited is not None:
                result.tasks.extend(self.resolve(task, visited).tasks)
            else:
                result.tasks.append(task)


# -----------------------------------------------------------------------------
