#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Task markup
===========
Parses the one-line task directives embedded in wiki pages::

    * TODO project:Widgets context:Office order more sprockets
    DONE: ship the release
    INCLUDE project:Widgets recursive:true

A line is a task when, after an optional ``*`` bullet, it starts with one of
the keywords DO, TODO, DONE, CANCEL or INCLUDE (case-sensitive, optional
colon, then whitespace).  ``key:value`` words directly after the keyword are
the task's attributes; the rest of the line is its description.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import enum
import html as _html
import re
from dataclasses import dataclass, field
from typing import Optional


# -----------------------------------------------------------------------------

class TaskKind(enum.Enum):
    DO      = "DO"
    TODO    = "TODO"
    DONE    = "DONE"
    CANCEL  = "CANCEL"
    INCLUDE = "INCLUDE"


# -----------------------------------------------------------------------------

@dataclass
class Origin:
    """Where a batch of tasks came from: a wiki page or a remote URL."""

    name: str                       # "/PageName" or the URL itself
    view_url: str
    edit_url: Optional[str] = None  # absent for remote URLs
    attributes: dict[str, str] = field(default_factory=dict)
    # Tags read from the page name; never handed to nested INCLUDEs.
    implied: dict[str, str] = field(default_factory=dict)

    @property
    def url(self) -> str:
        return self.edit_url or self.view_url


# -----------------------------------------------------------------------------

@dataclass
class Task:
    kind: TaskKind
    attributes: list[tuple[str, str]] = field(default_factory=list)
    description: str = ""
    origin: Optional[Origin] = None

    def get(self, key: str) -> Optional[str]:
        """Return the value of the first attribute named *key*, else None."""
        for k, v in self.attributes:
            if k == key:
                return v
        return None

    def __getitem__(self, key: str) -> Optional[str]:
        return self.get(key)

    def has(self, key: str) -> bool:
        return any(k == key for k, _ in self.attributes)

    @property
    def is_done(self) -> bool:
        return self.kind in (TaskKind.DONE, TaskKind.CANCEL)

    @property
    def is_include(self) -> bool:
        return self.kind is TaskKind.INCLUDE

    @property
    def origin_url(self) -> Optional[str]:
        return self.origin.url if self.origin else None

    def inherit(self, attributes: dict[str, str]) -> None:
        """Append every inherited pair whose key the task does not carry yet."""
        for key, value in attributes.items():
            if not self.has(key):
                self.attributes.append((key, value))

    # ── HTML ──────────────────────────────────────────────────────────────

    def inline_html(self) -> str:
        """Bold keyword, attributes and description; struck through when done."""
        parts = [f"<b>{self.kind.value}</b>"]
        parts.extend(
            f'<span class="task-attr">{_html.escape(k)}:{_html.escape(v)}</span>'
            for k, v in self.attributes
        )
        if self.description:
            parts.append(_html.escape(self.description))
        body = " ".join(parts)
        if self.is_done:
            body = f"<del>{body}</del>"
        return body

    def to_html(self) -> str:
        link = ""
        if self.origin_url:
            link = f' <a class="task-origin" href="{_html.escape(self.origin_url)}">edit</a>'
        return f'<div class="task task-{self.kind.value.lower()}">{self.inline_html()}{link}</div>'

    def __str__(self) -> str:
        words = [self.kind.value] + [f"{k}:{v}" for k, v in self.attributes]
        if self.description:
            words.append(self.description)
        return " ".join(words)


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------

_TASK_RE = re.compile(
    r"^\s*(?:\*\s+)?"
    r"(?P<kind>TODO|DONE|DO|CANCEL|INCLUDE):?\s+"
    r"(?P<tags>(?:\w+:[\w.\-]+\s+)*)"
    r"(?P<description>.*)$"
)
_TAG_RE = re.compile(r"(\w+):([\w.\-]+)")


def parse_task(line: str) -> Optional[Task]:
    """Return the Task on *line*, or None when the line is plain text."""
    # The trailing space lets "INCLUDE wiki:all" match with an empty description.
    m = _TASK_RE.match(line.rstrip("\r\n") + " ")
    if not m:
        return None
    return Task(
        kind=TaskKind(m.group("kind")),
        attributes=_TAG_RE.findall(m.group("tags")),
        description=m.group("description").strip(),
    )


def parse_tasks(text: str) -> list[Task]:
    """Every task found in *text*, in line order; plain lines are dropped."""
    tasks: list[Task] = []
    for line in text.splitlines():
        task = parse_task(line)
        if task is not None:
            tasks.append(task)
    return tasks


# -----------------------------------------------------------------------------
