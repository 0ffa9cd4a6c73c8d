#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the page render pipeline."""
# -----------------------------------------------------------------------------

from __future__ import annotations

from taskwiki.services.pages import titleize
from taskwiki.services.renderer import (
    PageRenderer, render_markdown, render_page, substitute_subtopics,
)
from tests.conftest import StubFetcher, snapshot


# -----------------------------------------------------------------------------

def _render(content, name="Home", pages=None, settings=None, fetcher=None):
    return render_page(name, content, pages or snapshot(), settings, fetch=fetcher or StubFetcher())


# ── Markdown ─────────────────────────────────────────────────────────────────

def test_markdown_basics():
    html = render_markdown("Some **bold** text\n")
    assert "<strong>bold</strong>" in html


def test_markdown_strikethrough_and_tables():
    html = render_markdown("~~gone~~\n\n| a | b |\n|---|---|\n| 1 | 2 |\n")
    assert "<del>gone</del>" in html
    assert "<table>" in html


def test_fenced_code_is_highlighted():
    html = render_markdown("```python\nx = 1\n```\n")
    assert 'class="highlight"' in html


# ── Titles ───────────────────────────────────────────────────────────────────

def test_titleize():
    assert titleize("ProjectWidgets") == "Project Widgets"
    assert titleize("HTMLParser") == "HTML Parser"
    assert titleize("Home") == "Home"


# ── Subtopics ────────────────────────────────────────────────────────────────

def test_subtopic_line_becomes_frame():
    out = substitute_subtopics("before\nINCLUDE_HEAD http://example.com/head\nafter")
    assert '<iframe src="http://example.com/head"></iframe>' in out
    assert out.startswith("before\n")
    assert out.endswith("after")


def test_subtopic_in_rendered_page(settings):
    html = _render("INCLUDE_HEAD http://example.com/h\n", settings=settings)
    assert '<div class="subtopic"><iframe src="http://example.com/h"></iframe></div>' in html


# ── Tasks ────────────────────────────────────────────────────────────────────

def test_two_tasks_no_list_wrapper(settings):
    html = _render("TODO buy milk\nDONE ship it\n", settings=settings)
    first = html.index('<div class="task task-todo">')
    second = html.index('<div class="task task-done">')
    assert first < second
    assert "<del>" not in html[first:second]
    assert "<del><b>DONE</b> ship it</del>" in html[second:]
    assert "<ul>" not in html
    assert "<li>" not in html


def test_bulleted_tasks_lose_list_wrapper(settings):
    html = _render("* TODO buy milk\n* TODO buy eggs\n", settings=settings)
    assert html.count('class="task task-todo"') == 2
    assert "<li>" not in html


def test_markdown_after_task_still_rendered(settings):
    html = _render("TODO one\nSome *emphasis* here\n", settings=settings)
    assert "<em>emphasis</em>" in html


def test_plain_lines_pass_through(settings):
    html = _render("A paragraph about TODO lists.\n", settings=settings)
    assert "<p>A paragraph about TODO lists.</p>" in html
    assert "task-todo" not in html


def test_include_renders_task_list(settings):
    pages = snapshot(ProjectWidgets="TODO order sprockets\n")
    html = _render("INCLUDE project:Widgets\n", pages=pages, settings=settings)
    assert '<div class="tasklist">' in html
    assert "order sprockets" in html
    assert "project:Widgets" in html
    assert 'href="/e/ProjectWidgets"' in html


def test_include_missing_page_degrades(settings):
    html = _render("Intro\n\nINCLUDE wiki:Nowhere\n\nOutro\n", settings=settings)
    assert "page not found: Nowhere" in html
    assert "<p>Outro</p>" in html


def test_include_dead_url_degrades(settings):
    html = _render("INCLUDE http://dead.invalid/tasks\n", settings=settings)
    assert "could not fetch http://dead.invalid/tasks" in html


def test_include_without_recursive_leaves_nested_literal(settings):
    pages = snapshot(Outer="TODO outer\nINCLUDE wiki:Inner\n", Inner="TODO inner\n")
    html = _render("INCLUDE wiki:Outer\n", pages=pages, settings=settings)
    assert "outer" in html
    assert "inner" not in html.replace("wiki:Inner", "")


def test_recursive_include_expands(settings):
    pages = snapshot(Outer="TODO outer\nINCLUDE wiki:Inner\n", Inner="TODO inner\n")
    html = _render("INCLUDE wiki:Outer recursive:true\n", pages=pages, settings=settings)
    assert "(2)" in html
    assert 'href="/e/Inner"' in html


def test_recursive_include_skips_current_page(settings):
    pages = snapshot(
        Home="TODO home task\nINCLUDE wiki:Other recursive:true\n",
        Other="TODO other task\nINCLUDE wiki:Home\n",
    )
    html = _render(pages.find("Home"), name="Home", pages=pages, settings=settings)
    assert html.count("other task") == 1
    assert html.count("home task") == 1


def test_recursive_must_be_literal_true(settings):
    pages = snapshot(Outer="INCLUDE wiki:Inner\n", Inner="TODO inner\n")
    html = _render("INCLUDE wiki:Outer recursive:yes\n", pages=pages, settings=settings)
    assert 'href="/e/Inner"' not in html


# ── Headings & sections ──────────────────────────────────────────────────────

def test_heading_injected_from_page_name(settings):
    html = _render("hello\n", name="ProjectWidgets", settings=settings)
    assert '<h1 id="project-widgets">Project Widgets</h1>' in html
    assert html.startswith('<div class="section1">')


def test_existing_heading_not_duplicated(settings):
    html = _render("# Title\nhello", name="Home", settings=settings)
    assert html.count("<h1") == 1
    assert '<h1 id="title">Title</h1>' in html
    assert "Home" not in html


def test_sections_in_rendered_page(settings):
    html = _render("# Top\n\nintro\n\n## Part A\n\na\n\n## Part B\n\nb\n", settings=settings)
    assert html.count('<div class="section1">') == 1
    assert html.count('<div class="section2">') == 2
    assert 'id="part-a"' in html
    assert 'id="part-b"' in html


def test_renderer_is_deterministic(settings):
    pages = snapshot(Notes="TODO one\n")
    renderer = PageRenderer(settings, pages, fetch=StubFetcher())
    content = "# Notes\n\nINCLUDE wiki:Notes recursive:true\n"
    assert renderer.to_html(content, "Index") == renderer.to_html(content, "Index")
