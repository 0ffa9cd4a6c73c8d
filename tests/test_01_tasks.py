#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the task line grammar and single-task HTML."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from taskwiki.services.tasks import Origin, Task, TaskKind, parse_task, parse_tasks


# ── Plain lines ──────────────────────────────────────────────────────────────

@pytest.mark.parametrize("line", [
    "",
    "just some text",
    "# TODO heading",
    "todo lower case keyword",
    "TODOS are not a keyword",
    "DONEish",
    "INCLUDE_HEAD http://example.com/head",
    "- TODO dash bullets are not task bullets",
    "**TODO** bold",
    "Remember: TODO later",
])
def test_plain_lines_are_not_tasks(line):
    assert parse_task(line) is None


# ── Keywords ─────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("line, kind", [
    ("DO call the bank", TaskKind.DO),
    ("TODO buy milk", TaskKind.TODO),
    ("DONE ship it", TaskKind.DONE),
    ("CANCEL the meeting", TaskKind.CANCEL),
    ("INCLUDE wiki:Home", TaskKind.INCLUDE),
])
def test_keywords(line, kind):
    assert parse_task(line).kind is kind


def test_tagged_values_and_description():
    task = parse_task("TODO project:Foo buy milk")
    assert task.kind is TaskKind.TODO
    assert task.attributes == [("project", "Foo")]
    assert task.description == "buy milk"


def test_include_without_description():
    task = parse_task("INCLUDE wiki:all ")
    assert task.kind is TaskKind.INCLUDE
    assert task.attributes == [("wiki", "all")]
    assert task.description == ""


def test_include_without_trailing_space():
    task = parse_task("INCLUDE wiki:all")
    assert task.attributes == [("wiki", "all")]
    assert task.description == ""


def test_colon_after_keyword():
    task = parse_task("DONE: write tests")
    assert task.kind is TaskKind.DONE
    assert task.description == "write tests"


def test_bullet_and_leading_whitespace_skipped():
    task = parse_task("   *  TODO context:Office print the report")
    assert task.kind is TaskKind.TODO
    assert task.attributes == [("context", "Office")]
    assert task.description == "print the report"


def test_multiple_tags_in_order():
    task = parse_task("TODO project:Foo context:Home due:2024-05-01 water plants")
    assert task.attributes == [
        ("project", "Foo"), ("context", "Home"), ("due", "2024-05-01"),
    ]
    assert task.description == "water plants"


def test_tags_stop_at_first_plain_word():
    task = parse_task("TODO call bob re:invoice")
    assert task.attributes == []
    assert task.description == "call bob re:invoice"


def test_url_description_is_not_a_tag():
    task = parse_task("INCLUDE http://example.com/tasks.txt")
    assert task.attributes == []
    assert task.description == "http://example.com/tasks.txt"


def test_trailing_newline_stripped():
    task = parse_task("TODO buy milk\n")
    assert task.description == "buy milk"


def test_parse_tasks_skips_plain_lines():
    tasks = parse_tasks("intro\nTODO one\nmore text\nDONE two\n")
    assert [t.description for t in tasks] == ["one", "two"]


# ── Lookup & predicates ─────────────────────────────────────────────────────

def test_first_attribute_wins():
    task = parse_task("TODO project:A project:B thing")
    assert task["project"] == "A"
    assert task.get("missing") is None
    assert task["missing"] is None


def test_lookup_is_case_sensitive():
    task = parse_task("TODO Project:A thing")
    assert task["project"] is None
    assert task["Project"] == "A"


def test_done_predicate():
    assert parse_task("DONE x").is_done
    assert parse_task("CANCEL x").is_done
    assert not parse_task("TODO x").is_done
    assert not parse_task("DO x").is_done


def test_include_predicate():
    assert parse_task("INCLUDE wiki:all").is_include
    assert not parse_task("TODO x").is_include


def test_inherit_keeps_own_values():
    task = parse_task("TODO project:Mine thing")
    task.inherit({"project": "Theirs", "context": "Home"})
    assert task.attributes == [("project", "Mine"), ("context", "Home")]


# ── HTML ─────────────────────────────────────────────────────────────────────

def test_task_html_has_bold_keyword_and_attributes():
    html = parse_task("TODO project:Foo buy milk").to_html()
    assert html.startswith('<div class="task task-todo">')
    assert "<b>TODO</b>" in html
    assert "project:Foo" in html
    assert "buy milk" in html
    assert "<del>" not in html


def test_done_task_is_struck_through():
    html = parse_task("DONE ship it").to_html()
    assert "<del><b>DONE</b> ship it</del>" in html


def test_description_is_escaped():
    html = parse_task("TODO fix <script> & stuff").to_html()
    assert "&lt;script&gt; &amp; stuff" in html


def test_origin_edit_link():
    task = Task(TaskKind.TODO, description="x")
    task.origin = Origin(name="/Home", view_url="/Home", edit_url="/e/Home")
    assert task.origin_url == "/e/Home"
    assert 'href="/e/Home"' in task.to_html()


def test_origin_without_edit_url_uses_view_url():
    task = Task(TaskKind.TODO, description="x")
    task.origin = Origin(name="http://h/t", view_url="http://h/t")
    assert task.origin_url == "http://h/t"


def test_str_round_trips_directive():
    assert str(parse_task("* TODO project:Foo buy milk")) == "TODO project:Foo buy milk"
