"""Tests for embedded config scanning of app-service.js."""

from __future__ import annotations

from pathlib import Path

import pytest

from wxrestore.restorer.js_ast import Visitor, children, literal_value, parse_script, source_of, walk
from wxrestore.restorer.service_scanner import (
    merge_embedded_configs,
    scan_app_service,
    scan_source,
)


def test_scan_simple_assignment() -> None:
    code = '__wxAppCode__["pages/index/index.json"] = {"usingComponents": {"a": "/c/a"}};'
    assert scan_source(code) == {"pages/index/index.json": {"usingComponents": {"a": "/c/a"}}}


def test_scan_ignores_other_targets() -> None:
    code = """
    __wxAppCode__["pages/index/index.wxml"] = {"x": 1};
    window["pages/index/index.json"] = {"x": 2};
    __wxAppCode__.foo = {"x": 3};
    __wxAppCode__["pages/index/index.json"] = $gwx("./pages/index/index.wxml");
    """
    assert scan_source(code) == {}


def test_scan_inside_function_and_chained_assignment() -> None:
    code = """
    define("app.js", function () {
      __wxAppCode__["a.json"] = cache["a"] = {"navigationBarTitleText": "A"};
    });
    """
    assert scan_source(code) == {"a.json": {"navigationBarTitleText": "A"}}


def test_scan_keeps_nested_objects_whole() -> None:
    code = '__wxAppCode__["b.json"] = {"usingComponents": {"x": "./x"}, "window": {"a": [1, 2]}};'
    assert scan_source(code)["b.json"] == {
        "usingComponents": {"x": "./x"},
        "window": {"a": [1, 2]},
    }


def test_scan_last_assignment_wins() -> None:
    code = '__wxAppCode__["c.json"] = {"v": 1}; __wxAppCode__["c.json"] = {"v": 2};'
    assert scan_source(code) == {"c.json": {"v": 2}}


def test_scan_non_json_literal() -> None:
    code = "__wxAppCode__['d.json'] = {navigationBarTitleText: 'D', enablePullDownRefresh: !0, 'offset': -10};"
    assert scan_source(code) == {
        "d.json": {"navigationBarTitleText": "D", "enablePullDownRefresh": True, "offset": -10}
    }


def test_scan_non_literal_object_fails() -> None:
    with pytest.raises(ValueError):
        scan_source('__wxAppCode__["e.json"] = {"title": getTitle()};')


def test_scan_app_service_missing_file(tmp_path: Path) -> None:
    assert scan_app_service(tmp_path / "app-service.js") == {}


def test_scan_app_service_reads_file(tmp_path: Path) -> None:
    service = tmp_path / "app-service.js"
    service.write_text('__wxAppCode__["f.json"] = {"a": "中文"};', encoding="utf-8")
    assert scan_app_service(service) == {"f.json": {"a": "中文"}}


def test_merge_overwrites_whole_window() -> None:
    page_map = {
        "p.json": {"window": {"a": 1, "b": 2}},
        "q": {"window": {"c": 3}},
    }

    merge_embedded_configs(page_map, {"p.json": {"a": 9}, "r.json": {}})

    assert page_map == {
        "p.json": {"window": {"a": 9}},
        "q": {"window": {"c": 3}},
        "r.json": {"window": {}},
    }


def test_walk_passes_parent_role() -> None:
    code = "x = {a: 1};"

    class Recorder(Visitor):
        def __init__(self):
            self.seen = []

        def visit_ObjectExpression(self, node, role):
            self.seen.append((role, source_of(node, code)))

        def visit_Identifier(self, node, role):
            self.seen.append((role, node.name))

    recorder = Recorder()
    walk(parse_script(code), recorder)

    assert recorder.seen == [("left", "x"), ("right", "{a: 1}"), ("key", "a")]


def test_children_in_source_order() -> None:
    program = parse_script("a = b;")
    assignment = program.body[0].expression
    assert [(role, child.name) for role, child in children(assignment)] == [("left", "a"), ("right", "b")]


def test_literal_value_array_and_numbers() -> None:
    node = parse_script("x = [1, 2.5, 'a', null, false];").body[0].expression.right
    assert literal_value(node) == [1, 2.5, "a", None, False]


def test_walk_visits_every_descendant() -> None:
    code = "var a = 1; function f() { return {b: [2]}; }"

    class Counter(Visitor):
        def __init__(self):
            self.types = []

        def visit(self, node, role):
            self.types.append((node.type, role))

    counter = Counter()
    walk(parse_script(code), counter)

    assert counter.types[0] == ("Program", None)
    assert ("VariableDeclaration", "body") in counter.types
    assert ("ObjectExpression", "argument") in counter.types
    assert ("ArrayExpression", "value") in counter.types


def test_scan_script_without_configs() -> None:
    assert scan_source("var a = 1; define('app.js', function () { App({}); });") == {}


def test_literal_value_array_holes_keep_indices() -> None:
    assert scan_source("__wxAppCode__['a.json'] = {a: [1,,2]};") == {"a.json": {"a": [1, None, 2]}}
