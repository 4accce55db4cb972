"""
Pytest fixtures.

unpacked_dir 构造一个最小的解包目录: app-config.json、app-service.js 与 tabBar 图标。
"""
from __future__ import annotations

import base64
import json
from pathlib import Path

import pytest


ICON_BYTES = b"\x89PNG\r\n\x1a\n fake home icon"
SELECTED_ICON_BYTES = b"\x89PNG\r\n\x1a\n fake home icon (selected)"

APP_SERVICE_JS = """
var __wxAppCode__ = __wxAppCode__ || {};
define("pages/a/a.js", function (require, module, exports) {
  Page({ data: {} });
});
__wxAppCode__["pages/a/a.json"] = {"navigationBarTitleText": "A from service", "usingComponents": {}};
__wxAppCode__["components/card/card.json"] = {"component": true, "usingComponents": {}};
__wxAppCode__["pages/a/a.wxml"] = $gwx("./pages/a/a.wxml");
"""


def write_app_config(base: Path, config: dict) -> Path:
    path = base / "app-config.json"
    path.write_text(json.dumps(config, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def app_config() -> dict:
    return {
        "entryPagePath": "pages/b/b.html",
        "pages": ["pages/a/a", "pages/b/b", "pkgA/x/x", "pages/c/c"],
        "global": {"window": {"navigationBarTitleText": "Demo"}},
        "subPackages": [{"root": "pkgA/"}],
        "extAppid": "wx0123456789abcdef",
        "ext": {"theme": "dark"},
        "tabBar": {
            "color": "#999",
            "list": [
                {
                    "pagePath": "pages/b/b.html",
                    "text": "首页",
                    "iconData": base64.b64encode(ICON_BYTES).decode("ascii"),
                    "selectedIconData": base64.b64encode(SELECTED_ICON_BYTES).decode("ascii"),
                },
                {
                    "pagePath": "pages/c/c.html",
                    "text": "我的",
                    "iconData": base64.b64encode(b"no such file").decode("ascii"),
                },
            ],
        },
        "page": {
            "pages/a/a.html": {"window": {"navigationBarTitleText": "A", "usingComponents": {"card": "/components/card/card"}}},
            "pages/b/b.html": {"window": {"usingComponents": {"item": "../../components/item/item", "map": "plugin://myPlugin/map"}}},
        },
        "networkTimeout": {"request": 10000},
    }


@pytest.fixture
def unpacked_dir(tmp_path: Path, app_config: dict) -> Path:
    write_app_config(tmp_path, app_config)
    (tmp_path / "app-service.js").write_text(APP_SERVICE_JS, encoding="utf-8")

    icons = tmp_path / "images"
    icons.mkdir()
    (icons / "home.png").write_bytes(ICON_BYTES)
    (icons / "home-active.png").write_bytes(SELECTED_ICON_BYTES)
    (tmp_path / "pages" / "a").mkdir(parents=True)
    (tmp_path / "pages" / "a" / "a.html").write_bytes(ICON_BYTES)
    return tmp_path
