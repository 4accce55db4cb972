"""
app-service.js 内嵌配置扫描模块

编译后的小程序会把页面/组件的 json 配置以对象字面量的形式写入全局表:

    __wxAppCode__["pages/index/index.json"] = {"usingComponents": {...}}

这里通过语法树而不是正则提取这些字面量，嵌套对象也能完整还原。
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from esprima.nodes import Node

from .js_ast import Visitor, literal_value, parse_script, source_of, walk


logger = logging.getLogger(__name__)

# 全局配置表标识符
WX_APP_CODE = "__wxAppCode__"

CONFIG_SUFFIX = ".json"


def config_key_of(left: Node) -> Optional[str]:
    """
    若赋值左侧形如 __wxAppCode__["xxx.json"]，返回属性键

    Returns:
        属性键字符串，不匹配时返回 None
    """
    if left is None or left.type != 'MemberExpression':
        return None
    obj, prop = left.object, left.property
    if obj.type != 'Identifier' or obj.name != WX_APP_CODE:
        return None
    if prop.type != 'Literal' or not isinstance(prop.value, str):
        return None
    if not prop.value.endswith(CONFIG_SUFFIX):
        return None
    return prop.value


def parse_object_source(node: Node, code: str) -> Any:
    """解析对象字面量: 优先按 JSON 解析源码，非严格 JSON 时静态求值"""
    try:
        return json.loads(source_of(node, code))
    except json.JSONDecodeError:
        return literal_value(node)


class _RightObjectCollector(Visitor):
    """收集赋值子树中处于 right 位置的对象字面量 (后出现者覆盖)"""

    def __init__(self, code: str):
        self.code = code
        self.value = None
        self.found = False

    def visit_ObjectExpression(self, node: Node, role: Optional[str]) -> None:
        if role == 'right':
            self.value = parse_object_source(node, self.code)
            self.found = True


class _AppCodeVisitor(Visitor):

    def __init__(self, code: str):
        self.code = code
        self.configs: Dict[str, Any] = {}

    def visit_AssignmentExpression(self, node: Node, role: Optional[str]) -> None:
        key = config_key_of(node.left)
        if key is None:
            return
        collector = _RightObjectCollector(self.code)
        walk(node.left, collector, 'left')
        walk(node.right, collector, 'right')
        if collector.found:
            self.configs[key] = collector.value


def scan_source(code: str) -> Dict[str, Any]:
    """
    扫描脚本源码中写入 __wxAppCode__ 的 json 配置

    Args:
        code: app-service.js 源码

    Returns:
        字典 {配置键 (如 "pages/index/index.json"): 配置内容}
    """
    visitor = _AppCodeVisitor(code)
    walk(parse_script(code), visitor)
    return visitor.configs


def scan_app_service(path: Union[str, Path]) -> Dict[str, Any]:
    """
    扫描 app-service.js，文件不存在时返回空字典

    Args:
        path: app-service.js 路径
    """
    service = Path(path)
    if not service.exists():
        logger.debug(f"未找到 {service.name}，跳过内嵌配置扫描")
        return {}

    configs = scan_source(service.read_text(encoding='utf-8', errors='ignore'))
    logger.info(f"从 {service.name} 提取到 {len(configs)} 个内嵌配置")
    return configs


def merge_embedded_configs(
    page_map: Dict[str, Dict[str, Any]],
    configs: Dict[str, Any]
) -> Dict[str, Dict[str, Any]]:
    """
    将扫描结果整体覆盖到页面配置表

    同名键的 window 被整体替换，不做字段级合并。
    """
    for key, value in configs.items():
        page_map[key] = {'window': value}
    return page_map
