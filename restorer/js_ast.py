"""
JavaScript 语法树工具模块

基于 esprima 解析脚本，提供:
- 按节点类型分派的访问器 (Visitor)
- 显式传递父节点字段名 (role) 的遍历
- 按字符区间还原节点源码
- 纯字面量节点的静态求值
"""

from typing import Any, Iterator, Optional, Tuple

import esprima
from esprima.nodes import Node


# 遍历时忽略的节点属性
_META_FIELDS = ('type', 'range', 'loc')


def parse_script(code: str) -> Node:
    """解析脚本，节点附带字符区间"""
    return esprima.parseScript(code, {'range': True})


def children(node: Node) -> Iterator[Tuple[str, Node]]:
    """
    按源码顺序迭代子节点

    Yields:
        (role, child) - role 为子节点在父节点中的字段名
    """
    for role, value in vars(node).items():
        if role in _META_FIELDS:
            continue
        if isinstance(value, Node):
            yield role, value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, Node):
                    yield role, item


class Visitor:
    """
    语法树访问器

    子类实现 visit_<Type>(node, role) 方法，未实现的类型直接跳过。
    """

    def visit(self, node: Node, role: Optional[str]) -> None:
        method = getattr(self, f"visit_{node.type}", None)
        if method is not None:
            method(node, role)


def walk(node: Node, visitor: Visitor, role: Optional[str] = None) -> None:
    """前序遍历 node 及其所有后代"""
    stack = [(node, role)]
    while stack:
        current, current_role = stack.pop()
        visitor.visit(current, current_role)
        stack.extend(
            (child, child_role)
            for child_role, child in reversed(list(children(current)))
        )


def source_of(node: Node, code: str) -> str:
    """还原节点对应的原始源码"""
    start, end = node.range
    return code[start:end]


def literal_value(node: Node) -> Any:
    """
    对纯字面量表达式静态求值

    支持对象、数组、字符串/数字/布尔/null 字面量以及作用于字面量的一元 -、+、!

    Raises:
        ValueError: 表达式包含非字面量成分
    """
    if node.type == 'ObjectExpression':
        result = {}
        for prop in node.properties:
            if prop.type != 'Property' or prop.computed:
                raise ValueError(f"不支持的对象属性: {prop.type}")
            result[_property_key(prop.key)] = literal_value(prop.value)
        return result

    if node.type == 'ArrayExpression':
        # 空位按 null 处理，保持下标不变
        return [None if item is None else literal_value(item) for item in node.elements]

    if node.type == 'Literal':
        if getattr(node, 'regex', None):
            raise ValueError("不支持正则字面量")
        value = node.value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    if node.type == 'UnaryExpression' and node.operator in ('-', '+', '!'):
        value = literal_value(node.argument)
        if node.operator == '!':
            return not value
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ValueError(f"一元运算 {node.operator} 的操作数不是数字")
        return -value if node.operator == '-' else value

    raise ValueError(f"不支持的表达式类型: {node.type}")


def _property_key(key: Node) -> str:
    if key.type == 'Identifier':
        return key.name
    if key.type == 'Literal':
        value = key.value
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)
    raise ValueError(f"不支持的属性键类型: {key.type}")
