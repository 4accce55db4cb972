"""
文件操作工具模块

提供配置还原过程中用到的文件原语: 递归列目录、MD5 摘要、JSON 写入。
"""

import json
import hashlib
import posixpath
from pathlib import Path
from typing import Any, List, Union


def deep_list_dir(root: Union[str, Path]) -> List[str]:
    """
    递归列出目录下的所有文件

    Args:
        root: 根目录

    Returns:
        相对于 root 的 POSIX 风格路径列表 (已排序)
    """
    root_path = Path(root)
    result = []

    for path in root_path.rglob('*'):
        if path.is_file():
            result.append(path.relative_to(root_path).as_posix())

    return sorted(result)


def normalize_page_path(path: str) -> str:
    """
    规范化页面路径: 统一为 / 分隔，去掉开头的 / 和扩展名

    例: "/pages/index/index.html" -> "pages/index/index"
    """
    path = path.replace('\\', '/').lstrip('/')
    return posixpath.splitext(path)[0]


def md5(data: bytes) -> str:
    """计算 MD5 十六进制摘要"""
    return hashlib.md5(data).hexdigest()


def write_json(path: Union[str, Path], obj: Any) -> str:
    """
    写入 JSON 文件 (自动创建父目录)

    Args:
        path: 目标路径
        obj: 待序列化对象

    Returns:
        写入的文件路径
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(
        json.dumps(obj, indent=2, ensure_ascii=False),
        encoding='utf-8'
    )
    return str(file_path)
