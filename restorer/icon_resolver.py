"""
TabBar 图标还原模块

编译后 tabBar.list 中的图标被内联为 iconData / selectedIconData (base64)。
对解包目录中的文件逐一计算 MD5 建立索引，按内联数据的摘要反查原始图标路径。
"""

import base64
import binascii
import logging
import posixpath
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..utils.fs import deep_list_dir, md5, normalize_page_path


logger = logging.getLogger(__name__)

# 不可能是图标的文件类型
IGNORED_SUFFIXES = ('.html', '.wxss', '.json', '.js', '.wxml', '.wxs')

# 内联数据字段 -> 还原后的路径字段
ICON_FIELDS = (
    ('iconData', 'iconPath'),
    ('selectedIconData', 'selectedIconPath'),
)


def build_hash_index(base_dir: Union[str, Path]) -> Dict[str, str]:
    """
    建立 {MD5: 相对路径} 索引

    摘要冲突时后写入的路径覆盖先写入的路径。
    """
    base_path = Path(base_dir)
    index: Dict[str, str] = {}

    for rel_path in deep_list_dir(base_path):
        suffix = posixpath.splitext(rel_path)[1].lower()
        if not suffix or suffix in IGNORED_SUFFIXES:
            continue
        index[md5((base_path / rel_path).read_bytes())] = rel_path

    logger.debug(f"图标索引包含 {len(index)} 个文件")
    return index


def hash_icon_data(data: Union[str, bytes]) -> str:
    """计算内联图标数据的摘要，字符串按 base64 解码后计算"""
    if isinstance(data, str):
        data = base64.b64decode(data)
    return md5(data)


def resolve_tab_bar(
    tab_bar: Optional[Dict[str, Any]],
    index: Dict[str, str]
) -> Optional[Dict[str, Any]]:
    """
    原地还原 tabBar 中的图标路径

    命中索引时写入 iconPath/selectedIconPath 并删除内联数据字段，
    未命中时保留原字段。

    Returns:
        传入的 tab_bar
    """
    if not tab_bar or not isinstance(tab_bar.get('list'), list):
        return tab_bar

    for item in tab_bar['list']:
        if item.get('pagePath'):
            item['pagePath'] = normalize_page_path(item['pagePath'])

        for data_field, path_field in ICON_FIELDS:
            data = item.get(data_field)
            if not data:
                continue
            try:
                path = index.get(hash_icon_data(data))
            except (binascii.Error, ValueError):
                logger.debug(f"{item.get('pagePath')} 的 {data_field} 不是有效的 base64 数据")
                continue
            if path:
                item[path_field] = path
                del item[data_field]
            else:
                logger.debug(f"未找到 {item.get('pagePath')} 的 {data_field} 对应文件")

    return tab_bar
