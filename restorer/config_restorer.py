"""
配置文件还原模块

从解包后的小程序中还原配置文件:
- app.json: 全局配置 (页面列表、分包、tabBar)
- 页面/组件级 .json: 页面配置
- ext.json: 第三方平台扩展配置

小程序编译后，配置信息分散在三处:
1. app-config.json 中的全局配置与 page 表
2. app-service.js 中写入 __wxAppCode__ 的内嵌配置
3. 解包目录中的图标文件 (tabBar 图标被内联为 base64)

还原按以下顺序进行，后面的步骤对页面配置表有更高的优先级:
字段提取 -> 入口页排序 -> 分包拆分 -> 图标还原 -> 组件引用解析 -> 内嵌配置合并 -> 输出组装
"""

import json
import logging
import posixpath
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..utils.fs import normalize_page_path, write_json
from .icon_resolver import build_hash_index, resolve_tab_bar
from .service_scanner import CONFIG_SUFFIX, merge_embedded_configs, scan_app_service


logger = logging.getLogger(__name__)

APP_CONFIG_FILE = "app-config.json"
APP_SERVICE_FILE = "app-service.js"
APP_JSON_FILE = "app.json"
EXT_JSON_FILE = "ext.json"

# 插件组件引用 plugin://xxx/yyy 改写为 /__plugin__/xxx/yyy
PLUGIN_SCHEME = "plugin://"
PLUGIN_PREFIX = "/__plugin__/"


class ParserError(Exception):
    """配置解析失败"""


def extract(doc: Dict[str, Any], key: str, default: Any = None) -> Tuple[Any, Dict[str, Any]]:
    """
    从配置中取出一个字段

    Args:
        doc: 配置字典 (不会被修改)
        key: 字段名
        default: 字段不存在或为 null 时的返回值

    Returns:
        (字段值, 去掉该字段后的新配置)
    """
    rest = {k: v for k, v in doc.items() if k != key}
    value = doc.get(key)
    return (default if value is None else value), rest


def reorder_entry(entry: Optional[str], pages: List[str]) -> List[str]:
    """
    将入口页移动到页面列表首位

    入口页不在列表中时原样返回。
    """
    result = list(pages)
    if not entry:
        return result

    entry_page = normalize_page_path(entry)
    if entry_page not in result:
        logger.debug(f"入口页 {entry_page} 不在页面列表中")
        return result

    result.remove(entry_page)
    result.insert(0, entry_page)
    return result


def _root_prefix(root: str) -> str:
    root = root.lstrip('/')
    if root and not root.endswith('/'):
        root += '/'
    return root


def split_subpackages(
    pages: List[str],
    sub_packages: List[Dict[str, Any]]
) -> Tuple[List[str], List[Dict[str, Any]]]:
    """
    按分包拆分页面列表

    每个分包优先使用自带的 pages，否则选取主包中以 root 开头的页面。
    选中的页面从主包列表中移除 (首位的入口页除外)，并去掉 root 前缀后写入分包。

    Returns:
        (主包页面列表, 分包描述列表)
    """
    root_pages = list(pages)
    result = []

    for sub in sub_packages:
        prefix = _root_prefix(sub.get('root', ''))
        selected = sub.get('pages')
        if selected is None:
            selected = [page for page in root_pages if page.startswith(prefix)]

        sub_pages = []
        for page in selected:
            if page in root_pages and root_pages.index(page) > 0:
                root_pages.remove(page)
            sub_pages.append(page[len(prefix):] if page.startswith(prefix) else page)

        result.append({**sub, 'pages': sub_pages})

    return root_pages, result


def resolve_component_path(page: str, ref: str) -> str:
    """
    将 usingComponents 中的引用解析为相对包根目录的路径

    Args:
        page: 引用所在的页面键
        ref: 组件引用 (插件、绝对或相对路径)
    """
    if ref.startswith(PLUGIN_SCHEME):
        ref = PLUGIN_PREFIX + ref[len(PLUGIN_SCHEME):]
    if ref.startswith('/'):
        return ref[1:]
    return posixpath.normpath(posixpath.join(posixpath.dirname(page), ref))


def resolve_components(page_map: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """
    为页面引用的自定义组件补全配置项并标记 component

    重复执行结果不变。
    """
    for key in list(page_map):
        window = (page_map[key] or {}).get('window') or {}
        using_components = window.get('usingComponents')
        if not isinstance(using_components, dict) or not using_components:
            continue

        for ref in using_components.values():
            if not isinstance(ref, str):
                continue
            entry = page_map.setdefault(resolve_component_path(key, ref), {})
            if not isinstance(entry.get('window'), dict):
                entry['window'] = {}
            entry['window']['component'] = True

    return page_map


def config_path_of(key: str) -> str:
    """页面键对应的配置文件路径"""
    if key.endswith(CONFIG_SUFFIX):
        return key
    return normalize_page_path(key) + CONFIG_SUFFIX


def assemble(
    doc: Dict[str, Any],
    pages: List[str],
    sub_packages: Optional[List[Dict[str, Any]]],
    tab_bar: Optional[Dict[str, Any]],
    global_fields: Dict[str, Any],
    page_map: Dict[str, Dict[str, Any]],
    ext_appid: Any = None,
    ext: Any = None
) -> Dict[str, Any]:
    """
    组装输出

    Returns:
        有序字典 {输出相对路径: 配置内容}，app.json 在最前
    """
    app = {'pages': pages, **doc}
    if sub_packages is not None:
        app['subPackages'] = sub_packages
    if tab_bar is not None:
        app['tabBar'] = tab_bar
    app.update(global_fields)

    result: Dict[str, Any] = {APP_JSON_FILE: app}
    if ext_appid and ext:
        result[EXT_JSON_FILE] = {'extEnable': True, 'extAppid': ext_appid, 'ext': ext}
    reserved = set(result)

    for key, entry in page_map.items():
        path = config_path_of(key)
        if path in reserved:
            logger.warning(f"页面配置 {key} 与 {path} 冲突，已忽略")
            continue
        result[path] = {'window': (entry or {}).get('window') or {}}

    return result


class ConfigRestorer:
    """
    配置文件还原器

    从 app-config.json、app-service.js 和解包目录还原 app.json 与各页面配置
    """

    def __init__(self, path: Union[str, Path]):
        """
        初始化还原器

        Args:
            path: app-config.json 路径，或包含它的解包目录
        """
        config_path = Path(path)
        if config_path.is_dir():
            config_path = config_path / APP_CONFIG_FILE
        self.config_path = config_path
        self.base_dir = config_path.parent
        self.results: Dict[str, Any] = {}

    def restore(self) -> Dict[str, Any]:
        """
        执行配置还原 (不写文件)

        Returns:
            字典 {输出相对路径: 配置内容}

        Raises:
            ParserError: 任一步骤失败
        """
        try:
            self.results = self._restore()
        except Exception as e:
            raise ParserError(f"Parse failed! {e}") from e
        return self.results

    def _restore(self) -> Dict[str, Any]:
        content = self.config_path.read_text(encoding='utf-8', errors='ignore')
        doc = json.loads(content)

        entry, doc = extract(doc, 'entryPagePath')
        pages, doc = extract(doc, 'pages', [])
        global_fields, doc = extract(doc, 'global', {})
        sub_packages, doc = extract(doc, 'subPackages')
        ext_appid, doc = extract(doc, 'extAppid')
        ext, doc = extract(doc, 'ext')
        tab_bar, doc = extract(doc, 'tabBar')
        page_map, doc = extract(doc, 'page', {})

        # 入口页
        pages = reorder_entry(entry, pages)

        # 分包
        if sub_packages:
            pages, sub_packages = split_subpackages(pages, sub_packages)
            logger.info(f"检测到 {len(sub_packages)} 个分包")

        # tabBar 图标
        if tab_bar and isinstance(tab_bar.get('list'), list):
            resolve_tab_bar(tab_bar, build_hash_index(self.base_dir))

        # usingComponents
        resolve_components(page_map)

        # app-service.js 中的内嵌配置优先级最高
        configs = scan_app_service(self.base_dir / APP_SERVICE_FILE)
        merge_embedded_configs(page_map, configs)

        return assemble(
            doc, pages, sub_packages, tab_bar, global_fields, page_map,
            ext_appid=ext_appid, ext=ext
        )

    def save(self, output_dir: Optional[Union[str, Path]] = None) -> int:
        """
        保存还原的配置文件

        Args:
            output_dir: 输出目录，默认为 app-config.json 所在目录

        Returns:
            保存的文件数量
        """
        if not self.results:
            self.restore()

        output_path = Path(output_dir) if output_dir else self.base_dir
        count = 0

        for path, content in self.results.items():
            saved = write_json(output_path / path, content)
            logger.debug(f"已保存 {saved}")
            count += 1

        logger.info(f"共保存 {count} 个配置文件到 {output_path}")
        return count


def restore_config(
    input_path: Union[str, Path],
    output_dir: Optional[Union[str, Path]] = None
) -> Dict[str, Any]:
    """
    还原配置文件

    Args:
        input_path: 解包后的小程序目录或 app-config.json 路径
        output_dir: 可选，输出目录

    Returns:
        字典 {配置路径: 配置内容}
    """
    restorer = ConfigRestorer(input_path)
    configs = restorer.restore()

    if output_dir:
        restorer.save(output_dir)

    return configs
