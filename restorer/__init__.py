"""
restorer - 微信小程序配置还原模块

从 app-config.json、app-service.js 与解包目录中还原 app.json 及页面配置。
"""

from .config_restorer import ConfigRestorer, ParserError, restore_config
from .icon_resolver import build_hash_index, resolve_tab_bar
from .service_scanner import scan_app_service

__all__ = [
    'ConfigRestorer', 'ParserError', 'restore_config',
    'build_hash_index', 'resolve_tab_bar',
    'scan_app_service'
]
