"""Utility modules for wxrestore."""

from .fs import deep_list_dir, md5, normalize_page_path, write_json

__all__ = ['deep_list_dir', 'md5', 'normalize_page_path', 'write_json']
