"""Working directory helpers

Panes record their working directory as a ``file://`` URI. Restoring resolves the
URI back to a path that makes sense inside the domain the new pane runs in:
- local domain: the URI path
- remote domains (``SSH:host``, ``SSHMUX:host``...): the URI path as well, the
  host part only tells which machine it lives on
"""

from urllib.parse import quote, unquote, urlparse

from termresurrect import config


def path_to_uri(path: str, host: str = "") -> str:
    """把本地路径转换为 file:// URI"""
    if not path:
        return ""
    if "://" in path:
        return path
    return f"file://{host}{quote(path)}"


def extract_path_from_uri(uri: str | None, domain: str | None = None) -> str | None:
    """从 URI 中取出在 domain 内可用的路径

    Args:
        uri: 保存的工作目录 URI（也接受普通路径）
        domain: 目标 pane 所在 domain

    Returns:
        路径字符串；URI 为空时返回 None
    """
    if not uri:
        return None

    if "://" not in uri:
        return uri

    parsed = urlparse(uri)
    path = unquote(parsed.path)

    domain = domain or config.DEFAULT_DOMAIN
    # Windows drive letters come through as /C:/...
    if domain == config.DEFAULT_DOMAIN and len(path) > 2 and path[0] == "/" and path[2] == ":":
        path = path[1:]

    return path or None
