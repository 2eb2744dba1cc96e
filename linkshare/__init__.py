"""Folder-configured, password-protectable link sharing pages.

This package scans a content directory of ``config.toml`` folders into a
section tree, resolves inherited styles and password gates, and renders
sections through swappable Jinja theme packages.

Exports
-------
- ``app``: Cyclopts application behind the ``linkshare`` command.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``LinkShareSite``: request-level core answering GET and POST requests.
- ``scan_content``: build the section tree from a content directory.

Examples
--------
>>> from linkshare import LinkShareSite, load_site_settings
>>> site = LinkShareSite(load_site_settings())  # doctest: +SKIP
>>> site.handle_get("/", auth_cookie=None).kind  # doctest: +SKIP
<ResponseKind.OK: 'ok'>
"""

from __future__ import annotations

from .cli import app, main
from .config import load_site_settings
from .scanner import scan_content
from .site import LinkShareSite, SiteResponse

__all__ = [
    "LinkShareSite",
    "SiteResponse",
    "app",
    "load_site_settings",
    "main",
    "scan_content",
]
