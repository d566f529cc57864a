"""Derived webapp indices, computed once the component set is complete."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from ..models import ComponentConfig, WebappInfo

logger = logging.getLogger(__name__)

SortKey = Callable[[str], Any]


class WebappIndex:
    """Webapp lookups by server and context root.

    Built from a final component list, so it only exists once the registry is
    ready. The app-bar listings are memoized per server, menu and sort key; the
    memo is replaced copy-on-write under a lock and read without one.
    """

    def __init__(self, components: Sequence[ComponentConfig]):
        self._components = tuple(components)
        webapps = [webapp for component in self._components for webapp in component.webapps]
        self._by_server = self._index_by_server(webapps)
        self._by_context_root = self._index_by_context_root(webapps)
        self._app_bar: Mapping[tuple, tuple[WebappInfo, ...]] = MappingProxyType({})
        self._app_bar_lock = threading.Lock()

    @staticmethod
    def _index_by_server(
        webapps: Sequence[WebappInfo],
    ) -> Mapping[str, Mapping[str, WebappInfo]]:
        by_server: dict[str, dict[str, WebappInfo]] = {}
        for webapp in webapps:
            context_roots = by_server.setdefault(webapp.server, {})
            if webapp.context_root in context_roots:
                logger.warning(
                    f"Two webapps are registered for contextRoot '{webapp.context_root}' "
                    f"on the same server ({webapp.server}); lookups by context root "
                    "may return either"
                )
            context_roots[webapp.context_root] = webapp
        return MappingProxyType(
            {server: MappingProxyType(roots) for server, roots in by_server.items()}
        )

    @staticmethod
    def _index_by_context_root(webapps: Sequence[WebappInfo]) -> Mapping[str, WebappInfo]:
        by_context_root: dict[str, WebappInfo] = {}
        for webapp in webapps:
            other = by_context_root.get(webapp.context_root)
            if other is not None:
                if other.server == webapp.server:
                    logger.warning(
                        f"Two webapps are registered for contextRoot '{webapp.context_root}' "
                        f"on the same server ({webapp.server}); lookups by context root "
                        "may return either"
                    )
                else:
                    logger.warning(
                        f"Two webapps are registered for contextRoot '{webapp.context_root}' "
                        "under different servers; lookups without a server are ambiguous"
                    )
            by_context_root[webapp.context_root] = webapp
        return MappingProxyType(by_context_root)

    def webapps_by_context_root(self, server: str | None = None) -> Mapping[str, WebappInfo] | None:
        """Context root -> webapp, for one server or across all servers."""
        if server is not None:
            return self._by_server.get(server)
        return self._by_context_root

    def webapp_by_context_root(self, server: str | None, context_root: str) -> WebappInfo | None:
        if server is not None:
            context_roots = self._by_server.get(server)
            return context_roots.get(context_root) if context_roots is not None else None
        return self._by_context_root.get(context_root)

    def app_bar_webapps(
        self,
        server: str,
        menu_name: str | None = None,
        sort_key: SortKey | None = None,
    ) -> tuple[WebappInfo, ...]:
        """Webapps shown in the app bar of ``server``, ordered by position or title.

        Only webapps whose app-bar display flag is set at first call are listed;
        later changes to the flag do not affect a memoized listing.
        """
        key = (server, menu_name, sort_key)
        webapps = self._app_bar.get(key)
        if webapps is not None:
            return webapps

        with self._app_bar_lock:
            webapps = self._app_bar.get(key)
            if webapps is None:
                webapps = self._compute_app_bar(server, menu_name, sort_key)
                memo = dict(self._app_bar)
                memo[key] = webapps
                self._app_bar = MappingProxyType(memo)
        return webapps

    def _compute_app_bar(
        self, server: str, menu_name: str | None, sort_key: SortKey | None
    ) -> tuple[WebappInfo, ...]:
        by_key: dict[str, WebappInfo] = {}
        for component in self._components:
            for webapp in component.webapps:
                if webapp.server != server or not webapp.get_app_bar_display():
                    continue
                if menu_name and webapp.menu_name != menu_name:
                    continue
                by_key[webapp.position or webapp.title] = webapp
        return tuple(by_key[key] for key in sorted(by_key, key=sort_key))
