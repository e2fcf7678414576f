"""Best-effort documentation URL lookup for policy areas.

Probes are synchronous HEAD requests with a bounded timeout. Every failure
(timeout, DNS, TLS, non-success status) is a negative result: the record
simply carries no URL.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import requests

from mdm_reporter.config import ReporterConfig

logger = logging.getLogger(__name__)


def check_connectivity(session: requests.Session, url: str, timeout: float) -> bool:
    """One-shot reachability probe, evaluated once per run."""
    try:
        response = session.head(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as exc:
        logger.info("Documentation host unreachable (%s); URLs disabled", exc)
        return False
    return response.status_code < 500


class DocsLinker:
    """Resolves documentation keys to the first URL that exists."""

    def __init__(self, session: requests.Session, template: str, timeout: float = 5.0) -> None:
        self.session = session
        self.template = template
        self.timeout = timeout
        self._cache: dict[str, str | None] = {}

    def candidate(self, key: str) -> str:
        return self.template.format(key=key.lower())

    def probe(self, url: str) -> bool:
        try:
            response = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as exc:
            logger.debug("Probe failed for %s: %s", url, exc)
            return False
        if response.status_code == 404:
            logger.debug("No documentation page at %s", url)
            return False
        return 200 <= response.status_code < 400

    def url_for(self, keys: Iterable[str]) -> str | None:
        """First existing URL among *keys*, tried in order; None if all miss."""
        for key in keys:
            if not key:
                continue
            if key not in self._cache:
                url = self.candidate(key)
                self._cache[key] = url if self.probe(url) else None
            if self._cache[key]:
                return self._cache[key]
        return None


def build_docs_linker(config: ReporterConfig, session: requests.Session | None = None) -> DocsLinker | None:
    """Return a linker when the documentation host is reachable, else None."""
    session = session or requests.Session()
    if not check_connectivity(session, config.connectivity_probe_url, config.docs_probe_timeout):
        return None
    return DocsLinker(session, config.docs_url_template, timeout=config.docs_probe_timeout)
