"""
Identifier resolver — turn user tokens into (key, url) downloads.

A token is a full key ("org.example.foobar"), a short name ("foobar"),
or either one followed by ``@`` and an explicit URL. Resolution is a
pure function of the tokens and the catalog: it performs no I/O of its
own and can be rerun after a catalog refresh.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from src.core.models.errors import ResolutionError
from src.core.models.extension import ResolvedDownload
from src.core.services.catalog import CatalogIndex, CatalogSource

logger = logging.getLogger(__name__)

URL_DELIMITER = "@"


def parse_token(token: str) -> tuple[str, str | None]:
    """Split a raw token into (identifier, explicit_url).

    Only the first ``@`` separates; the URL may contain more. An empty
    URL ("foobar@") counts as no URL.
    """
    identifier, sep, url = token.partition(URL_DELIMITER)
    if not sep or not url:
        return identifier, None
    return identifier, url


def is_short_name(identifier: str) -> bool:
    """Short names have no dot; full keys are dotted."""
    return "." not in identifier


def resolve(
    tokens: Sequence[str],
    catalog: CatalogIndex | CatalogSource,
) -> tuple[dict[str, str], list[ResolutionError]]:
    """Resolve tokens against the catalog.

    Args:
        tokens: Raw identifiers as typed by the user.
        catalog: A ``CatalogIndex``, a snapshot, or a snapshot loader.

    Returns:
        ``(downloads, errors)``. ``downloads`` maps key → URL in the
        order keys were first requested; a repeated key keeps the URL
        of its last token. A token that fails contributes an error and
        nothing else.
    """
    index = catalog if isinstance(catalog, CatalogIndex) else CatalogIndex(catalog)
    downloads: dict[str, str] = {}
    errors: list[ResolutionError] = []

    if not tokens:
        errors.append(ResolutionError.missing_input())

    for token in tokens:
        identifier, url = parse_token(token)

        if is_short_name(identifier):
            matches = index.keys_for(identifier)
            if len(matches) == 1:
                logger.debug("Short name %r → %s", identifier, matches[0])
                identifier = matches[0]
            elif len(matches) > 1:
                errors.append(ResolutionError.ambiguous(identifier, matches))
                continue

        if not identifier:
            errors.append(ResolutionError.unrecognized(identifier))
            continue

        if url is None:
            url = index.download_url(identifier)
            if not url:
                errors.append(ResolutionError.unrecognized(identifier))
                continue

        resolved = ResolvedDownload(key=identifier, url=url)
        downloads[resolved.key] = resolved.url

    return downloads, errors
