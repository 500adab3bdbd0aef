"""Security search business logic."""
import logging
import re
from typing import List, Optional

from stockweather.domain.entities import SearchResult, Security, Suggestion
from stockweather.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

SUGGESTION_LIMIT = 5
MAX_INITIALS_QUERY = 3

# Leading consonants in Unicode syllable order (U+AC00 block, 588 syllables each).
_CHOSEONG = "ㄱㄲㄴㄷㄸㄹㅁㅂㅃㅅㅆㅇㅈㅉㅊㅋㅌㅍㅎ"
_HANGUL_BASE = 0xAC00
_SYLLABLES_PER_INITIAL = 588


def _initial_pattern(char: str) -> str:
    index = _CHOSEONG.find(char)
    if index < 0:
        return re.escape(char)
    first = _HANGUL_BASE + index * _SYLLABLES_PER_INITIAL
    last = first + _SYLLABLES_PER_INITIAL - 1
    return f"[{chr(first)}-{chr(last)}]"


def matches_initials(text: str, initials: str) -> bool:
    """True if ``text`` contains a run of syllables starting with ``initials``.

    Non-consonant characters in ``initials`` match themselves, so "삼ㅅ"
    matches "삼성전자".
    """
    if not text or not initials:
        return False
    pattern = "".join(_initial_pattern(char) for char in initials)
    return re.search(pattern, text) is not None


def matches_query(security: Security, query: str) -> bool:
    term = query.lower()
    fields = [
        security.name,
        security.name_eng,
        security.code,
        security.market.value,
        security.sector,
        security.industry,
    ]
    for value in fields:
        if value and (query in value or term in value.lower()):
            return True
    return len(query) <= MAX_INITIALS_QUERY and matches_initials(security.name, query)


def _rank(security: Security, query: str):
    return (
        security.code != query,
        security.name != query,
        not security.code.startswith(query),
        not security.name.startswith(query),
        -(security.market_cap or 0),
    )


class SearchService:
    """Search, suggestions and filtering over the active security master."""

    def __init__(self, catalog: CatalogService):
        self._catalog = catalog

    def search(self, query: str, limit: int = 20) -> List[SearchResult]:
        """Ranked matches for ``query``; empty for a blank query."""
        query = (query or "").strip()
        if not query:
            return []

        matched = [
            security for security in self._catalog.get_all_active()
            if matches_query(security, query)
        ]
        matched.sort(key=lambda security: _rank(security, query))
        logger.debug(f"Search {query!r}: {len(matched)} matches")
        return [SearchResult.from_security(s) for s in matched[:limit]]

    def suggest(self, partial: str, limit: int = SUGGESTION_LIMIT) -> List[Suggestion]:
        return [
            Suggestion(
                code=result.code,
                name=result.name,
                display_text=f"{result.name} ({result.code})",
            )
            for result in self.search(partial, limit)
        ]

    def list_all(self) -> List[SearchResult]:
        return [SearchResult.from_security(s) for s in self._catalog.get_all_active()]

    def filter_securities(
        self,
        market: Optional[str] = None,
        sector: Optional[str] = None,
        limit: int = 20,
    ) -> List[SearchResult]:
        """Active securities by market (case-insensitive) and sector substring."""
        securities = self._catalog.get_all_active()
        if market:
            securities = [s for s in securities if s.market.value.lower() == market.lower()]
        if sector:
            securities = [s for s in securities if s.sector and sector in s.sector]
        securities.sort(key=lambda s: s.market_cap or 0, reverse=True)
        return [SearchResult.from_security(s) for s in securities[:limit]]
