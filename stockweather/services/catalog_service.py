"""Security master business logic."""
from typing import Callable, Dict, List, Optional
import logging
import time

from stockweather.config import app_config
from stockweather.domain.entities import Security
from stockweather.domain.interfaces import SecurityRepository
from stockweather.utils.cache import TTLCache

logger = logging.getLogger(__name__)


class CatalogService:
    """Read access to the security master, cached for a few minutes."""

    def __init__(
        self,
        repository: SecurityRepository,
        seed_loader: Optional[Callable[[], List[Security]]] = None,
        cache_ttl_seconds: float = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._repository = repository
        self._seed_loader = seed_loader
        ttl = app_config.CATALOG_CACHE_TTL_SECONDS if cache_ttl_seconds is None else cache_ttl_seconds
        self._cache: TTLCache[List[Security]] = TTLCache(ttl, clock=clock)

    def get_all_active(self) -> List[Security]:
        """Active securities, market cap descending."""
        securities = self._cache.get()
        if securities is None:
            securities = self._repository.get_all_active()
            self._cache.set(securities)
        return list(securities)

    def get_top_by_market_cap(self, limit: int) -> List[Security]:
        return self._repository.get_top_by_market_cap(limit)

    def get_by_code(self, code: str) -> Optional[Security]:
        for security in self.get_all_active():
            if security.code == code:
                return security
        return self._repository.get_by_code(code)

    def sync(self) -> Dict[str, int]:
        """Reload the master from the seed source and drop the cache."""
        if self._seed_loader is None:
            raise RuntimeError("No security master source configured")

        securities = self._seed_loader()
        valid = [sec for sec in securities if sec.code and sec.name]
        skipped = len(securities) - len(valid)
        if skipped:
            logger.warning(f"Skipping {skipped} security rows without code or name")

        self._repository.upsert_batch(valid)
        self._cache.invalidate()
        logger.info(f"Security master sync completed: {len(valid)} synced, {skipped} skipped")
        return {"synced": len(valid), "skipped": skipped}

    def invalidate(self) -> None:
        self._cache.invalidate()
