"""Tests for security search, suggestions, filtering and the catalog cache."""
import pytest

from conftest import InMemorySecurityRepository, make_security
from stockweather.domain.entities import Market
from stockweather.services.catalog_service import CatalogService
from stockweather.services.search_service import SearchService, matches_initials


@pytest.fixture
def search_service(security_repository):
    return SearchService(CatalogService(security_repository))


def test_search_by_code_returns_exact_record(search_service):
    results = search_service.search("005930")
    assert len(results) == 1
    assert results[0].code == "005930"
    assert results[0].name == "삼성전자"


def test_search_no_match_returns_empty(search_service):
    assert search_service.search("존재하지않는종목") == []


@pytest.mark.parametrize("query", ["", "   ", None])
def test_search_blank_query(search_service, query):
    assert search_service.search(query) == []


def test_search_ranks_prefix_then_market_cap(search_service):
    results = search_service.search("삼성")
    assert [r.code for r in results] == ["005930", "207940"]


def test_search_exact_name_beats_market_cap():
    repo = InMemorySecurityRepository([
        make_security("005930", "삼성전자", market_cap=430),
        make_security("005935", "삼성전자우", market_cap=500),
    ])
    service = SearchService(CatalogService(repo))
    assert [r.code for r in service.search("삼성전자")] == ["005930", "005935"]


def test_search_code_prefix_beats_name_prefix():
    repo = InMemorySecurityRepository([
        make_security("000660", "SK하이닉스", market_cap=94),
        make_security("111111", "00테크", market_cap=500),
    ])
    service = SearchService(CatalogService(repo))
    assert [r.code for r in service.search("00")] == ["000660", "111111"]


def test_search_other_fields(search_service):
    assert [r.code for r in search_service.search("samsung")] == ["005930"]
    assert {r.code for r in search_service.search("반도체")} == {"005930", "000660"}
    assert {r.code for r in search_service.search("의료정밀")} == {"207940"}
    assert [r.code for r in search_service.search("kosdaq")] == ["247540"]
    assert [r.code for r in search_service.search("naver")] == ["035420"]


def test_search_respects_limit(search_service):
    assert len(search_service.search("0", limit=3)) == 3


def test_matches_initials():
    assert matches_initials("삼성전자", "ㅅㅅ")
    assert matches_initials("삼성전자", "ㅈㅈ")
    assert matches_initials("삼성전자", "삼ㅅ")
    assert not matches_initials("삼성전자", "ㅎㄷ")
    assert matches_initials("현대건설", "ㅎㄷ")
    assert not matches_initials("", "ㅎ")


def test_search_by_initials(search_service):
    assert [r.code for r in search_service.search("ㅎㄷㄱ")] == ["000720"]


def test_search_initials_only_for_short_queries(search_service):
    assert search_service.search("ㅎㄷㄱㅅ") == []


def test_suggest(search_service):
    suggestions = search_service.suggest("삼성")
    assert suggestions[0].display_text == "삼성전자 (005930)"
    assert len(search_service.suggest("0")) == 5
    assert search_service.suggest("") == []


def test_filter_securities(search_service):
    kosdaq = search_service.filter_securities(market="kosdaq")
    assert [r.code for r in kosdaq] == ["247540"]

    electronics = search_service.filter_securities(sector="전기")
    assert [r.code for r in electronics] == ["005930", "000660"]

    top = search_service.filter_securities(market="KOSPI", limit=2)
    assert [r.code for r in top] == ["005930", "000660"]
    assert all(r.market == Market.KOSPI for r in top)


def test_list_all_in_market_cap_order(search_service):
    assert [r.code for r in search_service.list_all()][:3] == ["005930", "000660", "207940"]


def test_catalog_cache_and_invalidate(security_repository, fake_clock):
    catalog = CatalogService(security_repository, cache_ttl_seconds=600, clock=fake_clock)
    catalog.get_all_active()
    catalog.get_all_active()
    assert security_repository.reads == 1

    fake_clock.advance(601)
    catalog.get_all_active()
    assert security_repository.reads == 2

    catalog.invalidate()
    catalog.get_all_active()
    assert security_repository.reads == 3


def test_catalog_sync_upserts_valid_rows(fake_clock):
    repository = InMemorySecurityRepository()
    seed = [
        make_security("005930", "삼성전자", market_cap=430),
        make_security("", "이름만"),
        make_security("000660", "", market_cap=94),
    ]
    catalog = CatalogService(repository, seed_loader=lambda: seed, clock=fake_clock)
    assert catalog.get_all_active() == []

    assert catalog.sync() == {"synced": 1, "skipped": 2}
    assert [s.code for s in catalog.get_all_active()] == ["005930"]


def test_catalog_sync_without_source():
    with pytest.raises(RuntimeError):
        CatalogService(InMemorySecurityRepository()).sync()


def test_catalog_get_by_code_falls_back_to_repository(security_repository):
    inactive = make_security("111111", "상장폐지", is_active=False)
    security_repository.rows[inactive.code] = inactive
    catalog = CatalogService(security_repository)
    assert catalog.get_by_code("005930").name == "삼성전자"
    assert catalog.get_by_code("111111").name == "상장폐지"
    assert catalog.get_by_code("999999") is None
