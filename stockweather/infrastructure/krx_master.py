"""Seed security master for KRX-listed companies.

Market caps are KRW snapshots used for ordering; the periodic sync replaces
rows by code.
"""
from typing import List

from stockweather.domain.entities import Market, Security


def _sec(code, name, name_eng, market, sector, industry, market_cap) -> Security:
    return Security(
        code=code,
        name=name,
        name_eng=name_eng,
        market=Market(market),
        sector=sector,
        industry=industry,
        market_cap=market_cap,
    )


SEED_SECURITIES: List[Security] = [
    _sec("005930", "삼성전자", "Samsung Electronics", "KOSPI", "전기전자", "반도체", 430_000_000_000_000),
    _sec("000660", "SK하이닉스", "SK hynix", "KOSPI", "전기전자", "반도체", 94_000_000_000_000),
    _sec("373220", "LG에너지솔루션", "LG Energy Solution", "KOSPI", "전기전자", "배터리", 100_000_000_000_000),
    _sec("207940", "삼성바이오로직스", "Samsung Biologics", "KOSPI", "의료정밀", "바이오의약품", 70_000_000_000_000),
    _sec("005380", "현대차", "Hyundai Motor", "KOSPI", "운수장비", "자동차", 52_000_000_000_000),
    _sec("000270", "기아", "Kia", "KOSPI", "운수장비", "자동차", 40_000_000_000_000),
    _sec("068270", "셀트리온", "Celltrion", "KOSPI", "의료정밀", "바이오시밀러", 38_000_000_000_000),
    _sec("035420", "NAVER", "NAVER", "KOSPI", "서비스업", "플랫폼", 32_000_000_000_000),
    _sec("051910", "LG화학", "LG Chem", "KOSPI", "화학", "석유화학", 30_000_000_000_000),
    _sec("006400", "삼성SDI", "Samsung SDI", "KOSPI", "전기전자", "2차전지", 35_000_000_000_000),
    _sec("105560", "KB금융", "KB Financial Group", "KOSPI", "금융업", "은행지주", 28_000_000_000_000),
    _sec("055550", "신한지주", "Shinhan Financial Group", "KOSPI", "금융업", "은행지주", 24_000_000_000_000),
    _sec("066570", "LG전자", "LG Electronics", "KOSPI", "전기전자", "가전", 25_000_000_000_000),
    _sec("247540", "에코프로비엠", "EcoPro BM", "KOSDAQ", "화학", "배터리소재", 25_000_000_000_000),
    _sec("035720", "카카오", "Kakao", "KOSPI", "서비스업", "플랫폼", 22_000_000_000_000),
    _sec("323410", "카카오뱅크", "KakaoBank", "KOSPI", "금융업", "인터넷은행", 13_000_000_000_000),
    _sec("090430", "아모레퍼시픽", "Amorepacific", "KOSPI", "화학", "화장품", 8_000_000_000_000),
    _sec("042700", "한미반도체", "Hanmi Semiconductor", "KOSDAQ", "전기전자", "반도체장비", 8_000_000_000_000),
    _sec("000720", "현대건설", "Hyundai Engineering & Construction", "KOSPI", "건설업", "건설", 8_000_000_000_000),
    _sec("058470", "리노공업", "Lino", "KOSDAQ", "전기전자", "반도체장비", 5_000_000_000_000),
    _sec("023530", "롯데쇼핑", "Lotte Shopping", "KOSPI", "유통업", "백화점", 5_000_000_000_000),
    _sec("003490", "대한항공", "Korean Air", "KOSPI", "운수창고업", "항공", 4_000_000_000_000),
    _sec("271560", "오리온", "Orion", "KOSPI", "음식료품", "제과", 3_500_000_000_000),
    _sec("328130", "루닛", "Lunit", "KOSDAQ", "의료정밀", "AI의료", 3_000_000_000_000),
    _sec("047040", "대우건설", "Daewoo Engineering & Construction", "KOSPI", "건설업", "건설", 3_000_000_000_000),
    _sec("161890", "한국콜마", "Kolmar Korea", "KOSDAQ", "화학", "화장품", 3_000_000_000_000),
    _sec("293490", "카카오게임즈", "Kakao Games", "KOSDAQ", "서비스업", "게임", 2_800_000_000_000),
    _sec("041510", "에스엠", "SM Entertainment", "KOSDAQ", "서비스업", "엔터테인먼트", 2_200_000_000_000),
    _sec("282330", "BGF리테일", "BGF Retail", "KOSPI", "유통업", "편의점", 2_000_000_000_000),
    _sec("122870", "와이지엔터테인먼트", "YG Entertainment", "KOSDAQ", "서비스업", "엔터테인먼트", 1_800_000_000_000),
    _sec("376300", "디어유", "Dear U", "KOSDAQ", "서비스업", "플랫폼", 1_500_000_000_000),
    _sec("035900", "JYP Ent.", "JYP Entertainment", "KOSDAQ", "서비스업", "엔터테인먼트", 1_200_000_000_000),
    _sec("214450", "파마리서치", "Pharma Research", "KOSDAQ", "의료정밀", "신약개발", 800_000_000_000),
    _sec("117730", "티로보틱스", "TI Robotics", "KOSDAQ", "기계", "로봇", 800_000_000_000),
    _sec("041190", "우리기술투자", "Woori Technology Investment", "KOSDAQ", "금융업", "투자", 500_000_000_000),
]


def load_seed_securities() -> List[Security]:
    """Seed rows, copied so callers may mutate them."""
    return [security.model_copy() for security in SEED_SECURITIES]
