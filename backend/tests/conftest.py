import os

# Keep tests off the filesystem and away from the background trigger
os.environ.setdefault("LOG_DIR", "")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from parcelsync.core.config import settings
from parcelsync.api import dependencies
from parcelsync.api.extraction import JobOrchestrator, RetryLedger
from parcelsync.main import app
from parcelsync.models import AdministrativeCodes, Domain, NormalizedAddress, Record


class FakeClock:
    """Injectable clock that only moves when told to"""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class FakeStore:
    def __init__(self):
        self.records: Dict[Domain, List[Record]] = {Domain.BUILDING: [], Domain.LAND: []}
        self.updates: List[tuple] = []
        self.select_calls: List[tuple] = []
        self.select_error: Optional[Exception] = None
        self.update_error: Optional[Exception] = None

    def add(self, domain: Domain, record_id: str, address: str) -> Record:
        record = Record(id=record_id, address=address, domain=domain)
        self.records[domain].append(record)
        return record

    async def select_candidates(self, domain: Domain, max_records: Optional[int] = None) -> List[Record]:
        self.select_calls.append((domain, max_records))
        if self.select_error is not None:
            raise self.select_error
        records = list(self.records[domain])
        return records[:max_records] if max_records is not None else records

    async def update_record(self, domain: Domain, record_id: str, fields: Dict[str, Any]) -> None:
        if self.update_error is not None:
            raise self.update_error
        self.updates.append((domain, record_id, fields))


class FakeCodeResolver:
    def __init__(self):
        self.calls: List[str] = []
        self.error: Optional[Exception] = None
        self.district_code = "11680"
        self.legal_dong_code = "10100"

    async def resolve_codes(self, address: NormalizedAddress, record_id: Optional[str] = None) -> AdministrativeCodes:
        self.calls.append(record_id)
        if self.error is not None:
            raise self.error
        return AdministrativeCodes(
            **address.model_dump(),
            district_code=self.district_code,
            legal_dong_code=self.legal_dong_code
        )


class FakeBuildingRegistry:
    def __init__(self, payload: Dict[str, Any]):
        self.payload = payload
        self.calls: List[AdministrativeCodes] = []

    async def fetch(self, codes: AdministrativeCodes) -> Dict[str, Any]:
        self.calls.append(codes)
        return self.payload


class FakeLandRegistry:
    def __init__(self, payload: Dict[str, Any]):
        self.payload = payload
        self.error: Optional[Exception] = None
        self.calls: List[str] = []

    async def fetch(self, pnu: str) -> Dict[str, Any]:
        self.calls.append(pnu)
        if self.error is not None:
            raise self.error
        return self.payload


class FakeNotifier:
    def __init__(self):
        self.calls: List[tuple] = []

    async def notify(self, domain: Domain, records: List[Record]) -> bool:
        self.calls.append((domain, list(records)))
        return True


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float):
        self.delays.append(delay)


def building_item(**overrides) -> Dict[str, Any]:
    item = {
        "rnum": 1,
        "platPlc": "서울특별시 강남구 역삼동 123번지",
        "newPlatPlc": "서울특별시 강남구 테헤란로 101",
        "sigunguCd": "11680",
        "bjdongCd": "10100",
        "bun": "0123",
        "ji": "0000",
        "bldNm": "역삼빌딩",
        "platArea": 330.5,
        "archArea": 198.2,
        "totArea": 1520.7,
        "bcRat": 59.97,
        "vlRat": 399.8,
        "vlRatEstmTotArea": 1321.4,
        "heit": 38.5,
        "mainPurpsCdNm": "업무시설",
        "etcPurps": "사무소,근린생활시설",
        "roofCdNm": "(철근)콘크리트",
        "strctCdNm": "철근콘크리트구조",
        "useAprDay": "20010315",
        "crtnDay": "20240102",
        "rideUseElvtCnt": "2",
        "emgenUseElvtCnt": "1",
        "indrMechUtcnt": "3",
        "oudrMechUtcnt": "0",
        "indrAutoUtcnt": "10",
        "oudrAutoUtcnt": "",
        "hhldCnt": "0",
        "fmlyCnt": "0",
        "hoCnt": "12",
        "grndFlrCnt": "10",
        "ugrndFlrCnt": "2",
    }
    item.update(overrides)
    return item


def building_payload(*items) -> Dict[str, Any]:
    return {
        "response": {
            "header": {"resultCode": "00", "resultMsg": "NORMAL SERVICE"},
            "body": {
                "items": {"item": list(items) if items else [building_item()]},
                "numOfRows": 10,
                "pageNo": 1,
                "totalCount": len(items) or 1,
            },
        }
    }


def land_field(**overrides) -> Dict[str, Any]:
    field = {
        "pnu": "1168010100101230000",
        "ldCode": "1168010100",
        "ldCodeNm": "서울특별시 강남구 역삼동",
        "mnnmSlno": "123",
        "stdrYear": "2024",
        "lndpclAr": "330.5",
        "prposArea1Nm": "일반상업지역",
        "pblntfPclnd": "45210000",
        "lastUpdtDt": "2024-07-31",
    }
    field.update(overrides)
    return field


def land_payload(*fields) -> Dict[str, Any]:
    fields = list(fields) if fields else [land_field()]
    return {"totalCount": str(len(fields)), "fields": fields}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger(clock):
    return RetryLedger(max_attempts=5, reset_days=7, clock=clock)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def code_resolver():
    return FakeCodeResolver()


@pytest.fixture
def building_registry():
    return FakeBuildingRegistry(building_payload())


@pytest.fixture
def land_registry():
    return FakeLandRegistry(land_payload())


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def test_settings():
    return settings.model_copy(update={"PACING_SECONDS": 1.0, "PERMANENT_NO_DATA_DOMAINS": []})


@pytest.fixture
def orchestrator(store, code_resolver, building_registry, land_registry, notifier, ledger, test_settings, sleep):
    return JobOrchestrator(
        store=store,
        code_resolver=code_resolver,
        building_registry=building_registry,
        land_registry=land_registry,
        notifier=notifier,
        ledger=ledger,
        settings=test_settings,
        sleep=sleep,
    )


@pytest.fixture
def client(orchestrator, ledger):
    """Create a test client wired to the fake collaborators."""
    app.dependency_overrides[dependencies.get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[dependencies.get_retry_ledger] = lambda: ledger
    yield TestClient(app)
    app.dependency_overrides.clear()
