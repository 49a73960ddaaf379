import asyncio

import httpx
import pytest

from app.api.delivery.adapters.data_gov_pincode_adapter import DataGovPincodeAdapter
from app.api.delivery.exceptions import UpstreamUnavailableError

BASE_URL = "https://directory.test/resource/pincodes"


def _record(pincode, district="Vellore", state="TAMIL NADU", office="Vellore H.O"):
    return {
        "pincode": pincode,
        "officename": office,
        "districtname": district,
        "statename": state,
        "taluk": district,
    }


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def make_adapter(handler, sleep=None, **kwargs):
    options = dict(
        api_key="key",
        base_url=BASE_URL,
        timeout=1,
        max_retries=2,
        backoff_base=1,
        backoff_max=15,
        page_size=2,
        page_delay=0.5,
    )
    options.update(kwargs)
    return DataGovPincodeAdapter(
        transport=httpx.MockTransport(handler),
        sleep=sleep or SleepRecorder(),
        **options,
    )


def test_lookup_pincode_sends_filters_and_parses_records():
    seen = {}

    def handler(request: httpx.Request):
        seen.update(request.url.params)
        return httpx.Response(
            200,
            json={"records": [_record("632001"), _record(632001, office="Fort S.O")], "total": 2},
        )

    adapter = make_adapter(handler)
    localities = asyncio.run(adapter.lookup_pincode("632001"))

    assert seen["filters[pincode]"] == "632001"
    assert seen["api-key"] == "key"
    assert seen["format"] == "json"
    assert [loc.office_name for loc in localities] == ["Vellore H.O", "Fort S.O"]
    assert localities[0].state_name == "TAMIL NADU"
    assert localities[0].district_name == "Vellore"


def test_fetch_pincodes_paginates_and_deduplicates():
    pages = {
        "0": [_record("632001"), _record("632002")],
        "2": [_record("632002", office="Other S.O"), _record("632004")],
        "4": [_record("632006")],
    }
    offsets = []

    def handler(request: httpx.Request):
        offset = request.url.params["offset"]
        offsets.append(offset)
        assert request.url.params["filters[statename]"] == "Tamil Nadu"
        assert request.url.params["filters[districtname]"] == "Vellore"
        return httpx.Response(200, json={"records": pages[offset], "total": 5})

    sleep = SleepRecorder()
    adapter = make_adapter(handler, sleep=sleep)
    records = asyncio.run(adapter.fetch_pincodes(" Tamil  Nadu", "Vellore"))

    assert offsets == ["0", "2", "4"]
    assert [r.pincode for r in records] == ["632001", "632002", "632004", "632006"]
    assert records[1].office_name == "Vellore H.O"
    # pause between pages only
    assert sleep.delays == [0.5, 0.5]


def test_retries_server_errors_with_exponential_backoff():
    calls = []

    def handler(request: httpx.Request):
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={"records": [_record("632001")], "total": 1})

    sleep = SleepRecorder()
    adapter = make_adapter(handler, sleep=sleep)
    localities = asyncio.run(adapter.lookup_pincode("632001"))

    assert len(calls) == 3
    assert sleep.delays == [1, 2]
    assert localities[0].pincode == "632001"


def test_timeout_raises_upstream_unavailable_after_retries():
    calls = []

    def handler(request: httpx.Request):
        calls.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    sleep = SleepRecorder()
    adapter = make_adapter(handler, sleep=sleep)

    with pytest.raises(UpstreamUnavailableError):
        asyncio.run(adapter.lookup_pincode("632001"))

    assert len(calls) == 3
    assert sleep.delays == [1, 2]


def test_client_errors_are_not_retried():
    calls = []

    def handler(request: httpx.Request):
        calls.append(request)
        return httpx.Response(403, json={"error": "invalid key"})

    adapter = make_adapter(handler)

    with pytest.raises(UpstreamUnavailableError):
        asyncio.run(adapter.lookup_pincode("632001"))
    assert len(calls) == 1


def test_rate_limit_is_retried():
    calls = []

    def handler(request: httpx.Request):
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(429)
        return httpx.Response(200, json={"records": [], "total": 0})

    adapter = make_adapter(handler)
    assert asyncio.run(adapter.lookup_pincode("999999")) == []
    assert len(calls) == 2


def test_backoff_is_capped():
    adapter = make_adapter(lambda request: httpx.Response(200, json={}), backoff_base=1, backoff_max=15)
    assert [adapter.backoff_delay(n) for n in range(6)] == [1, 2, 4, 8, 15, 15]


def test_missing_api_key_is_reported_as_unavailable():
    adapter = make_adapter(lambda request: httpx.Response(200, json={}), api_key="")
    adapter.api_key = None

    with pytest.raises(UpstreamUnavailableError):
        asyncio.run(adapter.lookup_pincode("632001"))


def test_list_states_and_districts_are_sorted_and_unique():
    def handler(request: httpx.Request):
        records = [
            _record("632001", "Vellore", "TAMIL NADU"),
            _record("600001", "Chennai", "TAMIL NADU"),
            _record("560001", "Bangalore", "KARNATAKA"),
        ]
        state = request.url.params.get("filters[statename]")
        if state:
            records = [r for r in records if r["statename"] == state]
        return httpx.Response(200, json={"records": records, "total": len(records)})

    adapter = make_adapter(handler)

    assert asyncio.run(adapter.list_states()) == ["KARNATAKA", "TAMIL NADU"]
    assert asyncio.run(adapter.list_districts("TAMIL NADU")) == ["Chennai", "Vellore"]
