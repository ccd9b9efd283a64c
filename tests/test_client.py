import pytest
import requests

from solver_client import (
    AnalysisUnavailableError,
    ScheduleFetchError,
    SolverClient,
    SolverClientError,
    clean_job_id,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Records requests and answers from a {(method, url): response} table."""

    def __init__(self, responses=None):
        self.headers: dict[str, str] = {}
        self.responses = responses or {}
        self.calls: list[tuple[str, str, dict]] = []

    def _handle(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.get((method, url))
        if isinstance(response, Exception):
            raise response
        if response is None:
            raise requests.ConnectionError(f"No route to {url}")
        return response

    def get(self, url, **kwargs):
        return self._handle("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._handle("POST", url, **kwargs)

    def put(self, url, **kwargs):
        return self._handle("PUT", url, **kwargs)

    def delete(self, url, **kwargs):
        return self._handle("DELETE", url, **kwargs)


BASE = "http://solver:8080"


def _client(responses) -> tuple[SolverClient, FakeSession]:
    session = FakeSession(responses)
    return SolverClient(base_url=BASE + "/", timeout=3, session=session), session


def test_clean_job_id() -> None:
    assert clean_job_id('"abc-123"\n') == "abc-123"


def test_start_solving_returns_clean_id() -> None:
    client, session = _client({("POST", f"{BASE}/schedules/solve"): FakeResponse(text='"job-9"')})
    assert client.start_solving() == "job-9"
    assert session.calls[0][2]["timeout"] == 3


def test_start_solving_failure_raises() -> None:
    client, _ = _client({("POST", f"{BASE}/schedules/solve"): FakeResponse(status_code=503)})
    with pytest.raises(SolverClientError):
        client.start_solving()


def test_list_jobs() -> None:
    client, _ = _client({("GET", f"{BASE}/schedules/list"): FakeResponse(payload=["a", '"b"'])})
    assert client.list_jobs() == ["a", "b"]


@pytest.mark.parametrize(
    "response",
    [FakeResponse(status_code=500), FakeResponse(payload={"not": "a list"}), FakeResponse(text="html")],
)
def test_list_jobs_never_raises(response) -> None:
    client, _ = _client({("GET", f"{BASE}/schedules/list"): response})
    assert client.list_jobs() == []


def test_list_jobs_network_error_is_empty() -> None:
    client, _ = _client({})
    assert client.list_jobs() == []


def test_get_schedule(snapshot_payload) -> None:
    client, _ = _client({("GET", f"{BASE}/schedules/job-1"): FakeResponse(payload=snapshot_payload)})
    snapshot = client.get_schedule("job-1")
    assert snapshot.solver_status == "SOLVING_ACTIVE"
    assert len(snapshot.orders) == 3


@pytest.mark.parametrize(
    "response",
    [FakeResponse(status_code=404), FakeResponse(payload=None), FakeResponse(payload={"orders": "nope"})],
)
def test_get_schedule_failures_raise_fetch_error(response) -> None:
    client, _ = _client({("GET", f"{BASE}/schedules/job-1"): response})
    with pytest.raises(ScheduleFetchError):
        client.get_schedule("job-1")


def test_get_status() -> None:
    payload = {"score": "-1hard/0soft", "solverStatus": "NOT_SOLVING"}
    client, _ = _client({("GET", f"{BASE}/schedules/job-1/status"): FakeResponse(payload=payload)})
    status = client.get_status("job-1")
    assert status.score == "-1hard/0soft"
    assert not status.is_solving


def test_stop_solving_failure_is_not_fatal() -> None:
    client, _ = _client({("DELETE", f"{BASE}/schedules/job-1"): FakeResponse(status_code=500)})
    assert client.stop_solving("job-1") is False
    ok_client, _ = _client({("DELETE", f"{BASE}/schedules/job-1"): FakeResponse()})
    assert ok_client.stop_solving("job-1") is True


def test_analyze_sends_wire_snapshot(snapshot) -> None:
    payload = {"score": "0hard/-120soft", "initialized": True, "constraints": [{"name": "Overtime", "matchCount": 1}]}
    client, session = _client({("PUT", f"{BASE}/schedules/analyze"): FakeResponse(payload=payload)})

    analysis = client.analyze(snapshot)

    assert analysis.constraints[0].display_match_count == 1
    body = session.calls[0][2]["json"]
    assert body["solverStatus"] == "SOLVING_ACTIVE"
    assert body["orders"][0]["productName"] == "Product o1"


def test_analyze_non_ok_carries_status(snapshot) -> None:
    client, _ = _client({("PUT", f"{BASE}/schedules/analyze"): FakeResponse(status_code=422)})
    with pytest.raises(AnalysisUnavailableError) as exc_info:
        client.analyze(snapshot)
    assert exc_info.value.status_code == 422


def test_analyze_network_error(snapshot) -> None:
    client, _ = _client({})
    with pytest.raises(SolverClientError):
        client.analyze(snapshot)


def test_get_schedule_tolerates_array_dates(snapshot_payload) -> None:
    snapshot_payload["orders"][0]["scheduledDateTime"] = [2030, 4, 1, 10, 0]
    client, _ = _client({("GET", f"{BASE}/schedules/job-1"): FakeResponse(payload=snapshot_payload)})

    snapshot = client.get_schedule("job-1")
    assert snapshot.orders[0].scheduled_at is None
