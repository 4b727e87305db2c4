import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import pytest
import requests

from prusa_proxy.app import create_app
from prusa_proxy.config import ProxyConfig
from prusa_proxy.handlers import base as handler_base
from prusa_proxy.models import PrinterRecord
from prusa_proxy.operations import PrinterOperations


REASONS = {
    200: "OK",
    204: "No Content",
    401: "Unauthorized",
    404: "Not Found",
    409: "Conflict",
    500: "Internal Server Error",
}


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, body: Optional[bytes] = None) -> None:
        self.status_code = status_code
        self.reason = REASONS.get(status_code, "")
        if body is not None:
            self.content = body
        elif payload is not None:
            self.content = json.dumps(payload).encode("utf-8")
        else:
            self.content = b""

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def json(self) -> Any:
        return json.loads(self.content)


class FakePrinter:
    """
    One simulated PrusaLink printer.

    ``stop_after_deletes`` is the number of DELETE calls after which the job
    disappears (None = never). Before that, the printer reports
    ``pending_state``.

    ``clear_after_polls`` clears the job on its own once that many status
    reads have happened after the first DELETE. ``status_fails_from`` makes
    the Nth status read (1-based) and every later one answer 500.
    """

    def __init__(self, job_id: int = 42, state: str = "PRINTING",
                 put_status: int = 204, delete_status: int = 204,
                 stop_after_deletes: Optional[int] = 1, pending_state: str = "STOPPING",
                 unreachable: bool = False, status_body: Optional[bytes] = None,
                 clear_after_polls: Optional[int] = None,
                 status_fails_from: Optional[int] = None) -> None:
        self.job_id = job_id
        self.state = state
        self.put_status = put_status
        self.delete_status = delete_status
        self.stop_after_deletes = stop_after_deletes
        self.pending_state = pending_state
        self.unreachable = unreachable
        self.status_body = status_body
        self.deletes = 0
        self.clear_after_polls = clear_after_polls
        self.status_fails_from = status_fails_from
        self.status_reads = 0
        self.polls_after_delete = 0

    def read_status(self) -> FakeResponse:
        self.status_reads += 1
        if self.status_fails_from is not None and self.status_reads >= self.status_fails_from:
            return FakeResponse(500)
        if self.deletes and self.clear_after_polls is not None:
            self.polls_after_delete += 1
            if self.polls_after_delete >= self.clear_after_polls:
                self.job_id = 0
                self.state = "STOPPED"
        if self.status_body is not None:
            return FakeResponse(200, body=self.status_body)
        return FakeResponse(200, self.status_document())

    def status_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {
            "printer": {"state": self.state, "temp_bed": 60.0, "temp_nozzle": 215.0},
        }
        if self.job_id:
            document["job"] = {"id": self.job_id, "progress": 12.0, "time_remaining": 3600}
        return document


class FakePrusaLink:
    """Routes requests.get/put/delete to simulated printers and records calls."""

    def __init__(self) -> None:
        self.printers: Dict[str, FakePrinter] = {}
        self.calls: List[Tuple[str, str, Any, Any]] = []

    def add(self, address: str, **kwargs: Any) -> FakePrinter:
        printer = FakePrinter(**kwargs)
        self.printers[address] = printer
        return printer

    def operation_calls(self) -> List[Tuple[str, str]]:
        return [(method, url) for method, url, _auth, _data in self.calls if method != "GET"]

    def _printer(self, url: str) -> Tuple[FakePrinter, str]:
        parsed = urlparse(url)
        printer = self.printers.get(parsed.netloc)
        if printer is None or printer.unreachable:
            raise requests.exceptions.ConnectionError(f"Cannot connect to {parsed.netloc}")
        return printer, parsed.path

    def get(self, url: str, auth: Any = None, timeout: Any = None) -> FakeResponse:
        self.calls.append(("GET", url, auth, None))
        printer, path = self._printer(url)
        if path == "/api/v1/status":
            return printer.read_status()
        if path == "/api/job":
            return FakeResponse(200, {"state": printer.state.capitalize(), "progress": {}})
        return FakeResponse(404)

    def put(self, url: str, data: Any = None, headers: Any = None, auth: Any = None, timeout: Any = None) -> FakeResponse:
        self.calls.append(("PUT", url, auth, data))
        printer, path = self._printer(url)
        if printer.put_status < 300:
            if path.endswith("/pause"):
                printer.state = "PAUSED"
            elif path.endswith("/resume"):
                printer.state = "PRINTING"
        return FakeResponse(printer.put_status)

    def delete(self, url: str, auth: Any = None, timeout: Any = None) -> FakeResponse:
        self.calls.append(("DELETE", url, auth, None))
        printer, _path = self._printer(url)
        if printer.delete_status >= 300:
            return FakeResponse(printer.delete_status)

        printer.deletes += 1
        if printer.stop_after_deletes is not None and printer.deletes >= printer.stop_after_deletes:
            printer.job_id = 0
            printer.state = "STOPPED"
        else:
            printer.state = printer.pending_state
        return FakeResponse(printer.delete_status)


@pytest.fixture
def prusalink(monkeypatch: pytest.MonkeyPatch) -> FakePrusaLink:
    fake = FakePrusaLink()
    monkeypatch.setattr(handler_base.requests, "get", fake.get)
    monkeypatch.setattr(handler_base.requests, "put", fake.put)
    monkeypatch.setattr(handler_base.requests, "delete", fake.delete)
    return fake


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def make_config():
    def _make(*records: Tuple[str, str, str]) -> ProxyConfig:
        return ProxyConfig(printers=[
            PrinterRecord(address=address, username=username, password=password)
            for address, username, password in records
        ])
    return _make


@pytest.fixture
def make_operations(sleeps: List[float]):
    def _make(config: ProxyConfig, **kwargs: Any) -> PrinterOperations:
        kwargs.setdefault("sleep", sleeps.append)
        return PrinterOperations(config, **kwargs)
    return _make


@pytest.fixture
def make_client(make_operations):
    def _make(config: ProxyConfig, **kwargs: Any):
        app = create_app(config, operations=make_operations(config, **kwargs))
        app.config["TESTING"] = True
        return app.test_client()
    return _make
