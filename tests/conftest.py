from concurrent.futures import Executor, Future
from typing import Optional

import pytest

from pdf_print_agent.handlers import BaseHandler
from pdf_print_agent.jobs import PrintJobManager
from pdf_print_agent.service import PrintAgent


SAMPLE_RECORDS = [
    {'Name': 'HP-1', 'DriverName': 'HP Universal', 'Default': True, 'PrinterStatus': 'Normal'},
    {'Name': 'Label ', 'DriverName': None, 'Default': False, 'PrinterStatus': None},
]


class FakeHandler(BaseHandler):
    """In-memory print backend."""

    name = 'fake'

    def __init__(self, records=None, available: bool = True):
        self.records = SAMPLE_RECORDS if records is None else records
        self.available = available
        self.list_error: Optional[Exception] = None
        self.print_error: Optional[Exception] = None
        self.on_print = None
        self.list_calls = 0
        self.print_calls = []

    @property
    def executable(self):
        return '/opt/fake/print-tool'

    def is_available(self) -> bool:
        return self.available

    def list_printers(self, timeout=None):
        self.list_calls += 1
        if self.list_error:
            raise self.list_error
        return self.records

    def print_file(self, printer_name, file_path, copies=1, timeout=None):
        self.print_calls.append((printer_name, file_path, copies, timeout))
        if self.on_print:
            self.on_print(printer_name, file_path, copies)
        if self.print_error:
            raise self.print_error
        return ''


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


@pytest.fixture
def handler():
    return FakeHandler()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scratch_dir(tmp_path):
    return tmp_path / 'scratch'


@pytest.fixture
def manager(handler, scratch_dir):
    return PrintJobManager(handler, str(scratch_dir), print_timeout=5, executor=InlineExecutor())


@pytest.fixture
def agent(handler, scratch_dir, clock):
    return PrintAgent(
        handler,
        str(scratch_dir),
        cache_ttl=10,
        clock=clock,
        executor=InlineExecutor(),
    )
