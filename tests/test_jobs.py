"""Tests for the print job state machine."""

import os
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from pdf_print_agent.errors import (
    ArtifactWriteFailed,
    CollaboratorExecutionFailed,
    CollaboratorMissing,
    CollaboratorTimeout,
    EmptyDocument,
    MissingDocument,
    MissingPrinter,
    UnsupportedFormat,
)
from pdf_print_agent.jobs import PrintJobManager, normalize_copies


@pytest.mark.parametrize('value, expected', [
    (0, 1),
    (-5, 1),
    ('abc', 1),
    (None, 1),
    (3.7, 3),
    ('2', 2),
    (' 4 ', 4),
    ('', 1),
    (float('inf'), 1),
    (float('nan'), 1),
    (True, 1),
    (0.5, 1),
    ([2], 1),
])
def test_normalize_copies(value, expected):
    assert normalize_copies(value) == expected


class TestSubmitSuccess:

    def test_end_to_end(self, manager, handler):
        observed = []
        handler.on_print = lambda *args: observed.append(manager.get_current_job()['status'])

        job = manager.submit('HP-1', '1,2,3', 2)

        assert job.id == 1
        assert job.status == 'printing'
        assert observed == ['printing']

        current = manager.get_current_job()
        assert current['status'] == 'success'
        assert '2' in current['message']
        assert current['error'] is None
        assert current['errorCode'] is None
        assert current['finishedAt'] is not None

        with open(current['filePath'], 'rb') as f:
            assert f.read() == bytes([1, 2, 3])

    def test_handler_receives_request(self, manager, handler):
        job = manager.submit('  HP-1 ', [37, 80, 68, 70], '3')

        printer_name, file_path, copies, timeout = handler.print_calls[0]
        assert printer_name == 'HP-1'
        assert file_path == job.file_path
        assert copies == 3
        assert timeout == 5

    def test_ids_increase(self, manager):
        ids = [manager.submit('HP-1', '1', 1).id for _ in range(3)]
        assert ids == [1, 2, 3]

    def test_files_are_unique(self, manager, scratch_dir):
        first = manager.submit('HP-1', '1', 1)
        second = manager.submit('HP-1', '2', 1)

        assert first.file_path != second.file_path
        assert os.path.dirname(first.file_path) == str(scratch_dir)
        assert len(os.listdir(scratch_dir)) == 2

    def test_new_submission_replaces_record(self, manager, handler):
        handler.print_error = CollaboratorExecutionFailed(detail='offline')
        manager.submit('HP-1', '1', 1)
        assert manager.get_current_job()['status'] == 'error'

        handler.print_error = None
        manager.submit('HP-2', '1', 1)
        current = manager.get_current_job()
        assert current['id'] == 2
        assert current['printerName'] == 'HP-2'
        assert current['status'] == 'success'
        assert current['error'] is None


class TestValidation:

    def test_missing_document(self, manager):
        with pytest.raises(MissingDocument):
            manager.submit('HP-1', None, 1)
        assert manager.get_current_job()['status'] == 'idle'

    def test_missing_document_checked_first(self, manager):
        with pytest.raises(MissingDocument):
            manager.submit('', None, 1)

    @pytest.mark.parametrize('printer_name', ['', '   ', None, 42])
    def test_missing_printer(self, manager, handler, scratch_dir, printer_name):
        with pytest.raises(MissingPrinter):
            manager.submit(printer_name, '1,2,3', 1)

        assert manager.get_current_job()['status'] == 'idle'
        assert not scratch_dir.exists()
        assert handler.print_calls == []

    def test_rejected_requests_do_not_use_ids(self, manager):
        with pytest.raises(MissingPrinter):
            manager.submit(' ', '1', 1)
        assert manager.submit('HP-1', '1', 1).id == 1


class TestSubmitFailures:

    def test_collaborator_missing(self, manager, handler, scratch_dir):
        handler.available = False

        with pytest.raises(CollaboratorMissing) as exc_info:
            manager.submit('HP-1', '1,2,3', 1)

        assert '/opt/fake/print-tool' in exc_info.value.message
        current = manager.get_current_job()
        assert current['status'] == 'error'
        assert current['errorCode'] == 'CollaboratorMissing'
        assert '/opt/fake/print-tool' in current['error']
        assert current['finishedAt'] is not None
        assert not scratch_dir.exists()
        assert handler.print_calls == []

    def test_empty_document(self, manager, handler):
        with pytest.raises(EmptyDocument):
            manager.submit('HP-1', '!!!!', 1)

        current = manager.get_current_job()
        assert current['id'] == 1
        assert current['status'] == 'error'
        assert current['errorCode'] == 'EmptyDocument'
        assert current['finishedAt'] is not None
        assert handler.print_calls == []

    def test_unsupported_format(self, manager):
        with pytest.raises(UnsupportedFormat):
            manager.submit('HP-1', {'type': 'Blob'}, 1)
        assert manager.get_current_job()['errorCode'] == 'UnsupportedFormat'

    def test_artifact_write_failed(self, handler, tmp_path):
        blocker = tmp_path / 'not-a-dir'
        blocker.write_text('x')
        manager = PrintJobManager(handler, str(blocker), executor=None)

        with pytest.raises(ArtifactWriteFailed):
            manager.submit('HP-1', '1,2,3', 1)

        current = manager.get_current_job()
        assert current['status'] == 'error'
        assert current['errorCode'] == 'ArtifactWriteFailed'
        assert current['finishedAt'] is not None
        manager.shutdown()

    def test_print_command_fails(self, manager, handler):
        handler.print_error = CollaboratorExecutionFailed(detail='Printer "HP-1" is offline')

        job = manager.submit('HP-1', '1,2,3', 1)

        assert job.status == 'printing'
        current = manager.get_current_job()
        assert current['status'] == 'error'
        assert current['error'] == 'Printer "HP-1" is offline'
        assert current['errorCode'] == 'CollaboratorExecutionFailed'
        assert current['finishedAt'] is not None

    def test_print_command_times_out(self, manager, handler):
        handler.print_error = CollaboratorTimeout(detail='did not finish within 5 seconds')
        manager.submit('HP-1', '1,2,3', 1)

        current = manager.get_current_job()
        assert current['status'] == 'error'
        assert current['errorCode'] == 'CollaboratorTimeout'

    def test_unexpected_exception_still_finishes_job(self, manager, handler):
        handler.print_error = RuntimeError('boom')
        manager.submit('HP-1', '1,2,3', 1)

        current = manager.get_current_job()
        assert current['status'] == 'error'
        assert current['error'] == 'boom'
        assert current['finishedAt'] is not None


class TestBackgroundPrinting:

    @pytest.fixture
    def threaded(self, handler, scratch_dir):
        manager = PrintJobManager(
            handler, str(scratch_dir),
            executor=ThreadPoolExecutor(max_workers=1),
        )
        yield manager
        manager.shutdown()

    def test_submit_returns_while_printing(self, threaded, handler):
        release = threading.Event()
        handler.on_print = lambda *args: release.wait(5)

        job = threaded.submit('HP-1', '1,2,3', 1)
        assert job.status == 'printing'
        assert threaded.get_current_job()['status'] == 'printing'
        assert threaded.get_current_job()['finishedAt'] is None

        release.set()
        assert threaded.wait(5)
        assert threaded.get_current_job()['status'] == 'success'

    def test_superseded_job_does_not_overwrite_current(self, threaded, handler):
        release = threading.Event()
        handler.on_print = lambda *args: release.wait(5)

        threaded.submit('HP-1', '1', 1)
        second = threaded.submit('HP-2', '2', 1)
        assert threaded.get_current_job()['id'] == second.id

        release.set()
        assert threaded.wait(5)

        current = threaded.get_current_job()
        assert current['id'] == second.id
        assert current['printerName'] == 'HP-2'
        assert current['status'] == 'success'
        assert [call[0] for call in handler.print_calls] == ['HP-1', 'HP-2']

    def test_wait_without_jobs(self, threaded):
        assert threaded.wait(0) is True
