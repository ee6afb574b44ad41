"""
Tests for the file watcher and its change classification
"""

import os
import queue
import threading
import time
from pathlib import Path

import pytest

from savewatch.core.errors import (
    ErrorStreamClosedError,
    StreamClosedError,
    WatchRuntimeError,
    WatchSetupError,
)
from savewatch.core.events import Op, RawEvent, is_qualifying
from savewatch.core.session import ERRORS, Notification
from savewatch.core.watcher import FileWatcher

from fakes import ScriptedSession, SessionFactory, error, event


TARGET = os.path.abspath('/project/config.toml')
SIBLING = os.path.abspath('/project/.config.toml.swp')

NON_CHANGE_OPS = [Op.REMOVE, Op.RENAME, Op.CHMOD, Op.REMOVE | Op.CHMOD]
CHANGE_OPS = [Op.WRITE, Op.CREATE, Op.WRITE | Op.CREATE, Op.WRITE | Op.CHMOD]


def run_watcher(session, filename=TARGET, file_changes=None):
    """Run a watcher over a scripted session and return (error, signals)"""
    file_changes = file_changes if file_changes is not None else queue.Queue()
    watcher = FileWatcher(filename, file_changes, session_factory=SessionFactory(session))
    with pytest.raises(Exception) as exc_info:
        watcher.run()
    signals = []
    while not file_changes.empty():
        signals.append(file_changes.get_nowait())
    return exc_info.value, signals


class TestIsQualifying:
    """Test the change classification policy"""

    @pytest.mark.parametrize('op', CHANGE_OPS + NON_CHANGE_OPS)
    def test_sibling_paths_never_qualify(self, op):
        """Events for other files in the directory are dropped for any op"""
        assert not is_qualifying(RawEvent(SIBLING, op), TARGET)

    @pytest.mark.parametrize('op', CHANGE_OPS)
    def test_write_or_create_on_target_qualifies(self, op):
        assert is_qualifying(RawEvent(TARGET, op), TARGET)

    @pytest.mark.parametrize('op', NON_CHANGE_OPS)
    def test_other_ops_on_target_do_not_qualify(self, op):
        assert not is_qualifying(RawEvent(TARGET, op), TARGET)

    def test_path_must_match_exactly(self):
        """A prefix of the target is a different file"""
        assert not is_qualifying(RawEvent(TARGET + '~', Op.WRITE), TARGET)
        assert not is_qualifying(RawEvent(os.path.dirname(TARGET), Op.WRITE), TARGET)


class TestFileWatcher:
    """Test FileWatcher.run against scripted sessions"""

    def test_constructor_does_no_io(self):
        """Construction never touches the session factory"""
        factory = SessionFactory()
        watcher = FileWatcher('/does/not/exist/file.txt', queue.Queue(), session_factory=factory)

        assert watcher.filename == '/does/not/exist/file.txt'
        assert factory.created == []

    def test_watches_parent_directory(self):
        session = ScriptedSession()
        run_watcher(session)

        assert session.watched == [os.path.dirname(TARGET)]

    def test_relative_target_is_normalized(self, tmp_path, monkeypatch):
        """A bare filename is watched in the current directory"""
        monkeypatch.chdir(tmp_path)
        target = os.path.abspath('notes.txt')
        session = ScriptedSession([event(target, Op.WRITE)])

        _, signals = run_watcher(session, filename='notes.txt')

        assert session.watched == [os.path.dirname(target)]
        assert signals == [True]

    def test_vim_style_save(self):
        """Swap file create is ignored, create of the target signals once"""
        session = ScriptedSession([
            event(SIBLING, Op.CREATE),
            event(SIBLING, Op.WRITE),
            event(SIBLING, Op.RENAME),
            event(TARGET, Op.CREATE),
        ])

        _, signals = run_watcher(session)

        assert signals == [True]

    def test_vscode_style_save(self):
        """Write signals once, the trailing chmod does not"""
        session = ScriptedSession([
            event(TARGET, Op.WRITE),
            event(TARGET, Op.CHMOD),
        ])

        _, signals = run_watcher(session)

        assert signals == [True]

    def test_one_signal_per_qualifying_event(self):
        """Qualifying events are not coalesced"""
        session = ScriptedSession([
            event(TARGET, Op.WRITE),
            event(TARGET, Op.CREATE),
            event(TARGET, Op.WRITE | Op.CREATE),
        ])

        _, signals = run_watcher(session)

        assert signals == [True, True, True]

    def test_non_change_ops_send_nothing(self):
        session = ScriptedSession([event(TARGET, op) for op in NON_CHANGE_OPS])

        _, signals = run_watcher(session)

        assert signals == []

    def test_stream_closed(self):
        """Events stream closing without any prior event ends the run"""
        session = ScriptedSession()

        exc, signals = run_watcher(session)

        assert isinstance(exc, StreamClosedError)
        assert 'something is weird with the file watcher' in str(exc)
        assert signals == []
        assert session.close_calls == 1

    def test_error_stream_value(self):
        """An error on the errors stream is wrapped and ends the run"""
        cause = OSError(5, 'Input/output error')
        session = ScriptedSession([
            event(TARGET, Op.WRITE),
            error(cause),
            event(TARGET, Op.WRITE),
        ])

        exc, signals = run_watcher(session)

        assert isinstance(exc, WatchRuntimeError)
        assert exc.__cause__ is cause
        assert signals == [True]
        assert session.close_calls == 1

    def test_error_stream_non_exception_value(self):
        """Values that are not exceptions are wrapped before chaining"""
        session = ScriptedSession([error('disk went away')])

        exc, _ = run_watcher(session)

        assert isinstance(exc, WatchRuntimeError)
        assert isinstance(exc.__cause__, RuntimeError)
        assert 'disk went away' in str(exc)
        assert session.close_calls == 1

    def test_error_stream_closed(self):
        session = ScriptedSession([Notification(ERRORS, closed=True)])

        exc, _ = run_watcher(session)

        assert isinstance(exc, ErrorStreamClosedError)
        assert 'around error handling' in str(exc)
        assert session.close_calls == 1

    def test_watch_failure_is_setup_error(self):
        """A failing directory registration still releases the session"""
        cause = PermissionError(13, 'Permission denied')
        session = ScriptedSession([event(TARGET, Op.WRITE)], watch_error=cause)

        exc, signals = run_watcher(session)

        assert isinstance(exc, WatchSetupError)
        assert exc.__cause__ is cause
        assert signals == []
        assert session.close_calls == 1

    def test_session_factory_failure_is_setup_error(self):
        def failing_factory():
            raise OSError(24, 'Too many open files')

        watcher = FileWatcher(TARGET, queue.Queue(), session_factory=failing_factory)

        with pytest.raises(WatchSetupError) as exc_info:
            watcher.run()
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_missing_directory_with_real_session(self, tmp_path):
        """Setup fails fast on a missing parent directory"""
        file_changes = queue.Queue()
        watcher = FileWatcher(str(tmp_path / 'missing' / 'file.txt'), file_changes)

        start = time.monotonic()
        with pytest.raises(WatchSetupError) as exc_info:
            watcher.run()

        assert time.monotonic() - start < 5
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert file_changes.empty()

    def test_send_blocks_until_consumer_drains(self):
        """A full channel suspends the loop instead of dropping signals"""
        file_changes = queue.Queue(maxsize=1)
        session = ScriptedSession([
            event(TARGET, Op.WRITE),
            event(TARGET, Op.WRITE),
        ])
        watcher = FileWatcher(TARGET, file_changes, session_factory=SessionFactory(session))
        errors = []

        def target():
            try:
                watcher.run()
            except StreamClosedError as e:
                errors.append(e)

        thread = threading.Thread(target=target, daemon=True)
        thread.start()
        time.sleep(0.2)

        # Second put is waiting for room
        assert thread.is_alive()
        assert file_changes.full()

        assert file_changes.get(timeout=1) is True
        assert file_changes.get(timeout=1) is True
        thread.join(timeout=5)

        assert not thread.is_alive()
        assert len(errors) == 1
        assert session.close_calls == 1
