"""Tests for the launcher session state machine."""

import pytest

from cla import CHAR_LIMIT, Entry, Event, LauncherSession, Phase, StorageError
from conftest import make_config, seed


def type_text(session, text):
    for ch in text:
        session.handle(Event.INSERT, ch)


@pytest.fixture
def session_for(store, data_path):
    def build(*commands, **config):
        if commands:
            seed(store, *commands)
        return LauncherSession(store, make_config(data_path, **config))
    return build


class TestStart:
    def test_first_run_has_one_empty_focused_entry(self, session_for, data_path):
        s = session_for()
        assert s.commands.entries == [Entry(0, "")]
        assert s.focus == 0
        assert s.phase is Phase.EDITING
        assert data_path.exists()

    def test_buffers_follow_loaded_text(self, session_for):
        s = session_for("ls", "pwd")
        assert [b.text for b in s.buffers] == ["ls", "pwd"]

    def test_malformed_file_raises(self, store, data_path):
        data_path.parent.mkdir(parents=True)
        data_path.write_text('{"oops": 1}')
        with pytest.raises(StorageError):
            LauncherSession(store, make_config(data_path))


class TestQuit:
    def test_quit_persists_nothing(self, session_for, store):
        s = session_for("ls")
        type_text(s, " -la")
        s.handle(Event.QUIT)
        assert s.phase is Phase.EXITING
        assert s.result is None
        assert store.load().commands == ["ls"]

    def test_events_after_quit_are_ignored(self, session_for, store):
        s = session_for("ls")
        s.handle(Event.QUIT)
        s.handle(Event.ADD)
        s.handle(Event.EXECUTE)
        assert s.phase is Phase.EXITING
        assert len(store.load()) == 1


class TestEditing:
    def test_keystrokes_go_to_focused_entry(self, session_for):
        s = session_for("ls", "pwd")
        s.handle(Event.NEXT)
        type_text(s, " -P")
        assert s.commands.commands == ["ls", "pwd -P"]
        assert s.focus == 1

    def test_keystrokes_do_not_persist(self, session_for, store):
        s = session_for("ls")
        type_text(s, "x")
        assert store.load().commands == ["ls"]

    def test_cursor_keys(self, session_for):
        s = session_for("gt status")
        s.handle(Event.HOME)
        s.handle(Event.RIGHT)
        s.handle(Event.INSERT, "i")
        s.handle(Event.END)
        s.handle(Event.BACKSPACE)
        assert s.commands.commands == ["git statu"]

    def test_long_command_cut_to_char_limit_on_load(self, session_for):
        s = session_for("x" * (CHAR_LIMIT + 51))
        assert s.commands.commands == ["x" * CHAR_LIMIT]
        assert s.buffer(0).text == s.commands.entries[0].command

    def test_execute_untouched_long_entry_matches_display(self, session_for):
        s = session_for("y" * (CHAR_LIMIT + 1))
        s.handle(Event.EXECUTE)
        assert s.result == "y" * CHAR_LIMIT

    def test_cursor_keys_leave_other_text_alone(self, session_for, store):
        s = session_for("ls -la")
        for event in (Event.HOME, Event.RIGHT, Event.LEFT, Event.END):
            s.handle(event)
        assert s.commands.commands == ["ls -la"]
        s.handle(Event.SAVE)
        assert store.load().commands == ["ls -la"]

    def test_edit_with_no_focus_is_ignored(self, session_for):
        s = session_for("a")
        s.handle(Event.DELETE)
        s.handle(Event.INSERT, "x")
        assert len(s.commands) == 0


class TestNavigation:
    def test_wraparound(self, session_for):
        s = session_for("a", "b", "c")
        s.handle(Event.PREV)
        assert s.focus == 2
        s.handle(Event.NEXT)
        assert s.focus == 0

    def test_navigation_does_not_persist(self, session_for, store):
        s = session_for("a", "b")
        type_text(s, "1")
        s.handle(Event.NEXT)
        assert store.load().commands == ["a", "b"]


class TestSave:
    def test_save_writes_all_current_text(self, session_for, store):
        s = session_for("ls", "pwd")
        type_text(s, " -la")
        s.handle(Event.NEXT)
        type_text(s, " -P")
        msg = s.handle(Event.SAVE)
        assert msg
        assert store.load().entries == [Entry(0, "ls -la"), Entry(1, "pwd -P")]

    def test_save_does_not_move_focus(self, session_for):
        s = session_for("a", "b")
        s.handle(Event.SAVE)
        assert s.focus == 0


class TestAdd:
    def test_add_persists_empty_entry(self, session_for, store):
        s = session_for("ls")
        s.handle(Event.ADD)
        assert s.commands.commands == ["ls", ""]
        assert store.load().entries == [Entry(0, "ls"), Entry(1, "")]

    def test_add_does_not_persist_unsaved_edits(self, session_for, store):
        s = session_for("ls")
        type_text(s, " -la")
        s.handle(Event.ADD)
        assert store.load().commands == ["ls", ""]
        # the in-memory edit survives
        assert s.commands.commands == ["ls -la", ""]

    def test_add_respects_limit(self, session_for, store):
        s = session_for("a", "b", limit_line=2)
        msg = s.handle(Event.ADD)
        assert "limit" in msg.lower()
        assert len(s.commands) == 2
        assert len(store.load()) == 2

    def test_add_twice_with_limit_one(self, session_for, store, data_path):
        data_path.parent.mkdir(parents=True)
        data_path.write_text("[]")
        s = session_for(limit_line=1)
        assert len(s.commands) == 0
        s.handle(Event.ADD)
        s.handle(Event.ADD)
        assert len(s.commands) == 1
        assert len(store.load()) == 1
        assert s.focus == 0

    def test_add_keeps_focus(self, session_for):
        s = session_for("a", "b")
        s.handle(Event.NEXT)
        s.handle(Event.ADD)
        assert s.focus == 1


class TestDelete:
    def test_delete_first_then_reload(self, session_for, store):
        s = session_for("ls", "pwd")
        s.handle(Event.DELETE)
        assert s.commands.entries == [Entry(0, "pwd")]
        assert store.load().entries == [Entry(0, "pwd")]
        s.handle(Event.SAVE)
        assert store.load().entries == s.commands.entries

    def test_delete_uses_stored_text_for_others(self, session_for, store):
        s = session_for("a", "b", "c")
        type_text(s, "!")
        s.handle(Event.NEXT)
        s.handle(Event.DELETE)
        assert store.load().commands == ["a", "c"]
        assert s.commands.commands == ["a!", "c"]

    def test_delete_last_clamps_focus(self, session_for):
        s = session_for("a", "b", "c")
        s.handle(Event.PREV)
        s.handle(Event.DELETE)
        assert s.focus == 1
        assert s.commands.focused.command == "b"

    def test_delete_middle_keeps_index(self, session_for):
        s = session_for("a", "b", "c")
        s.handle(Event.NEXT)
        s.handle(Event.DELETE)
        assert s.focus == 1
        assert s.commands.focused.command == "c"
        assert [e.position for e in s.commands] == [0, 1]

    def test_delete_only_entry_leaves_no_focus(self, session_for, store):
        s = session_for("a")
        s.handle(Event.DELETE)
        assert s.focus is None
        assert s.buffers == []
        assert len(store.load()) == 0
        assert s.handle(Event.DELETE) is None
        s.handle(Event.EXECUTE)
        assert s.phase is Phase.EDITING

    def test_add_after_emptying(self, session_for, store):
        s = session_for("a")
        s.handle(Event.DELETE)
        s.handle(Event.ADD)
        type_text(s, "uptime")
        assert s.focus == 0
        s.handle(Event.SAVE)
        assert store.load().entries == [Entry(0, "uptime")]


class TestExecute:
    def test_execute_returns_edited_focused_text(self, session_for, store):
        s = session_for("ls", "pwd", "date")
        type_text(s, " -la")
        s.handle(Event.NEXT)
        s.handle(Event.BACKSPACE)
        s.handle(Event.INSERT, "d -P")
        s.handle(Event.EXECUTE)
        assert s.phase is Phase.EXECUTING
        assert s.result == "pwd -P"
        assert store.load().commands == ["ls", "pwd", "date"]

    def test_execute_empty_entry(self, session_for):
        s = session_for()
        s.handle(Event.EXECUTE)
        assert s.phase is Phase.EXECUTING
        assert s.result == ""


class TestStorageFailure:
    def test_save_failure_propagates(self, session_for, data_path, monkeypatch):
        s = session_for("ls")

        def boom(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr("cla.tempfile.mkstemp", boom)
        with pytest.raises(StorageError) as exc:
            s.handle(Event.SAVE)
        assert exc.value.kind == "io"
        assert s.phase is Phase.EDITING
