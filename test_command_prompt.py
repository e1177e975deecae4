from types import SimpleNamespace

from command_prompt import CommandPrompt


class RecordingSession:
    def __init__(self, anchor=(2, 1)):
        self.selection = SimpleNamespace(anchor=anchor, focus=anchor)
        self.calls = []

    def __getattr__(self, name):
        def record(*args):
            self.calls.append((name,) + args)
            return True

        return record


def _run(line, anchor=(2, 1)):
    session = RecordingSession(anchor)
    messages = []
    prompt = CommandPrompt(session, lambda msg, _=None: messages.append(msg))
    result = prompt.execute(line)
    return session.calls, messages, result


def test_row_and_column_commands_use_anchor():
    assert _run("ir")[0] == [("insert_row", 2)]
    assert _run("irb")[0] == [("insert_row", 3)]
    assert _run("dr")[0] == [("delete_row", 2)]
    assert _run("ic")[0] == [("insert_column", 1)]
    assert _run("ica")[0] == [("insert_column", 2)]
    assert _run("dc")[0] == [("delete_column", 1)]


def test_sort_and_accept_commands():
    assert _run("sa")[0] == [("sort_column", 1, True)]
    assert _run("sd")[0] == [("sort_column", 1, False)]
    assert _run("ac")[0] == [("accept_cell", 2, 1)]
    assert _run("ar")[0] == [("accept_row", 2)]


def test_diff_and_settings_commands():
    assert _run("diff 'old file.tsv'")[0] == [("enter_diff_mode", "old file.tsv")]
    assert _run("nodiff")[0] == [("exit_diff_mode",)]
    assert _run("header")[0] == [("toggle_setting", "treat_first_row_as_header")]
    assert _run("index")[0] == [("toggle_setting", "add_serial_index")]
    assert _run("w")[0] == [("save",)]


def test_bad_commands_report_status():
    calls, messages, result = _run("frobnicate")
    assert calls == [] and result is False
    assert messages == ["Unknown command: frobnicate"]

    calls, messages, _ = _run("diff")
    assert calls == []
    assert messages[0].startswith("Usage")

    calls, messages, _ = _run("dr", anchor=None)
    assert calls == []
    assert messages == ["Select a cell first"]


def test_insert_without_selection_uses_origin():
    assert _run("ir", anchor=None)[0] == [("insert_row", 0)]


def test_typing_then_enter_executes():
    session = RecordingSession()
    prompt = CommandPrompt(session, lambda *_: None)
    prompt.start()
    for ch in "sd":
        prompt.handle_key(ord(ch))
    prompt.handle_key(10)
    assert not prompt.active
    assert session.calls == [("sort_column", 1, False)]


def test_escape_cancels():
    session = RecordingSession()
    prompt = CommandPrompt(session, lambda *_: None)
    prompt.start()
    prompt.handle_key(ord("w"))
    prompt.handle_key(27)
    assert not prompt.active
    assert prompt.buffer == ""
    assert session.calls == []
