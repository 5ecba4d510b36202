from unittest.mock import MagicMock

import pytest

from conftest import make_transport, sent_lines
from genesis2000 import (
    ConnectionClosedError,
    DumpFileError,
    EnvironmentConfigError,
    GenesisSession,
    InfoRequest,
    TransportError,
)


class DumpWritingTransport:
    """Stub host that writes an info dump whenever it receives a COM info request."""

    encoding = "utf-8"

    def __init__(self, path, dumps):
        self.path = path
        self._dumps = list(dumps)
        self._replies = []
        self.sent = []
        self.closed = False

    def write(self, data):
        line = data.decode("utf-8")
        self.sent.append(line)
        if line.startswith("@%#%@COM info,"):
            self.path.write_text(self._dumps.pop(0))
        self._replies.extend(["0", ""])

    def read_line(self):
        return self._replies.pop(0)

    def close(self):
        self.closed = True


def test_fields_empty_before_any_command():
    session = GenesisSession(make_transport())
    state = session.state
    assert (state.status, state.read_answer, state.command_answer, state.mouse_answer, state.pause_answer) == (
        "",
        "",
        "",
        "",
        "",
    )
    assert session.single_values == {} and session.array_values == {}


def test_com_sets_status_and_answers_only():
    transport = make_transport("0", "top bottom")
    session = GenesisSession(transport)
    assert session.com("get_affect_layer") == "top bottom"
    assert session.status == "0"
    assert session.read_answer == "top bottom"
    assert session.command_answer == "top bottom"
    assert session.mouse_answer == ""
    assert session.pause_answer == ""
    assert sent_lines(transport) == ["@%#%@COM get_affect_layer"]


def test_mouse_then_com_clears_mouse_answer():
    transport = make_transport("0", "", "1.5 2.25", "0", "done")
    session = GenesisSession(transport)
    assert session.mouse("p Select a point on the screen") == "1.5 2.25"
    session.com("clear_highlight")
    assert session.mouse_answer == ""
    assert session.command_answer == "done"


def test_pause_consumes_three_lines_and_leaves_the_fourth():
    transport = make_transport("0", "", "continue", "7", "next")
    session = GenesisSession(transport)
    assert session.pause("Check the drill layer") == "continue"
    assert (session.status, session.read_answer) == ("0", "")
    session.com("editor_page_close")
    assert session.status == "7"
    assert session.read_answer == "next"


def test_toggle_commands_read_nothing():
    transport = make_transport("0", "ok")
    session = GenesisSession(transport)
    session.von()
    session.vof()
    session.su_on()
    session.su_off()
    assert session.com("noop") == "ok"
    assert sent_lines(transport) == [
        "@%#%@VON ",
        "@%#%@VOF ",
        "@%#%@SU_ON ",
        "@%#%@SU_OFF ",
        "@%#%@COM noop",
    ]


def test_aux_fills_command_answer():
    transport = make_transport("0", "aux-answer")
    session = GenesisSession(transport)
    assert session.aux("set_subsystem,name=Analysis") == "aux-answer"
    assert session.status == "0"


def test_transport_failure_breaks_session():
    session = GenesisSession(make_transport("0"))
    with pytest.raises(ConnectionClosedError):
        session.com("get_job_path")
    with pytest.raises(TransportError):
        session.com("get_job_path")


def test_info_loads_dump_and_deletes_file(genesis_dir, info_config):
    dump_path = genesis_dir / "share" / "tmp" / "info_csh.4242"
    transport = DumpWritingTransport(
        dump_path,
        ["set gNUM_ROWS = '30'\nset gCOLcol = ('1' '2' '3')\nset gATTRname = ()\n"],
    )
    session = GenesisSession(transport, info_config=info_config)

    result = session.info(entity_type="matrix", entity_path="job1/matrix")

    assert result.status == "0"
    assert session.single_values == {"gNUM_ROWS": "30"}
    assert session.array_values == {"gCOLcol": ["1", "2", "3"], "gATTRname": []}
    assert session.get_info_single_value("gNUM_ROWS") == "30"
    assert session.get_info_array_value("gATTRname") == []
    assert session.get_info_single_value("gMISSING") is None
    assert not dump_path.exists()
    assert transport.sent == [
        f"@%#%@COM info,out_file={dump_path},write_mode=replace,units=mm,"
        "args=-t matrix -e job1/matrix -m script\n"
    ]


def test_info_replaces_previous_results(genesis_dir, info_config):
    dump_path = genesis_dir / "share" / "tmp" / "info_csh.4242"
    transport = DumpWritingTransport(
        dump_path,
        [
            "set gA = '1'\nset gLIST = ('x')\n",
            "set gB = '2'\n",
        ],
    )
    session = GenesisSession(transport, info_config=info_config)
    first = session.info(InfoRequest(entity_type="job"))
    session.info(InfoRequest(entity_type="step"))
    assert session.single_values == {"gB": "2"}
    assert session.array_values == {}
    assert first.dump.single_values == {"gA": "1"}


def test_next_command_clears_info_results(genesis_dir, info_config):
    dump_path = genesis_dir / "share" / "tmp" / "info_csh.4242"
    transport = DumpWritingTransport(dump_path, ["set gA = '1'\n"])
    session = GenesisSession(transport, info_config=info_config)
    session.info(entity_type="job")
    session.com("get_user_name")
    assert session.single_values == {}


def test_info_without_base_dir_sends_nothing():
    transport = make_transport()
    session = GenesisSession(transport)
    with pytest.raises(EnvironmentConfigError):
        session.info(entity_type="matrix")
    assert sent_lines(transport) == []


def test_info_missing_dump_is_fatal(info_config):
    session = GenesisSession(make_transport("0", ""), info_config=info_config)
    with pytest.raises(DumpFileError):
        session.info(entity_type="matrix")


def test_info_rejects_request_and_keywords_together(info_config):
    session = GenesisSession(make_transport(), info_config=info_config)
    with pytest.raises(TypeError):
        session.info(InfoRequest(), entity_type="matrix")


def test_format_info_values(genesis_dir, info_config):
    dump_path = genesis_dir / "share" / "tmp" / "info_csh.4242"
    transport = DumpWritingTransport(dump_path, ["set gNUM_ROWS = '30'\nset gCOLcol = ('1' '2')\n"])
    session = GenesisSession(transport, info_config=info_config)
    session.info(entity_type="matrix")
    assert session.format_info_values().splitlines() == [
        "gNUM_ROWS => 30",
        "gCOLcol => ['1', '2']",
    ]


def test_close_sends_closedown_once_when_interactive():
    transport = make_transport()
    session = GenesisSession(transport, interactive=True)
    with session:
        session.von()
    session.close()
    assert sent_lines(transport) == ["@%#%@VON ", "@%#%@CLOSEDOWN "]
    assert transport.closed


def test_close_sends_closedown_on_error_exit():
    transport = make_transport()
    with pytest.raises(RuntimeError):
        with GenesisSession(transport, interactive=True):
            raise RuntimeError("script failed")
    assert sent_lines(transport) == ["@%#%@CLOSEDOWN "]


def test_close_skips_closedown_in_pipe_mode():
    transport = make_transport()
    with GenesisSession(transport, interactive=False):
        pass
    assert sent_lines(transport) == []
    assert transport.closed


def test_close_still_releases_transport_when_closedown_fails():
    transport = MagicMock()
    transport.encoding = "utf-8"
    transport.write.side_effect = TransportError("broken pipe")
    session = GenesisSession(transport, interactive=True)
    session.close()
    transport.close.assert_called_once()


def test_commands_after_close_raise():
    session = GenesisSession(make_transport())
    session.close()
    with pytest.raises(TransportError):
        session.von()
