from dymolw.driver import (
    PaperType,
    Roll,
    request_status_command,
    reset_command,
    roll_select_command,
    short_form_feed_command,
)
from dymolw.environment import JobStatus, MemoryPrintEnvironment
from dymolw.monitor import LabelWriterLanguageMonitor, StatusBit


class RecordingEnvironment(MemoryPrintEnvironment):
    def __init__(self, responses=()):
        self.history = []
        super().__init__(responses)

    @property
    def job_status(self):
        return self.history[-1]

    @job_status.setter
    def job_status(self, value):
        self.history.append(value)


def make_monitor(responses=(), timeout=10):
    env = RecordingEnvironment(responses)
    return env, LabelWriterLanguageMonitor(env, use_sleep=False, read_status_timeout=timeout)


def test_raw_top_of_form_byte_is_good_status(monkeypatch):
    monkeypatch.delenv("DEVICE_URI", raising=False)
    env, monitor = make_monitor([b"\x02"])
    monitor.end_page()
    assert monitor.last_status == 0x02
    assert monitor.last_status == StatusBit.TOF
    assert env.writes == [request_status_command()]
    assert env.job_status == JobStatus.OK


def test_is_local_without_uri(monkeypatch):
    monkeypatch.delenv("DEVICE_URI", raising=False)
    _, monitor = make_monitor()
    assert monitor.is_local() is True


def test_is_local_usb_and_network(monkeypatch):
    _, monitor = make_monitor()
    monkeypatch.setenv("DEVICE_URI", "usb://DYMO/LabelWriter")
    assert monitor.is_local() is True
    monkeypatch.setenv("DEVICE_URI", "socket://printer.example.com")
    assert monitor.is_local() is False


def test_start_doc_sends_reset_only_without_roll():
    env, monitor = make_monitor()
    monitor.start_doc()
    assert env.writes == [reset_command()]


def test_start_doc_selects_roll_once_set():
    env, monitor = make_monitor()
    monitor.roll = Roll.LEFT
    assert monitor.roll_used is True
    monitor.start_doc()
    assert env.writes == [reset_command(), roll_select_command(Roll.LEFT)]


def test_process_data_accumulates():
    _, monitor = make_monitor()
    monitor.process_data(b"ab")
    monitor.process_data(b"cd")
    assert bytes(monitor.page_data) == b"abcd"


def test_good_status_clears_page_data(monkeypatch):
    monkeypatch.delenv("DEVICE_URI", raising=False)
    env, monitor = make_monitor([bytes([StatusBit.TOF])])
    monitor.process_data(b"label")
    monitor.end_page()
    assert env.writes == [request_status_command()]
    assert monitor.page_data == bytearray()
    assert env.job_status == JobStatus.OK


def test_remote_printer_is_not_queried(monkeypatch):
    monkeypatch.setenv("DEVICE_URI", "socket://printer.example.com")
    env, monitor = make_monitor([bytes([StatusBit.ERROR])])
    monitor.end_page()
    assert env.writes == []
    assert env.job_status == JobStatus.OK


def test_only_first_start_page_checks_status(monkeypatch):
    monkeypatch.delenv("DEVICE_URI", raising=False)
    env, monitor = make_monitor(timeout=0)
    monitor.start_page()
    monitor.start_page()
    assert env.writes == [request_status_command()]


def test_continuous_paper_implies_top_of_form(monkeypatch):
    monkeypatch.delenv("DEVICE_URI", raising=False)
    env, monitor = make_monitor([b"\x00"])
    monitor.paper_type = PaperType.CONTINUOUS
    monitor.end_page()
    assert env.writes == [request_status_command()]
    assert monitor.last_status & StatusBit.TOF


def test_error_triggers_reprint(monkeypatch):
    monkeypatch.delenv("DEVICE_URI", raising=False)
    responses = [bytes([StatusBit.ERROR]), bytes([StatusBit.TOF]), bytes([StatusBit.TOF])]
    env, monitor = make_monitor(responses)
    monitor.process_data(b"label")
    monitor.end_page()
    assert env.writes == [
        request_status_command(),
        request_status_command(),
        short_form_feed_command(),
        b"label",
        request_status_command(),
    ]
    assert JobStatus.ERROR in env.history
    assert env.job_status == JobStatus.OK
    assert monitor.page_data == bytearray()


def test_paper_out_reported(monkeypatch):
    monkeypatch.delenv("DEVICE_URI", raising=False)
    out = StatusBit.ERROR | StatusBit.PAPER_OUT
    responses = [bytes([out]), bytes([StatusBit.TOF]), bytes([StatusBit.TOF])]
    env, monitor = make_monitor(responses)
    monitor.end_page()
    assert JobStatus.PAPER_OUT in env.history
    assert env.job_status == JobStatus.OK


def test_roll_change_reprints_without_form_feed(monkeypatch):
    monkeypatch.delenv("DEVICE_URI", raising=False)
    responses = [
        bytes([StatusBit.ROLL_CHANGED]),
        bytes([StatusBit.ROLL_CHANGED | StatusBit.TOF]),
        bytes([StatusBit.TOF]),
    ]
    env, monitor = make_monitor(responses)
    monitor.process_data(b"label")
    monitor.end_page()
    assert env.writes == [
        request_status_command(),
        request_status_command(),
        b"label",
        request_status_command(),
    ]
    assert short_form_feed_command() not in env.writes