import re
import time

from workbench.corelog.stopwatch import ScopedTimer, Stopwatch


class RecordingLogger:
    def __init__(self):
        self.records = []

    def log(self, message, source_class):
        self.records.append((message, source_class))


def test_unstarted_stopwatch_is_zero():
    watch = Stopwatch()
    assert watch.elapsed_seconds == 0.0
    assert watch.elapsed_milliseconds == 0


def test_measures_sleep():
    watch = Stopwatch()
    watch.start()
    time.sleep(0.02)
    watch.stop()
    assert watch.elapsed_seconds >= 0.02
    assert watch.elapsed_milliseconds >= 20


def test_stopped_value_is_frozen():
    watch = Stopwatch()
    watch.start()
    watch.stop()
    first = watch.elapsed_seconds
    time.sleep(0.01)
    assert watch.elapsed_seconds == first


def test_running_value_grows():
    watch = Stopwatch()
    watch.start()
    first = watch.elapsed_seconds
    time.sleep(0.01)
    assert watch.running is True
    assert watch.elapsed_seconds > first


def test_scoped_timer_logs_once():
    logger = RecordingLogger()
    with ScopedTimer(logger, "PerformanceTest", "block"):
        time.sleep(0.005)
    assert len(logger.records) == 1
    message, source = logger.records[0]
    assert source == "PerformanceTest"
    match = re.fullmatch(r"block executed in (\d+)ms\.", message)
    assert match is not None
    assert int(match.group(1)) >= 5


def test_scoped_timer_without_logger_stops():
    timer = ScopedTimer(None, "X", "y")
    with timer:
        pass
    assert timer.stopwatch.running is False


def test_scoped_timer_logs_on_exception():
    logger = RecordingLogger()
    try:
        with ScopedTimer(logger, "Src", "failing"):
            raise ValueError("boom")
    except ValueError:
        pass
    assert logger.records[0][0].startswith("failing executed in ")