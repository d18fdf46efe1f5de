import config
import main


class RecordingScheduler:
    def __init__(self, calls, running=True):
        self.calls = calls
        self.running = running

    def shutdown(self, wait=True):
        self.calls.append(("scheduler.shutdown", wait))
        self.running = False


def test_shutdown_waits_for_scheduler_before_closing_pool(monkeypatch):
    calls = []
    monkeypatch.setattr(config, "STORAGE_BACKEND", "postgres")
    monkeypatch.setattr(main, "_close_database", lambda: calls.append("close_pool"))

    main.shutdown(RecordingScheduler(calls))
    assert calls == [("scheduler.shutdown", True), "close_pool"]


def test_shutdown_skips_stopped_scheduler_and_memory_backend(monkeypatch):
    calls = []
    monkeypatch.setattr(config, "STORAGE_BACKEND", "memory")
    monkeypatch.setattr(main, "_close_database", lambda: calls.append("close_pool"))

    main.shutdown(RecordingScheduler(calls, running=False))
    main.shutdown(None)
    assert calls == []
