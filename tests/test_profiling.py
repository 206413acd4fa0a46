import logging

import pytest

from physna_tui.core import profiling


@pytest.fixture
def enabled():
    profiling.set_profiling_enabled(True)
    profiling.clear_profiling_data()
    yield
    profiling.set_profiling_enabled(False)
    profiling.clear_profiling_data()


def test_disabled_records_nothing():
    profiling.set_profiling_enabled(False)
    profiling.clear_profiling_data()
    with profiling.profile_operation("list_folders"):
        pass
    assert profiling.get_profiling_data() == {}
    assert profiling.get_operation_stats("list_folders") is None


def test_operation_stats(enabled):
    for _ in range(3):
        with profiling.profile_operation("list_folders"):
            pass
    stats = profiling.get_operation_stats("list_folders")
    assert stats["count"] == 3
    assert stats["min_ms"] <= stats["avg_ms"] <= stats["max_ms"]


def test_slow_operation_logged(enabled, caplog):
    with caplog.at_level(logging.WARNING, logger="physna_tui.core.profiling"):
        with profiling.profile_operation("submit_search", threshold_ms=-1.0):
            pass
    assert "Slow operation: submit_search" in caplog.text


def test_profile_method_keeps_result_and_name(enabled):
    @profiling.profile_method("establish_session")
    def connect(tenant):
        return f"session:{tenant}"

    assert connect("acme") == "session:acme"
    assert connect.__name__ == "connect"
    assert "establish_session" in profiling.get_profiling_data()


def test_profile_method_records_failures(enabled):
    @profiling.profile_method()
    def broken():
        raise RuntimeError("nope")

    with pytest.raises(RuntimeError):
        broken()
    assert any(name.endswith("broken") for name in profiling.get_profiling_data())
