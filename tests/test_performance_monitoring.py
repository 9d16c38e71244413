from flightview.performance_monitoring import PerformanceMonitor


def test_measure_time_records_metrics():
    monitor = PerformanceMonitor(enabled=True)
    with monitor.measure_time("Build panels"):
        sum(range(1000))
    metrics = monitor.get_metrics()["Build panels"]
    assert metrics["execution_time"] >= 0
    assert "memory_used" in metrics

    monitor.clear()
    assert monitor.get_metrics() == {}


def test_disabled_monitor_records_nothing():
    monitor = PerformanceMonitor(enabled=False)
    with monitor.measure_time("Build track"):
        pass
    assert monitor.get_metrics() == {}
