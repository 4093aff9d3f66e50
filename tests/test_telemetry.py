from telemetry import TelemetryMonitor


def test_empty_summary() -> None:
    stats = TelemetryMonitor().summarize()

    assert (stats.p50_ms, stats.p95_ms, stats.max_ms) == (0.0, 0.0, 0.0)


def test_samples_are_bounded() -> None:
    monitor = TelemetryMonitor(max_samples=3)
    for value in (1.0, 2.0, 3.0, 4.0, 5.0):
        monitor.record_latency_ms(value)

    stats = monitor.summarize()

    assert list(monitor.latency_samples_ms) == [3.0, 4.0, 5.0]
    assert stats.p50_ms == 4.0
    assert stats.max_ms == 5.0


def test_frame_counters_and_snapshot() -> None:
    monitor = TelemetryMonitor()
    monitor.record_frame(2.0)
    monitor.record_frame(4.0, valid=False)

    snapshot = monitor.snapshot(outliers=3)

    assert snapshot.frames == 2
    assert snapshot.invalid_frames == 1
    assert snapshot.outliers == 3
    assert snapshot.to_dict()["latency_max_ms"] == 4.0

    monitor.reset()
    assert monitor.frames == 0
    assert monitor.summarize().max_ms == 0.0
