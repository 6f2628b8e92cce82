"""
HUD counter and FPS readout.
"""
import threading

from hud import FpsCounter, HudCounter


class TestHudCounter:
    def test_increment_and_decrement(self):
        counter = HudCounter()
        counter.increment()
        counter.increment()
        assert counter.decrement() == 1
        assert counter.value == 1

    def test_never_below_zero(self):
        counter = HudCounter()
        assert counter.decrement() == 0
        assert counter.update(-10) == 0
        assert HudCounter(-3).value == 0

    def test_is_callable_source(self):
        counter = HudCounter(5)
        assert counter() == 5

    def test_subscribers_see_changes(self):
        counter = HudCounter()
        seen = []
        unsubscribe = counter.subscribe(seen.append)
        counter.update(3)
        unsubscribe()
        counter.update(1)
        assert seen == [3]

    def test_concurrent_updates(self):
        counter = HudCounter()

        def bump():
            for _ in range(1000):
                counter.increment()

        threads = [threading.Thread(target=bump) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert counter.value == 4000


class TestFpsCounter:
    def test_placeholder_before_first_report(self):
        fps = FpsCounter()
        assert fps.tick(0.0) is None
        assert fps.label == "—"

    def test_reports_once_per_second(self):
        fps = FpsCounter()
        fps.start(0.0)
        reports = [fps.tick(i * 1000 / 60) for i in range(1, 61)]
        assert [r for r in reports if r is not None] == [60]
        assert fps.label == "60 fps"

    def test_first_frame_counts(self):
        fps = FpsCounter()
        fps.start(0.0)
        assert fps.tick(0.0) is None
        assert fps.frames == 1
        assert fps.tick(1000.0) == 2

    def test_counter_resets_after_report(self):
        fps = FpsCounter()
        fps.start(0.0)
        for i in range(1, 31):
            fps.tick(i * 1000 / 30)
        assert fps.frames == 0
        assert fps.fps == 30
