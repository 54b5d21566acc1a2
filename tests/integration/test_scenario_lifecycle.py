"""Integration tests for RewardScenario driven through the host doubles.

Covers the host lifecycle end to end: subscribe, load settings and backlog,
receive events, tick, save, reload, unsubscribe.
"""

import pytest

from science_rewards.batch_queue import REPORT_TITLE, SETTINGS_ERROR_TITLE
from science_rewards.host import NotificationInbox
from science_rewards.persistence import QUEUE_NODE, SaveFileStore
from science_rewards.scenario import RewardScenario


@pytest.fixture
def settings_path(write_settings):
    return write_settings(funds=1000, rep=1, queueLength=5, interval=1.0)


@pytest.fixture
def make_scenario(bus, ledger, inbox, clock, settings_path):
    def _make(path=None):
        return RewardScenario(bus, ledger, inbox, path or settings_path, clock=clock)

    return _make


@pytest.fixture
def scenario(make_scenario):
    scenario = make_scenario()
    scenario.on_awake()
    scenario.on_load({})
    return scenario


class TestSubscription:
    """Event source registration."""

    def test_awake_subscribes_once(self, make_scenario, bus):
        scenario = make_scenario()

        scenario.on_awake()
        scenario.on_awake()

        assert bus.handler_count == 1

    def test_events_reach_the_queue(self, scenario, bus, ledger):
        bus.emit(2.0, "Mystery Goo")

        assert ledger.funds == 2000.0
        assert ledger.reputation == 2.0
        assert [r.subject for r in scenario.queue.backlog] == ["Mystery Goo"]

    def test_destroy_unsubscribes(self, scenario, bus):
        scenario.on_destroy()
        bus.emit(2.0, "Ignored")

        assert bus.handler_count == 0
        assert len(scenario.queue) == 0

    def test_destroy_tolerates_missing_handler(self, scenario, bus):
        bus.unsubscribe(scenario.on_science_received)

        scenario.on_destroy()
        scenario.on_destroy()

        assert bus.handler_count == 0


class TestLifecycle:
    """Load, tick and save through a host session."""

    def test_overflow_batch_is_notified_after_quiet_interval(self, scenario, bus, inbox, clock):
        for i in range(6):
            bus.emit(1.0, f"Report {i}")
            clock.advance(0.2)
            scenario.update()

        assert inbox.messages == []

        clock.advance(1.0)
        assert scenario.update() is True

        assert len(inbox.messages) == 1
        assert inbox.last.title == REPORT_TITLE
        assert "Total: 6000 funds, 6 reputation." in inbox.last.body
        assert len(scenario.queue) == 0

    def test_bad_settings_fall_back_to_defaults(self, make_scenario, write_settings, bus, ledger, inbox):
        scenario = make_scenario(write_settings(name="bad.yaml", raw="reward_settings: []\n"))
        scenario.on_awake()
        scenario.on_load({})

        bus.emit(3.0, "Goo")

        assert inbox.last.title == SETTINGS_ERROR_TITLE
        assert ledger.funds == 3000.0
        assert ledger.reputation == 3.0

    def test_backlog_survives_save_and_reload(self, scenario, make_scenario, bus, tmp_path):
        store = SaveFileStore(tmp_path / "persistent.json")
        bus.emit(1.0, "A")
        bus.emit(2.0, "B")
        bus.emit(3.0, "C")

        scenario.save_to_store(store)
        scenario.on_destroy()

        restored = make_scenario()
        restored.on_awake()
        node = restored.load_from_store(store)

        assert [r.subject for r in restored.queue.backlog] == ["A", "B", "C"]
        assert restored.queue.backlog == scenario.queue.backlog
        assert len(node[QUEUE_NODE]) == 3

    def test_restored_backlog_joins_next_batch(self, scenario, make_scenario, bus, inbox, clock, tmp_path):
        store = SaveFileStore(tmp_path / "persistent.json")
        for i in range(4):
            bus.emit(1.0, f"Before {i}")
        scenario.save_to_store(store)
        scenario.on_destroy()

        restored = make_scenario()
        restored.on_awake()
        restored.load_from_store(store)
        bus.emit(1.0, "After 0")
        bus.emit(1.0, "After 1")

        clock.advance(1.1)
        restored.update()

        assert len(inbox.messages) == 1
        body = inbox.last.body
        assert body.index("Before 0") < body.index("Before 3") < body.index("After 1")

    def test_corrupt_save_file_starts_empty(self, make_scenario, tmp_path):
        path = tmp_path / "persistent.json"
        path.write_text("{broken")

        scenario = make_scenario()
        node = scenario.load_from_store(SaveFileStore(path))

        assert len(scenario.queue) == 0
        assert node == {QUEUE_NODE: []}

    def test_on_save_writes_container(self, scenario, bus):
        bus.emit(1.0, "Goo")
        node = {}

        scenario.on_save(node)

        assert node == {QUEUE_NODE: [{"funds": 1000.0, "rep": 1.0, "subject": "Goo"}]}

    def test_surface_failure_keeps_batch_for_next_update(self, bus, ledger, clock, settings_path):
        class RefusingSurface(NotificationInbox):
            refusing = True

            def post(self, notification):
                if self.refusing:
                    raise RuntimeError("surface unavailable")
                super().post(notification)

        surface = RefusingSurface()
        scenario = RewardScenario(bus, ledger, surface, settings_path, clock=clock)
        scenario.on_awake()
        scenario.on_load({})
        for i in range(6):
            bus.emit(1.0, f"Report {i}")

        clock.advance(1.1)
        assert scenario.update() is True
        assert len(scenario.queue) == 6

        surface.refusing = False
        bus.emit(1.0, "Report 6")
        clock.advance(1.1)
        scenario.update()

        assert len(surface.messages) == 1
        assert surface.last.body.count(" * Report") == 7
        assert len(scenario.queue) == 0
