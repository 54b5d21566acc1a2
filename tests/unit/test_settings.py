"""Test settings loading, validation and queue fallback."""
import logging

import pytest

from science_rewards.batch_queue import SETTINGS_ERROR_TITLE, BatchQueue
from science_rewards.config import (
    DEFAULT_SETTINGS,
    RewardSettings,
    load_event_script,
    load_settings,
)
from science_rewards.protocols import MessageColor, MessageIcon


class TestLoadSettings:
    """YAML loader contract."""

    def test_load_valid_settings(self, write_settings):
        path = write_settings(funds=500, rep=2.5, queueLength=3, interval=0.5)

        settings = load_settings(path)

        assert settings.funds == 500.0
        assert settings.rep == 2.5
        assert settings.queue_length == 3
        assert settings.interval == 0.5

    def test_interval_defaults_to_one_second(self, write_settings):
        settings = load_settings(write_settings(funds=1, rep=1, queueLength=5))
        assert settings.interval == 1.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml")

    def test_empty_file(self, write_settings):
        with pytest.raises(ValueError, match="Empty settings file"):
            load_settings(write_settings(raw=""))

    def test_missing_settings_node(self, write_settings):
        with pytest.raises(ValueError, match="reward_settings"):
            load_settings(write_settings(raw="other: 1\n"))

    @pytest.mark.parametrize(
        "values",
        [
            {"rep": 1, "queueLength": 5},
            {"funds": 1000, "queueLength": 5},
            {"funds": 1000, "rep": 1},
            {"funds": "lots", "rep": 1, "queueLength": 5},
            {"funds": 1000, "rep": 1, "queueLength": 0},
            {"funds": 1000, "rep": 1, "queueLength": 2.5},
            {"funds": 1000, "rep": 1, "queueLength": 5, "interval": 0},
            {"funds": float("nan"), "rep": 1, "queueLength": 5},
        ],
    )
    def test_invalid_values(self, write_settings, values):
        with pytest.raises(ValueError, match="Invalid settings"):
            load_settings(write_settings(**values))

    def test_defaults(self):
        assert DEFAULT_SETTINGS.funds == 1000.0
        assert DEFAULT_SETTINGS.rep == 1.0
        assert DEFAULT_SETTINGS.queue_length == 5
        assert DEFAULT_SETTINGS.interval == 1.0

    def test_settings_accept_field_name_or_alias(self):
        by_alias = RewardSettings.from_dict({"funds": 1, "rep": 1, "queueLength": 7})
        by_name = RewardSettings(funds=1, rep=1, queue_length=7)

        assert by_alias == by_name


class TestQueueSettingsFallback:
    """BatchQueue never fails on bad settings."""

    def test_from_settings_file_applies_settings(self, write_settings, clock):
        path = write_settings(funds=250, rep=0.5, queueLength=2, interval=3.0)

        queue = BatchQueue.from_settings_file(path, clock=clock)

        assert queue.settings.funds == 250.0
        assert queue.settings.queue_length == 2
        assert queue.timer.interval == 3.0

    def test_missing_file_falls_back_and_notifies(self, tmp_path, inbox, clock, caplog):
        with caplog.at_level(logging.ERROR, logger="science_rewards.batch_queue"):
            queue = BatchQueue.from_settings_file(tmp_path / "missing.yaml", surface=inbox, clock=clock)

        assert queue.settings == DEFAULT_SETTINGS
        assert len(inbox.messages) == 1
        message = inbox.last
        assert message.title == SETTINGS_ERROR_TITLE
        assert message.color is MessageColor.RED
        assert message.icon is MessageIcon.ALERT
        assert "Error while loading reward settings" in caplog.text

    def test_error_notification_is_posted_once(self, write_settings, inbox, clock):
        bad = write_settings(raw="reward_settings: {funds: oops}\n")
        queue = BatchQueue.from_settings_file(bad, surface=inbox, clock=clock)

        queue.reload_settings(bad)
        queue.reload_settings(bad)

        assert len(inbox.messages) == 1

    def test_fallback_queue_still_works(self, tmp_path, ledger, inbox, clock):
        queue = BatchQueue.from_settings_file(
            tmp_path / "missing.yaml", ledger=ledger, surface=inbox, clock=clock
        )

        queue.submit(2.0, "Goo")

        assert ledger.funds == 2000.0
        assert len(queue) == 1

    def test_reload_recovers_after_fix(self, write_settings, inbox, clock):
        bad = write_settings(raw="reward_settings: {funds: oops}\n")
        queue = BatchQueue.from_settings_file(bad, surface=inbox, clock=clock)

        good = write_settings(name="fixed.yaml", funds=10, rep=1, queueLength=9)
        queue.reload_settings(good)

        assert queue.settings.queue_length == 9


class TestEventScript:
    """Replay script loading."""

    def test_events_sorted_by_time(self, tmp_path):
        path = tmp_path / "events.yaml"
        path.write_text(
            "events:\n"
            "  - {at: 2.0, science: 1, subject: Late}\n"
            "  - {at: 0.5, science: 2, subject: Early}\n"
            "  - {at: 2.0, science: 3, subject: Late Too}\n"
        )

        script = load_event_script(path)

        assert [e.subject for e in script.events] == ["Early", "Late", "Late Too"]
        assert script.duration == 2.0

    def test_empty_script(self, tmp_path):
        path = tmp_path / "events.yaml"
        path.write_text("")

        script = load_event_script(path)

        assert script.events == []
        assert script.duration == 0.0

    def test_missing_script(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_event_script(tmp_path / "none.yaml")

    def test_invalid_script(self, tmp_path):
        path = tmp_path / "events.yaml"
        path.write_text("events:\n  - {at: -1, science: 1, subject: Goo}\n")

        with pytest.raises(ValueError, match="Invalid event script"):
            load_event_script(path)
