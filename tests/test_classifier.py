"""Threaded-reply classification."""

import logging

import pytest

from conftest import fixture_json
from slack_thread_relay.classifier import ThreadReference, classify, find_threaded_message
from slack_thread_relay.log import EventLogger
from slack_thread_relay.models.events import OtherEvent
from slack_thread_relay.transport.envelope import decode_callback_event, decode_payload


def load_fixture(name: str):
    return decode_payload(fixture_json(name)["payload"])


def classify_raw(raw: dict):
    return classify(decode_callback_event(raw))


class TestScenarios:
    def test_threaded_plain_message(self):
        event = {"type": "message", "channel": "C1", "ts": "1.1", "thread_ts": "0.1"}
        assert classify_raw(event) == ("C1", "1.1")

    def test_plain_message_without_thread(self):
        assert classify_raw({"type": "message", "channel": "C1", "ts": "1.1"}) is None

    def test_threaded_file_share(self):
        event = {"type": "message", "subtype": "file_share", "channel": "C1", "ts": "2.2", "thread_ts": "0.1"}
        assert classify_raw(event) == ("C1", "2.2")

    @pytest.mark.parametrize("thread_ts", ["0.1", None])
    def test_other_subtype(self, thread_ts):
        event = {"type": "message", "subtype": "message_changed", "channel": "C1", "ts": "1.1", "thread_ts": thread_ts}
        assert classify_raw(event) is None

    def test_file_share_without_thread(self):
        assert classify_raw({"type": "message", "subtype": "file_share", "channel": "C1", "ts": "2.2"}) is None

    def test_explicit_null_thread_ts(self):
        assert classify_raw({"type": "message", "channel": "C1", "ts": "1.1", "thread_ts": None}) is None

    def test_result_is_the_reply_ts_not_the_thread_root(self):
        ref = classify_raw({"type": "message", "channel": "C9", "ts": "5.5", "thread_ts": "5.0"})
        assert isinstance(ref, ThreadReference)
        assert ref.channel == "C9"
        assert ref.message_ts == "5.5"

    def test_idempotent(self):
        event = decode_callback_event({"type": "message", "channel": "C1", "ts": "1.1", "thread_ts": "0.1"})
        assert classify(event) == classify(event) == ("C1", "1.1")

    def test_non_message_event(self):
        assert classify(OtherEvent(type="app_mention")) is None


class TestFixtures:
    def test_it_ignores_plain_message(self):
        assert find_threaded_message(load_fixture("plain_message.json")) is None

    def test_it_finds_threaded_message(self):
        assert find_threaded_message(load_fixture("threaded_message.json")) == ("C03387UAMQR", "1644939337.956639")
        assert find_threaded_message(load_fixture("threaded_message_changed.json")) is None

    def test_it_ignores_broadcasted_threaded_message(self):
        assert find_threaded_message(load_fixture("broadcasted_threaded_message.json")) is None

    def test_it_finds_threaded_file_upload(self):
        assert find_threaded_message(load_fixture("threaded_file_upload.json")) == ("C03387UAMQR", "1644940789.277819")

    def test_it_ignores_broadcasted_threaded_file_upload(self):
        assert find_threaded_message(load_fixture("broadcasted_threaded_file_upload.json")) is None

    def test_it_ignores_other_events(self):
        assert find_threaded_message(load_fixture("reaction_added.json")) is None

    def test_it_ignores_other_payloads(self):
        assert find_threaded_message(load_fixture("app_rate_limited.json")) is None


def test_logs_carry_event_context(caplog):
    log = EventLogger(logging.getLogger("test"), {"envelope_id": "env-1"})
    with caplog.at_level(logging.INFO, logger="slack_thread_relay.classifier"):
        find_threaded_message(load_fixture("plain_message.json"), log)
    record = next(r for r in caplog.records if "thread_ts is none" in r.getMessage())
    assert record.name == "slack_thread_relay.classifier"
    assert record.envelope_id == "env-1"
    assert record.context == {"envelope_id": "env-1"}
