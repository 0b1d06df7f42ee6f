"""
Unit tests for feedback phrasing and the event channel.
"""

import pytest

from math_adventure.events import EventChannel, GameEvent
from math_adventure.feedback import DEFAULT_PHRASES, FeedbackContext, TemplateFeedbackComposer


def context(**overrides):
    values = {
        "outcome": "correct",
        "streak": 1,
        "sub_type": "addition",
        "difficulty": "easy",
        "domain": "basic-arithmetic",
    }
    values.update(overrides)
    return FeedbackContext(**values)


class TestTemplateFeedbackComposer:
    def setup_method(self):
        self.composer = TemplateFeedbackComposer()

    def test_deterministic(self):
        assert self.composer.compose(context()) == self.composer.compose(context())

    def test_streak_phrase(self):
        assert self.composer.compose(context(streak=4)) in DEFAULT_PHRASES["correct_streak"]

    def test_quick_phrase(self):
        assert self.composer.compose(context(was_quick=True)) in DEFAULT_PHRASES["correct_quick"]

    def test_incorrect_mentions_answer(self):
        message = self.composer.compose(context(outcome="incorrect", streak=0, correct_answer=12))
        assert "12" in message

    def test_high_support_phrase(self):
        message = self.composer.compose(
            context(outcome="incorrect", streak=0, correct_answer=3, support_level="high")
        )
        assert message in [p.format(answer=3) for p in DEFAULT_PHRASES["incorrect_support"]]

    @pytest.mark.parametrize(
        "accuracy,key",
        [(0.9, "session_great"), (0.7, "session_good"), (0.2, "session_keep_going")],
    )
    def test_session_phrases(self, accuracy, key):
        message = self.composer.compose(context(outcome="session_complete", accuracy=accuracy))
        assert message in DEFAULT_PHRASES[key]

    def test_custom_phrases(self):
        phrases = dict(DEFAULT_PHRASES, correct=("Yay!",))
        assert TemplateFeedbackComposer(phrases).compose(context()) == "Yay!"


class TestEventChannel:
    def test_listeners_called_in_order(self):
        channel = EventChannel()
        calls = []
        channel.subscribe(GameEvent.SESSION_ENDED, lambda e, p: calls.append("first"))
        channel.subscribe(GameEvent.SESSION_ENDED, lambda e, p: calls.append("second"))
        channel.emit(GameEvent.SESSION_ENDED, {})
        assert calls == ["first", "second"]

    def test_other_events_not_delivered(self):
        channel = EventChannel()
        calls = []
        channel.subscribe(GameEvent.SESSION_ENDED, lambda e, p: calls.append(e))
        channel.emit(GameEvent.SESSION_STARTED, {})
        assert calls == []

    def test_listener_errors_propagate(self):
        channel = EventChannel()

        def broken(event, payload):
            raise RuntimeError("listener bug")

        channel.subscribe(GameEvent.SESSION_STARTED, broken)
        with pytest.raises(RuntimeError):
            channel.emit(GameEvent.SESSION_STARTED, {})

    def test_subscribe_all_unsubscribes_everything(self):
        channel = EventChannel()
        remove = channel.subscribe_all(lambda e, p: None)
        assert all(channel.listener_count(event) == 1 for event in GameEvent)
        remove()
        assert all(channel.listener_count(event) == 0 for event in GameEvent)
