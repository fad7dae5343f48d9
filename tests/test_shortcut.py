import pytest

from Utils.shortcut import KeySequenceTrigger


class Recorder:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


def type_text(trigger, text, start=0.0, gap=0.1):
    return [trigger.press(ch, at=start + i * gap) for i, ch in enumerate(text)]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def trigger(recorder):
    return KeySequenceTrigger("lachlanadmin", recorder, timeout=1.0)


def test_phrase_within_window_fires_once(trigger, recorder):
    results = type_text(trigger, "lachlanadmin")

    assert recorder.calls == 1
    assert results[-1] is True
    assert not any(results[:-1])


def test_pause_between_keys_breaks_the_sequence(trigger, recorder):
    type_text(trigger, "lachlan", start=0.0)
    type_text(trigger, "admin", start=0.6 + 1.5)

    assert recorder.calls == 0


def test_any_case_fires(trigger, recorder):
    type_text(trigger, "LACHLANADMIN")
    assert recorder.calls == 1


def test_phrase_found_inside_other_typing(trigger, recorder):
    type_text(trigger, "hello lachlanadmin!")
    assert recorder.calls == 1


def test_buffer_resets_after_match(trigger, recorder):
    type_text(trigger, "lachlanadminadmin")
    assert recorder.calls == 1

    type_text(trigger, "lachlanadmin", start=5.0)
    assert recorder.calls == 2


def test_named_keys_interrupt_the_phrase(trigger, recorder):
    keys = list("lachlan") + ["Shift"] + list("admin")
    for i, key in enumerate(keys):
        trigger.press(key, at=i * 0.1)

    assert recorder.calls == 0


def test_uses_clock_when_no_time_given(recorder):
    now = [100.0]
    trigger = KeySequenceTrigger("abc", recorder, timeout=1.0, clock=lambda: now[0])

    trigger.press("a")
    now[0] += 2.0
    trigger.press("b")
    trigger.press("c")
    assert recorder.calls == 0

    trigger.press("a")
    trigger.press("b")
    trigger.press("c")
    assert recorder.calls == 1


def test_replay_counts_matches(trigger):
    keys = [(ch, i * 0.1) for i, ch in enumerate("lachlanadmin" * 2)]
    assert trigger.replay(keys) == 2


def test_empty_phrase_rejected(recorder):
    with pytest.raises(ValueError):
        KeySequenceTrigger("", recorder)
