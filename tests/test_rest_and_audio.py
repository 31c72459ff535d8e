"""
Rest countdown and audio cue tests.

Cues are checked as (freq, duration, shape) tuples recorded by a fake sink.
"""

from wod_runner.core.audio import AudioCues
from wod_runner.core.config import (
    FINISH_SEQUENCE,
    TONE_AMRAP_THREE,
    TONE_AMRAP_WARNING,
    TONE_AUDIO_ON,
    TONE_COUNTDOWN,
    TONE_COUNTDOWN_FINAL,
    TONE_REST_SKIP,
    Tone,
)
from wod_runner.core.models import Movement, RestPolicy, WorkoutDefinition
from wod_runner.core.session import WorkoutSession
from wod_runner.core.ticker import ManualTicker


class RecordingSink:
    def __init__(self):
        self.tones: list[tuple[float, float, str]] = []

    def play_tone(self, freq, duration, shape):
        self.tones.append((freq, duration, shape))


class BrokenSink:
    def play_tone(self, freq, duration, shape):
        raise OSError("no audio device")


def _t(tone: Tone) -> tuple[float, float, str]:
    return (tone.freq, tone.duration, tone.shape)


def _cues(sink, deferred: list | None = None) -> AudioCues:
    if deferred is None:
        return AudioCues(sink=sink, defer=lambda delay, fn: fn())
    return AudioCues(sink=sink, defer=lambda delay, fn: deferred.append((delay, fn)))


def _resting_session(rest_seconds: int, sink=None) -> tuple[WorkoutSession, ManualTicker]:
    workout = WorkoutDefinition(
        workout_id="w",
        name="Rest test",
        scheme="FOR_TIME",
        movements=(
            Movement(exercise_id="a", target="A", order=1),
            Movement(exercise_id="b", target="B", order=2),
        ),
        rest=RestPolicy("fixed", rest_seconds),
    )
    ticker = ManualTicker()
    session = WorkoutSession(workout, ticker=ticker, cues=_cues(sink or RecordingSink()))
    session.start()
    session.advance()
    return session, ticker


class TestRestCountdown:
    def test_skip_from_counting(self):
        session, ticker = _resting_session(7)
        assert session.skip_rest()
        assert session.phase == "running"
        assert session.state.is_clock_running
        assert session.rest.mode == "idle"
        ticker.fire(2)
        assert session.state.elapsed_seconds == 2

    def test_adjust_clamps_without_finishing(self):
        session, ticker = _resting_session(5)
        assert session.adjust_rest(-10)
        assert session.state.rest_remaining_seconds == 0
        assert session.phase == "resting"
        # The next tick completes the rest
        ticker.fire(1)
        assert session.phase == "running"

    def test_adjust_up(self):
        session, ticker = _resting_session(5)
        session.adjust_rest(10)
        assert session.state.rest_remaining_seconds == 15
        ticker.fire(14)
        assert session.phase == "resting"
        ticker.fire(1)
        assert session.phase == "running"

    def test_clock_frozen_during_rest(self):
        session, ticker = _resting_session(30)
        ticker.fire(10)
        assert session.state.elapsed_seconds == 0
        assert not session.state.is_clock_running

    def test_adjust_not_allowed_while_running(self):
        session, _ = _resting_session(5)
        session.skip_rest()
        assert not session.adjust_rest(10)
        assert not session.skip_rest()

    def test_skip_plays_skip_tone(self):
        sink = RecordingSink()
        session, _ = _resting_session(7, sink)
        session.skip_rest()
        assert sink.tones[-1] == _t(TONE_REST_SKIP)

    def test_countdown_tones(self):
        """Short tone at 3 and 2, long tone at 1, nothing earlier."""
        sink = RecordingSink()
        session, ticker = _resting_session(6, sink)
        before = len(sink.tones)
        ticker.fire(3)  # previous values 6, 5, 4
        assert len(sink.tones) == before
        ticker.fire(2)  # previous values 3, 2
        assert sink.tones[before:] == [_t(TONE_COUNTDOWN), _t(TONE_COUNTDOWN)]
        ticker.fire(1)  # previous value 1
        assert sink.tones[before + 2] == _t(TONE_COUNTDOWN_FINAL)


class TestAmrapCues:
    def test_last_ten_seconds(self):
        sink = RecordingSink()
        cues = _cues(sink)
        for remaining in range(12, -1, -1):
            cues.amrap_tick(remaining)
        assert sink.tones[:7] == [_t(TONE_AMRAP_WARNING)] * 7  # 10..4
        assert sink.tones[7] == _t(TONE_AMRAP_THREE)
        assert sink.tones[8:10] == [_t(TONE_AMRAP_WARNING)] * 2  # 2, 1
        assert sink.tones[10:] == [_t(t) for t in FINISH_SEQUENCE]

    def test_finish_sequence_is_staggered(self):
        sink = RecordingSink()
        deferred: list = []
        cues = _cues(sink, deferred)
        cues.finished()
        assert sink.tones == [_t(FINISH_SEQUENCE[0])]
        assert [delay for delay, _ in deferred] == [0.15, 0.3]
        for _, fn in deferred:
            fn()
        assert sink.tones == [_t(t) for t in FINISH_SEQUENCE]


class TestCueSafety:
    def test_broken_sink_never_raises(self):
        session, ticker = _resting_session(3, BrokenSink())
        ticker.fire(3)
        assert session.phase == "running"
        session.advance()
        assert session.phase == "finished"

    def test_disabled_plays_nothing(self):
        sink = RecordingSink()
        cues = AudioCues(sink=sink, enabled=False)
        cues.started()
        cues.amrap_tick(3)
        assert sink.tones == []

    def test_enable_plays_ping(self):
        sink = RecordingSink()
        cues = AudioCues(sink=sink, enabled=False)
        cues.set_enabled(True)
        assert sink.tones == [_t(TONE_AUDIO_ON)]
        cues.set_enabled(True)
        assert len(sink.tones) == 1

    def test_disable_is_silent(self):
        sink = RecordingSink()
        cues = AudioCues(sink=sink)
        cues.set_enabled(False)
        assert sink.tones == []
        assert not cues.enabled
