import pytest

from powlab.hashrate_meter import HashrateMeter
from powlab.session import CancelToken, MiningJob, MiningState, coerce_nonce, join_header
from powlab.target import Target


def test_header_uses_pipe_separator():
    assert join_header("a", "b", 0) == "a|b|0"
    assert join_header("", "", 12) == "||12"


def test_job_trims_inputs():
    job = MiningJob("  genesis\n", "\thello ", Target(2))
    assert job.header(5) == "genesis|hello|5"
    assert job.target.difficulty == 2


def test_job_separator_inside_data_is_opaque():
    job = MiningJob("a|b", "c|d")
    assert job.header(1) == "a|b|c|d|1"


def test_job_from_input_clamps_difficulty():
    assert MiningJob.from_input("p", "d", "12").target.difficulty == 6
    assert MiningJob.from_input("p", "d", "x").target.difficulty == 1
    assert MiningJob(None, None).header(0) == "||0"


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, 0),
        (7, 7),
        ("42", 42),
        (" 12 ", 12),
        (3.9, 3),
        ("3.9", 3),
        (-3, 0),
        ("-4", 0),
        ("abc", 0),
        (None, 0),
        ("", 0),
        (True, 1),
        ("9007199254740993", 9007199254740993),
        (2**53 + 1, 2**53 + 1),
        (2**64 + 7, 2**64 + 7),
    ],
)
def test_coerce_nonce(value, expected):
    assert coerce_nonce(value) == expected


def test_account_attempt_tracks_minimum(clock):
    state = MiningState(meter=HashrateMeter(clock=clock))
    for h in ("b" * 64, "3" * 64, "c" * 64):
        state.account_attempt(h)
    assert state.attempt_count == 3
    assert state.best_hash == "3" * 64
    assert state.attempts_in_current_window == 3
    assert state.nonce == 0


def test_reset_is_idempotent(clock):
    state = MiningState(meter=HashrateMeter(clock=clock))
    state.nonce = 9
    state.is_running = True
    state.account_attempt("a" * 64)
    state.reset()
    once = state.snapshot()
    state.reset()
    assert state.snapshot() == once
    assert once == dict(
        nonce=0,
        attempt_count=0,
        best_hash=None,
        attempts_in_current_window=0,
        is_running=False,
    )


def test_session_uid():
    assert MiningState().uid
    assert isinstance(MiningState().uid, str)


def test_cancel_token():
    token = CancelToken()
    assert not token.is_cancelled
    token.cancel()
    assert token.is_cancelled
