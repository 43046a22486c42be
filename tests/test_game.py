import asyncio

import pytest
from wordle_engine.commands import DELETE, REJECTED, SUBMIT, Letter
from wordle_engine.game import (
    NO_OP, GuessRejected, GuessScored, LetterAdded, LetterRemoved, RoundLost, RoundState,
    RoundStateMachine, RoundWon, ScoredGuess, Status, letter_states,
)
from wordle_engine.scoring import LetterFeedback
from wordle_engine.validation import GuessValidator, LookupOutcome, Reason

C, P, A = LetterFeedback.CORRECT, LetterFeedback.PRESENT, LetterFeedback.ABSENT


def run(machine, state, commands):
    async def go():
        outcomes = []
        current = state
        for command in commands:
            current, outcome = await machine.apply(current, command)
            outcomes.append(outcome)
        return current, outcomes
    return asyncio.run(go())


def typed(word):
    return [Letter(ch) for ch in word] + [SUBMIT]


def test_new_state_normalises_secret():
    state = RoundState.new(" table ")
    assert state.secret == "TABLE"
    assert state.partial == "" and state.history == () and state.status is Status.IN_PROGRESS


@pytest.mark.parametrize("secret", ["TAB", "TABLES", "TAB1E", ""])
def test_new_state_rejects_bad_secret(secret):
    with pytest.raises(ValueError):
        RoundState.new(secret)


def test_letters_and_delete_outcomes():
    machine = RoundStateMachine()
    state, outcomes = run(machine, RoundState.new("TABLE"), [Letter("B"), Letter("L"), DELETE])
    assert state.partial == "B"
    assert outcomes == [LetterAdded(0, 0, "B"), LetterAdded(0, 1, "L"), LetterRemoved(0, 1)]


def test_sixth_letter_is_noop():
    machine = RoundStateMachine()
    state, outcomes = run(machine, RoundState.new("TABLE"), [Letter(ch) for ch in "BLADES"])
    assert state.partial == "BLADE"
    assert outcomes[-1] is NO_OP


def test_delete_on_empty_is_noop():
    state = RoundState.new("TABLE")
    new_state, outcomes = run(RoundStateMachine(), state, [DELETE])
    assert new_state is state
    assert outcomes == [NO_OP]


def test_rejected_command_is_noop():
    state = RoundState.new("TABLE")
    new_state, outcomes = run(RoundStateMachine(), state, [REJECTED])
    assert new_state is state and outcomes == [NO_OP]


def test_short_guess_rejected_and_kept():
    state, outcomes = run(RoundStateMachine(), RoundState.new("TABLE"), typed("BLAD"))
    assert outcomes[-1] == GuessRejected(Reason.WRONG_LENGTH)
    assert state.partial == "BLAD"
    assert state.status is Status.IN_PROGRESS
    assert state.history == ()


def test_scored_guess_clears_partial():
    state, outcomes = run(RoundStateMachine(), RoundState.new("TABLE"), typed("BLADE"))
    assert outcomes[-1] == GuessScored(0, "BLADE", (P, P, P, A, C))
    assert state.partial == ""
    assert state.history == (ScoredGuess("BLADE", (P, P, P, A, C)),)
    assert state.status is Status.IN_PROGRESS


def test_winning_guess():
    state, outcomes = run(RoundStateMachine(), RoundState.new("TABLE"), typed("BLADE") + typed("TABLE"))
    assert outcomes[-1] == RoundWon(1, "TABLE", (C,) * 5)
    assert state.status is Status.WON and state.won
    assert state.latest.word == "TABLE"


def test_six_misses_lose():
    commands = []
    for word in ["BLADE", "KNIFE", "RISEN", "SPOON", "WEIRD"]:
        commands += typed(word)
    state, outcomes = run(RoundStateMachine(), RoundState.new("TABLE"), commands)
    assert state.status is Status.IN_PROGRESS
    assert state.row == 5

    state, outcomes = run(RoundStateMachine(), state, typed("INPUT"))
    assert isinstance(outcomes[-1], RoundLost)
    assert outcomes[-1].row == 5 and outcomes[-1].secret == "TABLE"
    assert state.status is Status.LOST
    assert len(state.history) == 6


def test_win_on_sixth_guess_is_win():
    commands = []
    for word in ["BLADE", "KNIFE", "RISEN", "SPOON", "WEIRD", "TABLE"]:
        commands += typed(word)
    state, outcomes = run(RoundStateMachine(), RoundState.new("TABLE"), commands)
    assert state.status is Status.WON
    assert isinstance(outcomes[-1], RoundWon)


def test_terminal_state_ignores_commands():
    state, _ = run(RoundStateMachine(), RoundState.new("TABLE"), typed("TABLE"))
    after, outcomes = run(RoundStateMachine(), state, [Letter("A"), DELETE] + typed("BLADE"))
    assert after is state
    assert all(outcome is NO_OP for outcome in outcomes)
    assert len(after.history) == 1


def test_lost_round_never_takes_a_seventh_guess():
    commands = []
    for word in ["BLADE", "KNIFE", "RISEN", "SPOON", "WEIRD", "INPUT"]:
        commands += typed(word)
    lost, _ = run(RoundStateMachine(), RoundState.new("TABLE"), commands)
    assert lost.status is Status.LOST

    after, outcomes = run(RoundStateMachine(), lost, typed("TABLE") + [Letter("A"), DELETE])
    assert all(outcome is NO_OP for outcome in outcomes)
    assert after is lost
    assert len(after.history) == 6


class Unavailable:
    async def __call__(self, word):
        return LookupOutcome.TRANSIENT_ERROR


class NotAWord:
    async def __call__(self, word):
        return LookupOutcome.NOT_FOUND


@pytest.mark.parametrize("lookup,reason", [
    (Unavailable(), Reason.LOOKUP_UNAVAILABLE),
    (NotAWord(), Reason.NOT_A_WORD),
])
def test_lookup_rejections_keep_round_alive(lookup, reason):
    machine = RoundStateMachine(GuessValidator(lookup))
    state, outcomes = run(machine, RoundState.new("TABLE"), typed("BLADE"))
    assert outcomes[-1] == GuessRejected(reason)
    assert state.partial == "BLADE"
    assert state.status is Status.IN_PROGRESS
    assert state.history == ()


def test_letter_states():
    history = [ScoredGuess("BLADE", (P, P, P, A, C)), ScoredGuess("TABLE", (C,) * 5)]
    states = letter_states(history)
    assert states["T"] == "correct"
    assert states["B"] == "correct"
    assert states["D"] == "absent"
    assert states["Z"] == "unused"

    states = letter_states(history[:1])
    assert states["B"] == "present"
    assert states["E"] == "correct"
