import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Union

from .commands import Command, Delete, Letter, Submit
from .scoring import LetterFeedback, has_won, score
from .validation import GuessValidator, Reason

logger = logging.getLogger(__name__)

MAX_TURNS = 6
MAX_WORD_LEN = 5


class Status(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class ScoredGuess:
    word: str
    feedback: Tuple[LetterFeedback, ...]


@dataclass(frozen=True)
class RoundState:
    secret: str
    partial: str = ""
    history: Tuple[ScoredGuess, ...] = ()
    status: Status = Status.IN_PROGRESS

    @classmethod
    def new(cls, secret: str) -> "RoundState":
        secret = secret.strip().upper()
        if len(secret) != MAX_WORD_LEN or not all("A" <= ch <= "Z" for ch in secret):
            raise ValueError(f"Secret word must be {MAX_WORD_LEN} letters A-Z, got {secret!r}.")
        return cls(secret)

    @property
    def row(self) -> int:
        return len(self.history)

    @property
    def is_over(self) -> bool:
        return self.status is not Status.IN_PROGRESS

    @property
    def won(self) -> bool:
        return self.status is Status.WON

    @property
    def latest(self) -> Optional[ScoredGuess]:
        return self.history[-1] if self.history else None


# --- Frame outcomes: what the presentation layer should draw ---
@dataclass(frozen=True)
class LetterAdded:
    row: int
    col: int
    letter: str


@dataclass(frozen=True)
class LetterRemoved:
    row: int
    col: int


@dataclass(frozen=True)
class GuessRejected:
    reason: Reason


@dataclass(frozen=True)
class GuessScored:
    row: int
    word: str
    feedback: Tuple[LetterFeedback, ...]


@dataclass(frozen=True)
class RoundWon:
    row: int
    word: str
    feedback: Tuple[LetterFeedback, ...]


@dataclass(frozen=True)
class RoundLost:
    row: int
    word: str
    feedback: Tuple[LetterFeedback, ...]
    secret: str


@dataclass(frozen=True)
class NoOp:
    pass


NO_OP = NoOp()

FrameOutcome = Union[LetterAdded, LetterRemoved, GuessRejected, GuessScored, RoundWon, RoundLost, NoOp]


class RoundStateMachine:
    """
    Applies commands to a round.

    apply() never mutates the state it is given; it returns the next state
    with the outcome to render. Once a round is won or lost every command
    yields NO_OP. A rejected guess is kept as typed, whatever the reason,
    so the player can edit and resubmit it.
    """

    def __init__(self, validator: Optional[GuessValidator] = None, max_guesses: int = MAX_TURNS, word_length: int = MAX_WORD_LEN):
        self.validator = validator or GuessValidator(word_length=word_length)
        self.max_guesses = max_guesses
        self.word_length = word_length

    async def apply(self, state: RoundState, command: Command) -> Tuple[RoundState, FrameOutcome]:
        logger.debug("Applying %r at row %d (partial=%r)", command, state.row, state.partial)

        if state.is_over:
            return state, NO_OP

        if isinstance(command, Letter):
            if len(state.partial) >= self.word_length:
                return state, NO_OP
            new_state = replace(state, partial=state.partial + command.char)
            return new_state, LetterAdded(state.row, len(new_state.partial) - 1, command.char)

        if isinstance(command, Delete):
            if not state.partial:
                return state, NO_OP
            new_state = replace(state, partial=state.partial[:-1])
            return new_state, LetterRemoved(state.row, len(new_state.partial))

        if isinstance(command, Submit):
            return await self._submit(state)

        return state, NO_OP

    async def _submit(self, state: RoundState) -> Tuple[RoundState, FrameOutcome]:
        guess = state.partial
        verdict = await self.validator.validate(guess)
        if not verdict.accepted:
            logger.info("Guess %r rejected: %s", guess, verdict.reason.value)
            return state, GuessRejected(verdict.reason)

        feedback = score(state.secret, guess)
        row = state.row
        history = state.history + (ScoredGuess(guess, feedback),)

        if has_won(feedback):
            logger.info("Round won in %d guesses", len(history))
            return replace(state, partial="", history=history, status=Status.WON), RoundWon(row, guess, feedback)

        if len(history) >= self.max_guesses:
            logger.info("Round lost, the word was %s", state.secret)
            return replace(state, partial="", history=history, status=Status.LOST), RoundLost(row, guess, feedback, state.secret)

        return replace(state, partial="", history=history), GuessScored(row, guess, feedback)


def letter_states(history: Sequence[ScoredGuess]) -> Dict[str, str]:
    """
    Returns a mapping from letters to their game state (correct, present, absent, unused)
    """
    # three levels of presence: absent -> present -> correct
    correct, present, absent = set(), set(), set()

    for guess in history:
        for letter, state in zip(guess.word, guess.feedback):
            if state == LetterFeedback.CORRECT:
                correct.add(letter)
                present.discard(letter)
            elif state == LetterFeedback.PRESENT and letter not in correct:
                present.add(letter)
            elif letter not in correct and letter not in present:
                absent.add(letter)

    return {
        letter: (
            "correct" if letter in correct else
            "present" if letter in present else
            "absent" if letter in absent else
            "unused"
        ) for letter in "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    }
