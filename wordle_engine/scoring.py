from enum import Enum
from typing import Sequence, Tuple


class LetterFeedback(str, Enum):
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"


def score(secret: str, guess: str) -> Tuple[LetterFeedback, ...]:
    """
    Returns the letter-level feedback for a guess, one entry per position.

    Each position is judged on its own: a letter that is in the secret but
    not at this position is 'present' no matter how many times the guess
    repeats it. Unlike the usual Wordle rules, no occurrences are deducted,
    so guessing two A's against a secret with one A marks both present.
    """
    if len(secret) != len(guess):
        raise ValueError(f"Guess length ({len(guess)}) does not match secret length ({len(secret)}).")

    states = []
    for i, letter in enumerate(guess):
        if letter == secret[i]:
            states.append(LetterFeedback.CORRECT)
        elif letter in secret:
            states.append(LetterFeedback.PRESENT)
        else:
            states.append(LetterFeedback.ABSENT)
    return tuple(states)


def has_won(feedback: Sequence[LetterFeedback]) -> bool:
    return bool(feedback) and all(state == LetterFeedback.CORRECT for state in feedback)
