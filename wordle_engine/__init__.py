from .commands import classify, keystrokes_for_line
from .scoring import LetterFeedback, score, has_won
from .validation import GuessValidator, RetryPolicy, Reason, Verdict, LookupOutcome, DictionaryApiLookup, WordListLookup
from .game import RoundState, RoundStateMachine, Status, ScoredGuess
from .session import RoundSession
from .words import WordSource
from .render import TextUI
from .env import WordleEnv

__all__ = [
    "classify", "keystrokes_for_line",
    "LetterFeedback", "score", "has_won",
    "GuessValidator", "RetryPolicy", "Reason", "Verdict", "LookupOutcome", "DictionaryApiLookup", "WordListLookup",
    "RoundState", "RoundStateMachine", "Status", "ScoredGuess",
    "RoundSession", "WordSource", "TextUI", "WordleEnv",
]
