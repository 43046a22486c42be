import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Iterable, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_DICTIONARY_API_URL = "https://api.dictionaryapi.dev/api/v2/entries/en"


class Reason(Enum):
    WRONG_LENGTH = "wrong_length"
    NOT_A_WORD = "not_a_word"
    LOOKUP_UNAVAILABLE = "lookup_unavailable"


class LookupOutcome(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    TRANSIENT_ERROR = "transient_error"


@dataclass(frozen=True)
class Verdict:
    accepted: bool
    reason: Optional[Reason] = None

    @classmethod
    def accept(cls) -> "Verdict":
        return cls(True)

    @classmethod
    def reject(cls, reason: Reason) -> "Verdict":
        return cls(False, reason)


WordLookup = Callable[[str], Awaitable[LookupOutcome]]


@dataclass(frozen=True)
class RetryPolicy:
    """How many times a word lookup is attempted before giving up."""

    attempts: int = 3
    delay: float = 0.0

    def __post_init__(self):
        if self.attempts < 1:
            raise ValueError("RetryPolicy needs at least one attempt.")

    async def run(self, lookup: WordLookup, word: str) -> LookupOutcome:
        """
        Calls the lookup until it gives a definite answer or the attempts run out.
        Only TRANSIENT_ERROR is retried; the last outcome is returned.
        """
        outcome = LookupOutcome.TRANSIENT_ERROR
        for attempt in range(1, self.attempts + 1):
            try:
                outcome = await lookup(word)
            except Exception:
                logger.exception("Lookup for %s raised, treating as transient", word)
                outcome = LookupOutcome.TRANSIENT_ERROR

            if outcome is not LookupOutcome.TRANSIENT_ERROR:
                return outcome

            logger.warning("Lookup for %s failed (attempt %d/%d)", word, attempt, self.attempts)
            if self.delay and attempt < self.attempts:
                await asyncio.sleep(self.delay)
        return outcome


class GuessValidator:
    """
    Decides whether a guess may be submitted.

    Without a lookup only the length is checked. With one, the word must also
    be confirmed by the lookup; transient failures are retried per the policy.
    """

    def __init__(self, lookup: Optional[WordLookup] = None, retry: Optional[RetryPolicy] = None, word_length: int = 5):
        self.lookup = lookup
        self.retry = retry or RetryPolicy()
        self.word_length = word_length

    async def validate(self, guess: str) -> Verdict:
        if len(guess) != self.word_length:
            return Verdict.reject(Reason.WRONG_LENGTH)

        # degraded mode, length-only
        if self.lookup is None:
            return Verdict.accept()

        outcome = await self.retry.run(self.lookup, guess)
        if outcome is LookupOutcome.NOT_FOUND:
            return Verdict.reject(Reason.NOT_A_WORD)
        if outcome is LookupOutcome.TRANSIENT_ERROR:
            return Verdict.reject(Reason.LOOKUP_UNAVAILABLE)
        return Verdict.accept()

    def close(self):
        """Releases whatever the lookup holds open, e.g. an HTTP session."""
        close = getattr(self.lookup, "close", None)
        if close is not None:
            close()


class DictionaryApiLookup:
    """Checks words against a dictionary HTTP API (one GET per word)."""

    def __init__(self, base_url: str = DEFAULT_DICTIONARY_API_URL, timeout: float = 5.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # a session passed in belongs to the caller
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self):
        if self._owns_session:
            self.session.close()

    async def __call__(self, word: str) -> LookupOutcome:
        # requests blocks, so keep it off the event loop
        return await asyncio.to_thread(self.lookup_sync, word)

    def lookup_sync(self, word: str) -> LookupOutcome:
        url = f"{self.base_url}/{word.lower()}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Dictionary request for %s failed: %s", word, e)
            return LookupOutcome.TRANSIENT_ERROR

        status = response.status_code
        if status == 429 or status >= 500:
            logger.warning("Dictionary service answered %d for %s", status, word)
            return LookupOutcome.TRANSIENT_ERROR
        if status >= 400:
            return LookupOutcome.NOT_FOUND

        try:
            response.json()
        except ValueError:
            logger.warning("Dictionary response for %s was not JSON", word)
            return LookupOutcome.TRANSIENT_ERROR
        return LookupOutcome.FOUND


class WordListLookup:
    """Offline lookup against a fixed set of words."""

    def __init__(self, words: Iterable[str]):
        self.words = {word.strip().upper() for word in words}
        if not self.words:
            raise ValueError("Word list cannot be empty.")

    async def __call__(self, word: str) -> LookupOutcome:
        return LookupOutcome.FOUND if word.upper() in self.words else LookupOutcome.NOT_FOUND
