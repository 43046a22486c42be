"""
Configuration for the Wordle engine.

Settings come from environment variables (a .env file is loaded first) with
sensible defaults. Each Config() reads the environment when it is created.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .validation import DEFAULT_DICTIONARY_API_URL, DictionaryApiLookup, GuessValidator, RetryPolicy, WordListLookup
from .words import DEFAULT_WORDS, WordSource

load_dotenv()

WORD_CHECK_MODES = ("dictionary", "word-list", "none")
DEFAULT_RULES_FLAG_PATH = Path.home() / '.wordle_engine' / 'has_read_rules'


class Config:
    """Settings read from the environment."""

    def __init__(self):
        # Word checking
        self.WORD_CHECK = os.getenv('WORD_CHECK', 'dictionary').lower()
        self.DICTIONARY_API_URL = os.getenv('DICTIONARY_API_URL', DEFAULT_DICTIONARY_API_URL)
        self.LOOKUP_ATTEMPTS = int(os.getenv('LOOKUP_ATTEMPTS', 3))
        self.LOOKUP_RETRY_DELAY = float(os.getenv('LOOKUP_RETRY_DELAY', 0.0))
        self.LOOKUP_TIMEOUT = float(os.getenv('LOOKUP_TIMEOUT', 5.0))

        # Words
        self.WORD_LIST_PATH = os.getenv('WORD_LIST_PATH') or None

        # Presentation
        self.RULES_FLAG_PATH = Path(os.getenv('RULES_FLAG_PATH', str(DEFAULT_RULES_FLAG_PATH)))

        # Logging
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')
        self.LOG_DIR = os.getenv('LOG_DIR') or None

        # LLM player
        self.AGENT_MODEL = os.getenv('AGENT_MODEL', 'gemini/gemini-2.5-flash-lite')


def build_word_source(config: Config) -> WordSource:
    if config.WORD_LIST_PATH:
        return WordSource.from_file(Path(config.WORD_LIST_PATH))
    return WordSource(DEFAULT_WORDS)


def build_validator(config: Config, word_source: Optional[WordSource] = None) -> GuessValidator:
    mode = config.WORD_CHECK
    if mode not in WORD_CHECK_MODES:
        raise ValueError(f"WORD_CHECK must be one of {WORD_CHECK_MODES}, got {mode!r}")

    if mode == "none":
        return GuessValidator()

    retry = RetryPolicy(attempts=config.LOOKUP_ATTEMPTS, delay=config.LOOKUP_RETRY_DELAY)
    if mode == "word-list":
        source = word_source or build_word_source(config)
        return GuessValidator(WordListLookup(source.words), retry=retry)
    return GuessValidator(DictionaryApiLookup(config.DICTIONARY_API_URL, timeout=config.LOOKUP_TIMEOUT), retry=retry)
