import random
from pathlib import Path
from typing import Iterable, Optional, Tuple

DEFAULT_WORDS = (
    "BLADE", "KNIFE", "RISEN", "SPOON", "TABLE",
    "WEIRD", "INPUT", "INDEX", "PRIZE", "MOUSE",
    "DRINK", "TRAIN", "SPACE", "GLIDE", "GLORY",
    "CREST", "FIGHT", "ZEBRA", "SPARK", "SLIDE",
)


def _is_playable(word: str, length: int = 5) -> bool:
    return len(word) == length and all("A" <= ch <= "Z" for ch in word)


class WordSource:
    """Supplies the secret word for each round."""

    def __init__(self, words: Iterable[str] = DEFAULT_WORDS, rng: Optional[random.Random] = None):
        self._words: Tuple[str, ...] = tuple(word.strip().upper() for word in words)
        if not self._words:
            raise ValueError("Word list cannot be empty.")
        bad = [word for word in self._words if not _is_playable(word)]
        if bad:
            raise ValueError(f"Secret words must be 5 letters A-Z: {bad[:5]}")
        self.rng = rng or random.Random()

    @classmethod
    def from_file(cls, path: Path, rng: Optional[random.Random] = None) -> "WordSource":
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Error: Word list not found at '{path}'")
        with open(path, 'r') as f:
            words = [line.strip().upper() for line in f]
        return cls([word for word in words if _is_playable(word)], rng=rng)

    @property
    def words(self) -> Tuple[str, ...]:
        return self._words

    def next(self) -> str:
        return self.rng.choice(self._words)
