from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class Letter:
    char: str


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class Delete:
    pass


@dataclass(frozen=True)
class Rejected:
    pass


SUBMIT = Submit()
DELETE = Delete()
REJECTED = Rejected()

Command = Union[Letter, Submit, Delete, Rejected]


def classify(raw_key: str) -> Command:
    """
    Turns a raw keyboard-style key name into a game command.
    Classification is case-insensitive; unknown keys become Rejected.
    """
    key = raw_key.upper()

    if len(key) == 1:
        # isalpha() alone would let accented letters through
        if "A" <= key <= "Z":
            return Letter(key)
        return REJECTED

    if key == "ENTER":
        return SUBMIT
    if key in ("BACKSPACE", "DELETE"):
        return DELETE
    return REJECTED


def keystrokes_for_line(line: str) -> List[str]:
    """
    Expands one line of typed text into the keystrokes a keyboard would send.

    A line naming a special key is that key alone, an empty line is ENTER,
    and any other line is typed character by character and then submitted.
    """
    token = line.strip()
    if not token or token.upper() == "ENTER":
        return ["ENTER"]
    if token.upper() in ("BACKSPACE", "DELETE"):
        return [token.upper()]
    return list(token) + ["ENTER"]
