import asyncio

import pytest
from wordle_engine.env import WordleEnv, main, play_interactive, show_rules_once
from wordle_engine.game import GuessRejected, RoundLost, RoundWon, Status
from wordle_engine.render import TextUI
from wordle_engine.validation import GuessValidator, LookupOutcome, Reason, WordListLookup
from wordle_engine.words import WordSource


def make_env(**kwargs):
    kwargs.setdefault("validator", GuessValidator())
    kwargs.setdefault("ui", TextUI(echo=False))
    kwargs.setdefault("word_source", WordSource(["TABLE"]))
    return WordleEnv(**kwargs)


def test_step_before_reset_raises():
    env = make_env()
    with pytest.raises(RuntimeError):
        asyncio.run(env.step(["a"]))


def test_round_records_game_state():
    async def go():
        env = make_env()
        await env.reset()
        await env.step(list("BLAD") + ["Enter"])
        await env.step(["e", "Enter"] + list("table") + ["Enter"])
        state = env.state
        await env.close()
        return env, state

    env, state = asyncio.run(go())
    assert state.status is Status.WON
    assert env.game_state["won"] is True
    assert env.game_state["num_turns"] == 2
    assert env.game_state["rejections"] == ["wrong_length"]
    assert [g["guess"] for g in env.game_state["guesses"]] == ["BLADE", "TABLE"]
    assert env.ui.messages[-1] == "You Win!"


def test_reset_discards_previous_round():
    async def go():
        env = make_env(word_source=WordSource(["TABLE", "BLADE"]), target_word="glide")
        await env.reset()
        await env.step(list("TAB"))
        first_id = env.game_id
        state = await env.reset()
        await env.close()
        return first_id, env.game_id, state, env.ui

    first_id, second_id, state, ui = asyncio.run(go())
    assert first_id != second_id
    assert state.secret == "GLIDE"
    assert state.partial == "" and state.history == ()
    assert ui.tiles[0] == [" "] * 5


def test_word_list_validation_rejects_unknown_words():
    async def go():
        env = make_env(validator=GuessValidator(WordListLookup(["TABLE", "BLADE"])))
        await env.reset()
        outcomes = await env.step(list("QQQQQ") + ["Enter"])
        partial = env.state.partial
        await env.close()
        return outcomes[-1], partial

    outcome, partial = asyncio.run(go())
    assert outcome == GuessRejected(Reason.NOT_A_WORD)
    assert partial == "QQQQQ"


def test_show_rules_once(tmp_path, capsys):
    flag = tmp_path / "nested" / "has_read_rules"
    ui = TextUI()
    assert show_rules_once(ui, flag) is True
    assert "How to play" in capsys.readouterr().out
    assert flag.exists()
    assert show_rules_once(ui, flag) is False
    assert capsys.readouterr().out == ""


def test_play_interactive_loss_then_restart_then_quit():
    lines = iter(["blade", "knife", "risen", "spoon", "weird", "input", "hello", "restart", "backspace", "quit"])
    env = make_env()
    asyncio.run(play_interactive(env, read_line=lambda prompt: next(lines)))
    assert any(m.startswith("You Lose! The word was TABLE") for m in env.ui.messages)
    assert env.session is None


def test_play_interactive_stops_on_eof(capsys):
    def read_line(prompt):
        raise EOFError

    asyncio.run(play_interactive(make_env(), read_line=read_line))
    assert "Exiting game." in capsys.readouterr().out


def test_main_runs_a_round(tmp_path, monkeypatch, capsys):
    words = tmp_path / "words.txt"
    words.write_text("table\n")
    monkeypatch.delenv("WORD_CHECK", raising=False)
    monkeypatch.setenv("RULES_FLAG_PATH", str(tmp_path / "flag"))
    lines = iter(["table", "quit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

    main(["--word-list", str(words), "--log-level", "ERROR"])

    out = capsys.readouterr().out
    assert "How to play" in out
    assert "You Win!" in out


def test_main_bad_word_list(tmp_path, monkeypatch):
    monkeypatch.setenv("RULES_FLAG_PATH", str(tmp_path / "flag"))
    with pytest.raises(SystemExit):
        main(["--word-list", str(tmp_path / "missing.txt")])


def test_env_outcomes_reach_ui():
    async def go():
        env = make_env()
        await env.reset()
        for word in ["BLADE", "KNIFE", "RISEN", "SPOON", "WEIRD", "INPUT"]:
            outcomes = await env.step(list(word) + ["Enter"])
        await env.close()
        return env, outcomes

    env, outcomes = asyncio.run(go())
    assert isinstance(outcomes[-1], RoundLost)
    assert env.game_state["won"] is False
    assert env.game_state["num_turns"] == 6
    assert not isinstance(outcomes[-1], RoundWon)


def play_lines(env, lines):
    lines = iter(lines)
    asyncio.run(play_interactive(env, read_line=lambda prompt: next(lines)))
    return env.game_state


def test_play_interactive_short_line_does_not_merge_into_next_word():
    game_state = play_lines(make_env(), ["bla", "blade", "quit"])
    assert game_state["rejections"] == ["wrong_length"]
    assert [g["guess"] for g in game_state["guesses"]] == ["BLADE"]


def test_play_interactive_recovers_after_unknown_word():
    env = make_env(validator=GuessValidator(WordListLookup(["TABLE", "BLADE"])))
    game_state = play_lines(env, ["qqqqq", "blade", "table", "quit"])
    assert game_state["rejections"] == ["not_a_word"]
    assert [g["guess"] for g in game_state["guesses"]] == ["BLADE", "TABLE"]
    assert game_state["won"] is True


def test_play_interactive_rejects_too_long_line():
    env = make_env()
    game_state = play_lines(env, ["tables", "quit"])
    assert game_state["guesses"] == []
    assert game_state["won"] is False
    assert env.ui.messages[-1] == "Word must have 5 letters"


def test_play_interactive_enter_resubmits_kept_guess():
    class FlakyLookup:
        def __init__(self):
            self.calls = 0

        async def __call__(self, word):
            self.calls += 1
            return LookupOutcome.TRANSIENT_ERROR if self.calls <= 3 else LookupOutcome.FOUND

    env = make_env(validator=GuessValidator(FlakyLookup()))
    game_state = play_lines(env, ["blade", "", "quit"])
    assert game_state["rejections"] == ["lookup_unavailable"]
    assert [g["guess"] for g in game_state["guesses"]] == ["BLADE"]


def test_close_releases_lookup():
    class ClosingLookup:
        closed = False

        async def __call__(self, word):
            return LookupOutcome.FOUND

        def close(self):
            self.closed = True

    lookup = ClosingLookup()
    env = make_env(validator=GuessValidator(lookup))

    async def go():
        await env.reset()
        await env.reset()
        assert lookup.closed is False
        await env.close()

    asyncio.run(go())
    assert lookup.closed is True
