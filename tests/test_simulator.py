"""Tests for the interactive simulator front end."""

import asyncio
import io
import logging
import os
import threading
from unittest.mock import patch

import pytest

from config import PetConfig
from koji_simulator import (
    PetSimulator,
    build_config,
    build_strategy,
    load_env_file,
    main,
    parse_args,
    run,
    start_input_reader,
)
from personality.brains import LLMBrain, LLMClientError
from personality.brains.shared import CircuitBreakerState
from personality.mood import Mood
from personality.pet_controller import PetController
from tests.fixtures.mock_llm import MockStrategy


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def simulator(state, engine, out):
    return PetSimulator(PetController(state=state, engine=engine), out=out)


async def test_event_input_prints_reaction(simulator, out):
    assert await simulator.handle_input("bang!") is True

    text = out.getvalue()
    assert "[event] loud_noise: curious -> startled" in text
    assert "Mood:      startled" in text
    assert "Koji chooses:" in text
    assert "variation" in text


async def test_unchanged_event_is_reported(simulator, out):
    await simulator.handle_input("who is that")
    await simulator.handle_input("who is that")

    assert "no mood change (still cautious)" in out.getvalue()


async def test_unknown_input(simulator, out):
    assert await simulator.handle_input("sandwich") is True

    assert "Unknown event: sandwich" in out.getvalue()


async def test_blank_input_is_ignored(simulator, out):
    assert await simulator.handle_input("   ") is True
    assert out.getvalue() == ""


@pytest.mark.parametrize("command", ["quit", "exit", "q", "QUIT"])
async def test_quit_commands(simulator, out, command):
    assert await simulator.handle_input(command) is False
    assert "Bye!" in out.getvalue()


async def test_status_and_actions(simulator, out):
    await simulator.handle_input("status")
    await simulator.handle_input("a")

    text = out.getvalue()
    assert "Intensity: 0.6 (medium)" in text
    assert "LLM:       disabled" in text
    assert "Available actions: [explore, approach, stay, perk_ears, tilt_head, chirp]" in text
    assert "Default action:    movement=explore, expression=perk_ears, sound=chirp" in text


async def test_echoes_command(simulator, out, state):
    await simulator.handle_input("echoes")
    assert "No lingering moods." in out.getvalue()

    state.set_mood(Mood.HAPPY, 0.6)
    await simulator.handle_input("bang")
    await simulator.handle_input("e")
    assert "happy: strength 1.00" in out.getvalue()


async def test_idle_and_stats(simulator, out):
    for _ in range(10):
        await simulator.handle_input("idle")
    await simulator.handle_input("stats")

    text = out.getvalue()
    assert "*" in text or "(pause)" in text
    assert "total_events: 0" in text


async def test_llm_toggle_without_strategy(simulator, out):
    await simulator.handle_input("llm")

    assert "LLM not configured" in out.getvalue()


async def test_llm_toggle_and_strategy_output(state, engine, out):
    controller = PetController(state=state, engine=engine, strategy=MockStrategy(action="freeze", reason="huh"))
    simulator = PetSimulator(controller, out=out)

    await simulator.handle_input("bang")
    assert "Koji chooses: freeze" in out.getvalue()
    assert "Reason: huh" in out.getvalue()

    await simulator.handle_input("llm")
    assert "LLM disabled (deterministic mode)" in out.getvalue()
    await simulator.handle_input("llm")
    assert "LLM enabled" in out.getvalue()


async def test_fallback_prints_default_set(state, engine, out):
    controller = PetController(state=state, engine=engine, strategy=MockStrategy(action="dance"))
    simulator = PetSimulator(controller, out=out)

    await simulator.handle_input("bang")

    text = out.getvalue()
    assert "fallback" in text
    assert "Expression: perk_ears, Sound: whimper" in text


async def test_tick_reports_decay(simulator, out, clock):
    await simulator.handle_input("bang")
    clock.advance(6)

    await simulator.on_tick()

    assert "[decay] Mood decayed to cautious" in out.getvalue()


def test_help(simulator, out):
    simulator.print_help()

    assert "Add '!' for high intensity" in out.getvalue()


def test_load_env_file(tmp_path, monkeypatch):
    env = {"OLLAMA_URL": "http://already-set:11434"}
    monkeypatch.setattr(os, "environ", env)
    env_file = tmp_path / "koji.env"
    env_file.write_text("# comment\nKOJI_MODEL = phi3\nOLLAMA_URL=http://ignored\nnot a pair\n")

    load_env_file(str(env_file))

    assert env["KOJI_MODEL"] == "phi3"
    assert env["OLLAMA_URL"] == "http://already-set:11434"


def test_load_env_file_missing(tmp_path):
    load_env_file(str(tmp_path / "missing.env"))


class TestBuildConfig:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("KOJI_LLM_BACKEND", "OLLAMA_URL", "KOJI_MODEL", "GEMINI_MODEL_NAME"):
            monkeypatch.delenv(name, raising=False)

    def test_no_llm_flag(self):
        config = build_config(parse_args(["--no-llm"]))

        assert config.llm_backend == "none"

    def test_model_applies_to_ollama_by_default(self):
        config = build_config(parse_args(["--model", "phi3", "--ollama", "http://pi:11434/"]))

        assert config.ollama_model == "phi3"
        assert config.ollama_url == "http://pi:11434"

    def test_model_applies_to_gemini_backend(self):
        config = build_config(parse_args(["--backend", "gemini", "--model", "gemini-2.0-flash"]))

        assert config.gemini_model == "gemini-2.0-flash"
        assert config.ollama_model == "llama3.2:1b"

    def test_env_backend_picks_model_field(self, monkeypatch):
        monkeypatch.setenv("KOJI_LLM_BACKEND", "gemini")

        config = build_config(parse_args(["--model", "gemini-1.5-pro"]))

        assert config.gemini_model == "gemini-1.5-pro"


class TestBuildStrategy:
    def test_disabled_backend(self):
        assert build_strategy(PetConfig(llm_backend="none")) is None

    def test_unreachable_ollama(self):
        with patch("koji_simulator.OllamaClient.ping", side_effect=LLMClientError("refused")):
            assert build_strategy(PetConfig()) is None

    def test_reachable_ollama(self):
        with patch("koji_simulator.OllamaClient.ping", return_value=None), patch(
            "koji_simulator.OllamaClient.check_model", return_value=(True, ["phi3"])
        ):
            strategy = build_strategy(PetConfig(ollama_model="phi3"))

        assert isinstance(strategy, LLMBrain)
        assert strategy.model_name == "phi3"

    def test_gemini_without_api_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        assert build_strategy(PetConfig(llm_backend="gemini")) is None

    def test_gemini_with_api_key(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        with patch("koji_simulator.genai.configure") as configure, patch(
            "personality.brains.llm_client.genai.GenerativeModel"
        ), patch("personality.brains.llm_client.genai.get_model"):
            strategy = build_strategy(PetConfig(llm_backend="gemini"))

        configure.assert_called_once_with(api_key="test-key")
        assert strategy.model_name == "gemini-2.5-flash"

    def test_missing_ollama_model_still_connects(self, caplog):
        with patch("koji_simulator.OllamaClient.ping", return_value=None), patch(
            "koji_simulator.OllamaClient.check_model", return_value=(False, ["phi3"])
        ), caplog.at_level(logging.WARNING, logger="koji_simulator"):
            strategy = build_strategy(PetConfig(ollama_model="mistral"))

        assert isinstance(strategy, LLMBrain)
        assert "Model mistral not found in Ollama (available: phi3)" in caplog.text
        assert "ollama pull mistral" in caplog.text

    def test_model_listing_failure(self, caplog):
        with patch("koji_simulator.OllamaClient.ping", return_value=None), patch(
            "koji_simulator.OllamaClient.check_model", side_effect=LLMClientError("bad body")
        ), caplog.at_level(logging.WARNING, logger="koji_simulator"):
            assert build_strategy(PetConfig()) is None

        assert "Cannot list Ollama models: bad body" in caplog.text

    def test_circuit_breaker_counts_timeouts(self):
        with patch("koji_simulator.OllamaClient.ping", return_value=None), patch(
            "koji_simulator.OllamaClient.check_model", return_value=(True, ["llama3.2:1b"])
        ):
            strategy = build_strategy(PetConfig())

        limiter = strategy.rate_limiter
        for _ in range(limiter.failure_threshold):
            limiter.record_failure(TimeoutError())

        assert limiter.state == CircuitBreakerState.OPEN


async def test_main_rejects_malformed_env(monkeypatch, capsys):
    monkeypatch.setenv("KOJI_DECAY_TICK", "fast")

    assert await main(["--no-llm"]) == 2
    assert "Invalid configuration" in capsys.readouterr().err


class TestInputLoop:
    async def test_run_handles_lines_until_quit(self, simulator, out):
        with patch("builtins.input", side_effect=["bang", "quit"]):
            await asyncio.wait_for(run(simulator, decay_tick=60), 2)

        text = out.getvalue()
        assert "[event] loud_noise: curious -> startled" in text
        assert text.rstrip().endswith("Bye!")

    async def test_run_stops_at_end_of_input(self, simulator, out):
        with patch("builtins.input", side_effect=EOFError):
            await asyncio.wait_for(run(simulator, decay_tick=60), 2)

        assert "Bye!" not in out.getvalue()

    async def test_run_can_be_cancelled_while_reading(self, simulator):
        release = threading.Event()

        def blocking_input(prompt):
            release.wait()
            raise EOFError

        try:
            with patch("builtins.input", side_effect=blocking_input):
                with pytest.raises(asyncio.TimeoutError):
                    await asyncio.wait_for(run(simulator, decay_tick=60), 0.1)
        finally:
            release.set()

    async def test_reader_is_daemon_and_waits_for_ready(self):
        loop = asyncio.get_running_loop()
        lines = asyncio.Queue()
        ready = threading.Event()

        with patch("builtins.input", side_effect=["hello", EOFError]) as fake_input:
            reader = start_input_reader(loop, lines, ready)
            assert reader.daemon is True
            await asyncio.sleep(0.05)
            assert fake_input.call_count == 0

            ready.set()
            assert await asyncio.wait_for(lines.get(), 1) == "hello"
            ready.set()
            assert await asyncio.wait_for(lines.get(), 1) is None

        reader.join(1)
        assert not reader.is_alive()
