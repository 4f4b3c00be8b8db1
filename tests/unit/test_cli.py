"""Tests for the relay-llm command line."""

import runpy
import warnings

import pytest

from helpers.streaming_mocks import FakeTransport, json_response
from relay_llm_sdk import cli
from relay_llm_sdk.api.client import RelayLLMClient
from relay_llm_sdk.models.generation import BackendType


@pytest.mark.unit
class TestParser:

    def test_send_defaults_to_openrouter(self):
        args = cli.build_parser().parse_args(["send", "Hello"])
        assert args.command == "send"
        assert args.prompt == "Hello"
        assert args.backend == "openrouter"

    def test_stream_with_kobold_options(self):
        args = cli.build_parser().parse_args(
            ["stream", "Once upon", "--backend", "kobold", "--port", "5002", "--max-length", "50"]
        )
        assert args.backend == "kobold"
        assert args.port == 5002
        assert args.max_length == 50

    def test_unknown_backend_is_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["connect", "--backend", "ollama"])

    def test_import_card(self):
        args = cli.build_parser().parse_args(
            ["import-card", "https://chub.ai/characters/a/b", "--output", "card.png"]
        )
        assert args.url == "https://chub.ai/characters/a/b"
        assert args.output == "card.png"

    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_script_exit_status_follows_main(self, monkeypatch):
        monkeypatch.setattr("sys.argv", ["relay-llm"])
        with warnings.catch_warnings():
            # The module is already imported by this test file.
            warnings.simplefilter("ignore", RuntimeWarning)
            with pytest.raises(SystemExit) as exc_info:
                runpy.run_module("relay_llm_sdk.cli", run_name="__main__")
        assert exc_info.value.code == 1


@pytest.mark.unit
class TestBuildConfig:

    def test_openrouter_config(self):
        config = cli.build_config("openrouter", "Hi", model="anthropic/claude-3-haiku", temperature=0.2)
        assert config.model == "anthropic/claude-3-haiku"
        assert config.temperature == 0.2
        assert [(m.role, m.content) for m in config.messages] == [("user", "Hi")]

    def test_kobold_config(self):
        config = cli.build_config("kobold", "User: Hi\nBot:", max_length=32)
        assert config.prompt == "User: Hi\nBot:"
        assert config.max_length == 32
        assert config.stop == ("\nUser:", "\nBot:")

    def test_build_client(self):
        assert cli.build_client("kobold", "box", 6000).backend == BackendType.KOBOLD
        assert cli.build_client("openrouter").backend == BackendType.OPENROUTER


@pytest.mark.unit
class TestCommands:

    def test_connect_prints_model(self, monkeypatch, capsys):
        transport = FakeTransport(responses={"/api/v1/model": json_response({"result": "koboldcpp/tiny"})})
        monkeypatch.setattr(cli, "build_client",
                            lambda backend, host=None, port=None: RelayLLMClient.kobold(transport=transport))

        assert cli.main(["connect", "--backend", "kobold"]) == 0
        assert "Connected to kobold: koboldcpp/tiny" in capsys.readouterr().out

    def test_provider_errors_are_reported(self, monkeypatch, capsys):
        transport = FakeTransport()
        monkeypatch.setattr(cli, "build_client",
                            lambda backend, host=None, port=None: RelayLLMClient.kobold(transport=transport))

        assert cli.main(["connect", "--backend", "kobold"]) == 1
        assert "Error: Server error (404)" in capsys.readouterr().out
