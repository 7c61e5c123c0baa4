"""Unit tests for the visionary CLI."""

import base64
import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import click
import pytest
from click.testing import CliRunner, Result
from PIL import Image

from visionary.cli import cli
from visionary.cli.commands import parse_control
from visionary.cli.handlers import map_exception_to_exit
from visionary.cli.utils import EXIT_API_OR_NETWORK, EXIT_SUCCESS, EXIT_VALIDATION_OR_CONFIG
from visionary.core.image_gen import GenerationOutcome, GenerationStatus
from visionary.utils.exceptions import (
    APIError,
    ConfigurationError,
    GenerationInProgressError,
    NetworkError,
    ValidationError,
)

_PNG_BUF = io.BytesIO()
Image.new("RGB", (1, 1), color=(0, 0, 0)).save(_PNG_BUF, format="PNG")
MINIMAL_PNG = _PNG_BUF.getvalue()
PNG_DATA_URI = "data:image/png;base64," + base64.b64encode(MINIMAL_PNG).decode()

ENV = {"GEMINI_API_KEY": "test-key", "GOOGLE_API_KEY": ""}


def _outcome(status: GenerationStatus = GenerationStatus.SUCCEEDED, **kwargs) -> GenerationOutcome:
    defaults = {
        "model_used": "gemini-2.5-flash-image",
        "prompt_used": "a cat",
        "had_reference": False,
        "generation_time": 1.2,
        "data_uri": PNG_DATA_URI if status is GenerationStatus.SUCCEEDED else None,
    }
    defaults.update(kwargs)
    return GenerationOutcome(status=status, **defaults)


def _run_cli(*args: str, env: dict | None = None) -> Result:
    """Invoke visionary generate with given args; returns Click's Result."""
    runner = CliRunner()
    return runner.invoke(cli, ["generate", *args], env=ENV if env is None else env)


@pytest.fixture
def mock_client():
    """Patch the client the controller builds; yields the client instance."""
    with patch("visionary.core.controller.GeminiImageClient") as client_cls:
        client = MagicMock()
        client.generate.return_value = _outcome()
        client_cls.return_value = client
        yield client


@pytest.mark.unit
class TestParseControl:
    def test_case_insensitive_dimension(self):
        assert parse_control("cameraangle = Close-up") == ("CameraAngle", "Close-up")

    def test_value_may_contain_equals(self):
        assert parse_control("Style=a=b") == ("Style", "a=b")

    def test_missing_equals(self):
        with pytest.raises(click.BadParameter):
            parse_control("Style")

    def test_unknown_dimension(self):
        with pytest.raises(click.BadParameter):
            parse_control("Weather=Rain")


@pytest.mark.unit
class TestGenerateCommand:
    def test_success_saves_file_and_prints_path(self, mock_client, tmp_path: Path):
        out = tmp_path / "out.png"
        result = _run_cli("--prompt", "a cat", "--out", str(out), "-q")
        assert result.exit_code == EXIT_SUCCESS, result.output
        assert str(out) in result.output
        assert out.read_bytes() == MINIMAL_PNG

    def test_success_rich_output(self, mock_client, tmp_path: Path):
        out = tmp_path / "out.png"
        result = _run_cli("--prompt", "a cat", "--out", str(out))
        assert result.exit_code == EXIT_SUCCESS, result.output
        assert out.exists()

    def test_prompt_composition(self, mock_client, tmp_path: Path):
        result = _run_cli(
            "-p",
            "at dusk",
            "-a",
            "cyber samurai",
            "-c",
            "Lighting=Neon Glow",
            "-c",
            "style=Anime",
            "--seed",
            "7",
            "-m",
            "gemini-3-pro-image-preview",
            "-o",
            str(tmp_path / "o.png"),
            "-q",
        )
        assert result.exit_code == EXIT_SUCCESS, result.output
        args, kwargs = mock_client.generate.call_args
        assert args[0] == (
            "a futuristic robotic samurai with neon pink glowing edges and a translucent katana, "
            "Anime Style, Neon Glow Lighting, at dusk"
        )
        assert kwargs["model"] == "gemini-3-pro-image-preview"
        assert kwargs["seed"] == 7
        assert kwargs["reference_images"] == ()

    def test_reference_attached(self, mock_client, tmp_path: Path):
        ref = tmp_path / "ref.png"
        ref.write_bytes(MINIMAL_PNG)
        result = _run_cli("-p", "x", "-r", str(ref), "-o", str(tmp_path / "o.png"), "-q")
        assert result.exit_code == EXIT_SUCCESS, result.output
        (image,) = mock_client.generate.call_args.kwargs["reference_images"]
        assert image.mime_type == "image/jpeg"
        assert image.data.startswith("data:image/png;base64,")

    def test_nothing_to_generate(self, mock_client):
        result = _run_cli("-q")
        assert result.exit_code == EXIT_VALIDATION_OR_CONFIG
        assert "field: prompt" in result.output
        mock_client.generate.assert_not_called()

    def test_unknown_asset(self, mock_client):
        result = _run_cli("-a", "Nobody", "-q")
        assert result.exit_code == EXIT_VALIDATION_OR_CONFIG
        assert "Unknown DNA fragment" in result.output

    def test_bad_control_is_usage_error(self, mock_client):
        result = _run_cli("-p", "x", "-c", "Weather=Rain")
        assert result.exit_code == 2
        mock_client.generate.assert_not_called()

    def test_missing_api_key(self, mock_client):
        result = _run_cli("-p", "x", "-q", env={"GEMINI_API_KEY": "", "GOOGLE_API_KEY": ""})
        assert result.exit_code == EXIT_VALIDATION_OR_CONFIG
        assert "API key" in result.output

    def test_api_key_option(self, mock_client, tmp_path: Path):
        result = _run_cli(
            "-p",
            "x",
            "--api-key",
            "from-flag",
            "-o",
            str(tmp_path / "o.png"),
            "-q",
            env={"GEMINI_API_KEY": "", "GOOGLE_API_KEY": ""},
        )
        assert result.exit_code == EXIT_SUCCESS, result.output

    def test_failed_outcome(self, mock_client):
        mock_client.generate.return_value = _outcome(
            GenerationStatus.FAILED, error=APIError("Rate limit exceeded.")
        )
        result = _run_cli("-p", "x", "-q")
        assert result.exit_code == EXIT_API_OR_NETWORK
        assert "Rate limit exceeded." in result.output

    def test_empty_outcome(self, mock_client):
        mock_client.generate.return_value = _outcome(GenerationStatus.EMPTY)
        result = _run_cli("-p", "x", "-q")
        assert result.exit_code == EXIT_API_OR_NETWORK
        assert "no image" in result.output

    def test_negative_seed_rejected(self, mock_client):
        result = _run_cli("-p", "x", "--seed", "-1")
        assert result.exit_code == 2


@pytest.mark.unit
class TestUiCommand:
    @patch("visionary.ui.gradio_app.launch")
    def test_launch_args(self, mock_launch: MagicMock):
        runner = CliRunner()
        result = runner.invoke(cli, ["ui", "--port", "9000", "--host", "0.0.0.0", "--share"])
        assert result.exit_code == 0, result.output
        mock_launch.assert_called_once_with(server_name="0.0.0.0", server_port=9000, share=True)

    @patch("visionary.ui.gradio_app.launch")
    def test_share_from_env(self, mock_launch: MagicMock):
        runner = CliRunner()
        result = runner.invoke(cli, ["ui"], env={"VISIONARY_UI_SHARE": "true"})
        assert result.exit_code == 0, result.output
        assert mock_launch.call_args.kwargs["share"] is True


@pytest.mark.unit
class TestExitMapping:
    @pytest.mark.parametrize(
        "exc,code",
        [
            (ValidationError("bad", field="prompt"), EXIT_VALIDATION_OR_CONFIG),
            (ConfigurationError("no key"), EXIT_VALIDATION_OR_CONFIG),
            (FileNotFoundError("gone"), EXIT_VALIDATION_OR_CONFIG),
            (APIError("down"), EXIT_API_OR_NETWORK),
            (NetworkError("offline"), EXIT_API_OR_NETWORK),
            (GenerationInProgressError("busy"), EXIT_API_OR_NETWORK),
            (RuntimeError("boom"), EXIT_API_OR_NETWORK),
        ],
    )
    def test_codes(self, exc, code):
        assert map_exception_to_exit(exc)[0] == code

    def test_validation_message_includes_field(self):
        assert map_exception_to_exit(ValidationError("bad", field="seed"))[1] == "bad (field: seed)"
