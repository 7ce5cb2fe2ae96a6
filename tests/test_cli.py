"""Tests for the maidy command."""

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from maidy.cli import cli
from maidy.core.substitution import ERROR_MARKER
from tests.fakes import FakeAsciiRenderer, FakeRenderer

DIAGRAM = "flowchart TD\nA-->B"

DOCUMENT = f"""First paragraph.

```mermaid
{DIAGRAM}
```

Second paragraph.
"""


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every command away from any maidy.toml in the checkout."""
    monkeypatch.chdir(tmp_path)


class TestRawRendering:
    """Tests for rendering a bare diagram."""

    def test__svg_from_stdin__printed(self) -> None:
        renderer = FakeRenderer()
        runner = CliRunner()

        with patch("maidy.cli.KrokiRenderer", return_value=renderer):
            result = runner.invoke(cli, [], input=DIAGRAM)

        assert result.exit_code == 0
        assert f"<svg>{DIAGRAM}</svg>" in result.output
        assert renderer.calls[0][0] == DIAGRAM

    def test__default_theme__applied(self) -> None:
        renderer = FakeRenderer()

        with patch("maidy.cli.KrokiRenderer", return_value=renderer):
            CliRunner().invoke(cli, ["-f", "svg"], input=DIAGRAM)

        theme = renderer.calls[0][1]
        assert theme is not None
        assert theme.bg == "#0d1117"

    def test__unknown_theme__warns_and_renders(self) -> None:
        renderer = FakeRenderer()

        with patch("maidy.cli.KrokiRenderer", return_value=renderer):
            result = CliRunner().invoke(cli, ["-t", "neon"], input=DIAGRAM)

        assert result.exit_code == 0
        assert 'Theme "neon" not found, using default' in result.output
        assert renderer.calls[0][1] is None

    def test__render_failure__exits_with_error(self) -> None:
        renderer = FakeRenderer(fail_on={"nonsense"})

        with patch("maidy.cli.KrokiRenderer", return_value=renderer):
            result = CliRunner().invoke(cli, [], input="nonsense")

        assert result.exit_code == 1
        assert "Error rendering diagram: Parse error" in result.output

    def test__ascii_format__uses_ascii_renderer(self) -> None:
        ascii_renderer = FakeAsciiRenderer()

        with (
            patch("maidy.cli.MermaidAsciiRenderer", return_value=ascii_renderer),
            patch("maidy.cli.KrokiRenderer") as kroki,
        ):
            result = CliRunner().invoke(cli, ["-f", "ascii", "-t", "neon"], input=DIAGRAM)

        assert result.exit_code == 0
        assert "| A |" in result.output
        assert ascii_renderer.calls == [DIAGRAM]
        kroki.assert_not_called()
        assert "not found" not in result.output

    def test__input_file__read(self, tmp_path: Path) -> None:
        input_file = tmp_path / "diagram.mmd"
        input_file.write_text(DIAGRAM)

        with patch("maidy.cli.KrokiRenderer", return_value=FakeRenderer()):
            result = CliRunner().invoke(cli, ["-i", str(input_file)])

        assert result.exit_code == 0
        assert f"<svg>{DIAGRAM}</svg>" in result.output

    def test__missing_input_file__exits_with_error(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["-i", str(tmp_path / "missing.mmd")])

        assert result.exit_code == 1
        assert "Cannot read input" in result.output

    def test__output_file__written_with_confirmation(self, tmp_path: Path) -> None:
        output_file = tmp_path / "out.svg"

        with patch("maidy.cli.KrokiRenderer", return_value=FakeRenderer()):
            result = CliRunner().invoke(cli, ["-o", str(output_file)], input=DIAGRAM)

        assert result.exit_code == 0
        assert output_file.read_text() == f"<svg>{DIAGRAM}</svg>"
        assert f"Output written to: {output_file}" in result.output


class TestMarkdownConversion:
    """Tests for -m/--markdown."""

    def test__html_format__full_document(self) -> None:
        with patch("maidy.cli.KrokiRenderer", return_value=FakeRenderer()):
            result = CliRunner().invoke(cli, ["-m", "-f", "html"], input=DOCUMENT)

        assert result.exit_code == 0
        assert "<!DOCTYPE html>" in result.output
        first = result.output.index("<p>First paragraph.</p>")
        diagram = result.output.index(f'<div class="mermaid-diagram"><svg>{DIAGRAM}</svg></div>')
        second = result.output.index("<p>Second paragraph.</p>")
        assert first < diagram < second

    def test__default_svg_format__also_converts(self) -> None:
        with patch("maidy.cli.KrokiRenderer", return_value=FakeRenderer()):
            result = CliRunner().invoke(cli, ["-m"], input=DOCUMENT)

        assert result.exit_code == 0
        assert "<!DOCTYPE html>" in result.output

    def test__malformed_diagram__marker_and_success(self) -> None:
        """A broken diagram does not fail the conversion."""
        renderer = FakeRenderer(fail_on={DIAGRAM})

        with patch("maidy.cli.KrokiRenderer", return_value=renderer):
            result = CliRunner().invoke(cli, ["-m", "-f", "html"], input=DOCUMENT)

        assert result.exit_code == 0
        first = result.output.index("<p>First paragraph.</p>")
        marker = result.output.index(ERROR_MARKER)
        second = result.output.index("<p>Second paragraph.</p>")
        assert first < marker < second
        assert "Error rendering mermaid block 0" in result.output

    def test__config_document_options__applied(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text('[document]\ntitle = "Design"\n')

        with patch("maidy.cli.KrokiRenderer", return_value=FakeRenderer()):
            result = CliRunner().invoke(cli, ["-m", "-c", str(config_file)], input=DOCUMENT)

        assert result.exit_code == 0
        assert "<title>Design</title>" in result.output

    def test__fragment_config__no_envelope(self, tmp_path: Path) -> None:
        (tmp_path / "maidy.toml").write_text("[document]\ninclude_styles = false\n")

        with patch("maidy.cli.KrokiRenderer", return_value=FakeRenderer()):
            result = CliRunner().invoke(cli, ["-m"], input=DOCUMENT)

        assert result.exit_code == 0
        assert "<!DOCTYPE html>" not in result.output
        assert "<p>First paragraph.</p>" in result.output


class TestValidation:
    """Tests for option validation before input is read."""

    def test__html_without_markdown__fails_before_reading(self) -> None:
        with patch("maidy.cli._read_input") as read_input:
            result = CliRunner().invoke(cli, ["-f", "html"], input=DIAGRAM)

        assert result.exit_code == 1
        assert "HTML format requires markdown mode" in result.output
        read_input.assert_not_called()

    def test__ascii_with_markdown__fails(self) -> None:
        with patch("maidy.cli._read_input") as read_input:
            result = CliRunner().invoke(cli, ["-m", "-f", "ascii"], input=DOCUMENT)

        assert result.exit_code == 1
        assert "Markdown mode does not support ASCII format" in result.output
        read_input.assert_not_called()

    def test__invalid_format__fails(self) -> None:
        result = CliRunner().invoke(cli, ["-f", "png"], input=DIAGRAM)

        assert result.exit_code == 1
        assert 'Invalid format "png"' in result.output

    def test__blank_input__fails_without_rendering(self) -> None:
        with patch("maidy.cli.KrokiRenderer") as kroki:
            result = CliRunner().invoke(cli, [], input="  \n\t\n")

        assert result.exit_code == 1
        assert "No input provided" in result.output
        kroki.assert_not_called()

    def test__invalid_config__fails(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.toml"
        config_file.write_text("[render]\ntheme = 3\n")

        result = CliRunner().invoke(cli, ["-c", str(config_file)], input=DIAGRAM)

        assert result.exit_code == 1
        assert "render.theme must be a string" in result.output

    @pytest.mark.parametrize("extra", [[], ["-m"]])
    def test__malformed_kroki_url__fails_cleanly(self, extra: list[str]) -> None:
        """A bad --kroki-url is an option error, not a traceback."""
        with patch("maidy.cli._read_input") as read_input:
            result = CliRunner().invoke(cli, ["--kroki-url", "http://[::1", *extra], input=DOCUMENT)

        assert result.exit_code == 1
        assert "Error: kroki.url is not a valid URL" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
        read_input.assert_not_called()


class TestInformationalOptions:
    """Tests for --help and --list-themes."""

    def test__help__exits_zero(self) -> None:
        result = CliRunner().invoke(cli, ["-h"])

        assert result.exit_code == 0
        assert "--list-themes" in result.output
        assert "--markdown" in result.output

    def test__list_themes__prints_names(self) -> None:
        result = CliRunner().invoke(cli, ["--list-themes"])

        assert result.exit_code == 0
        assert "Available themes:" in result.output
        assert "  - github-dark" in result.output
        assert "  - dracula" in result.output

    def test__list_themes__includes_config_themes(self, tmp_path: Path) -> None:
        (tmp_path / "maidy.toml").write_text('[themes.brand]\nbg = "#000"\nfg = "#fff"\n')

        result = CliRunner().invoke(cli, ["-l"])

        assert result.exit_code == 0
        assert "  - brand" in result.output

    def test__list_themes__broken_config_lists_builtins(self, tmp_path: Path) -> None:
        """A bad maidy.toml only costs the config themes, not the listing."""
        (tmp_path / "maidy.toml").write_text("[render\n")

        result = CliRunner().invoke(cli, ["-l"])

        assert result.exit_code == 0
        assert "  - github-dark" in result.output
        assert "Ignoring configuration: Invalid TOML" in result.output

    def test__list_themes__ignores_invalid_format(self) -> None:
        result = CliRunner().invoke(cli, ["-l", "-f", "png"])

        assert result.exit_code == 0
