"""Tests for the command-line interface."""

import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from urldedupe import __version__
from urldedupe.cli import EXIT_CONFIG_ERROR, EXIT_IO_ERROR, app
from urldedupe.core.exceptions import UpdateCheckError
from urldedupe.core.updates import UpdateStatus


URLS = "\n".join([
    "http://a.com/x?b=2&a=1",
    "http://a.com/x?a=9&b=8",
    "",
    "http://a.com/page/42",
    "http://a.com/page/99",
    "http://a.com/img.png",
    "http://a.com/en/home",
    "http://a.com/fr/home",
]) + "\n"


class TestRunCommand(unittest.TestCase):
    """Test suite for `urldedupe run`."""

    def setUp(self):
        """Set up runner and temporary directory."""
        self.runner = CliRunner()
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        patcher = patch("urldedupe.cli.find_default_config", return_value=None)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        """Clean up temporary directory."""
        self.temp_dir.cleanup()

    def invoke(self, *args):
        return self.runner.invoke(app, ["run", *args], input=URLS)

    def test_default_options(self):
        """Test plain deduplication from stdin to stdout."""
        result = self.invoke()
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.stdout.splitlines(), [
            "http://a.com/x?b=2&a=1",
            "http://a.com/page/42",
            "http://a.com/page/99",
            "http://a.com/img.png",
            "http://a.com/en/home",
            "http://a.com/fr/home",
        ])

    def test_normalization_flags(self):
        """Test regex, language and extension flags together."""
        result = self.invoke("-r", "-l", "--filter-extensions", "png")
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.stdout.splitlines(), [
            "http://a.com/x?b=2&a=1",
            "http://a.com/page/42",
            "http://a.com/en/home",
        ])

    def test_query_strings_only_short_flag(self):
        result = self.invoke("-qs")
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.stdout.splitlines(), ["http://a.com/x?b=2&a=1"])

    def test_match_extensions(self):
        result = self.invoke("-me", "png", "-fe", "png")
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.stdout.splitlines(), ["http://a.com/img.png"])

    def test_mode_presets(self):
        result = self.invoke("--mode", "s")
        self.assertEqual(result.exit_code, 0)
        self.assertNotIn("http://a.com/img.png", result.stdout)
        self.assertNotIn("http://a.com/page/99", result.stdout)

    def test_file_input_and_output(self):
        """Test reading --urls and writing --output."""
        input_path = self.root / "urls.txt"
        output_path = self.root / "unique.txt"
        input_path.write_text(URLS)

        result = self.runner.invoke(app, ["run", "-u", str(input_path), "-o", str(output_path)])

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(output_path.read_text().splitlines()[0], "http://a.com/x?b=2&a=1")
        self.assertEqual(len(output_path.read_text().splitlines()), 6)

    def test_config_file(self):
        """Test that config values apply and flags override them."""
        config_path = self.root / "config.yaml"
        config_path.write_text("regex_normalize: true\nfilter_extensions: [html]\n")

        result = self.invoke("-c", str(config_path), "-fe", "png")

        self.assertEqual(result.exit_code, 0)
        lines = result.stdout.splitlines()
        self.assertNotIn("http://a.com/page/99", lines)
        self.assertNotIn("http://a.com/img.png", lines)

    def test_no_flag_overrides_config_file(self):
        """Test that --no-query-strings-only beats query_string_only: true."""
        config_path = self.root / "config.yaml"
        config_path.write_text("query_string_only: true\n")

        with_file = self.invoke("-c", str(config_path))
        overridden = self.invoke("-c", str(config_path), "--no-query-strings-only")

        self.assertEqual(with_file.stdout.splitlines(), ["http://a.com/x?b=2&a=1"])
        self.assertEqual(overridden.exit_code, 0)
        self.assertEqual(len(overridden.stdout.splitlines()), 6)

    def test_missing_input_file(self):
        result = self.runner.invoke(app, ["run", "-u", str(self.root / "missing.txt")])
        self.assertEqual(result.exit_code, EXIT_IO_ERROR)

    def test_missing_input_does_not_create_output(self):
        output_path = self.root / "out.txt"
        self.runner.invoke(app, ["run", "-u", str(self.root / "missing.txt"), "-o", str(output_path)])
        self.assertFalse(output_path.exists())

    def test_malformed_config(self):
        config_path = self.root / "config.yaml"
        config_path.write_text("regex_normalize: [oops\n")
        result = self.invoke("-c", str(config_path))
        self.assertEqual(result.exit_code, EXIT_CONFIG_ERROR)
        self.assertIn("Configuration error", result.output)

    def test_unknown_mode(self):
        result = self.invoke("-m", "zz")
        self.assertEqual(result.exit_code, EXIT_CONFIG_ERROR)


class TestOtherCommands(unittest.TestCase):
    """Test suite for version, banner and update commands."""

    def setUp(self):
        """Set up runner."""
        self.runner = CliRunner()

    def test_version(self):
        result = self.runner.invoke(app, ["version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)

    def test_banner(self):
        result = self.runner.invoke(app, ["banner"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("urldedupe", result.output)

    def test_update_available(self):
        status = UpdateStatus(current=__version__, latest="v9.9.9")
        with patch("urldedupe.core.updates.check_for_updates", AsyncMock(return_value=status)):
            result = self.runner.invoke(app, ["update"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("v9.9.9", result.output)

    def test_update_latest(self):
        status = UpdateStatus(current=__version__, latest=__version__)
        with patch("urldedupe.core.updates.check_for_updates", AsyncMock(return_value=status)):
            result = self.runner.invoke(app, ["update"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("latest version", result.output)

    def test_update_failure(self):
        error = UpdateCheckError("Error fetching version: HTTP 404")
        with patch("urldedupe.core.updates.check_for_updates", AsyncMock(side_effect=error)):
            result = self.runner.invoke(app, ["update"])
        self.assertEqual(result.exit_code, 1)


if __name__ == "__main__":
    unittest.main()
