"""
Integration tests for CLI checkmk commands.
"""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from hostprep.cli.cli import app
from hostprep.cli.lib.errors import StepAborted


class TestCheckmkDeploy:
    """Tests for checkmk deploy command."""

    @pytest.mark.integration
    def test_deploy_without_test_run(self, config_env):
        runner = CliRunner()
        result = runner.invoke(app, ["checkmk", "deploy", "--no-test"])

        assert result.exit_code == 0
        assert "Plugins deployed successfully!" in result.output
        assert (config_env / "plugins" / "mk-logins").exists()
        assert (config_env / "plugins" / "mk-passwd").exists()

    @pytest.mark.integration
    @patch("hostprep.cli.commands.checkmk.run_plugin")
    def test_deploy_runs_plugins(self, mock_run_plugin, config_env):
        mock_run_plugin.side_effect = ["<<<logins>>>\n2", StepAborted("plugin mk-passwd failed")]

        runner = CliRunner()
        result = runner.invoke(app, ["checkmk", "deploy"])

        assert result.exit_code == 0
        assert "Test mk-logins:" in result.output
        assert "<<<logins>>>\n2" in result.output
        assert "Warning: plugin mk-passwd failed" in result.output

    @pytest.mark.integration
    def test_custom_plugin_dir(self, config_env):
        target = config_env / "custom"

        runner = CliRunner()
        result = runner.invoke(app, ["checkmk", "deploy", "--no-test", "--plugin-dir", str(target)])

        assert result.exit_code == 0
        assert sorted(p.name for p in target.iterdir()) == ["mk-logins", "mk-passwd"]
