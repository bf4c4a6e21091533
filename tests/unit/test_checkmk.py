"""
Unit tests for Checkmk plugin deployment.
"""

import os
import stat

import pytest

from hostprep.cli.lib.checkmk import deploy_plugins, render_plugins, run_plugin
from hostprep.cli.lib.errors import StepAborted


class TestRenderPlugins:
    """Tests for render_plugins function."""

    @pytest.mark.unit
    def test_logins_plugin(self):
        script = render_plugins()["mk-logins"]

        assert script.startswith("#!/bin/bash\n")
        assert 'echo "<<<logins>>>"' in script
        assert "who | wc -l" in script

    @pytest.mark.unit
    def test_passwd_plugin_thresholds(self):
        script = render_plugins(warn_days=7, crit_days=2)["mk-passwd"]

        assert 'echo "<<<local:sep(0)>>>"' in script
        assert "WARN=7\n" in script
        assert "CRIT=2\n" in script
        assert '[[ "$uid" -lt 1000 ]] && continue' in script
        assert '"$expire" == "never"' in script
        assert "passwd_$user days_left=$days_left" in script
        assert script.endswith("done < /etc/passwd\n")

    @pytest.mark.unit
    def test_invalid_thresholds(self):
        with pytest.raises(ValueError, match="must not exceed"):
            render_plugins(warn_days=1, crit_days=3)


class TestDeployPlugins:
    """Tests for deploy_plugins and run_plugin functions."""

    @pytest.mark.unit
    def test_deploy(self, temp_dir):
        plugin_dir = temp_dir / "check_mk_agent" / "plugins"

        deployed = deploy_plugins(plugin_dir)

        assert [p.name for p in deployed] == ["mk-logins", "mk-passwd"]
        for path in deployed:
            assert stat.S_IMODE(os.stat(path).st_mode) == 0o755

    @pytest.mark.unit
    def test_redeploy_overwrites(self, temp_dir):
        (temp_dir / "mk-passwd").write_text("old", encoding="utf-8")

        deploy_plugins(temp_dir, warn_days=5)

        assert "WARN=5" in (temp_dir / "mk-passwd").read_text(encoding="utf-8")

    @pytest.mark.unit
    def test_run_plugin(self, fake_commands):
        fake_commands.set("/plugins/mk-logins", stdout="<<<logins>>>\n3\n")

        assert run_plugin("/plugins/mk-logins") == "<<<logins>>>\n3"

    @pytest.mark.unit
    def test_run_plugin_fails(self, fake_commands):
        fake_commands.set("/plugins/mk-passwd", returncode=1, stderr="chage: not found")

        with pytest.raises(StepAborted, match="plugin mk-passwd failed"):
            run_plugin("/plugins/mk-passwd")
