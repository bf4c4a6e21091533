"""
Checkmk agent plugin deployment.

Two local plugins are rendered from templates and installed into the agent's
plugin directory:

- mk-logins: number of logged-in sessions (section `logins`)
- mk-passwd: password expiry of human accounts (UID >= 1000) as local checks
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Union

from jinja2 import Template

from hostprep.cli.lib.command import OnError, run

LOG = logging.getLogger(__name__)

PathLike = Union[str, Path]

TEMPLATE_VERSION = "1.0.0"

LOGINS_PLUGIN_TEMPLATE = """#!/bin/bash
# Managed by hostprep (template {{ template_version }})
# Checkmk plugin to count logged-in users

if type who >/dev/null 2>&1; then
    echo "<<<logins>>>"
    who | wc -l
fi
"""

PASSWD_PLUGIN_TEMPLATE = """#!/bin/bash
# Managed by hostprep (template {{ template_version }})
# Checkmk plugin to monitor password expiration

echo "<<<local:sep(0)>>>"

WARN={{ warn_days }}
CRIT={{ crit_days }}

while IFS=: read -r user _ uid _ _ _ _; do
    [[ "$uid" =~ ^[0-9]+$ ]] || continue
    [[ "$uid" -lt {{ min_uid }} ]] && continue

    expire=$(chage -l "$user" 2>/dev/null | awk -F": " '/Password expires/ {print $2}')
    [[ -z "$expire" || "$expire" == "never" ]] && continue

    days_left=$(( ( $(date -d "$expire" +%s) - $(date +%s) ) / 86400 ))

    if [ "$days_left" -le $CRIT ]; then
        state=2
    elif [ "$days_left" -le $WARN ]; then
        state=1
    else
        state=0
    fi

    echo "$state passwd_$user days_left=$days_left Password for user $user expires in $days_left day(s)"
done < /etc/passwd
"""

PLUGIN_TEMPLATES = {
    "mk-logins": LOGINS_PLUGIN_TEMPLATE,
    "mk-passwd": PASSWD_PLUGIN_TEMPLATE,
}


def render_plugins(warn_days: int = 3, crit_days: int = 1, min_uid: int = 1000) -> Dict[str, str]:
    """
    Render the plugin scripts.

    Args:
        warn_days: Days left at or below which the password check warns
        crit_days: Days left at or below which the password check is critical
        min_uid: Lowest UID treated as a human account

    Returns:
        Mapping of plugin file name to script content
    """
    if crit_days > warn_days:
        raise ValueError(f"crit_days ({crit_days}) must not exceed warn_days ({warn_days})")

    return {
        name: Template(source, keep_trailing_newline=True).render(
            template_version=TEMPLATE_VERSION,
            warn_days=warn_days,
            crit_days=crit_days,
            min_uid=min_uid,
        )
        for name, source in PLUGIN_TEMPLATES.items()
    }


def deploy_plugins(plugin_dir: PathLike, warn_days: int = 3, crit_days: int = 1) -> List[Path]:
    """
    Write the plugins into the agent plugin directory and make them executable.

    Returns:
        Paths of the deployed plugins
    """
    plugin_dir = Path(plugin_dir)
    plugin_dir.mkdir(parents=True, exist_ok=True)

    deployed = []
    for name, content in render_plugins(warn_days, crit_days).items():
        path = plugin_dir / name
        path.write_text(content, encoding="utf-8")
        os.chmod(path, 0o755)
        LOG.debug("Deployed %s", path)
        deployed.append(path)
    return deployed


def run_plugin(path: PathLike) -> str:
    """
    Execute a deployed plugin once.

    Returns:
        The plugin output

    Raises:
        StepAborted: If the plugin exits non-zero
    """
    result = run([str(path)], on_error=OnError.REPORT, error=f"plugin {Path(path).name}")
    return (result.stdout or "").rstrip()
