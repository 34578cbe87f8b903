"""
CI-agent step — run the agent's remote install script.

Only runs when the registration token is in the environment (usually
from the env override file).  The token reaches the script through
its environment, never its command line.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from provisioner.adapters.shell.powershell import run_powershell
from provisioner.core.errors import StepFailure
from provisioner.core.services.provision.steps.context import StepContext

logger = logging.getLogger(__name__)


def agent_install_script(script_url: str) -> str:
    """PowerShell that downloads and executes ``script_url``."""
    url = script_url.replace("'", "''")
    return (
        "Set-ExecutionPolicy Bypass -Scope Process -Force; "
        "[Net.ServicePointManager]::SecurityProtocol = "
        "[Net.SecurityProtocolType]::Tls12; "
        f"iex ((New-Object System.Net.WebClient).DownloadString('{url}'))"
    )


def install_agent(ctx: StepContext) -> dict[str, Any]:
    agent = ctx.settings.profile.agent
    token = os.environ.get(agent.token_env, "")
    if not token:
        return {
            "ok": True,
            "skipped": True,
            "message": f"{agent.token_env} is not set",
        }

    logger.info("Installing CI agent from %s", agent.script_url)
    result = run_powershell(
        ctx.runner,
        agent_install_script(agent.script_url),
        quiet=False,
        env={agent.script_token_env: token},
    )
    if not result.success:
        raise StepFailure("agent", f"install script failed (exit {result.exit_code})")
    return {"ok": True, "message": "CI agent installed"}
