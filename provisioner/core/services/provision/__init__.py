"""
Provisioning service — package re-exports.

Layers, leaf to root::

    detection      read-only winget and binary probes
    execution      downloads, bootstrap, package installs
    steps          the installation step registry
    orchestration  Run-Gate and the provisioning run

    from provisioner.core.services.provision import run_provisioning
"""

# ── L3: Detection ──
from provisioner.core.services.provision.detection.binary_check import check_binary  # noqa: F401
from provisioner.core.services.provision.detection.winget_probe import (  # noqa: F401
    is_package_installed,
    probe_version,
)

# ── L4: Execution ──
from provisioner.core.services.provision.execution.bootstrap import (  # noqa: F401
    bootstrap_package_manager,
)
from provisioner.core.services.provision.execution.winget_export import (  # noqa: F401
    export_installed_packages,
)
from provisioner.core.services.provision.execution.winget_install import (  # noqa: F401
    install_package,
)

# ── Steps ──
from provisioner.core.services.provision.steps.registry import STEPS, get_step  # noqa: F401

# ── L5: Orchestration ──
from provisioner.core.services.provision.orchestration.orchestrator import (  # noqa: F401
    run_provisioning,
)
from provisioner.core.services.provision.orchestration.run_gate import (  # noqa: F401
    RunGate,
    compute_fingerprint,
)
