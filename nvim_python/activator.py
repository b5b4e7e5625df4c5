"""Setup entry point: merge options, gate on host plugins, activate features.

Sequencing is fixed:
  1. every required host plugin must load, otherwise nothing is activated
  2. missing core tools produce one warning, activation continues
  3. enabled features are built and dispatched in ``FEATURE_ORDER``, each in
     its own failure boundary
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from nvim_python.core.config import Options, resolve_options
from nvim_python.core.notify import Notifier
from nvim_python.core.probe import (
    DependencyStatus,
    detect_package_manager,
    probe,
    remediation_message,
)
from nvim_python.enums import FEATURE_ORDER, Feature, SetupStatus
from nvim_python.features import (
    FEATURES,
    PLUGIN_NAMES,
    REQUIRED_PLUGINS,
    ActivationContext,
)
from nvim_python.host import Host, ImportHost

logger = logging.getLogger(__name__)


@dataclass
class SetupResult:
    status: SetupStatus
    options: Options | None = None
    dependencies: DependencyStatus | None = None
    missing_plugins: list[str] = field(default_factory=list)
    activated: list[Feature] = field(default_factory=list)
    skipped: list[Feature] = field(default_factory=list)
    failed: dict[Feature, str] = field(default_factory=dict)
    ignored_options: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == SetupStatus.SUCCESS and not self.failed

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": str(self.status),
            "options": self.options.to_dict() if self.options else None,
            "dependencies": self.dependencies.as_dict() if self.dependencies else None,
            "missing_plugins": list(self.missing_plugins),
            "activated": [str(f) for f in self.activated],
            "skipped": [str(f) for f in self.skipped],
            "failed": {str(f): err for f, err in self.failed.items()},
            "ignored_options": list(self.ignored_options),
        }


def missing_host_plugins(host: Host) -> list[str]:
    """Required plugin namespaces the host cannot load."""
    missing = []
    for namespace in REQUIRED_PLUGINS:
        try:
            host.require(namespace)
        except Exception as exc:  # any load failure counts as missing
            logger.debug("Host plugin %s not loadable: %s", namespace, exc)
            missing.append(namespace)
    return missing


def _requirement_message(missing: list[str]) -> str:
    *head, last = (PLUGIN_NAMES[ns] for ns in REQUIRED_PLUGINS)
    missing_names = ", ".join(PLUGIN_NAMES.get(ns, ns) for ns in missing)
    return (
        f"nvim-python requires: {', '.join(head)}, and {last} "
        f"(missing: {missing_names})"
    )


def activate(
    options: Options,
    host: Host,
    notifier: Notifier | None = None,
) -> SetupResult:
    """Activate every enabled feature for already-resolved ``options``."""
    notifier = notifier or Notifier(host)
    result = SetupResult(status=SetupStatus.SUCCESS, options=options)

    missing = missing_host_plugins(host)
    if missing:
        result.status = SetupStatus.MISSING_HOST_PLUGIN
        result.missing_plugins = missing
        notifier.error(_requirement_message(missing))
        return result

    deps = probe(options)
    result.dependencies = deps
    if not deps.core_ok:
        result.status = SetupStatus.MISSING_DEPENDENCY
        notifier.warn(remediation_message(deps, detect_package_manager()))

    ctx = ActivationContext(options=options, host=host)
    for feature in FEATURE_ORDER:
        if not options.enabled(feature):
            result.skipped.append(feature)
            continue
        spec = FEATURES[feature]
        try:
            spec.dispatch(host, spec.build(ctx))
        except Exception as exc:  # one subsystem must not take the others down
            logger.debug("Activation of %s failed", feature, exc_info=True)
            result.failed[feature] = f"{type(exc).__name__}: {exc}"
            notifier.warn(f"{spec.description} ({feature}) failed to activate: {exc}")
            continue
        result.activated.append(feature)
        logger.debug("Activated %s via %s", feature, spec.namespace)

    return result


def setup(
    overrides: Mapping[str, Any] | None = None,
    *,
    host: Host | None = None,
    notifier: Notifier | None = None,
) -> SetupResult:
    """Merge ``overrides`` over the defaults and activate.

    Never raises to the caller: problems come back in the ``SetupResult``
    and are surfaced through the notifier.
    """
    host = host if host is not None else ImportHost()
    notifier = notifier or Notifier(host)

    rejected: list[str] = []
    options = resolve_options(overrides, rejected)
    if rejected:
        notifier.warn(f"Ignoring unknown or invalid options: {', '.join(rejected)}")

    result = activate(options, host, notifier)
    result.ignored_options = rejected
    return result


__all__ = [
    "SetupResult",
    "activate",
    "missing_host_plugins",
    "setup",
]
