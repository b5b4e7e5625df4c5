"""Feature contracts shared by every subsystem module."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from nvim_python.core.config import Options
from nvim_python.enums import Feature

if TYPE_CHECKING:
    from nvim_python.host import Host

Payload = dict[str, Any]


@dataclass(frozen=True)
class ActivationContext:
    """What a payload builder may read: the options and the host."""

    options: Options
    host: Host


@dataclass(frozen=True)
class FeatureSpec:
    """One activatable subsystem.

    Fields:
        feature: enum key for the options toggle
        namespace: host plugin that must be loadable before any activation
        build: ActivationContext -> payload
        dispatch: (host, payload) -> None, hands the payload to the plugin
        description: one-line summary for CLI output
        plugin_name: name users know the plugin by, when it differs from
            ``namespace``
    """

    feature: Feature
    namespace: str
    build: Callable[[ActivationContext], Payload]
    dispatch: Callable[[Host, Payload], None]
    description: str = ""
    plugin_name: str = ""

    @property
    def display_name(self) -> str:
        return self.plugin_name or self.namespace


__all__ = ["ActivationContext", "FeatureSpec", "Payload"]
