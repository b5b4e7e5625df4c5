"""Feature table: one ``FeatureSpec`` per subsystem, keyed by ``Feature``."""

from __future__ import annotations

from nvim_python.enums import FEATURE_ORDER, Feature
from nvim_python.features import completion, formatter, lsp, treesitter
from nvim_python.features.base import ActivationContext, FeatureSpec, Payload

FEATURES: dict[Feature, FeatureSpec] = {
    Feature.LSP: lsp.SPEC,
    Feature.FORMATTER: formatter.SPEC,
    Feature.TREESITTER: treesitter.SPEC,
    Feature.COMPLETION: completion.SPEC,
}

# Host plugins that must all be loadable before anything is activated.
REQUIRED_PLUGINS: tuple[str, ...] = tuple(
    FEATURES[feature].namespace for feature in FEATURE_ORDER
)

# Namespace -> the plugin name shown to users ("cmp" is installed as "nvim-cmp").
PLUGIN_NAMES: dict[str, str] = {
    spec.namespace: spec.display_name for spec in FEATURES.values()
}


def get_feature(feature: Feature | str) -> FeatureSpec:
    """Look up a feature spec; raises ValueError for unknown names."""
    try:
        return FEATURES[Feature(feature)]
    except ValueError:
        available = ", ".join(str(f) for f in FEATURE_ORDER)
        raise ValueError(
            f"Unknown feature: {feature!r}. Available: {available}"
        ) from None


__all__ = [
    "FEATURES",
    "PLUGIN_NAMES",
    "REQUIRED_PLUGINS",
    "ActivationContext",
    "FeatureSpec",
    "Payload",
    "get_feature",
]
