"""Configuration modules for apbuild."""

from .build_config import (
    DEPLOYMENT_TARGET_VAR,
    BuildConfig,
    BuildPaths,
    ConfigError,
    TargetPlatform,
    UnsupportedArchitectureError,
    resolve_deployment_target,
)

__all__ = [
    "DEPLOYMENT_TARGET_VAR",
    "BuildConfig",
    "BuildPaths",
    "ConfigError",
    "TargetPlatform",
    "UnsupportedArchitectureError",
    "resolve_deployment_target",
]
