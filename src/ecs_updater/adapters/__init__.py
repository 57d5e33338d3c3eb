"""Adapter implementations for external services."""

from ecs_updater.adapters.ecs_adapter import ECSAdapter

__all__ = ["ECSAdapter"]
