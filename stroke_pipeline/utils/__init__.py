"""Utility modules for the stroke pipeline."""

from .config import Config, ModelConfigBuilder

__all__ = ['Config', 'ModelConfigBuilder']
