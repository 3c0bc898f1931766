"""Configuration package for the series pipeline."""

from .settings import PipelineSettings, get_settings

__all__ = ["PipelineSettings", "get_settings"]
