"""Configuration management for bidder round resolution."""

from bidderround.config.loader import load_config
from bidderround.config.models import AppConfig, ResolutionConfig

__all__ = ["AppConfig", "ResolutionConfig", "load_config"]
