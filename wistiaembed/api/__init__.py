"""Wistia data API access."""

from .client import WistiaClient
from .models import Asset, VideoRecord

__all__ = ["Asset", "VideoRecord", "WistiaClient"]
