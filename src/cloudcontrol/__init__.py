"""cloudcontrol — AWS operations exposed as Model Context Protocol tools."""

from __future__ import annotations

__version__ = "1.0.0"
