"""Minecraft Java edition proxy building blocks: channels, settings, events, registry and forwarding."""

__version__ = "0.1.0"