"""hhh: relay Docker Hub build webhooks to HipChat."""

__version__ = "0.1.0"
