"""streamhost - a livestream co-host agent runtime."""

__version__ = "0.1.0"
__logo__ = "📺"
