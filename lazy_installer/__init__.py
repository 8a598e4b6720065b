"""RimWorld Lazy Installer — install and update git-hosted mods."""

__version__ = "1.0.0"
