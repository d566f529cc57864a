"""compcfg - component configuration and webapp registry."""

__version__ = "0.1.0"
