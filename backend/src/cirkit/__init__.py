"""Cirkit - hardware project recommendations and PC build backend."""

__version__ = "0.3.0"
