"""Ultrabunt Buntstaller — Ubuntu/Mint buntage manager."""

__version__ = "4.2.0"
