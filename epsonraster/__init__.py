"""Raster line pipeline for printer output: scaling, watermark blending, mirroring, reversal and fetching."""

__version__ = "0.1.0"