"""
Arian receipt parsing service.

The package turns receipt photographs into structured records by asking a multimodal
model to describe them and decoding the model's JSON reply.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
