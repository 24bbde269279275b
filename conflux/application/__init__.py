"""
Application layer wiring options, registries and the retriever together.
"""

from .builder import build_descriptors, build_retriever, default_store_options

__all__ = [
    "build_descriptors",
    "build_retriever",
    "default_store_options",
]
