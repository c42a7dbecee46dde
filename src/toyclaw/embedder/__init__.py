"""Embedding functionality for toyclaw."""

from toyclaw.embedder.base import Embedder
from toyclaw.embedder.client import ClientEmbedder

__all__ = ["Embedder", "ClientEmbedder"]
