"""Loaders for lineage datasets."""

from .dataset_loader import DatasetLoader

__all__ = ["DatasetLoader"]
