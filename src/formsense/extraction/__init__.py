"""Candidate data extraction."""

from formsense.extraction.data_extractor import DataExtractor

__all__ = ["DataExtractor"]
