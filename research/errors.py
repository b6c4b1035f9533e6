"""Errors raised by the research services."""


class ResearchError(Exception):
    """A website could not be scraped or its content could not be analyzed."""
