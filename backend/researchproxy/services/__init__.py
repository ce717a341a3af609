"""Application services."""

from .research import ResearchReport, ResearchSession

__all__ = ["ResearchReport", "ResearchSession"]
