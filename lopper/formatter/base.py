"""Abstract base formatter."""

from __future__ import annotations

import abc

from lopper.models import Report


class BaseFormatter(abc.ABC):
    """Base class for report formatters."""

    name: str

    @abc.abstractmethod
    def format(self, report: Report) -> str:
        """Render a finished report as text."""
