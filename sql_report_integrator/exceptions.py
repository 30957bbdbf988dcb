# MIT License
#
# Copyright (c) 2024 SQL Report Integrator Contributors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Custom exceptions for report integration.

The integration pipeline itself converts failures into report data; these
exceptions are raised by the configuration and context layers around it.
"""

from __future__ import annotations


class ReportIntegrationError(Exception):
    """Base exception for report integration errors with actionable suggestions."""

    def __init__(
        self,
        message: str,
        dimension: str | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize the error with context and suggestions.

        Args:
            message: Error message describing the issue
            dimension: Analysis dimension involved (optional)
            suggestions: List of actionable suggestions for the user (optional)
        """
        super().__init__(message)
        self.dimension = dimension
        self.suggestions = suggestions or []

    def get_user_friendly_message(self) -> str:
        """Get user-friendly error message with suggestions.

        Returns:
            Formatted error message with actionable suggestions.
        """
        msg = str(self)
        if self.suggestions:
            msg += "\n\nSuggestions:"
            for suggestion in self.suggestions:
                msg += f"\n  • {suggestion}"
        return msg


class ConfigurationError(ReportIntegrationError):
    """Exception raised when a configuration file cannot be loaded."""

    def __init__(self, message: str, config_path: str | None = None) -> None:
        super().__init__(
            message,
            suggestions=[
                "Check that the file exists and is readable",
                "Configuration files must contain a single JSON object",
            ],
        )
        self.config_path = config_path


class UnknownDimensionError(ReportIntegrationError):
    """Exception raised when a result is stored for an unknown dimension."""

    def __init__(self, dimension: str, known_dimensions: list[str] | None = None) -> None:
        known = known_dimensions or []
        super().__init__(
            f"Unknown analysis dimension: {dimension}",
            dimension=dimension,
            suggestions=[f"Use one of: {', '.join(known)}"] if known else [],
        )
        self.known_dimensions = known


class MalformedResultError(ReportIntegrationError):
    """Exception raised when an analysis results document cannot be used."""
