"""Exceptions raised while loading or applying notifier configuration."""

from typing import List, Optional


class ConfigurationError(Exception):
    """Configuration is missing, malformed, or refers to something that does not exist.

    Carries a list of individual problems and suggestions so the CLI can
    print them all at once instead of failing on the first one. Raised at
    startup for bad YAML, and per dispatch for a missing event template.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.errors = list(errors or [])
        self.suggestions = list(suggestions or [])
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            parts.extend(f"  {i}. {error}" for i, error in enumerate(self.errors, 1))

        if self.suggestions:
            parts.append("\nSuggestions:")
            parts.extend(f"  - {suggestion}" for suggestion in self.suggestions)

        return "\n".join(parts)
