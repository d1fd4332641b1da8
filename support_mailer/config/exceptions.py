"""Custom exceptions for configuration management."""

from typing import List, Optional

from pydantic import ValidationError


class ConfigurationError(Exception):
    """
    Exception raised when the mailer cannot be configured.

    Collects every problem found while reading environment variables and
    the optional YAML file so operators can fix them in one pass.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Primary error message
            errors: List of specific validation errors
            suggestions: List of hints for fixing the errors
        """
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    @classmethod
    def from_validation_error(
        cls, message: str, error: ValidationError, suggestions: Optional[List[str]] = None
    ) -> "ConfigurationError":
        """Build a ConfigurationError from a pydantic ValidationError."""
        errors = []
        for detail in error.errors():
            field_path = " -> ".join(str(loc) for loc in detail["loc"])
            if detail["type"] == "missing":
                errors.append(f"Missing required field: {field_path}")
            else:
                errors.append(f"{field_path}: {detail['msg']}")
        return cls(message, errors=errors, suggestions=suggestions)

    def _format_message(self) -> str:
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            for i, error in enumerate(self.errors, 1):
                parts.append(f"  {i}. {error}")

        if self.suggestions:
            parts.append("\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"  - {suggestion}")

        return "\n".join(parts)
