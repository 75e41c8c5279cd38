"""Structured configuration validation results."""

from dataclasses import dataclass, field


@dataclass
class ValidationResult:
    """Outcome of a configuration check.

    Configuration problems are reported here instead of being raised so
    that diagnostics can list every problem at once.
    """

    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


@dataclass
class DoctorReport(ValidationResult):
    """Validation result with non-fatal warnings, used by the doctor command."""

    warnings: list[str] = field(default_factory=list)
