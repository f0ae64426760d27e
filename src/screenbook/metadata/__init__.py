"""Schema validation for screen metadata files."""

from screenbook.metadata.validator import ValidationIssue, validate_meta_file, validate_meta_files

__all__ = ["ValidationIssue", "validate_meta_file", "validate_meta_files"]
