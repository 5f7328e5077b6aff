"""Input validation and error types for osslicenses."""
import json
from pathlib import Path


class ValidationError(ValueError):
    """Validation error."""


class VersionFormatError(ValidationError):
    """A version string whose leading component is not numeric."""


class MetadataDocumentError(ValidationError):
    """A POM document that could not be parsed."""


class BundledIndexError(ValidationError):
    """A bundled license index with missing or mistyped fields."""


class MetadataFormatError(ValidationError):
    """A license metadata line that does not match '<offset>:<length> <key>'."""


class LicenseReadError(RuntimeError):
    """Reading bundled license text from an artifact failed."""


class OutputPathError(OSError):
    """The output directory or files could not be created."""


def validate_dependencies_file(file_path: Path) -> bool:
    """
    Validate the dependency list file.

    Expected format: a JSON array of objects, each with:
    - group: str
    - name: str
    - version: str
    - fileLocation: str

    Only the container shape is checked here; records are validated
    field by field when they are loaded.

    Raises:
        ValidationError if invalid
    """
    if not file_path.exists():
        raise ValidationError(f"File does not exist: {file_path}")

    if not file_path.is_file():
        raise ValidationError(f"Not a file: {file_path}")

    if file_path.stat().st_size == 0:
        raise ValidationError(f"File is empty: {file_path}")

    with open(file_path, encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {file_path}: {e}")

    if not isinstance(data, list):
        raise ValidationError(
            f"Expected a JSON array in {file_path}, got {type(data).__name__}",
        )

    return True
