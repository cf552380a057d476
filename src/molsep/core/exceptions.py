"""Custom exceptions for the molecule separation pipeline."""

import time
from typing import Optional, List
from pathlib import Path


class PipelineError(Exception):
    """
    Base exception for pipeline errors.

    Worker processes send exceptions back pickled, and unpickling calls the
    constructor with the message only. Every argument after the message
    therefore needs a default; attributes are restored from __dict__.
    """

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        self.stage = stage
        self.timestamp = time.time()
        super().__init__(message)


class GraphFormatError(PipelineError):
    """Input graph does not follow the TSV graph format."""

    def __init__(self, message: str, path: Optional[str] = None,
                 line_number: Optional[int] = None, stage: Optional[str] = "loading") -> None:
        self.path = path
        self.line_number = line_number
        location = ""
        if path is not None:
            location = f"{path}:{line_number}: " if line_number is not None else f"{path}: "
        super().__init__(f"{location}{message}", stage)


class ValidationError(PipelineError):
    """Data validation failed."""

    def __init__(self, message: str, errors: Optional[List[str]] = None,
                 stage: Optional[str] = None) -> None:
        self.errors = errors or []
        super().__init__(message, stage)


class ConfigurationError(PipelineError):
    """Configuration error."""

    def __init__(self, message: str, config_path: Optional[Path] = None,
                 stage: Optional[str] = None) -> None:
        self.config_path = config_path
        super().__init__(message, stage)


class ResourceError(PipelineError):
    """Insufficient system resources."""

    def __init__(self, message: str, resource_type: Optional[str] = None,
                 required: Optional[str] = None, available: Optional[str] = None,
                 stage: Optional[str] = None) -> None:
        self.resource_type = resource_type
        self.required = required
        self.available = available
        super().__init__(message, stage)
