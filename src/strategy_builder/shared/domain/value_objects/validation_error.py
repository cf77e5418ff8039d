"""
Validation finding value object

A ValidationError is produced fresh by every validation pass and never
persisted. Only ERROR findings block compilation.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Severity(Enum):
    """Finding severity"""
    ERROR = "error"
    WARNING = "warning"


class ErrorCode:
    """Finding codes shared by the connection and structural validators."""
    MISSING_PROPERTY = "MISSING_PROPERTY"
    INVALID_PROPERTY = "INVALID_PROPERTY"
    INVALID_CONNECTION = "INVALID_CONNECTION"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    EMPTY_STRATEGY = "EMPTY_STRATEGY"
    NO_INPUT_BLOCKS = "NO_INPUT_BLOCKS"
    NO_OUTPUT_BLOCKS = "NO_OUTPUT_BLOCKS"
    MISSING_CONNECTION = "MISSING_CONNECTION"
    MULTIPLE_CONNECTIONS = "MULTIPLE_CONNECTIONS"
    ORPHANED_BLOCK = "ORPHANED_BLOCK"
    CIRCULAR_DEPENDENCY = "CIRCULAR_DEPENDENCY"


@dataclass(frozen=True)
class ValidationError:
    """
    One validation finding.

    Attributes:
        type: ERROR or WARNING
        code: One of the ErrorCode constants
        message: Human-readable description
        block_id: Block the finding refers to, if any
        connection_id: Connection the finding refers to, if any
        suggestion: Remediation hint, if any
    """
    type: Severity
    code: str
    message: str
    block_id: Optional[str] = None
    connection_id: Optional[str] = None
    suggestion: Optional[str] = None

    @classmethod
    def error(cls, code: str, message: str, **kwargs) -> 'ValidationError':
        return cls(type=Severity.ERROR, code=code, message=message, **kwargs)

    @classmethod
    def warning(cls, code: str, message: str, **kwargs) -> 'ValidationError':
        return cls(type=Severity.WARNING, code=code, message=message, **kwargs)

    @property
    def is_error(self) -> bool:
        return self.type == Severity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "type": self.type.value,
            "code": self.code,
            "message": self.message,
        }
        if self.block_id is not None:
            data["block_id"] = self.block_id
        if self.connection_id is not None:
            data["connection_id"] = self.connection_id
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.code}: {self.message}"


def has_errors(findings: List[ValidationError]) -> bool:
    """True if any finding blocks compilation."""
    return any(f.is_error for f in findings)


def split_findings(findings: List[ValidationError]) -> Tuple[List[ValidationError], List[ValidationError]]:
    """Split findings into (errors, warnings), preserving order."""
    errors = [f for f in findings if f.is_error]
    warnings = [f for f in findings if not f.is_error]
    return errors, warnings
