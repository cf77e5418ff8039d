"""
Result Types for Editor Commands

Structured return types for strategy editing operations. A rejected edit is
reported through a result, never raised.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Any, TypeVar, Generic
from enum import Enum


class ResultStatus(Enum):
    """Status of a command execution"""
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


T = TypeVar('T')


@dataclass
class CommandResult(Generic[T]):
    """
    Structured result from editor commands.

    - status: Success, error, or warning
    - message: Human-readable result message
    - data: Structured data (block, connection, definition, ...)
    - errors: List of error messages
    - warnings: List of warning messages
    - findings: ValidationError objects behind errors/warnings, when any

    Examples:
        CommandResult[StrategyBlock] - Returns the added block
        CommandResult[BlockConnection] - Returns the created connection
        CommandResult[None] - Returns no data
    """
    status: ResultStatus
    message: str
    data: Optional[T] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    findings: List[Any] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if command was successful"""
        return self.status == ResultStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == ResultStatus.ERROR

    @property
    def error_codes(self) -> List[str]:
        return [getattr(f, "code", "") for f in self.findings]

    @classmethod
    def success_result(cls, message: str, data: T = None) -> 'CommandResult[T]':
        return cls(
            status=ResultStatus.SUCCESS,
            message=message,
            data=data
        )

    @classmethod
    def error_result(cls, message: str, errors: List[str] = None, findings: List[Any] = None) -> 'CommandResult[T]':
        """
        Create an error result.

        Args:
            message: Human-readable error message
            errors: List of detailed error messages (derived from findings when omitted)
            findings: ValidationError objects explaining the rejection

        Returns:
            CommandResult[T] with ERROR status and no data
        """
        findings = list(findings or [])
        if errors is None:
            errors = [f.message for f in findings]
        return cls(
            status=ResultStatus.ERROR,
            message=message,
            errors=errors,
            findings=findings,
        )

    @classmethod
    def warning_result(
        cls,
        message: str,
        data: T = None,
        warnings: List[str] = None,
        findings: List[Any] = None,
    ) -> 'CommandResult[T]':
        """
        Create a warning result: the command was applied with caveats.
        """
        findings = list(findings or [])
        if warnings is None:
            warnings = [f.message for f in findings]
        return cls(
            status=ResultStatus.WARNING,
            message=message,
            data=data,
            warnings=warnings,
            findings=findings,
        )
