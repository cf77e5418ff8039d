"""
Result types returned by editor commands.
"""
from strategy_builder.application.api.result_types import CommandResult, ResultStatus

__all__ = ['CommandResult', 'ResultStatus']
