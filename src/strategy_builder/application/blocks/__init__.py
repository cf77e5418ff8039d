"""
Built-in block templates, grouped by palette category.
"""
from strategy_builder.application.blocks.input_blocks import INPUT_TEMPLATES
from strategy_builder.application.blocks.indicator_blocks import INDICATOR_TEMPLATES
from strategy_builder.application.blocks.logic_blocks import LOGIC_TEMPLATES, MATH_TEMPLATES
from strategy_builder.application.blocks.action_blocks import ACTION_TEMPLATES
from strategy_builder.application.blocks.output_blocks import OUTPUT_TEMPLATES

BUILTIN_TEMPLATES = (
    INPUT_TEMPLATES
    + INDICATOR_TEMPLATES
    + LOGIC_TEMPLATES
    + MATH_TEMPLATES
    + ACTION_TEMPLATES
    + OUTPUT_TEMPLATES
)

__all__ = ['BUILTIN_TEMPLATES']
