"""
Logic and math block templates.
"""
from strategy_builder.features.blocks.domain import (
    BlockCategory,
    BlockSize,
    BlockTemplate,
    BlockType,
    InputSpec,
    OutputSpec,
    PropertyKind,
    PropertyOption,
    PropertySpec,
)
from strategy_builder.shared.domain.value_objects import DataKind


COMPARISON = BlockTemplate(
    type=BlockType.COMPARISON,
    category=BlockCategory.LOGIC,
    name="Comparison",
    description="Compares two values",
    inputs=(
        InputSpec("Left Value", DataKind.NUMBER, required=True),
        InputSpec("Right Value", DataKind.NUMBER, required=True),
    ),
    outputs=(OutputSpec("Result", DataKind.BOOLEAN, "Comparison result"),),
    properties=(
        PropertySpec(
            "operator", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("Greater than (>)", ">"),
                PropertyOption("Less than (<)", "<"),
                PropertyOption("Greater or equal (>=)", ">="),
                PropertyOption("Less or equal (<=)", "<="),
                PropertyOption("Equal (==)", "=="),
                PropertyOption("Not equal (!=)", "!="),
                PropertyOption("Crosses above", "crosses_above"),
                PropertyOption("Crosses below", "crosses_below"),
            ),
            description="Equality uses a 0.0001 tolerance",
        ),
    ),
    default_size=BlockSize(160, 130),
    tags=("compare", "condition", "cross"),
)

LOGICAL_AND = BlockTemplate(
    type=BlockType.LOGICAL_AND,
    category=BlockCategory.LOGIC,
    name="Logical AND",
    description="True when both inputs are true",
    inputs=(
        InputSpec("Input A", DataKind.BOOLEAN, required=True),
        InputSpec("Input B", DataKind.BOOLEAN, required=True),
    ),
    outputs=(OutputSpec("Result", DataKind.BOOLEAN),),
    default_size=BlockSize(140, 100),
    tags=("and", "boolean"),
)

LOGICAL_OR = BlockTemplate(
    type=BlockType.LOGICAL_OR,
    category=BlockCategory.LOGIC,
    name="Logical OR",
    description="True when either input is true",
    inputs=(
        InputSpec("Input A", DataKind.BOOLEAN, required=True),
        InputSpec("Input B", DataKind.BOOLEAN, required=True),
    ),
    outputs=(OutputSpec("Result", DataKind.BOOLEAN),),
    default_size=BlockSize(140, 100),
    tags=("or", "boolean"),
)

LOGICAL_NOT = BlockTemplate(
    type=BlockType.LOGICAL_NOT,
    category=BlockCategory.LOGIC,
    name="Logical NOT",
    description="Inverts a boolean",
    inputs=(InputSpec("Input", DataKind.BOOLEAN, required=True),),
    outputs=(OutputSpec("Result", DataKind.BOOLEAN),),
    default_size=BlockSize(120, 80),
    tags=("not", "invert", "boolean"),
)

CONDITIONAL = BlockTemplate(
    type=BlockType.CONDITIONAL,
    category=BlockCategory.LOGIC,
    name="Conditional (If-Then-Else)",
    description="Selects one of two values based on a condition",
    inputs=(
        InputSpec("Condition", DataKind.BOOLEAN, required=True),
        InputSpec("True Value", DataKind.ANY, required=True),
        InputSpec("False Value", DataKind.ANY, required=True),
    ),
    outputs=(OutputSpec("Result", DataKind.ANY),),
    default_size=BlockSize(160, 140),
    tags=("if", "switch", "select"),
)

ARITHMETIC = BlockTemplate(
    type=BlockType.ARITHMETIC,
    category=BlockCategory.MATH,
    name="Arithmetic Operation",
    description="Basic arithmetic on two numbers (division or modulo by zero yields 0)",
    inputs=(
        InputSpec("Left Value", DataKind.NUMBER, required=True),
        InputSpec("Right Value", DataKind.NUMBER, required=True),
    ),
    outputs=(OutputSpec("Result", DataKind.NUMBER),),
    properties=(
        PropertySpec(
            "operation", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("Addition (+)", "add"),
                PropertyOption("Subtraction (-)", "subtract"),
                PropertyOption("Multiplication (x)", "multiply"),
                PropertyOption("Division (/)", "divide"),
                PropertyOption("Power (^)", "power"),
                PropertyOption("Modulo (%)", "modulo"),
            ),
        ),
    ),
    default_size=BlockSize(160, 120),
    tags=("add", "subtract", "multiply", "divide"),
)

MATH_FUNCTION = BlockTemplate(
    type=BlockType.MATH_FUNCTION,
    category=BlockCategory.MATH,
    name="Math Function",
    description="Applies a mathematical function",
    inputs=(InputSpec("Input", DataKind.NUMBER, required=True),),
    outputs=(OutputSpec("Result", DataKind.NUMBER),),
    properties=(
        PropertySpec(
            "function", PropertyKind.SELECT, required=True,
            options=(
                PropertyOption("Absolute (|x|)", "abs"),
                PropertyOption("Square Root", "sqrt"),
                PropertyOption("Natural Log (ln)", "log"),
                PropertyOption("Log Base 10", "log10"),
                PropertyOption("Sine (sin)", "sin"),
                PropertyOption("Cosine (cos)", "cos"),
                PropertyOption("Tangent (tan)", "tan"),
                PropertyOption("Round", "round"),
                PropertyOption("Floor", "floor"),
                PropertyOption("Ceiling", "ceil"),
            ),
        ),
    ),
    default_size=BlockSize(140, 100),
    tags=("abs", "sqrt", "log", "round"),
)

LOGIC_TEMPLATES = [COMPARISON, LOGICAL_AND, LOGICAL_OR, LOGICAL_NOT, CONDITIONAL]
MATH_TEMPLATES = [ARITHMETIC, MATH_FUNCTION]
