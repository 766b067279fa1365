"""
panelcalc intermediate representation.

Formula AST nodes, runtime values, structured errors, binding sets,
templates and the cabinet model. All types are re-exported here.
"""

from .bindings import (
    CANONICAL_PARAMETERS,
    EXTENDED_FLAG_PARAMETERS,
    EXTENDED_NUMBER_PARAMETERS,
    FLAG_PARAMETERS,
    NUMBER_PARAMETERS,
    BindingSet,
)
from .cabinet import (
    Cabinet,
    CabinetType,
    Construction,
    DimensionLimits,
    Dimensions,
    MaterialThickness,
)
from .diagnostics import (
    EVALUATION_ERROR_TYPES,
    DivisionByZero,
    DuplicateName,
    ErrorKind,
    EvaluationError,
    NumericOverflow,
    ParseError,
    TypeMismatch,
    UndefinedVariable,
    is_error,
)
from .formulas import (
    BinaryExpr,
    BinaryOp,
    Conditional,
    Expr,
    NumberLiteral,
    UnaryMinus,
    VariableRef,
)
from .templates import Formula, PanelSpec, Template, formula_name
from .values import FALSE, TRUE, Boolean, Number, Value, ValueKind, to_value

__all__ = [
    # Values
    "Boolean",
    "FALSE",
    "Number",
    "TRUE",
    "Value",
    "ValueKind",
    "to_value",
    # AST
    "BinaryExpr",
    "BinaryOp",
    "Conditional",
    "Expr",
    "NumberLiteral",
    "UnaryMinus",
    "VariableRef",
    # Errors
    "DivisionByZero",
    "DuplicateName",
    "EVALUATION_ERROR_TYPES",
    "ErrorKind",
    "EvaluationError",
    "NumericOverflow",
    "ParseError",
    "TypeMismatch",
    "UndefinedVariable",
    "is_error",
    # Bindings
    "BindingSet",
    "CANONICAL_PARAMETERS",
    "EXTENDED_FLAG_PARAMETERS",
    "EXTENDED_NUMBER_PARAMETERS",
    "FLAG_PARAMETERS",
    "NUMBER_PARAMETERS",
    # Templates
    "Formula",
    "PanelSpec",
    "Template",
    "formula_name",
    # Cabinet
    "Cabinet",
    "CabinetType",
    "Construction",
    "DimensionLimits",
    "Dimensions",
    "MaterialThickness",
]
