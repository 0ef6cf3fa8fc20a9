"""
Contract Validation Module

Валидация JSON payload (кэш и ответы биржи) против JSON Schema контрактов.
"""

from .validators import (
    AccountInfoValidator,
    ContractValidator,
    SchemaLoader,
    SymbolConstraintsValidator,
    validate_account_info,
    validate_symbol_constraints,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "SymbolConstraintsValidator",
    "AccountInfoValidator",
    # Functions
    "validate_symbol_constraints",
    "validate_account_info",
]
