"""
Contract Validation Module

Модуль для валидации JSON контрактов на границе со слоем хранения.
"""

from .validators import (
    ContractValidator,
    SchemaLoader,
    TerritoryClaimValidator,
    TerritoryRecordValidator,
    validate_territory_claim,
    validate_territory_record,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "TerritoryRecordValidator",
    "TerritoryClaimValidator",
    # Functions
    "validate_territory_record",
    "validate_territory_claim",
]
