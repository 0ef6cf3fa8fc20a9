"""
Tests for JSON Schema Contract Validators

- Валидность самих схем
- Валидация закэшированных ограничений инструмента
- Валидация ответа accountInfo
"""

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    AccountInfoValidator,
    SchemaLoader,
    SymbolConstraintsValidator,
    validate_account_info,
    validate_symbol_constraints,
)
from src.core.domain import SymbolConstraints


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    def test_loads_all_schemas(self) -> None:
        loader = SchemaLoader()

        for name in ("symbol_constraints", "account_info"):
            schema = loader.load_schema(name)
            assert schema["title"] == name

    def test_schema_is_cached(self) -> None:
        loader = SchemaLoader()

        assert loader.load_schema("account_info") is loader.load_schema("account_info")

    def test_unknown_schema_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_missing_directory_raises(self, tmp_path) -> None:
        with pytest.raises(RuntimeError, match="Schema directory not found"):
            SchemaLoader(schema_dir=tmp_path / "missing")

    def test_invalid_schema_raises(self, tmp_path) -> None:
        (tmp_path / "broken.json").write_text('{"type": 5}', encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            SchemaLoader(schema_dir=tmp_path).load_schema("broken")


# =============================================================================
# SYMBOL CONSTRAINTS CONTRACT
# =============================================================================


class TestSymbolConstraintsContract:
    def test_serialized_model_is_valid(self, btcusdt: SymbolConstraints) -> None:
        validate_symbol_constraints(btcusdt.to_cache_dict())

    def test_empty_constraints_are_valid(self) -> None:
        validate_symbol_constraints(SymbolConstraints.empty("UNKNOWN").to_cache_dict())

    def test_missing_filter_is_invalid(self, btcusdt: SymbolConstraints) -> None:
        data = btcusdt.to_cache_dict()
        del data["filterLotSize"]

        with pytest.raises(ValidationError):
            validate_symbol_constraints(data)

    def test_step_without_one_is_invalid(self, btcusdt: SymbolConstraints) -> None:
        data = btcusdt.to_cache_dict()
        data["filterLotSize"]["stepSize"] = "0.005"

        assert not SymbolConstraintsValidator().is_valid(data)

    def test_non_object_is_invalid(self) -> None:
        assert not SymbolConstraintsValidator().is_valid([1, 2, 3])

    def test_negative_min_notional_is_invalid(self, btcusdt: SymbolConstraints) -> None:
        data = btcusdt.to_cache_dict()
        data["filterMinNotional"]["minNotional"] = -1

        errors = list(SymbolConstraintsValidator().iter_errors(data))
        assert len(errors) >= 1


# =============================================================================
# ACCOUNT INFO CONTRACT
# =============================================================================


class TestAccountInfoContract:
    def test_valid_account_info(self, account_info) -> None:
        validate_account_info(account_info)

    def test_numeric_balances_are_valid(self) -> None:
        validate_account_info({"balances": [{"asset": "USDT", "free": 100.5, "locked": 0}]})

    def test_missing_balances_is_invalid(self) -> None:
        with pytest.raises(ValidationError):
            validate_account_info({"canTrade": True})

    def test_balance_without_free_is_invalid(self) -> None:
        assert not AccountInfoValidator().is_valid({"balances": [{"asset": "USDT"}]})

    def test_non_numeric_free_is_invalid(self) -> None:
        assert not AccountInfoValidator().is_valid({"balances": [{"asset": "USDT", "free": "abc"}]})
