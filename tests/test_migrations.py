from __future__ import annotations

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine


def test_core_tables_exist(migrated_engine: Engine) -> None:
    inspector = inspect(migrated_engine)
    tables = set(inspector.get_table_names())
    expected = {"users", "transactions", "budget_periods", "alembic_version"}
    missing = expected.difference(tables)
    assert not missing, f"Missing tables after migration: {missing}"


def test_users_email_is_unique(migrated_engine: Engine) -> None:
    inspector = inspect(migrated_engine)
    indexes = {idx["name"]: idx for idx in inspector.get_indexes("users")}
    assert "ix_users_email" in indexes
    assert indexes["ix_users_email"]["unique"]


def test_transactions_schema_details(migrated_engine: Engine) -> None:
    inspector = inspect(migrated_engine)
    columns = {col["name"]: col for col in inspector.get_columns("transactions")}

    for required in ["user_id", "item_name", "amount", "category", "tx_date", "tx_type", "source"]:
        assert required in columns, f"transactions missing column {required}"

    amount_type = columns["amount"]["type"]
    assert getattr(amount_type, "precision", None) == 18
    assert getattr(amount_type, "scale", None) == 2

    indexes = {idx["name"] for idx in inspector.get_indexes("transactions")}
    for name in [
        "ix_transactions_user_id",
        "ix_transactions_tx_date",
        "ix_transactions_user_txdate",
    ]:
        assert name in indexes, f"transactions missing index {name}"

    fks = inspector.get_foreign_keys("transactions")
    assert any(fk["referred_table"] == "users" for fk in fks)


def test_budget_periods_schema(migrated_engine: Engine) -> None:
    inspector = inspect(migrated_engine)
    columns = {col["name"] for col in inspector.get_columns("budget_periods")}
    assert {"user_id", "monthly_budget", "start_date", "end_date", "is_active"}.issubset(columns)

    indexes = {idx["name"] for idx in inspector.get_indexes("budget_periods")}
    assert {"ix_budget_periods_user_id", "ix_budget_periods_user_active"}.issubset(indexes)


def test_check_constraints(migrated_engine: Engine) -> None:
    with migrated_engine.connect() as conn:
        for name in ["ck_transactions_amount_positive", "ck_budget_periods_range"]:
            result = conn.execute(
                text("SELECT 1 FROM information_schema.check_constraints WHERE constraint_name = :name"),
                {"name": name},
            )
            assert result.fetchone() is not None, f"missing check constraint {name}"
