import random
import re
from datetime import date

from clm.core.config import normalize_database_url
from clm.domain.columns import (
    FILTERABLE_CONTRACT_COLUMNS,
    UPDATABLE_CONTRACT_COLUMNS,
    ColumnAllowList,
)
from clm.domain.contract_number import generate_contract_number
from clm.domain.milestones import EXPIRATION, RENEWAL, REVIEW, plan_default_milestones


# ============================================================================
# MILESTONE PLANNING TESTS
# ============================================================================


def test_plan_default_milestones():
    """Test review, renewal and expiration dates relative to the expiration date."""
    planned = plan_default_milestones(date(2025, 12, 31))

    assert [(m.milestone_type, m.name, m.due_date) for m in planned] == [
        (REVIEW, "90-Day Review", date(2025, 10, 2)),
        (RENEWAL, "60-Day Renewal Notice", date(2025, 11, 1)),
        (EXPIRATION, "Contract Expiration", date(2025, 12, 31)),
    ]


def test_plan_default_milestones_crosses_year_boundary():
    planned = plan_default_milestones(date(2026, 2, 15))
    assert planned[0].due_date == date(2025, 11, 17)
    assert planned[1].due_date == date(2025, 12, 17)


def test_plan_default_milestones_without_expiration():
    assert plan_default_milestones(None) == []


# ============================================================================
# CONTRACT NUMBER TESTS
# ============================================================================


def test_generate_contract_number_format():
    number = generate_contract_number(today=date(2025, 3, 1))
    assert re.fullmatch(r"CON-2025-\d{4}", number)


def test_generate_contract_number_suffix_range():
    """Test the numeric suffix always stays within 1000..9999."""
    rng = random.Random(42)
    for _ in range(200):
        suffix = int(generate_contract_number(today=date(2025, 1, 1), rng=rng).rsplit("-", 1)[1])
        assert 1000 <= suffix <= 9999


def test_generate_contract_number_is_reproducible_with_seed():
    first = generate_contract_number(today=date(2025, 1, 1), rng=random.Random(7))
    second = generate_contract_number(today=date(2025, 1, 1), rng=random.Random(7))
    assert first == second


# ============================================================================
# COLUMN ALLOW LIST TESTS
# ============================================================================


def test_pick_drops_unknown_columns_and_id():
    allow = ColumnAllowList(frozenset({"id", "title"}))
    assert allow.pick({"id": "x", "title": "MSA", "evil": "1; DROP TABLE"}) == {"title": "MSA"}


def test_pick_keeps_explicit_none():
    """Test None values survive picking so optional fields can be cleared."""
    assert UPDATABLE_CONTRACT_COLUMNS.pick({"description": None}) == {"description": None}


def test_updatable_columns_exclude_bookkeeping_fields():
    for column in ("id", "created_at", "updated_at"):
        assert column not in UPDATABLE_CONTRACT_COLUMNS.columns


def test_equals_predicates_skip_none_and_unknown():
    from clm.db.models.contract import Contract as ContractModel

    predicates = FILTERABLE_CONTRACT_COLUMNS.sqlalchemy_equals_predicates(
        ContractModel, {"status": "active", "type": None, "title": "ignored"}
    )
    assert len(predicates) == 1
    sql = str(predicates[0].compile(compile_kwargs={"literal_binds": True}))
    assert sql == "contracts.status = 'active'"


# ============================================================================
# CONFIG TESTS
# ============================================================================


def test_normalize_database_url():
    assert (
        normalize_database_url("postgresql://u:p@db:5432/clm")
        == "postgresql+psycopg://u:p@db:5432/clm"
    )
    assert (
        normalize_database_url("postgresql+psycopg://u:p@db/clm")
        == "postgresql+psycopg://u:p@db/clm"
    )
    assert normalize_database_url("sqlite:///tmp.db") == "sqlite:///tmp.db"


def test_settings_build_url_from_parts():
    from clm.core.config import Settings

    settings = Settings(
        DATABASE_URL="",
        DB_HOST="db",
        DB_PORT=6543,
        DB_NAME="contracts",
        DB_USER="clm",
        DB_PASSWORD="secret",
        _env_file=None,
    )
    assert settings.sqlalchemy_url == "postgresql+psycopg://clm:secret@db:6543/contracts"
    assert settings.is_production is False
