from app.db.base_class import Base
from app.models import Plan, User


def test_models_share_base_columns():
    for model in (User, Plan):
        columns = model.__table__.columns
        assert columns["id"].primary_key
        assert columns["created_at"].type.timezone is True
        assert not columns["created_at"].nullable


def test_tables_are_registered():
    assert {"users", "plans"} <= set(Base.metadata.tables)


def test_plan_owner_is_not_a_foreign_key():
    assert not Plan.__table__.columns["user_id"].foreign_keys


def test_new_rows_get_string_ids():
    id_default = User.__table__.columns["id"].default

    generated = id_default.arg(None)

    assert isinstance(generated, str)
    assert len(generated) == 36
