from typing import Optional

import pytest
from pydantic import BaseModel, ConfigDict, Field

from j_user_svc.schemas import CreateUser, SignInRequest, UpdateUser
from j_user_svc.validation import ValidationFailed, format_errors, parse


class StrictThing(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str = Field(min_length=2)
    note: Optional[str] = None


def test_parse_returns_model():
    user = parse(CreateUser, {"name": "Ann", "email": "ann@example.com", "password": "secret1"})
    assert isinstance(user, CreateUser)
    assert user.name == "Ann"


def test_extra_fields_dropped_by_default():
    user = parse(CreateUser, {
        "name": "Ann",
        "email": "ann@example.com",
        "password": "secret1",
        "is_admin": True,
    })
    assert "is_admin" not in user.model_dump()


def test_strict_schema_rejects_extra_fields():
    with pytest.raises(ValidationFailed) as excinfo:
        parse(StrictThing, {"label": "ok", "color": "red"})
    assert excinfo.value.errors == [{"field": "color", "message": "Unknown field"}]


def test_every_violation_is_listed():
    with pytest.raises(ValidationFailed) as excinfo:
        parse(CreateUser, {"name": "A", "email": "bad", "password": "x" * 51})

    assert excinfo.value.errors == [
        {"field": "name", "message": "Name must be at least 2 characters"},
        {"field": "email", "message": "Invalid email address"},
        {"field": "password", "message": "Password must be at most 50 characters"},
    ]


def test_required_fields():
    with pytest.raises(ValidationFailed) as excinfo:
        parse(SignInRequest, {})
    assert excinfo.value.errors == [
        {"field": "email", "message": "Email is required"},
        {"field": "password", "message": "Password is required"},
    ]


def test_wrong_type():
    with pytest.raises(ValidationFailed) as excinfo:
        parse(UpdateUser, {"name": 42})
    assert excinfo.value.errors == [{"field": "name", "message": "Name must be a string"}]


@pytest.mark.parametrize("raw", [None, [], "text", 3])
def test_non_object_body(raw):
    with pytest.raises(ValidationFailed) as excinfo:
        parse(UpdateUser, raw)
    assert excinfo.value.errors == [
        {"field": "body", "message": "Request body must be a JSON object"}
    ]


def test_update_schema_everything_optional():
    update = parse(UpdateUser, {})
    assert update.model_dump(exclude_unset=True) == {}


def test_format_errors_strips_request_location():
    errors = format_errors([
        {"type": "missing", "loc": ("body", "password"), "msg": "Field required"},
        {"type": "int_parsing", "loc": ("query", "limit"), "msg": "Input should be a valid integer"},
    ])
    assert errors == [
        {"field": "password", "message": "Password is required"},
        {"field": "limit", "message": "Input should be a valid integer"},
    ]
