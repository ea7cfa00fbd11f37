import math
from datetime import datetime, timedelta, timezone

import pytest

from session.models import Session, id_from_cookie_value


def loaded_session(**values) -> Session:
    """A session as a store would hand it back: no cookie value, nothing changed."""
    session = Session.new()
    for key, value in values.items():
        session.insert(key, value)
    session.into_cookie_value()
    session.reset_data_changed()
    return session


def test_new_session_is_empty_with_random_id():
    first, second = Session.new(), Session.new()

    assert len(first) == 0
    assert first.expiry is None
    assert first.id != second.id
    assert first.cookie_value != second.cookie_value
    assert not first.data_changed
    assert not first.is_destroyed


def test_id_is_derived_from_cookie_value():
    session = Session.new()
    assert session.id == id_from_cookie_value(session.cookie_value)


def test_into_cookie_value_is_taken_once():
    session = Session.new()
    cookie_value = session.cookie_value

    assert session.into_cookie_value() == cookie_value
    assert session.into_cookie_value() is None


def test_insert_marks_changed():
    session = Session.new()
    session.insert("username", "salvo")

    assert session.get("username") == "salvo"
    assert "username" in session
    assert session.data_changed


def test_inserting_same_value_does_not_mark_changed():
    session = loaded_session(username="salvo")
    session.insert("username", "salvo")
    assert not session.data_changed


def test_insert_rejects_unserialisable_values():
    session = Session.new()
    with pytest.raises(TypeError):
        session.insert("bad", object())
    assert "bad" not in session
    assert not session.data_changed


def test_remove_and_clear_mark_changed():
    session = loaded_session(a=1, b=2)

    assert session.remove("missing") is None
    assert not session.data_changed

    assert session.remove("a") == 1
    assert session.data_changed

    session.reset_data_changed()
    session.clear()
    assert session.data_changed
    assert len(session) == 0


def test_destroy_is_one_way():
    session = Session.new()
    session.destroy()
    session.insert("x", 1)
    assert session.is_destroyed


def test_regenerate_keeps_data_with_new_id():
    session = loaded_session(username="salvo")
    old_id = session.id
    session.regenerate()

    assert session.id != old_id
    assert session.get("username") == "salvo"
    assert session.cookie_value is not None
    assert session.id == id_from_cookie_value(session.cookie_value)
    assert session.data_changed


def test_expire_in_does_not_mark_changed():
    session = Session.new()
    session.expire_in(timedelta(minutes=5))

    assert not session.data_changed
    assert timedelta(minutes=4) < session.expires_in() <= timedelta(minutes=5)
    assert not session.is_expired()


def test_expired_session_fails_validation():
    session = Session.new()
    session.expire_in(timedelta(seconds=-1))

    assert session.is_expired()
    assert session.validate_expiry() is None


def test_session_without_expiry_never_expires():
    session = Session.new()
    assert session.expires_in() is None
    assert session.validate_expiry() is session


def test_set_expiry_assumes_utc_for_naive_datetimes():
    session = Session.new()
    session.set_expiry(datetime(2000, 1, 1))
    assert session.expiry.tzinfo == timezone.utc
    assert session.is_expired()


def test_json_round_trip_drops_transient_state():
    session = Session.new()
    session.insert("username", "salvo")
    session.expire_in(timedelta(hours=1))

    restored = Session.model_validate_json(session.model_dump_json())

    assert restored.id == session.id
    assert restored.get("username") == "salvo"
    assert restored.expiry == session.expiry
    assert restored.cookie_value is None
    assert not restored.data_changed


def test_get_returns_a_copy():
    session = loaded_session(cart=["a"])

    cart = session.get("cart")
    cart.append("b")

    assert session.get("cart") == ["a"]
    assert not session.data_changed


def test_reinserting_mutated_value_marks_changed():
    session = loaded_session(cart=["a"])

    cart = session.get("cart")
    cart.append("b")
    session.insert("cart", cart)

    assert session.data_changed
    assert session.get("cart") == ["a", "b"]


def test_nested_mutation_marks_changed():
    session = loaded_session(profile={"tags": {"admin": False}})

    profile = session.get("profile")
    profile["tags"]["admin"] = True
    session.insert("profile", profile)

    assert session.data_changed


@pytest.mark.parametrize("value, expected", [
    (("a", 1), ["a", 1]),
    ({1: "one"}, {"1": "one"}),
])
def test_values_read_back_as_they_will_be_stored(value, expected):
    session = Session.new()
    session.insert("key", value)

    assert session.get("key") == expected
    restored = Session.model_validate_json(session.model_dump_json())
    assert restored.get("key") == expected


def test_nan_survives_store_round_trip():
    session = Session.new()
    session.insert("ratio", float("nan"))

    restored = Session.model_validate_json(session.model_dump_json())

    assert math.isnan(restored.get("ratio"))


def test_reinserting_equal_converted_value_does_not_mark_changed():
    session = loaded_session(pair=("a", 1))
    session.insert("pair", ["a", 1])
    assert not session.data_changed
