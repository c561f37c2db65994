import re

import pytest

from appwire.identity import IdentityToken
from appwire.registry import (
    ConflictingIdentityError,
    DuplicateIdentityError,
    IdentityNotFoundError,
    IdentityRegistry,
    NotRegisteredError,
)


class Value:
    pass


ID_TOKEN = IdentityToken("id")


def test_get_unregistered_string_id_raises():
    registry = IdentityRegistry()

    with pytest.raises(IdentityNotFoundError, match=re.escape("Could not find a value for identity 'id'")):
        registry.get("id")


def test_get_unregistered_token_id_raises():
    registry = IdentityRegistry()

    with pytest.raises(IdentityNotFoundError) as excinfo:
        registry.get(ID_TOKEN)

    assert str(excinfo.value) == "Could not find a value for identity 'IdentityToken(id)'"


def test_not_found_is_a_lookup_error():
    with pytest.raises(LookupError):
        IdentityRegistry().get("id")


def test_get_registered():
    registry = IdentityRegistry()
    expected = Value()
    registry.register("id", expected)

    assert registry.get("id") is expected


def test_contains():
    registry = IdentityRegistry()
    value = Value()

    assert registry.contains(value) is False
    registry.register("id", value)
    assert registry.contains(value) is True


def test_contains_compares_by_identity_not_equality():
    registry = IdentityRegistry()
    registry.register("a", [])

    assert registry.contains([]) is False


def test_delete():
    registry = IdentityRegistry()
    assert registry.delete("id") is False

    registry.register("id", Value())
    assert registry.has_id("id") is True
    assert registry.delete("id") is True
    assert registry.has_id("id") is False


def test_has_id():
    registry = IdentityRegistry()
    assert registry.has_id("id") is False

    registry.register("id", Value())
    assert registry.has_id("id") is True
    assert "id" in registry
    assert len(registry) == 1


def test_identify_unregistered_raises():
    registry = IdentityRegistry()

    with pytest.raises(NotRegisteredError, match="Could not identify non-registered value"):
        registry.identify(Value())


def test_identify_registered_token():
    registry = IdentityRegistry()
    value = Value()
    expected = IdentityToken()
    registry.register(expected, value)

    assert registry.identify(value) is expected


def test_tokens_with_the_same_description_are_distinct():
    registry = IdentityRegistry()
    registry.register(IdentityToken("id"), Value())

    assert registry.has_id(IdentityToken("id")) is False


def test_register_used_string_id_raises():
    registry = IdentityRegistry()
    registry.register("id", Value())

    with pytest.raises(
        DuplicateIdentityError,
        match=re.escape("A value has already been registered for the given identity (id)"),
    ):
        registry.register("id", Value())


def test_register_used_token_id_raises():
    registry = IdentityRegistry()
    registry.register(ID_TOKEN, Value())

    with pytest.raises(DuplicateIdentityError) as excinfo:
        registry.register(ID_TOKEN, Value())

    assert str(excinfo.value) == "A value has already been registered for the given identity (IdentityToken(id))"


def test_register_value_under_different_string_id_raises():
    registry = IdentityRegistry()
    value = Value()
    registry.register("id1", value)

    with pytest.raises(
        ConflictingIdentityError,
        match=re.escape("The value has already been registered with a different identity (id1)"),
    ):
        registry.register(IdentityToken("id2"), value)


def test_register_value_under_different_token_id_raises():
    registry = IdentityRegistry()
    value = Value()
    registry.register(IdentityToken("id1"), value)

    with pytest.raises(ConflictingIdentityError) as excinfo:
        registry.register("id2", value)

    assert str(excinfo.value) == (
        "The value has already been registered with a different identity (IdentityToken(id1))"
    )


def test_none_is_a_valid_identity():
    registry = IdentityRegistry()
    value = Value()
    registry.register(None, value)

    with pytest.raises(ConflictingIdentityError, match=re.escape("different identity (None)")):
        registry.register("other", value)

    assert registry.identify(value) is None
    assert registry.get(None) is value


def test_register_same_pair_returns_same_handle():
    registry = IdentityRegistry()
    value = Value()

    expected = registry.register("id", value)
    actual = registry.register("id", value)

    assert actual is expected


def test_destroying_handle_removes_entry():
    registry = IdentityRegistry()
    value = Value()
    handle = registry.register("id", value)

    handle.destroy()

    assert registry.has_id("id") is False
    assert registry.contains(value) is False


def test_destroying_handle_twice_is_noop():
    registry = IdentityRegistry()
    handle = registry.register("id", Value())

    handle.destroy()
    handle.destroy()

    assert registry.has_id("id") is False


def test_identity_and_value_are_reusable_after_removal():
    registry = IdentityRegistry()
    value = Value()
    registry.register("id", value).destroy()

    registry.register("other", value)
    replacement = Value()
    registry.register("id", replacement)

    assert registry.identify(value) == "other"
    assert registry.get("id") is replacement


def test_stale_handle_does_not_remove_new_registration():
    registry = IdentityRegistry()
    stale = registry.register("id", Value())
    registry.delete("id")
    replacement = Value()
    registry.register("id", replacement)

    stale.destroy()

    assert registry.get("id") is replacement
