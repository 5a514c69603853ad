from __future__ import annotations

import pytest

from container_installer.core.exceptions import MalformedFactoryDeclarationError
from container_installer.core.factories import (
    Descriptor,
    DescriptorList,
    Expression,
    MixedList,
    ScalarFactory,
    ScalarList,
    classify_declaration,
    expand_declaration,
)


def test_single_string_is_scalar_factory() -> None:
    decl = classify_declaration("acme/bar", "acme.bar.create_container")

    assert decl == ScalarFactory(Expression("acme.bar.create_container"))


def test_list_of_strings_is_scalar_list() -> None:
    decl = classify_declaration("acme/foo", ["foo.first", "lambda root: foo.Second(root)"])

    assert isinstance(decl, ScalarList)
    assert list(decl.codes) == ["foo.first", "lambda root: foo.Second(root)"]


def test_mapping_is_single_descriptor() -> None:
    decl = classify_declaration(
        "acme/foo", {"name": "foo", "description": "Foo", "factory": "foo.create"}
    )

    assert isinstance(decl, Descriptor)
    assert decl.fields["name"] == "foo"
    assert isinstance(decl.fields["factory"], Expression)


def test_list_of_mappings_is_descriptor_list() -> None:
    decl = classify_declaration("acme/foo", [{"factory": "a.b"}, {"factory": "c.d", "name": "d"}])

    assert isinstance(decl, DescriptorList)
    assert [d.fields["factory"] for d in decl.descriptors] == ["a.b", "c.d"]


def test_sequential_keyed_mapping_is_treated_as_list() -> None:
    decl = classify_declaration("acme/foo", {"0": "first.factory", "1": "second.factory"})

    assert decl == ScalarList((Expression("first.factory"), Expression("second.factory")))


def test_empty_list_declares_nothing() -> None:
    decl = classify_declaration("acme/foo", [])

    assert decl == ScalarList(())
    assert expand_declaration("acme/foo", decl) == []


@pytest.mark.parametrize(
    "raw",
    [
        42,
        3.5,
        True,
        ["ok.factory", 7],
        ["ok.factory", {"name": "no-factory"}],
        {"name": "missing-factory"},
        {"factory": 12},
        {"factory": "x.y", "enable": "yes"},
        "",
        "not valid python(",
        "first, second",
        "value  # trailing comment",
        "*args",
    ],
)
def test_malformed_declarations_raise(raw) -> None:
    with pytest.raises(MalformedFactoryDeclarationError) as excinfo:
        classify_declaration("acme/broken", raw)

    err = excinfo.value
    assert err.package == "acme/broken"
    assert err.value == raw
    assert "acme/broken" in str(err)


def test_two_bare_strings_get_numbered_names_and_descriptions() -> None:
    entries = expand_declaration("acme/foo", classify_declaration("acme/foo", ["f.a", "f.b"]))

    assert [e.name for e in entries] == ["acme/foo_0", "acme/foo_1"]
    assert [e.description for e in entries] == [
        "Container number 0 for package acme/foo",
        "Container number 1 for package acme/foo",
    ]
    assert [e.enable for e in entries] == [None, None]


def test_single_bare_string_gets_single_container_description() -> None:
    entries = expand_declaration("acme/bar", classify_declaration("acme/bar", "bar.create"))

    assert len(entries) == 1
    assert entries[0].name == "acme/bar_0"
    assert entries[0].description == "Container for package acme/bar"
    assert entries[0].factory == "bar.create"


def test_descriptor_fields_are_kept_and_extras_preserved() -> None:
    raw = {
        "name": "acme.mailer",
        "description": "Mailer services",
        "factory": "mailer.build",
        "enable": False,
        "priority": 10,
    }

    (entry,) = expand_declaration("acme/mailer", classify_declaration("acme/mailer", raw))

    assert entry.name == "acme.mailer"
    assert entry.description == "Mailer services"
    assert entry.factory == "mailer.build"
    assert entry.enable is False
    assert entry.extra == {"priority": 10}


def test_descriptor_without_name_or_description_gets_defaults() -> None:
    raw = [{"factory": "a.one"}, {"factory": "a.two", "name": "named"}]

    entries = expand_declaration("acme/a", classify_declaration("acme/a", raw))

    assert [e.name for e in entries] == ["acme/a_0", "named"]
    assert entries[1].description == "Container number 1 for package acme/a"


def test_multiline_factory_code_is_accepted() -> None:
    code = "lambda root: (\n    acme.Container(root)\n)"

    decl = classify_declaration("acme/multi", code)

    assert decl == ScalarFactory(Expression(code))


def test_mixed_list_expands_each_element_by_position() -> None:
    raw = ["a.b", {"name": "n", "factory": "c.d"}]

    decl = classify_declaration("acme/mix", raw)
    entries = expand_declaration("acme/mix", decl)

    assert isinstance(decl, MixedList)
    assert [e.name for e in entries] == ["acme/mix_0", "n"]
    assert [e.factory for e in entries] == ["a.b", "c.d"]
    assert entries[0].description == "Container number 0 for package acme/mix"
    assert entries[1].description == "Container number 1 for package acme/mix"
