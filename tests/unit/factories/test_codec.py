from __future__ import annotations

import ast
import textwrap

import pytest

from container_installer.core.exceptions import PersistenceReadError
from container_installer.core.factories import Expression, FactoryEntry, parse_entries, render_entries


def test_factory_code_is_emitted_verbatim() -> None:
    entry = FactoryEntry(
        name="acme/foo_0",
        description="Container for package acme/foo",
        factory=Expression("lambda root: acme.foo.Container(root)"),
        enable=True,
    )

    text = render_entries([entry])

    assert "        'factory': lambda root: acme.foo.Container(root),\n" in text
    assert "        'name': 'acme/foo_0',\n" in text
    assert "        'enable': True,\n" in text
    assert text.startswith("# This file is generated by container-installer.")
    ast.parse(text)


def test_keys_are_emitted_in_canonical_order() -> None:
    entry = FactoryEntry(
        name="n", description="d", factory=Expression("f"), enable=False, extra={"zeta": 1, "alpha": 2}
    )

    rendered_keys = [k for k in parse_entries(render_entries([entry]))[0]]

    assert rendered_keys == ["name", "description", "factory", "enable", "zeta", "alpha"]


def test_parse_keeps_factory_source_and_literals() -> None:
    source = textwrap.dedent(
        """
        CONTAINERS = [
            {
                'name': 'a',
                'description': "A's container",
                'factory': make_container(settings.DEBUG),
                'enable': False,
                'tags': ['x', 'y'],
            },
        ]
        """
    )

    (entry,) = parse_entries(source)

    assert entry["factory"] == "make_container(settings.DEBUG)"
    assert isinstance(entry["factory"], Expression)
    assert entry["description"] == "A's container"
    assert entry["enable"] is False
    assert entry["tags"] == ["x", "y"]


def test_parse_carries_non_literal_extension_values_as_expressions() -> None:
    source = "CONTAINERS = [{'name': 'a', 'factory': f, 'timeout': 2 * SECONDS}]\n"

    (entry,) = parse_entries(source)

    assert entry["timeout"] == Expression("2 * SECONDS")


def test_rendered_output_is_stable() -> None:
    entry = FactoryEntry(name="n", description="d", factory=Expression("f()"), enable=True)

    assert render_entries([entry]) == render_entries([entry])


@pytest.mark.parametrize(
    "source",
    [
        "CONTAINERS = [",
        "OTHER = []\n",
        "CONTAINERS = {'name': 'a'}\n",
        "CONTAINERS = ['a']\n",
        "CONTAINERS = [{'description': 'no name'}]\n",
        "CONTAINERS = [{1: 'a'}]\n",
    ],
)
def test_parse_rejects_files_that_are_not_container_modules(source: str) -> None:
    with pytest.raises(PersistenceReadError):
        parse_entries(source)
