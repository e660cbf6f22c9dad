"""
Tagged-state transition tables for the entity parsers.

Every entity kind describes its document shape as a mapping from a state
(a member of an ``enum.Enum``) to a :class:`Node`. The node names the element
that closes the state, the state to return to, the child elements that lead
to other states, and what to do with text seen while in the state. The
transition itself is the pure function :func:`transition`; side effects
(assigning fields, creating related records) are applied by the driver in
:mod:`discogs_load.parser`.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Union

from discogs_load.errors import ProgrammingFault


@dataclass(frozen=True)
class StartElement:
    name: str
    attributes: tuple = ()


@dataclass(frozen=True)
class EndElement:
    name: str


@dataclass(frozen=True)
class Text:
    text: str


Event = Union[StartElement, EndElement, Text]


@dataclass(frozen=True)
class Node:
    """
    One state of an entity parser.

    Args:
        tag (str): Local name of the element whose closing tag leaves this state.
        parent (Optional[Enum]): State to return to on that closing tag; None for the entity state.
        children (Mapping[str, Enum]): Child element name -> state entered on its opening tag.
        attr (Optional[str]): Record attribute that text in this state is written to.
        owner (Optional[str]): Related table the attribute belongs to; None means the primary record.
        numeric (bool): Convert text with strict int4 parsing.
        append (bool): Append text to a list attribute instead of assigning it.
        opens (Optional[str]): Related table for which a new record is created on entering the state.
    """
    tag: str
    parent: Optional[Enum] = None
    children: Mapping[str, Enum] = field(default_factory=dict)
    attr: Optional[str] = None
    owner: Optional[str] = None
    numeric: bool = False
    append: bool = False
    opens: Optional[str] = None


StateTable = Dict[Enum, Node]


def transition(table: StateTable, state: Enum, event: Event) -> Enum:
    """
    Compute the next state for an event.

    A recognized child element enters its state, the closing tag of the
    current state returns to its parent, and anything else leaves the state
    unchanged.
    """
    node = table[state]
    if isinstance(event, StartElement):
        return node.children.get(event.name, state)
    if isinstance(event, EndElement) and event.name == node.tag and node.parent is not None:
        return node.parent
    return state


def root_state(table: StateTable) -> Enum:
    roots = [state for state, node in table.items() if node.parent is None]
    if len(roots) != 1:
        raise ProgrammingFault(f"expected exactly one root state, found {roots}")
    return roots[0]


def validate_table(table: StateTable) -> None:
    """
    Check that a state table forms a tree: every child points back at the
    state that lists it, and every non-root state is reachable from exactly one parent.
    """
    root_state(table)
    seen = {}
    for state, node in table.items():
        for name, child in node.children.items():
            if child not in table:
                raise ProgrammingFault(f"{state} -> {name!r} leads to unknown state {child}")
            if table[child].tag != name:
                raise ProgrammingFault(f"{child} is entered by {name!r} but closed by {table[child].tag!r}")
            if table[child].parent is not state:
                raise ProgrammingFault(f"{child} is entered from {state} but returns to {table[child].parent}")
            if child in seen:
                raise ProgrammingFault(f"{child} is entered from both {seen[child]} and {state}")
            seen[child] = state
    for state, node in table.items():
        if node.parent is not None and state not in seen:
            raise ProgrammingFault(f"{state} is unreachable")
        if node.append and not node.attr:
            raise ProgrammingFault(f"{state} appends without an attribute")
