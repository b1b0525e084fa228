"""
Attr implementation for the DOM.
"""


class Attr:
    """
    A single attribute of an Element.

    ``name`` keeps the case the parser produced (``viewBox`` on svg);
    Element lookups compare names case-insensitively.
    """

    __slots__ = ('name', 'value')

    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value

    def __repr__(self) -> str:
        return f"Attr({self.name!r}, {self.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Attr):
            return NotImplemented
        return self.name == other.name and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.name, self.value))
