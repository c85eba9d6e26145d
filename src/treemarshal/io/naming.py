"""XML-friendly coding of element names."""

NESTED_SEPARATOR = "$"
"""Separator between an outer class and a class nested in it, inside a type name."""

ENCODED_NESTED_SEPARATOR = "_-"
"""How the nested separator is written in element names."""

LEGACY_NESTED_SEPARATOR = "-"
"""How documents written by old releases encoded the nested separator."""


class NameCoder:
    """
    Encodes type and member names into legal XML element names and back.

    ``$`` cannot appear in an XML name, so it is written as ``_-``. Decoding is the exact
    inverse. Legacy documents used a bare ``-`` instead; those names are passed through
    untouched and left for the compatibility resolver.

    A legacy name for a class nested in one whose name ends with ``_`` (``Outer_$Inner``, written
    ``Outer_-Inner`` by old releases) is indistinguishable from the current encoding of
    ``Outer$Inner`` and decodes as the latter.

    Examples:
        >>> coder = NameCoder()
        >>> coder.encode_node("app.Job$Config")
        'app.Job_-Config'
        >>> coder.decode_node("app.Job_-Config")
        'app.Job$Config'
        >>> coder.decode_node("app.Job-Config")
        'app.Job-Config'
    """

    def encode_node(self, name: str) -> str:
        return name.replace(NESTED_SEPARATOR, ENCODED_NESTED_SEPARATOR)

    def decode_node(self, name: str) -> str:
        return name.replace(ENCODED_NESTED_SEPARATOR, NESTED_SEPARATOR)

    def encode_attribute(self, name: str) -> str:
        return self.encode_node(name)

    def decode_attribute(self, name: str) -> str:
        return self.decode_node(name)
