"""
CREATE TABLE parser.

Turns one schema-definition statement into a `TableStructure`. Only the subset
of the grammar needed for table definitions is understood:

    CREATE TABLE [IF NOT EXISTS] [keyspace.]name (
        column type [PRIMARY KEY],
        ...
        [, PRIMARY KEY (partition_key [, clustering ...])]
    ) [;]

where `partition_key` is a single column or a parenthesised list, and `type`
is a native type or a nested `set`/`list`/`map`/`tuple`/`frozen` expression.
Table options (``WITH ...``) are not accepted; they are rendered from
`TableParams` instead.

Design:
- Tokenize with one regex, then a small recursive-descent parser.
- Unquoted identifiers are case-folded to lowercase; quoted ones keep their case.
- Every failure raises `SchemaParseError` with the character offset when known.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TypeAlias

from src.auth_schema.exceptions import SchemaParseError
from src.auth_schema.models import Column, PrimaryKey, TableStructure
from src.auth_schema.types import (
    DataType,
    FrozenType,
    ListType,
    MapType,
    Native,
    SetType,
    TupleType,
    is_multi_cell,
)
from src.enums import NativeType

_TOKEN = re.compile(
    r"""\s*(?:
        (?P<quoted>"(?:[^"]|"")*")
      | (?P<word>[A-Za-z_][A-Za-z0-9_]*)
      | (?P<punct>[(),.;<>])
    )""",
    re.VERBOSE,
)

_NATIVE_TYPES = {t.value: t for t in NativeType}
_COLLECTION_ARITY = {"set": 1, "list": 1, "map": 2, "frozen": 1}


@dataclass(frozen=True)
class Token:
    kind: str  # "word", "quoted", "punct", or "end"
    value: str
    position: int


# (keyspace, table, if_not_exists, columns with their tokens, primary key declarations)
_RawStatement: TypeAlias = tuple[
    str | None, str, bool, list[tuple[Column, Token]], list[PrimaryKey]
]


def tokenize(text: str) -> list[Token]:
    """Split `text` into tokens, ending with a single 'end' token."""
    tokens: list[Token] = []
    position = 0
    length = len(text)
    while position < length:
        if text[position:].strip() == "":
            break
        match = _TOKEN.match(text, position)
        if match is None:
            offset = position + (len(text[position:]) - len(text[position:].lstrip()))
            raise SchemaParseError(f"Unexpected character {text[offset]!r}", position=offset)
        kind = match.lastgroup or ""
        value = match.group(kind)
        tokens.append(Token(kind, value, match.start(kind)))
        position = match.end()
    tokens.append(Token("end", "", length))
    return tokens


class _Parser:
    """Recursive-descent parser over the token list of one statement."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._index = 0

    # ----- token helpers -----

    def _peek(self, offset: int = 0) -> Token:
        index = min(self._index + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._peek()
        if token.kind != "end":
            self._index += 1
        return token

    def _error(self, message: str, token: Token | None = None) -> SchemaParseError:
        token = token or self._peek()
        found = "end of input" if token.kind == "end" else repr(token.value)
        return SchemaParseError(f"{message}, found {found}", position=token.position)

    def _is_keyword(self, keyword: str, offset: int = 0) -> bool:
        token = self._peek(offset)
        return token.kind == "word" and token.value.upper() == keyword

    def _accept_keyword(self, keyword: str) -> bool:
        if self._is_keyword(keyword):
            self._advance()
            return True
        return False

    def _expect_keyword(self, keyword: str) -> None:
        if not self._accept_keyword(keyword):
            raise self._error(f"Expected {keyword}")

    def _accept_punct(self, symbol: str) -> bool:
        token = self._peek()
        if token.kind == "punct" and token.value == symbol:
            self._advance()
            return True
        return False

    def _expect_punct(self, symbol: str) -> None:
        if not self._accept_punct(symbol):
            raise self._error(f"Expected '{symbol}'")

    def _identifier(self, what: str) -> str:
        token = self._peek()
        if token.kind == "word":
            self._advance()
            return token.value.lower()
        if token.kind == "quoted":
            self._advance()
            return token.value[1:-1].replace('""', '"')
        raise self._error(f"Expected {what}")

    # ----- grammar -----

    def statement(self) -> _RawStatement:
        """Parse the whole statement; returns raw pieces for semantic checks."""
        self._expect_keyword("CREATE")
        self._expect_keyword("TABLE")
        if_not_exists = False
        if self._accept_keyword("IF"):
            self._expect_keyword("NOT")
            self._expect_keyword("EXISTS")
            if_not_exists = True

        keyspace: str | None = None
        table = self._identifier("table name")
        if self._accept_punct("."):
            keyspace, table = table, self._identifier("table name")

        self._expect_punct("(")
        columns: list[tuple[Column, Token]] = []
        keys: list[PrimaryKey] = []
        while True:
            self._definition(columns, keys)
            if not self._accept_punct(","):
                break
        self._expect_punct(")")

        if self._is_keyword("WITH"):
            raise self._error("Table options are not supported in schema text")
        self._accept_punct(";")
        if self._peek().kind != "end":
            raise self._error("Expected end of statement")
        return keyspace, table, if_not_exists, columns, keys

    def _definition(self, columns: list[tuple[Column, Token]], keys: list[PrimaryKey]) -> None:
        if self._is_keyword("PRIMARY") and self._is_keyword("KEY", offset=1):
            self._advance()
            self._advance()
            keys.append(self._primary_key())
            return

        token = self._peek()
        name = self._identifier("column name")
        column = Column(name=name, data_type=self._type())
        columns.append((column, token))
        if self._accept_keyword("PRIMARY"):
            self._expect_keyword("KEY")
            keys.append(PrimaryKey(partition_key=(name,)))

    def _primary_key(self) -> PrimaryKey:
        self._expect_punct("(")
        if self._accept_punct("("):
            partition = [self._identifier("partition key column")]
            while self._accept_punct(","):
                partition.append(self._identifier("partition key column"))
            self._expect_punct(")")
        else:
            partition = [self._identifier("partition key column")]

        clustering: list[str] = []
        while self._accept_punct(","):
            clustering.append(self._identifier("clustering column"))
        self._expect_punct(")")
        return PrimaryKey(partition_key=tuple(partition), clustering_columns=tuple(clustering))

    def _type(self) -> DataType:
        token = self._peek()
        if token.kind != "word":
            raise self._error("Expected a type")
        self._advance()
        name = token.value.lower()

        if name in _NATIVE_TYPES:
            if self._peek().value == "<" and self._peek().kind == "punct":
                raise self._error(f"Type {name} takes no parameters")
            return Native(_NATIVE_TYPES[name])

        if name not in _COLLECTION_ARITY and name != "tuple":
            raise SchemaParseError(f"Unknown type {token.value!r}", position=token.position)

        self._expect_punct("<")
        arguments = [self._type()]
        while self._accept_punct(","):
            arguments.append(self._type())
        self._expect_punct(">")

        if name == "tuple":
            return TupleType(tuple(arguments))
        arity = _COLLECTION_ARITY[name]
        if len(arguments) != arity:
            raise SchemaParseError(
                f"Type {name} expects {arity} parameter(s), got {len(arguments)}",
                position=token.position,
            )
        if name == "frozen":
            if isinstance(arguments[0], Native):
                raise SchemaParseError(
                    f"frozen<> cannot wrap native type {arguments[0].cql()}",
                    position=token.position,
                )
            return FrozenType(arguments[0])
        if any(is_multi_cell(argument) for argument in arguments):
            raise SchemaParseError(
                f"Non-frozen collections are not allowed inside {name}<>",
                position=token.position,
            )
        if name == "set":
            return SetType(arguments[0])
        if name == "map":
            return MapType(arguments[0], arguments[1])
        return ListType(arguments[0])


# ---------- semantic checks ----------


def _check_columns(columns: list[tuple[Column, Token]]) -> None:
    seen: set[str] = set()
    for column, token in columns:
        if column.name in seen:
            raise SchemaParseError(
                f"Duplicate column {column.name!r}", position=token.position
            )
        seen.add(column.name)
    if not columns:
        raise SchemaParseError("Table declares no columns")


def _check_primary_key(keys: list[PrimaryKey], by_name: dict[str, Column]) -> PrimaryKey:
    if not keys:
        raise SchemaParseError("No PRIMARY KEY specified")
    if len(keys) > 1:
        raise SchemaParseError("Multiple PRIMARY KEY declarations")

    primary_key = keys[0]
    key_columns = primary_key.columns
    if len(set(key_columns)) != len(key_columns):
        raise SchemaParseError(f"Column repeated in PRIMARY KEY {list(key_columns)}")
    for name in key_columns:
        if name not in by_name:
            raise SchemaParseError(f"Unknown column {name!r} referenced in PRIMARY KEY")
        if is_multi_cell(by_name[name].data_type):
            raise SchemaParseError(
                f"Invalid non-frozen collection type for PRIMARY KEY component {name!r}"
            )
    return primary_key


# ---------- public API ----------


def parse_create_table(text: str, keyspace: str) -> TableStructure:
    """
    Parse one CREATE TABLE statement into a TableStructure belonging to `keyspace`.

    Raises:
        SchemaParseError: on any syntactic or structural problem.
    """
    if not text or not text.strip():
        raise SchemaParseError("Schema text is empty", position=0)

    parser = _Parser(tokenize(text))
    declared_keyspace, table, if_not_exists, columns, keys = parser.statement()

    if declared_keyspace is not None and declared_keyspace != keyspace:
        raise SchemaParseError(
            f"Table is declared in keyspace {declared_keyspace!r}, expected {keyspace!r}",
            table_name=table,
        )

    _check_columns(columns)
    by_name = {column.name: column for column, _ in columns}
    primary_key = _check_primary_key(keys, by_name)

    return TableStructure(
        keyspace=keyspace,
        name=table,
        columns=tuple(column for column, _ in columns),
        primary_key=primary_key,
        if_not_exists=if_not_exists,
    )
