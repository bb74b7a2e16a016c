"""
Line classification and field extraction for nfsd pseudo-files.

The kernel files read by this exporter are line oriented and loosely
structured. This module is the single place that decides:

- which lines belong to which record (substring containment on a tag)
- how a line is split into tokens (single spaces)
- how tokens map to named fields (fixed, ordered schema per tag)
- how a states line is classified (first matching `type: <kind>` wins)

Classification uses containment, not prefix or exact matching. That keeps
the exporter compatible with the series it has always produced, at the
cost of a known ambiguity: a states line with `type: open-downgrade` is
counted as an open.
"""

import re
from dataclasses import dataclass

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# ASCII digits only; int() alone would also accept "1_000" and non-ASCII digits
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# (kind, needle) in match priority order
STATE_TYPES: tuple[tuple[str, str], ...] = (
    ("open", "type: open"),
    ("lock", "type: lock"),
    ("deleg", "type: deleg"),
    ("layout", "type: layout"),
)


class SchemaMismatch(Exception):
    """
    Raised when a tagged line has fewer tokens than its schema needs.

    Attributes:
        schema: The schema that was applied
        token_count: Number of tokens actually found
    """

    def __init__(self, schema: "RecordSchema", token_count: int) -> None:
        self.schema = schema
        self.token_count = token_count
        super().__init__(
            f"'{schema.tag}' record needs {schema.min_tokens} tokens, got {token_count}"
        )


def split_tokens(line: str) -> list[str]:
    """Split on single spaces, keeping empty tokens for repeated spaces."""
    return line.split(" ")


def parse_int64(token: str) -> int:
    """
    Parse a kernel counter token as a signed 64-bit integer.

    Raises:
        ValueError: If the token is not a base-10 integer or overflows int64
    """
    if not INTEGER_PATTERN.fullmatch(token):
        raise ValueError(f"invalid integer {token!r}")
    value = int(token)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(f"integer {token!r} out of int64 range")
    return value


@dataclass(frozen=True)
class RecordSchema:
    """
    Fixed schema for one tagged line of /proc/net/rpc/nfsd.

    The first token is the tag itself; the following tokens are mapped
    positionally onto `fields`. Extra trailing tokens are ignored.

    Attributes:
        tag: Substring that selects the line (e.g., "rc")
        fields: Ordered field names for tokens[1:]
    """

    tag: str
    fields: tuple[str, ...]

    @property
    def min_tokens(self) -> int:
        return len(self.fields) + 1

    def matches(self, line: str) -> bool:
        return self.tag in line

    def parse(self, line: str) -> dict[str, int]:
        """
        Extract the schema's fields from a line.

        Returns:
            Mapping of field name to integer value

        Raises:
            SchemaMismatch: If the line has too few tokens
            ValueError: If a field is not a valid int64
        """
        tokens = split_tokens(line)
        if len(tokens) < self.min_tokens:
            raise SchemaMismatch(self, len(tokens))
        return {name: parse_int64(token) for name, token in zip(self.fields, tokens[1:])}


REPLY_CACHE_SCHEMA = RecordSchema("rc", ("hits", "misses", "nocache"))
IO_SCHEMA = RecordSchema("io", ("read", "write"))
NETWORK_SCHEMA = RecordSchema(
    "net", ("packets_total", "udp_packets", "tcp_packets", "tcp_connections")
)

# Evaluation order for every line; checks are independent of each other
RPC_NFSD_SCHEMAS: tuple[RecordSchema, ...] = (REPLY_CACHE_SCHEMA, IO_SCHEMA, NETWORK_SCHEMA)


def classify_state_line(line: str) -> str | None:
    """
    Return the state kind ("open", "lock", "deleg", "layout") of a states line.

    Only the first matching kind counts, so a line never increments two
    counters. Returns None for lines that describe none of the kinds.
    """
    for kind, needle in STATE_TYPES:
        if needle in line:
            return kind
    return None


def extract_client_id(line: str) -> str | None:
    """Return the client id from a `clientid:` info line, None for other lines."""
    if "clientid" not in line:
        return None
    return line.replace("clientid:", "").strip()


def extract_address(line: str) -> str | None:
    """
    Return the unquoted client address from an `address:` info line.

    The `callback address:` line is not the client address and yields None.
    """
    if "address" not in line or "callback" in line:
        return None
    return line.replace('"', "").replace("address:", "").strip()
