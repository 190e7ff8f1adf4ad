"""Table definitions and row models for blocks and transactions."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from typing import Any, TypeVar

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    Integer,
    LargeBinary,
    MetaData,
    SmallInteger,
    String,
    Table,
)
from sqlalchemy.dialects import postgresql
from sqlalchemy.types import TypeDecorator

from .hexutil import Hex


class _BinaryArray(TypeDecorator):
    """An array of byte strings: native on PostgreSQL, hex-encoded JSON elsewhere."""

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.ARRAY(LargeBinary))
        return dialect.type_descriptor(JSON(none_as_null=True))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name == "postgresql":
            return value
        return [bytes(item).hex() for item in value]

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if dialect.name == "postgresql":
            return [bytes(item) for item in value]
        return [bytes.fromhex(item) for item in value]


metadata = MetaData()

blocks = Table(
    "blocks",
    metadata,
    Column("hash", LargeBinary, primary_key=True),
    Column("accepted_id_merkle_root", LargeBinary, nullable=False),
    Column("merge_set_blues_hashes", _BinaryArray, nullable=False),
    Column("merge_set_reds_hashes", _BinaryArray, nullable=True),
    Column("selected_parent_hash", LargeBinary, nullable=False),
    Column("bits", BigInteger, nullable=False),
    Column("blue_score", BigInteger, nullable=False),
    Column("blue_work", LargeBinary, nullable=False),
    Column("daa_score", BigInteger, nullable=False),
    Column("hash_merkle_root", LargeBinary, nullable=False),
    Column("nonce", LargeBinary, nullable=False),
    Column("pruning_point", LargeBinary, nullable=False),
    Column("timestamp", BigInteger, nullable=False),
    Column("utxo_commitment", LargeBinary, nullable=False),
    Column("version", SmallInteger, nullable=False),
)

transactions = Table(
    "transactions",
    metadata,
    Column("transaction_id", LargeBinary, primary_key=True),
    Column("subnetwork_id", Integer, nullable=False),
    Column("hash", LargeBinary, nullable=False),
    Column("mass", Integer, nullable=True),
    Column("payload", LargeBinary, nullable=True),
    Column("block_time", BigInteger, nullable=False),
)

transactions_inputs = Table(
    "transactions_inputs",
    metadata,
    Column("transaction_id", LargeBinary, primary_key=True),
    Column("index", SmallInteger, primary_key=True),
    Column("previous_outpoint_hash", LargeBinary, nullable=False),
    Column("previous_outpoint_index", SmallInteger, nullable=False),
    Column("signature_script", LargeBinary, nullable=False),
    Column("sig_op_count", SmallInteger, nullable=False),
    Column("block_time", BigInteger, nullable=False),
    Column("previous_outpoint_script", LargeBinary, nullable=False),
    Column("previous_outpoint_amount", BigInteger, nullable=False),
)

transactions_outputs = Table(
    "transactions_outputs",
    metadata,
    Column("transaction_id", LargeBinary, primary_key=True),
    Column("index", SmallInteger, primary_key=True),
    Column("amount", BigInteger, nullable=False),
    Column("script_public_key", LargeBinary, nullable=False),
    Column("script_public_key_address", String, nullable=False),
    Column("block_time", BigInteger, nullable=False),
)


def _to_hex(value: Any) -> Hex:
    if isinstance(value, Hex):
        return value
    if isinstance(value, str):
        return Hex(value)
    return Hex.from_bytes(bytes(value))


def _to_bytes(value: Any) -> bytes:
    return bytes(value)


def _to_hex_list(value: Any) -> list[Hex]:
    return [_to_hex(item) for item in value]


def _optional(convert: Callable[[Any], Any]) -> Callable[[Any], Any]:
    return lambda value: None if value is None else convert(value)


def _column(convert: Callable[[Any], Any]):
    return field(metadata={"convert": convert})


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Hex):
        return value.inner
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    return value


_Model = TypeVar("_Model")


def _from_row(cls: type[_Model], row: Any) -> _Model:
    mapping: Mapping[str, Any] = getattr(row, "_mapping", row)
    values = {}
    for item in fields(cls):
        convert = item.metadata.get("convert")
        raw = mapping[item.name]
        values[item.name] = convert(raw) if convert else raw
    return cls(**values)


def _to_dict(model: Any) -> dict[str, Any]:
    return {_camel(item.name): _jsonable(getattr(model, item.name)) for item in fields(model)}


@dataclass
class Header:
    """A block header as stored in the ``blocks`` table."""

    hash: Hex = _column(_to_hex)
    accepted_id_merkle_root: Hex = _column(_to_hex)
    merge_set_blues_hashes: list[Hex] = _column(_to_hex_list)
    merge_set_reds_hashes: list[Hex] | None = _column(_optional(_to_hex_list))
    selected_parent_hash: Hex = _column(_to_hex)
    bits: int = _column(int)
    blue_score: int = _column(int)
    blue_work: bytes = _column(_to_bytes)
    daa_score: int = _column(int)
    hash_merkle_root: Hex = _column(_to_hex)
    nonce: bytes = _column(_to_bytes)
    pruning_point: Hex = _column(_to_hex)
    timestamp: int = _column(int)
    utxo_commitment: Hex = _column(_to_hex)
    version: int = _column(int)

    @classmethod
    def from_row(cls, row) -> Header:
        """Build the header from a mapping or a SQLAlchemy row."""
        return _from_row(cls, row)

    def to_dict(self) -> dict[str, Any]:
        """Render as a JSON-ready dict with camelCase keys."""
        return _to_dict(self)


@dataclass
class Tx:
    """A transaction as stored in the ``transactions`` table."""

    transaction_id: Hex = _column(_to_hex)
    subnetwork_id: int = _column(int)
    hash: Hex = _column(_to_hex)
    mass: int | None = _column(_optional(int))
    payload: bytes | None = _column(_optional(_to_bytes))
    block_time: int = _column(int)

    @classmethod
    def from_row(cls, row) -> Tx:
        """Build the transaction from a mapping or a SQLAlchemy row."""
        return _from_row(cls, row)

    def to_dict(self) -> dict[str, Any]:
        """Render as a JSON-ready dict with camelCase keys."""
        return _to_dict(self)


@dataclass
class TxIn:
    """A transaction input as stored in the ``transactions_inputs`` table."""

    transaction_id: Hex = _column(_to_hex)
    index: int = _column(int)
    previous_outpoint_hash: Hex = _column(_to_hex)
    previous_outpoint_index: int = _column(int)
    signature_script: bytes = _column(_to_bytes)
    sig_op_count: int = _column(int)
    block_time: int = _column(int)
    previous_outpoint_script: bytes = _column(_to_bytes)
    previous_outpoint_amount: int = _column(int)

    @classmethod
    def from_row(cls, row) -> TxIn:
        """Build the input from a mapping or a SQLAlchemy row."""
        return _from_row(cls, row)

    def to_dict(self) -> dict[str, Any]:
        """Render as a JSON-ready dict with camelCase keys."""
        return _to_dict(self)


@dataclass
class TxOu:
    """A transaction output as stored in the ``transactions_outputs`` table."""

    transaction_id: Hex = _column(_to_hex)
    index: int = _column(int)
    amount: int = _column(int)
    script_public_key: bytes = _column(_to_bytes)
    script_public_key_address: str = _column(str)
    block_time: int = _column(int)

    @classmethod
    def from_row(cls, row) -> TxOu:
        """Build the output from a mapping or a SQLAlchemy row."""
        return _from_row(cls, row)

    def to_dict(self) -> dict[str, Any]:
        """Render as a JSON-ready dict with camelCase keys."""
        return _to_dict(self)