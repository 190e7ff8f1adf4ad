"""Read-only queries behind the chain and transaction endpoints."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from http import HTTPStatus
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from .hexutil import DbError, Hex
from .models import Header, Tx, TxOu, blocks, transactions, transactions_outputs

_log = logging.getLogger(__name__)


class QueryError(Exception):
    """A query failure with the HTTP status that reports it."""

    def __init__(self, status: int, message: str) -> None:
        self.status = HTTPStatus(status)
        self.message = message
        super().__init__(message)


class _RecordNotFound(Exception):
    def __init__(self) -> None:
        super().__init__("Record not found")


@contextmanager
def _failing_as(context: str) -> Iterator[None]:
    try:
        yield
    except (SQLAlchemyError, _RecordNotFound) as exc:
        _log.error("%s: %s", context, exc)
        raise QueryError(HTTPStatus.INTERNAL_SERVER_ERROR, f"{context}: {exc}") from exc


def _first(connection, statement):
    row = connection.execute(statement.limit(1)).first()
    if row is None:
        raise _RecordNotFound()
    return row


def _latest(connection, column) -> int:
    value = connection.execute(select(column).order_by(column.desc()).limit(1)).scalar()
    return 0 if value is None else int(value)


def _count(connection, table) -> int:
    return int(connection.execute(select(func.count()).select_from(table)).scalar_one())


def _id_bytes(transaction_id: str) -> bytes | None:
    try:
        return Hex(transaction_id).decode()
    except DbError:
        return None


def _load_outputs(connection, key: bytes | None) -> list[TxOu]:
    if key is None:
        return []
    statement = (
        select(transactions_outputs)
        .where(transactions_outputs.c.transaction_id == key)
        .order_by(transactions_outputs.c.index)
    )
    return [TxOu.from_row(row) for row in connection.execute(statement)]


def _output_dict(output: TxOu) -> dict[str, Any]:
    return {
        "index": output.index,
        "amount": output.amount,
        "script_public_key_address": output.script_public_key_address,
        "block_time": output.block_time,
    }


def last_header(connection) -> dict[str, Any]:
    """The most recent block header by timestamp."""
    with _failing_as("Failed to fetch latest header"):
        row = _first(connection, select(blocks).order_by(blocks.c.timestamp.desc()))
    header = Header.from_row(row)
    return {
        "success": True,
        "data": {
            "hash": header.hash.inner,
            "timestamp": header.timestamp,
            "blue_score": header.blue_score,
            "daa_score": header.daa_score,
            "bits": header.bits,
            "version": header.version,
        },
    }


def chain_stats(connection) -> dict[str, Any]:
    """Block count with the latest timestamp and blue score (0 when empty)."""
    with _failing_as("Failed to fetch chain stats"):
        total_blocks = _count(connection, blocks)
        latest_timestamp = _latest(connection, blocks.c.timestamp)
        latest_blue_score = _latest(connection, blocks.c.blue_score)
    return {
        "success": True,
        "data": {
            "total_blocks": total_blocks,
            "latest_timestamp": latest_timestamp,
            "latest_blue_score": latest_blue_score,
        },
    }


def last_transaction(connection) -> dict[str, Any]:
    """The most recent transaction by block time."""
    with _failing_as("Failed to fetch latest transaction"):
        row = _first(connection, select(transactions).order_by(transactions.c.block_time.desc()))
    tx = Tx.from_row(row)
    return {
        "success": True,
        "data": {
            "transaction_id": tx.transaction_id.inner,
            "hash": tx.hash.inner,
            "subnetwork_id": tx.subnetwork_id,
            "mass": tx.mass,
            "block_time": tx.block_time,
        },
    }


def transaction_stats(connection) -> dict[str, Any]:
    """Transaction and output counts with the latest block time (0 when empty)."""
    with _failing_as("Failed to fetch transaction stats"):
        total_transactions = _count(connection, transactions)
        total_outputs = _count(connection, transactions_outputs)
        latest_block_time = _latest(connection, transactions.c.block_time)
    return {
        "success": True,
        "data": {
            "total_transactions": total_transactions,
            "total_outputs": total_outputs,
            "latest_block_time": latest_block_time,
        },
    }


def transaction_by_id(connection, transaction_id: str) -> dict[str, Any]:
    """A transaction and its outputs; raise a 404 QueryError if it does not exist.

    If the outputs cannot be read the transaction is still returned, with none.
    """
    key = _id_bytes(transaction_id)
    try:
        row = None
        if key is not None:
            statement = select(transactions).where(transactions.c.transaction_id == key).limit(1)
            row = connection.execute(statement).first()
    except SQLAlchemyError as exc:
        _log.error("Failed to fetch transaction %s: %s", transaction_id, exc)
        raise QueryError(
            HTTPStatus.INTERNAL_SERVER_ERROR, f"Failed to fetch transaction: {exc}"
        ) from exc
    if row is None:
        raise QueryError(HTTPStatus.NOT_FOUND, f"Transaction not found: {transaction_id}")
    tx = Tx.from_row(row)

    try:
        outputs = _load_outputs(connection, key)
    except SQLAlchemyError as exc:
        _log.warning("Failed to fetch outputs for transaction %s: %s", transaction_id, exc)
        outputs = []

    return {
        "success": True,
        "data": {
            "transaction": {
                "transaction_id": tx.transaction_id.inner,
                "hash": tx.hash.inner,
                "subnetwork_id": tx.subnetwork_id,
                "mass": tx.mass,
                "payload": None if tx.payload is None else list(tx.payload),
                "block_time": tx.block_time,
            },
            "outputs": [_output_dict(output) for output in outputs],
        },
    }


def transaction_outputs(connection, transaction_id: str) -> dict[str, Any]:
    """The outputs of a transaction; an unknown transaction has none."""
    try:
        outputs = _load_outputs(connection, _id_bytes(transaction_id))
    except SQLAlchemyError as exc:
        _log.error("Failed to fetch outputs for transaction %s: %s", transaction_id, exc)
        raise QueryError(
            HTTPStatus.INTERNAL_SERVER_ERROR, f"Failed to fetch transaction outputs: {exc}"
        ) from exc
    return {
        "success": True,
        "data": {
            "transaction_id": transaction_id,
            "outputs": [_output_dict(output) for output in outputs],
        },
    }