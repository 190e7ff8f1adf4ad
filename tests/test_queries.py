from http import HTTPStatus

import pytest
from sqlalchemy import create_engine, insert

from tondilisten.models import blocks, metadata, transactions, transactions_outputs
from tondilisten.queries import (
    QueryError,
    chain_stats,
    last_header,
    last_transaction,
    transaction_by_id,
    transaction_outputs,
    transaction_stats,
)


@pytest.fixture
def connection():
    engine = create_engine("sqlite://")
    metadata.create_all(engine)
    with engine.connect() as conn:
        yield conn


@pytest.fixture
def bare_connection():
    engine = create_engine("sqlite://")
    with engine.connect() as conn:
        yield conn


def add_block(conn, hash_bytes, timestamp, blue_score):
    conn.execute(
        insert(blocks).values(
            hash=hash_bytes,
            accepted_id_merkle_root=b"\x01" * 4,
            merge_set_blues_hashes=[b"\x02" * 4],
            merge_set_reds_hashes=None,
            selected_parent_hash=b"\x03" * 4,
            bits=7,
            blue_score=blue_score,
            blue_work=b"\x04",
            daa_score=blue_score + 1,
            hash_merkle_root=b"\x05" * 4,
            nonce=b"\x06",
            pruning_point=b"\x07" * 4,
            timestamp=timestamp,
            utxo_commitment=b"\x08" * 4,
            version=1,
        )
    )


def add_tx(conn, tx_id, block_time, mass=None, payload=None):
    conn.execute(
        insert(transactions).values(
            transaction_id=tx_id,
            subnetwork_id=0,
            hash=tx_id[::-1],
            mass=mass,
            payload=payload,
            block_time=block_time,
        )
    )


def add_output(conn, tx_id, index, amount):
    conn.execute(
        insert(transactions_outputs).values(
            transaction_id=tx_id,
            index=index,
            amount=amount,
            script_public_key=b"\x20",
            script_public_key_address="addr-test",
            block_time=5,
        )
    )


def test_last_header_picks_latest_timestamp(connection):
    add_block(connection, b"\xaa" * 4, timestamp=100, blue_score=10)
    add_block(connection, b"\xbb" * 4, timestamp=200, blue_score=5)
    result = last_header(connection)
    assert result["success"] is True
    assert result["data"]["hash"] == (b"\xbb" * 4).hex()
    assert result["data"]["timestamp"] == 200
    assert result["data"]["blue_score"] == 5
    assert result["data"]["daa_score"] == 6


def test_last_header_on_empty_table_fails(connection):
    with pytest.raises(QueryError) as info:
        last_header(connection)
    assert info.value.status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert info.value.message.startswith("Failed to fetch latest header: ")


def test_chain_stats_empty_is_zero(connection):
    data = chain_stats(connection)["data"]
    assert data == {"total_blocks": 0, "latest_timestamp": 0, "latest_blue_score": 0}


def test_chain_stats_takes_maxima_independently(connection):
    add_block(connection, b"\xaa" * 4, timestamp=100, blue_score=10)
    add_block(connection, b"\xbb" * 4, timestamp=200, blue_score=5)
    data = chain_stats(connection)["data"]
    assert data == {"total_blocks": 2, "latest_timestamp": 200, "latest_blue_score": 10}


def test_chain_stats_without_tables_fails(bare_connection):
    with pytest.raises(QueryError) as info:
        chain_stats(bare_connection)
    assert info.value.status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert info.value.message.startswith("Failed to fetch chain stats: ")


def test_last_transaction(connection):
    add_tx(connection, b"\x01\x02", block_time=10, mass=3)
    add_tx(connection, b"\x03\x04", block_time=20)
    data = last_transaction(connection)["data"]
    assert data["transaction_id"] == "0304"
    assert data["hash"] == "0403"
    assert data["mass"] is None
    assert data["block_time"] == 20


def test_last_transaction_empty_fails(connection):
    with pytest.raises(QueryError) as info:
        last_transaction(connection)
    assert info.value.message.startswith("Failed to fetch latest transaction: ")


def test_transaction_stats(connection):
    add_tx(connection, b"\x01\x02", block_time=10)
    add_tx(connection, b"\x03\x04", block_time=30)
    add_output(connection, b"\x01\x02", 0, 50)
    data = transaction_stats(connection)["data"]
    assert data == {"total_transactions": 2, "total_outputs": 1, "latest_block_time": 30}


def test_transaction_stats_empty(connection):
    data = transaction_stats(connection)["data"]
    assert data == {"total_transactions": 0, "total_outputs": 0, "latest_block_time": 0}


def test_transaction_by_id_with_outputs(connection):
    add_tx(connection, b"\xab\xcd", block_time=10, mass=9, payload=b"\x01\x02")
    add_output(connection, b"\xab\xcd", 1, 70)
    add_output(connection, b"\xab\xcd", 0, 30)
    data = transaction_by_id(connection, "abcd")["data"]
    assert data["transaction"]["transaction_id"] == "abcd"
    assert data["transaction"]["mass"] == 9
    assert data["transaction"]["payload"] == [1, 2]
    assert [out["index"] for out in data["outputs"]] == [0, 1]
    assert [out["amount"] for out in data["outputs"]] == [30, 70]
    assert data["outputs"][0]["script_public_key_address"] == "addr-test"


def test_transaction_by_id_missing_is_404(connection):
    with pytest.raises(QueryError) as info:
        transaction_by_id(connection, "abcd")
    assert info.value.status == HTTPStatus.NOT_FOUND
    assert info.value.message == "Transaction not found: abcd"


def test_transaction_by_id_bad_hex_is_404(connection):
    with pytest.raises(QueryError) as info:
        transaction_by_id(connection, "zz")
    assert info.value.status == HTTPStatus.NOT_FOUND


def test_transaction_outputs(connection):
    add_output(connection, b"\xab\xcd", 0, 30)
    add_output(connection, b"\x11\x22", 0, 99)
    data = transaction_outputs(connection, "abcd")["data"]
    assert data["transaction_id"] == "abcd"
    assert [out["amount"] for out in data["outputs"]] == [30]


def test_transaction_outputs_unknown_is_empty(connection):
    assert transaction_outputs(connection, "not-hex")["data"]["outputs"] == []


def test_transaction_outputs_without_tables_fails(bare_connection):
    with pytest.raises(QueryError) as info:
        transaction_outputs(bare_connection, "abcd")
    assert info.value.message.startswith("Failed to fetch transaction outputs: ")