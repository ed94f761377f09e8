"""
Tests for the in-memory asset ledger.
"""

import json

import pytest

from nftswap.core.ledger import InMemoryAssetLedger
from nftswap.core.swap import AssetRef, NotOwner, TransferRejected
from nftswap.services.address import ZERO_ADDRESS, normalize_address


ALICE = normalize_address("0x" + "a1" * 20)
BOB = normalize_address("0x" + "b2" * 20)
COLLECTION_X = normalize_address("0x" + "11" * 20)
COLLECTION_Y = normalize_address("0x" + "22" * 20)

X1 = AssetRef(COLLECTION_X, 1)
Y7 = AssetRef(COLLECTION_Y, 7)


@pytest.fixture
def ledger() -> InMemoryAssetLedger:
    return InMemoryAssetLedger(owners={X1: ALICE, Y7: BOB})


@pytest.mark.asyncio
async def test_transfer_moves_ownership(ledger: InMemoryAssetLedger):
    await ledger.transfer(X1, ALICE, BOB)

    assert await ledger.current_owner(X1) == BOB
    assert len(ledger.history) == 1
    assert ledger.history[0].recipient == BOB


@pytest.mark.asyncio
async def test_transfer_accepts_any_address_case(ledger: InMemoryAssetLedger):
    await ledger.transfer(X1, ALICE.lower(), BOB.upper().replace("0X", "0x"))
    assert await ledger.current_owner(X1) == BOB


@pytest.mark.asyncio
async def test_transfer_by_non_owner_fails(ledger: InMemoryAssetLedger):
    with pytest.raises(NotOwner):
        await ledger.transfer(X1, BOB, ALICE)

    assert await ledger.current_owner(X1) == ALICE
    assert ledger.history == []


@pytest.mark.asyncio
async def test_unknown_asset_is_not_owned(ledger: InMemoryAssetLedger):
    unknown = AssetRef(COLLECTION_X, 99)
    assert await ledger.current_owner(unknown) is None
    with pytest.raises(NotOwner):
        await ledger.transfer(unknown, ALICE, BOB)


@pytest.mark.asyncio
async def test_transfer_to_zero_address_rejected(ledger: InMemoryAssetLedger):
    with pytest.raises(TransferRejected):
        await ledger.transfer(X1, ALICE, ZERO_ADDRESS)


@pytest.mark.asyncio
async def test_transfer_to_self_rejected(ledger: InMemoryAssetLedger):
    with pytest.raises(TransferRejected):
        await ledger.transfer(X1, ALICE, ALICE)


@pytest.mark.asyncio
async def test_disabled_receiver_per_collection(ledger: InMemoryAssetLedger):
    ledger.disable_receiver(BOB, COLLECTION_X)

    with pytest.raises(TransferRejected):
        await ledger.transfer(X1, ALICE, BOB)
    assert await ledger.current_owner(X1) == ALICE

    ledger.enable_receiver(BOB, COLLECTION_X)
    await ledger.transfer(X1, ALICE, BOB)
    assert await ledger.current_owner(X1) == BOB


@pytest.mark.asyncio
async def test_disabled_receiver_everywhere(ledger: InMemoryAssetLedger):
    ledger.disable_receiver(ALICE)

    assert ledger.can_receive(ALICE, Y7) is False
    with pytest.raises(TransferRejected):
        await ledger.transfer(Y7, BOB, ALICE)


def test_zero_address_cannot_receive(ledger: InMemoryAssetLedger):
    assert ledger.can_receive(ZERO_ADDRESS, Y7) is False


@pytest.mark.asyncio
async def test_from_file(tmp_path):
    seed = tmp_path / "ledger.json"
    seed.write_text(json.dumps({
        "owners": [
            {"contract": COLLECTION_X.lower(), "token_id": 1, "owner": ALICE.lower()},
            {"contract": COLLECTION_Y, "token_id": "0x7", "owner": BOB},
        ],
        "disabled_receivers": [{"account": BOB, "contract": COLLECTION_X}],
    }))

    ledger = InMemoryAssetLedger.from_file(seed)

    assert await ledger.current_owner(X1) == ALICE
    assert await ledger.current_owner(Y7) == BOB
    assert ledger.can_receive(BOB, X1) is False
    assert ledger.can_receive(BOB, Y7) is True


@pytest.mark.asyncio
async def test_health_check(ledger: InMemoryAssetLedger):
    status = await ledger.health_check()
    assert status == {"status": "healthy", "ledger": "memory", "assets": 2}
