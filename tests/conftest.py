"""
Test configuration and fixtures
"""
import sys
from pathlib import Path

# Add project root and src to Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"

sys.path.insert(0, str(project_root))
sys.path.insert(0, str(src_path))

import pytest

from vesting_lock.core.config import Config
from vesting_lock.core.config_codec import encode_vesting_args
from vesting_lock.core.lock_script import build_vesting_script, program_entry
from vesting_lock.core.script import Script
from vesting_lock.core.state_codec import VestingState
from vesting_lock.core.transaction import Cell, CellOutput, Header, Transaction, TransactionView

# Proxy locks run a different script than the vesting lock
PROXY_CODE_HASH = b"\xaa" * 32
CREATOR_LOCK = Script(PROXY_CODE_HASH, "type", b"\x01" * 20)
BENEFICIARY_LOCK = Script(PROXY_CODE_HASH, "type", b"\x02" * 20)
OTHER_LOCK = Script(PROXY_CODE_HASH, "type", b"\x03" * 20)

# Default schedule: vests linearly over epochs 100..1100, cliff at 200
START_EPOCH = 100
END_EPOCH = 1100
CLIFF_EPOCH = 200
TOTAL = 10_000


def state(total=TOTAL, beneficiary_claimed=0, creator_claimed=0, highest_block_seen=10):
    return VestingState(total, beneficiary_claimed, creator_claimed, highest_block_seen)


class VestingTxBuilder:
    """Builds transactions spending one vesting cell for a fixed configuration."""

    def __init__(
        self,
        start_epoch=START_EPOCH,
        end_epoch=END_EPOCH,
        cliff_epoch=CLIFF_EPOCH,
        creator=CREATOR_LOCK,
        beneficiary=BENEFICIARY_LOCK,
        args=None,
    ):
        if args is None:
            args = encode_vesting_args(creator.hash(), beneficiary.hash(), start_epoch, end_epoch, cliff_epoch)
        self.args = args
        self.creator = creator
        self.beneficiary = beneficiary
        self.other = OTHER_LOCK
        self.lock = build_vesting_script(args, Config())

    def vesting_cell(self, vesting_state=None, data=None, capacity=10_000):
        if data is None:
            data = (vesting_state or state()).encode()
        return Cell(CellOutput(capacity, self.lock), data)

    @staticmethod
    def proxy_cell(lock, capacity=100):
        return Cell(CellOutput(capacity, lock), b"")

    def transaction(
        self,
        input_state=None,
        output_state=None,
        signer=None,
        headers=((50, 600),),
        extra_inputs=(),
        extra_outputs=(),
        input_data=None,
        output_data=None,
    ):
        inputs = [self.vesting_cell(input_state, data=input_data)]
        if signer is not None:
            inputs.append(self.proxy_cell(signer))
        inputs.extend(extra_inputs)

        outputs = []
        if output_state is not None or output_data is not None:
            outputs.append(self.vesting_cell(output_state, data=output_data))
        if signer is not None:
            outputs.append(self.proxy_cell(signer))
        outputs.extend(extra_outputs)

        return Transaction(
            inputs=inputs,
            outputs=outputs,
            header_deps=[Header(number, epoch) for number, epoch in headers],
        )

    def view(self, transaction):
        return TransactionView(transaction, self.lock)

    def run(self, transaction):
        return program_entry(self.view(transaction))


@pytest.fixture
def builder():
    return VestingTxBuilder()


@pytest.fixture
def make_builder():
    return VestingTxBuilder


@pytest.fixture
def vesting_args():
    return encode_vesting_args(CREATOR_LOCK.hash(), BENEFICIARY_LOCK.hash(), START_EPOCH, END_EPOCH, CLIFF_EPOCH)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every VESTING_LOCK_* variable so Config sees defaults."""
    for name in (
        "VESTING_LOCK_ENVIRONMENT",
        "VESTING_LOCK_LOG_LEVEL",
        "VESTING_LOCK_LOG_FILE",
        "VESTING_LOCK_LOG_JSON",
        "VESTING_LOCK_CODE_HASH",
        "VESTING_LOCK_HASH_TYPE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def make_state():
    return state
