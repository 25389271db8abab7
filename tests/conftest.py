"""测试夹具：用内存中的假 AsyncWeb3 替代真实 RPC 节点。"""

import pytest

from connection import ConnectionCache

HARDHAT_MNEMONIC = "test test test test test test test test test test test junk"
HARDHAT_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
HARDHAT_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

SAMPLE_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
SAMPLE_ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"

FAKE_TX_HASH = bytes.fromhex("ab" * 32)


class FakeEth:
    """只实现钱包核心用到的 eth 方法，并记录调用顺序。"""

    def __init__(self) -> None:
        self.balances = {}
        self.nonce = 7
        self.base_fee = 10 ** 9
        self.legacy_gas_price = 2 * 10 ** 9
        self.receipt_status = 1
        self.block_number = 123
        self.calls = []
        self.sent = []
        self.failures = {}

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    async def get_balance(self, address):
        self._enter("get_balance")
        return self.balances.get(address, 0)

    async def get_transaction_count(self, address, block_identifier=None):
        self._enter("get_transaction_count")
        return self.nonce

    async def get_block(self, block_identifier):
        self._enter("get_block")
        block = {"number": self.block_number - 1}
        if self.base_fee is not None:
            block["baseFeePerGas"] = self.base_fee
        return block

    @property
    def gas_price(self):
        async def _gas_price():
            self._enter("gas_price")
            return self.legacy_gas_price

        return _gas_price()

    async def send_raw_transaction(self, raw):
        self._enter("send_raw_transaction")
        self.sent.append(bytes(raw))
        return FAKE_TX_HASH

    async def wait_for_transaction_receipt(self, tx_hash):
        self._enter("wait_for_transaction_receipt")
        return {
            "transactionHash": tx_hash,
            "status": self.receipt_status,
            "blockNumber": self.block_number,
            "gasUsed": 21000,
        }


class FakeWeb3:
    def __init__(self) -> None:
        self.eth = FakeEth()


@pytest.fixture
def fake_web3():
    return FakeWeb3()


@pytest.fixture
def factory_calls():
    return []


@pytest.fixture
def connections(fake_web3, factory_calls):
    def _factory(network):
        factory_calls.append(network.id)
        return fake_web3

    return ConnectionCache(client_factory=_factory)
