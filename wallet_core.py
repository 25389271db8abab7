"""应用根对象：持有连接缓存，对外提供全部钱包操作。"""

from typing import AsyncIterator, Optional, Tuple, Union

import balance_service
import transfer_service
import wallet_service
from config import NetworkDescriptor, NetworkId, list_networks, resolve_network
from connection import ClientFactory, ConnectionCache
from models import BalanceSnapshot, TransferProgressEvent, TransferRequest, TransferResult, WalletIdentity


class WalletCore:
    """界面层只需持有一个 WalletCore 实例。"""

    def __init__(self, client_factory: Optional[ClientFactory] = None) -> None:
        self.connections = ConnectionCache(client_factory=client_factory)

    # 网络
    def list_networks(self) -> Tuple[NetworkDescriptor, ...]:
        return list_networks()

    def resolve_network(self, network_id: Union[NetworkId, str]) -> NetworkDescriptor:
        return resolve_network(network_id)

    # 密钥
    def create_identity(self) -> WalletIdentity:
        return wallet_service.create_identity()

    def recover_from_private_key(self, value: str) -> WalletIdentity:
        return wallet_service.recover_from_private_key(value)

    def recover_from_mnemonic(self, value: str) -> WalletIdentity:
        return wallet_service.recover_from_mnemonic(value)

    def is_valid_private_key_input(self, value: str) -> bool:
        return wallet_service.is_valid_private_key_input(value)

    def is_valid_mnemonic_input(self, value: str) -> bool:
        return wallet_service.is_valid_mnemonic_input(value)

    def mask_address(self, address: str, prefix_length: int = 6, suffix_length: int = 4) -> str:
        return wallet_service.mask_address(address, prefix_length, suffix_length)

    # 链上操作
    async def fetch_balance(self, address: str, network_id: Union[NetworkId, str]) -> BalanceSnapshot:
        return await balance_service.fetch_balance(address, network_id, self.connections)

    async def send_native_transfer(
        self,
        request: TransferRequest,
        progress_cb: Optional[transfer_service.ProgressCallback] = None,
    ) -> TransferResult:
        return await transfer_service.send_native_transfer(request, self.connections, progress_cb)

    def stream_native_transfer(
        self, request: TransferRequest
    ) -> AsyncIterator[Union[TransferProgressEvent, TransferResult]]:
        return transfer_service.stream_native_transfer(request, self.connections)
