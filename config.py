"""全局配置，提供预设网络、派生路径模板与 RPC 连接参数。"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from errors import UnsupportedNetwork


class NetworkId(str, Enum):
    """受支持网络的标识，值即对外使用的字符串 id。"""

    SEPOLIA = "sepolia"
    MAINNET = "mainnet"


@dataclass(frozen=True)
class NetworkDescriptor:
    """网络描述，进程启动时确定，之后不再修改。"""

    id: NetworkId
    label: str
    chain_id: int
    native_symbol: str
    rpc_url: str
    explorer_tx_template: Optional[str] = None


# 默认 BIP44 派生路径，只使用第一个账户
DERIVATION_PATH_EVM = "m/44'/60'/0'/0/0"

# 新建钱包的助记词长度（12 个单词，128 位熵）
MNEMONIC_STRENGTH = 128

# 原生币精度（wei -> ETH）
NATIVE_DECIMALS = 18

# 原生转账固定 gas 上限
NATIVE_TRANSFER_GAS = 21000

# EIP-1559 小费，单位 wei（1.5 gwei）
PRIORITY_FEE_WEI = 1_500_000_000

# RPC 请求超时（秒），可用环境变量覆盖
RPC_TIMEOUT = float(os.getenv("SEREIN_RPC_TIMEOUT", "30"))


def _rpc_url(network_id: NetworkId, default: str) -> str:
    """读取 SEREIN_RPC_<ID> 环境变量，未设置时使用默认节点。"""
    return os.getenv(f"SEREIN_RPC_{network_id.value.upper()}", default)


# 预设网络，测试网排在最前便于发现
PRESET_NETWORKS: Tuple[NetworkDescriptor, ...] = (
    NetworkDescriptor(
        id=NetworkId.SEPOLIA,
        label="Sepolia Testnet",
        chain_id=11155111,
        native_symbol="ETH",
        rpc_url=_rpc_url(NetworkId.SEPOLIA, "https://ethereum-sepolia-rpc.publicnode.com"),
        explorer_tx_template="https://sepolia.etherscan.io/tx",
    ),
    NetworkDescriptor(
        id=NetworkId.MAINNET,
        label="Ethereum Mainnet",
        chain_id=1,
        native_symbol="ETH",
        rpc_url=_rpc_url(NetworkId.MAINNET, "https://ethereum-rpc.publicnode.com"),
        explorer_tx_template="https://etherscan.io/tx",
    ),
)


def list_networks() -> Tuple[NetworkDescriptor, ...]:
    """按固定顺序返回全部预设网络。"""
    return PRESET_NETWORKS


def resolve_network(network_id: Union[NetworkId, str]) -> NetworkDescriptor:
    """根据 id 查找网络，找不到时抛出 UnsupportedNetwork。"""
    for network in PRESET_NETWORKS:
        if network.id == network_id:
            return network
    raise UnsupportedNetwork(f"不支持的网络: {network_id!r}")


def explorer_tx_url(network: NetworkDescriptor, tx_hash: str) -> Optional[str]:
    """拼接区块浏览器交易链接；网络未配置浏览器时返回 None。"""
    if not network.explorer_tx_template:
        return None
    return f"{network.explorer_tx_template}/{tx_hash}"
