"""数据模型定义，包含钱包身份、余额快照与转账记录。"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from config import NetworkId


@dataclass(frozen=True)
class WalletIdentity:
    """单个钱包身份，address 始终由 private_key 推导并带校验大小写。"""

    address: str
    private_key: str = field(repr=False)
    mnemonic: Optional[str] = field(default=None, repr=False)

    def has_mnemonic(self) -> bool:
        """是否通过助记词创建或恢复。"""
        return self.mnemonic is not None


@dataclass(frozen=True)
class BalanceSnapshot:
    """某一时刻的原生币余额；raw_amount 为精确值，formatted_amount 仅供展示。"""

    network_id: NetworkId
    address: str
    raw_amount: str
    formatted_amount: str
    symbol: str
    observed_at: datetime


@dataclass
class TransferRequest:
    """原生币转账请求，只在一次调用内有效。"""

    sender_private_key: str = field(repr=False)
    recipient_address: str
    amount: str
    network_id: NetworkId


class TransferStage(str, Enum):
    SIGNING = "signing"
    BROADCASTED = "broadcasted"
    CONFIRMING = "confirming"


@dataclass(frozen=True)
class TransferProgressEvent:
    stage: TransferStage
    tx_hash: Optional[str] = None


@dataclass(frozen=True)
class TransferResult:
    """转账成功后的最终记录。"""

    network_id: NetworkId
    chain_id: int
    tx_hash: str
    sender_address: str
    recipient_address: str
    amount: str
    raw_amount: str
    block_number: int
    explorer_url: Optional[str]
    confirmed_at: datetime
    gas_used: Optional[int] = None
