"""钱包核心的异常体系。"""

from typing import Optional


class WalletError(Exception):
    """所有钱包核心异常的基类。"""


class InputValidationError(WalletError, ValueError):
    """调用方输入有误，可由调用方修正，不会在内部重试。"""


class InvalidPrivateKey(InputValidationError):
    pass


class EmptyMnemonic(InputValidationError):
    pass


class InvalidMnemonic(InputValidationError):
    pass


class InvalidAddress(InputValidationError):
    pass


class InvalidRecipient(InvalidAddress):
    pass


class InvalidAmount(InputValidationError):
    pass


class NonPositiveAmount(InvalidAmount):
    pass


class UnsupportedNetwork(WalletError):
    """网络 id 不在预设列表中。"""


class EntropyUnavailable(WalletError):
    """系统随机源不可用，无法生成新钱包。"""


class TransportError(WalletError):
    """与 RPC 节点通信失败，原样上抛，是否重试由调用方决定。"""


class NetworkUnreachable(TransportError):
    """连接失败或超时。"""


class RpcRejected(TransportError):
    """节点返回了 JSON-RPC 错误。"""


class ConfirmationTimeout(TransportError):
    """等待回执超时；交易已广播，仍可能被打包。"""

    def __init__(self, message: str, tx_hash: str):
        super().__init__(message)
        self.tx_hash = tx_hash


class OnChainFailure(WalletError):
    """交易已上链但执行失败，gas 已被扣除。"""

    def __init__(self, message: str, tx_hash: str, block_number: int, gas_used: Optional[int] = None):
        super().__init__(message)
        self.tx_hash = tx_hash
        self.block_number = block_number
        self.gas_used = gas_used
