"""按网络缓存 RPC 客户端，每个网络在进程内只创建一个连接。"""

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, Optional, Union

import aiohttp
from web3 import AsyncWeb3
from web3.exceptions import ProviderConnectionError, Web3RPCError
from web3.providers import AsyncHTTPProvider

from config import RPC_TIMEOUT, NetworkDescriptor, NetworkId, resolve_network
from errors import NetworkUnreachable, RpcRejected, UnsupportedNetwork

logger = logging.getLogger(__name__)


@contextmanager
def transport_errors(network: NetworkDescriptor, action: str) -> Iterator[None]:
    """把底层连接与 RPC 异常转换为 NetworkUnreachable / RpcRejected。"""
    try:
        yield
    except Web3RPCError as exc:
        logger.warning("%s 在 %s 上被节点拒绝: %s", action, network.id.value, exc)
        raise RpcRejected(f"{network.label} 节点拒绝了{action}请求: {exc}") from exc
    except (ProviderConnectionError, aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
        logger.warning("%s 无法连接 %s: %r", action, network.id.value, exc)
        raise NetworkUnreachable(f"无法连接 {network.label} 节点（{action}）: {exc!r}") from exc


@dataclass(frozen=True)
class ConnectionHandle:
    """绑定到某个网络的 RPC 客户端。"""

    network: NetworkDescriptor
    web3: AsyncWeb3


ClientFactory = Callable[[NetworkDescriptor], AsyncWeb3]


def build_web3(network: NetworkDescriptor) -> AsyncWeb3:
    """默认客户端：HTTP JSON-RPC，超时取 RPC_TIMEOUT。"""
    provider = AsyncHTTPProvider(
        network.rpc_url,
        request_kwargs={"timeout": aiohttp.ClientTimeout(total=RPC_TIMEOUT)},
    )
    return AsyncWeb3(provider)


class ConnectionCache:
    """
    惰性创建并复用各网络的连接。

    由应用根对象持有，传入余额查询与转账服务；首次创建由锁保护，
    并发的首次调用只会构造一个客户端。
    """

    def __init__(
        self,
        client_factory: Optional[ClientFactory] = None,
        networks: Optional[Iterable[NetworkDescriptor]] = None,
    ) -> None:
        self._factory = client_factory or build_web3
        self._networks = None if networks is None else tuple(networks)
        self._handles: Dict[NetworkId, ConnectionHandle] = {}
        self._lock = asyncio.Lock()

    def resolve(self, network_id: Union[NetworkId, str]) -> NetworkDescriptor:
        """在本缓存可用的网络中查找；未指定 networks 时使用预设网络。"""
        if self._networks is None:
            return resolve_network(network_id)
        for network in self._networks:
            if network.id == network_id:
                return network
        raise UnsupportedNetwork(f"不支持的网络: {network_id!r}")

    async def acquire(self, network_id: Union[NetworkId, str]) -> ConnectionHandle:
        """返回该网络的连接，首次调用时创建。"""
        network = self.resolve(network_id)
        handle = self._handles.get(network.id)
        if handle is not None:
            return handle
        async with self._lock:
            handle = self._handles.get(network.id)
            if handle is None:
                handle = ConnectionHandle(network=network, web3=self._factory(network))
                self._handles[network.id] = handle
                logger.debug("已为 %s 创建 RPC 连接 (chain_id=%s)", network.id.value, network.chain_id)
        return handle

    def clear(self) -> None:
        """丢弃全部缓存连接，下次 acquire 时重新创建。"""
        self._handles.clear()

    def __contains__(self, network_id: object) -> bool:
        return any(net_id == network_id for net_id in self._handles)

    def __len__(self) -> int:
        return len(self._handles)
