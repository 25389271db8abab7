"""原生币余额查询。"""

import logging
from datetime import datetime, timezone
from typing import Union

from amounts import format_units
from config import NetworkId
from connection import ConnectionCache, transport_errors
from models import BalanceSnapshot
from wallet_service import mask_address, normalize_address

logger = logging.getLogger(__name__)


async def fetch_balance(
    address: str,
    network_id: Union[NetworkId, str],
    connections: ConnectionCache,
) -> BalanceSnapshot:
    """
    查询地址在指定网络上的最新原生币余额。

    每次调用都直接请求节点，不做缓存。

    :raises InvalidAddress: 地址为空或格式不合法
    :raises UnsupportedNetwork: 网络 id 不受支持
    :raises NetworkUnreachable: 连接失败或超时
    """
    checksum_address = normalize_address(address)
    handle = await connections.acquire(network_id)
    network = handle.network

    with transport_errors(network, "余额查询"):
        raw = await handle.web3.eth.get_balance(checksum_address)

    raw = int(raw)
    logger.debug("%s 在 %s 上的余额为 %s wei", mask_address(checksum_address), network.id.value, raw)
    return BalanceSnapshot(
        network_id=network.id,
        address=checksum_address,
        raw_amount=str(raw),
        formatted_amount=format_units(raw),
        symbol=network.native_symbol,
        observed_at=datetime.now(timezone.utc),
    )
