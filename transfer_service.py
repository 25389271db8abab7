"""原生币转账：签名、广播并等待上链确认。

每笔转账严格按 signing -> broadcasted -> confirming 推进，
成功时返回 TransferResult，失败时抛出对应异常。
"""

import logging
from datetime import datetime, timezone
from typing import AsyncIterator, Callable, Dict, Optional, Union

from eth_account import Account
from web3 import AsyncWeb3, Web3
from web3.exceptions import TimeExhausted

from amounts import parse_positive_units
from config import NATIVE_TRANSFER_GAS, PRIORITY_FEE_WEI, explorer_tx_url
from connection import ConnectionCache, transport_errors
from errors import ConfirmationTimeout, InvalidRecipient, OnChainFailure, WalletError
from models import TransferProgressEvent, TransferRequest, TransferResult, TransferStage
from wallet_service import mask_address, normalize_address, recover_from_private_key

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[TransferProgressEvent], None]


async def _fee_fields(w3: AsyncWeb3) -> Dict[str, int]:
    """最新区块带 baseFee 时使用 EIP-1559，否则退回 legacy gasPrice。"""
    block = await w3.eth.get_block("latest")
    base_fee = block.get("baseFeePerGas")
    if base_fee:
        return {
            "type": 2,
            "maxFeePerGas": int(base_fee) * 2 + PRIORITY_FEE_WEI,
            "maxPriorityFeePerGas": PRIORITY_FEE_WEI,
        }
    return {"gasPrice": int(await w3.eth.gas_price)}


async def stream_native_transfer(
    request: TransferRequest,
    connections: ConnectionCache,
) -> AsyncIterator[Union[TransferProgressEvent, TransferResult]]:
    """
    执行一笔原生币转账，按顺序产出三个进度事件，最后产出 TransferResult。

    参数校验全部在访问网络之前完成，校验失败时不会产出任何事件。
    调用方放弃迭代不会撤回已广播的交易。

    :raises InvalidRecipient: 收款地址为空或格式不合法
    :raises InvalidAmount: 金额无法解析
    :raises NonPositiveAmount: 金额为 0 或负数
    :raises InvalidPrivateKey: 发送方私钥不合法
    :raises UnsupportedNetwork: 网络 id 不受支持
    :raises TransportError: 节点不可达或拒绝请求
    :raises OnChainFailure: 交易已上链但执行失败
    """
    recipient = normalize_address(request.recipient_address, InvalidRecipient)
    raw_amount = parse_positive_units(request.amount)
    sender = recover_from_private_key(request.sender_private_key)

    handle = await connections.acquire(request.network_id)
    network = handle.network
    w3 = handle.web3
    account = Account.from_key(sender.private_key)

    yield TransferProgressEvent(stage=TransferStage.SIGNING)
    with transport_errors(network, "交易签名"):
        nonce = await w3.eth.get_transaction_count(account.address, "pending")
        tx = {
            "chainId": network.chain_id,
            "nonce": nonce,
            "to": recipient,
            "value": raw_amount,
            "gas": NATIVE_TRANSFER_GAS,
        }
        tx.update(await _fee_fields(w3))
    signed = account.sign_transaction(tx)

    with transport_errors(network, "交易广播"):
        tx_hash = Web3.to_hex(await w3.eth.send_raw_transaction(signed.raw_transaction))
    logger.info(
        "已在 %s 广播转账 %s -> %s: %s",
        network.id.value,
        mask_address(account.address),
        mask_address(recipient),
        tx_hash,
    )
    yield TransferProgressEvent(stage=TransferStage.BROADCASTED, tx_hash=tx_hash)

    yield TransferProgressEvent(stage=TransferStage.CONFIRMING, tx_hash=tx_hash)
    try:
        with transport_errors(network, "回执查询"):
            receipt = await w3.eth.wait_for_transaction_receipt(tx_hash)
    except TimeExhausted as exc:
        logger.warning("等待 %s 回执超时", tx_hash)
        raise ConfirmationTimeout(
            f"等待交易 {tx_hash} 确认超时，交易已广播，之后仍可能被打包", tx_hash
        ) from exc

    block_number = int(receipt["blockNumber"])
    gas_used = receipt.get("gasUsed")
    if receipt["status"] != 1:
        logger.warning("交易 %s 在区块 %s 执行失败", tx_hash, block_number)
        raise OnChainFailure(
            f"交易 {tx_hash} 已在区块 {block_number} 上链但执行失败，手续费已被扣除",
            tx_hash=tx_hash,
            block_number=block_number,
            gas_used=gas_used,
        )

    logger.info("交易 %s 已在区块 %s 确认", tx_hash, block_number)
    yield TransferResult(
        network_id=network.id,
        chain_id=network.chain_id,
        tx_hash=tx_hash,
        sender_address=account.address,
        recipient_address=recipient,
        amount=request.amount.strip(),
        raw_amount=str(raw_amount),
        block_number=block_number,
        explorer_url=explorer_tx_url(network, tx_hash),
        confirmed_at=datetime.now(timezone.utc),
        gas_used=gas_used,
    )


async def send_native_transfer(
    request: TransferRequest,
    connections: ConnectionCache,
    progress_cb: Optional[ProgressCallback] = None,
) -> TransferResult:
    """
    执行转账并等待确认，进度通过 progress_cb 通知。

    :param request: 转账请求
    :param connections: 应用持有的连接缓存
    :param progress_cb: 进度回调，依次收到 signing / broadcasted / confirming
    """
    result: Optional[TransferResult] = None
    async for item in stream_native_transfer(request, connections):
        if isinstance(item, TransferResult):
            result = item
        elif progress_cb:
            progress_cb(item)
    if result is None:
        raise WalletError("转账流程结束但未得到结果")
    return result
