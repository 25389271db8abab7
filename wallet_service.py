"""钱包生成、恢复与校验服务，以及地址脱敏展示。"""

import hashlib
import hmac
import logging
import re
from typing import Optional, Tuple, Type

from eth_account import Account
from eth_keys import constants as eth_constants
from eth_keys import keys as eth_keys
from mnemonic import Mnemonic
from web3 import Web3

from config import DERIVATION_PATH_EVM, MNEMONIC_STRENGTH
from errors import (
    EmptyMnemonic,
    EntropyUnavailable,
    InputValidationError,
    InvalidAddress,
    InvalidMnemonic,
    InvalidPrivateKey,
)
from models import WalletIdentity

logger = logging.getLogger(__name__)

# 使用标准 BIP39 英文词表的生成器
MNEMONIC_GEN = Mnemonic("english")

# 曲线阶常量
SECP256K1_N = eth_constants.SECPK1_N

_PRIVATE_KEY_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def _normalize_private_key(value: str) -> str:
    """去除空白并补齐 0x 前缀，返回小写形式；不合法时抛出 InvalidPrivateKey。"""
    raw = value.strip() if isinstance(value, str) else ""
    if not raw:
        raise InvalidPrivateKey("私钥不能为空")
    if raw[:2] in ("0x", "0X"):
        raw = "0x" + raw[2:]
    else:
        raw = "0x" + raw
    if not _PRIVATE_KEY_RE.match(raw):
        raise InvalidPrivateKey("私钥格式无效，应为 64 位十六进制字符")
    if not 0 < int(raw, 16) < SECP256K1_N:
        raise InvalidPrivateKey("私钥超出 secp256k1 取值范围")
    return raw.lower()


def _normalize_mnemonic(value: str) -> str:
    """去除首尾空白并把连续空白压缩为单个空格。"""
    if not isinstance(value, str):
        return ""
    return " ".join(value.split())


def _mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """通过 BIP39 标准将助记词转换为种子。"""
    if not MNEMONIC_GEN.check(mnemonic):
        raise InvalidMnemonic("助记词校验未通过，请检查单词拼写与顺序")
    return MNEMONIC_GEN.to_seed(mnemonic, passphrase)


def _derive_child(private_key: bytes, chain_code: bytes, index: int, hardened: bool) -> Tuple[bytes, bytes]:
    """执行单步 BIP32 子密钥派生（secp256k1）。"""
    if hardened:
        data = b"\x00" + private_key + index.to_bytes(4, "big")
    else:
        pub_compressed = eth_keys.PrivateKey(private_key).public_key.to_compressed_bytes()
        data = pub_compressed + index.to_bytes(4, "big")
    I = hmac.new(chain_code, data, hashlib.sha512).digest()
    Il, Ir = I[:32], I[32:]
    child_int = (int.from_bytes(Il, "big") + int.from_bytes(private_key, "big")) % SECP256K1_N
    child_key = child_int.to_bytes(32, "big")
    return child_key, Ir


def _derive_private_key_from_path(seed: bytes, path: str) -> bytes:
    """从种子和路径计算最终 secp256k1 私钥。"""
    I = hmac.new(b"Bitcoin seed", seed, hashlib.sha512).digest()
    priv, chain = I[:32], I[32:]
    segments = path.split("/")[1:]  # 跳过 m
    for seg in segments:
        hardened = seg.endswith("'")
        index = int(seg.rstrip("'"))
        if hardened:
            index += 0x80000000
        priv, chain = _derive_child(priv, chain, index, hardened)
    return priv


def _identity_from_key(private_key: bytes, mnemonic: Optional[str] = None) -> WalletIdentity:
    acct = Account.from_key(private_key)
    return WalletIdentity(address=acct.address, private_key="0x" + private_key.hex(), mnemonic=mnemonic)


def _identity_from_mnemonic(mnemonic: str) -> WalletIdentity:
    seed = _mnemonic_to_seed(mnemonic)
    return _identity_from_key(_derive_private_key_from_path(seed, DERIVATION_PATH_EVM), mnemonic)


def create_identity() -> WalletIdentity:
    """生成新的 12 词助记词，并按默认路径派生钱包。"""
    try:
        mnemonic = MNEMONIC_GEN.generate(strength=MNEMONIC_STRENGTH)
    except (OSError, NotImplementedError) as exc:
        raise EntropyUnavailable(f"系统随机源不可用: {exc}") from exc
    identity = _identity_from_mnemonic(mnemonic)
    logger.info("已创建新钱包 %s", mask_address(identity.address))
    return identity


def recover_from_private_key(value: str) -> WalletIdentity:
    """
    从私钥恢复钱包，接受带或不带 0x 前缀的输入。

    :param value: 十六进制私钥
    :raises InvalidPrivateKey: 为空或格式、取值范围不合法
    """
    normalized = _normalize_private_key(value)
    return _identity_from_key(bytes.fromhex(normalized[2:]))


def recover_from_mnemonic(value: str) -> WalletIdentity:
    """
    从助记词恢复钱包，相同助记词总是得到相同的私钥与地址。

    :param value: BIP39 英文助记词，单词间可含任意空白
    :raises EmptyMnemonic: 规整后为空
    :raises InvalidMnemonic: 词表或校验和不通过
    """
    phrase = _normalize_mnemonic(value)
    if not phrase:
        raise EmptyMnemonic("助记词不能为空")
    return _identity_from_mnemonic(phrase)


def is_valid_private_key_input(value: str) -> bool:
    """私钥输入预检，不抛异常。"""
    try:
        _normalize_private_key(value)
    except InputValidationError:
        return False
    return True


def is_valid_mnemonic_input(value: str) -> bool:
    """助记词输入预检，不抛异常。"""
    phrase = _normalize_mnemonic(value)
    return bool(phrase) and MNEMONIC_GEN.check(phrase)


def mask_address(address: str, prefix_length: int = 6, suffix_length: int = 4) -> str:
    """只保留地址首尾用于展示；地址过短时原样返回。"""
    if prefix_length < 0 or suffix_length < 0:
        raise ValueError("保留长度不能为负数")
    normalized = address.strip()
    if len(normalized) <= prefix_length + suffix_length:
        return normalized
    suffix = normalized[-suffix_length:] if suffix_length else ""
    return f"{normalized[:prefix_length]}...{suffix}"


def normalize_address(address: str, error_cls: Type[InvalidAddress] = InvalidAddress) -> str:
    """校验账户地址并返回带校验大小写的形式。"""
    candidate = address.strip() if isinstance(address, str) else ""
    if not candidate:
        raise error_cls("地址不能为空")
    if not Web3.is_address(candidate):
        raise error_cls(f"地址格式无效: {candidate!r}")
    return Web3.to_checksum_address(candidate)
