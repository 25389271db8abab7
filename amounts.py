"""原生币金额在十进制字符串与 wei 之间的转换。"""

from decimal import Decimal, InvalidOperation

from web3 import Web3

from config import NATIVE_DECIMALS
from errors import InvalidAmount, NonPositiveAmount

# 只接受 ASCII 数字、小数点与符号，不接受科学计数法、下划线与其他文字的数字
_AMOUNT_CHARS = frozenset("0123456789.+-")


def _fraction_places(value: Decimal) -> int:
    """去掉末尾 0 之后的小数位数。"""
    _, digits, exponent = value.as_tuple()
    if exponent >= 0:
        return 0
    places = -exponent
    for digit in reversed(digits):
        if digit != 0 or places == 0:
            break
        places -= 1
    return places


def format_units(raw: int) -> str:
    """把 wei 转为 ETH 字符串，去掉小数末尾的 0，至少保留一位小数。"""
    text = format(Decimal(Web3.from_wei(raw, "ether")), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}.0" if "." not in text else text


def parse_amount(amount: str) -> Decimal:
    """把十进制金额字符串解析为 Decimal，小数位超过 wei 精度时视为无效。"""
    text = amount.strip() if isinstance(amount, str) else ""
    if not text:
        raise InvalidAmount("金额不能为空")
    if not set(text) <= _AMOUNT_CHARS:
        raise InvalidAmount(f"金额格式无效: {text!r}")
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise InvalidAmount(f"金额格式无效: {text!r}") from exc
    if not value.is_finite():
        raise InvalidAmount(f"金额格式无效: {text!r}")
    if _fraction_places(value) > NATIVE_DECIMALS:
        raise InvalidAmount(f"金额小数位不能超过 {NATIVE_DECIMALS} 位")
    return value


def parse_positive_units(amount: str) -> int:
    """解析转账金额并转换为 wei，要求大于 0 且不超过 uint256。"""
    value = parse_amount(amount)
    if value <= 0:
        raise NonPositiveAmount("转账金额必须大于 0")
    try:
        return int(Web3.to_wei(value, "ether"))
    except ValueError as exc:
        raise InvalidAmount(f"金额超出可转账范围: {amount.strip()}") from exc
