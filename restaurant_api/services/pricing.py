"""
订单金额计算
"""

from typing import Any, Iterable, Mapping


def _line_value(item: Any, key: str, default):
    if isinstance(item, Mapping):
        value = item.get(key, default)
    else:
        value = getattr(item, key, default)
    return default if value is None else value


def calculate_total(items: Iterable[Any]) -> float:
    """
    计算订单总额 = Σ(数量 × 单价)

    按明细顺序累加，不做舍入，存储值与逐行相乘求和的结果完全一致

    Args:
        items: 订单明细，元素可以是 dict 或带 quantity/price 属性的对象

    Returns:
        float: 非负总额，没有明细时为 0
    """
    total = 0.0
    for item in items or ():
        quantity = int(_line_value(item, "quantity", 1))
        price = float(_line_value(item, "price", 0))
        total += quantity * price
    return total
