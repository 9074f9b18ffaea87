"""
外部编号生成
格式：<前缀><毫秒时间戳><随机后缀>，例如 TO1718000000000X7K2QF
"""

import secrets
import string
import time

ALPHABET = string.digits + string.ascii_uppercase


def generate_identifier(prefix: str, suffix_length: int = 6) -> str:
    """生成带前缀的外部编号；时间戳保证大致有序，随机后缀避免碰撞和被猜测"""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(ALPHABET) for _ in range(suffix_length))
    return f"{prefix}{millis}{suffix}"
