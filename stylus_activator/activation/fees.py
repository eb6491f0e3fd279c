"""Fee policy applied to the estimated activation data fee."""


def bump_fee(base: int, percent: int) -> int:
    """Raise ``base`` by ``percent`` percent, rounding down.

    Python integers do not overflow, so the intermediate product is exact for
    any uint256 fee.

    :param base: estimated fee in wei
    :param percent: non-negative bump percentage
    :return: ``base * (100 + percent) // 100``
    """
    if base < 0 or percent < 0:
        raise ValueError("fee and bump percentage must be non-negative")
    return base * (100 + percent) // 100
