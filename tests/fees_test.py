import pytest

from stylus_activator.activation.fees import bump_fee

UINT256_MAX = 2 ** 256 - 1


@pytest.mark.parametrize("fee", [0, 1, 99, 12345, 10 ** 18, UINT256_MAX])
def test_zero_percent_is_identity(fee):
    assert bump_fee(fee, 0) == fee


@pytest.mark.parametrize(
    "fee,percent,expected",
    [
        (100, 10, 110),
        (1, 50, 1),
        (1000, 20, 1200),
        (199, 1, 200),
        (3, 100, 6),
    ],
)
def test_bump_fee(fee, percent, expected):
    assert bump_fee(fee, percent) == expected


def test_bump_fee_does_not_truncate_large_fees():
    assert bump_fee(UINT256_MAX, 50) == UINT256_MAX * 150 // 100
    assert bump_fee(UINT256_MAX, 50) > UINT256_MAX


def test_monotonic_in_percent():
    bumped = [bump_fee(987654321, percent) for percent in range(0, 300)]
    assert bumped == sorted(bumped)


def test_monotonic_in_fee():
    bumped = [bump_fee(fee, 33) for fee in range(0, 1000)]
    assert bumped == sorted(bumped)


@pytest.mark.parametrize("fee,percent", [(-1, 10), (10, -1)])
def test_negative_inputs(fee, percent):
    with pytest.raises(ValueError):
        bump_fee(fee, percent)
