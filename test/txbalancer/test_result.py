import pytest

from txbalancer.exception import NoCollateralAvailableException
from txbalancer.result import Err, Ok


def test_ok():
    result = Ok(1)
    assert result.is_ok()
    assert not result.is_err()
    assert result.unwrap() == 1
    assert result.unwrap_or(2) == 1
    assert result.map(lambda v: v + 1) == Ok(2)
    assert result.and_then(lambda v: Ok(v * 10)) == Ok(10)


def test_err():
    error = NoCollateralAvailableException("empty")
    result = Err(error)
    assert result.is_err()
    assert not result.is_ok()
    assert result.unwrap_or(2) == 2
    assert result.map(lambda v: v + 1) is result
    with pytest.raises(NoCollateralAvailableException):
        result.unwrap()


def test_and_then_stops_at_first_err():
    calls = []

    def step(v):
        calls.append(v)
        return Err(NoCollateralAvailableException("stop"))

    result = Ok(1).and_then(step).and_then(step)
    assert isinstance(result, Err)
    assert calls == [1]
