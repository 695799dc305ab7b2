"""
Fuzz Testing for deployment inputs
Tests edge cases and unexpected inputs
"""

import pytest
from hypothesis import assume, given, strategies as st
from unittest.mock import Mock
from web3 import Web3

from deployment.address_validation import validate_address
from deployment.errors import InvalidConstructorArgument
from utils.gas_calculator import GasCalculator

addresses = st.binary(min_size=20, max_size=20).filter(lambda raw: any(raw))


class TestAddressFuzzing:
    """Fuzz test constructor argument validation"""

    @given(raw=addresses)
    def test_any_nonzero_address_accepted(self, raw):
        address = Web3.to_checksum_address(raw)

        assert validate_address(address) == address
        assert validate_address(address.lower()) == address

    @given(text=st.text(max_size=60))
    def test_arbitrary_text_never_crashes(self, text):
        try:
            result = validate_address(text)
        except InvalidConstructorArgument:
            return

        # Anything accepted must be a canonical address
        assert Web3.is_checksum_address(result)
        assert len(result) == 42

    @given(raw=addresses, position=st.integers(min_value=0, max_value=39))
    def test_single_case_flip_rejected(self, raw, position):
        address = Web3.to_checksum_address(raw)
        char = address[2 + position]

        if not char.isalpha():
            return

        flipped = address[:2 + position] + char.swapcase() + address[3 + position:]
        body = flipped[2:]
        # Single-case input carries no checksum
        assume(body != body.lower() and body != body.upper())

        with pytest.raises(InvalidConstructorArgument):
            validate_address(flipped)


class TestGasFuzzing:
    """Fuzz test deployment cost estimation"""

    @given(
        gas_limit=st.integers(min_value=21000, max_value=30_000_000),
        gas_price=st.integers(min_value=1, max_value=10**12)
    )
    def test_override_cost(self, gas_limit, gas_price):
        calculator = GasCalculator(Web3())
        pricing = calculator.get_pricing(gas_price)

        cost = calculator.estimate_deployment_cost(gas_limit, pricing)

        assert pricing == {'gasPrice': gas_price}
        assert cost == gas_limit * gas_price
        assert cost < 2**256

    @given(gas_estimate=st.integers(min_value=21000, max_value=30_000_000))
    def test_gas_limit_buffer(self, gas_estimate):
        constructor = Mock()
        constructor.estimate_gas.return_value = gas_estimate

        gas_limit = GasCalculator(Web3()).estimate_gas_limit(constructor, "0x" + "11" * 20)

        assert gas_limit >= gas_estimate
        assert gas_limit == int(gas_estimate * 1.2)
