"""Tests for order code generation."""

import random
import re
import time
from concurrent.futures import ThreadPoolExecutor

from ordering.order.codes import OrderCodeGenerator, generate_order_code

CODE_PATTERN = re.compile(r"^ORD-(\d{13,})-([0-9A-Z]{5})$")


class TestOrderCodeFormat:
    def test_default_generator_format(self):
        assert CODE_PATTERN.match(generate_order_code())

    def test_prefix_is_configurable(self):
        assert OrderCodeGenerator(prefix="AIT")().startswith("AIT-")


class TestOrderCodeUniqueness:
    def test_stamp_strictly_increases_within_one_millisecond(self):
        generate = OrderCodeGenerator(clock=lambda: 1_700_000_000.0)
        stamps = [int(CODE_PATTERN.match(generate()).group(1)) for _ in range(50)]
        assert stamps == list(range(1_700_000_000_000, 1_700_000_000_050))

    def test_stamp_does_not_go_backwards_with_the_clock(self):
        readings = iter([1_700_000_000.500, 1_700_000_000.100])
        generate = OrderCodeGenerator(clock=lambda: next(readings))
        first, second = (int(CODE_PATTERN.match(generate()).group(1)) for _ in range(2))
        assert second == first + 1

    def test_ten_thousand_concurrent_codes_are_unique(self):
        def slow_clock():
            time.sleep(random.uniform(0, 0.0005))
            return time.time()

        generate = OrderCodeGenerator(clock=slow_clock)
        with ThreadPoolExecutor(max_workers=32) as pool:
            codes = list(pool.map(lambda _: generate(), range(10_000)))

        assert len(set(codes)) == 10_000
        assert all(CODE_PATTERN.match(code) for code in codes)
