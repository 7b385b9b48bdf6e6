# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import datetime
import threading
from unittest import TestCase

from mock_clock import MockClock

from amazon.opentelemetry.xray_sampler._rate_limiter import _RateLimiter


def _spend(rate_limiter: _RateLimiter, attempts: int) -> int:
    spent = 0
    for _ in range(0, attempts):
        if rate_limiter.try_spend():
            spent += 1
    return spent


class TestRateLimiter(TestCase):
    def test_try_spend_within_one_second(self):
        clock = MockClock(datetime.datetime.fromtimestamp(1707551387.0))
        rate_limiter = _RateLimiter(30, clock)

        self.assertEqual(_spend(rate_limiter, 100), 30)

        # same second, nothing left
        clock.add_time(0.5)
        self.assertEqual(_spend(rate_limiter, 100), 0)

        # window resets on the next second boundary
        clock.add_time(0.5)
        self.assertEqual(_spend(rate_limiter, 100), 30)

        clock.add_time(1000)
        self.assertEqual(_spend(rate_limiter, 100), 30)

    def test_try_spend_does_not_accumulate_unused_quota(self):
        clock = MockClock(datetime.datetime.fromtimestamp(1707551387.0))
        rate_limiter = _RateLimiter(5, clock)

        self.assertEqual(_spend(rate_limiter, 2), 2)
        clock.add_time(1.0)
        self.assertEqual(_spend(rate_limiter, 100), 5)

    def test_try_spend_with_zero_quota(self):
        clock = MockClock(datetime.datetime.fromtimestamp(1707551387.0))
        rate_limiter = _RateLimiter(0, clock)
        self.assertEqual(_spend(rate_limiter, 100), 0)
        self.assertEqual(rate_limiter.quota, 0)

    def test_try_spend_from_many_threads(self):
        clock = MockClock(datetime.datetime.fromtimestamp(1707551387.0))
        rate_limiter = _RateLimiter(1000, clock)
        spent = [0] * 20

        def spend(index):
            spent[index] = _spend(rate_limiter, 100)

        threads = [threading.Thread(target=spend, args=(index,)) for index in range(0, 20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(sum(spent), 1000)

    def test_try_spend_ignores_clock_going_backwards(self):
        clock = MockClock(datetime.datetime.fromtimestamp(100.0))
        rate_limiter = _RateLimiter(1, clock)

        spent = []
        for second in (100.0, 101.0, 100.0, 101.0):
            clock.set_time(datetime.datetime.fromtimestamp(second))
            spent.append(rate_limiter.try_spend())

        # an older second is counted in the current window
        self.assertEqual(spent, [True, True, False, False])

    def test_with_quota_continues_current_window(self):
        clock = MockClock(datetime.datetime.fromtimestamp(1707551387.0))
        rate_limiter = _RateLimiter(5, clock)
        self.assertEqual(_spend(rate_limiter, 3), 3)

        new_rate_limiter = rate_limiter.with_quota(5)
        self.assertEqual(new_rate_limiter.quota, 5)
        self.assertEqual(_spend(new_rate_limiter, 100), 2)

        # the original limiter is not affected by the new one
        self.assertEqual(_spend(rate_limiter, 100), 2)

        clock.add_time(1.0)
        self.assertEqual(_spend(new_rate_limiter, 100), 5)

    def test_with_quota_from_unused_limiter(self):
        clock = MockClock(datetime.datetime.fromtimestamp(1707551387.0))
        new_rate_limiter = _RateLimiter(0, clock).with_quota(3)
        self.assertEqual(_spend(new_rate_limiter, 100), 3)
