# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from threading import Lock
from typing import Optional

from amazon.opentelemetry.xray_sampler._clock import _Clock


class _RateLimiter:
    """Allows at most `quota` spends per wall-clock second.

    The window is a plain counter keyed on the current epoch second, so it resets
    on every second boundary instead of accruing a rolling balance. The window
    only moves forward: a second older than the current one (a clock stepping
    back) is counted in the current window.
    """

    def __init__(self, quota: int, clock: _Clock):
        self._quota = quota
        self._clock = clock

        self.__current_second: Optional[int] = None
        self.__spent_this_second = 0
        self.__lock = Lock()

    @property
    def quota(self) -> int:
        return self._quota

    def try_spend(self) -> bool:
        if self._quota <= 0:
            return False

        with self.__lock:
            now_second = self._clock.now_seconds()
            if self.__current_second is None or now_second > self.__current_second:
                self.__current_second = now_second
                self.__spent_this_second = 0
            if self.__spent_this_second >= self._quota:
                return False
            self.__spent_this_second += 1
            return True

    def with_quota(self, quota: int) -> "_RateLimiter":
        """Returns a limiter for `quota` that continues this limiter's current window."""
        rate_limiter = _RateLimiter(quota, self._clock)
        with self.__lock:
            rate_limiter.__current_second = self.__current_second
            rate_limiter.__spent_this_second = self.__spent_this_second
        return rate_limiter
