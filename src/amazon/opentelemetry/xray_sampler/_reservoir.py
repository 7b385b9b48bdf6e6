# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import datetime
from enum import Enum
from typing import Optional

from amazon.opentelemetry.xray_sampler._clock import _Clock
from amazon.opentelemetry.xray_sampler._rate_limiter import _RateLimiter


class _ReservoirDecision(Enum):
    TAKE = "take"
    BORROW = "borrow"
    NO = "no"


class _Reservoir:
    """Per-rule sampling budget.

    A reservoir either borrows (1 req/sec, used until the first target for the rule
    arrives) or spends a quota assigned by X-Ray, which is only valid until
    `expiry`. An expired reservoir denies everything.
    """

    def __init__(
        self,
        quota: int,
        expiry: datetime.datetime,
        borrowing: bool,
        clock: _Clock,
        previous: Optional["_Reservoir"] = None,
    ):
        self._clock = clock
        self.__expiry = expiry
        self.__borrowing = borrowing
        if previous is None:
            self.__rate_limiter = _RateLimiter(quota, clock)
        else:
            # decisions already granted this second count against the new quota
            self.__rate_limiter = previous.__rate_limiter.with_quota(quota)

    @classmethod
    def for_rule(cls, reservoir_size: int, clock: _Clock) -> "_Reservoir":
        # Until targets are fetched, borrow for as long as it takes if the rule has any reservoir at all
        if reservoir_size > 0:
            return cls(1, clock.max(), True, clock)
        return cls(0, clock.max(), False, clock)

    @classmethod
    def for_target(
        cls,
        quota: Optional[int],
        quota_ttl: Optional[float],
        clock: _Clock,
        previous: Optional["_Reservoir"] = None,
    ) -> "_Reservoir":
        if quota_ttl is not None:
            expiry = clock.from_timestamp(quota_ttl)
        else:
            # no TTL means the quota is already expired
            expiry = clock.now()
        return cls(quota if quota is not None else 0, expiry, False, clock, previous=previous)

    @property
    def quota(self) -> int:
        return self.__rate_limiter.quota

    @property
    def expiry(self) -> datetime.datetime:
        return self.__expiry

    @property
    def borrowing(self) -> bool:
        return self.__borrowing

    def take(self) -> _ReservoirDecision:
        if self._clock.now() >= self.__expiry:
            return _ReservoirDecision.NO
        if not self.__rate_limiter.try_spend():
            return _ReservoirDecision.NO
        return _ReservoirDecision.BORROW if self.__borrowing else _ReservoirDecision.TAKE
