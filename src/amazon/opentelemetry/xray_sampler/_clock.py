# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import datetime


class _Clock:
    """Wall clock of the sampler.

    Every time-based decision goes through `now`, so a subclass overriding it
    freezes or advances time for the whole sampler.
    """

    def now(self) -> datetime.datetime:
        return datetime.datetime.now()

    def now_seconds(self) -> int:
        return int(self.now().timestamp())

    def now_millis(self) -> int:
        return int(self.now().timestamp() * 1000)

    @staticmethod
    def from_timestamp(timestamp: float) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(timestamp)

    @staticmethod
    def time_delta(seconds: float) -> datetime.timedelta:
        return datetime.timedelta(seconds=seconds)

    @staticmethod
    def max() -> datetime.datetime:
        return datetime.datetime.max
