# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from threading import Lock
from typing import NamedTuple

from amazon.opentelemetry.xray_sampler._clock import _Clock


# pylint: disable=invalid-name
class _SamplingStatisticsSnapshot(NamedTuple):
    RequestCount: int = 0
    SampleCount: int = 0
    BorrowCount: int = 0


class _SamplingStatistics:
    """Per-rule decision counters.

    Increments and `snapshot` share one lock, so an increment racing a snapshot is
    counted either entirely in it or entirely in the next one.
    """

    def __init__(self):
        self.__lock = Lock()
        self.__request_count = 0
        self.__sample_count = 0
        self.__borrow_count = 0

    def record(self, sampled: bool, borrowed: bool) -> None:
        with self.__lock:
            self.__request_count += 1
            if sampled:
                self.__sample_count += 1
            if borrowed:
                self.__borrow_count += 1

    def snapshot(self) -> _SamplingStatisticsSnapshot:
        """Returns the current counters and resets them to zero."""
        with self.__lock:
            snapshot = _SamplingStatisticsSnapshot(self.__request_count, self.__sample_count, self.__borrow_count)
            self.__request_count = 0
            self.__sample_count = 0
            self.__borrow_count = 0
        return snapshot


# Disable snake_case naming style so this class can match the statistics document request of X-Ray
# pylint: disable=invalid-name
class _SamplingStatisticsDocument:
    def __init__(self, clientID: str, ruleName: str, RequestCount: int = 0, BorrowCount: int = 0, SampleCount: int = 0):
        self.ClientID = clientID
        self.RuleName = ruleName
        self.RequestCount = RequestCount
        self.BorrowCount = BorrowCount
        self.SampleCount = SampleCount

    def snapshot(self, clock: _Clock) -> dict:
        # X-Ray only accepts whole seconds
        return {
            "ClientID": self.ClientID,
            "RuleName": self.RuleName,
            "Timestamp": clock.now_seconds(),
            "RequestCount": self.RequestCount,
            "BorrowCount": self.BorrowCount,
            "SampledCount": self.SampleCount,
        }
