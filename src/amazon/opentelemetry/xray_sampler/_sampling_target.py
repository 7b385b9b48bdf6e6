# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from logging import getLogger
from typing import Dict, List, Optional

_logger = getLogger(__name__)


# Disable snake_case naming style so this class can match the sampling targets response from X-Ray
# pylint: disable=invalid-name
class _SamplingTarget:
    """One target document; raises `TypeError` or `ValueError` for malformed fields."""

    def __init__(
        self,
        FixedRate: Optional[float] = None,
        Interval: Optional[int] = None,
        ReservoirQuota: Optional[int] = None,
        ReservoirQuotaTTL: Optional[float] = None,
        RuleName: Optional[str] = None,
    ):
        self.FixedRate = float(FixedRate) if FixedRate is not None else 0.0
        self.Interval = int(Interval) if Interval is not None else None
        self.ReservoirQuota = int(ReservoirQuota) if ReservoirQuota is not None else None
        self.ReservoirQuotaTTL = float(ReservoirQuotaTTL) if ReservoirQuotaTTL is not None else None
        self.RuleName = RuleName if RuleName is not None else ""

        if not 0.0 <= self.FixedRate <= 1.0:
            raise ValueError(f"FixedRate must be between 0 and 1, got {self.FixedRate}")
        if not isinstance(self.RuleName, str):
            raise TypeError(f"RuleName must be a string, got {type(self.RuleName).__name__}")


class _UnprocessedStatistics:
    def __init__(
        self,
        ErrorCode: Optional[str] = None,
        Message: Optional[str] = None,
        RuleName: Optional[str] = None,
    ):
        self.ErrorCode = ErrorCode if ErrorCode is not None else ""
        self.Message = Message if Message is not None else ""
        self.RuleName = RuleName if RuleName is not None else ""


class _SamplingTargetResponse:
    def __init__(
        self,
        LastRuleModification: Optional[float],
        SamplingTargetDocuments: Optional[List[dict]] = None,
        UnprocessedStatistics: Optional[List[dict]] = None,
    ):
        self.LastRuleModification: float = float(LastRuleModification) if LastRuleModification is not None else 0.0

        self.SamplingTargetDocuments: List[_SamplingTarget] = []
        if SamplingTargetDocuments is not None:
            for document in SamplingTargetDocuments:
                try:
                    self.SamplingTargetDocuments.append(_SamplingTarget(**document))
                except (TypeError, ValueError) as e:
                    _logger.debug("Skipping invalid SamplingTargetDocument %s: %s", document, e)

        self.UnprocessedStatistics: List[_UnprocessedStatistics] = []
        if UnprocessedStatistics is not None:
            for unprocessed in UnprocessedStatistics:
                try:
                    self.UnprocessedStatistics.append(_UnprocessedStatistics(**unprocessed))
                except TypeError as e:
                    _logger.debug("TypeError occurred: %s", e)

    def targets_by_rule_name(self) -> Dict[str, _SamplingTarget]:
        targets = {}
        for target in self.SamplingTargetDocuments:
            if target.RuleName == "":
                _logger.debug("Invalid sampling target: missing rule name")
                continue
            targets[target.RuleName] = target
        return targets
