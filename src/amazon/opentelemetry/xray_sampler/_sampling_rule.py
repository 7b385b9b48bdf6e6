# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from logging import getLogger
from types import MappingProxyType
from typing import Dict, Optional

_logger = getLogger(__name__)

# The Default rule of X-Ray has priority 10000, unprioritized rules go after it
_DEFAULT_PRIORITY = 10001


# Disable snake_case naming style so this class can match the sampling rules response from X-Ray
# pylint: disable=invalid-name,too-many-instance-attributes
class _SamplingRule:
    def __init__(
        self,
        Attributes: Optional[Dict[str, str]] = None,
        FixedRate: Optional[float] = None,
        HTTPMethod: Optional[str] = None,
        Host: Optional[str] = None,
        Priority: Optional[int] = None,
        ReservoirSize: Optional[int] = None,
        ResourceARN: Optional[str] = None,
        RuleARN: Optional[str] = None,
        RuleName: Optional[str] = None,
        ServiceName: Optional[str] = None,
        ServiceType: Optional[str] = None,
        URLPath: Optional[str] = None,
        Version: Optional[int] = None,
        **kwargs,
    ):
        if kwargs:
            _logger.debug("Ignoring unknown fields in _SamplingRule: %s", list(kwargs.keys()))

        self.Attributes = MappingProxyType(dict(Attributes)) if Attributes is not None else MappingProxyType({})
        self.FixedRate = float(FixedRate) if FixedRate is not None else 0.0
        self.HTTPMethod = HTTPMethod if HTTPMethod is not None else ""
        self.Host = Host if Host is not None else ""
        self.Priority = int(Priority) if Priority is not None else _DEFAULT_PRIORITY
        self.ReservoirSize = int(ReservoirSize) if ReservoirSize is not None else 0
        self.ResourceARN = ResourceARN if ResourceARN is not None else ""
        self.RuleARN = RuleARN if RuleARN is not None else ""
        self.RuleName = RuleName if RuleName is not None else ""
        self.ServiceName = ServiceName if ServiceName is not None else ""
        self.ServiceType = ServiceType if ServiceType is not None else ""
        self.URLPath = URLPath if URLPath is not None else ""
        self.Version = int(Version) if Version is not None else 0

        if not 0.0 <= self.FixedRate <= 1.0:
            raise ValueError(f"FixedRate must be between 0 and 1, got {self.FixedRate}")

    def __lt__(self, other: "_SamplingRule") -> bool:
        if self.Priority == other.Priority:
            # String order priority example:
            # "A","Abc","a","ab","abc","abcdef"
            return self.RuleName < other.RuleName
        return self.Priority < other.Priority

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _SamplingRule):
            return False
        return (
            self.FixedRate == other.FixedRate
            and self.HTTPMethod == other.HTTPMethod
            and self.Host == other.Host
            and self.Priority == other.Priority
            and self.ReservoirSize == other.ReservoirSize
            and self.ResourceARN == other.ResourceARN
            and self.RuleARN == other.RuleARN
            and self.RuleName == other.RuleName
            and self.ServiceName == other.ServiceName
            and self.ServiceType == other.ServiceType
            and self.URLPath == other.URLPath
            and self.Version == other.Version
            and dict(self.Attributes) == dict(other.Attributes)
        )

    def to_dict(self) -> dict:
        return {
            "RuleName": self.RuleName,
            "RuleARN": self.RuleARN,
            "Priority": self.Priority,
            "ResourceARN": self.ResourceARN,
            "ServiceName": self.ServiceName,
            "ServiceType": self.ServiceType,
            "Host": self.Host,
            "HTTPMethod": self.HTTPMethod,
            "URLPath": self.URLPath,
            "ReservoirSize": self.ReservoirSize,
            "FixedRate": self.FixedRate,
            "Attributes": dict(self.Attributes),
            "Version": self.Version,
        }
