# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import re
from logging import getLogger
from typing import Dict, Optional

from opentelemetry.semconv.resource import CloudPlatformValues
from opentelemetry.util.types import Attributes, AttributeValue

_logger = getLogger(__name__)

cloud_platform_mapping = {
    CloudPlatformValues.AWS_LAMBDA.value: "AWS::Lambda::Function",
    CloudPlatformValues.AWS_ELASTIC_BEANSTALK.value: "AWS::ElasticBeanstalk::Environment",
    CloudPlatformValues.AWS_EC2.value: "AWS::EC2::Instance",
    CloudPlatformValues.AWS_ECS.value: "AWS::ECS::Container",
    CloudPlatformValues.AWS_EKS.value: "AWS::EKS::Container",
}


class _Matcher:
    @staticmethod
    def wild_card_match(text: Optional[AttributeValue] = None, pattern: Optional[str] = None) -> bool:
        if pattern == "*":
            return True
        if pattern is None or not isinstance(text, str):
            return False
        if len(pattern) == 0:
            return len(text) == 0

        if re.fullmatch(_Matcher.to_regex_pattern(pattern), text, flags=re.IGNORECASE) is None:
            _logger.debug("WildcardMatch: no match found for %s against pattern %s", text, pattern)
            return False
        return True

    @staticmethod
    def to_regex_pattern(rule_pattern: str) -> str:
        # Literal runs are escaped as a whole, only `*` and `?` keep a wildcard meaning
        token_start = -1
        regex_pattern = ""
        for index, char in enumerate(rule_pattern):
            if char in ("*", "?"):
                if token_start != -1:
                    regex_pattern += re.escape(rule_pattern[token_start:index])
                    token_start = -1
                regex_pattern += ".*" if char == "*" else "."
            elif token_start == -1:
                token_start = index
        if token_start != -1:
            regex_pattern += re.escape(rule_pattern[token_start:])
        return regex_pattern

    @staticmethod
    def attribute_match(attributes: Attributes = None, rule_attributes: Optional[Dict[str, str]] = None) -> bool:
        if not rule_attributes:
            return True
        if not attributes or len(rule_attributes) > len(attributes):
            return False

        for key, pattern in rule_attributes.items():
            if key not in attributes:
                return False
            if not _Matcher.wild_card_match(attributes[key], pattern):
                return False
        return True
