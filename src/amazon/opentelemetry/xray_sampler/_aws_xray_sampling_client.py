# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import json
from logging import getLogger
from typing import List, Optional

import requests

from amazon.opentelemetry.xray_sampler._sampling_rule import _SamplingRule
from amazon.opentelemetry.xray_sampler._sampling_target import _SamplingTargetResponse

_logger = getLogger(__name__)

_REQUEST_TIMEOUT_SECONDS = 20


class _AwsXRaySamplingClient:
    """Thin client for the X-Ray sampling proxy.

    Both calls return `None` when the round trip failed, so pollers can tell a
    failed fetch from an empty answer and keep their last known state.
    """

    def __init__(self, endpoint: str, log_level: Optional[str] = None):
        # Override default log level
        if log_level is not None:
            _logger.setLevel(log_level)

        self.__get_sampling_rules_endpoint = endpoint + "/GetSamplingRules"
        self.__get_sampling_targets_endpoint = endpoint + "/SamplingTargets"

        self.__session = requests.Session()

    def get_sampling_rules(self) -> Optional[List[_SamplingRule]]:
        sampling_rules = []
        headers = {"content-type": "application/json"}

        try:
            xray_response = self.__session.post(
                url=self.__get_sampling_rules_endpoint, headers=headers, timeout=_REQUEST_TIMEOUT_SECONDS
            )
            if xray_response is None:
                _logger.error("GetSamplingRules response is None")
                return None
            xray_response.raise_for_status()
            sampling_rules_response = xray_response.json()
            if sampling_rules_response is None or "SamplingRuleRecords" not in sampling_rules_response:
                _logger.error(
                    "SamplingRuleRecords is missing in getSamplingRules response: %s", sampling_rules_response
                )
                return None
        except requests.exceptions.RequestException as req_err:
            _logger.error("Request error occurred: %s", req_err)
            return None
        except json.JSONDecodeError as json_err:
            _logger.error("Error in decoding JSON response: %s", json_err)
            return None
        # pylint: disable=broad-exception-caught
        except Exception as err:
            _logger.error("Error occurred when attempting to fetch rules: %s", err)
            return None

        for record in sampling_rules_response["SamplingRuleRecords"] or []:
            if not isinstance(record, dict) or not isinstance(record.get("SamplingRule"), dict):
                _logger.error("SamplingRule is missing in SamplingRuleRecord")
                continue
            if not record["SamplingRule"].get("RuleName"):
                _logger.debug("Skipping SamplingRule without RuleName: %s", record["SamplingRule"])
                continue
            try:
                sampling_rules.append(_SamplingRule(**record["SamplingRule"]))
            except (TypeError, ValueError) as err:
                _logger.debug("Skipping invalid SamplingRule %s: %s", record["SamplingRule"].get("RuleName"), err)

        return sampling_rules

    def get_sampling_targets(self, statistics: List[dict]) -> Optional[_SamplingTargetResponse]:
        headers = {"content-type": "application/json"}
        try:
            xray_response = self.__session.post(
                url=self.__get_sampling_targets_endpoint,
                headers=headers,
                timeout=_REQUEST_TIMEOUT_SECONDS,
                json={"SamplingStatisticsDocuments": statistics},
            )
            if xray_response is None:
                _logger.debug("GetSamplingTargets response is None. Unable to update targets.")
                return None
            xray_response.raise_for_status()
            xray_response_json = xray_response.json()
            if (
                xray_response_json is None
                or "SamplingTargetDocuments" not in xray_response_json
                or "LastRuleModification" not in xray_response_json
            ):
                _logger.debug("getSamplingTargets response is invalid. Unable to update targets.")
                return None

            return _SamplingTargetResponse(
                xray_response_json.get("LastRuleModification"),
                xray_response_json.get("SamplingTargetDocuments"),
                xray_response_json.get("UnprocessedStatistics"),
            )
        except requests.exceptions.RequestException as req_err:
            _logger.debug("Request error occurred: %s", req_err)
        except json.JSONDecodeError as json_err:
            _logger.debug("Error in decoding JSON response: %s", json_err)
        # pylint: disable=broad-exception-caught
        except Exception as err:
            _logger.debug("Error occurred when attempting to fetch targets: %s", err)

        return None
