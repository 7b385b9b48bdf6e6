# Copyright The OpenTelemetry Authors
#
# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import json
import os
from logging import getLogger
from typing import Optional, Sequence

from amazon.opentelemetry.xray_sampler._aws_xray_sampling_client import _AwsXRaySamplingClient
from amazon.opentelemetry.xray_sampler._clock import _Clock
from amazon.opentelemetry.xray_sampler._fallback_sampler import _FallbackSampler
from amazon.opentelemetry.xray_sampler._poller import _Poller
from amazon.opentelemetry.xray_sampler._rule_cache import DEFAULT_TARGET_POLLING_INTERVAL_SECONDS, _RuleCache
from opentelemetry.context import Context
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace.sampling import ParentBased, Sampler, SamplingResult
from opentelemetry.trace import Link, SpanKind
from opentelemetry.trace.span import TraceState
from opentelemetry.util.types import Attributes

_logger = getLogger(__name__)

DEFAULT_RULES_POLLING_INTERVAL_SECONDS = 300
MIN_RULES_POLLING_INTERVAL_SECONDS = 10
DEFAULT_SAMPLING_PROXY_ENDPOINT = "http://127.0.0.1:2000"

_RULES_POLLING_MAX_JITTER_SECONDS = 5.0
_TARGETS_POLLING_MAX_JITTER_SECONDS = 0.1


class AwsXRayRemoteSampler(Sampler):
    """
    Remote Sampler for OpenTelemetry that gets sampling configurations from AWS X-Ray.

    Decisions of spans that carry a parent are taken from the parent, only root spans
    are sampled by the X-Ray rules (and counted in the statistics sent to X-Ray).

    Args:
        resource: OpenTelemetry Resource (Optional)
        endpoint: proxy endpoint for AWS X-Ray Sampling (Optional)
        polling_interval: Polling interval for getSamplingRules call (Optional)
        log_level: custom log level configuration for remote sampler (Optional)
    """

    def __init__(
        self,
        resource: Optional[Resource] = None,
        endpoint: Optional[str] = None,
        polling_interval: Optional[int] = None,
        log_level: Optional[str] = None,
    ):
        self._root = ParentBased(
            _AwsXRayRemoteSampler(
                resource=resource, endpoint=endpoint, polling_interval=polling_interval, log_level=log_level
            )
        )

    def should_sample(
        self,
        parent_context: Optional[Context],
        trace_id: int,
        name: str,
        kind: SpanKind = None,
        attributes: Attributes = None,
        links: Sequence[Link] = None,
        trace_state: TraceState = None,
    ) -> SamplingResult:
        return self._root.should_sample(
            parent_context, trace_id, name, kind=kind, attributes=attributes, links=links, trace_state=trace_state
        )

    def get_description(self) -> str:
        return f"AwsXRayRemoteSampler{{root={self._root.get_description()}}}"

    def shutdown(self) -> None:
        # pylint: disable=protected-access
        self._root._root.shutdown()


# pylint: disable=too-many-instance-attributes
class _AwsXRayRemoteSampler(Sampler):
    """
    Non-parent-based X-Ray remote sampler: every call is decided by the matched
    rule and counted in its statistics. Use `AwsXRayRemoteSampler` instead.
    """

    def __init__(
        self,
        resource: Optional[Resource] = None,
        endpoint: Optional[str] = None,
        polling_interval: Optional[int] = None,
        log_level: Optional[str] = None,
    ):
        # Override default log level
        if log_level is not None:
            _logger.setLevel(log_level)

        if endpoint is None:
            _logger.info("`endpoint` is `None`. Defaulting to %s", DEFAULT_SAMPLING_PROXY_ENDPOINT)
            endpoint = DEFAULT_SAMPLING_PROXY_ENDPOINT
        if polling_interval is None or polling_interval < MIN_RULES_POLLING_INTERVAL_SECONDS:
            _logger.warning(
                "`polling_interval` is `None` or too small. Defaulting to %s", DEFAULT_RULES_POLLING_INTERVAL_SECONDS
            )
            polling_interval = DEFAULT_RULES_POLLING_INTERVAL_SECONDS

        if resource is None:
            _logger.warning("OTel Resource provided is `None`. Defaulting to empty resource")
            resource = Resource.get_empty()

        self.__client_id = self.__generate_client_id()
        self._clock = _Clock()
        self.__xray_client = _AwsXRaySamplingClient(endpoint, log_level=log_level)
        self.__endpoint = endpoint
        self.__polling_interval = polling_interval
        self.__resource = resource

        self.__rule_cache = _RuleCache(self.__resource, self._clock)
        self.__fallback_sampler = _FallbackSampler(self._clock)

        self.__rules_poller = _Poller(
            "GetSamplingRules",
            self.__get_and_update_sampling_rules,
            self.__polling_interval,
            max_jitter=_RULES_POLLING_MAX_JITTER_SECONDS,
        )
        self.__targets_poller = _Poller(
            "GetSamplingTargets",
            self.__get_and_update_sampling_targets,
            DEFAULT_TARGET_POLLING_INTERVAL_SECONDS,
            max_jitter=_TARGETS_POLLING_MAX_JITTER_SECONDS,
        )

        # Rules are fetched once up front, targets only after the first statistics interval
        self.__rules_poller.poll_now()
        self.__targets_poller.start()

    def should_sample(
        self,
        parent_context: Optional[Context],
        trace_id: int,
        name: str,
        kind: SpanKind = None,
        attributes: Attributes = None,
        links: Sequence[Link] = None,
        trace_state: TraceState = None,
    ) -> SamplingResult:
        if self.__rule_cache.expired():
            _logger.debug("Rule cache is expired so using fallback sampling strategy")
            return self.__fallback_sampler.should_sample(
                parent_context, trace_id, name, kind=kind, attributes=attributes, links=links, trace_state=trace_state
            )

        matched_rule = self.__rule_cache.get_matched_rule(attributes)
        if matched_rule is None:
            _logger.debug("Unable to find a matching sampling rule, using fallback sampling strategy")
            return self.__fallback_sampler.should_sample(
                parent_context, trace_id, name, kind=kind, attributes=attributes, links=links, trace_state=trace_state
            )

        return matched_rule.should_sample(
            parent_context, trace_id, name, kind=kind, attributes=attributes, links=links, trace_state=trace_state
        )

    def get_description(self) -> str:
        return (
            f"_AwsXRayRemoteSampler{{awsProxyEndpoint={self.__endpoint}, "
            f"rulePollingIntervalSeconds={self.__polling_interval}}}"
        )

    def shutdown(self) -> None:
        self.__rules_poller.shutdown()
        self.__targets_poller.shutdown()

    def __get_and_update_sampling_rules(self) -> int:
        sampling_rules = self.__xray_client.get_sampling_rules()
        if sampling_rules is None:
            _logger.debug("Keeping the existing sampling rules, retrying in %s seconds", self.__polling_interval)
            return self.__polling_interval

        self.__rule_cache.update_sampling_rules(sampling_rules)
        _logger.debug("Got Sampling Rules: %s", json.dumps([rule.to_dict() for rule in sampling_rules]))
        return self.__polling_interval

    def __get_and_update_sampling_targets(self) -> int:
        target_polling_interval = self.__targets_poller.interval
        statistics = self.__rule_cache.create_sampling_statistics_documents(self.__client_id)
        sampling_targets_response = self.__xray_client.get_sampling_targets(statistics)
        if sampling_targets_response is None:
            return target_polling_interval

        for unprocessed in sampling_targets_response.UnprocessedStatistics:
            _logger.debug(
                "Statistics of rule %s were not processed: %s %s",
                unprocessed.RuleName,
                unprocessed.ErrorCode,
                unprocessed.Message,
            )

        refresh_rules, next_polling_interval = self.__rule_cache.update_sampling_targets(
            sampling_targets_response.targets_by_rule_name(), sampling_targets_response.LastRuleModification
        )
        if refresh_rules:
            _logger.debug("Performing out-of-band sampling rule polling to fetch updated rules.")
            self.__rules_poller.poll_now()

        return next_polling_interval

    @staticmethod
    def __generate_client_id() -> str:
        # 24 hex digits, X-Ray rejects any other ClientID format
        return os.urandom(12).hex()
