# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from typing import Optional, Sequence
from urllib.parse import urlparse

from amazon.opentelemetry.xray_sampler._clock import _Clock
from amazon.opentelemetry.xray_sampler._matcher import _Matcher, cloud_platform_mapping
from amazon.opentelemetry.xray_sampler._reservoir import _Reservoir, _ReservoirDecision
from amazon.opentelemetry.xray_sampler._sampling_rule import _SamplingRule
from amazon.opentelemetry.xray_sampler._sampling_statistics_document import (
    _SamplingStatistics,
    _SamplingStatisticsSnapshot,
)
from amazon.opentelemetry.xray_sampler._sampling_target import _SamplingTarget
from opentelemetry.context import Context
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace.sampling import Decision, SamplingResult, TraceIdRatioBased
from opentelemetry.semconv.resource import CloudPlatformValues, ResourceAttributes
from opentelemetry.semconv.trace import SpanAttributes
from opentelemetry.trace import Link, SpanKind
from opentelemetry.trace.span import TraceState
from opentelemetry.util.types import Attributes


class _SamplingRuleApplier:
    def __init__(
        self,
        sampling_rule: _SamplingRule,
        clock: _Clock,
        statistics: Optional[_SamplingStatistics] = None,
        target: Optional[_SamplingTarget] = None,
        previous_reservoir: Optional[_Reservoir] = None,
    ):
        self._clock = clock
        self.sampling_rule = sampling_rule

        # statistics are carried over when a target replaces this applier
        self.__statistics = statistics if statistics is not None else _SamplingStatistics()

        if target is None:
            self.__fixed_rate = self.sampling_rule.FixedRate
            self.__reservoir = _Reservoir.for_rule(self.sampling_rule.ReservoirSize, clock)
        else:
            self.__fixed_rate = target.FixedRate if target.FixedRate is not None else 0.0
            self.__reservoir = _Reservoir.for_target(
                target.ReservoirQuota, target.ReservoirQuotaTTL, clock, previous=previous_reservoir
            )

        self.__fixed_rate_sampler = TraceIdRatioBased(self.__fixed_rate)

    @property
    def reservoir(self) -> _Reservoir:
        return self.__reservoir

    @property
    def fixed_rate(self) -> float:
        return self.__fixed_rate

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
        has_borrowed = False
        reservoir_decision = self.__reservoir.take()

        if reservoir_decision is not _ReservoirDecision.NO:
            has_borrowed = reservoir_decision is _ReservoirDecision.BORROW
            sampling_result = SamplingResult(Decision.RECORD_AND_SAMPLE, attributes=attributes, trace_state=trace_state)
        else:
            sampling_result = self.__fixed_rate_sampler.should_sample(
                parent_context, trace_id, name, kind=kind, attributes=attributes, links=links, trace_state=trace_state
            )

        self.__statistics.record(sampled=sampling_result.decision is not Decision.DROP, borrowed=has_borrowed)
        return sampling_result

    def with_target(self, target: _SamplingTarget) -> "_SamplingRuleApplier":
        """Applier for the same rule with the target's quota and fixed rate.

        Statistics and the current second's reservoir usage are carried over.
        """
        return _SamplingRuleApplier(
            self.sampling_rule,
            self._clock,
            statistics=self.__statistics,
            target=target,
            previous_reservoir=self.__reservoir,
        )

    def snapshot_statistics(self) -> _SamplingStatisticsSnapshot:
        return self.__statistics.snapshot()

    def matches(self, resource: Resource, attributes: Attributes) -> bool:
        url_path = None
        url_full = None
        http_request_method = None
        server_address = None
        service_name = None

        if attributes is not None:
            # Older instrumentations still report the deprecated http.* keys
            url_path = attributes.get(SpanAttributes.URL_PATH, attributes.get(SpanAttributes.HTTP_TARGET, None))
            url_full = attributes.get(SpanAttributes.URL_FULL, attributes.get(SpanAttributes.HTTP_URL, None))
            http_request_method = attributes.get(
                SpanAttributes.HTTP_REQUEST_METHOD, attributes.get(SpanAttributes.HTTP_METHOD, None)
            )
            server_address = attributes.get(
                SpanAttributes.SERVER_ADDRESS, attributes.get(SpanAttributes.HTTP_HOST, None)
            )

        # Resource shouldn't be none as it should default to empty resource
        if resource is not None:
            service_name = resource.attributes.get(ResourceAttributes.SERVICE_NAME, "")

        # target may be in url
        if url_path is None and isinstance(url_full, str):
            # Per semantic conventions, url.full is always scheme://host[:port][path][?query][#fragment].
            # If the scheme is missing, assume it's bad instrumentation and ignore it.
            if url_full.find("://") > -1:
                url_path = urlparse(url_full).path
                if url_path == "":
                    url_path = "/"
        elif url_path is None and url_full is None:
            # When missing, the URL Path is assumed to be /
            url_path = "/"

        return (
            _Matcher.attribute_match(attributes, self.sampling_rule.Attributes)
            and _Matcher.wild_card_match(url_path, self.sampling_rule.URLPath)
            and _Matcher.wild_card_match(http_request_method, self.sampling_rule.HTTPMethod)
            and _Matcher.wild_card_match(server_address, self.sampling_rule.Host)
            and _Matcher.wild_card_match(service_name, self.sampling_rule.ServiceName)
            and _Matcher.wild_card_match(self.__get_service_type(resource), self.sampling_rule.ServiceType)
            and _Matcher.wild_card_match(self.__get_arn(resource, attributes), self.sampling_rule.ResourceARN)
        )

    # pylint: disable=no-self-use
    def __get_service_type(self, resource: Resource) -> str:
        if resource is None:
            return ""

        cloud_platform = resource.attributes.get(ResourceAttributes.CLOUD_PLATFORM, None)
        if cloud_platform is None:
            return ""

        return cloud_platform_mapping.get(cloud_platform, "")

    def __get_arn(self, resource: Resource, attributes: Attributes) -> str:
        if resource is not None:
            arn = resource.attributes.get(ResourceAttributes.AWS_ECS_CONTAINER_ARN, None)
            if arn is not None:
                return arn
        if attributes is not None and self.__get_service_type(resource=resource) == cloud_platform_mapping.get(
            CloudPlatformValues.AWS_LAMBDA.value
        ):
            arn = attributes.get(SpanAttributes.CLOUD_RESOURCE_ID, None)
            if arn is not None:
                return arn
        return ""
