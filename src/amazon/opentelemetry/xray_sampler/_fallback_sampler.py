# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from typing import Optional, Sequence

from amazon.opentelemetry.xray_sampler._clock import _Clock
from amazon.opentelemetry.xray_sampler._rate_limiting_sampler import _RateLimitingSampler
from opentelemetry.context import Context
from opentelemetry.sdk.trace.sampling import Decision, Sampler, SamplingResult, TraceIdRatioBased
from opentelemetry.trace import Link, SpanKind
from opentelemetry.trace.span import TraceState
from opentelemetry.util.types import Attributes

FALLBACK_QUOTA = 1
FALLBACK_FIXED_RATE = 0.05


class _FallbackSampler(Sampler):
    """Used while the rule cache is stale or when no rule matches.

    Samples `FALLBACK_QUOTA` requests per second, then an independent
    `FALLBACK_FIXED_RATE` of the requests the rate limit turned down.
    """

    def __init__(self, clock: _Clock, quota: int = FALLBACK_QUOTA, fixed_rate: float = FALLBACK_FIXED_RATE):
        self.__quota = quota
        self.__fixed_rate = fixed_rate
        self.__rate_limiting_sampler = _RateLimitingSampler(quota, clock)
        self.__fixed_rate_sampler = TraceIdRatioBased(fixed_rate)

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
        rate_limited_result = self.__rate_limiting_sampler.should_sample(
            parent_context, trace_id, name, kind=kind, attributes=attributes, links=links, trace_state=trace_state
        )
        if rate_limited_result.decision is Decision.DROP:
            return self.__fixed_rate_sampler.should_sample(
                parent_context, trace_id, name, kind=kind, attributes=attributes, links=links, trace_state=trace_state
            )
        return rate_limited_result

    def get_description(self) -> str:
        return (
            f"FallbackSampler{{fallback sampling with sampling config of {self.__quota} req/sec "
            f"and {self.__fixed_rate:.0%} of additional requests}}"
        )
