# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from typing import Optional, Sequence

from amazon.opentelemetry.xray_sampler._clock import _Clock
from amazon.opentelemetry.xray_sampler._rate_limiter import _RateLimiter
from opentelemetry.context import Context
from opentelemetry.sdk.trace.sampling import Decision, Sampler, SamplingResult
from opentelemetry.trace import Link, SpanKind
from opentelemetry.trace.span import TraceState
from opentelemetry.util.types import Attributes


class _RateLimitingSampler(Sampler):
    """Records at most `quota` spans per wall-clock second, ignoring the trace id."""

    def __init__(self, quota: int, clock: _Clock):
        self.__rate_limiter = _RateLimiter(quota, clock)

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
        decision = Decision.RECORD_AND_SAMPLE if self.__rate_limiter.try_spend() else Decision.DROP
        return SamplingResult(decision=decision, attributes=attributes, trace_state=trace_state)

    def get_description(self) -> str:
        return (
            f"RateLimitingSampler{{rate limiting sampling with sampling config of {self.__rate_limiter.quota} "
            "req/sec and 0% of additional requests}"
        )
