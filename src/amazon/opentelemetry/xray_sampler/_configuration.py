# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from logging import getLogger
from typing import Dict, Optional

from amazon.opentelemetry.xray_sampler.aws_xray_remote_sampler import AwsXRayRemoteSampler
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace.sampling import Sampler

_logger = getLogger(__name__)


def parse_sampler_argument(sampler_argument: Optional[str]) -> Dict[str, object]:
    """Parses OTEL_TRACES_SAMPLER_ARG, e.g. `endpoint=http://localhost:2000,polling_interval=360`."""
    parsed = {}
    if not sampler_argument:
        return parsed

    for arg in sampler_argument.split(","):
        key_value = arg.split("=", 1)
        if len(key_value) != 2:
            continue
        key, value = key_value[0].strip(), key_value[1].strip()
        if key == "endpoint":
            parsed["endpoint"] = value
        elif key == "polling_interval":
            try:
                parsed["polling_interval"] = int(value)
            except ValueError as error:
                _logger.error("polling_interval in OTEL_TRACES_SAMPLER_ARG must be a number: %s", error)
        else:
            _logger.debug("Ignoring unknown key in OTEL_TRACES_SAMPLER_ARG: %s", key)
    return parsed


def aws_xray_sampler_factory(sampler_argument: Optional[str]) -> Sampler:
    """Entry point for `OTEL_TRACES_SAMPLER=xray` in the `opentelemetry_traces_sampler` group."""
    arguments = parse_sampler_argument(sampler_argument)
    _logger.debug("XRay Sampler Endpoint: %s", arguments.get("endpoint"))
    _logger.debug("XRay Sampler Polling Interval: %s", arguments.get("polling_interval"))
    return AwsXRayRemoteSampler(
        resource=Resource.create(),
        endpoint=arguments.get("endpoint"),
        polling_interval=arguments.get("polling_interval"),
    )
