# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from amazon.opentelemetry.xray_sampler.aws_xray_remote_sampler import AwsXRayRemoteSampler
from amazon.opentelemetry.xray_sampler.version import __version__

__all__ = ["AwsXRayRemoteSampler", "__version__"]
