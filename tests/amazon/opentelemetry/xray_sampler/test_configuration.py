# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from logging import getLogger
from unittest import TestCase
from unittest.mock import patch

from amazon.opentelemetry.xray_sampler._configuration import aws_xray_sampler_factory, parse_sampler_argument

CONFIGURATION_LOGGER_NAME = "amazon.opentelemetry.xray_sampler._configuration"
_logger = getLogger(CONFIGURATION_LOGGER_NAME)


class TestConfiguration(TestCase):
    def test_parse_empty_sampler_argument(self):
        self.assertEqual(parse_sampler_argument(None), {})
        self.assertEqual(parse_sampler_argument(""), {})

    def test_parse_sampler_argument(self):
        self.assertEqual(
            parse_sampler_argument("endpoint=http://localhost:2000,polling_interval=360"),
            {"endpoint": "http://localhost:2000", "polling_interval": 360},
        )
        self.assertEqual(
            parse_sampler_argument(" endpoint = http://localhost:2000 "), {"endpoint": "http://localhost:2000"}
        )

    def test_parse_sampler_argument_with_invalid_values(self):
        with self.assertLogs(_logger, level="ERROR"):
            parsed = parse_sampler_argument("endpoint=http://localhost:2000,polling_interval=abc")
        self.assertEqual(parsed, {"endpoint": "http://localhost:2000"})

        with self.assertLogs(_logger, level="DEBUG"):
            parsed = parse_sampler_argument("foo=bar,no_value,polling_interval=60")
        self.assertEqual(parsed, {"polling_interval": 60})

    @patch("amazon.opentelemetry.xray_sampler._configuration.AwsXRayRemoteSampler")
    def test_sampler_factory(self, mock_sampler=None):
        sampler = aws_xray_sampler_factory("endpoint=http://localhost:2000,polling_interval=360")

        self.assertIs(sampler, mock_sampler.return_value)
        kwargs = mock_sampler.call_args.kwargs
        self.assertEqual(kwargs["endpoint"], "http://localhost:2000")
        self.assertEqual(kwargs["polling_interval"], 360)
        self.assertIsNotNone(kwargs["resource"])

    @patch("amazon.opentelemetry.xray_sampler._configuration.AwsXRayRemoteSampler")
    def test_sampler_factory_without_argument(self, mock_sampler=None):
        aws_xray_sampler_factory(None)

        kwargs = mock_sampler.call_args.kwargs
        self.assertIsNone(kwargs["endpoint"])
        self.assertIsNone(kwargs["polling_interval"])
