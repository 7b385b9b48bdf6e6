# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import threading
from logging import getLogger
from unittest import TestCase

from amazon.opentelemetry.xray_sampler._poller import _Poller

POLLER_LOGGER_NAME = "amazon.opentelemetry.xray_sampler._poller"
_logger = getLogger(POLLER_LOGGER_NAME)


class TestPoller(TestCase):
    def test_poll_now_updates_interval_and_reschedules(self):
        poller = _Poller("test", lambda: 42, 10)
        self.addCleanup(poller.shutdown)
        self.assertIsNone(poller.timer)

        self.assertTrue(poller.poll_now())
        self.assertEqual(poller.interval, 42)
        self.assertIsNotNone(poller.timer)
        self.assertEqual(poller.timer.interval, 42)
        self.assertTrue(poller.timer.daemon)

    def test_start_uses_initial_delay(self):
        poller = _Poller("test", lambda: 42, 10)
        self.addCleanup(poller.shutdown)

        poller.start()
        self.assertEqual(poller.timer.interval, 10)

        poller.start(initial_delay=3)
        self.assertEqual(poller.timer.interval, 3)

    def test_jitter_is_added_to_delay(self):
        poller = _Poller("test", lambda: 42, 10, max_jitter=0.5)
        self.addCleanup(poller.shutdown)

        poller.start()
        self.assertTrue(10 <= poller.timer.interval <= 10.5)

    def test_failed_poll_keeps_interval(self):
        def poll():
            raise ValueError("boom")

        poller = _Poller("test", poll, 10)
        self.addCleanup(poller.shutdown)

        with self.assertLogs(_logger, level="ERROR"):
            self.assertTrue(poller.poll_now())
        self.assertEqual(poller.interval, 10)
        self.assertEqual(poller.timer.interval, 10)

    def test_poll_now_skips_when_in_flight(self):
        nested_results = []

        def poll():
            nested_results.append(poller.poll_now())
            return 20

        poller = _Poller("test", poll, 10)
        self.addCleanup(poller.shutdown)

        self.assertTrue(poller.poll_now())
        self.assertEqual(nested_results, [False])
        self.assertEqual(poller.interval, 20)

    def test_timer_runs_poll(self):
        polled = threading.Event()

        def poll():
            polled.set()
            return 60

        poller = _Poller("test", poll, 60)
        self.addCleanup(poller.shutdown)

        poller.start(initial_delay=0.01)
        self.assertTrue(polled.wait(timeout=5))

    def test_shutdown_stops_scheduling(self):
        poller = _Poller("test", lambda: 42, 10)
        poller.start()
        timer = poller.timer

        poller.shutdown()
        self.assertTrue(timer.finished.is_set())

        # a poll after shutdown still runs but is not rescheduled
        self.assertTrue(poller.poll_now())
        self.assertIs(poller.timer, timer)
        poller.start()
        self.assertIs(poller.timer, timer)
