# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import random
from logging import getLogger
from threading import Lock, Timer
from typing import Callable, Optional

_logger = getLogger(__name__)


class _Poller:
    """Runs `poll` on a daemon `threading.Timer`, rescheduling after every run.

    `poll` returns the number of seconds to wait before the next run. A run that
    raises is logged and rescheduled at the previous interval. A tick that fires
    while the previous run is still in flight is skipped, not queued.
    """

    def __init__(self, name: str, poll: Callable[[], float], interval: float, max_jitter: float = 0.0):
        self.__name = name
        self.__poll = poll
        self.__interval = interval
        self.__jitter = random.uniform(0.0, max_jitter)

        self.__in_flight = Lock()
        self.__timer_lock = Lock()
        self.__timer: Optional[Timer] = None
        self.__stopped = False

    @property
    def interval(self) -> float:
        return self.__interval

    @property
    def timer(self) -> Optional[Timer]:
        return self.__timer

    def start(self, initial_delay: Optional[float] = None) -> None:
        self.__schedule(self.__interval if initial_delay is None else initial_delay)

    def poll_now(self) -> bool:
        """Runs one poll on the calling thread and reschedules; returns False if skipped."""
        if not self.__in_flight.acquire(blocking=False):
            _logger.debug("%s poll is already in flight, skipping", self.__name)
            return False
        try:
            _logger.debug("%s poll: fetching", self.__name)
            self.__interval = self.__poll()
        # pylint: disable=broad-exception-caught
        except Exception as err:
            _logger.error("%s poll failed, retrying in %s seconds: %s", self.__name, self.__interval, err)
        finally:
            self.__in_flight.release()
        self.__schedule(self.__interval)
        return True

    def shutdown(self) -> None:
        with self.__timer_lock:
            self.__stopped = True
            if self.__timer is not None:
                self.__timer.cancel()

    def __schedule(self, delay: float) -> None:
        with self.__timer_lock:
            if self.__stopped:
                return
            if self.__timer is not None:
                self.__timer.cancel()
            self.__timer = Timer(delay + self.__jitter, self.poll_now)
            self.__timer.daemon = True
            self.__timer.start()
