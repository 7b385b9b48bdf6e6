# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from logging import getLogger
from threading import Lock
from typing import Dict, List, Optional, Tuple

from amazon.opentelemetry.xray_sampler._clock import _Clock
from amazon.opentelemetry.xray_sampler._sampling_rule import _SamplingRule
from amazon.opentelemetry.xray_sampler._sampling_rule_applier import _SamplingRuleApplier
from amazon.opentelemetry.xray_sampler._sampling_statistics_document import _SamplingStatisticsDocument
from amazon.opentelemetry.xray_sampler._sampling_target import _SamplingTarget
from opentelemetry.sdk.resources import Resource
from opentelemetry.util.types import Attributes

_logger = getLogger(__name__)

CACHE_TTL_SECONDS = 3600
DEFAULT_TARGET_POLLING_INTERVAL_SECONDS = 10
DEFAULT_RULE_NAME = "Default"


class _RuleCache:
    """Sorted rule appliers shared between the sampling path and the pollers.

    The appliers are held in a tuple that is never mutated: writers build a new
    tuple under `__cache_lock` and swap the reference, readers just grab the
    current reference and scan it without locking.
    """

    def __init__(self, resource: Optional[Resource], clock: _Clock):
        self.__rule_appliers: Tuple[_SamplingRuleApplier, ...] = ()
        self.__cache_lock = Lock()
        self.__resource = resource
        self._clock = clock
        self._last_updated_millis = self._clock.now_millis()

    @property
    def rule_appliers(self) -> Tuple[_SamplingRuleApplier, ...]:
        return self.__rule_appliers

    @property
    def last_updated_millis(self) -> int:
        return self._last_updated_millis

    def get_matched_rule(self, attributes: Attributes) -> Optional[_SamplingRuleApplier]:
        for rule_applier in self.__rule_appliers:
            if (
                rule_applier.matches(self.__resource, attributes)
                or rule_applier.sampling_rule.RuleName == DEFAULT_RULE_NAME
            ):
                return rule_applier
        return None

    def update_sampling_rules(self, new_sampling_rules: List[_SamplingRule]) -> None:
        temp_rule_appliers: List[_SamplingRuleApplier] = []
        seen_rule_names = set()
        for sampling_rule in sorted(new_sampling_rules):
            if sampling_rule.RuleName == "":
                _logger.debug("sampling rule without rule name is not supported")
                continue
            if sampling_rule.Version != 1:
                _logger.debug("sampling rule without Version 1 is not supported: RuleName: %s", sampling_rule.RuleName)
                continue
            if sampling_rule.RuleName in seen_rule_names:
                _logger.debug("duplicate sampling rule is ignored: RuleName: %s", sampling_rule.RuleName)
                continue
            seen_rule_names.add(sampling_rule.RuleName)
            temp_rule_appliers.append(_SamplingRuleApplier(sampling_rule, self._clock))

        with self.__cache_lock:
            # map list of rule appliers by each applier's sampling_rule name
            rule_applier_map = {rule.sampling_rule.RuleName: rule for rule in self.__rule_appliers}

            # If a sampling rule has not changed, keep its respective applier in the cache.
            for index, new_applier in enumerate(temp_rule_appliers):
                old_applier = rule_applier_map.get(new_applier.sampling_rule.RuleName)
                if old_applier is not None and new_applier.sampling_rule == old_applier.sampling_rule:
                    temp_rule_appliers[index] = old_applier

            self.__rule_appliers = tuple(temp_rule_appliers)
            self._last_updated_millis = self._clock.now_millis()

    def create_sampling_statistics_documents(self, client_id: str) -> List[dict]:
        statistics_documents = []
        for rule_applier in self.__rule_appliers:
            statistics = rule_applier.snapshot_statistics()
            document = _SamplingStatisticsDocument(
                client_id,
                rule_applier.sampling_rule.RuleName,
                RequestCount=statistics.RequestCount,
                BorrowCount=statistics.BorrowCount,
                SampleCount=statistics.SampleCount,
            )
            statistics_documents.append(document.snapshot(self._clock))
        return statistics_documents

    def update_sampling_targets(
        self, targets: Dict[str, _SamplingTarget], last_rule_modification: float
    ) -> Tuple[bool, int]:
        min_polling_interval = None
        with self.__cache_lock:
            new_rule_appliers = []
            for rule_applier in self.__rule_appliers:
                target = targets.get(rule_applier.sampling_rule.RuleName)
                if target is None:
                    new_rule_appliers.append(rule_applier)
                    continue
                try:
                    new_rule_appliers.append(rule_applier.with_target(target))
                except (OverflowError, OSError, ValueError) as err:
                    # e.g. a ReservoirQuotaTTL out of the platform's datetime range
                    _logger.debug("Ignoring sampling target of rule %s: %s", target.RuleName, err)
                    new_rule_appliers.append(rule_applier)
                    continue
                if target.Interval is not None and target.Interval > 0:
                    if min_polling_interval is None or target.Interval < min_polling_interval:
                        min_polling_interval = target.Interval
            self.__rule_appliers = tuple(new_rule_appliers)

            refresh_rules = last_rule_modification * 1000 > self._last_updated_millis

        next_polling_interval = (
            min_polling_interval if min_polling_interval is not None else DEFAULT_TARGET_POLLING_INTERVAL_SECONDS
        )
        return refresh_rules, next_polling_interval

    def expired(self) -> bool:
        return self._clock.now_millis() > self._last_updated_millis + CACHE_TTL_SECONDS * 1000
