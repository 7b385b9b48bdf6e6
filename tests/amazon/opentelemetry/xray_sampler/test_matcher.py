# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from unittest import TestCase

from amazon.opentelemetry.xray_sampler._matcher import _Matcher
from opentelemetry.util.types import Attributes


class TestMatcher(TestCase):
    def test_wild_card_match(self):
        test_cases = [
            [None, "*"],
            ["", "*"],
            [1234, "*"],
            ["", ""],
            ["HelloWorld", "*"],
            ["HelloWorld", "HelloWorld"],
            ["HelloWorld", "Hello*"],
            ["HelloWorld", "*World"],
            ["HelloWorld", "?ello*"],
            ["HelloWorld", "Hell?W*d"],
            ["Hello.World", "*.World"],
            ["Bye.World", "*.World"],
            ["GET", "get"],
            ["/api/Users", "/API/users"],
            ["Hello.World", "hello.world"],
        ]
        for test_case in test_cases:
            self.assertTrue(_Matcher.wild_card_match(text=test_case[0], pattern=test_case[1]), test_case)

    def test_wild_card_not_match(self):
        test_cases = [
            [None, "Hello*"],
            ["HelloWorld", None],
            ["x", ""],
            ["", "?"],
            [1234, "1234"],
            [True, "true"],
            ["HelloWorld", "Hello"],
            ["HelloXWorld", "Hello.World"],
            ["Hello", "Hell??"],
            ["a+b", "a+"],
        ]
        for test_case in test_cases:
            self.assertFalse(_Matcher.wild_card_match(text=test_case[0], pattern=test_case[1]), test_case)

    def test_wild_card_match_escapes_regex_metacharacters(self):
        self.assertTrue(_Matcher.wild_card_match("a+b(c)[d]{e}$^|\\", "a+b(c)[d]{e}$^|\\"))
        self.assertFalse(_Matcher.wild_card_match("aab(c)", "a+b(c)"))
        self.assertTrue(_Matcher.wild_card_match("/path/to/x.json", "/path/*/?.json"))
        self.assertFalse(_Matcher.wild_card_match("/path/to/xyjson", "/path/*/?.json"))

    def test_to_regex_pattern(self):
        self.assertEqual(_Matcher.to_regex_pattern("Hell?W*d"), "Hell.W.*d")
        self.assertEqual(_Matcher.to_regex_pattern("*.World"), ".*\\.World")
        self.assertEqual(_Matcher.to_regex_pattern("abc"), "abc")

    def test_attribute_matching(self):
        attributes: Attributes = {
            "dog": "bark",
            "cat": "meow",
            "cow": "mooo",
        }
        rule_attributes = {
            "dog": "bar?",
            "cow": "mooo",
        }

        self.assertTrue(_Matcher.attribute_match(attributes, rule_attributes))

    def test_attribute_matching_without_rule_attributes(self):
        attributes = {
            "dog": "bark",
            "cat": "meow",
            "cow": "mooo",
        }
        self.assertTrue(_Matcher.attribute_match(attributes, {}))
        self.assertTrue(_Matcher.attribute_match(attributes, None))
        self.assertTrue(_Matcher.attribute_match(None, {}))

    def test_attribute_matching_without_span_attributes(self):
        rule_attributes = {
            "dog": "bar?",
            "cow": "mooo",
        }

        self.assertFalse(_Matcher.attribute_match({}, rule_attributes))
        self.assertFalse(_Matcher.attribute_match(None, rule_attributes))

    def test_attribute_matching_with_fewer_span_attributes_than_rule_attributes(self):
        self.assertFalse(_Matcher.attribute_match({"dog": "bark"}, {"dog": "bark", "cow": "mooo"}))

    def test_attribute_matching_fails_on_partial_match(self):
        attributes = {"dog": "bark", "cat": "meow", "cow": "mooo"}
        self.assertFalse(_Matcher.attribute_match(attributes, {"dog": "bark", "cow": "oink"}))
        self.assertFalse(_Matcher.attribute_match(attributes, {"dog": "bark", "horse": "neigh"}))

    def test_attribute_matching_with_non_string_span_attribute(self):
        self.assertFalse(_Matcher.attribute_match({"abc": 1234}, {"abc": "1234"}))
        self.assertTrue(_Matcher.attribute_match({"abc": 1234}, {"abc": "*"}))
