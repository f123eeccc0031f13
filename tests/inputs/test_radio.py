"""Tests for the radio and radio-group controllers."""

from __future__ import annotations

from formkit.infrastructure.dom import Element
from formkit.inputs.radio import RadioInput
from formkit.inputs.radio_group import RadioGroupInput
from tests.conftest import build_form


def _radio(value: str, name: str = "plan", **attrs) -> Element:
    return Element("input", {"type": "radio", "name": name, "value": value, **attrs})


def _group(*radios: Element, **attrs) -> Element:
    group = Element("div", {"data-form-input": "radio-group", "data-name": "plan", **attrs}, *radios)
    build_form(group)
    return group


class TestRadioInput:
    def test_click_emits_check(self) -> None:
        element = _radio("basic")
        build_form(element)
        radio = RadioInput(element)
        seen: list[bool] = []
        radio.on("check", seen.append)

        element.click()
        assert seen == [True]
        assert radio.get_checked() is True

    def test_set_checked_emits_only_on_flip(self) -> None:
        element = _radio("basic")
        build_form(element)
        radio = RadioInput(element)
        seen: list[bool] = []
        radio.on("check", seen.append)

        radio.set_checked(True)
        radio.set_checked(True)
        radio.set_checked(False)
        assert seen == [True, False]

    def test_pre_checked_radio_reports_state_without_event(self) -> None:
        element = _radio("basic", checked=True)
        build_form(element)
        radio = RadioInput(element)
        seen: list[bool] = []
        radio.on("check", seen.append)

        assert radio.get_checked() is True
        assert seen == []
        radio.set_checked(False)
        assert seen == [False]

    def test_set_value_changes_option_value(self) -> None:
        element = _radio("basic")
        radio = RadioInput(element)
        seen: list[object] = []
        radio.on("change", seen.append)

        assert radio.set_value("pro") == "pro"
        assert radio.get_value() == "pro"
        assert radio.get_checked() is False
        assert seen == []


class TestRadioGroupInput:
    def test_collects_radios_by_data_name(self) -> None:
        group = _group(_radio("basic"), _radio("pro"), _radio("x", name="other"))
        controller = RadioGroupInput(group)
        assert [r.get_value() for r in controller.radios] == ["basic", "pro"]

    def test_value_none_until_checked(self) -> None:
        controller = RadioGroupInput(_group(_radio("basic"), _radio("pro")))
        assert controller.get_value() is None
        assert controller.get_checked() is None

    def test_initially_checked_radio(self) -> None:
        controller = RadioGroupInput(_group(_radio("basic"), _radio("pro", checked=True)))
        assert controller.get_value() == "pro"

    def test_pre_checked_group_is_quiet_until_a_change(self) -> None:
        basic = _radio("basic")
        controller = RadioGroupInput(_group(basic, _radio("pro", checked=True)))
        checks: list[str] = []
        controller.on("check", checks.append)

        assert controller.get_value() == "pro"
        assert checks == []
        basic.click()
        assert checks == ["basic"]

    def test_click_emits_check_and_change(self) -> None:
        pro = _radio("pro")
        controller = RadioGroupInput(_group(_radio("basic"), pro))
        checks: list[str] = []
        changes: list[str] = []
        controller.on("check", checks.append)
        controller.on("change", changes.append)

        pro.click()
        assert checks == ["pro"]
        assert changes == ["pro"]
        assert controller.get_value() == "pro"

    def test_set_value_checks_matching_radio(self) -> None:
        basic = _radio("basic")
        pro = _radio("pro", checked=True)
        controller = RadioGroupInput(_group(basic, pro))
        checks: list[str] = []
        changes: list[str] = []
        controller.on("check", checks.append)
        controller.on("change", changes.append)

        assert controller.set_value("basic") is True
        assert basic.checked is True
        assert pro.checked is False
        assert checks == ["basic"]
        assert changes == ["basic"]

    def test_set_value_compares_as_string(self) -> None:
        controller = RadioGroupInput(_group(_radio("1"), _radio("2")))
        assert controller.set_value(2) is True
        assert controller.get_value() == "2"

    def test_set_value_without_match(self) -> None:
        controller = RadioGroupInput(_group(_radio("basic", checked=True)))
        assert controller.set_value("enterprise") is False
        assert controller.get_value() == "basic"

    def test_name_from_data_attribute_or_options(self) -> None:
        assert RadioGroupInput(_group(_radio("a"))).get_name() == "plan"
        assert RadioGroupInput(_group(_radio("a")), {"name": "tariff"}).get_name() == "tariff"

    def test_required_group_needs_a_value(self) -> None:
        controller = RadioGroupInput(_group(_radio("basic"), required=True))
        assert controller.validate() is False
        controller.set_value("basic")
        assert controller.validate() is True

    def test_optional_group_is_valid(self) -> None:
        assert RadioGroupInput(_group(_radio("basic"))).validate() is True

    def test_set_disabled_propagates(self) -> None:
        basic = _radio("basic")
        pro = _radio("pro")
        controller = RadioGroupInput(_group(basic, pro))
        seen: list[bool] = []
        controller.on_state("disabled", seen.append)

        controller.set_disabled(True)
        assert controller.get_disabled() is True
        assert basic.disabled and pro.disabled
        assert seen == [True]
