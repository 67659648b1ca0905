"""Tests for route selection and the end-to-end extract-and-route entry point."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from pydantic import ValidationError

from fnol_agent.core.routing import choose_route, compose_reasoning, extract_and_route
from fnol_agent.schemas.claim import ExtractedFields
from fnol_agent.schemas.routing import Route, RoutingConfig

FnolFactory = Callable[..., str]


# ═══════════════════════════════════════════════════════════════════════
# Scenarios
# ═══════════════════════════════════════════════════════════════════════


class TestScenarios:
    def test_small_damage_fast_tracked(self, complete_fnol: str) -> None:
        result = extract_and_route(complete_fnol)
        assert result.missing_fields == []
        assert result.inconsistent_fields == []
        assert result.extracted_fields.estimated_damage == 5000
        assert result.recommended_route is Route.FAST_TRACK
        assert result.reasoning == "Estimated damage (5000) < 25000"

    @pytest.mark.parametrize("estimate", ["30000", "25000", "25,000.00"])
    def test_threshold_and_above_is_standard(
        self, fnol_factory: FnolFactory, estimate: str
    ) -> None:
        result = extract_and_route(fnol_factory(Initial_Estimate=estimate))
        assert result.recommended_route is Route.STANDARD
        assert ">= 25000" in result.reasoning

    def test_suspicious_description_investigated(self, fnol_factory: FnolFactory) -> None:
        text = fnol_factory(Description="Suspicious collision damage reported late at night.")
        result = extract_and_route(text)
        assert result.recommended_route is Route.INVESTIGATION
        assert "suspicious" in result.reasoning

    def test_date_outside_coverage_reported_but_not_rerouted(
        self, fnol_factory: FnolFactory
    ) -> None:
        text = fnol_factory(Date="2025-01-01", Effective_Dates="2024-01-01 to 2024-12-31")
        result = extract_and_route(text)
        assert result.inconsistent_fields == ["Date is outside Effective Dates"]
        assert result.recommended_route is Route.FAST_TRACK
        assert result.reasoning == (
            "Estimated damage (5000) < 25000 ; Inconsistencies: Date is outside Effective Dates"
        )

    def test_injury_goes_to_specialist(self, fnol_factory: FnolFactory) -> None:
        result = extract_and_route(fnol_factory(Claim_Type="Injury"))
        assert result.recommended_route is Route.SPECIALIST_QUEUE

    def test_investigation_beats_injury(self, fnol_factory: FnolFactory) -> None:
        text = fnol_factory(
            Claim_Type="injury",
            Description="Staged accident suspected by the surveyor on site.",
        )
        assert extract_and_route(text).recommended_route is Route.INVESTIGATION

    def test_unknown_damage_is_standard(self, fnol_factory: FnolFactory) -> None:
        result = extract_and_route(fnol_factory(Initial_Estimate="awaiting surveyor"))
        assert result.recommended_route is Route.STANDARD
        assert result.extracted_fields.initial_estimate == "awaiting surveyor"
        assert result.reasoning == "Estimated damage unknown -> Standard processing"

    def test_negative_estimate_flagged(self, fnol_factory: FnolFactory) -> None:
        result = extract_and_route(fnol_factory(Initial_Estimate="-500"))
        assert result.inconsistent_fields == ["Estimated Damage negative"]


class TestManualReview:
    @pytest.mark.parametrize(
        "removed",
        ["Policy_Number", "Location", "Description", "Attachments", "Initial_Estimate"],
    )
    def test_any_missing_field_forces_manual_review(
        self, fnol_factory: FnolFactory, removed: str
    ) -> None:
        result = extract_and_route(fnol_factory(**{removed: ""}))
        assert result.missing_fields == [removed.replace("_", " ")]
        assert result.recommended_route is Route.MANUAL_REVIEW
        assert result.reasoning.startswith("One or more mandatory fields missing")
        assert result.reasoning.endswith("Missing fields: " + removed.replace("_", " "))

    def test_missing_overrides_investigation(self, fnol_factory: FnolFactory) -> None:
        text = fnol_factory(Description="Fraudulent claim suspected.", Location="")
        assert extract_and_route(text).recommended_route is Route.MANUAL_REVIEW

    def test_blank_description_label_counts_as_missing(self, fnol_factory: FnolFactory) -> None:
        result = extract_and_route(fnol_factory(Description=" "))
        assert result.extracted_fields.description is None
        assert result.missing_fields == ["Description"]
        assert result.recommended_route is Route.MANUAL_REVIEW

    @pytest.mark.parametrize("policy", ["POL-ABC", "ABCDEF"])
    def test_letter_only_policy_number_is_present(
        self, fnol_factory: FnolFactory, policy: str
    ) -> None:
        result = extract_and_route(fnol_factory(Policy_Number=policy))
        assert result.extracted_fields.policy_number == policy
        assert result.missing_fields == []
        assert result.recommended_route is Route.FAST_TRACK

    def test_claimant_fallback_keeps_claim_complete(self, fnol_factory: FnolFactory) -> None:
        result = extract_and_route(fnol_factory(Claimant=""))
        assert result.extracted_fields.claimant == "Jane Doe"
        assert result.missing_fields == []

    def test_empty_document(self) -> None:
        result = extract_and_route("")
        assert result.recommended_route is Route.MANUAL_REVIEW
        assert len(result.missing_fields) == 10


# ═══════════════════════════════════════════════════════════════════════
# Engine internals
# ═══════════════════════════════════════════════════════════════════════


class TestChooseRoute:
    def test_custom_threshold(self) -> None:
        config = RoutingConfig(fast_track_threshold=1000)
        route, reason = choose_route(ExtractedFields(estimated_damage=5000), [], config)
        assert route is Route.STANDARD
        assert reason == "Estimated damage (5000) >= 1000"

    def test_custom_keywords(self) -> None:
        config = RoutingConfig(investigation_keywords=("tampered",))
        fields = ExtractedFields(description="Odometer looks TAMPERED", estimated_damage=10)
        route, reason = choose_route(fields, [], config)
        assert route is Route.INVESTIGATION
        assert reason == "Description contains 'tampered'"

    def test_fractional_amount_in_reason(self) -> None:
        _, reason = choose_route(ExtractedFields(estimated_damage=12500.5), [])
        assert reason == "Estimated damage (12500.5) < 25000"

    def test_config_is_immutable(self, routing_config: RoutingConfig) -> None:
        with pytest.raises(ValidationError):
            routing_config.fast_track_threshold = 1  # type: ignore[misc]


class TestComposeReasoning:
    def test_order_of_sections(self) -> None:
        text = compose_reasoning("Rule", ["A", "B"], ["Date", "Location"])
        assert text == "Rule ; Inconsistencies: A, B ; Missing fields: Date, Location"

    def test_reason_only(self) -> None:
        assert compose_reasoning("Rule", [], []) == "Rule"


# ═══════════════════════════════════════════════════════════════════════
# Properties
# ═══════════════════════════════════════════════════════════════════════


class TestProperties:
    @pytest.mark.parametrize(
        "text",
        ["", "\n\n\n", "Policy Number: X1", "random words only", "₹₹₹ ,,, ---"],
    )
    def test_result_always_fully_shaped(self, text: str) -> None:
        payload = extract_and_route(text).to_json_dict()
        assert set(payload) == {
            "extractedFields",
            "missingFields",
            "inconsistentFields",
            "recommendedRoute",
            "reasoning",
        }
        assert list(payload["extractedFields"]) == ExtractedFields.field_names()
        assert payload["recommendedRoute"] in {route.value for route in Route}

    def test_deterministic(self, complete_fnol: str) -> None:
        first = extract_and_route(complete_fnol).model_dump_json(by_alias=True)
        second = extract_and_route(complete_fnol).model_dump_json(by_alias=True)
        assert first == second

    def test_noise_stripping_is_opt_in(self, scanned_fnol: str) -> None:
        raw = extract_and_route(scanned_fnol)
        cleaned = extract_and_route(scanned_fnol, strip_noise=True)
        assert cleaned.extracted_fields.policy_number == "PN-2024-0042"
        assert cleaned.extracted_fields.policyholder_name == "Arjun Mehta"
        assert raw.extracted_fields.description != cleaned.extracted_fields.description
