"""Tests for section key classification."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mlops_parser.core.classifier import classify_section, known_sections
from mlops_parser.core.models import DeclarationKind


class TestClassifySection:
    @pytest.mark.parametrize(
        "key,kind",
        [
            ("model", DeclarationKind.MODEL),
            ("models", DeclarationKind.MODEL),
            ("pipeline", DeclarationKind.PIPELINE),
            ("pipelines", DeclarationKind.PIPELINE),
            ("resource", DeclarationKind.RESOURCE),
            ("resources", DeclarationKind.RESOURCE),
        ],
    )
    def test_known_spellings(self, key, kind):
        assert classify_section(key) is kind

    def test_case_insensitive(self):
        assert classify_section("MODELS") is DeclarationKind.MODEL
        assert classify_section("Pipeline") is DeclarationKind.PIPELINE
        assert classify_section("rEsOuRcEs") is DeclarationKind.RESOURCE

    @pytest.mark.parametrize(
        "key", ["", "mode", "modelss", " model", "model ", "datasets", "model_list", "pipe"]
    )
    def test_no_partial_or_fuzzy_match(self, key):
        assert classify_section(key) is None

    def test_non_ascii_rejected(self):
        assert classify_section("mod\u00e9l") is None
        assert classify_section("MODEL\u0053") is DeclarationKind.MODEL

    def test_known_sections_lists_six_spellings(self):
        assert sorted(known_sections()) == sorted(
            ["model", "models", "pipeline", "pipelines", "resource", "resources"]
        )


class TestClassifyProperties:
    @given(
        key=st.sampled_from(["model", "models", "pipeline", "pipelines", "resource", "resources"]),
        flips=st.lists(st.booleans(), min_size=9, max_size=9),
    )
    def test_any_casing_classifies_the_same(self, key, flips):
        mixed = "".join(c.upper() if f else c for c, f in zip(key, flips))
        assert classify_section(mixed) is classify_section(key)

    @given(key=st.text(max_size=12))
    def test_result_is_none_unless_known(self, key):
        kind = classify_section(key)
        if kind is None:
            assert key.lower() not in known_sections() or not key.isascii()
        else:
            assert key.lower() in known_sections()
