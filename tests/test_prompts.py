"""Tests for instruction building and theme resolution."""

from product_photo_editor.models import (
    GenerationRequest,
    ModelMode,
    ProductOnlyMode,
    ReferenceMode,
)
from product_photo_editor.prompts import (
    MODEL_PROMPT,
    PRODUCT_ONLY_PROMPT,
    REFERENCE_STYLE_PROMPT,
    build_instruction,
)


class TestEffectiveTheme:

    def test_named_theme_is_used(self, product):
        req = GenerationRequest(product_image=product, theme="Luxury", custom_theme="ignored")
        assert req.effective_theme() == "Luxury"

    def test_none_sentinel_falls_back_to_custom(self, product):
        req = GenerationRequest(product_image=product, theme="None", custom_theme="Neon night market")
        assert req.effective_theme() == "Neon night market"

    def test_none_sentinel_without_custom_is_empty(self, product):
        req = GenerationRequest(product_image=product, theme="None", custom_theme="   ")
        assert req.effective_theme() == ""


class TestModeSelection:

    def test_reference_wins_over_model(self, product, model_photo, reference_photo):
        req = GenerationRequest(product_image=product, model_image=model_photo, reference_image=reference_photo)
        assert req.mode() == ReferenceMode(reference=reference_photo)

    def test_model_mode(self, product, model_photo):
        req = GenerationRequest(product_image=product, model_image=model_photo)
        assert req.mode() == ModelMode(model=model_photo)

    def test_product_only_mode(self, product):
        assert isinstance(GenerationRequest(product_image=product).mode(), ProductOnlyMode)


class TestBuildInstruction:

    def test_theme_and_extra_clauses(self, product):
        req = GenerationRequest(product_image=product, theme="Studio", extra_instructions="Use natural daylight")
        instruction = build_instruction(req, req.mode())
        assert instruction.startswith(PRODUCT_ONLY_PROMPT)
        assert instruction.endswith(
            " The theme should be: Studio. Additional instructions: Use natural daylight."
        )

    def test_no_clauses_when_empty(self, product, model_photo):
        req = GenerationRequest(product_image=product, model_image=model_photo, theme="None")
        instruction = build_instruction(req, req.mode())
        assert instruction == MODEL_PROMPT
        assert "theme" not in instruction
        assert "Additional instructions" not in instruction

    def test_extra_without_theme(self, product, reference_photo):
        req = GenerationRequest(
            product_image=product,
            reference_image=reference_photo,
            theme="None",
            extra_instructions="Make it warmer",
        )
        instruction = build_instruction(req, req.mode())
        assert instruction == REFERENCE_STYLE_PROMPT + " Additional instructions: Make it warmer."

    def test_custom_theme_clause(self, product):
        req = GenerationRequest(product_image=product, theme="None", custom_theme="Autumn forest")
        assert "The theme should be: Autumn forest." in build_instruction(req, req.mode())

    def test_extra_instructions_are_trimmed(self, product):
        req = GenerationRequest(product_image=product, theme="None", extra_instructions="  Use daylight \n")
        assert build_instruction(req, req.mode()) == PRODUCT_ONLY_PROMPT + " Additional instructions: Use daylight."

    def test_whitespace_only_extra_adds_no_clause(self, product):
        req = GenerationRequest(product_image=product, theme="None", extra_instructions="   ")
        assert build_instruction(req, req.mode()) == PRODUCT_ONLY_PROMPT
