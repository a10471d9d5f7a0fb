"""Tests for pitchslides.core.prompts — prompt template compilation."""

from __future__ import annotations

from pitchslides.core.prompts import (
    CONCEPT_MARKER,
    build_description_prompt,
    build_refined_description_prompt,
    build_render_prompt,
    build_sketch_prompt,
    build_suggestions_prompt,
)
from pitchslides.core.styles import STYLE_OPTIONS

IDEA = "Drone grocery delivery for rural towns"


class TestSketchPrompt:
    def test_embeds_idea_and_concept(self):
        prompt = build_sketch_prompt(IDEA, STYLE_OPTIONS[1])
        assert prompt.startswith(
            f"Simple rough sketch of a business pitch slide for: {IDEA}. "
            "Style: with data visualization focus."
        )
        assert "preliminary concept sketch" in prompt

    def test_differs_per_style(self):
        prompts = {build_sketch_prompt(IDEA, style) for style in STYLE_OPTIONS}
        assert len(prompts) == 3


class TestDescriptionPrompt:
    def test_requests_concept_block(self):
        prompt = build_description_prompt(IDEA, STYLE_OPTIONS[0])
        assert f'"{IDEA}"' in prompt
        assert CONCEPT_MARKER in prompt
        assert "• Style: minimalist with bold typography" in prompt
        assert "• Key Points:" in prompt
        assert "Refinement" not in prompt

    def test_refined_prompt_embeds_instruction(self):
        instruction = "Add customer testimonials and social proof from early adopters"
        prompt = build_refined_description_prompt(IDEA, STYLE_OPTIONS[2], instruction)
        assert f"REFINEMENT: {instruction}" in prompt
        assert f"• Refinement: {instruction[:30]}..." in prompt
        assert f"• Refinement: {instruction}..." not in prompt

    def test_refinement_line_precedes_key_points(self):
        prompt = build_refined_description_prompt(IDEA, STYLE_OPTIONS[0], "Bolder colors")
        assert prompt.index("• Refinement:") < prompt.index("• Key Points:")


class TestRenderPrompt:
    def test_final_render(self):
        prompt = build_render_prompt("A clean slide")
        assert prompt.startswith("Ultra high-end professional business pitch slide: A clean slide.")
        assert "investor-ready quality" in prompt
        assert "REFINED" not in prompt

    def test_refined_render(self):
        prompt = build_render_prompt("A clean slide", refined=True)
        assert prompt.startswith(
            "Ultra high-end professional business pitch slide (REFINED VERSION): A clean slide."
        )
        assert prompt.endswith(
            "This is an IMPROVED, more polished version with enhanced visual appeal."
        )


class TestSuggestionsPrompt:
    def test_asks_for_json_array(self):
        prompt = build_suggestions_prompt(IDEA)
        assert f'"{IDEA}"' in prompt
        assert "JSON array" in prompt
        assert "Provide only the JSON array, no other text." in prompt
