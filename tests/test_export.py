from __future__ import annotations

import unittest
from datetime import date

from pipeline.export import (
    export_brief_text,
    export_copy_text,
    export_text,
    format_image_prompt,
    format_video_prompt,
)
from pipeline.fallback import generate_fallback
from pipeline.samples import get_sample

TODAY = date(2025, 3, 14)


class ExportTextTests(unittest.TestCase):
    def setUp(self):
        self.answers = get_sample("snack")
        self.data = generate_fallback(self.answers)

    def test_copy_export_numbers_headlines_and_ctas(self):
        text = export_copy_text(self.data, today=TODAY)
        lines = text.splitlines()

        self.assertEqual(lines[0], "AD PROMPT STUDIO - GENERATED COPY")
        self.assertEqual(lines[1], "Generated: 2025-03-14")
        self.assertIn("HEADLINES (5 Variations)", text)
        for i, headline in enumerate(self.data["copy"]["headlines"], start=1):
            self.assertIn(f"{i}. {headline}", lines)
        for i, cta in enumerate(self.data["copy"]["ctas"], start=1):
            self.assertIn(f"{i}. {cta}", lines)
        self.assertIn(self.data["copy"]["bodyCopy"]["closing"], lines)

    def test_brief_export_includes_strategy_video_and_images(self):
        text = export_brief_text(self.data, self.answers, today=TODAY)

        self.assertTrue(text.startswith("AD PROMPT STUDIO - CREATIVE BRIEF"))
        self.assertIn("Approach: emotional", text)
        self.assertIn("Ratio: 30% Rational, 70% Emotional", text)
        self.assertIn("Emotional Triggers:\nBelonging", text)
        self.assertIn(f"Context: {self.data['veo3']['context']}", text)
        self.assertIn("Hero Shot:", text)
        self.assertIn(self.data["nanoBanana"]["social"]["prompt"], text)

    def test_exports_tolerate_missing_sections(self):
        text = export_copy_text({}, today=TODAY)
        self.assertIn("HEADLINES (0 Variations)", text)
        self.assertIn("(none)", text)

        brief = export_brief_text({"veo3": "not a dict"}, None, today=TODAY)
        self.assertIn("VEO 3 VIDEO PROMPT", brief)

    def test_format_helpers(self):
        self.assertEqual(
            format_video_prompt({"style": "Cinematic", "context": "Kitchen", "extra": "ignored"}),
            "Context: Kitchen\nStyle: Cinematic",
        )
        self.assertEqual(format_image_prompt({"prompt": "A mug", "style": "Macro"}), "A mug\nStyle: Macro")
        self.assertEqual(format_image_prompt({"prompt": "A mug"}), "A mug")
        self.assertEqual(format_image_prompt("plain prompt"), "plain prompt")
        self.assertEqual(format_image_prompt(None), "")

    def test_unknown_kind_raises(self):
        with self.assertRaises(ValueError):
            export_text("pdf", self.data)
        self.assertEqual(export_text("copy", self.data), export_copy_text(self.data))


if __name__ == "__main__":
    unittest.main()
