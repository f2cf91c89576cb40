import json
import unittest

from cause_list_extractor.profiles import NCLT, SUPREME_COURT
from cause_list_extractor.prompts import (
    SIMPLIFIED_SYSTEM_PROMPT,
    SYSTEM_PROMPT,
    build_primary_prompt,
    build_request,
    build_simplified_prompt,
)


DOCUMENT = "Ahmedabad Bench Court-I\n1. CP(IB) No. 123/2025\n"


class TestPrimaryPrompt(unittest.TestCase):

    def test_document_text_comes_last_and_whole(self):
        prompt = build_primary_prompt(DOCUMENT, NCLT)
        self.assertTrue(prompt.endswith("PDF TEXT TO PARSE:\n" + DOCUMENT))

    def test_uses_profile_vocabulary(self):
        nclt = build_primary_prompt(DOCUMENT, NCLT)
        self.assertIn('"benches"', nclt)
        self.assertIn('"benchNumber"', nclt)
        self.assertIn('"Ahmedabad Bench Court-II" → benchNumber: "2"', nclt)
        self.assertNotIn('"courts"', nclt)

        sc = build_primary_prompt(DOCUMENT, SUPREME_COURT)
        self.assertIn('"courts"', sc)
        self.assertIn('"courtName"', sc)
        self.assertIn("connected cases", sc)
        self.assertIn("CHIEF JUSTICE'S COURT", sc)

    def test_only_two_entry_fields_are_requested(self):
        prompt = build_primary_prompt(DOCUMENT, NCLT)
        self.assertIn("ONLY extract serialNumber and caseNumber", prompt)


class TestSimplifiedPrompt(unittest.TestCase):

    def test_text_is_cut_to_prefix(self):
        prompt = build_simplified_prompt("x" * 100, NCLT, max_chars=10)
        self.assertTrue(prompt.endswith("\n\nText: " + "x" * 10))

    def test_example_is_valid_json_with_sample_values(self):
        prompt = build_simplified_prompt(DOCUMENT, SUPREME_COURT, max_chars=1000)
        example = prompt[prompt.index("{"):prompt.index("\n\nCRITICAL")]
        data = json.loads(example)

        self.assertEqual(data["court"], "SUPREME COURT OF INDIA")
        self.assertEqual([c["courtNumber"] for c in data["courts"]], ["1", "2"])
        self.assertEqual(data["courts"][1]["cases"][0]["caseNumber"], "SLP(C) No. 24823/2025")


class TestBuildRequest(unittest.TestCase):

    def test_primary_request(self):
        request = build_request(DOCUMENT, "primary", NCLT, primary_temperature=0.3)
        self.assertEqual(request.variant, "primary")
        self.assertEqual(request.system_prompt, SYSTEM_PROMPT)
        self.assertEqual(request.temperature, 0.3)

    def test_simplified_request(self):
        request = build_request("y" * 80, "simplified", NCLT, simplified_max_chars=20)
        self.assertEqual(request.variant, "simplified")
        self.assertEqual(request.system_prompt, SIMPLIFIED_SYSTEM_PROMPT)
        self.assertEqual(request.temperature, 0.0)
        self.assertTrue(request.user_prompt.endswith("y" * 20))
        self.assertNotIn("y" * 21, request.user_prompt)

    def test_unknown_variant(self):
        with self.assertRaises(ValueError):
            build_request(DOCUMENT, "verbose", NCLT)


if __name__ == "__main__":
    unittest.main()
