import unittest
from unittest.mock import AsyncMock, patch

from helpers import StubClient, document_text, fake_extraction, make_config

from cause_list_extractor.extractor import aextract_cause_list, extract_cause_list


TEXT = "BENCH A\n1. CP/1/2025\nBENCH B\n1. CP/2/2025\n2. CP/3/2025\n"


def perfect(request):
    return fake_extraction(document_text(request))


class TestExtractCauseList(unittest.TestCase):

    def test_sync_entry_point(self):
        client = StubClient(perfect)
        result = extract_cause_list(TEXT, profile="nclt", client=client, config=make_config())

        self.assertEqual([len(g.entries) for g in result.groups], [1, 2])
        self.assertEqual(client.variants, ["primary"])

    def test_unknown_profile_name(self):
        with self.assertRaises(ValueError):
            extract_cause_list(TEXT, profile="district_court", client=StubClient(perfect), config=make_config())

    def test_empty_document(self):
        with self.assertRaises(ValueError):
            extract_cause_list("   ", client=StubClient(perfect), config=make_config())


class TestAsyncExtractCauseList(unittest.IsolatedAsyncioTestCase):

    async def test_builds_and_closes_default_clients(self):
        default = StubClient(perfect)
        default.aclose = AsyncMock()
        simplified = StubClient(perfect)
        simplified.aclose = AsyncMock()

        with patch("cause_list_extractor.extractor.build_default_client", return_value=default), \
                patch("cause_list_extractor.extractor.build_simplified_client", return_value=simplified):
            result = await aextract_cause_list(TEXT, config=make_config())

        self.assertEqual(len(result.groups), 2)
        default.aclose.assert_awaited_once()
        simplified.aclose.assert_awaited_once()

    async def test_default_client_is_closed_when_simplified_client_fails(self):
        default = StubClient(perfect)
        default.aclose = AsyncMock()

        with patch("cause_list_extractor.extractor.build_default_client", return_value=default), \
                patch("cause_list_extractor.extractor.build_simplified_client", side_effect=ValueError("no key")):
            with self.assertRaises(ValueError):
                await aextract_cause_list(TEXT, config=make_config())

        default.aclose.assert_awaited_once()
        self.assertEqual(default.requests, [])

    async def test_injected_client_is_not_closed(self):
        client = StubClient(perfect)
        client.aclose = AsyncMock()

        await aextract_cause_list(TEXT, client=client, config=make_config())

        client.aclose.assert_not_awaited()


if __name__ == "__main__":
    unittest.main()
