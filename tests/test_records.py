import unittest

from cause_list_extractor.profiles import NCLT, SUPREME_COURT
from cause_list_extractor.records import flatten_result, normalize_case_number, to_payload
from cause_list_extractor.schemas import Entry, ExtractionResult, Group


SC_RESULT = ExtractionResult(
    label="SUPREME COURT OF INDIA",
    date="04-09-2025",
    groups=[
        Group(number="1", name="CHIEF JUSTICE'S COURT", entries=[
            Entry(serial_number="1", case_number="Diary No. 11981-2025"),
        ]),
        Group(number="2", name="COURT NO. : 2", entries=[
            Entry(serial_number="26", case_number="SLP(C) No. 24823/2025"),
            Entry(serial_number="27", case_number="W.P.(C) No. 5/2024"),
        ]),
    ],
)


class TestNormalizeCaseNumber(unittest.TestCase):

    def test_diary_number(self):
        self.assertEqual(
            normalize_case_number("Diary No. 11981-2025"),
            ("Diary No. 11981-2025", "11981/2025"),
        )

    def test_numbered_case_is_padded(self):
        self.assertEqual(
            normalize_case_number("SLP(C) No. 24823/2025"),
            ("SLP(C) No.-024823 - 2025", None),
        )

    def test_unrecognised_reference_is_unchanged(self):
        for value in ("CP(IB)-12", "Diary pending", ""):
            with self.subTest(value=value):
                self.assertEqual(normalize_case_number(value), (value, None))


class TestToPayload(unittest.TestCase):

    def test_supreme_court_shape(self):
        payload = to_payload(SC_RESULT, SUPREME_COURT)

        self.assertEqual(payload["court"], "SUPREME COURT OF INDIA")
        self.assertEqual(payload["date"], "04-09-2025")
        self.assertEqual(payload["courts"][1]["courtNumber"], "2")
        self.assertEqual(payload["courts"][1]["courtName"], "COURT NO. : 2")
        self.assertEqual(
            payload["courts"][1]["cases"][0],
            {"serialNumber": "26", "caseNumber": "SLP(C) No. 24823/2025"},
        )

    def test_nclt_shape(self):
        payload = to_payload(SC_RESULT, NCLT)
        self.assertEqual(set(payload), {"court", "date", "benches"})
        self.assertEqual(set(payload["benches"][0]), {"benchNumber", "benchName", "cases"})


class TestFlattenResult(unittest.TestCase):

    def test_one_record_per_case_in_order(self):
        records = flatten_result(SC_RESULT)

        self.assertEqual([r.serial_number for r in records], ["1", "26", "27"])
        self.assertEqual(records[0].diary_number, "11981/2025")
        self.assertEqual(records[0].group_name, "CHIEF JUSTICE'S COURT")
        self.assertEqual(records[1].case_number, "SLP(C) No.-024823 - 2025")
        self.assertEqual(records[1].full_case_number, "SLP(C) No. 24823/2025")
        self.assertEqual(records[2].group_number, "2")
        self.assertEqual({r.court for r in records}, {"SUPREME COURT OF INDIA"})
        self.assertEqual({r.date for r in records}, {"04-09-2025"})

    def test_empty_result(self):
        self.assertEqual(flatten_result(ExtractionResult(label="X")), [])


if __name__ == "__main__":
    unittest.main()
