"""
Unit tests for the invalid item audit log and option-block integrity check.
"""

from unittest.mock import Mock

from miaaula.core.question import check_integrity
from miaaula.reports.auditor import SNIPPET_LENGTH, InvalidItemAuditor


class TestLogInvalidItem:
    def test_first_report_wins(self, kv_store, make_question, clock_after):
        auditor = InvalidItemAuditor(kv_store, clock=clock_after(0))
        q = make_question("q7", options={"A": "", "B": "x"})

        assert auditor.log_invalid_item(q, ["A"], session_id="s1") is True
        assert auditor.log_invalid_item(q, ["A", "C"], session_id="s2") is False

        items = auditor.list_invalid_items()
        assert len(items) == 1
        assert items[0].session_id == "s1"
        assert items[0].missing_options == ["A"]

    def test_newest_entry_first(self, kv_store, make_question):
        auditor = InvalidItemAuditor(kv_store)
        auditor.log_invalid_item(make_question("q1"), ["A"])
        auditor.log_invalid_item(make_question("q2"), ["B"])

        assert [i.id for i in auditor.list_invalid_items()] == ["q2", "q1"]

    def test_entry_fields(self, kv_store, make_question, clock_after):
        q = make_question(
            "q9",
            questionRef="CF-88-5",
            lawRef="Art. 5º",
            correctAnswer="C",
            questionText="x" * 500,
            rawImportBlock="A) ...\nB) ...",
        )
        auditor = InvalidItemAuditor(kv_store, clock=clock_after(0))

        auditor.log_invalid_item(q, ["C", "D"])
        record = kv_store.load(auditor.key)[0]

        assert record["id"] == "q9"
        assert record["questionRef"] == "CF-88-5"
        assert record["lawRef"] == "Art. 5º"
        assert record["correctAnswer"] == "C"
        assert record["missingOptions"] == ["C", "D"]
        assert record["hasRawBlock"] is True
        assert len(record["textSnippet"]) == SNIPPET_LENGTH == 200
        assert record["timestamp"] == "2024-03-05T14:02:00.000Z"
        assert "sessionId" not in record

    def test_no_raw_block(self, kv_store, make_question):
        auditor = InvalidItemAuditor(kv_store)
        auditor.log_invalid_item(make_question("q1", rawImportBlock=""), ["A"])
        assert auditor.list_invalid_items()[0].has_raw_block is False

    def test_uses_configured_key(self, kv_store, make_question):
        InvalidItemAuditor(kv_store).log_invalid_item(make_question(), ["A"])
        assert kv_store.keys() == ["revApp_invalid_items_v1"]

    def test_store_failure_is_swallowed(self, make_question):
        backend = Mock()
        backend.load.return_value = None
        backend.save.side_effect = OSError("quota exceeded")

        assert InvalidItemAuditor(backend).log_invalid_item(make_question(), ["A"]) is False

    def test_list_on_broken_store(self):
        backend = Mock()
        backend.load.side_effect = RuntimeError("boom")
        assert InvalidItemAuditor(backend).list_invalid_items() == []


class TestCheckIntegrity:
    def test_complete_question(self, make_question):
        check = check_integrity(make_question())
        assert check.broken is False
        assert check.missing == []

    def test_missing_distractor_is_not_broken(self, make_question):
        check = check_integrity(make_question(options={"A": "Alpha", "B": "  ", "C": "Charlie"}))
        assert check.broken is False
        assert check.missing == ["B", "D"]

    def test_empty_correct_option_is_broken(self, make_question):
        check = check_integrity(make_question(correctAnswer="B", options={"A": "Alpha", "B": None}))
        assert check.broken is True
        assert check.missing == ["B", "C", "D"]
