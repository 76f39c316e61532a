"""
Unit tests for StatementImporter

The pipeline is mocked; each test feeds parse results directly.
"""
from datetime import datetime
from unittest.mock import Mock

import pytest

from dirham.core.importer import StatementImporter
from dirham.core.store import InMemoryTransactionStore, JsonFileTransactionStore
from dirham.parsing.exceptions import NoTransactionsParsed
from dirham.parsing.pipeline import StatementPipeline

NOW = datetime(2024, 8, 1, 9, 30, 0)


@pytest.fixture
def mock_pipeline():
    return Mock(spec=StatementPipeline)


@pytest.fixture
def importer(mock_pipeline):
    return StatementImporter(InMemoryTransactionStore(), pipeline=mock_pipeline, clock=lambda: NOW)


@pytest.fixture
def july_records(make_record):
    return [
        make_record(date="2024-07-07", description="VIR.EMIS WEB VERS Smart Stooners", amount="-1200.00"),
        make_record(date="2024-07-15", description="VERSEMENT ESPECES", amount="2000.00"),
    ]


class TestImport:
    def test_first_import(self, importer, mock_pipeline, make_result, july_records):
        mock_pipeline.process_bytes.return_value = make_result(july_records, filename="juillet.pdf")

        summary = importer.import_bytes(b"%PDF", filename="juillet.pdf")

        mock_pipeline.process_bytes.assert_called_once_with(b"%PDF", filename="juillet.pdf")
        assert summary.added == 2
        assert summary.duplicates == 0
        assert summary.total == 2
        assert summary.statement.id == f"statement_{int(NOW.timestamp() * 1000)}"
        assert summary.statement.transaction_count == 2
        assert summary.statement.filename == "juillet.pdf"
        assert all(r.statement_id == summary.statement.id for r in importer.store.list())
        assert "Imported 2" in summary.message

    def test_reimport_adds_nothing(self, importer, mock_pipeline, make_result, july_records):
        mock_pipeline.process_bytes.return_value = make_result(july_records)
        importer.import_bytes(b"%PDF", filename="juillet.pdf")

        summary = importer.import_bytes(b"%PDF", filename="juillet.pdf")

        assert summary.added == 0
        assert summary.duplicates == 2
        assert summary.total == 2
        assert summary.message.startswith("No new transactions")
        assert [s.transaction_count for s in importer.store.list_statements()] == [2, 0]

    def test_partial_overlap(self, importer, mock_pipeline, make_result, make_record, july_records):
        mock_pipeline.process_bytes.return_value = make_result(july_records)
        importer.import_bytes(b"%PDF", filename="a.pdf")

        mock_pipeline.process_bytes.return_value = make_result(
            [july_records[1], make_record(date="2024-07-20", description="RETRAIT GAB", amount="-300.00")]
        )
        summary = importer.import_bytes(b"%PDF", filename="b.pdf")

        assert summary.added == 1
        assert [r.description for r in importer.store.list()] == [
            "VIR.EMIS WEB VERS Smart Stooners", "VERSEMENT ESPECES", "RETRAIT GAB",
        ]

    def test_failure_leaves_store_untouched(self, importer, mock_pipeline, make_result, july_records):
        mock_pipeline.process_bytes.return_value = make_result(july_records)
        importer.import_bytes(b"%PDF", filename="a.pdf")

        mock_pipeline.process_bytes.side_effect = NoTransactionsParsed(bank_name="CIH Bank")
        with pytest.raises(NoTransactionsParsed):
            importer.import_bytes(b"%PDF", filename="b.pdf")

        assert len(importer.store.list()) == 2
        assert len(importer.store.list_statements()) == 1

    def test_import_file(self, importer, mock_pipeline, make_result, july_records):
        mock_pipeline.process_file.return_value = make_result(july_records, filename="x.pdf")

        summary = importer.import_file("/tmp/x.pdf")

        mock_pipeline.process_file.assert_called_once_with("/tmp/x.pdf")
        assert summary.added == 2

    def test_summary_dict(self, importer, mock_pipeline, make_result, july_records):
        mock_pipeline.process_bytes.return_value = make_result(july_records)

        data = importer.import_bytes(b"%PDF", filename="releve.pdf").to_dict()

        assert data['added'] == 2
        assert data['statement']['transaction_count'] == 2
        assert data['result']['period'] == "2024-07"
        assert data['result']['bank'] == "Attijariwafa Bank"


def test_clear(tmp_path, make_result, july_records):
    pipeline = Mock(spec=StatementPipeline)
    pipeline.process_bytes.return_value = make_result(july_records)
    importer = StatementImporter(JsonFileTransactionStore(tmp_path), pipeline=pipeline)
    importer.import_bytes(b"%PDF", filename="a.pdf")

    importer.clear()

    assert importer.store.list() == []
    assert importer.store.list_statements() == []
