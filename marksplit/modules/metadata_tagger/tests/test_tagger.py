"""Tests for the metadata tagger."""

import json

import pytest

from marksplit.modules.tools import Capability
from marksplit.modules.tools.tests.fakes import FakeToolRunner
from marksplit.shared.exceptions import ExternalToolError, MetadataFileError
from marksplit.shared.outcome import FailureKind

from ..models import FileMetadata
from ..tagger import MetadataTagger

METADATA = [
    {
        "file_name": "bundle_part_001.pdf",
        "Title": "Site Visit Report",
        "Genre": "Report",
        "Tags": ["inspection", "roof"],
        "Composer": "J. Rivera",
        "new_filename": "2024-03-site-visit.pdf",
    },
    {
        "file_name": "bundle_part_002.pdf",
        "Title": "Change Order 7",
        "Genre": "Contract",
        "Tags": [],
        "Composer": "Acme Builders",
        "new_filename": "change-order-7.pdf",
    },
]


@pytest.fixture
def dirs(tmp_path):
    source_dir = tmp_path / "extracted_content"
    output_dir = tmp_path / "processed_files_with_metadata"
    source_dir.mkdir()
    for name in ["bundle_part_001.pdf", "bundle_part_002.pdf"]:
        (source_dir / name).write_bytes(b"%PDF-1.4 " + name.encode())
    metadata_file = source_dir / "metadata_clean.json"
    metadata_file.write_text(json.dumps(METADATA))
    return source_dir, output_dir, metadata_file


class TestMetadataTagger:
    """Test suite for MetadataTagger."""

    def test_load_metadata_reads_file_keys(self, dirs):
        source_dir, output_dir, metadata_file = dirs
        tagger = MetadataTagger(FakeToolRunner(), source_dir, output_dir)

        entries = tagger.load_metadata(metadata_file)

        assert entries[0].title == "Site Visit Report"
        assert entries[0].composer == "J. Rivera"
        assert entries[0].keywords == "inspection, roof"
        assert entries[1].keywords == ""

    @pytest.mark.parametrize("content", ["not json", '{"file_name": "x"}', '["just a string"]'])
    def test_load_metadata_invalid(self, dirs, content):
        source_dir, output_dir, metadata_file = dirs
        metadata_file.write_text(content)

        with pytest.raises(MetadataFileError):
            MetadataTagger(FakeToolRunner(), source_dir, output_dir).load_metadata(metadata_file)

    def test_load_metadata_missing_file(self, dirs):
        source_dir, output_dir, _ = dirs
        with pytest.raises(MetadataFileError):
            MetadataTagger(FakeToolRunner(), source_dir, output_dir).load_metadata(source_dir / "nope.json")

    def test_run_copies_and_tags(self, dirs):
        source_dir, output_dir, metadata_file = dirs
        runner = FakeToolRunner({Capability.WRITE_METADATA: ""})

        summary = MetadataTagger(runner, source_dir, output_dir).run(metadata_file)

        assert summary.processed == 2
        assert summary.errors == 0
        assert summary.metadata_embedded
        assert (output_dir / "2024-03-site-visit.pdf").read_bytes() == b"%PDF-1.4 bundle_part_001.pdf"
        assert (source_dir / "bundle_part_001.pdf").exists()

        first = runner.calls(Capability.WRITE_METADATA)[0].args
        assert first == {
            "path": output_dir / "2024-03-site-visit.pdf",
            "title": "Site Visit Report",
            "author": "J. Rivera",
            "subject": "Report",
            "keywords": "inspection, roof",
        }

    def test_run_without_writer_only_copies(self, dirs, caplog):
        source_dir, output_dir, metadata_file = dirs
        runner = FakeToolRunner(available=set())

        summary = MetadataTagger(runner, source_dir, output_dir).run(metadata_file)

        assert summary.processed == 2
        assert not summary.metadata_embedded
        assert runner.calls(Capability.WRITE_METADATA) == []
        assert (output_dir / "change-order-7.pdf").exists()
        assert "metadata not embedded" in caplog.text

    def test_missing_source_is_counted_and_skipped(self, dirs):
        source_dir, output_dir, metadata_file = dirs
        (source_dir / "bundle_part_001.pdf").unlink()
        runner = FakeToolRunner({Capability.WRITE_METADATA: ""})

        summary = MetadataTagger(runner, source_dir, output_dir).run(metadata_file)

        assert summary.processed == 1
        assert summary.errors == 1
        assert summary.failed_files == ["bundle_part_001.pdf"]
        assert not (output_dir / "2024-03-site-visit.pdf").exists()

    def test_writer_failure_keeps_copy(self, dirs):
        source_dir, output_dir, _ = dirs
        output_dir.mkdir()
        runner = FakeToolRunner({Capability.WRITE_METADATA: ExternalToolError("exiftool exited with status 1")})
        tagger = MetadataTagger(runner, source_dir, output_dir)

        outcome = tagger.tag_file(FileMetadata.model_validate(METADATA[0]), write_metadata=True)

        assert not outcome.ok
        assert outcome.failure.kind == FailureKind.EXTERNAL_TOOL_FAILURE
        assert outcome.value == output_dir / "2024-03-site-visit.pdf"
        assert outcome.value.exists()

    def test_copy_failure(self, dirs):
        source_dir, output_dir, _ = dirs
        # Output directory never created
        tagger = MetadataTagger(FakeToolRunner(), source_dir, output_dir)

        outcome = tagger.tag_file(FileMetadata.model_validate(METADATA[1]), write_metadata=False)

        assert outcome.failure.kind == FailureKind.IO_FAILURE

    def test_incomplete_entries_count_as_errors(self, dirs):
        source_dir, output_dir, metadata_file = dirs
        metadata_file.write_text(json.dumps(METADATA + [
            {"Title": "No file named"},
            {"file_name": "bundle_part_002.pdf", "Tags": None, "Composer": None},
        ]))
        runner = FakeToolRunner({Capability.WRITE_METADATA: ""})

        summary = MetadataTagger(runner, source_dir, output_dir).run(metadata_file)

        assert summary.processed == 2
        assert summary.errors == 2
        assert summary.failed_files == ["entry 2", "bundle_part_002.pdf"]

    def test_null_tags_load_as_empty(self):
        entry = FileMetadata.model_validate({
            "file_name": "a_part_001.pdf",
            "Tags": None,
            "new_filename": "a.pdf",
        })

        assert entry.tags == []
        assert entry.keywords == ""
