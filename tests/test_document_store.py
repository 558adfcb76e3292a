from datetime import datetime

import pytest
from botocore.exceptions import EndpointConnectionError
from sqlalchemy.exc import SQLAlchemyError

from api.core.errors import NotFound, PersistenceError, StorageError, ValidationError
from api.models.document import Document, DocumentCategory
from api.services.document_store import DocumentStore, PyqMetadata, parse_pyq_metadata

MB = 1024 * 1024


def _upload(store, owner, name="notes1.txt", content=b"Mitochondria produce ATP.", category="notes", **kwargs):
    content_type = kwargs.pop("content_type", "text/plain")
    return store.upload(content, name, content_type, category, owner, **kwargs)


class TestUpload:

    def test_upload_writes_object_and_row(self, store, owner, fake_s3, db_session):
        document = _upload(store, owner)

        assert document.id
        assert document.owner_id == "alice"
        assert document.category == DocumentCategory.notes
        assert document.file_size == len(b"Mitochondria produce ATP.")
        assert document.extracted_text == "Mitochondria produce ATP."
        assert document.file_path.startswith("alice/")
        assert document.file_path.endswith(".txt")
        assert fake_s3.keys() == [document.file_path]
        assert db_session.query(Document).count() == 1

    def test_unknown_category_coerced_to_general(self, store, owner):
        document = _upload(store, owner, category="homework")
        assert document.category == DocumentCategory.general

    def test_missing_category_defaults_to_general(self, store, owner):
        document = _upload(store, owner, category=None)
        assert document.category == DocumentCategory.general

    def test_long_filename_is_cut_to_255(self, store, owner):
        document = _upload(store, owner, name="n" * 300 + ".txt")
        assert len(document.filename) == 255

    def test_oversize_rejected_before_any_write(self, store, owner, fake_s3, db_session):
        with pytest.raises(ValidationError):
            _upload(store, owner, name="big.pdf", content=b"0" * (50 * MB + 1), content_type="application/pdf")
        assert fake_s3.objects == {}
        assert db_session.query(Document).count() == 0

    def test_exactly_max_size_accepted(self, owner, db_session, storage):
        store = DocumentStore(db_session, storage, max_file_size_bytes=1024)
        document = _upload(store, owner, content=b"x" * 1024)
        assert document.file_size == 1024

    def test_disallowed_type_rejected(self, store, owner, fake_s3):
        with pytest.raises(ValidationError):
            _upload(store, owner, name="run.exe", content=b"MZ", content_type="application/x-msdownload")
        assert fake_s3.objects == {}

    def test_storage_failure_leaves_no_row(self, store, owner, fake_s3, db_session):
        fake_s3.fail_put = True
        with pytest.raises(StorageError):
            _upload(store, owner)
        assert db_session.query(Document).count() == 0

    def test_metadata_failure_removes_stored_object(self, store, owner, fake_s3, db_session, monkeypatch):
        def failing_commit():
            raise SQLAlchemyError("insert failed")

        monkeypatch.setattr(db_session, "commit", failing_commit)

        with pytest.raises(PersistenceError):
            _upload(store, owner)

        assert fake_s3.objects == {}
        assert len(fake_s3.deleted) == 1
        monkeypatch.undo()
        assert store.list_documents(owner, "notes") == []

    def test_failed_compensation_still_reports_persistence_error(self, store, owner, fake_s3, db_session, monkeypatch):
        def failing_commit():
            raise SQLAlchemyError("insert failed")

        monkeypatch.setattr(db_session, "commit", failing_commit)
        fake_s3.fail_delete = True

        with pytest.raises(PersistenceError):
            _upload(store, owner)

    def test_unreachable_storage_during_compensation_still_reports_persistence_error(
        self, store, owner, fake_s3, db_session, monkeypatch
    ):
        def failing_commit():
            raise SQLAlchemyError("insert failed")

        monkeypatch.setattr(db_session, "commit", failing_commit)
        fake_s3.delete_error = EndpointConnectionError(endpoint_url="https://storage.test")

        with pytest.raises(PersistenceError):
            _upload(store, owner)

    def test_unreachable_storage_on_upload_is_storage_error(self, store, owner, fake_s3, db_session):
        fake_s3.put_error = EndpointConnectionError(endpoint_url="https://storage.test")

        with pytest.raises(StorageError):
            _upload(store, owner)
        assert db_session.query(Document).count() == 0

    def test_reload_failure_after_commit_keeps_object(self, store, owner, fake_s3, db_session, monkeypatch):
        def failing_refresh(instance):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(db_session, "refresh", failing_refresh)

        with pytest.raises(PersistenceError):
            _upload(store, owner)

        monkeypatch.undo()
        rows = db_session.query(Document).all()
        assert len(rows) == 1
        assert fake_s3.keys() == [rows[0].file_path]
        assert fake_s3.deleted == []

    def test_storage_never_overwrites(self, storage, fake_s3):
        ok, _ = storage.upload_file("alice/fixed.txt", b"one", "text/plain")
        assert ok
        ok, error = storage.upload_file("alice/fixed.txt", b"two", "text/plain")
        assert not ok
        assert "PreconditionFailed" in error
        assert fake_s3.objects[("documents", "alice/fixed.txt")] == b"one"
        assert storage.file_exists("alice/fixed.txt")
        assert not storage.file_exists("alice/other.txt")

    def test_storage_transport_errors_map_to_failures(self, storage, fake_s3):
        fake_s3.delete_error = EndpointConnectionError(endpoint_url="https://storage.test")
        ok, error = storage.delete_file("alice/fixed.txt")
        assert not ok
        assert "storage.test" in error

        fake_s3.head_error = EndpointConnectionError(endpoint_url="https://storage.test")
        with pytest.raises(StorageError):
            storage.file_exists("alice/fixed.txt")

    def test_pyq_metadata_kept_for_pyq_only(self, store, owner):
        pyq = PyqMetadata(subject="Physics", semester=3, academic_year="2022-2023")

        paper = _upload(store, owner, name="phy.pdf", content=b"%PDF", content_type="application/pdf",
                        category="pyq", pyq=pyq)
        notes = _upload(store, owner, category="notes", pyq=pyq)

        assert (paper.subject, paper.semester, paper.academic_year) == ("Physics", 3, "2022-2023")
        assert (notes.subject, notes.semester, notes.academic_year) == (None, None, None)


class TestList:

    def test_newest_first(self, store, owner, db_session):
        first = _upload(store, owner, name="a.txt")
        second = _upload(store, owner, name="b.txt")
        third = _upload(store, owner, name="c.txt")
        for day, document in enumerate([first, second, third], start=1):
            document.created_at = datetime(2024, 1, day)
        db_session.commit()

        listed = store.list_documents(owner, "notes")
        assert [d.id for d in listed] == [third.id, second.id, first.id]

    def test_scoped_to_owner_and_category(self, store, owner, other_owner):
        mine = _upload(store, owner, category="notes")
        _upload(store, owner, category="research")
        _upload(store, other_owner, category="notes")

        listed = store.list_documents(owner, "notes")
        assert [d.id for d in listed] == [mine.id]
        assert all(d.owner_id == "alice" for d in store.list_documents(owner, "research"))

    def test_general_context_includes_all_categories(self, store, owner, other_owner):
        _upload(store, owner, category="notes")
        _upload(store, owner, category="research")
        _upload(store, other_owner, category="notes")

        assert len(store.list_for_context(owner, "general")) == 2
        assert len(store.list_for_context(owner, "research")) == 1


class TestDelete:

    def test_delete_removes_object_and_row(self, store, owner, fake_s3):
        document = _upload(store, owner)
        store.delete(document.id, owner)

        assert fake_s3.objects == {}
        assert store.list_documents(owner, "notes") == []

    def test_delete_of_foreign_document_is_not_found(self, store, owner, other_owner, fake_s3):
        document = _upload(store, owner)

        with pytest.raises(NotFound):
            store.delete(document.id, other_owner)

        assert [d.id for d in store.list_documents(owner, "notes")] == [document.id]
        assert fake_s3.keys() == [document.file_path]

    def test_delete_of_missing_document_is_not_found(self, store, owner):
        with pytest.raises(NotFound):
            store.delete("does-not-exist", owner)

    def test_object_already_gone_still_deletes_row(self, store, owner, fake_s3):
        document = _upload(store, owner)
        fake_s3.objects.clear()

        store.delete(document.id, owner)
        assert store.list_documents(owner, "notes") == []

    def test_storage_delete_failure_keeps_row(self, store, owner, fake_s3):
        document = _upload(store, owner)
        fake_s3.fail_delete = True

        with pytest.raises(StorageError):
            store.delete(document.id, owner)
        assert len(store.list_documents(owner, "notes")) == 1


    def test_row_removed_concurrently_still_succeeds(self, store, owner, fake_s3, db_session, monkeypatch):
        document = _upload(store, owner)
        document_id = document.id
        delete_file = store.storage.delete_file

        def delete_then_lose_row(path):
            result = delete_file(path)
            db_session.query(Document).filter(Document.id == document_id).delete(synchronize_session=False)
            db_session.commit()
            return result

        monkeypatch.setattr(store.storage, "delete_file", delete_then_lose_row)

        store.delete(document_id, owner)

        assert fake_s3.objects == {}
        assert db_session.query(Document).count() == 0


class TestPyqMetadataParsing:

    def test_none_when_no_fields(self):
        assert parse_pyq_metadata(None, None, None) is None
        assert parse_pyq_metadata("", "", "") is None

    def test_parses_all_fields(self):
        meta = parse_pyq_metadata(" Maths ", "2", "2021-2022")
        assert meta == PyqMetadata(subject="Maths", semester=2, academic_year="2021-2022")

    @pytest.mark.parametrize("semester", ["two", "0", "-1"])
    def test_bad_semester(self, semester):
        with pytest.raises(ValidationError):
            parse_pyq_metadata("Maths", semester, None)

    def test_bad_academic_year(self):
        with pytest.raises(ValidationError):
            parse_pyq_metadata("Maths", "1", "2021/22")
