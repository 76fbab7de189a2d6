"""Tests for streamform.fields module."""

import io

import pytest

from streamform import BoundaryError, FieldSet, FieldTypeError
from streamform.fields import StreamContent, TextContent
from conftest import BOUNDARY


class TestFieldSetBuilder:
    """Tests for adding fields."""

    def test_fields_keep_insertion_order(self):
        """Iteration follows insertion order."""
        form = FieldSet()
        form.add_text("a", "1")
        form.add_stream("b", b"2")
        form.add_text("c", "3")
        assert [f.name for f in form] == ["a", "b", "c"]
        assert len(form) == 3

    def test_text_content(self):
        """Text values are stored as TextContent."""
        form = FieldSet()
        form.add_text("name", "John")
        (field,) = list(form)
        assert isinstance(field.content, TextContent)
        assert field.content.value == "John"

    def test_text_requires_str(self):
        """Non-str text values are rejected."""
        form = FieldSet()
        with pytest.raises(FieldTypeError):
            form.add_text("n", 42)
        with pytest.raises(TypeError):
            form.add_text("n", b"bytes")
        assert len(form) == 0

    def test_stream_default_content_type(self):
        """Stream fields default to application/octet-stream."""
        form = FieldSet()
        form.add_stream("f", io.BytesIO(b"x"))
        (field,) = list(form)
        assert isinstance(field.content, StreamContent)
        assert field.content.content_type == "application/octet-stream"
        assert field.content.filename is None

    def test_stream_custom_content_type(self):
        """An explicit content type and filename are kept."""
        form = FieldSet()
        form.add_stream("f", io.BytesIO(b"x"), filename="a.pdf", content_type="application/pdf")
        (field,) = list(form)
        assert field.content.content_type == "application/pdf"
        assert field.content.filename == "a.pdf"

    def test_stream_rejects_unsupported_payload(self):
        """Payloads that cannot produce bytes are rejected when added."""
        form = FieldSet()
        with pytest.raises(FieldTypeError):
            form.add_stream("f", 12345)
        with pytest.raises(FieldTypeError):
            form.add_stream("f", io.StringIO("text mode"))
        with pytest.raises(FieldTypeError):
            form.add_stream("f", {"name": b"value"})
        assert len(form) == 0

    def test_empty_set_is_falsy(self):
        form = FieldSet()
        assert not form
        form.add_text("a", "b")
        assert form


class TestPrepare:
    """Tests for FieldSet.prepare()."""

    def test_prepare_drains_fields(self, boundary_source):
        """The set is empty after prepare and can be reused."""
        form = FieldSet(boundary_source=boundary_source)
        form.add_text("a", "1")
        form.prepare()
        assert len(form) == 0

        form.add_text("b", "2")
        body = form.prepare()
        assert b'name="b"' in body.read()

    def test_boundary_generated_per_prepare(self):
        """Each prepare draws a new boundary."""
        form = FieldSet()
        form.add_text("a", "1")
        first = form.prepare().boundary
        form.add_text("a", "1")
        second = form.prepare().boundary
        assert first != second

    def test_boundary_source_called_with_length(self, mocker):
        """The injected source is asked for 16 characters."""
        source = mocker.Mock(return_value=BOUNDARY)
        body = FieldSet(boundary_source=source).prepare()
        source.assert_called_once_with(16)
        assert body.boundary == BOUNDARY

    def test_bad_boundary_keeps_fields(self):
        """A failing prepare leaves the fields in place."""
        form = FieldSet(boundary_source=lambda n: "not alphanumeric!")
        form.add_text("a", "1")
        with pytest.raises(BoundaryError):
            form.prepare()
        assert len(form) == 1

    def test_unicode_names_and_values(self, boundary_source):
        """Names and values are encoded as UTF-8."""
        form = FieldSet(boundary_source=boundary_source)
        form.add_text("título", "añadir ✓")
        data = form.prepare().read()
        assert 'name="título"'.encode() in data
        assert "añadir ✓".encode() in data

    def test_legacy_order_passed_to_reader(self, boundary_source):
        """legacy_stream_order reaches the prepared body."""
        form = FieldSet(boundary_source=boundary_source, legacy_stream_order=True)
        form.add_stream("x", b"XX")
        form.add_stream("y", b"YY")
        data = form.prepare().read()
        assert data.index(b"YY") < data.index(b"XX")
