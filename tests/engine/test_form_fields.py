"""Tests for legacy absolutely positioned form fields."""

from unittest.mock import Mock

import pytest

from formflow.backends.html_backend import HtmlBackend
from formflow.engine.form_fields import place_form_fields, resolve_page_index
from formflow.engine.page_engine import LayoutContext
from formflow.models import FieldOption, FieldPosition, FormField


@pytest.fixture
def backend():
    return Mock(wraps=HtmlBackend())


@pytest.fixture
def field_ctx(backend, style):
    return LayoutContext.initialize(backend, style, page_count=2)


def _field(field_type, name="f", x=100, y=500, **kwargs):
    return FormField(name=name, type=field_type, position=FieldPosition(x=x, y=y), **kwargs)


def _texts(backend):
    return [call.args[1] for call in backend.draw_text.call_args_list]


class TestResolvePageIndex:
    """Test suite for page clamping."""

    @pytest.mark.parametrize("page,expected", [(1, 0), (2, 1), (0, 0), (-3, 0), (7, 1)])
    def test_clamped_to_existing_pages(self, field_ctx, page, expected):
        assert resolve_page_index(field_ctx, _field("text", page=page)) == expected

    def test_out_of_range_logs_warning(self, field_ctx, caplog):
        resolve_page_index(field_ctx, _field("text", name="late", page=9))

        assert "late" in caplog.text


class TestPlaceFormFields:
    """Test suite for place_form_fields."""

    def test_text_field_defaults(self, field_ctx, backend):
        place_form_fields(field_ctx, [_field("text", name="email", label="Email", required=True)])

        args, kwargs = backend.add_text_field.call_args
        assert args[1:] == ("email", 100, 500, 200, 28)
        assert kwargs["multiline"] is False
        label_call = backend.draw_text.call_args
        assert label_call.args[1] == "Email *"
        assert label_call.args[3] == 500 + 28 + 6

    def test_text_label_suppressed(self, field_ctx, backend):
        place_form_fields(field_ctx, [_field("text", label="Email")], draw_labels=False)

        assert backend.draw_text.call_count == 0

    def test_textarea_is_multiline(self, field_ctx, backend):
        place_form_fields(field_ctx, [_field("textarea", name="notes")])

        args, kwargs = backend.add_text_field.call_args
        assert args[4:] == (400, 100)
        assert kwargs["multiline"] is True

    def test_explicit_size_and_page(self, field_ctx, backend):
        field = FormField(name="n", type="text", page=2,
                          position=FieldPosition(x=50, y=60, width=300, height=40))

        place_form_fields(field_ctx, [field])

        args, _ = backend.add_text_field.call_args
        assert args[0] is field_ctx.pages[1]
        assert args[4:] == (300, 40)
        assert field_ctx.drawn[0].page == 2

    def test_checkbox_label_right(self, field_ctx, backend):
        place_form_fields(field_ctx, [_field("checkbox", name="agree", label="I agree", default=True)])

        args, kwargs = backend.add_checkbox.call_args
        assert args[1:] == ("agree", 100, 500, 24)
        assert kwargs["checked"] is True
        assert backend.draw_text.call_args.args[2] == 100 + 24 + 6

    def test_radio_group_stacked(self, field_ctx, backend):
        options = (FieldOption("s", "Small"), FieldOption("m", "Medium"), FieldOption("l", "Large"))
        place_form_fields(field_ctx, [_field("radio", name="size", label="Size", options=options, default="Medium")])

        calls = backend.add_radio.call_args_list
        assert [call.args[2] for call in calls] == ["s", "m", "l"]
        assert [call.args[4] for call in calls] == [500, 476, 452]
        assert [call.kwargs["selected"] for call in calls] == [False, True, False]
        assert _texts(backend) == ["Size", "Small", "Medium", "Large"]
        assert field_ctx.field_count == 1

    def test_radio_recorded_bounds(self, field_ctx):
        options = (FieldOption("a", "A"), FieldOption("b", "B"))
        place_form_fields(field_ctx, [_field("radio", options=options)])

        bounds = field_ctx.drawn[0].bounds
        assert bounds.bottom == 476
        assert bounds.top == 524

    def test_dropdown_with_hint_and_left_label(self, field_ctx, backend):
        options = (FieldOption("pl", "Poland"), FieldOption("de", "Germany"))
        place_form_fields(field_ctx, [_field("dropdown", name="country", label="Country",
                                             options=options, default="Germany")])

        args, kwargs = backend.add_dropdown.call_args
        assert args[4:] == (150, 28)
        assert kwargs["selected"] == FieldOption("de", "Germany")
        texts = _texts(backend)
        assert "(select)" in texts
        assert "Country" in texts
        label_x = backend.draw_text.call_args_list[texts.index("Country")].args[2]
        assert label_x < 100

    def test_dropdown_label_none(self, field_ctx, backend):
        place_form_fields(field_ctx, [_field("dropdown", label="Hidden", label_position="none")])

        assert "Hidden" not in _texts(backend)

    def test_signature_required_border(self, field_ctx, backend, style):
        place_form_fields(field_ctx, [_field("signature", name="sig", label="Signature", required=True)])

        args, kwargs = backend.add_text_field.call_args
        assert args[4:] == (200, 50)
        assert kwargs["border_color"] == style.fields["signature"].required_border_color
        assert kwargs["border_width"] == 2.0
        assert "Date:" in _texts(backend)
        assert backend.draw_line.call_count == 2

    def test_every_field_recorded_and_counted(self, field_ctx):
        fields = [
            _field("text", name="a", y=600),
            _field("checkbox", name="b", y=550),
            _field("signature", name="c", y=400),
        ]

        place_form_fields(field_ctx, fields)

        assert field_ctx.field_count == 3
        assert [element.type for element in field_ctx.drawn] == ["field"] * 3

    def test_cursor_untouched(self, field_ctx):
        before = (field_ctx.cursor.x, field_ctx.cursor.y, field_ctx.page_number)

        place_form_fields(field_ctx, [_field("text", page=2)])

        assert (field_ctx.cursor.x, field_ctx.cursor.y, field_ctx.page_number) == before
