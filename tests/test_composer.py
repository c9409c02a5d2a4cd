import pytest
from pydantic import ValidationError

from modules.composer import (
    ConfigOverrides,
    OverlayLayerPatch,
    PosterComposer,
    RenderRequest,
    TextStylePatch,
    apply_overrides,
    resolve_overlay,
)
from utils.exceptions import TemplateFileMissingError, UnsafePathError


def _composer(poster_config, make_rng, tmp_path):
    return PosterComposer(base_config=poster_config, rng=make_rng([0.3, 0.6, 0.9]), project_root=tmp_path)


def test_request_accepts_camel_case_json():
    request = RenderRequest.model_validate({
        "titleDir": "set",
        "titleTexts": ["a"],
        "disableOverlay": True,
        "overrides": {"pages": [{"fontSize": 40, "charsPerLine": 12}]},
    })

    assert request.title_dir == "set"
    assert request.title_texts == ["a"]
    assert request.disable_overlay is True
    assert request.overrides.pages[0].font_size == 40
    assert request.overrides.pages[0].chars_per_line == 12


def test_apply_overrides_leaves_base_untouched(poster_config):
    before = poster_config.model_dump()
    request = RenderRequest(
        title_dir="set",
        title_texts=["new title"],
        pages=["page one"],
        overrides=ConfigOverrides(
            title=[TextStylePatch(color="#ff0000")],
            overlay=[OverlayLayerPatch(count=5)],
        ),
        disable_overlay=True,
    )

    merged = apply_overrides(poster_config, request)

    assert poster_config.model_dump() == before
    assert merged.title[0].color == "#ff0000"
    assert merged.title[0].font_size == poster_config.title[0].font_size
    assert merged.title[0].text == "new title"
    assert merged.pages[0].text == "page one"
    assert merged.overlay[0].count == 5
    assert merged.overlay[0].enable is False


def test_unset_patch_fields_keep_base_values(poster_config):
    request = RenderRequest(title_dir="set", overrides=ConfigOverrides(pages=[TextStylePatch(x=1)]))
    merged = apply_overrides(poster_config, request)

    assert merged.pages[0].x == 1
    assert merged.pages[0].y == poster_config.pages[0].y
    assert merged.pages[0].max_lines == poster_config.pages[0].max_lines


def test_texts_beyond_configured_slots_are_ignored(poster_config):
    request = RenderRequest(title_dir="set", title_texts=["a", "b", "c", "d", "e"])
    merged = apply_overrides(poster_config, request)

    assert len(merged.title) == len(poster_config.title)
    assert [style.text for style in merged.title] == ["a", "b", "c"]


def test_resolve_overlay_patches_by_index(poster_config):
    layers = resolve_overlay(poster_config.overlay, [OverlayLayerPatch(enable=False), OverlayLayerPatch(count=9)])

    assert len(layers) == 1
    assert layers[0].enable is False
    assert poster_config.overlay[0].enable is True
    assert resolve_overlay(None, [OverlayLayerPatch(count=1)]) is None


def test_render_all_writes_cover_pages_and_ending(poster_config, make_rng, tmp_path):
    composer = _composer(poster_config, make_rng, tmp_path)

    result = composer.render_all(
        RenderRequest(title_dir="set", title_texts=["", "Hello", "<c:#ff0000>world</c>"], pages=["one", "", "three"])
    )

    out_dir = (tmp_path / "output" / "set").resolve()
    assert result.output_dir == str(out_dir)
    assert result.cover == str(out_dir / "cover.png")
    assert result.ending == str(out_dir / "ending.png")
    assert result.texts == [str(out_dir / "text_1.png"), str(out_dir / "text_3.png")]
    assert [o.kind for o in result.outputs] == ["cover", "text_1", "text_3", "ending"]
    for item in result.outputs:
        assert (out_dir / item.filename).is_file()


def test_render_all_caps_rendered_pages(poster_config, make_rng, tmp_path):
    composer = _composer(poster_config, make_rng, tmp_path)

    result = composer.render_all(
        RenderRequest(title_dir="set", pages=[f"page {i}" for i in range(7)], disable_overlay=True)
    )

    assert len(result.texts) == 6
    assert not (tmp_path / "output" / "set" / "text_7.png").exists()


def test_render_all_honours_output_format(poster_config, make_rng, tmp_path):
    composer = _composer(poster_config, make_rng, tmp_path)
    request = RenderRequest.model_validate({
        "titleDir": "jpg-set",
        "overrides": {"output": {"format": "jpg", "quality": 0.8}},
    })

    result = composer.render_all(request)

    assert result.cover.endswith("cover.jpg")
    assert (tmp_path / "output" / "jpg-set" / "ending.jpg").is_file()


def test_missing_background_fails_before_output_is_created(poster_config, template_root, make_rng, tmp_path):
    (template_root / "default" / "ending.png").unlink()
    composer = _composer(poster_config, make_rng, tmp_path)

    with pytest.raises(TemplateFileMissingError) as exc_info:
        composer.render_all(RenderRequest(title_dir="set", pages=["one"]))

    assert exc_info.value.path.name == "ending.png"
    assert not (tmp_path / "output" / "set").exists()


def test_unknown_template_is_a_missing_background(poster_config, make_rng, tmp_path):
    composer = _composer(poster_config, make_rng, tmp_path)

    with pytest.raises(TemplateFileMissingError):
        composer.render_all(RenderRequest(title_dir="set", template_name="nope"))


def test_title_dir_cannot_escape_output(poster_config, make_rng, tmp_path):
    composer = _composer(poster_config, make_rng, tmp_path)

    with pytest.raises(UnsafePathError):
        composer.render_all(RenderRequest(title_dir="../escape"))


def test_overlay_count_patch_rejects_infinity():
    with pytest.raises(ValidationError):
        RenderRequest.model_validate({"titleDir": "set", "overlayCover": [{"count": float("inf")}]})
