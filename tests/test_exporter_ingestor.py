import shutil

import pytest
from PIL import Image

from config import OutputConfig
from modules.exporter import Exporter
from modules.ingestor import TemplateIngestor
from utils.exceptions import TemplateFileMissingError, TemplateNotFoundError, UnsafePathError


@pytest.mark.parametrize("quality, expected", [
    (0.9, 90),
    (1, 100),
    (85, 85),
    (0, 1),
    (150, 100),
])
def test_quality_scale(tmp_path, quality, expected):
    exporter = Exporter(tmp_path, OutputConfig(format="jpg", quality=quality))
    assert exporter.quality == expected


def test_save_list_and_clear(tmp_path):
    exporter = Exporter(tmp_path / "out", OutputConfig(format="png"))
    out_dir = exporter.output_dir_for("set")
    out_dir.mkdir(parents=True)

    saved = exporter.save(Image.new("RGBA", (8, 8), (0, 128, 0, 255)), out_dir, "cover")

    assert saved.name == "cover.png"
    with Image.open(saved) as img:
        assert img.size == (8, 8)
        assert img.convert("RGBA").getpixel((0, 0)) == (0, 128, 0, 255)

    files = exporter.list_outputs()
    assert [f["rel_path"] for f in files] == ["set/cover.png"]
    assert files[0]["size"] > 0

    assert exporter.clear("set") is True
    assert not out_dir.exists()
    assert exporter.clear("set") is False


def test_clear_refuses_root_and_escapes(tmp_path):
    exporter = Exporter(tmp_path / "out")
    (tmp_path / "out").mkdir()

    assert exporter.clear("") is False
    assert (tmp_path / "out").exists()
    with pytest.raises(UnsafePathError):
        exporter.clear("../elsewhere")
    with pytest.raises(UnsafePathError):
        exporter.output_dir_for("/etc")


def test_list_outputs_of_missing_dir(tmp_path):
    assert Exporter(tmp_path / "nothing").list_outputs() == []


def test_list_templates(template_root):
    (template_root / "zeta").mkdir()
    (template_root / "notes.txt").write_text("x")

    assert TemplateIngestor(template_root).list_templates() == ["default", "zeta"]


def test_list_template_files(template_root):
    files = TemplateIngestor(template_root).list_template_files("default")

    assert files["template_name"] == "default"
    assert [f["rel_path"] for f in files["png_files"]] == ["cover.png", "ending.png", "text.png"]
    assert [f["rel_path"] for f in files["asset_files"]] == ["assets/a_dot.png", "assets/b_star.png"]


def test_list_template_files_unknown(template_root):
    with pytest.raises(TemplateNotFoundError):
        TemplateIngestor(template_root).list_template_files("nope")


def test_load_template(template_root):
    template = TemplateIngestor(template_root).load_template("default")

    assert template.cover_path.name == "cover.png"
    assert template.text_path.name == "text.png"
    assert template.ending_path.name == "ending.png"
    assert [p.rsplit("/", 1)[-1] for p in template.assets] == ["a_dot.png", "b_star.png"]


def test_load_template_without_assets(template_root):
    shutil.rmtree(template_root / "default" / "assets")
    assert TemplateIngestor(template_root).load_template("default").assets == ()


def test_load_template_reports_first_missing_background(template_root):
    (template_root / "default" / "text.png").unlink()

    with pytest.raises(TemplateFileMissingError) as exc_info:
        TemplateIngestor(template_root).load_template("default")

    assert exc_info.value.path.name == "text.png"
    assert isinstance(exc_info.value, FileNotFoundError)


@pytest.mark.parametrize("name", ["../..", "../outside", "/etc"])
def test_template_name_cannot_escape_base(template_root, name):
    ingestor = TemplateIngestor(template_root / "default" / "assets")

    with pytest.raises(UnsafePathError):
        ingestor.list_template_files(name)
    with pytest.raises(UnsafePathError):
        ingestor.load_template(name)
