import pytest
from PySide6.QtGui import QColor, QImage

from exporters import ImageExporter


@pytest.fixture
def image(qapp):
    img = QImage(12, 8, QImage.Format_RGB32)
    img.fill(QColor("#808080"))
    return img


def test_save_writes_numbered_png(tmp_path, image):
    exporter = ImageExporter(tmp_path / "out", prefix="ct")

    path = exporter.save(image, 7)

    assert path == tmp_path / "out" / "ct_0007.png"
    loaded = QImage(str(path))
    assert (loaded.width(), loaded.height()) == (12, 8)


def test_export_keeps_batch_indices_and_reports_progress(tmp_path, image):
    progress = []

    paths = ImageExporter(tmp_path).export([(0, image), (3, image)], progress.append)

    assert [p.name for p in paths] == ["capture_0000.png", "capture_0003.png"]
    assert progress == [0.5, 1.0]


@pytest.mark.parametrize("bad", [None, QImage()])
def test_null_images_are_rejected(tmp_path, bad):
    with pytest.raises(ValueError):
        ImageExporter(tmp_path).save(bad, 0)
