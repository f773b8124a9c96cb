import pytest

from doccontext.config.schema import ImageConfig


@pytest.fixture
def sample_image_bytes():
    """Minimal valid PNG for testing (1x1 white pixel)."""
    import base64
    return base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4"
        "nGP4z8BQDwAEgAF/pooBPQAAAABJRU5ErkJggg=="
    )


def _write_pdf(path, pages):
    import pymupdf

    doc = pymupdf.open()
    for i in range(pages):
        page = doc.new_page()
        page.insert_text((72, 72), f"Page {i + 1}")
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def sample_pdf(tmp_path):
    """A three-page PDF on disk."""
    return _write_pdf(tmp_path / "report.pdf", 3)


@pytest.fixture
def single_page_pdf(tmp_path):
    return _write_pdf(tmp_path / "single.pdf", 1)


class FakeRenderer:
    """Renderer stand-in that writes fixed bytes and records each call."""

    def __init__(self, data=b"fake-image", config=None, params=None, fail_pages=()):
        self.data = data
        self.config = (config or ImageConfig()).finalize()
        self.params = params if params is not None else ["background=white"]
        self.fail_pages = set(fail_pages)
        self.calls = []
        self.output_paths = []

    def render(self, input_path, page_number, output_path):
        from doccontext.errors.exceptions import RenderError

        self.calls.append(page_number)
        self.output_paths.append(output_path)
        if page_number in self.fail_pages:
            raise RenderError("boom", page_number=page_number, output="magick: boom")
        with open(output_path, "wb") as f:
            f.write(self.data + f"-{page_number}".encode())

    def file_extension(self):
        return self.config.format

    def settings(self):
        return self.config.model_copy(deep=True)

    def parameters(self):
        return list(self.params)


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def renderer_factory():
    return FakeRenderer


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user/global config and DOCCONTEXT_* env vars out of every test."""
    import os

    from doccontext.config import hierarchy

    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    monkeypatch.setattr(hierarchy, "_find_project_config", lambda: None)
    for key in list(os.environ):
        if key.startswith("DOCCONTEXT_"):
            monkeypatch.delenv(key)
