import logging
import pytest

from warpresize.cli import ResizeConfig, main, run

from conftest import read_png_header

def run_main(*args: str) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main([str(a) for a in args])
    return exc_info.value.code

def test_default_factor(dirs, write_image):
    indir, outdir = dirs
    write_image(indir / "img.png", width=20, height=10)

    assert run_main("--indir", indir, "--outdir", outdir) == 0
    assert read_png_header(outdir / "img.png")[:2] == (6, 3)

def test_explicit_factor(dirs, write_image):
    indir, outdir = dirs
    write_image(indir / "img.png", width=20, height=10)

    assert run_main("--indir", indir, "--outdir", outdir, "--factor", "1.5") == 0
    assert read_png_header(outdir / "img.png")[:2] == (30, 15)

def test_failure_exits_non_zero_with_stage_and_file(dirs, caplog):
    indir, outdir = dirs
    (indir / "broken.png").write_bytes(b"not an image")

    with caplog.at_level(logging.ERROR, logger="warpresize"):
        assert run_main("--indir", indir, "--outdir", outdir) == 1

    assert f"decode failed for {indir / 'broken.png'}" in caplog.text

def test_missing_output_directory(dirs, tmp_path):
    indir, _ = dirs
    assert run(ResizeConfig(indir=indir, outdir=tmp_path / "missing")) == 1

@pytest.mark.parametrize("factor", ["0", "-0.5", "nan"])
def test_invalid_factor(dirs, factor):
    indir, outdir = dirs
    assert run_main("--indir", indir, "--outdir", outdir, "--factor", factor) == 2

def test_required_arguments(dirs):
    indir, _ = dirs
    assert run_main("--indir", indir) == 2
