"""Tests for the convert command-line entry point."""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from mnist_converter.cli import build_parser, main


@pytest.fixture(autouse=True)
def _restore_logger() -> Iterator[None]:
    """main() replaces loguru sinks; put the default stderr sink back afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestParser:
    def test_positionals(self) -> None:
        args = build_parser().parse_args(["l", "i", "o"])
        assert args.labels_file == Path("l")
        assert args.images_file == Path("i")
        assert args.output_dir == Path("o")
        assert args.max_path_length == 255
        assert args.progress is False
        assert args.log_level == "INFO"

    @pytest.mark.parametrize("argv", [[], ["l"], ["l", "i"], ["l", "i", "o", "x"]])
    def test_wrong_arity_exits_1(
        self, argv: list[str], capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main(argv)
        assert excinfo.value.code == 1
        assert "usage: convert" in capsys.readouterr().err

    def test_invalid_max_path_length(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main(["l", "i", "o", "--max-path-length", "0"])
        assert excinfo.value.code == 1
        assert "invalid option" in capsys.readouterr().err


class TestMain:
    def test_success(
        self,
        example_dataset: tuple[Path, Path, Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        labels, images, out = example_dataset
        assert main([str(labels), str(images), str(out)]) == 0
        assert (out / "3" / "image0.pgm").is_file()
        assert (out / "7" / "image1.pgm").is_file()
        stdout = capsys.readouterr().out
        assert f"Read 2 labels from: {labels}" in stdout
        assert f"Read 2 images from: {images}" in stdout

    def test_success_with_progress(
        self, example_dataset: tuple[Path, Path, Path]
    ) -> None:
        labels, images, out = example_dataset
        assert main([str(labels), str(images), str(out), "--progress"]) == 0

    def test_failure_reports_single_error(
        self,
        example_dataset: tuple[Path, Path, Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        labels, images, out = example_dataset
        assert main([str(images), str(labels), str(out)]) == 1
        err = capsys.readouterr().err
        assert "is not a label file" in err
        assert "Traceback" not in err
        assert len([line for line in err.splitlines() if "ERROR" in line]) == 1
        assert list(out.iterdir()) == []

    def test_missing_output_dir(
        self,
        example_dataset: tuple[Path, Path, Path],
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        labels, images, _ = example_dataset
        code = main([str(labels), str(images), str(tmp_path / "missing")])
        assert code == 1
        assert "does not exist" in capsys.readouterr().err

    def test_log_level_filters_info(
        self,
        example_dataset: tuple[Path, Path, Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        labels, images, out = example_dataset
        assert main([str(labels), str(images), str(out), "--log-level", "ERROR"]) == 0
        assert "Wrote 2 images" not in capsys.readouterr().err

    def test_module_entry_point(self, example_dataset: tuple[Path, Path, Path]) -> None:
        labels, images, out = example_dataset
        result = subprocess.run(
            [sys.executable, "-m", "mnist_converter", str(labels), str(images), str(out)],
            capture_output=True,
            text=True,
            check=False,
        )
        assert result.returncode == 0, result.stderr
        assert (out / "7" / "image1.pgm").read_bytes().startswith(b"P5 2 2 255\n")
