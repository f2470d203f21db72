from pathlib import Path
from conftest import run_cli, load_json, assert_exit_ok, assert_file


def test_max_file_size_skips_large_file(dataset_dir: Path, out_dir: Path):
    large = dataset_dir / "large.env"
    with large.open("w") as f:
        f.write("SKIPPED_PASSWORD=ShouldBeSkippedDueToSize\n")
        f.write("# padding\n" * 2000)

    proc = run_cli(["dir", dataset_dir, "--out", out_dir, "--no-progress", "--max-file-size", "10000"])
    assert_exit_ok(proc)
    records = load_json(assert_file(out_dir / "results.json"))
    assert not any(r["key"] == "SKIPPED_PASSWORD" for r in records)
    assert any(r["key"] == "DB_HOST" for r in records)


def test_include_globs_limit(dataset_dir: Path, out_dir: Path):
    proc = run_cli(["dir", dataset_dir, "--out", out_dir, "--no-progress", "--include", "*.json,*.xml"])
    assert_exit_ok(proc)
    records = load_json(assert_file(out_dir / "results.json"))
    assert records
    assert {Path(r["file"]).suffix for r in records} == {".json", ".xml"}


def test_exclude_dirs(dataset_dir: Path, out_dir: Path):
    vendored = dataset_dir / "node_modules"
    vendored.mkdir()
    (vendored / "pkg.env").write_text("VENDORED_TOKEN=abc123\n")

    proc = run_cli(["dir", dataset_dir, "--out", out_dir, "--no-progress"])
    assert_exit_ok(proc)
    records = load_json(assert_file(out_dir / "results.json"))
    assert not any(r["key"] == "VENDORED_TOKEN" for r in records)
