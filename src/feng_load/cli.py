"""FEng package inspector."""
from __future__ import annotations

import io
import json
from pathlib import Path

import click

from .export import export_objects, object_record, package_summary
from .package import PackageReader
from .writer import package_bytes

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}


def _read(path: Path):
    with open(path, "rb") as f:
        reader = PackageReader(f)
        package = reader.read()
    return package, reader.get_scan_stats()


def check_package(path: Path) -> dict:
    """Read, rewrite and re-read a package; clone every object and compare."""
    package, stats = _read(path)
    original = Path(path).read_bytes()
    rewritten = package_bytes(package)
    reread = PackageReader(io.BytesIO(rewritten)).read()

    errors = []
    if package_summary(reread) != package_summary(package):
        errors.append({"code": "E_REWRITE_MISMATCH"})

    for obj in package.objects:
        copy = obj.clone()
        if (
            type(copy) is not type(obj)
            or object_record(copy) != object_record(obj)
            or copy.data != obj.data
            or copy.scripts != obj.scripts
            or copy.message_responses != obj.message_responses
        ):
            errors.append({"code": "E_CLONE_MISMATCH", "guid": obj.guid})

    return {
        "status": "FAIL" if errors else "PASS",
        "error_count": len(errors),
        "errors": errors,
        "byte_identical": original == rewritten,
        "scan_stats": stats,
    }


@click.group()
def main():
    pass


@main.command("dump")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def dump_cmd(path: Path):
    """Print a JSON summary of a package."""
    try:
        package, stats = _read(path)
    except Exception as e:
        click.echo(f"FATAL: {e}")
        raise SystemExit(1)
    result = package_summary(package)
    result["scan_stats"] = stats
    click.echo(json.dumps(result, **CANONICAL_JSON_KW))


@main.command("check")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check_cmd(path: Path):
    """Verify that a package round-trips and that its objects clone faithfully."""
    try:
        result = check_package(path)
    except Exception as e:
        click.echo(f"FATAL: {e}")
        raise SystemExit(1)
    click.echo(json.dumps(result, **CANONICAL_JSON_KW))
    if result["status"] != "PASS":
        raise SystemExit(1)


@main.command("export")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(path_type=Path))
def export_cmd(path: Path, out: Path):
    """Export object and message target tables as parquet."""
    try:
        package, _ = _read(path)
        export_objects(package, out)
    except Exception as e:
        # Fail closed with a single-line reason.
        click.echo(f"FATAL: {e}")
        raise SystemExit(1)
    click.echo(f"PASS: Exported {len(package.objects)} objects to {out}")


if __name__ == "__main__":
    main()
