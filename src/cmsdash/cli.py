import os
import sys
import typer
from pathlib import Path
from pydantic import ValidationError
from cmsdash.config import settings
from cmsdash.domain.exceptions import bytes_to_mb
from cmsdash.logging import configure_logging, get_run_id, logger

app = typer.Typer(no_args_is_help=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    """
    Team CMS command line.
    """
    configure_logging("DEBUG" if verbose else settings.LOG_LEVEL)


@app.command(name="doctor")
def doctor():
    """
    Check system configuration and environment health.
    """
    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\n🩺 Team CMS Doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python: {sys.version.split()[0]}")
    print(f"  Prefix: {sys.prefix}")
    print(f"  Run ID: {get_run_id()}")
    passed += 1

    # ── Check 2: Backend selection ───────────────────────────────────────────
    print("\n[Content Backend]")
    print(f"  CONTENT_BACKEND:             {settings.CONTENT_BACKEND}")
    if settings.CONTENT_BACKEND == "http":
        key_ok = bool(settings.REMOTE_API_KEY and settings.REMOTE_API_KEY.get_secret_value())
        print(f"  REMOTE_API_URL:              {settings.REMOTE_API_URL}")
        if key_ok:
            print("  REMOTE_API_KEY:              ✅ Set")
            passed += 1
        else:
            print("  REMOTE_API_KEY:              ❌ Missing")
            failures.append("REMOTE_API_KEY is not set — add it to .env")
    elif settings.CONTENT_BACKEND == "sqlite":
        print(f"  DATABASE_URL:                {settings.database_url}")
        passed += 1
    else:
        print("  ⚠️  memory backend: content is lost when the API stops")
        passed += 1

    # ── Check 3: Image defaults ──────────────────────────────────────────────
    print("\n[Image Uploads]")
    try:
        cfg = settings.image_config()
        print(f"  Max original size:           {bytes_to_mb(cfg.max_size)}MB")
        print(f"  Max processed size:          {bytes_to_mb(cfg.max_output_size)}MB")
        print(f"  Max width / floor:           {cfg.max_width}px / {cfg.width_floor}px")
        print(f"  Output / quality / floor:    {cfg.output_type} / {cfg.quality} / {cfg.quality_floor}")
        print(f"  When target unmet:           {cfg.on_size_target_unmet}")
        print("  IMAGE_* settings:            ✅ Valid")
        passed += 1
    except ValidationError as e:
        print("  IMAGE_* settings:            ❌ Invalid")
        failures.append(f"IMAGE_* settings are inconsistent: {e.errors()[0]['msg']}")

    # ── Check 4: Data directory ──────────────────────────────────────────────
    print("\n[Data Directory]")
    data_dir = settings.data_dir
    if data_dir.exists() and data_dir.is_dir():
        if os.access(data_dir, os.W_OK):
            print(f"  {str(data_dir) + '/':<28} ✅ Found and writable: {data_dir.absolute()}")
            passed += 1
        else:
            print(f"  {str(data_dir) + '/':<28} ❌ Not writable")
            failures.append(f"{data_dir} is not writable — media uploads will fail")
    else:
        print(f"  {str(data_dir) + '/':<28} ❌ Missing: {data_dir.absolute()}")
        failures.append(f"{data_dir}/ directory not found at {data_dir.absolute()} — run `mkdir {data_dir}`")

    # ── Summary ──────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed — all good ✅")
        print()


image_app = typer.Typer(help="Image upload tools.")
app.add_typer(image_app, name="image")


@image_app.command("ingest")
def ingest(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    max_width: int | None = typer.Option(None, help="Initial width ceiling (px)"),
    quality: float | None = typer.Option(None, help="Initial quality, 0-1"),
    output_type: str | None = typer.Option(None, help="image/jpeg, image/webp or image/png"),
    max_output_size: int | None = typer.Option(None, help="Processed size ceiling (bytes)"),
    best_effort: bool = typer.Option(False, "--best-effort", help="Keep an oversized result instead of failing"),
    out: Path | None = typer.Option(None, help="Write the result here (.txt gets the data URL, else image bytes)"),
):
    """Run the upload pipeline on a local image, exactly as the dashboard would."""
    from cmsdash.imaging import SourceFile, ingest_sync

    overrides = {
        "max_width": max_width,
        "quality": quality,
        "output_type": output_type,
        "max_output_size": max_output_size,
        "on_size_target_unmet": "acceptBestEffort" if best_effort else None,
    }
    try:
        config = settings.image_config(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        print(f"❌ Invalid options: {e.errors()[0]['msg']}")
        raise typer.Exit(code=2)

    source = SourceFile.from_path(path)
    result = ingest_sync(source, config)
    if not result.ok:
        print(f"❌ {result.error.kind}\n{result.message}")
        raise typer.Exit(code=1)

    blob = result.blob
    print(f"✅ {path.name}: {bytes_to_mb(source.byte_length)}MB → {bytes_to_mb(blob.size)}MB")
    print(f"   {blob.width}x{blob.height} {blob.mime_type} q={blob.quality} ({result.iterations} shrink iteration(s))")
    if result.warning is not None:
        print(f"⚠️  {result.warning.message.splitlines()[0]}")

    if out is not None:
        if out.suffix == ".txt":
            out.write_text(result.data_url, encoding="utf-8")
        else:
            out.write_bytes(blob.data)
        print(f"   written to {out}")


db_app = typer.Typer(help="Database management commands.")
app.add_typer(db_app, name="db")


@db_app.command("init")
def init():
    """Create tables for the sqlite content backend."""
    from cmsdash.infra.db.engine import get_engine, init_schema
    try:
        init_schema(get_engine(settings.database_url))
        logger.info("Database initialized successfully.")
        print("✅ Database initialized.")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        print(f"❌ Failed: {e}")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
