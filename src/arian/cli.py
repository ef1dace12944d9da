"""Command-line interface for Arian."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer

from arian.llm import build_backend
from arian.logging_utils import configure_logging
from arian.ocr import ReceiptPipeline
from arian.ocr.images import DEFAULT_MAX_WIDTH, UnsupportedImageError, load_receipt_image
from arian.server.run import load_settings_or_exit
from arian.server.run import main as run_server

app = typer.Typer(help="Arian receipt OCR commands.")


def _build_pipeline() -> ReceiptPipeline:
    settings = load_settings_or_exit()
    configure_logging(settings.log_level, settings.log_format, [settings.gemini_api_key or ""])
    return ReceiptPipeline(build_backend(settings))


async def _parse_files(
    pipeline: ReceiptPipeline,
    paths: List[Path],
    *,
    strict: bool,
    max_width: int,
) -> list[dict[str, object]]:
    results: list[dict[str, object]] = []
    for path in paths:
        entry: dict[str, object] = {"file": path.name, "success": False}
        try:
            image = load_receipt_image(path, max_width=max_width)
        except (OSError, UnsupportedImageError) as exc:
            entry["error"] = f"failed to process image: {exc}"
        else:
            outcome = await pipeline.parse(image, "image/jpeg", strict=strict)
            entry["success"] = outcome.success
            if outcome.data is not None:
                entry["receipt"] = outcome.data.model_dump(mode="json", by_alias=True)
            if outcome.error is not None:
                entry["error"] = f"{outcome.error.code.value}: {outcome.error.message}"
                if outcome.error.raw_response:
                    entry["raw_response"] = outcome.error.raw_response

        status = "✓" if entry["success"] else "✗"
        typer.echo(f"{status} {path.name}", err=True)
        results.append(entry)
    return results


@app.command()
def parse(
    images: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Receipt images."),
    strict: bool = typer.Option(
        True,
        "--strict/--no-strict",
        help="Fail receipts missing merchant, currency, total or item details.",
    ),
    max_width: int = typer.Option(
        DEFAULT_MAX_WIDTH,
        "--max-width",
        min=1,
        help="Shrink wider images to this many pixels before upload.",
    ),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """
    Parse one or more receipt images and print the results as a JSON array.
    """

    pipeline = _build_pipeline()
    results = asyncio.run(_parse_files(pipeline, images, strict=strict, max_width=max_width))
    typer.echo(json.dumps(results, indent=2 if pretty else None, ensure_ascii=False))


@app.command()
def health() -> None:
    """Check whether the configured model backend is reachable."""

    pipeline = _build_pipeline()
    result = asyncio.run(pipeline.health())
    typer.echo(json.dumps(result.model_dump()))
    if result.status != "ok":
        raise typer.Exit(code=1)


@app.command()
def serve() -> None:
    """Run the HTTP server."""

    run_server()


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the `arian` console script."""
    app(prog_name="arian", args=argv)


if __name__ == "__main__":
    main()
