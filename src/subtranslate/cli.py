"""CLI entry point for subtranslate."""

import asyncio
import logging
import sys
from pathlib import Path

import click

from .config import DEFAULT_OLLAMA_MODEL, PROVIDERS, Config
from .errors import ConfigError
from .models import PipelineSnapshot, PipelineStatus
from .pipeline import TranslationOrchestrator
from .srt import write_srt_text
from .translate import build_translator


class _ProgressPrinter:
    """Echo new log lines and translation progress as snapshots arrive."""

    def __init__(self) -> None:
        self.logs_seen = 0
        self.translated_seen = 0

    def __call__(self, snapshot: PipelineSnapshot) -> None:
        if len(snapshot.logs) < self.logs_seen:
            self.logs_seen = 0
        for line in snapshot.logs[self.logs_seen:]:
            click.echo(f"  {line}")
        self.logs_seen = len(snapshot.logs)

        translated = snapshot.translated_count
        if translated != self.translated_seen and snapshot.status is PipelineStatus.TRANSLATING:
            click.echo(f"  Translated {translated}/{len(snapshot.original_subtitles)}")
        self.translated_seen = translated


@click.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output SRT file path (default: translated/<input name>)",
)
@click.option(
    "--provider",
    type=click.Choice(PROVIDERS),
    default=None,
    help="Translation backend (default: SUBTRANSLATE_PROVIDER or openai)",
)
@click.option("--model", default=None, help="Model identifier (default: gemini-2.5-flash)")
@click.option("--api-key", default=None, help="API key (default: GEMINI_API_KEY / OPENAI_API_KEY)")
@click.option("--base-url", default=None, help="OpenAI-compatible endpoint URL")
@click.option("--to", "target_language", default=None, help="Target language name (default: Persian)")
@click.option("--header", "header_text", default=None, help="Text of a cue added before the first subtitle")
@click.option("--header-color", default=None, help="Header font color (default: #33b3b3)")
@click.option("--footer", "footer_text", default=None, help="Text of a cue added after the last subtitle")
@click.option("--footer-color", default=None, help="Footer font color (default: #808080)")
@click.option(
    "--renumber",
    "renumber_output",
    is_flag=True,
    help="Renumber output cues contiguously from 1",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(
    input_path: str,
    output: str | None,
    provider: str | None,
    model: str | None,
    api_key: str | None,
    base_url: str | None,
    target_language: str | None,
    header_text: str | None,
    header_color: str | None,
    footer_text: str | None,
    footer_color: str | None,
    renumber_output: bool,
    verbose: bool,
) -> None:
    """Translate an SRT subtitle file with an LLM.

    \b
    Examples:
      subtranslate movie.srt
      subtranslate movie.srt --to French --model gemini-2.5-pro
      subtranslate movie.srt --provider ollama --model llama3.1:8b
      subtranslate movie.srt --header "Translated by subtranslate" --footer "The end"
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = Config.from_env()
    except ConfigError as e:
        raise click.ClickException(str(e))

    overrides = {
        "provider": provider,
        "model": model,
        "api_key": api_key,
        "base_url": base_url,
        "target_language": target_language,
        "header_text": header_text,
        "header_color": header_color,
        "footer_text": footer_text,
        "footer_color": footer_color,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)
    config.renumber = renumber_output
    if provider == "ollama" and model is None:
        config.model = DEFAULT_OLLAMA_MODEL

    if config.provider == "openai" and not config.has_api_key():
        raise click.ClickException(
            "GEMINI_API_KEY (or OPENAI_API_KEY) environment variable required. "
            "Use --api-key, or --provider ollama for offline mode."
        )

    input_p = Path(input_path)
    output_p = Path(output) if output else Path("translated") / input_p.name

    click.echo(f"Subtitles: {input_path}")
    click.echo(f"Translation: → {config.target_language} ({config.provider}, {config.model})")
    click.echo(f"Output: {output_p}")
    click.echo()

    orchestrator = TranslationOrchestrator(build_translator(config), config)
    orchestrator.subscribe(_ProgressPrinter())

    snapshot = orchestrator.select_file(input_p)
    if snapshot.status is not PipelineStatus.ERROR:
        snapshot = asyncio.run(orchestrator.translate())

    if snapshot.status is not PipelineStatus.DONE:
        click.secho(f"Error: {snapshot.error_message}", fg="red", err=True)
        sys.exit(1)

    write_srt_text(snapshot.translated_content or "", output_p)

    click.echo()
    click.echo(f"Saved to {output_p} ({snapshot.elapsed_seconds}s)")
    click.secho("Done!", fg="green", bold=True)


if __name__ == "__main__":
    main()
