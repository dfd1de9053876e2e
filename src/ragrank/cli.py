from __future__ import annotations

from dataclasses import dataclass, replace
import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from ragrank.config import PRESET_OVERRIDES, RagConfig, load_config, write_default_config
from ragrank.output_models import PassageOutput, RankOutput, metrics_output, passage_output
from ragrank.paths import default_config_path
from ragrank.query.normalize import rewrite_query
from ragrank.service import RagService, RetrievalError
from ragrank.sources import load_passages
from ragrank.util.logging import setup_logging, use_color

app = typer.Typer(help="ragrank: rank and consolidate retrieved passages")


@dataclass(slots=True)
class AppState:
    config: RagConfig
    console: Console
    config_path: Path


def _state(ctx: typer.Context) -> AppState:
    st = ctx.obj
    if not isinstance(st, AppState):
        raise RuntimeError("app state not initialized")
    return st


def _fail(console: Console, message: str, exc: BaseException) -> typer.Exit:
    console.print(f"[red]{message}:[/red] {exc}")
    return typer.Exit(1)


def _preview(text: str, width: int = 80) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= width else flat[: width - 1] + "…"


def _emit_passages(console: Console, rows: list[PassageOutput], title: str) -> None:
    if not rows:
        console.print("[dim]no passages[/dim]")
        return
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("score", justify="right")
    table.add_column("confidence")
    table.add_column("type")
    table.add_column("title")
    table.add_column("source")
    table.add_column("content")
    for idx, row in enumerate(rows, start=1):
        table.add_row(
            str(idx),
            f"{row.scores.overall:.2f}",
            row.metadata.confidence,
            row.metadata.document_type,
            row.title or "",
            row.source,
            _preview(row.content),
        )
    console.print(table)


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[Path | None, typer.Option("--config", help="Config YAML path")] = None,
    preset: Annotated[str | None, typer.Option("--preset", help=f"One of: {', '.join(PRESET_OVERRIDES)}")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose logging")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", help="Only log warnings and errors")] = False,
) -> None:
    setup_logging(verbose, quiet)
    color_on = use_color()
    console = Console(color_system="auto" if color_on else None)
    cfg_path = config.expanduser() if config else default_config_path()
    try:
        cfg = load_config(cfg_path, preset=preset)
    except (ValueError, OSError) as exc:
        raise _fail(console, "invalid config", exc) from exc
    ctx.obj = AppState(config=cfg, console=console, config_path=cfg_path)


@app.command("init-config")
def init_config(
    ctx: typer.Context,
    path: Annotated[Path | None, typer.Option("--path", help="Write config to this path")] = None,
    json_out: Annotated[bool, typer.Option("--json")] = False,
) -> None:
    st = _state(ctx)
    written = write_default_config(path.expanduser() if path else st.config_path, preset=st.config.preset)
    if json_out:
        typer.echo(json.dumps({"config_path": str(written), "preset": st.config.preset}, indent=2))
        return
    st.console.print(f"[green]config:[/green] {written}")


@app.command("rank")
def rank_cmd(
    ctx: typer.Context,
    source: Annotated[Path, typer.Argument(help="JSON/YAML file with passages or a retrieve response")],
    query: Annotated[str, typer.Option("--query", "-q", help="User question for this turn")] = "",
    rewritten: Annotated[str | None, typer.Option("--rewritten", help="Model-rewritten search query")] = None,
    min_length: Annotated[int | None, typer.Option("--min-length", help="Minimum content length")] = None,
    max_docs: Annotated[int | None, typer.Option("--max-docs", "-n", help="Maximum passages to keep")] = None,
    show_all: Annotated[bool, typer.Option("--all", help="Also show arranged passages before filtering")] = False,
    json_out: Annotated[bool, typer.Option("--json")] = False,
) -> None:
    st = _state(ctx)
    try:
        passages = load_passages(source)
    except (ValueError, OSError) as exc:
        raise _fail(st.console, "cannot read passages", exc) from exc

    cfg = st.config
    doc_cfg = cfg.document
    try:
        if min_length is not None:
            doc_cfg = replace(doc_cfg, min_content_length=min_length)
        if max_docs is not None:
            doc_cfg = replace(doc_cfg, max_documents=max_docs)
    except ValueError as exc:
        raise _fail(st.console, "invalid option", exc) from exc
    cfg = replace(cfg, document=doc_cfg)

    rewrite = (lambda _history: rewritten) if rewritten is not None else None
    svc = RagService(cfg, search=lambda _q: passages, rewrite=rewrite)
    try:
        result = svc.retrieve(query)
    except RetrievalError as exc:
        raise _fail(st.console, "retrieval failed", exc) from exc

    scoring = cfg.document.scoring
    rows = [passage_output(p, scoring) for p in result.passages]
    if json_out:
        out = RankOutput(query=result.query, passages=rows, metrics=metrics_output(result.metrics))
        payload = out.model_dump()
        if show_all:
            payload["arranged"] = [passage_output(p, scoring).model_dump() for p in result.arranged]
        typer.echo(json.dumps(payload, indent=2))
        return

    if result.query:
        st.console.print(f"[bold]query:[/bold] {result.query}")
    if show_all:
        _emit_passages(st.console, [passage_output(p, scoring) for p in result.arranged], "arranged")
    _emit_passages(st.console, rows, "passages")
    m = result.metrics
    st.console.print(
        f"[dim]retrieved={m.documents_retrieved} kept={m.documents_after_filtering} "
        f"avg_score={m.average_document_score:.2f} preset={cfg.preset}[/dim]"
    )


@app.command("score")
def score_cmd(
    ctx: typer.Context,
    source: Annotated[Path, typer.Argument(help="JSON/YAML file with passages or a retrieve response")],
    json_out: Annotated[bool, typer.Option("--json")] = False,
) -> None:
    st = _state(ctx)
    try:
        passages = load_passages(source)
    except (ValueError, OSError) as exc:
        raise _fail(st.console, "cannot read passages", exc) from exc

    scoring = st.config.document.scoring
    rows = [passage_output(p, scoring) for p in passages]
    if json_out:
        typer.echo(json.dumps([{"key": r.key, "title": r.title, **r.scores.model_dump()} for r in rows], indent=2))
        return
    table = Table(title="scores")
    for col in ("key", "overall", "confidence", "length", "type", "title"):
        table.add_column(col)
    for r in rows:
        s = r.scores
        table.add_row(r.key, f"{s.overall:.2f}", f"{s.confidence:g}", f"{s.length:g}", f"{s.document_type:g}", f"{s.title:g}")
    st.console.print(table)


@app.command("normalize")
def normalize_cmd(
    ctx: typer.Context,
    raw: Annotated[str, typer.Argument(help="Model-rewritten query")],
    original: Annotated[str, typer.Argument(help="Original user question")],
    json_out: Annotated[bool, typer.Option("--json")] = False,
) -> None:
    st = _state(ctx)
    result = rewrite_query(raw, original, st.config.query)
    if json_out:
        typer.echo(json.dumps({"query": result.query, "status": result.status}, indent=2))
        return
    st.console.print(f"{result.query}  [dim]({result.status})[/dim]")


if __name__ == "__main__":
    app()
