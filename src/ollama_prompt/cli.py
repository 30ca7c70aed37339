"""Command-line interface for ollama-prompt.

Provides:
- `generate`: Send one prompt and print the response.
- `models`: List the suggested model names.
- `ui`: Launch the Gradio prompt form.
- `api`: Serve the FastAPI app with uvicorn.
"""

from typing import Optional

import orjson
import typer
from rich import print
from rich.markup import escape

from .models import MODEL_CHOICES, Success
from .settings import get_settings
from .submission import SubmissionContext, submit

app = typer.Typer(add_completion=False, help="Prompt a local Ollama server")


@app.command()
def generate(
    model: str = typer.Option("", "--model", "-m", help="Ollama model name"),
    prompt: str = typer.Option("", "--prompt", "-p", help="Prompt text"),
    host: Optional[str] = typer.Option(None, help="Ollama host (default: settings)"),
    port: Optional[str] = typer.Option(None, help="Ollama port (default: settings)"),
    as_json: bool = typer.Option(False, "--json", help="Print the outcome as JSON"),
):
    """Send a prompt and print the generated text.

    Exits with status 1 when validation, transport or parsing fails.
    """
    settings = get_settings()
    ctx = SubmissionContext(
        host=host if host is not None else settings.default_host,
        port=port if port is not None else settings.default_port,
        model=model,
        prompt=prompt,
    )
    outcome = submit(ctx)
    if as_json:
        if isinstance(outcome, Success):
            payload = {"status": "success", "text": outcome.text}
        else:
            payload = {"status": "failure", "message": outcome.message, "kind": outcome.kind}
        typer.echo(orjson.dumps(payload).decode("utf-8"))
    elif isinstance(outcome, Success):
        print(escape(outcome.text))
    else:
        print(f"[red]Error:[/red] {escape(outcome.message)}")
    if not isinstance(outcome, Success):
        raise typer.Exit(code=1)


@app.command()
def models():
    """List suggested model names (any name the server knows will work)."""
    for name in MODEL_CHOICES:
        print(name)


@app.command()
def ui(
    host: Optional[str] = typer.Option(
        None,
        help="Host to bind the UI server (use 0.0.0.0 only when intentional)",
    ),
    port: Optional[int] = typer.Option(None, help="Port for the UI server"),
    inbrowser: bool = typer.Option(False, help="Open browser on launch"),
):
    """Launch the Gradio prompt form."""
    from .ui import launch

    launch(server_name=host, server_port=port, inbrowser=inbrowser)


@app.command()
def api(
    host: Optional[str] = typer.Option(None, help="Host to bind the API server"),
    port: Optional[int] = typer.Option(None, help="Port for the API server"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Serve the HTTP API with uvicorn."""
    from .api import run

    run(host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
