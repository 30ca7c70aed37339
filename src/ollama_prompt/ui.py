"""Gradio form for sending a prompt to a local Ollama server.

Run from the CLI after install:

- ``ollama-prompt-ui`` to launch directly
- or ``ollama-prompt ui`` through the Typer app

Each browser session keeps its own :class:`SubmissionContext` in a
``gr.State``. The send button is disabled while a request is in flight and
re-enabled once the outcome is shown.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .models import MODEL_CHOICES
from .settings import get_settings
from .submission import SubmissionContext, submit

SEND_LABEL = "Send Prompt"
BUSY_LABEL = "Generating..."


def _run_submission(
    ctx: Optional[SubmissionContext],
    host: str,
    port: str,
    model: Optional[str],
    prompt: str,
) -> Tuple[SubmissionContext, str, str]:
    """Copy the form fields into the session context and submit once.

    Returns
    -------
    ctx:
        The updated session context.
    response:
        Response text, empty on failure.
    error:
        Error message, empty on success.
    """
    if ctx is None:
        settings = get_settings()
        ctx = SubmissionContext(host=settings.default_host, port=settings.default_port)
    ctx.host = host or ""
    ctx.port = port or ""
    ctx.model = model or ""
    ctx.prompt = prompt or ""
    submit(ctx)
    return ctx, ctx.response, ctx.error


def _button_state(busy: bool) -> Dict[str, Any]:
    return {"value": BUSY_LABEL if busy else SEND_LABEL, "interactive": not busy}


def build_interface():
    """Construct and return the Gradio Blocks interface."""
    import gradio as gr  # local import to avoid hard dependency at import time

    settings = get_settings()

    def _lock():
        return gr.update(**_button_state(True))

    def _unlock():
        return gr.update(**_button_state(False))

    def _submit(ctx, host, port, model, prompt):
        ctx, response, error = _run_submission(ctx, host, port, model, prompt)
        return (
            ctx,
            gr.update(value=response, visible=bool(response)),
            gr.update(value=error, visible=bool(error)),
        )

    with gr.Blocks(title="Ollama Chat Interface") as demo:
        gr.Markdown(
            """
            # Ollama Chat Interface
            Connect to your Ollama server and chat with AI models.
            """
        )
        ctx_state = gr.State(None)

        with gr.Row():
            host = gr.Textbox(
                value=settings.default_host, label="IP Address", placeholder="localhost"
            )
            port = gr.Textbox(
                value=settings.default_port, label="Port", placeholder="11434"
            )
        model = gr.Dropdown(
            choices=MODEL_CHOICES,
            value=None,
            label="Model",
            info="Select a model",
            allow_custom_value=True,
        )
        prompt = gr.Textbox(
            value="", label="Prompt", placeholder="Enter your prompt here...", lines=4
        )
        send_btn = gr.Button(SEND_LABEL, variant="primary")

        error_box = gr.Markdown(visible=False)
        response_box = gr.Textbox(
            label="Response", lines=10, interactive=False, visible=False
        )

        send_btn.click(_lock, outputs=[send_btn], queue=False).then(
            _submit,
            inputs=[ctx_state, host, port, model, prompt],
            outputs=[ctx_state, response_box, error_box],
        ).then(_unlock, outputs=[send_btn], queue=False)

    return demo


def launch(
    server_name: Optional[str] = None,
    server_port: Optional[int] = None,
    inbrowser: bool = False,
) -> None:
    """Launch the Gradio UI.

    Parameters
    ----------
    server_name:
        Host interface for the Gradio server (settings default when unset).
    server_port:
        Port for the Gradio server (settings default when unset).
    inbrowser:
        Open a browser window on launch when True.
    """
    settings = get_settings()
    app = build_interface()
    app.launch(
        server_name=server_name or settings.ui_host,
        server_port=server_port or settings.ui_port,
        inbrowser=inbrowser,
    )
