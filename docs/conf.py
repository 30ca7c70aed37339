"""Sphinx settings for the ollama-prompt manual.

    sphinx-build -b html docs docs/_build
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from ollama_prompt import __version__  # noqa: E402

project = "ollama-prompt"
author = "ollama-prompt contributors"
copyright = f"{date.today().year}, {author}"
version = release = __version__

root_doc = "index"
source_suffix = {".md": "markdown"}
extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx_autodoc_typehints",
]

myst_enable_extensions = ["colon_fence"]
autosummary_generate = True
autodoc_member_order = "bysource"
# gradio is imported lazily inside ollama_prompt.ui
autodoc_mock_imports = ["gradio"]
napoleon_google_docstring = False
napoleon_numpy_docstring = True

exclude_patterns = ["_build"]
html_theme = "sphinx_rtd_theme"
html_title = f"ollama-prompt {__version__}"
