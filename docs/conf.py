# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

import sys
from pathlib import Path

# Make `import measura` work without installing the package.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

# -- Project information -----------------------------------------------------

project = 'measura'
copyright = '2025, Parneet Sidhu'
author = 'Parneet Sidhu'
html_title = 'Measura Docs'

# -- General configuration ---------------------------------------------------

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.viewcode',
    'sphinx_copybutton',
    "myst_parser"
]

autodoc_member_order = "bysource"
autodoc_typehints = "description"
autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
}

myst_enable_extensions = ["colon_fence"]

templates_path = ['_templates']
exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']


# -- Options for HTML output -------------------------------------------------

html_theme = "furo"

html_theme_options = {
    "sidebar_hide_name": False,
    "navigation_with_keys": True,
    "top_of_page_buttons": ["edit", "view"],

    # Repo info for the "Edit on GitHub" button
    "source_repository": "https://github.com/parneetsingh022/measura",
    "source_branch": "main",
    "source_directory": "docs/",

    "light_css_variables": {
        "color-brand-primary": "#2b7a78",
        "color-brand-content": "#17252a",
    },
    "dark_css_variables": {
        "color-brand-primary": "#3aafa9",
        "color-brand-content": "#def2f1",
    },
}

html_static_path = ['_static']

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}
