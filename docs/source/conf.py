# Sphinx configuration for the yamlmodel documentation.
#
# pylint: skip-file

import yamlmodel


# -- Project information -----------------------------------------------------

project = yamlmodel.__name__
copyright = yamlmodel.__copyright__
author = yamlmodel.__author__
release = yamlmodel.__version__


# -- General configuration ---------------------------------------------------

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosectionlabel",
    "sphinx.ext.doctest",
    "sphinx.ext.intersphinx",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx_markdown_tables",
    "sphinx_rtd_theme",
    "sphinxcontrib.apidoc",
]

templates_path = ["_templates"]

exclude_patterns = [
    "./docs",
    "./tests",
    "./setup.py",
]

source_suffix = [".rst", ".md"]

add_module_names = False

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
}

# -- Options for HTML output -------------------------------------------------

html_theme = "sphinx_rtd_theme"
html_static_path = []
html_theme_options = {
    "style_nav_header_background": "#CB171E",
}

# -- apidoc ---------------------------------------------------

apidoc_module_dir = "../../yamlmodel"
apidoc_output_dir = "./generated"
apidoc_excluded_paths = exclude_patterns
apidoc_separate_modules = True
apidoc_toc_file = False
apidoc_module_first = True


# -- autodoc -----------------------------------------------------

autoclass_content = "both"
autodoc_member_order = "bysource"
autodoc_default_flags = ["members"]


# -- napoleon --------------------------------------------

# docstrings are plain reST, so only the google/numpy sections napoleon
# recognises are rewritten
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_include_special_with_doc = False
napoleon_use_param = False
napoleon_use_rtype = False


# -- autosectionlabel --------------------------------------------

autosectionlabel_prefix_document = True
