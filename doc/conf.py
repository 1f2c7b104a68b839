import datetime
import os
import sys

sys.path.insert(0, os.path.abspath(".."))

import cssbuilder

def copyright_years():
    this_year = datetime.date.today().year
    if this_year == 2026:
        return str(this_year)
    else:
        return "2026\u2013%s" % this_year

project = "cssbuilder"
copyright = "%s, cssbuilder contributors" % copyright_years()
author = "cssbuilder contributors"
version = "dev"
release = "dev"
master_doc = "index"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx_autodoc_typehints",
    "sphinx.ext.intersphinx",
    "sphinx.ext.viewcode",
    "sphinx.ext.doctest",
]

# autodoc
autodoc_default_options = {"members": True, "undoc-members": True}
autodoc_member_order = "bysource"

# doctest
doctest_global_setup = "import cssbuilder"

# intersphinx
intersphinx_mapping = {'python': ('https://docs.python.org/3', None)}

# html
html_theme = "python_docs_theme"
html_last_updated_fmt = "%b %d, %Y"
html_sidebars = {"**": ["localtoc.html", "sourcelink.html"]}
html_theme_options = {"collapsiblesidebar": True}
