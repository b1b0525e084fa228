"""
Shared fixtures for the domino test suite.
"""

import os
import tempfile

# Keep the suite independent of any config in the user's home directory
os.environ["DOMINO_CONFIG"] = os.path.join(tempfile.mkdtemp(prefix="domino-tests-"), "config.json")

import pytest

import domino
from domino.utils.config import Config


# ============================================================================
# MARKUP
# ============================================================================


SAMPLE_HTML = (
    '<!DOCTYPE html>'
    '<html lang="en"><head><title>Sample</title></head><body>'
    '<div id="main" class="box wide">'
    '<p class="a">one</p>'
    '<p class="b" data-role="note">two</p>'
    '<span>three</span>'
    '<p lang="fr-CA">four</p>'
    '</div>'
    '<ul><li>1</li><li>2</li><li>3</li><li>4</li><li>5</li></ul>'
    '<form>'
    '<input type="text" name="q" required>'
    '<input type="checkbox" checked>'
    '<input name="plain">'
    '<button disabled>Go</button>'
    '<select><option selected>x</option><option>y</option></select>'
    '</form>'
    '<a href="/x">link</a><a name="anchor">no</a>'
    '<div class="empty"></div>'
    '</body></html>'
)


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def sample_html():
    """Compact document exercising most selector features."""
    return SAMPLE_HTML


@pytest.fixture
def doc(sample_html):
    """Parsed sample document."""
    return domino.from_string(sample_html)


@pytest.fixture
def simple_doc():
    """The two-paragraph document used in the README."""
    return domino.from_string('<div id="x"><p class="a">hi</p><p>bye</p></div>')


@pytest.fixture
def config(tmp_path):
    """Config backed by a file in a temporary directory."""
    return Config(str(tmp_path / "config.json"))
