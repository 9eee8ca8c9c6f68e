import os

import pytest
from streamlit.testing.v1 import AppTest

APP_PATH = os.path.join(os.path.dirname(__file__), "..", "app.py")


# --- Fixtures ---
@pytest.fixture
def app():
    at = AppTest.from_file(APP_PATH)
    at.run()
    return at


# --- Tests ---
def test_smoke_check(app):
    assert not app.exception
    assert app.title[0].value == "📦 BOM Summary"


def test_summarize_without_files_shows_input_error(app):
    app.button(key="run").click().run()

    assert not app.exception
    assert "No .xlsx or .xlsm files" in app.error[0].value


def test_results_render_from_session_state(app):
    """
    Bypass the file uploader by injecting an aggregate into session_state,
    then verify the results view renders.
    """
    from src.bom_summary import ProcessedData

    app.session_state["processed"] = ProcessedData(
        parts={
            "P1": {
                "description": "Widget",
                "total_quantity": 3,
                "file_quantities": {"JB1234567": 3},
                "tier": "Tier 1",
            }
        },
        file_ids=("JB1234567",),
    )
    app.run()

    assert not app.exception
    assert app.metric[0].value == "1"
    assert app.caption[0].value == "Found 1 unique parts across 1 files."
