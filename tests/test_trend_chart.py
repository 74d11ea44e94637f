import os
import subprocess
import sys
import time
import urllib.request
from pathlib import Path

import pytest

pytestmark = pytest.mark.e2e

sync_api = pytest.importorskip("playwright.sync_api")

ROOT = Path(__file__).resolve().parents[1]
PORT = 8510
URL = f"http://localhost:{PORT}"


def wait_for_server(url: str, timeout: float = 60.0) -> None:
    start = time.time()
    while time.time() - start < timeout:
        try:
            with urllib.request.urlopen(url):
                return
        except Exception:
            time.sleep(0.5)
    raise TimeoutError(f"Server at {url} not ready after {timeout} seconds.")


@pytest.fixture(scope="session")
def streamlit_server():
    env = os.environ.copy()
    env["STREAMLIT_SERVER_HEADLESS"] = "true"
    env["STREAMLIT_SERVER_PORT"] = str(PORT)
    env["SUPABASE_DISABLE"] = "1"

    process = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "streamlit",
            "run",
            "dashboard.py",
            f"--server.port={PORT}",
            "--server.headless=true",
        ],
        cwd=ROOT,
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
    )

    wait_for_server(URL)
    yield
    process.terminate()
    try:
        process.wait(timeout=10)
    except subprocess.TimeoutExpired:
        process.kill()


@pytest.fixture(scope="session")
def browser(streamlit_server):
    with sync_api.sync_playwright() as playwright:
        browser = playwright.chromium.launch()
        yield browser
        browser.close()


@pytest.fixture()
def page(browser):
    page = browser.new_page()
    page.goto(URL, wait_until="networkidle")
    page.wait_for_selector("text=Volume over time")
    yield page
    page.close()


CHART_SELECTOR = '[data-testid="stVegaLiteChart"]'
VOLUME_TITLE = "Ticket volume"
EXPECTED_SELECTOR = {
    "Line": "svg .mark-line path",
    "Bar": "svg .mark-rect path",
    "Area": "svg .mark-area path",
}

FIND_VOLUME_CHART = """([selector, title]) => Array.from(document.querySelectorAll(selector))
    .find((node) => node.textContent.includes(title))"""


def get_mark_counts(page) -> dict:
    return page.evaluate(
        f"""(args) => {{
            const node = ({FIND_VOLUME_CHART})(args);
            if (!node) return {{line: 0, rect: 0, area: 0}};
            return {{
                line: node.querySelectorAll('svg .mark-line path').length,
                rect: node.querySelectorAll('svg .mark-rect path').length,
                area: node.querySelectorAll('svg .mark-area path').length
            }};
        }}""",
        [CHART_SELECTOR, VOLUME_TITLE],
    )


@pytest.mark.parametrize("choice", ["Line", "Bar", "Area"])
def test_volume_chart_mark_switch(page, choice):
    group = page.locator('div[role="radiogroup"][aria-label="Trend chart"]')
    group.locator("label").filter(has_text=choice).click()

    page.wait_for_function(
        f"""([selector, title, expected]) => {{
            const node = ({FIND_VOLUME_CHART})([selector, title]);
            return Boolean(node) && node.querySelectorAll(expected).length > 0;
        }}""",
        arg=[CHART_SELECTOR, VOLUME_TITLE, EXPECTED_SELECTOR[choice]],
    )

    counts = get_mark_counts(page)
    expected_key = {"Line": "line", "Bar": "rect", "Area": "area"}[choice]
    assert (
        counts[expected_key] > 0
    ), f"Expected {choice} chart to have marks, got counts {counts}"


def test_trends_tab_shows_forecast_caption(page):
    page.get_by_role("tab", name="Trends").click()
    page.wait_for_selector("text=Forecast Periods: 3")
    assert page.locator("text=Method: Linear Regression").count() > 0
