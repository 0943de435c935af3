import pytest

from conftest import FakeElement
from techjobs.core.extract import extract_attribute, extract_text


@pytest.mark.asyncio
async def test_first_matching_selector_wins():
    node = FakeElement(
        children={
            ".b": [FakeElement(text="  Data Intern  ")],
            ".c": [FakeElement(text="Ignored")],
        }
    )
    assert await extract_text(node, [".a", ".b", ".c"]) == "Data Intern"


@pytest.mark.asyncio
async def test_no_match_returns_empty_string():
    node = FakeElement(children={".other": [FakeElement(text="x")]})
    assert await extract_text(node, [".a", ".b"]) == ""
    assert await extract_text(node, []) == ""


@pytest.mark.asyncio
async def test_blank_text_falls_through_to_next_selector():
    node = FakeElement(
        children={
            "h2": [FakeElement(text="   ")],
            "h3": [FakeElement(text="Platform Intern")],
        }
    )
    assert await extract_text(node, ["h2", "h3"]) == "Platform Intern"


@pytest.mark.asyncio
async def test_erroring_selector_is_skipped():
    node = FakeElement(
        children={".ok": [FakeElement(text="Acme")]},
        broken={"div[[bad"},
    )
    assert await extract_text(node, ["div[[bad", ".ok"]) == "Acme"


@pytest.mark.asyncio
async def test_xpath_selectors_get_engine_prefix():
    node = FakeElement(children={"xpath=//h2": [FakeElement(text="Via XPath")]})
    assert await extract_text(node, ["//h2"]) == "Via XPath"


@pytest.mark.asyncio
async def test_extract_attribute():
    node = FakeElement(
        children={
            "a.missing-href": [FakeElement(attrs={})],
            "a.job": [FakeElement(attrs={"href": " /jobs/42 "})],
        }
    )
    assert await extract_attribute(node, ["a.missing-href", "a.job"], "href") == "/jobs/42"
    assert await extract_attribute(node, ["a.job"], "data-id") == ""
