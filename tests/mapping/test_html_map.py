# tests/mapping/test_html_map.py
from pathlib import Path

import pytest
from pydantic import ValidationError

from purgecss.mapping.core import ElementRecord
from purgecss.mapping.html_map import HtmlMap

FIXTURE = Path(__file__).resolve().parent.parent / "fixtures" / "source.html"


@pytest.fixture
def html_map() -> HtmlMap:
    """Een map van het standaard testdocument (met <head>, commentaar en tekst)."""
    return HtmlMap(FIXTURE.read_text(encoding="utf-8"))


def _tags(view):
    return [data["tag"] for data in view.values()]


def test_parses_a_html_document(html_map):
    """html, body, div, p, p, strong, em en footer; de <head> telt niet mee."""
    assert len(html_map.get_elements()) == 8
    assert len(html_map.get_tags()) == 7
    assert len(html_map) == 8


def test_can_find_if_a_tag_is_used(html_map):
    assert html_map.uses_tag("html")
    assert html_map.uses_tag("p")
    assert not html_map.uses_tag("img")


def test_tag_lookups_are_normalised(html_map):
    assert html_map.uses_tag(" P ")
    assert html_map.tag_handles("FOOTER") == html_map.tag_handles("footer")


def test_can_find_if_a_class_is_used(html_map):
    assert html_map.uses_class("square")
    assert html_map.uses_class("red")
    assert not html_map.uses_class("rounded")


def test_can_find_if_an_id_is_used(html_map):
    assert html_map.uses_id("content")
    assert not html_map.uses_id("footer")


def test_head_section_is_never_mapped(html_map):
    """Alles binnen <head> ontbreekt in de tabel, de indexen en de hiërarchie."""
    for tag in ("head", "meta", "title", "link"):
        assert not html_map.uses_tag(tag)
    assert not html_map.uses_class("hidden")
    assert not html_map.uses_id("title")
    assert all(record.tag != "head" for record in html_map.get_elements().values())


def test_uses_law_matches_handle_lookups(html_map):
    for tag in ("html", "p", "img", "head"):
        assert html_map.uses_tag(tag) == bool(html_map.tag_handles(tag))
    for cls in ("square", "intro", "rounded"):
        assert html_map.uses_class(cls) == bool(html_map.class_handles(cls))
    for element_id in ("content", "title", "missing"):
        assert html_map.uses_id(element_id) == bool(html_map.id_handles(element_id))


def test_absent_keys_return_empty_sequences(html_map):
    assert html_map.tag_handles("table") == ()
    assert html_map.id_handles("nope") == ()
    assert html_map.class_handles("nope") == ()


def test_element_records(html_map):
    div = html_map.element(html_map.tag_handles("div")[0])
    assert isinstance(div, ElementRecord)
    assert div.tag == "div"
    assert div.declared_id == "content"
    assert div.classes == ("square", "red")
    assert div.attrs == {}

    intro = html_map.element(html_map.class_handles("intro")[0])
    assert intro.tag == "p"
    assert intro.declared_id is None
    assert intro.attrs == {"data-role": "lead"}

    footer = html_map.element(html_map.tag_handles("footer")[0])
    assert footer.classes == ()
    assert footer.attrs == {"data-year": "2024", "hidden": ""}


def test_handles_are_not_markup_ids(html_map):
    assert html_map.element("content") is None
    div_handle = html_map.id_handles("content")[0]
    assert div_handle != "content"
    assert div_handle in html_map


def test_unknown_handle_returns_none(html_map):
    assert html_map.element("does-not-exist") is None
    assert html_map.get_element("does-not-exist") is None
    assert html_map.descendants("does-not-exist") is None
    assert html_map.siblings("does-not-exist") is None
    assert html_map.children("does-not-exist") is None
    assert "does-not-exist" not in html_map


def test_can_get_descendants_of_an_element(html_map):
    body = html_map.get_tags()["body"][0]
    descendants = html_map.descendants(body)

    assert _tags(descendants) == ["div", "p", "footer"]

    # <p> inside the square
    p_inner = html_map.get_tags()["p"][0]
    assert html_map.descendants(p_inner) == {}

    # <p> outside the square
    p_outer = html_map.get_tags()["p"][1]
    assert _tags(html_map.descendants(p_outer)) == ["strong", "em"]


def test_descendants_are_nested(html_map):
    body = html_map.tag_handles("body")[0]
    descendants = html_map.descendants(body)

    div_handle = html_map.tag_handles("div")[0]
    div_view = descendants[div_handle]
    assert div_view["declared_id"] == "content"
    assert _tags(div_view["children"]) == ["p"]

    footer_view = descendants[html_map.tag_handles("footer")[0]]
    assert "children" not in footer_view

    inner_p = div_view["children"][html_map.tag_handles("p")[0]]
    assert "children" not in inner_p


def test_can_get_siblings_of_an_element(html_map):
    footer = html_map.get_tags()["footer"][0]
    assert _tags(html_map.siblings(footer)) == ["div", "p"]

    p_inner = html_map.get_tags()["p"][0]
    assert html_map.siblings(p_inner) == {}

    strong = html_map.get_tags()["strong"][0]
    assert _tags(html_map.siblings(strong)) == ["em"]


def test_siblings_carry_their_subtrees(html_map):
    footer = html_map.tag_handles("footer")[0]
    siblings = html_map.siblings(footer)
    p_outer = html_map.tag_handles("p")[1]
    assert _tags(siblings[p_outer]["children"]) == ["strong", "em"]


def test_root_has_no_siblings(html_map):
    root = html_map.get_roots()[0]
    assert html_map.element(root).tag == "html"
    assert html_map.siblings(root) == {}
    assert html_map.parent(root) is None


def test_hierarchy_shape(html_map):
    hierarchy = html_map.get_hierarchy()
    html_handle = html_map.tag_handles("html")[0]
    body_handle = html_map.tag_handles("body")[0]

    assert list(hierarchy) == [html_handle]
    assert list(hierarchy[html_handle]) == [body_handle]
    assert hierarchy[html_handle][body_handle][html_map.tag_handles("footer")[0]] == {}


def test_getters_return_copies(html_map):
    html_map.get_tags()["p"].append("bogus")
    html_map.get_elements().clear()

    assert "bogus" not in html_map.tag_handles("p")
    assert len(html_map) == 8


def test_records_are_read_only(html_map):
    """The map cannot be changed through the records it hands out."""
    footer = html_map.tag_handles("footer")[0]
    record = html_map.element(footer)

    with pytest.raises(TypeError):
        record.attrs["data-year"] = "1999"
    with pytest.raises(ValidationError):
        record.tag = "div"

    assert html_map.element(footer).attrs == {"data-year": "2024", "hidden": ""}
    assert html_map.get_elements()[footer].tag == "footer"


def test_views_are_detached_from_records(html_map):
    body = html_map.tag_handles("body")[0]
    footer = html_map.tag_handles("footer")[0]

    view = html_map.descendants(body)
    view[footer]["attrs"]["data-year"] = "1999"
    view[footer]["tag"] = "div"

    assert html_map.element(footer).attrs["data-year"] == "2024"
    assert html_map.descendants(body)[footer]["tag"] == "footer"
