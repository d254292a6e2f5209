from types import SimpleNamespace

from bs4 import BeautifulSoup

import doggos.web.pages as pages
from doggos.models import Dog


def soup_of(body: bytes) -> BeautifulSoup:
    return BeautifulSoup(body.decode("utf-8"), "html.parser")


def fake_flow(state="ready", image_url=None, error=None):
    return SimpleNamespace(flow_id="flow-1", state=state, image_url=image_url, error=error)


def test_list_page_renders_rows_in_given_order_with_counters():
    dogs = [
        Dog(name="Bo", breed="Corgi", is_liked=True, image_url="https://x/bo.jpg"),
        Dog(name="Rex", is_liked=True),
        Dog(name="Ann", breed="Pug"),
    ]
    soup = soup_of(pages.render_list_page(dogs, liked_count=2))

    names = [el.get_text() for el in soup.select(".dog-row .dog-name")]
    assert names == ["Bo", "Rex", "Ann"]
    assert soup.select_one(".counter-dogs").get_text().strip().endswith("3")
    assert soup.select_one(".counter-liked").get_text().strip().endswith("2")
    assert soup.select_one(".dog-row img")["src"] == "https://x/bo.jpg"
    assert len(soup.select(".dog-row .photo-fallback")) == 2
    assert soup.select(".dog-row .dog-link")[2]["href"] == "/dogs/Ann"
    assert len(soup.select("button.icon-btn.liked")) == 2
    assert len(soup.select("button.icon-btn.like")) == 1


def test_list_page_escapes_names_and_quotes_links():
    dogs = [Dog(name="<b>Lady & Tramp</b>")]
    html = pages.render_list_page(dogs, liked_count=0).decode("utf-8")
    assert "<b>Lady" not in html
    assert "&lt;b&gt;Lady &amp; Tramp&lt;/b&gt;" in html
    assert "/dogs/%3Cb%3ELady%20%26%20Tramp%3C%2Fb%3E" in html


def test_list_page_keeps_query_and_shows_error():
    soup = soup_of(
        pages.render_list_page([], 0, query="re x", error="A dog with this name already exists.")
    )
    assert soup.select_one("input[name=q]")["value"] == "re x"
    assert soup.select_one(".field-error").get_text() == "A dog with this name already exists."
    assert "has-error" in soup.select_one(".search-input")["class"]
    assert soup.select_one(".state-empty").get_text() == "No dogs match your search."
    next_inputs = {el["value"] for el in soup.select("input[name=next]")}
    assert next_inputs <= {"/?q=re+x"}


def test_list_page_empty_roster_state():
    soup = soup_of(pages.render_list_page([], 0))
    assert soup.select_one(".state-empty").get_text() == "No dogs yet. Add one!"
    assert soup.select_one("form[action='/quick-add'] button").has_attr("disabled")


def test_details_page_shows_photo_or_fallback():
    with_photo = soup_of(
        pages.render_details_page(Dog(name="Bo", breed="Corgi", image_url="https://x/bo.jpg"))
    )
    assert with_photo.select_one("img.photo-large")["src"] == "https://x/bo.jpg"
    assert with_photo.select_one("h2.dog-name").get_text() == "Bo"
    assert with_photo.select_one("p.dog-breed").get_text() == "Corgi"
    assert with_photo.select_one("form[action='/remove'] input[name=name]")["value"] == "Bo"

    without_photo = soup_of(pages.render_details_page(Dog(name="Ann")))
    assert without_photo.select_one(".photo-fallback") is not None
    assert without_photo.select_one("p.dog-breed").get_text() == "Unknown"


def test_add_page_loading_shows_spinner_and_poller():
    soup = soup_of(pages.render_add_page(fake_flow(state="loading")))
    assert soup.select_one(".spinner") is not None
    assert soup.select_one("script[src='/add_dog.js']") is not None
    assert soup.select_one(".add-photo")["data-flow"] == "flow-1"
    assert soup.select_one("input[name=flow]")["value"] == "flow-1"


def test_add_page_ready_shows_photo_or_no_photo():
    with_photo = soup_of(pages.render_add_page(fake_flow(image_url="https://x/r.jpg")))
    assert with_photo.select_one(".add-photo img")["src"] == "https://x/r.jpg"
    assert with_photo.select_one("script") is None

    without_photo = soup_of(pages.render_add_page(fake_flow()))
    assert without_photo.select_one(".photo-empty").get_text() == "No photo"


def test_add_page_keeps_input_and_shows_error():
    soup = soup_of(
        pages.render_add_page(
            fake_flow(error="A dog with this name already exists."), name="Rex", breed="Husky"
        )
    )
    assert soup.select_one("input[name=name]")["value"] == "Rex"
    assert soup.select_one("input[name=breed]")["value"] == "Husky"
    assert soup.select_one(".field-error").get_text() == "A dog with this name already exists."
    assert soup.select_one("form[action='/add/cancel']") is not None


def test_profile_and_settings_pages():
    profile = soup_of(pages.render_profile_page("Jan Brzechwa"))
    assert profile.select_one(".owner-name").get_text() == "Jan Brzechwa"
    settings = soup_of(pages.render_settings_page())
    assert settings.select_one("h1").get_text() == "Settings"
