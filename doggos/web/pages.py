"""HTML rendering helpers for Doggos."""

from __future__ import annotations

from html import escape
from urllib.parse import quote, urlencode

from doggos.dog_api import LOADING
from doggos.models import Dog
from doggos.web.config import APP_TITLE, LOADING_REFRESH_SECONDS
from doggos.web.session import AddDogFlow

DOG_EMOJI = "\U0001F415"
_ICONS = {
    "like": "&#9825;",
    "liked": "&#9829;",
    "remove": "&#128465;",
}


def dog_path(name: str) -> str:
    """Return the detail-screen path for a dog name."""
    return "/dogs/" + quote(name, safe="")


def _list_path(query: str) -> str:
    return f"/?{urlencode({'q': query})}" if query else "/"


def _photo_html(dog: Dog, css_class: str) -> str:
    """Render a dog photo, or the emoji tile when there is none.

    Args:
        dog: Dog being rendered.
        css_class: Size class for the photo box.

    Returns:
        HTML snippet.
    """
    if dog.image_url:
        return (
            f'<img class="photo {css_class}" src="{escape(dog.image_url)}" '
            f'alt="Image of {escape(dog.name)}" referrerpolicy="no-referrer" />'
        )
    return f'<div class="photo photo-fallback {css_class}">{DOG_EMOJI}</div>'


def _document(title: str, body: str, head_extra: str = "") -> bytes:
    page_html = f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{escape(title)}</title>
    <link rel="stylesheet" href="/styles.css" />
    {head_extra}
  </head>
  <body>
    <div class="app">
{body}
    </div>
  </body>
</html>"""
    return page_html.encode("utf-8")


def _back_bar(title: str, back_href: str = "/", action_html: str = "") -> str:
    return f"""
      <header class="topbar">
        <a class="icon-btn" href="{escape(back_href)}" aria-label="Back">&larr;</a>
        <h1>{escape(title)}</h1>
        <div class="topbar-action">{action_html}</div>
      </header>"""


def _hidden_action_form(action: str, name: str, next_path: str, label: str, css: str) -> str:
    return f"""
          <form class="inline-form" method="post" action="{action}">
            <input type="hidden" name="name" value="{escape(name)}" />
            <input type="hidden" name="next" value="{escape(next_path)}" />
            <button class="icon-btn {css}" type="submit" aria-label="{escape(label)}">{_ICONS[css]}</button>
          </form>"""


def render_list_page(
    dogs: list[Dog],
    liked_count: int,
    query: str = "",
    error: str | None = None,
) -> bytes:
    """Render the dog list screen.

    Args:
        dogs: Derived view to show, already filtered and ordered.
        liked_count: Number of liked dogs in ``dogs``.
        query: Current search text.
        error: Optional validation message shown under the search bar.

    Returns:
        UTF-8 encoded HTML document bytes.
    """
    next_path = _list_path(query)
    rows_html = ""
    for dog in dogs:
        like_css = "liked" if dog.is_liked else "like"
        rows_html += f"""
        <li class="dog-row{' is-liked' if dog.is_liked else ''}">
          <a class="dog-link" href="{escape(dog_path(dog.name))}">
            {_photo_html(dog, "photo-small")}
            <span class="dog-text">
              <span class="dog-name">{escape(dog.name)}</span>
              <span class="dog-breed">{escape(dog.breed)}</span>
            </span>
          </a>
          {_hidden_action_form("/like", dog.name, next_path, "Like", like_css)}
          {_hidden_action_form("/remove", dog.name, next_path, "Remove", "remove")}
        </li>"""

    if not rows_html:
        empty_text = "No dogs match your search." if query else "No dogs yet. Add one!"
        rows_html = f'<li class="state state-empty">{escape(empty_text)}</li>'

    error_msg = f'<p class="field-error" role="alert">{escape(error)}</p>' if error else ""
    body = f"""
      <header class="topbar">
        <a class="icon-btn" href="/settings" aria-label="Settings">&#9881;</a>
        <h1>{escape(APP_TITLE)}</h1>
        <a class="icon-btn" href="/profile" aria-label="Profile">&#128100;</a>
      </header>
      <main>
        <div class="search-bar">
          <form class="search-form" method="get" action="/">
            <input class="search-input{' has-error' if error else ''}" type="search" name="q"
                   value="{escape(query)}" placeholder="Search for a dog {DOG_EMOJI}" />
          </form>
          <form class="inline-form" method="post" action="/quick-add">
            <input type="hidden" name="name" value="{escape(query)}" />
            <button class="icon-btn" type="submit" aria-label="Add from search"{'' if query else ' disabled'}>&#8626;</button>
          </form>
          <a class="icon-btn add-link" href="/add" aria-label="Add a dog">+</a>
        </div>
        {error_msg}
        <div class="counters">
          <span class="counter counter-dogs">{DOG_EMOJI} {len(dogs)}</span>
          <span class="counter counter-liked">&#9829; {liked_count}</span>
        </div>
        <ul class="dog-list">
{rows_html}
        </ul>
      </main>"""
    return _document(APP_TITLE, body)


def render_details_page(dog: Dog) -> bytes:
    """Render the detail screen for one dog."""
    delete_html = _hidden_action_form("/remove", dog.name, "/", "Delete", "remove")
    body = f"""{_back_bar("Details", "/", delete_html)}
      <main class="details">
        {_photo_html(dog, "photo-large")}
        <h2 class="dog-name">{escape(dog.name)}</h2>
        <p class="dog-breed">{escape(dog.breed)}</p>
        <p class="dog-liked">{'&#9829; Liked' if dog.is_liked else ''}</p>
      </main>"""
    return _document(f"{dog.name} | {APP_TITLE}", body)


def render_not_found_page(name: str) -> bytes:
    body = f"""{_back_bar("Details")}
      <main class="details">
        <div class="state state-empty">No dog named {escape(name)}.</div>
      </main>"""
    return _document(f"Not found | {APP_TITLE}", body)


def render_add_page(flow: AddDogFlow, name: str = "", breed: str = "") -> bytes:
    """Render the add-a-dog screen for an active flow.

    While the photo is loading, ``add_dog.js`` polls ``/api/add-flow`` and
    swaps in the photo (or a page refresh does, without scripts). Once the
    fetch has settled the page shows the photo or a "No photo" placeholder.

    Args:
        flow: Active add flow.
        name: Previously entered name.
        breed: Previously entered breed.

    Returns:
        UTF-8 encoded HTML document bytes.
    """
    if flow.state == LOADING:
        photo_html = '<div class="spinner" role="progressbar" aria-label="Loading photo"></div>'
        head_extra = (
            f'<noscript><meta http-equiv="refresh" content="{LOADING_REFRESH_SECONDS}" /></noscript>\n'
            '    <script src="/add_dog.js" defer></script>'
        )
    elif flow.image_url:
        photo_html = (
            f'<img class="photo photo-large" src="{escape(flow.image_url)}" '
            'alt="Random dog image" referrerpolicy="no-referrer" />'
        )
        head_extra = ""
    else:
        photo_html = '<div class="photo photo-large photo-empty">No photo</div>'
        head_extra = ""

    error_html = (
        f'<p class="field-error" role="alert">{escape(flow.error)}</p>' if flow.error else ""
    )
    body = f"""
      <header class="topbar">
        <form class="inline-form" method="post" action="/add/cancel">
          <button class="icon-btn" type="submit" aria-label="Back">&larr;</button>
        </form>
        <h1>Add a Dog</h1>
        <div class="topbar-action"></div>
      </header>
      <main class="add-dog">
        <div class="add-photo" data-flow="{escape(flow.flow_id)}">{photo_html}</div>
        <form class="add-form" method="post" action="/add">
          <input type="hidden" name="flow" value="{escape(flow.flow_id)}" />
          <label>Dog's Name
            <input type="text" name="name" value="{escape(name)}" required />
          </label>
          <label>Dog's Breed
            <input type="text" name="breed" value="{escape(breed)}" required />
          </label>
          {error_html}
          <button class="btn primary" type="submit">Add Dog</button>
        </form>
      </main>"""
    return _document(f"Add a Dog | {APP_TITLE}", body, head_extra)


def render_settings_page() -> bytes:
    body = f"""{_back_bar("Settings")}
      <main class="settings"></main>"""
    return _document(f"Settings | {APP_TITLE}", body)


def render_profile_page(owner_name: str) -> bytes:
    body = f"""{_back_bar("Profile")}
      <main class="profile">
        <div class="avatar">&#128100;</div>
        <h2 class="owner-name">{escape(owner_name)}</h2>
      </main>"""
    return _document(f"Profile | {APP_TITLE}", body)
