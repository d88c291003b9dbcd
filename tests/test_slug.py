from app.models.comic import Comic
from app.utils.slug import slugify, generate_unique_slug


def test_slugify_lowercases_and_hyphenates():
    assert slugify("Science Fiction") == "science-fiction"


def test_slugify_strips_punctuation_and_collapses_hyphens():
    assert slugify("  Hello,   World!! -- Part 2 ") == "hello-world-part-2"


def test_slugify_drops_non_ascii_letters():
    assert slugify("Café Noir") == "caf-noir"


def test_slugify_returns_empty_for_symbols_only():
    assert slugify("!!!") == ""


def test_generate_unique_slug_probes_suffixes(db, make_comic):
    make_comic(title="Night Watch")
    make_comic(title="Night Watch")

    assert generate_unique_slug(db, Comic, "Night Watch") == "night-watch-2"


def test_generate_unique_slug_ignores_excluded_row(db, make_comic):
    comic = make_comic(title="Night Watch")

    assert generate_unique_slug(db, Comic, "Night Watch", exclude_id=comic.id) == "night-watch"


def test_generate_unique_slug_falls_back_for_empty_title(db):
    assert generate_unique_slug(db, Comic, "???") == "untitled"


def test_colliding_titles_never_share_a_slug(make_comic):
    slugs = {make_comic(title="Echo").slug for _ in range(4)}

    assert slugs == {"echo", "echo-1", "echo-2", "echo-3"}
