from app.models.master_data import Genre, Tag, Category
from app.services.blog_service import BlogService
from app.services.comic_service import ComicService
from app.services.counter_service import CounterService


def _count(db, obj, field="comic_count"):
    db.refresh(obj)
    return getattr(obj, field)


def test_comic_create_increments_genres_and_tags(db, make_comic, genre, tag):
    make_comic(tags=[tag.id])
    make_comic(title="Second", tags=[tag.id])

    assert _count(db, genre) == 2
    assert _count(db, tag) == 2


def test_comic_update_moves_counts_between_genres(db, make_comic, genre):
    other = Genre(name="Drama", slug="drama")
    db.add(other)
    db.commit()

    comic = make_comic()
    ComicService.update_comic(db, comic, {"genres": [other.id]})

    assert _count(db, genre) == 0
    assert _count(db, other) == 1


def test_soft_delete_releases_counts(db, make_comic, genre, tag):
    comic = make_comic(tags=[tag.id])
    ComicService.soft_delete(db, comic)

    assert _count(db, genre) == 0
    assert _count(db, tag) == 0


def test_decrement_never_goes_negative(db, genre):
    CounterService.decrement(db, Genre, "comic_count", [genre.id])
    db.commit()

    assert _count(db, genre) == 0


def test_post_lifecycle_keeps_category_count(db, make_post, category):
    other = Category(name="Guides", slug="guides")
    db.add(other)
    db.commit()

    post = make_post()
    assert _count(db, category, "post_count") == 1

    BlogService.update_post(db, post, {"category": "Guides"})
    assert _count(db, category, "post_count") == 0
    assert _count(db, other, "post_count") == 1

    BlogService.soft_delete(db, post)
    assert _count(db, other, "post_count") == 0


def test_recount_all_repairs_drift(db, make_comic, make_post, genre, tag, category):
    make_comic(tags=[tag.id])
    make_post()

    genre.comic_count = 9
    tag.comic_count = 0
    category.post_count = 4
    db.commit()

    fixed = CounterService.recount_all(db)

    assert fixed == {"genres": 1, "tags": 1, "categories": 1}
    assert _count(db, genre) == 1
    assert _count(db, tag) == 1
    assert _count(db, category, "post_count") == 1


def test_recount_all_ignores_deleted_comics(db, make_comic, genre):
    comic = make_comic()
    ComicService.soft_delete(db, comic)
    db.query(Genre).filter(Genre.id == genre.id).update({Genre.comic_count: 5})
    db.commit()

    CounterService.recount_all(db)

    assert _count(db, genre) == 0
    assert db.query(Tag).count() == 0
