from app.models.like import ComicLike
from app.services.like_service import LikeService, COMIC_LIKES, BLOG_POST_LIKES


def _likes_and_rows(db, comic):
    db.refresh(comic)
    rows = db.query(ComicLike).filter(ComicLike.comic_id == comic.id).count()
    return comic.likes, rows


def test_like_is_idempotent_per_identifier(db, make_comic):
    comic = make_comic()

    assert LikeService.like(db, COMIC_LIKES, comic.id, "reader-1") is True
    assert LikeService.like(db, COMIC_LIKES, comic.id, "reader-1") is False

    assert _likes_and_rows(db, comic) == (1, 1)
    assert LikeService.has_liked(db, COMIC_LIKES, comic.id, "reader-1")


def test_unlike_without_like_is_a_noop(db, make_comic):
    comic = make_comic()

    assert LikeService.unlike(db, COMIC_LIKES, comic.id, "stranger") is False
    assert _likes_and_rows(db, comic) == (0, 0)


def test_likes_track_distinct_identifiers(db, make_comic):
    comic = make_comic()

    for identifier in ("a", "b", "c", "a", "b"):
        LikeService.like(db, COMIC_LIKES, comic.id, identifier)
    LikeService.unlike(db, COMIC_LIKES, comic.id, "b")
    LikeService.unlike(db, COMIC_LIKES, comic.id, "b")
    LikeService.like(db, COMIC_LIKES, comic.id, "d")

    likes, rows = _likes_and_rows(db, comic)
    assert likes == rows == 3
    assert not LikeService.has_liked(db, COMIC_LIKES, comic.id, "b")


def test_blog_post_likes_are_separate_from_comic_likes(db, make_comic, make_post):
    comic = make_comic()
    post = make_post()

    LikeService.like(db, BLOG_POST_LIKES, post.id, "reader-1")

    assert not LikeService.has_liked(db, COMIC_LIKES, comic.id, "reader-1")
    db.refresh(post)
    assert post.likes == 1
    assert len(post.liked_by) == 1


def test_increment_views_is_left_to_caller_to_commit(db, make_comic):
    comic = make_comic()

    LikeService.increment_views(db, type(comic), comic.id)
    LikeService.increment_views(db, type(comic), comic.id)
    db.commit()

    db.refresh(comic)
    assert comic.views == 2
