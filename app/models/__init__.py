"""
Models package - Import all models here for easy access
"""
from app.models.user import User
from app.models.master_data import Genre, Tag, Category
from app.models.comic import Comic, ComicPage, comic_genres, comic_tags
from app.models.blog_post import BlogPost
from app.models.like import ComicLike, BlogPostLike
from app.models.subscriber import EmailSubscriber

__all__ = [
    # User
    "User",

    # Taxonomy
    "Genre",
    "Tag",
    "Category",

    # Comic
    "Comic",
    "ComicPage",
    "comic_genres",
    "comic_tags",

    # Blog
    "BlogPost",

    # Likes
    "ComicLike",
    "BlogPostLike",

    # Newsletter
    "EmailSubscriber",
]
