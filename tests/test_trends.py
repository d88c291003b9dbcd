import pytest

from app.models.master_data import Tag
from app.services.analytics_service import calculate_trend, rounded_trend, engagement_rate
from app.services.taxonomy_service import tag_font_size, build_tag_cloud, TaxonomyService


@pytest.mark.parametrize("current,previous,expected", [
    (0, 0, 0),
    (5, 0, 100),
    (10, 5, 100),
    (5, 10, -50),
])
def test_calculate_trend_boundaries(current, previous, expected):
    assert calculate_trend(current, previous) == expected


def test_rounded_trend_keeps_one_decimal():
    assert rounded_trend(4, 3) == 33.3


def test_engagement_rate_handles_zero_views():
    assert engagement_rate(3, 0) == 0
    assert engagement_rate(1, 3) == 33.33


def test_font_size_spans_the_scale():
    assert tag_font_size(1, 1, 11) == 12
    assert tag_font_size(11, 1, 11) == 32
    assert tag_font_size(6, 1, 11) == 22


def test_font_size_rounds_half_up():
    # 12 + 1/8 * 20 = 14.5
    assert tag_font_size(2, 1, 9) == 15


def test_font_size_with_single_count_stays_at_minimum():
    assert tag_font_size(4, 4, 4) == 12


def test_build_tag_cloud_is_monotonic_in_comic_count():
    tags = [
        Tag(id=i, name=f"t{i}", slug=f"t{i}", type="theme", comic_count=count)
        for i, count in enumerate([40, 17, 9, 9, 3, 1])
    ]

    cloud = build_tag_cloud(tags, min_count=1)
    sizes = [item["font_size"] for item in cloud]

    assert sizes == sorted(sizes, reverse=True)
    assert cloud[0]["font_size"] == 32
    assert cloud[-1]["font_size"] == 12


def test_build_tag_cloud_empty():
    assert build_tag_cloud([], min_count=1) == []


def test_tag_cloud_filters_by_min_count(db):
    db.add_all([
        Tag(name="Popular", slug="popular", comic_count=10),
        Tag(name="Rare", slug="rare", comic_count=1),
        Tag(name="Unused", slug="unused", comic_count=0),
    ])
    db.commit()

    cloud = TaxonomyService.tag_cloud(db, min_count=2)

    assert [item["slug"] for item in cloud] == ["popular"]
