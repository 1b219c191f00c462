from coursehub import specifications

from .utils import make_course


def test_every_spec_requires_published():
    for spec in (
        specifications.all_published(),
        specifications.by_search("x"),
        specifications.by_category(1),
        specifications.by_level("BEGINNER"),
        specifications.by_id_detail(1),
        specifications.featured(),
    ):
        where, _, _ = spec.to_sql()
        assert where.startswith("c.is_published")


def test_search_spec_matches_any_text_field_case_insensitively():
    spec = specifications.by_search("PyThOn")

    assert spec.matches(make_course(title="Intro to Python"))
    assert spec.matches(make_course(title="x", description="all about python"))
    assert spec.matches(make_course(title="x", description="", short_description="PYTHON tips"))
    assert not spec.matches(make_course(title="Rust", description="", short_description=""))
    assert not spec.matches(make_course(title="Python", is_published=False))


def test_search_spec_escapes_like_wildcards():
    where, params, order_by = specifications.by_search("100%_off").to_sql()

    assert "ILIKE" in where
    assert params == ["%100\\%\\_off%"] * 3
    assert order_by is None


def test_category_and_level_specs():
    assert specifications.by_category(2).matches(make_course(category_id=2))
    assert not specifications.by_category(2).matches(make_course(category_id=3))
    assert specifications.by_level("ADVANCED").matches(make_course(level="ADVANCED"))
    assert not specifications.by_level("ADVANCED").matches(make_course(level="BEGINNER"))

    where, params, _ = specifications.by_category(2).to_sql()
    assert "c.category_id = %s" in where
    assert params == [2]


def test_featured_spec_orders_newest_first():
    where, params, order_by = specifications.featured().to_sql("")

    assert where == "is_published AND is_featured"
    assert params == []
    assert order_by == "created_at DESC"
    assert not specifications.featured().matches(make_course(is_featured=False))


def test_id_detail_spec_hides_unpublished_courses():
    spec = specifications.by_id_detail(9)

    assert spec.matches(make_course(id=9))
    assert not spec.matches(make_course(id=9, is_published=False))
    assert not spec.matches(make_course(id=10))
