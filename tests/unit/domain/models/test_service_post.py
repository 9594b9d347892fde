"""
Unit tests for ServicePost domain model.
"""

import pytest
from app.domain.events.marketplace_events import PostPublished
from app.domain.models.base import ValidationError, BusinessRuleViolation
from app.domain.models.post import (
    ServicePost, PostStatus, PostSection, SectionType, PackageInfo, PackageTier
)


def make_post(**attrs):
    attrs.setdefault("content", "Modern logos for small brands.")
    attrs.setdefault("price", 40.0)
    return ServicePost.create("user-1", attrs.pop("title", "Logo design"), **attrs)


class TestServicePost:
    """Test cases for ServicePost aggregate."""

    def test_create_draft(self):
        """Test posts start as drafts with a stripped title."""
        post = ServicePost.create("user-1", "  Logo design  ")

        assert post.status == PostStatus.DRAFT
        assert post.title == "Logo design"
        assert post.is_owned_by("user-1")
        assert not post.is_owned_by("user-2")

    def test_draft_may_be_incomplete(self):
        """Test drafts need neither content nor price."""
        post = ServicePost.create("user-1", "")

        assert post.content == ""
        assert post.price is None

    def test_negative_price_rejected(self):
        """Test prices cannot be negative."""
        with pytest.raises(ValidationError) as exc_info:
            make_post(price=-1)
        assert exc_info.value.field == "price"

    def test_title_length_limit(self):
        """Test titles are limited to 120 characters."""
        with pytest.raises(ValidationError):
            make_post(title="x" * 121)

    def test_publish(self):
        """Test publishing a complete post raises PostPublished once."""
        post = make_post(category="Design")

        post.publish(["Design", "Writing"])
        post.publish(["Design", "Writing"])

        assert post.is_published
        events = post.pull_events()
        assert len(events) == 1
        assert isinstance(events[0], PostPublished)
        assert events[0].post_id == post.id

    @pytest.mark.parametrize("missing,field", [
        ({"title": ""}, "title"),
        ({"content": "  "}, "content"),
        ({"price": None}, "price"),
    ])
    def test_publish_requires_title_content_and_price(self, missing, field):
        """Test incomplete posts cannot be published."""
        post = make_post(**missing)

        with pytest.raises(ValidationError) as exc_info:
            post.publish()
        assert exc_info.value.field == field
        assert post.status == PostStatus.DRAFT

    def test_publish_rejects_unknown_category(self):
        """Test the category must be a marketplace category."""
        post = make_post(category="Cooking")

        with pytest.raises(ValidationError) as exc_info:
            post.publish(["Design"])
        assert exc_info.value.field == "category"

    def test_published_post_must_stay_complete(self):
        """Test edits cannot strip required content from a published post."""
        post = make_post()
        post.publish()

        with pytest.raises(ValidationError):
            post.update_content(content="")

    def test_update_content_ignores_none(self):
        """Test None values leave fields unchanged."""
        post = make_post()

        post.update_content(title="  New title ", price=None)

        assert post.title == "New title"
        assert post.price == 40.0

    def test_update_content_rejects_unknown_fields(self):
        """Test only editable fields can be changed."""
        post = make_post()

        with pytest.raises(ValidationError):
            post.update_content(user_id="user-2")

    def test_unpublish_and_archive(self):
        """Test status transitions back to draft and to archived."""
        post = make_post()
        post.publish()

        post.unpublish()
        assert post.status == PostStatus.DRAFT
        with pytest.raises(BusinessRuleViolation):
            post.unpublish()

        post.archive()
        assert post.status == PostStatus.ARCHIVED
        with pytest.raises(BusinessRuleViolation):
            post.archive()

    def test_reorder_sections(self):
        """Test sections follow the given order."""
        first = PostSection(type=SectionType.MARKDOWN, content="Intro")
        second = PostSection(type="image", content="https://cdn.example.com/a.png")
        post = make_post()
        post.set_sections([first, second])

        post.reorder_sections([second.id, first.id])

        assert [section.id for section in post.sections] == [second.id, first.id]

    @pytest.mark.parametrize("order", [[], ["a"], ["a", "a"]])
    def test_reorder_sections_must_list_each_section_once(self, order):
        """Test partial or duplicated orders are rejected."""
        post = make_post()
        post.set_sections([
            PostSection(type="markdown", content="One", id="a"),
            PostSection(type="markdown", content="Two", id="b"),
        ])

        with pytest.raises(ValidationError):
            post.reorder_sections(order)

    def test_packages_and_starting_price(self):
        """Test the starting price is the lowest of base and package prices."""
        post = make_post(price=80.0)
        assert post.starting_price == 80.0

        post.set_packages({
            "basic": PackageInfo(title="Basic", price=25.0, delivery_days=3),
            PackageTier.GOLD: PackageInfo(title="Gold", price=60.0, delivery_days=2),
        })

        assert set(post.packages) == {PackageTier.BASIC, PackageTier.GOLD}
        assert post.starting_price == 25.0

    def test_starting_price_without_prices(self):
        """Test a post without any price has no starting price."""
        assert ServicePost.create("user-1", "Draft").starting_price is None

    def test_invalid_package_delivery(self):
        """Test packages must deliver in at least one day."""
        post = make_post()

        with pytest.raises(ValidationError):
            post.set_packages({"basic": PackageInfo(price=10, delivery_days=0)})
