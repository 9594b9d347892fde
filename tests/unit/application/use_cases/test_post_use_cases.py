"""
Unit tests for service post use cases.
"""

import pytest
from app.application.dto.post_dto import (
    CreatePostRequestDTO, UpdatePostRequestDTO, ListMyPostsRequestDTO,
    ReorderSectionsRequestDTO, UploadPostImageRequestDTO
)
from app.application.use_cases.post_use_cases import (
    CreatePostUseCase,
    UpdatePostUseCase,
    GetMyPostUseCase,
    PublishPostUseCase,
    UnpublishPostUseCase,
    ArchivePostUseCase,
    DeletePostUseCase,
    ListMyPostsUseCase,
    ReorderSectionsUseCase,
    UploadPostImageUseCase
)
from app.domain.models.profile import AccountStatus, UserRole


def complete_post(**overrides):
    data = {
        "title": "Logo design",
        "content": "I will design a modern logo for your brand.",
        "price": 50,
        "category": "Design",
    }
    data.update(overrides)
    return CreatePostRequestDTO(**data)


class TestCreatePostUseCase:
    """Test cases for post creation rules."""

    def _use_case(self, repos, user_id, roles=("freelancer",)):
        return CreatePostUseCase(repos.posts, repos.profiles, repos.applications).set_current_user(
            user_id, list(roles)
        )

    @pytest.mark.asyncio
    async def test_approved_freelancer_creates_draft(self, repos, seed):
        """Test drafts are created without publishing."""
        seed.approved_freelancer("seller-1")

        result = await self._use_case(repos, "seller-1").execute(CreatePostRequestDTO(title="Half done"))

        assert result.success is True
        assert result.data.status == "draft"
        assert result.data.user_id == "seller-1"

    @pytest.mark.asyncio
    async def test_create_and_publish(self, repos, seed, event_dispatcher):
        """Test publishing right away raises PostPublished."""
        seed.approved_freelancer("seller-1")

        result = await self._use_case(repos, "seller-1").execute(complete_post(publish=True))

        assert result.data.status == "published"
        assert event_dispatcher.get_event_log(limit=1)[0]["event_type"] == "PostPublished"

    @pytest.mark.asyncio
    async def test_publish_incomplete_post_fails(self, repos, seed):
        """Test a post without price cannot be published at creation."""
        seed.approved_freelancer("seller-1")

        result = await self._use_case(repos, "seller-1").execute(complete_post(price=None, publish=True))

        assert result.error_code == "VALIDATION_ERROR"
        assert result.metadata["field"] == "price"
        assert repos.posts.list_by_owner("seller-1") == []

    @pytest.mark.asyncio
    async def test_buyers_cannot_post(self, repos, seed):
        """Test buyers are denied."""
        seed.profile("buyer-1")

        result = await self._use_case(repos, "buyer-1", ["buyer"]).execute(complete_post())

        assert result.error_code == "PERMISSION_DENIED"

    @pytest.mark.asyncio
    async def test_unapproved_freelancer_cannot_post(self, repos, seed):
        """Test freelancers need an approved application."""
        seed.profile("seller-1", UserRole.FREELANCER)

        result = await self._use_case(repos, "seller-1").execute(complete_post())

        assert result.error_code == "PERMISSION_DENIED"

    @pytest.mark.asyncio
    async def test_suspended_freelancer_cannot_post(self, repos, seed):
        """Test suspended accounts are blocked."""
        profile = seed.approved_freelancer("seller-1")
        profile.change_status(AccountStatus.SUSPENDED)
        repos.profiles.save(profile)

        result = await self._use_case(repos, "seller-1").execute(complete_post())

        assert result.error_code == "BUSINESS_RULE_VIOLATION"

    @pytest.mark.asyncio
    async def test_admin_may_post(self, repos, seed):
        """Test admins post without an application."""
        seed.profile("admin-1", UserRole.ADMIN)

        result = await self._use_case(repos, "admin-1", ["admin"]).execute(complete_post())

        assert result.success is True

    @pytest.mark.asyncio
    async def test_sections_and_packages(self, repos, seed):
        """Test sections and packages are stored with the post."""
        seed.approved_freelancer("seller-1")
        request = complete_post(
            price=None,
            sections=[{"type": "markdown", "content": "## Process"}, {"type": "image", "content": "https://cdn.example.com/a.png"}],
            packages={"basic": {"title": "Basic", "price": 30, "delivery_days": 5}, "gold": {"price": 70}}
        )

        result = await self._use_case(repos, "seller-1").execute(request)

        assert [section.type for section in result.data.sections] == ["markdown", "image"]
        assert all(section.id for section in result.data.sections)
        assert result.data.packages["basic"].delivery_days == 5
        assert result.data.starting_price == 30


class TestManagePostUseCases:
    """Test cases for editing and status changes."""

    @pytest.mark.asyncio
    async def test_owner_updates_post(self, repos, seed):
        """Test the owner can edit fields."""
        seed.approved_freelancer("seller-1")
        post = seed.post("seller-1")

        result = await UpdatePostUseCase(repos.posts, repos.profiles).set_current_user(
            "seller-1", ["freelancer"]
        ).execute(UpdatePostRequestDTO(post_id=post.id, title="Brand identity", price=120))

        assert result.data.title == "Brand identity"
        assert result.data.price == 120
        assert result.data.content == post.content

    @pytest.mark.asyncio
    async def test_others_cannot_update(self, repos, seed):
        """Test only the owner edits a post, admins included."""
        seed.approved_freelancer("seller-1")
        seed.profile("admin-1", UserRole.ADMIN)
        post = seed.post("seller-1")

        result = await UpdatePostUseCase(repos.posts, repos.profiles).set_current_user(
            "admin-1", ["admin"]
        ).execute(UpdatePostRequestDTO(post_id=post.id, title="Hijacked"))

        assert result.error_code == "PERMISSION_DENIED"

    @pytest.mark.asyncio
    async def test_get_my_post_allows_admin(self, repos, seed):
        """Test admins can open any post in the editor."""
        post = seed.post("seller-1", publish=False)

        owner = await GetMyPostUseCase(repos.posts).set_current_user("seller-1", ["freelancer"]).execute(post.id)
        admin = await GetMyPostUseCase(repos.posts).set_current_user("admin-1", ["admin"]).execute(post.id)
        other = await GetMyPostUseCase(repos.posts).set_current_user("buyer-1", ["buyer"]).execute(post.id)

        assert owner.success is True
        assert admin.success is True
        assert other.error_code == "PERMISSION_DENIED"

    @pytest.mark.asyncio
    async def test_publish_unpublish_archive(self, repos, seed):
        """Test the status lifecycle of a post."""
        seed.approved_freelancer("seller-1")
        post = seed.post("seller-1", publish=False)
        owner = ("seller-1", ["freelancer"])

        published = await PublishPostUseCase(repos.posts, repos.profiles, repos.applications).set_current_user(
            *owner
        ).execute(post.id)
        unpublished = await UnpublishPostUseCase(repos.posts).set_current_user(*owner).execute(post.id)
        again = await UnpublishPostUseCase(repos.posts).set_current_user(*owner).execute(post.id)
        archived = await ArchivePostUseCase(repos.posts).set_current_user(*owner).execute(post.id)

        assert published.data.status == "published"
        assert unpublished.data.status == "draft"
        assert again.error_code == "BUSINESS_RULE_VIOLATION"
        assert archived.data.status == "archived"

    @pytest.mark.asyncio
    async def test_delete_post(self, repos, seed):
        """Test owners and admins delete posts; missing posts are not found."""
        first = seed.post("seller-1")
        second = seed.post("seller-1", "Second")

        by_owner = await DeletePostUseCase(repos.posts).set_current_user("seller-1", ["freelancer"]).execute(first.id)
        by_admin = await DeletePostUseCase(repos.posts).set_current_user("admin-1", ["admin"]).execute(second.id)
        missing = await DeletePostUseCase(repos.posts).set_current_user("seller-1", ["freelancer"]).execute(first.id)

        assert by_owner.success is True
        assert by_admin.success is True
        assert missing.error_code == "ENTITY_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_list_my_posts_with_ratings(self, repos, seed):
        """Test the caller's posts carry rating statistics and can be filtered."""
        post = seed.post("seller-1")
        seed.post("seller-1", "Draft", publish=False)
        seed.post("seller-2", "Someone else's")
        seed.review(post.id, "buyer-1", 4)

        everything = await ListMyPostsUseCase(repos.posts, repos.reviews).set_current_user(
            "seller-1", ["freelancer"]
        ).execute(ListMyPostsRequestDTO())
        drafts = await ListMyPostsUseCase(repos.posts, repos.reviews).set_current_user(
            "seller-1", ["freelancer"]
        ).execute(ListMyPostsRequestDTO(status="draft"))

        assert len(everything.data) == 2
        rated = next(item for item in everything.data if item.id == post.id)
        assert rated.average_rating == 4.0
        assert rated.review_count == 1
        assert [item.title for item in drafts.data] == ["Draft"]

    @pytest.mark.asyncio
    async def test_reorder_sections(self, repos, seed):
        """Test reordering keeps every section."""
        from app.domain.models.post import PostSection
        post = seed.post("seller-1", sections=[
            PostSection(type="markdown", content="One", id="s1"),
            PostSection(type="markdown", content="Two", id="s2"),
        ])
        use_case = ReorderSectionsUseCase(repos.posts).set_current_user("seller-1", ["freelancer"])

        result = await use_case.execute(ReorderSectionsRequestDTO(post_id=post.id, section_ids=["s2", "s1"]))
        invalid = await ReorderSectionsUseCase(repos.posts).set_current_user("seller-1", ["freelancer"]).execute(
            ReorderSectionsRequestDTO(post_id=post.id, section_ids=["s2"])
        )

        assert [section.id for section in result.data.sections] == ["s2", "s1"]
        assert invalid.error_code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_upload_cover_image(self, repos, seed, storage):
        """Test cover uploads replace the stored cover URL."""
        post = seed.post("seller-1", cover_image_url="https://cdn.example.com/post-covers/old.png")
        use_case = UploadPostImageUseCase(repos.posts, storage).set_current_user("seller-1", ["freelancer"])

        result = await use_case.execute(UploadPostImageRequestDTO(
            post_id=post.id, kind="cover", filename="new.png", content_type="image/png", content=b"png"
        ))

        assert result.data.cover_image_url == "https://cdn.example.com/post-covers/new.png"
        assert storage.upload_image.await_args.kwargs["folder"] == "post-covers"
        storage.delete_by_url.assert_awaited_once_with("https://cdn.example.com/post-covers/old.png")
