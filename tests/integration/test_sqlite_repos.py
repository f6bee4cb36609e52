import sqlite3
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from comicstop.adapters.sqlite.repos import (
    SQLiteComicRepo,
    SQLiteContributorRepo,
    SQLiteCreatorProfileRepo,
    SQLiteUserRepo,
)
from comicstop.domain.entities import (
    Comic,
    ContributorGroup,
    CreatorProfile,
    FileReference,
    Thumbnail,
    User,
)

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def users(db_path):
    return SQLiteUserRepo(db_path)


@pytest.fixture
def owner(users):
    return users.save(User(username="ana", email="ana@example.com"))


def make_comic(owner_id, **overrides) -> Comic:
    fields = {
        "title": "Origin",
        "linkage_mode": "single_file",
        "primary_file": FileReference(
            key=f"comics/{uuid4().hex}.pdf",
            url="/files/comics/x.pdf",
            name="origin.pdf",
            size=2048,
            content_type="application/pdf",
        ),
        "owner_id": owner_id,
        "created_at": T0,
        "updated_at": T0,
    }
    fields.update(overrides)
    return Comic(**fields)


class TestUserRepo:
    def test_save_and_get(self, users):
        user = User(
            username="ben",
            email="ben@example.com",
            roles=["user", "admin"],
            is_creator_enabled=False,
            creator_disabled_at=T0,
        )
        users.save(user)

        loaded = users.get_by_id(user.id)
        assert loaded is not None
        assert loaded.roles == ["user", "admin"]
        assert loaded.creator_disabled_at == T0
        assert users.get_by_id(uuid4()) is None

    def test_save_upserts(self, users, owner):
        users.save(owner.model_copy(update={"is_creator_enabled": True, "is_creator": True}))

        loaded = users.get_by_id(owner.id)
        assert loaded.is_creator_enabled is True
        assert loaded.is_creator is True

    def test_list_disabled_creators_before(self, users):
        old = users.save(User(username="old", creator_disabled_at=T0 - timedelta(days=300)))
        users.save(User(username="recent", creator_disabled_at=T0 - timedelta(days=10)))
        users.save(User(username="never"))
        users.save(
            User(
                username="reenabled",
                is_creator_enabled=True,
                creator_disabled_at=T0 - timedelta(days=400),
            )
        )

        found = users.list_disabled_creators_before(T0 - timedelta(days=180))
        assert [u.id for u in found] == [old.id]

    def test_naive_cutoff_is_treated_as_utc(self, users):
        disabled = users.save(User(username="old", creator_disabled_at=T0 - timedelta(days=1)))
        found = users.list_disabled_creators_before(T0.replace(tzinfo=None))
        assert [u.id for u in found] == [disabled.id]


class TestCreatorProfileRepo:
    def test_save_get_delete(self, db_path, owner):
        profiles = SQLiteCreatorProfileRepo(db_path)
        profile = CreatorProfile(
            user_id=owner.id,
            display_name="Ana Draws",
            social_links={"site": "https://ana.example.com"},
            accept_donations=True,
        )
        profiles.save(profile)

        loaded = profiles.get_by_user_id(owner.id)
        assert loaded is not None
        assert loaded.id == profile.id
        assert loaded.social_links == {"site": "https://ana.example.com"}
        assert loaded.accept_donations is True

        profiles.delete(profile.id)
        assert profiles.get_by_user_id(owner.id) is None

    def test_one_profile_per_user(self, db_path, owner):
        profiles = SQLiteCreatorProfileRepo(db_path)
        profiles.save(CreatorProfile(user_id=owner.id))
        with pytest.raises(sqlite3.IntegrityError):
            profiles.save(CreatorProfile(user_id=owner.id))


class TestComicRepo:
    def test_round_trip(self, db_path, owner):
        comics = SQLiteComicRepo(db_path)
        comic = make_comic(
            owner.id,
            subtitle="Part one",
            genres=["Action"],
            tags=["hero", "city"],
            thumbnail=Thumbnail(
                source="stored", url="/files/thumbnails/t.png", key="thumbnails/t.png"
            ),
            series_id=uuid4(),
            age_restricted=True,
        )
        comics.save(comic)

        loaded = comics.get_by_id(comic.id)
        assert loaded == comic

    def test_synthetic_page_comic(self, db_path, owner):
        comics = SQLiteComicRepo(db_path)
        comic = make_comic(
            owner.id,
            linkage_mode="multi_page",
            primary_file=FileReference(
                key="imagesets/20260301T120000000000Z-abcd", name="x", synthetic=True
            ),
            page_order=["pages/2.png", "pages/1.png"],
        )
        comics.save(comic)

        loaded = comics.get_by_id(comic.id)
        assert loaded.primary_file.synthetic is True
        assert loaded.page_order == ["pages/2.png", "pages/1.png"]
        assert loaded.thumbnail is None

    def test_save_upserts_status_fields(self, db_path, owner):
        comics = SQLiteComicRepo(db_path)
        comic = comics.save(make_comic(owner.id))
        comics.save(
            comic.model_copy(
                update={"publish_status": "published", "published_at": T0, "status": "published"}
            )
        )

        loaded = comics.get_by_id(comic.id)
        assert loaded.publish_status == "published"
        assert loaded.status == "published"
        assert loaded.published_at == T0

    def test_owner_must_exist(self, db_path):
        with pytest.raises(sqlite3.IntegrityError):
            SQLiteComicRepo(db_path).save(make_comic(uuid4()))

    def test_list_by_owner(self, db_path, owner, users):
        comics = SQLiteComicRepo(db_path)
        other = users.save(User(username="ben"))

        first = comics.save(make_comic(owner.id, title="First", created_at=T0))
        second = comics.save(
            make_comic(
                owner.id,
                title="Second",
                publish_status="published",
                created_at=T0 + timedelta(hours=1),
            )
        )
        comics.save(make_comic(owner.id, title="Gone", is_active=False))
        comics.save(make_comic(other.id, title="Not mine"))

        items, total = comics.list_by_owner(owner.id)
        assert total == 2
        assert [c.id for c in items] == [second.id, first.id]

        items, total = comics.list_by_owner(owner.id, publish_status="draft")
        assert total == 1
        assert items[0].id == first.id

        items, total = comics.list_by_owner(owner.id, limit=1, offset=1)
        assert total == 2
        assert [c.id for c in items] == [first.id]


class TestContributorRepo:
    def test_add_list_and_delete(self, db_path, owner):
        comic = SQLiteComicRepo(db_path).save(make_comic(owner.id))
        contributors = SQLiteContributorRepo(db_path)

        contributors.add(comic.id, ContributorGroup(role="Writer", names=["Ana"]))
        contributors.add(comic.id, ContributorGroup(role="Artist", names=["Ben", "Cy"]))

        assert contributors.list_for_comic(comic.id) == [
            ContributorGroup(role="Writer", names=["Ana"]),
            ContributorGroup(role="Artist", names=["Ben", "Cy"]),
        ]

        assert contributors.delete_for_comic(comic.id) == 2
        assert contributors.list_for_comic(comic.id) == []
        assert contributors.delete_for_comic(comic.id) == 0
