import json
import sqlite3
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from comicstop.domain.entities import (
    Comic,
    ContributorGroup,
    CreatorProfile,
    FileReference,
    PublishStatus,
    Thumbnail,
    User,
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def to_db_ts(dt: datetime | None) -> str | None:
    """UTC, fixed-width ISO text so string comparison matches time order."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="microseconds")


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteUserRepo(_SQLiteRepo):
    def _row_to_user(self, row: dict[str, Any]) -> User:
        return User(
            id=UUID(row["id"]),
            username=row["username"],
            email=row["email"],
            roles=json.loads(row["roles_json"] or "[]"),
            is_creator_enabled=bool(row["is_creator_enabled"]),
            is_creator=bool(row["is_creator"]),
            creator_disabled_at=parse_dt(row["creator_disabled_at"]),
            created_at=parse_dt(row["created_at"]) or datetime.min,
            updated_at=parse_dt(row["updated_at"]) or datetime.min,
        )

    def get_by_id(self, user_id: UUID) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def save(self, user: User) -> User:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (
                    id, username, email, roles_json, is_creator_enabled,
                    is_creator, creator_disabled_at, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    username=excluded.username,
                    email=excluded.email,
                    roles_json=excluded.roles_json,
                    is_creator_enabled=excluded.is_creator_enabled,
                    is_creator=excluded.is_creator,
                    creator_disabled_at=excluded.creator_disabled_at,
                    updated_at=excluded.updated_at
            """,
                (
                    str(user.id),
                    user.username,
                    user.email,
                    json.dumps(list(user.roles)),
                    int(user.is_creator_enabled),
                    int(user.is_creator),
                    to_db_ts(user.creator_disabled_at),
                    to_db_ts(user.created_at),
                    to_db_ts(user.updated_at),
                ),
            )
            conn.commit()
            return user
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def list_disabled_creators_before(self, cutoff: datetime) -> list[User]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT * FROM users
                WHERE is_creator_enabled = 0
                  AND creator_disabled_at IS NOT NULL
                  AND creator_disabled_at < ?
                ORDER BY creator_disabled_at ASC
            """,
                (to_db_ts(cutoff),),
            ).fetchall()
            return [self._row_to_user(r) for r in rows]
        finally:
            conn.close()


class SQLiteCreatorProfileRepo(_SQLiteRepo):
    def get_by_user_id(self, user_id: UUID) -> CreatorProfile | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM creator_profiles WHERE user_id = ?", (str(user_id),)
            ).fetchone()
            if not row:
                return None
            return CreatorProfile(
                id=UUID(row["id"]),
                user_id=UUID(row["user_id"]),
                display_name=row["display_name"],
                bio=row["bio"],
                social_links=json.loads(row["social_links_json"] or "{}"),
                website_url=row["website_url"],
                accept_donations=bool(row["accept_donations"]),
                allow_comments=bool(row["allow_comments"]),
                created_at=parse_dt(row["created_at"]) or datetime.min,
                updated_at=parse_dt(row["updated_at"]) or datetime.min,
            )
        finally:
            conn.close()

    def save(self, profile: CreatorProfile) -> CreatorProfile:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO creator_profiles (
                    id, user_id, display_name, bio, social_links_json,
                    website_url, accept_donations, allow_comments, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    display_name=excluded.display_name,
                    bio=excluded.bio,
                    social_links_json=excluded.social_links_json,
                    website_url=excluded.website_url,
                    accept_donations=excluded.accept_donations,
                    allow_comments=excluded.allow_comments,
                    updated_at=excluded.updated_at
            """,
                (
                    str(profile.id),
                    str(profile.user_id),
                    profile.display_name,
                    profile.bio,
                    json.dumps(profile.social_links),
                    profile.website_url,
                    int(profile.accept_donations),
                    int(profile.allow_comments),
                    to_db_ts(profile.created_at),
                    to_db_ts(profile.updated_at),
                ),
            )
            conn.commit()
            return profile
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def delete(self, profile_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM creator_profiles WHERE id = ?", (str(profile_id),))
            conn.commit()
        finally:
            conn.close()


class SQLiteComicRepo(_SQLiteRepo):
    def _row_to_comic(self, row: dict[str, Any]) -> Comic:
        thumbnail = None
        if row["thumbnail_source"]:
            thumbnail = Thumbnail(
                source=row["thumbnail_source"],
                url=row["thumbnail_url"] or "",
                key=row["thumbnail_key"],
            )

        return Comic(
            id=UUID(row["id"]),
            title=row["title"],
            subtitle=row["subtitle"],
            description=row["description"],
            genres=json.loads(row["genres_json"] or "[]"),
            tags=json.loads(row["tags_json"] or "[]"),
            linkage_mode=row["linkage_mode"],
            primary_file=FileReference(
                key=row["file_key"],
                url=row["file_url"] or "",
                name=row["file_name"],
                size=row["file_size"],
                content_type=row["file_type"],
                synthetic=bool(row["file_synthetic"]),
            ),
            page_order=json.loads(row["page_order_json"] or "[]"),
            thumbnail=thumbnail,
            status=row["status"],
            publish_status=row["publish_status"],
            published_at=parse_dt(row["published_at"]),
            scheduled_at=parse_dt(row["scheduled_at"]),
            owner_id=UUID(row["owner_id"]),
            series_id=UUID(row["series_id"]) if row["series_id"] else None,
            is_public=bool(row["is_public"]),
            age_restricted=bool(row["age_restricted"]),
            is_active=bool(row["is_active"]),
            created_at=parse_dt(row["created_at"]) or datetime.min,
            updated_at=parse_dt(row["updated_at"]) or datetime.min,
        )

    def get_by_id(self, comic_id: UUID) -> Comic | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM comics WHERE id = ?", (str(comic_id),)).fetchone()
            return self._row_to_comic(row) if row else None
        finally:
            conn.close()

    def save(self, comic: Comic) -> Comic:
        conn = self._get_conn()
        thumb = comic.thumbnail
        try:
            conn.execute(
                """
                INSERT INTO comics (
                    id, title, subtitle, description, genres_json, tags_json,
                    linkage_mode, file_key, file_url, file_name, file_size, file_type,
                    file_synthetic, page_order_json, thumbnail_source, thumbnail_key,
                    thumbnail_url, status, publish_status, published_at, scheduled_at,
                    owner_id, series_id, is_public, age_restricted, is_active,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?,
                          ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title=excluded.title,
                    subtitle=excluded.subtitle,
                    description=excluded.description,
                    genres_json=excluded.genres_json,
                    tags_json=excluded.tags_json,
                    linkage_mode=excluded.linkage_mode,
                    file_key=excluded.file_key,
                    file_url=excluded.file_url,
                    file_name=excluded.file_name,
                    file_size=excluded.file_size,
                    file_type=excluded.file_type,
                    file_synthetic=excluded.file_synthetic,
                    page_order_json=excluded.page_order_json,
                    thumbnail_source=excluded.thumbnail_source,
                    thumbnail_key=excluded.thumbnail_key,
                    thumbnail_url=excluded.thumbnail_url,
                    status=excluded.status,
                    publish_status=excluded.publish_status,
                    published_at=excluded.published_at,
                    scheduled_at=excluded.scheduled_at,
                    series_id=excluded.series_id,
                    is_public=excluded.is_public,
                    age_restricted=excluded.age_restricted,
                    is_active=excluded.is_active,
                    updated_at=excluded.updated_at
            """,
                (
                    str(comic.id),
                    comic.title,
                    comic.subtitle,
                    comic.description,
                    json.dumps(comic.genres),
                    json.dumps(comic.tags),
                    comic.linkage_mode,
                    comic.primary_file.key,
                    comic.primary_file.url,
                    comic.primary_file.name,
                    comic.primary_file.size,
                    comic.primary_file.content_type,
                    int(comic.primary_file.synthetic),
                    json.dumps(comic.page_order),
                    thumb.source if thumb else None,
                    thumb.key if thumb else None,
                    thumb.url if thumb else None,
                    comic.status,
                    comic.publish_status,
                    to_db_ts(comic.published_at),
                    to_db_ts(comic.scheduled_at),
                    str(comic.owner_id),
                    str(comic.series_id) if comic.series_id else None,
                    int(comic.is_public),
                    int(comic.age_restricted),
                    int(comic.is_active),
                    to_db_ts(comic.created_at),
                    to_db_ts(comic.updated_at),
                ),
            )
            conn.commit()
            return comic
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def list_by_owner(
        self,
        owner_id: UUID,
        *,
        publish_status: PublishStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Comic], int]:
        conn = self._get_conn()
        try:
            where = "owner_id = ? AND is_active = 1"
            params: list[str | int] = [str(owner_id)]
            if publish_status:
                where += " AND publish_status = ?"
                params.append(publish_status)

            total_row = conn.execute(
                f"SELECT COUNT(*) AS n FROM comics WHERE {where}", params
            ).fetchone()
            rows = conn.execute(
                f"SELECT * FROM comics WHERE {where} ORDER BY created_at DESC LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()
            return [self._row_to_comic(r) for r in rows], int(total_row["n"])
        finally:
            conn.close()


class SQLiteContributorRepo(_SQLiteRepo):
    def list_for_comic(self, comic_id: UUID) -> list[ContributorGroup]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT role, names_json FROM comic_contributors "
                "WHERE comic_id = ? ORDER BY position ASC",
                (str(comic_id),),
            ).fetchall()
            return [
                ContributorGroup(role=r["role"], names=json.loads(r["names_json"] or "[]"))
                for r in rows
            ]
        finally:
            conn.close()

    def add(self, comic_id: UUID, group: ContributorGroup) -> None:
        conn = self._get_conn()
        try:
            position_row = conn.execute(
                "SELECT COALESCE(MAX(position) + 1, 0) AS next FROM comic_contributors "
                "WHERE comic_id = ?",
                (str(comic_id),),
            ).fetchone()
            conn.execute(
                """
                INSERT INTO comic_contributors (
                    id, comic_id, role, names_json, position, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?)
            """,
                (
                    str(uuid4()),
                    str(comic_id),
                    group.role,
                    json.dumps(group.names),
                    int(position_row["next"]),
                    to_db_ts(datetime.now(UTC)),
                ),
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def delete_for_comic(self, comic_id: UUID) -> int:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                "DELETE FROM comic_contributors WHERE comic_id = ?", (str(comic_id),)
            )
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()
