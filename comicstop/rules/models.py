from pydantic import BaseModel, Field, model_validator


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class RangeRule(BaseModel):
    min: int = Field(ge=0)
    max: int

    @model_validator(mode="after")
    def _ordered(self) -> "RangeRule":
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) exceeds max ({self.max})")
        return self


class ComicRules(BaseModel):
    title: RangeRule
    subtitle_max: int = 255
    description_max: int = 5000
    tag_max_length: int = 50
    role_max_length: int = 100
    contributor_name_max_length: int = 255
    page_key_max_length: int = 500


class UploadsRules(BaseModel):
    max_upload_bytes: int
    max_image_bytes: int
    max_batch_files: int
    allowlist_extensions: list[str]
    allowlist_mime_types: list[str]
    image_mime_types: list[str]


class StorageNamespaces(BaseModel):
    comics: str = "comics"
    pages: str = "pages"
    thumbnails: str = "thumbnails"
    imagesets: str = "imagesets"


class StorageRules(BaseModel):
    presign_ttl_seconds: int = 3600
    namespaces: StorageNamespaces = Field(default_factory=StorageNamespaces)


class CreatorHubRules(BaseModel):
    retention_months: int = Field(default=6, ge=1)


class NotificationRules(BaseModel):
    sender: str
    site_name: str
    base_url: str


class Rules(BaseModel):
    project: ProjectRules
    comics: ComicRules
    uploads: UploadsRules
    storage: StorageRules
    creator_hub: CreatorHubRules
    notifications: NotificationRules
