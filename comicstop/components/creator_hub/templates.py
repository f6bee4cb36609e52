"""Rendered notification payloads for CreatorHub toggles."""

from __future__ import annotations

from datetime import datetime
from html import escape

from comicstop.core.ports.notify import RenderedPayload
from comicstop.domain.entities import User
from comicstop.rules.models import NotificationRules

ENABLED_SUBJECT = "CreatorHub Enabled - Welcome to {site}!"
DISABLED_SUBJECT = "CreatorHub Disabled - Data Retention Information"


def _date(dt: datetime) -> str:
    return dt.strftime("%d %B %Y")


def render_enabled(user: User, config: NotificationRules) -> RenderedPayload:
    dashboard_url = f"{config.base_url.rstrip('/')}/creator/dashboard"
    name = escape(user.username)

    body_html = f"""
<h2>Welcome to CreatorHub!</h2>
<p>Hi {name},</p>
<p>Your CreatorHub has been enabled on {escape(config.site_name)}. You can now:</p>
<ul>
  <li>Upload and publish your comics</li>
  <li>Create and manage series</li>
  <li>Customize your creator profile</li>
</ul>
<p>Get started from your <a href="{escape(dashboard_url)}">Creator Dashboard</a>.</p>
<p>Happy creating!<br>The {escape(config.site_name)} Team</p>
""".strip()

    body_text = (
        f"Hi {user.username},\n\n"
        f"Your CreatorHub has been enabled on {config.site_name}.\n"
        f"Get started from your Creator Dashboard: {dashboard_url}\n\n"
        f"The {config.site_name} Team"
    )

    return RenderedPayload(
        subject=ENABLED_SUBJECT.format(site=config.site_name),
        body_html=body_html,
        body_text=body_text,
        data={"username": user.username, "dashboard_url": dashboard_url},
    )


def render_disabled(
    user: User,
    config: NotificationRules,
    *,
    disabled_at: datetime,
    purge_at: datetime,
    retention_months: int,
) -> RenderedPayload:
    settings_url = f"{config.base_url.rstrip('/')}/settings"
    name = escape(user.username)

    body_html = f"""
<h2>CreatorHub Disabled</h2>
<p>Hi {name},</p>
<p>Your CreatorHub has been disabled as requested.</p>
<h3>Data Retention Policy</h3>
<ul>
  <li><strong>Your creator profile is preserved for {retention_months} months</strong></li>
  <li>You can re-enable CreatorHub during this period without data loss</li>
  <li>After {retention_months} months your creator profile data is permanently deleted</li>
</ul>
<p>To re-enable CreatorHub, go to your <a href="{escape(settings_url)}">Account Settings</a>.</p>
<h3>Important Dates</h3>
<p><strong>Disabled on:</strong> {_date(disabled_at)}</p>
<p><strong>Data deletion scheduled for:</strong> {_date(purge_at)}</p>
<p>The {escape(config.site_name)} Team</p>
""".strip()

    body_text = (
        f"Hi {user.username},\n\n"
        f"Your CreatorHub has been disabled as requested.\n"
        f"Your creator profile is preserved for {retention_months} months.\n"
        f"Disabled on: {_date(disabled_at)}\n"
        f"Data deletion scheduled for: {_date(purge_at)}\n\n"
        f"Re-enable any time from {settings_url}\n\n"
        f"The {config.site_name} Team"
    )

    return RenderedPayload(
        subject=DISABLED_SUBJECT,
        body_html=body_html,
        body_text=body_text,
        data={
            "username": user.username,
            "retention_months": retention_months,
            "disabled_at": disabled_at.isoformat(),
            "purge_at": purge_at.isoformat(),
            "settings_url": settings_url,
        },
    )
