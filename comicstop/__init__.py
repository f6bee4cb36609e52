"""ComicStop content lifecycle and CreatorHub retention service."""
