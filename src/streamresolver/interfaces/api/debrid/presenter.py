"""JSON presentation of debrid results."""

from __future__ import annotations

from typing import Any

from streamresolver.domain.entities import (
    AddedTorrent,
    DebridAccount,
    DebridJob,
    DebridStream,
    ResolutionOutcome,
    UnrestrictedLink,
)


def account_to_dict(account: DebridAccount) -> dict[str, Any]:
    return {
        "configured": True,
        "username": account.username,
        "premium": account.premium,
        "expiration": account.expiration,
    }


def added_to_dict(added: AddedTorrent) -> dict[str, Any]:
    return {
        "success": True,
        "id": added.torrent_id,
        "status": added.status.value,
        "progress": added.progress,
    }


def job_to_dict(job: DebridJob) -> dict[str, Any]:
    return {
        "id": job.torrent_id,
        "filename": job.filename,
        "status": job.status.value,
        "progress": job.progress,
        "terminal": job.is_terminal,
        "links": job.links,
        "error": job.error,
    }


def unrestricted_to_dict(link: UnrestrictedLink) -> dict[str, Any]:
    return {
        "success": True,
        "download": link.download_url,
        "filename": link.filename,
        "filesize": link.filesize,
        "streamable": link.streamable,
        "mimeType": link.mime_type,
        "host": link.host,
    }


def stream_to_dict(stream: DebridStream) -> dict[str, Any]:
    return {
        "filename": stream.filename,
        "download": stream.download_url,
        "filesize": stream.filesize,
        "streamable": stream.streamable,
        "season": stream.season,
        "episode": stream.episode,
    }


def outcome_to_dict(outcome: ResolutionOutcome) -> dict[str, Any]:
    return {
        "success": True,
        "status": "ready" if outcome.is_ready else outcome.status.value,
        "torrent_id": outcome.torrent_id,
        "progress": outcome.progress,
        "streams": [stream_to_dict(s) for s in outcome.streams],
        "is_tv_show": outcome.is_tv_show,
    }
