"""Data models for camera responses."""

from ambercam.models.status import CameraStatus

__all__ = [
    "CameraStatus",
]
