"""UI Audit - screenshot upload and simulated Carbon compliance analysis."""

from ui_audit.upload import UploadedImage, is_image_type
from ui_audit.session import AuditSession, AuditState, SessionRegistry
from ui_audit.presentation import SEVERITY_PRESENTATION, present_result, score_color

__all__ = [
    "UploadedImage",
    "is_image_type",
    "AuditSession",
    "AuditState",
    "SessionRegistry",
    "SEVERITY_PRESENTATION",
    "present_result",
    "score_color",
]
