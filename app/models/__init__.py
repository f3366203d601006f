# Database models package
from .clock import utc_now
from .enums import Role, Sentiment, Severity, ComplaintStatus, UNKNOWN_SENTIMENT
from .user import User
from .attachment import Attachment
from .post import Post, Comment, CommentReply
from .complaint import Complaint, ComplaintReply

__all__ = [
    "Role",
    "Sentiment",
    "Severity",
    "ComplaintStatus",
    "UNKNOWN_SENTIMENT",
    "utc_now",
    "User",
    "Attachment",
    "Post",
    "Comment",
    "CommentReply",
    "Complaint",
    "ComplaintReply",
]
