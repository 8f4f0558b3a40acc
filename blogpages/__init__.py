"""Static blog page generation: posts in, paginated listing and post pages out."""

from .content import UpstreamQueryFailure, load_documents, require_documents
from .planner import Document, PageDescriptor, PageKind, plan

__all__ = [
    "Document",
    "PageDescriptor",
    "PageKind",
    "UpstreamQueryFailure",
    "load_documents",
    "plan",
    "require_documents",
]
