from membership.models import Feedback

from .records import build_record_router

router = build_record_router(Feedback, "/feedback", "feedback")
